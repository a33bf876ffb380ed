"""Exception types raised by the Atelier pipeline."""


class AtelierError(Exception):
    """Base class for all Atelier errors."""


class InputValidationError(AtelierError, ValueError):
    """Raised when a generation is requested with nothing to generate from."""


class ImageDecodeError(AtelierError, ValueError):
    """Raised when uploaded bytes cannot be decoded as an image."""

    def __init__(self, filename: str | None, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Could not decode {filename or 'image'}: {reason}")


class GenerationError(AtelierError, RuntimeError):
    """Raised when the remote model call fails and the failure is propagated."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class GenerationInProgressError(AtelierError, RuntimeError):
    """Raised when a second generation is started while one is in flight."""
