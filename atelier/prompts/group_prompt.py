"""Template-based instruction text for group composite requests."""

from ..models.generation import OutputKind


FIDELITY_CLAUSE = (
    "CRITICAL: For each person, preserve their face, body, skin tone, and ALL physical "
    "features from their source image EXACTLY - do not alter their nose, eyes, facial "
    "structure, or any feature. ONLY change their clothing to match their assigned garment "
    "(images are provided in pairs: person then garment)."
)

QUALITY_CLAUSE = (
    "Ensure photorealistic quality with proper lighting, shadows, and proportions. "
    "Each person must look identical to their original photo - same face, same body, "
    "only wearing their new garment."
)

GROUP_ASPECT = "16:9 landscape"
SINGLE_ASPECT = "3:4 vertical"


class GroupPromptGenerator:
    """Builds the shared instruction for a group request.

    The text states how many people appear, locks down identity, asks for
    a group arrangement when there is more than one pair, and ends with an
    aspect-ratio directive.
    """

    def generate(
        self,
        pair_count: int,
        kind: OutputKind = OutputKind.PHOTO,
        custom_instruction: str = "",
    ) -> str:
        """Generate the instruction text.

        Args:
            pair_count: Number of muse/garment pairs in the request
            kind: Photo or video output
            custom_instruction: Caller text, appended verbatim if non-empty

        Returns:
            Instruction string for the first request part
        """
        people = "person" if pair_count == 1 else "people"
        medium = "photograph" if kind is OutputKind.PHOTO else "video"

        sentences = [
            f"Create a professional fashion group {medium} showing {pair_count} {people}.",
            FIDELITY_CLAUSE,
        ]

        if pair_count > 1:
            sentences.append(
                f"Arrange all {pair_count} people together in a cohesive group composition, "
                f"like a fashion lookbook or runway lineup, maintaining each person's "
                f"identical appearance to their source photo."
            )

        sentences.append(QUALITY_CLAUSE)

        if custom_instruction:
            sentences.append(custom_instruction)

        sentences.append(self.aspect_directive(pair_count, kind))
        return " ".join(sentences)

    def aspect_directive(self, pair_count: int, kind: OutputKind = OutputKind.PHOTO) -> str:
        aspect = GROUP_ASPECT if pair_count > 1 else SINGLE_ASPECT
        subject = "image" if kind is OutputKind.PHOTO else "video"
        return (
            f"FORMAT: Generate the {subject} in a consistent {aspect} aspect ratio, "
            f"suitable for fashion photography."
        )
