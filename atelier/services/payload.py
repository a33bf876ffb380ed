"""Assemble one group request from the collected muse and garment images."""

import asyncio
import logging
from typing import Sequence

from ..config import EncodingConfig, GenerationConfig
from ..exceptions import InputValidationError
from ..models.assets import ImageAsset
from ..models.generation import (
    GenerationParameters,
    GenerationRequest,
    ImagePair,
    ImagePart,
    InlineData,
    OutputKind,
)
from ..prompts import GroupPromptGenerator
from ..utils import image_encoding


logger = logging.getLogger(__name__)


def pair_count(muses: Sequence, garments: Sequence) -> int:
    """Pairs available for a generation; surplus on the longer side is ignored."""
    return min(len(muses), len(garments))


async def _encode_part(asset: ImageAsset, encoding: EncodingConfig) -> ImagePart:
    encoded = await asyncio.to_thread(
        image_encoding.encode_for_transport,
        asset,
        encoding.max_dimension,
        encoding.quality,
    )
    return ImagePart(
        inline_data=InlineData(mime_type=encoded.mime_type, data=encoded.to_base64())
    )


async def build_group_request(
    muses: Sequence[ImageAsset],
    garments: Sequence[ImageAsset],
    custom_instruction: str = "",
    kind: OutputKind = OutputKind.PHOTO,
    encoding: EncodingConfig | None = None,
    generation: GenerationConfig | None = None,
    prompt_generator: GroupPromptGenerator | None = None,
) -> GenerationRequest:
    """Build a single request covering every muse/garment pair.

    Args:
        muses: Muse images, in upload order
        garments: Garment images, in upload order
        custom_instruction: Extra caller text appended to the instruction
        kind: Photo or video output
        encoding: Downsampling settings for image parts
        generation: Temperature / output size settings

    Returns:
        GenerationRequest whose parts are [instruction, muse0, garment0, ...]

    Raises:
        InputValidationError: if there is not at least one muse and one garment
    """
    count = pair_count(muses, garments)
    if count == 0:
        raise InputValidationError("Please upload at least one muse and one garment.")

    kind = OutputKind(kind)
    encoding = encoding or EncodingConfig()
    generation = generation or GenerationConfig()
    prompt_generator = prompt_generator or GroupPromptGenerator()

    instruction = prompt_generator.generate(count, kind, custom_instruction)

    # Every encoding finishes before the request exists
    encoded = await asyncio.gather(*(
        _encode_part(asset, encoding)
        for index in range(count)
        for asset in (muses[index], garments[index])
    ))

    pairs = [
        ImagePair(muse=encoded[2 * i], garment=encoded[2 * i + 1])
        for i in range(count)
    ]

    logger.info("Built %s group request with %d pair(s)", kind.value, count)
    return GenerationRequest(
        instruction=instruction,
        pairs=pairs,
        kind=kind,
        parameters=GenerationParameters(
            temperature=generation.temperature,
            max_output_tokens=generation.max_output_tokens,
        ),
    )
