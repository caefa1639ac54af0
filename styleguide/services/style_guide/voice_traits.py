"""Generate the Brand Voice section: one described trait per selected trait name."""

import json
import logging

from constants import LLM_MODEL_QUALITY
from styleguide.models import BrandDetails
from styleguide.prompts import TRAIT_SYSTEM_PROMPT
from styleguide.prompts.brand_voice import build_trait_prompt, trait_fallback_markdown
from styleguide.services.style_guide.traits import is_predefined_trait, predefined_trait_markdown
from styleguide.utils.errors import GenerationError
from styleguide.utils.markdown_postprocessor import validate_markdown_content
from styleguide.utils.openai_client import GenerationRequest, generate, run_parallel

logger = logging.getLogger(__name__)


def generate_trait_description(trait_name: str, brand: BrandDetails, index: int) -> str:
    """Markdown for one trait. Falls back to catalog or generic text when generation fails."""
    result = generate(GenerationRequest(
        system_prompt=TRAIT_SYSTEM_PROMPT,
        user_prompt=build_trait_prompt(trait_name, brand, index),
        response_format="markdown",
        max_tokens=800,
        model=LLM_MODEL_QUALITY,
        label=f"trait:{trait_name}",
    ))
    if result["success"] and result["content"].strip():
        content = result["content"].strip()
        if not validate_markdown_content(content):
            logger.warning("Trait %s came back without the expected markdown structure", trait_name)
        return content
    logger.error("Failed to generate trait description for %s: %s", trait_name, result["error"])
    if is_predefined_trait(trait_name):
        return predefined_trait_markdown(trait_name, index)
    return trait_fallback_markdown(trait_name, brand, index)


def generate_brand_voice_traits(brand: BrandDetails) -> str:
    """
    Describe every selected trait in parallel and join the blocks with a blank line.

    At least min(2, n) traits must come back; a failed trait is dropped rather
    than replaced. Raises GenerationError otherwise.
    """
    traits = brand["traits"]
    if not traits:
        raise GenerationError("No traits selected for this brand")

    tasks = [
        (lambda name=name, index=index: generate_trait_description(name, brand, index))
        for index, name in enumerate(traits, start=1)
    ]
    results = run_parallel(tasks)
    blocks: list[str] = []
    for name, result in zip(traits, results):
        if isinstance(result, BaseException):
            logger.error("Trait %s failed: %s", name, result)
            continue
        if result:
            blocks.append(result)

    required = min(2, len(traits))
    if len(blocks) < required:
        raise GenerationError(
            f"Only {len(blocks)} out of {len(traits)} traits could be generated "
            f"(minimum {required} required)"
        )
    logger.info("Generated brand voice traits (%d of %d)", len(blocks), len(traits))
    return "\n\n".join(blocks)


def generate_brand_voice_traits_preview(
    brand: BrandDetails,
    *,
    full_count: int = 1,
    name_count: int = 2,
) -> str:
    """JSON {"fullTraits": [...markdown], "nameOnlyTraits": [...names]} for the preview teaser."""
    traits = brand["traits"]
    if not traits:
        raise GenerationError("No traits selected for this brand")

    available = traits[: min(full_count + name_count, len(traits))]
    tasks = [
        (lambda name=name, index=index: generate_trait_description(name, brand, index))
        for index, name in enumerate(available[:full_count], start=1)
    ]
    full_traits = [r for r in run_parallel(tasks) if isinstance(r, str) and r]
    payload = {
        "fullTraits": full_traits,
        "nameOnlyTraits": [name for name in available[full_count:] if name],
    }
    return json.dumps(payload)
