"""Prompt builders for place extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from tripmarks.config.processing import DEFAULT_PLACE_CATEGORIES

if TYPE_CHECKING:
    from collections.abc import Sequence

IMAGE_MAX_PLACES: Final[int] = 5
TEXT_MAX_PLACES: Final[int] = 10

_COMMON_GUIDELINES: Final[tuple[str, ...]] = (
    "Look for place names in ANY language (Korean, Chinese, Japanese, English, etc.)",
    """Place names often appear as:
   - Store/restaurant names (e.g., "Ichiran Ramen", "Starbucks Reserve")
   - Landmark names (e.g., "Eiffel Tower", "Sensoji", "Gyeongbokgung")
   - Area/district names (e.g., "Shibuya", "Myeongdong", "Hongdae")""",
    """For better geocoding accuracy, extract the FULL place name including:
   - Branch/location suffix (e.g., "Shinjuku branch", "Gangnam branch")
   - District/area name (e.g., "Lan Kwai Fong", "Central")
   - Nearby landmarks if mentioned""",
    "Extract ALL distinct places mentioned, not just the main one",
    "For each place, extract useful tips/comments specific to that place "
    "(hours, recommendations, etc.)",
    "If the same place is mentioned multiple times, include it only once",
)

_IMAGE_GUIDELINES: Final[tuple[str, ...]] = (
    "Include nearby subway/MTR station if visible in the image",
    "For places with visible signage, extract the exact name shown",
)

_TEXT_GUIDELINES: Final[tuple[str, ...]] = (
    'If the text mentions "near X" or "in front of Y", include that context in place_name',
    "If an address is mentioned, include it in place_name",
)

_GEOCODING_GUIDELINES: Final[str] = """GEOCODING OPTIMIZATION:
- Include area/district names with place names for better search results
- For chain stores/franchises, include branch name (e.g., "Starbucks IFC Mall")
- ALWAYS provide place_name_en with English name or romanized version for fallback search
- Prefer official/formal names over nicknames"""

_CONFIDENCE_GUIDELINES: Final[str] = """CONFIDENCE SCORING (per place):
- 0.9-1.0: Clear, specific place name with location details
- 0.7-0.8: Place name mentioned but without specific branch/location
- 0.5-0.6: General area or vague location description
- 0.3-0.4: Only type of place identifiable (e.g., "a good cafe")
- 0.0: Cannot identify any specific place"""


@dataclass(frozen=True, slots=True)
class PromptSpec:
    source_description: str
    max_places: int
    extra_guidelines: tuple[str, ...] = ()
    categories: tuple[str, ...] = DEFAULT_PLACE_CATEGORIES
    comment_language: str = "English"


def destination_context(destination: str, country: str | None) -> str:
    return f"{destination}, {country}" if country else destination


def response_format(categories: Sequence[str], comment_language: str) -> str:
    category_choices = "|".join(categories)
    return f"""Respond ONLY in JSON format (no markdown, no code blocks):
{{
  "places": [
    {{
      "place_name": "full searchable place name including location",
      "place_name_en": "English name OR romanized version (REQUIRED for geocoding fallback)",
      "category": "{category_choices}",
      "comment": "useful tips or description in {comment_language} for this specific place",
      "confidence": number
    }}
  ],
  "raw_text": "extracted text or summary"
}}

If no places can be identified, return: {{ "places": [], "raw_text": "no places found" }}"""


def build_prompt(spec: PromptSpec, destination: str, country: str | None) -> str:
    guidelines = (*_COMMON_GUIDELINES, *spec.extra_guidelines)
    numbered = "\n".join(f"{index}. {line}" for index, line in enumerate(guidelines, start=1))
    return f"""You are analyzing {spec.source_description} about travel destinations.
The user is collecting places to visit in {destination_context(destination, country)}.

Your task: Extract ALL place/venue names that can be searched on Google Maps \
(maximum {spec.max_places} places).

IMPORTANT GUIDELINES:
{numbered}

{_GEOCODING_GUIDELINES}

{_CONFIDENCE_GUIDELINES}

{response_format(spec.categories, spec.comment_language)}"""


def image_prompt_spec(
    categories: Sequence[str] = DEFAULT_PLACE_CATEGORIES, comment_language: str = "English"
) -> PromptSpec:
    return PromptSpec(
        source_description="a screenshot from social media (Instagram, YouTube, X/Twitter)",
        max_places=IMAGE_MAX_PLACES,
        extra_guidelines=_IMAGE_GUIDELINES,
        categories=tuple(categories),
        comment_language=comment_language,
    )


def text_prompt_spec(
    categories: Sequence[str] = DEFAULT_PLACE_CATEGORIES, comment_language: str = "English"
) -> PromptSpec:
    return PromptSpec(
        source_description="text content",
        max_places=TEXT_MAX_PLACES,
        extra_guidelines=_TEXT_GUIDELINES,
        categories=tuple(categories),
        comment_language=comment_language,
    )


def wrap_text_content(text: str) -> str:
    return f'TEXT TO ANALYZE:\n"""\n{text}\n"""'
