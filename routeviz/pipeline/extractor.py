"""Location extraction from free text.

Two strategies turn a query like "from Paris to London by bike" into an
ordered list of place names:

1. A language model asked for a JSON object (locations + preferences)
2. A deterministic splitter on "to", used whenever the model fails

The model is tried first under a fixed deadline; any failure falls back to
the pattern splitter, so extraction itself never ends a search except when
no location can be read at all.
"""

import asyncio
import json
import logging
import re
from typing import Optional, Protocol, Sequence

from pydantic import ValidationError

from routeviz.errors import ExtractionError, InputError, UpstreamError
from routeviz.models import ExtractionResult, TravelPreferences
from routeviz.tools.llm import LanguageModelClient


logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """Extract location information and route preferences from the following text.
Return a JSON object with the following structure:
{{
  "locations": [array of location names in order],
  "preferences": {{
    "transportMode": "driving/walking/cycling",
    "avoidTolls": boolean,
    "avoidHighways": boolean,
    "avoidFerries": boolean
  }}
}}

Important instructions:
1. Ignore prepositions like "from", "to", "through", "via", "between", "starting at", "ending at" when extracting locations.
2. Only include actual place names, cities, addresses, or landmarks in the locations array.
3. Preserve the order of locations as they appear in the text.
4. Keep multi-word location names together (e.g., "New York", "San Francisco").
5. If any preference is not specified, use null for that value.
6. If you're uncertain about a location name, include it anyway.

Text: "{text}"

JSON response:"""


TRAILING_PUNCTUATION = re.compile(r"[.!?]+$")
TO_SEPARATOR = re.compile(r"\s+to\s+", re.IGNORECASE)
FROM_PREFIX = "from "


def _clean(text: str) -> str:
    return TRAILING_PUNCTUATION.sub("", text.strip()).strip()


def extract_via_pattern(text: str) -> list[str]:
    """
    Split a query on "to" into ordered location names.

    Handles common patterns like:
    - "From Paris to London."
    - "Berlin to Prague to Vienna"
    - "Lisbon" (a single place)
    """
    cleaned = _clean(text)

    if cleaned.lower().startswith(FROM_PREFIX):
        cleaned = cleaned[len(FROM_PREFIX):].strip()

    pieces = (piece.strip() for piece in TO_SEPARATOR.split(cleaned))
    return [piece for piece in pieces if piece]


def is_route_request(text: str, locations: Sequence[str] = ()) -> bool:
    """Whether the wording asks for a route rather than a single place.

    Only used to phrase messages; it never changes which locations are looked up.
    """
    starts_with_from = _clean(text).lower().startswith(FROM_PREFIX)
    return len(locations) > 1 or starts_with_from or " to " in text.lower()


def find_json_object(text: str) -> Optional[dict]:
    """
    Return the first balanced ``{...}`` block in ``text`` that parses as a JSON object.

    Braces inside JSON strings are ignored when balancing.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    try:
                        parsed = json.loads(text[start:index + 1])
                    except ValueError:
                        break
                    if isinstance(parsed, dict):
                        return parsed
                    break
        start = text.find("{", start + 1)
    return None


class ExtractionStrategy(Protocol):
    """One way of turning text into an ExtractionResult."""

    name: str

    async def extract(self, text: str) -> ExtractionResult:
        ...


class LanguageModelExtractor:
    """Ask a language model for locations and preferences as JSON."""

    name = "language_model"

    def __init__(self, client: LanguageModelClient):
        self.client = client

    async def extract(self, text: str) -> ExtractionResult:
        try:
            reply = await self.client.generate(EXTRACTION_PROMPT.format(text=text))
        except UpstreamError as e:
            raise ExtractionError(f"Language model call failed: {e.message}") from e

        data = find_json_object(reply or "")
        if data is None:
            raise ExtractionError("Could not find a JSON object in the model reply")

        raw_locations = data.get("locations") or []
        if not isinstance(raw_locations, list):
            raise ExtractionError("Model reply has no locations list")
        locations = [
            str(location).strip()
            for location in raw_locations
            if location is not None and str(location).strip()
        ]
        if not locations:
            raise ExtractionError("Model reply contained no locations")

        raw_preferences = data.get("preferences")
        try:
            preferences = TravelPreferences.model_validate(
                raw_preferences if isinstance(raw_preferences, dict) else {}
            )
        except ValidationError as e:
            raise ExtractionError("Model reply has malformed preferences") from e

        return ExtractionResult(
            locations=locations,
            preferences=preferences,
            strategy=self.name,
            is_route_request=is_route_request(text, locations),
        )


class PatternExtractor:
    """Deterministic fallback: split on "to", default preferences."""

    name = "pattern"

    async def extract(self, text: str) -> ExtractionResult:
        locations = extract_via_pattern(text)
        return ExtractionResult(
            locations=locations,
            preferences=TravelPreferences(),
            strategy=self.name,
            is_route_request=is_route_request(text, locations),
        )


async def extract_locations(
    text: str,
    strategies: Sequence[ExtractionStrategy],
    timeout: float = 10.0,
) -> ExtractionResult:
    """
    Run extraction strategies in order and return the first usable result.

    Only the first strategy races the deadline; when it loses, its eventual
    answer is dropped. A strategy fails by raising ExtractionError or by
    producing no locations.

    Raises:
        InputError: no strategy produced a single location
    """
    for index, strategy in enumerate(strategies):
        try:
            if index == 0:
                result = await asyncio.wait_for(strategy.extract(text), timeout=timeout)
            else:
                result = await strategy.extract(text)
        except asyncio.TimeoutError:
            logger.warning("%s extraction timed out after %.1fs", strategy.name, timeout)
            continue
        except ExtractionError as e:
            logger.warning("%s extraction failed: %s", strategy.name, e)
            continue

        if result.locations:
            logger.info("Extracted locations via %s: %s", strategy.name, result.locations)
            return result
        logger.info("%s extraction found no locations", strategy.name)

    raise InputError(
        "Please enter valid locations separated by \"to\", "
        "e.g. 'Paris to London' or 'From Berlin to Prague to Vienna'"
    )


def build_strategies(llm_client: LanguageModelClient | None) -> list[ExtractionStrategy]:
    """Language model first when one is configured, pattern splitter always last."""
    strategies: list[ExtractionStrategy] = []
    if llm_client is not None:
        strategies.append(LanguageModelExtractor(llm_client))
    strategies.append(PatternExtractor())
    return strategies
