from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict

from storycrafter.api.http import HttpRequestParser, failure, ok, preflight
from storycrafter.api.models import StoryApiRequest
from storycrafter.common.time_utils import to_iso_z, utc_now
from storycrafter.config import CrafterConfig
from storycrafter.orchestrator import StorySynthesizer

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

GENERIC_ERROR = "Unable to build the story right now. Please try again in a moment."


class StoryApiApplication:
    """Coordinates request parsing, defaulting and story synthesis."""

    def __init__(
        self,
        synthesizer: StorySynthesizer | None = None,
        request_parser: HttpRequestParser | None = None,
        config: CrafterConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._config = config or CrafterConfig.load()
        self._synthesizer = synthesizer or StorySynthesizer.default(self._config)
        self._parser = request_parser or HttpRequestParser()
        self._clock = clock

    def handle_event(self, event: Dict[str, Any]) -> Dict[str, Any]:
        method = str(event.get("httpMethod") or "POST").upper()
        logger.info("Story request received (%s)", method)
        if method == "OPTIONS":
            return preflight()
        if method != "POST":
            return failure(405, "Only POST is supported")

        try:
            payload = self._parser.parse(event)
            inputs = StoryApiRequest.from_payload(payload, self._config)
            story = self._synthesizer.generate_story(inputs.to_generation_request())
        except Exception:
            logger.exception("Story generation failed")
            return failure(500, GENERIC_ERROR)

        return ok(
            {
                "ok": True,
                "generatedAt": to_iso_z(self._clock()),
                "inputs": inputs.to_dict(),
                "story": story.to_payload(),
            }
        )


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:  # pragma: no cover - AWS entry
    return StoryApiApplication().handle_event(event)
