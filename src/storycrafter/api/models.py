from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from storycrafter.config import CrafterConfig
from storycrafter.narrative.model import GenerationRequest


class ValidationError(ValueError):
    """Raised when the request payload cannot be processed."""


FIELDS = ("genre", "setting", "protagonist", "vibe")


@dataclass(frozen=True)
class StoryApiRequest:
    genre: str
    setting: str
    protagonist: str
    vibe: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], config: CrafterConfig | None = None) -> "StoryApiRequest":
        """Trim inputs, lowercase the genre and fill blanks with the configured defaults."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be an object")
        config = config or CrafterConfig()

        values: dict[str, str] = {}
        for name in FIELDS:
            raw = payload.get(name)
            if raw is not None and not isinstance(raw, str):
                raise ValidationError(f"{name} must be a string")
            values[name] = (raw or "").strip()

        return cls(
            genre=values["genre"].lower() or config.default_genre,
            setting=values["setting"] or config.default_setting,
            protagonist=values["protagonist"] or config.default_protagonist,
            vibe=values["vibe"] or config.default_vibe,
        )

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            genre=self.genre,
            setting=self.setting,
            protagonist=self.protagonist,
            vibe=self.vibe,
        )

    def to_dict(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in FIELDS}
