from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from storycrafter.lexicon.tables import DEFAULT_GENRE
from storycrafter.narrative.composer import BEAT_TEMPLATES, MAX_WORDS, TARGET_WORDS

# Upper bound of the narration band for a 60 second voice-over.
WORD_CEILING = 220

CONFIG_ENV = "STORYCRAFTER_CONFIG"


class CrafterConfig(BaseModel):
    default_genre: str = DEFAULT_GENRE
    default_setting: str = "a city perched between dusk and dawn"
    default_protagonist: str = "a restless storyteller"
    default_vibe: str = "electric hope"
    target_words: int = Field(default=TARGET_WORDS, gt=0, le=WORD_CEILING)
    max_words: int = Field(default=MAX_WORDS, gt=0, le=WORD_CEILING)
    timeline_seconds: int = Field(default=60, gt=0)
    scene_count: int = Field(default=12, gt=0)
    output_dir: Path = Path("data/stories")

    @model_validator(mode="after")
    def _check_limits(self) -> "CrafterConfig":
        if self.max_words < self.target_words:
            raise ValueError("max_words must be at least target_words")
        if self.scene_count < len(BEAT_TEMPLATES):
            raise ValueError(f"scene_count must be at least {len(BEAT_TEMPLATES)}, one scene per beat")
        if self.timeline_seconds < self.scene_count:
            raise ValueError("timeline_seconds must allow at least one second per scene")
        return self

    @classmethod
    def from_file(cls, path: Path) -> "CrafterConfig":
        text = path.read_text(encoding="utf-8")
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            import yaml

            payload = yaml.safe_load(text)
        return cls.model_validate(payload or {})

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "CrafterConfig":
        """Read ``path`` or the file named by $STORYCRAFTER_CONFIG; defaults otherwise."""
        if path is None:
            env_path = os.getenv(CONFIG_ENV)
            path = Path(env_path) if env_path else None
        return cls.from_file(path) if path else cls()
