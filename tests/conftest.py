from __future__ import annotations

import sys
from pathlib import Path

import pytest

src_path = Path(__file__).resolve().parents[1] / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from storycrafter.narrative.model import GenerationRequest  # noqa: E402


@pytest.fixture
def mystery_request() -> GenerationRequest:
    return GenerationRequest(
        genre="mystery",
        setting="a fog-locked harbor town",
        protagonist="Nadia",
        vibe="uneasy curiosity",
    )
