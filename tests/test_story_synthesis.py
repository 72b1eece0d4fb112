from __future__ import annotations

import pytest

from storycrafter.config import CrafterConfig
from storycrafter.lexicon.tables import DEFAULT_GENRE, GENRE_BUNDLES
from storycrafter.narrative.model import GenerationRequest
from storycrafter.orchestrator import StorySynthesizer, generate_story

SCENE_FIELDS = ("visual_direction", "camera_movement", "voice_over", "text_overlay", "sound_design")

REQUESTS = [
    {"genre": "mystery", "setting": "a fog-locked harbor town", "protagonist": "Nadia", "vibe": "uneasy curiosity"},
    {"genre": "adventure", "setting": "a neon soaked city hovering above the tide", "protagonist": "Jules", "vibe": "electric hope"},
    {"genre": "romance", "setting": "a night market in Lisbon", "protagonist": "Ines", "vibe": "shy wonder"},
    {"genre": "scifi", "setting": "a research station orbiting Europa", "protagonist": "Commander Okafor", "vibe": "cold resolve"},
    {"genre": "fantasy", "setting": "a valley of singing stones", "protagonist": "Wren", "vibe": "brave longing"},
    {"genre": "drama", "setting": "a small apartment above a bakery", "protagonist": "Sam", "vibe": "quiet regret"},
    {"genre": "unknown-xyz", "setting": "x", "protagonist": "Q", "vibe": "?"},
    {"genre": "ADVENTURE", "setting": "a city perched between dusk and dawn", "protagonist": "a restless storyteller", "vibe": "electric hope"},
]


@pytest.fixture(params=REQUESTS, ids=[request["genre"] for request in REQUESTS])
def result(request):
    return generate_story(request.param)


def test_timeline_totals_sixty_seconds(result):
    scenes = result.capcut.scenes
    assert len(scenes) == 12
    assert sum(scene.duration_seconds for scene in scenes) == 60


def test_timeline_is_contiguous(result):
    scenes = result.capcut.scenes
    assert scenes[0].start == "00:00"
    assert scenes[-1].end == "01:00"
    for current, following in zip(scenes, scenes[1:]):
        assert current.end == following.start


def test_word_count_band(result):
    assert 120 <= result.word_count <= 220
    assert result.word_count == len(result.story.split())


def test_script_reconstruction(result):
    capcut = result.capcut
    assert capcut.voice_over_script == " ".join(scene.voice_over for scene in capcut.scenes)


def test_non_degenerate_scenes(result):
    scenes = result.capcut.scenes
    for start in range(0, 12, 3):
        beat_scenes = scenes[start : start + 3]
        pairs = {(scene.visual_direction, scene.camera_movement) for scene in beat_scenes}
        assert len(pairs) == 3
    for scene in scenes:
        for name in SCENE_FIELDS:
            assert getattr(scene, name).strip()


def test_beats_match_scene_grouping(result):
    assert len(result.beats) == 4
    assert len(result.capcut.scenes) % len(result.beats) == 0
    for beat in result.beats:
        assert beat.description in result.story


@pytest.mark.parametrize("payload", REQUESTS[:6], ids=[request["genre"] for request in REQUESTS[:6]])
def test_personalization(payload):
    result = generate_story(payload)
    assert payload["setting"] in result.story
    assert payload["protagonist"] in result.story


def test_determinism():
    payload = REQUESTS[0]
    first = generate_story(payload)
    second = generate_story(dict(payload))
    assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)


def test_unknown_genre_uses_default_bundle():
    result = generate_story(
        GenerationRequest(genre="unknown-xyz", setting="a quiet pier", protagonist="Ola", vibe="calm")
    )
    default = GENRE_BUNDLES[DEFAULT_GENRE]
    assert result.tone == default.tone
    assert result.pace == default.pace


def test_mystery_worked_example():
    result = generate_story(REQUESTS[0])
    mystery = GENRE_BUNDLES["mystery"]

    assert result.tone == mystery.tone
    assert result.pace == mystery.pace
    assert "Nadia" in result.story
    assert "fog-locked harbor town" in result.story


def test_payload_uses_camel_case_keys():
    payload = generate_story(REQUESTS[0]).to_payload()

    assert set(payload) == {"story", "wordCount", "beats", "tone", "pace", "capcut"}
    assert set(payload["capcut"]) == {
        "scenes",
        "voiceOverScript",
        "editingNotes",
        "musicDirection",
        "exportTips",
    }
    assert set(payload["beats"][0]) == {"label", "description"}
    assert isinstance(payload["capcut"]["editingNotes"], list)


def test_result_is_immutable():
    result = generate_story(REQUESTS[0])
    with pytest.raises(Exception):
        result.story = "rewritten"  # type: ignore[misc]


def test_synthesizer_honours_config():
    synthesizer = StorySynthesizer.default(CrafterConfig(target_words=150, max_words=190))
    result = synthesizer.generate_story(REQUESTS[1])
    assert result.word_count <= 190


LONG_INPUTS = {
    "setting": "the flooded old quarter of a drowned coastal city at the end of summer",
    "protagonist": "an elderly lighthouse keeper who still waits for her daughter to come home",
    "vibe": "a quiet dread that keeps growing louder with every passing night",
}


@pytest.mark.parametrize("genre", list(GENRE_BUNDLES))
def test_word_count_band_holds_for_long_inputs(genre):
    result = generate_story({"genre": genre, **LONG_INPUTS})

    assert 120 <= result.word_count <= 220
    assert result.word_count == len(result.story.split())
    assert LONG_INPUTS["setting"] in result.story
    assert LONG_INPUTS["protagonist"] in result.story
    assert len(result.beats) == 4
