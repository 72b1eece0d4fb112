from __future__ import annotations

import pytest

from storycrafter.lexicon.tables import resolve_bundle
from storycrafter.narrative.composer import NarrativeComposer
from storycrafter.narrative.model import BeatSection, GenerationRequest, Narrative
from storycrafter.timeline.mapper import (
    SceneMapper,
    beat_ranges,
    distribute_lines,
    format_timestamp,
    make_distinct,
    scene_durations,
)

FIELDS = ("visual_direction", "camera_movement", "voice_over", "text_overlay", "sound_design")


def _narrative(request: GenerationRequest) -> Narrative:
    return NarrativeComposer().compose(request, resolve_bundle(request.genre))


def _thin_narrative(sentences_per_beat: list[tuple[str, ...]]) -> Narrative:
    request = GenerationRequest(genre="drama", setting="a kitchen", protagonist="Lee", vibe="quiet")
    sections = tuple(
        BeatSection(label=label, sentences=sentences)
        for label, sentences in zip(["Setup", "Complication", "Turning Point", "Resolution"], sentences_per_beat)
    )
    story = " ".join(section.text for section in sections)
    return Narrative(
        request=request,
        sections=sections,
        story=story,
        word_count=len(story.split()),
        tone="intimate",
        pace="deliberate",
    )


def test_format_timestamp():
    assert format_timestamp(0) == "00:00"
    assert format_timestamp(5) == "00:05"
    assert format_timestamp(60) == "01:00"
    assert format_timestamp(125) == "02:05"


def test_scene_durations_even_split():
    assert scene_durations(60, 12) == [5] * 12


def test_scene_durations_remainder_goes_to_last_scene():
    durations = scene_durations(60, 7)
    assert durations[:-1] == [8] * 6
    assert durations[-1] == 12
    assert sum(durations) == 60


def test_beat_ranges_are_contiguous():
    ranges = beat_ranges(4, 12)
    assert [list(r) for r in ranges] == [[0, 1, 2], [3, 4, 5], [6, 7, 8], [9, 10, 11]]


def test_beat_ranges_last_beat_absorbs_remainder():
    ranges = beat_ranges(4, 14)
    assert list(ranges[-1]) == [9, 10, 11, 12, 13]


def test_beat_ranges_rejects_more_beats_than_scenes():
    with pytest.raises(ValueError):
        beat_ranges(5, 4)


def test_distribute_lines_keeps_every_word_in_order():
    sentences = ("One two three.", "Four five.", "Six.", "Seven eight nine.")
    lines = distribute_lines(sentences, 3)
    assert lines == ["One two three. Four five.", "Six.", "Seven eight nine."]


def test_distribute_lines_splits_single_sentence_at_commas():
    lines = distribute_lines(("At dawn, the bells rang, and everyone woke.",), 3)
    assert len(lines) == 3
    assert " ".join(lines) == "At dawn, the bells rang, and everyone woke."
    assert len(set(lines)) == 3


def test_distribute_lines_pads_single_word():
    lines = distribute_lines(("Run.",), 3)
    assert lines[0] == "Run."
    assert all(lines)
    assert len(set(lines)) == 3


def test_make_distinct_appends_pacing_qualifiers():
    values = make_distinct(["Pan left", "Pan left", "", "Pan left"], fallback="Setup")
    assert values[0] == "Pan left"
    assert values[2] == "Setup"
    assert len(set(values)) == 4
    assert all(value.startswith("Pan left (") for value in (values[1], values[3]))


def test_map_produces_twelve_contiguous_scenes(mystery_request):
    scenes = SceneMapper().map(_narrative(mystery_request), resolve_bundle("mystery"))

    assert len(scenes) == 12
    assert [scene.index for scene in scenes] == list(range(1, 13))
    assert sum(scene.duration_seconds for scene in scenes) == 60
    assert scenes[0].start == "00:00"
    assert scenes[-1].end == "01:00"
    for current, following in zip(scenes, scenes[1:]):
        assert current.end == following.start


def test_scenes_are_grouped_three_per_beat(mystery_request):
    scenes = SceneMapper().map(_narrative(mystery_request), resolve_bundle("mystery"))
    labels = [scene.beat_label for scene in scenes]
    assert labels == ["Setup"] * 3 + ["Complication"] * 3 + ["Turning Point"] * 3 + ["Resolution"] * 3


def test_voice_over_rebuilds_each_beat(mystery_request):
    narrative = _narrative(mystery_request)
    scenes = SceneMapper().map(narrative, resolve_bundle("mystery"))
    for beat_idx, section in enumerate(narrative.sections):
        beat_scenes = scenes[beat_idx * 3 : beat_idx * 3 + 3]
        assert " ".join(scene.voice_over for scene in beat_scenes) == section.text


def test_scene_fields_vary_within_each_beat(mystery_request):
    scenes = SceneMapper().map(_narrative(mystery_request), resolve_bundle("mystery"))
    for start in range(0, 12, 3):
        beat_scenes = scenes[start : start + 3]
        for name in FIELDS:
            values = [getattr(scene, name) for scene in beat_scenes]
            assert all(values)
            assert len(set(values)) == 3


def test_degenerate_beats_still_yield_distinct_scenes():
    narrative = _narrative_from_single_words()
    scenes = SceneMapper().map(narrative, resolve_bundle("drama"))

    assert len(scenes) == 12
    for start in range(0, 12, 3):
        beat_scenes = scenes[start : start + 3]
        pairs = {(scene.visual_direction, scene.camera_movement) for scene in beat_scenes}
        assert len(pairs) == 3
        assert len({scene.voice_over for scene in beat_scenes}) == 3
        for scene in beat_scenes:
            assert all(getattr(scene, name) for name in FIELDS)


def _narrative_from_single_words() -> Narrative:
    return _thin_narrative([("Go.",), ("Wait.",), ("Now.",), ("Done.",)])


def test_beat_label_is_not_serialized(mystery_request):
    scene = SceneMapper().map(_narrative(mystery_request), resolve_bundle("mystery"))[0]
    assert set(scene.to_payload()) == {
        "index",
        "start",
        "end",
        "durationSeconds",
        "visualDirection",
        "cameraMovement",
        "voiceOver",
        "textOverlay",
        "soundDesign",
    }


def test_final_scene_resolves_sound(mystery_request):
    scenes = SceneMapper().map(_narrative(mystery_request), resolve_bundle("mystery"))
    assert scenes[-1].sound_design.endswith("resolving to silence on the final frame")


def test_custom_timeline_absorbs_remainder(mystery_request):
    scenes = SceneMapper(total_seconds=62, scene_count=12).map(
        _narrative(mystery_request), resolve_bundle("mystery")
    )
    assert scenes[-1].duration_seconds == 7
    assert scenes[-1].end == "01:02"
