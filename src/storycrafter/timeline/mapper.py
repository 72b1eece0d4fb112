from __future__ import annotations

import logging
from typing import Iterable, Sequence

from storycrafter.common.text import clean_fragment, count_words
from storycrafter.lexicon.model import GenreBundle
from storycrafter.narrative.model import Narrative

from .model import Scene

logger = logging.getLogger(__name__)

TIMELINE_SECONDS = 60
SCENE_COUNT = 12

FIELDS = ("visual_direction", "camera_movement", "voice_over", "text_overlay", "sound_design")

PACING_QUALIFIERS = ("quick cut", "held beat", "slow build", "tight hold", "breathing room", "hard cut")
PACING_LINES = ("Let the moment breathe.", "Hold on the silence.", "Stay with it.")

VISUAL_TEMPLATES = (
    "Wide establishing shot: {imagery} across {setting}, staging the {beat} beat",
    "Medium tracking shot of {protagonist} among {imagery}, cut to the line \"{cue}\"",
    "Close-up reaction from {protagonist} with {imagery} soft in the background",
)


def format_timestamp(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def scene_durations(total_seconds: int, scene_count: int) -> list[int]:
    """Split the timeline evenly; the last scene absorbs any remainder."""
    if scene_count <= 0:
        raise ValueError("scene_count must be positive")
    base = total_seconds // scene_count
    if base <= 0:
        raise ValueError("Timeline too short for the requested scene count")
    durations = [base] * scene_count
    durations[-1] += total_seconds - base * scene_count
    return durations


def beat_ranges(beat_count: int, scene_count: int) -> list[range]:
    """Contiguous scene index ranges per beat; the last beat absorbs any remainder."""
    if beat_count <= 0:
        raise ValueError("At least one beat is required")
    per_beat = scene_count // beat_count
    if per_beat <= 0:
        raise ValueError("Need at least one scene per beat")
    ranges = [range(i * per_beat, (i + 1) * per_beat) for i in range(beat_count)]
    ranges[-1] = range(ranges[-1].start, scene_count)
    return ranges


def partition(items: Sequence[str], parts: int) -> list[list[str]]:
    """Contiguous near-even split; earlier groups take the extra items."""
    base, extra = divmod(len(items), parts)
    groups: list[list[str]] = []
    cursor = 0
    for idx in range(parts):
        size = base + (1 if idx < extra else 0)
        groups.append(list(items[cursor : cursor + size]))
        cursor += size
    return groups


def distribute_lines(sentences: Iterable[str], parts: int) -> list[str]:
    """Spread a beat's sentences across ``parts`` voice-over lines."""
    lines = [sentence.strip() for sentence in sentences if sentence.strip()]
    while 0 < len(lines) < parts:
        idx = max(range(len(lines)), key=lambda i: (count_words(lines[i]), -i))
        head, tail = _split_line(lines[idx])
        if not tail:
            break
        lines[idx : idx + 1] = [head, tail]

    texts = [" ".join(group) for group in partition(lines, parts)]
    filler = iter(PACING_LINES * parts)
    return [text or next(filler) for text in texts]


def _split_line(text: str) -> tuple[str, str]:
    words = text.split()
    if len(words) < 2:
        return text, ""
    middle = len(words) / 2
    breaks = [i + 1 for i, word in enumerate(words[:-1]) if word.endswith((",", ";", ":"))]
    cut = min(breaks, key=lambda k: abs(k - middle)) if breaks else len(words) // 2
    return " ".join(words[:cut]), " ".join(words[cut:])


def _headline(text: str, limit: int) -> str:
    words = text.split()
    clipped = " ".join(words[:limit]).rstrip(".,;:!?")
    return f"{clipped}..." if len(words) > limit else clipped


def _qualified(value: str, attempt: int) -> str:
    qualifier = PACING_QUALIFIERS[attempt % len(PACING_QUALIFIERS)]
    round_no = attempt // len(PACING_QUALIFIERS)
    if round_no:
        qualifier = f"{qualifier} {round_no + 1}"
    return f"{value} ({qualifier})"


def make_distinct(values: Sequence[str], fallback: str) -> list[str]:
    """Guarantee every value is non-empty and unique within the group."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        base = value.strip() or fallback
        candidate = base
        attempt = 0
        while candidate in seen:
            candidate = _qualified(base, attempt)
            attempt += 1
        seen.add(candidate)
        result.append(candidate)
    return result


class SceneMapper:
    """Turn narrative beats into a fixed-length, evenly timed scene plan."""

    def __init__(self, total_seconds: int = TIMELINE_SECONDS, scene_count: int = SCENE_COUNT) -> None:
        self.total_seconds = total_seconds
        self.scene_count = scene_count

    def map(self, narrative: Narrative, bundle: GenreBundle) -> tuple[Scene, ...]:
        sections = narrative.sections
        ranges = beat_ranges(len(sections), self.scene_count)
        durations = scene_durations(self.total_seconds, self.scene_count)

        setting = clean_fragment(narrative.request.setting) or narrative.request.setting.strip()
        protagonist = clean_fragment(narrative.request.protagonist) or narrative.request.protagonist.strip()
        vibe = clean_fragment(narrative.request.vibe) or narrative.request.vibe.strip()

        scenes: list[Scene] = []
        elapsed = 0
        for beat_idx, (section, scene_range) in enumerate(zip(sections, ranges)):
            lines = distribute_lines(section.sentences, len(scene_range))
            drafts = [
                self._draft(
                    scene_idx=scene_idx,
                    position=position,
                    beat_idx=beat_idx,
                    label=section.label,
                    voice_over=lines[position],
                    bundle=bundle,
                    setting=setting,
                    protagonist=protagonist,
                    vibe=vibe,
                )
                for position, scene_idx in enumerate(scene_range)
            ]
            columns = {
                name: make_distinct([draft[name] for draft in drafts], fallback=section.label)
                for name in FIELDS
            }
            for position, scene_idx in enumerate(scene_range):
                duration = durations[scene_idx]
                scenes.append(
                    Scene(
                        index=scene_idx + 1,
                        start=format_timestamp(elapsed),
                        end=format_timestamp(elapsed + duration),
                        duration_seconds=duration,
                        beat_label=section.label,
                        **{name: columns[name][position] for name in FIELDS},
                    )
                )
                elapsed += duration

        logger.debug("Mapped %d beats onto %d scenes (%ss)", len(sections), len(scenes), elapsed)
        return tuple(scenes)

    def _draft(
        self,
        *,
        scene_idx: int,
        position: int,
        beat_idx: int,
        label: str,
        voice_over: str,
        bundle: GenreBundle,
        setting: str,
        protagonist: str,
        vibe: str,
    ) -> dict[str, str]:
        template = VISUAL_TEMPLATES[position % len(VISUAL_TEMPLATES)]
        visual = template.format(
            imagery=bundle.imagery[scene_idx % len(bundle.imagery)],
            setting=setting,
            protagonist=protagonist,
            beat=label.lower(),
            cue=_headline(voice_over, 6),
        )

        overlay_choices = (
            bundle.overlay_words[beat_idx % len(bundle.overlay_words)],
            _headline(voice_over, 4),
            f"{label} · {vibe}",
        )
        overlay = overlay_choices[position % len(overlay_choices)]

        sound = bundle.sound_cues[scene_idx % len(bundle.sound_cues)]
        if scene_idx == self.scene_count - 1:
            sound = f"{sound}, resolving to silence on the final frame"
        elif position == 0 and beat_idx > 0:
            sound = f"{sound}, with a riser into the {label.lower()} beat"

        return {
            "visual_direction": visual,
            "camera_movement": bundle.camera_moves[scene_idx % len(bundle.camera_moves)],
            "voice_over": voice_over,
            "text_overlay": overlay,
            "sound_design": sound,
        }
