from __future__ import annotations

from typing import Iterable, Sequence

from storycrafter.timeline.model import Scene


def _format_srt_time(seconds: float) -> str:
    # SRT uses hh:mm:ss,mmm. Clamp at >= 0.
    total_ms = max(0, int(round(seconds * 1000)))
    ms = total_ms % 1000
    total_seconds = total_ms // 1000
    s = total_seconds % 60
    total_minutes = total_seconds // 60
    m = total_minutes % 60
    h = total_minutes // 60
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def _parse_timestamp(value: str) -> int:
    minutes, seconds = value.split(":")
    return int(minutes) * 60 + int(seconds)


def wrap_caption_lines(text: str, max_chars_per_line: int = 42) -> list[str]:
    lines: list[str] = []
    current: list[str] = []
    char_count = 0
    for word in text.split():
        next_chars = len(word) + (1 if current else 0)
        if current and char_count + next_chars > max_chars_per_line:
            lines.append(" ".join(current))
            current = []
            char_count = 0
            next_chars = len(word)
        current.append(word)
        char_count += next_chars
    if current:
        lines.append(" ".join(current))
    return lines


def caption_events(scenes: Iterable[Scene], max_chars_per_line: int = 42) -> list[tuple[float, float, str]]:
    """Split each scene's voice-over into caption lines timed by word share."""
    events: list[tuple[float, float, str]] = []
    for scene in scenes:
        start = float(_parse_timestamp(scene.start))
        end = float(_parse_timestamp(scene.end))
        lines = wrap_caption_lines(scene.voice_over, max_chars_per_line)
        total_words = sum(len(line.split()) for line in lines) or 1
        cursor = start
        for idx, line in enumerate(lines):
            share = (end - start) * len(line.split()) / total_words
            line_end = end if idx == len(lines) - 1 else cursor + share
            events.append((cursor, line_end, line))
            cursor = line_end
    return events


def build_srt(scenes: Sequence[Scene], max_chars_per_line: int = 42) -> str:
    blocks = [
        f"{number}\n{_format_srt_time(start)} --> {_format_srt_time(end)}\n{text}"
        for number, (start, end, text) in enumerate(caption_events(scenes, max_chars_per_line), start=1)
    ]
    return "\n\n".join(blocks) + "\n"
