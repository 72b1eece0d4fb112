from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from storycrafter.orchestrator import StoryResult

from .captions import build_srt

STORY_FILENAME = "one-minute-story.txt"
VOICE_OVER_FILENAME = "capcut-voiceover.txt"
SCENES_FILENAME = "capcut-scenes.txt"
CAPTIONS_FILENAME = "capcut-captions.srt"
RESULT_FILENAME = "story.json"


def format_scene_breakdown(result: StoryResult) -> str:
    header = "# CapCut Scene Breakdown\n"
    rows = "\n\n".join(
        "\n".join(
            [
                f"Scene {scene.index}",
                f"Time: {scene.start} → {scene.end} ({scene.duration_seconds}s)",
                f"Visual: {scene.visual_direction}",
                f"Camera: {scene.camera_movement}",
                f"Voice Over: {scene.voice_over}",
                f"On-screen Text: {scene.text_overlay}",
                f"Sound Design: {scene.sound_design}",
            ]
        )
        for scene in result.capcut.scenes
    )
    return "\n".join([header, rows])


def format_story_download(result: StoryResult, generated_at: str) -> str:
    return f"{result.story}\n\n---\nGenerated at {generated_at}"


def write_exports(result: StoryResult, export_dir: Path, generated_at: str) -> Dict[str, Path]:
    """Write the copy/download artifacts for one story and return their paths."""
    export_dir.mkdir(parents=True, exist_ok=True)
    contents = {
        "story": (STORY_FILENAME, format_story_download(result, generated_at)),
        "voice_over": (VOICE_OVER_FILENAME, result.capcut.voice_over_script),
        "scenes": (SCENES_FILENAME, format_scene_breakdown(result)),
        "captions": (CAPTIONS_FILENAME, build_srt(result.capcut.scenes)),
        "result": (RESULT_FILENAME, json.dumps(result.to_payload(), indent=2, ensure_ascii=False)),
    }
    paths: Dict[str, Path] = {}
    for key, (filename, text) in contents.items():
        path = export_dir / filename
        path.write_text(text, encoding="utf-8")
        paths[key] = path
    return paths
