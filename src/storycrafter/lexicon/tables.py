from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping

from .model import GenreBundle

logger = logging.getLogger(__name__)

DEFAULT_GENRE = "adventure"

_KEY_NOISE = re.compile(r"[^a-z0-9]+")

_ALIASES = MappingProxyType(
    {
        "action": "adventure",
        "quest": "adventure",
        "noir": "mystery",
        "detective": "mystery",
        "thriller": "mystery",
        "romantic": "romance",
        "love": "romance",
        "science-fiction": "scifi",
        "sci-fi": "scifi",
        "sf": "scifi",
        "cyberpunk": "scifi",
        "fairy-tale": "fantasy",
        "myth": "fantasy",
        "dramatic": "drama",
        "family": "drama",
    }
)


GENRE_BUNDLES: Mapping[str, GenreBundle] = MappingProxyType(
    {
        "adventure": GenreBundle(
            key="adventure",
            label="Adventure Pulse",
            tone="bold and hopeful",
            pace="propulsive",
            opening_image="a torn map pinned beneath a rusted compass",
            senses=("salt spray", "the hum of distant engines"),
            place_rule="every rooftop hides a shortcut and every shortcut hides a risk",
            inciting="a flare bursting over the skyline",
            ally="a grinning pilot with a borrowed glider",
            obstacle="the bridges fold away one by one",
            adjective="urgent",
            turn="the map was never about treasure, only about the courage to follow it",
            impact="a thunderclap over open water",
            climax_action="leaps across the last gap with nothing but momentum",
            resolution="the horizon opens wide and the whole city cheers from below",
            moral="the bravest route is the one you choose yourself",
            closing_image="a new flare",
            imagery=(
                "sunlit rooftops",
                "a fluttering map",
                "boots hitting wet pavement",
                "wind-whipped banners",
                "a glider banking over the tide",
                "golden hour haze",
            ),
            camera_moves=(
                "fast push-in",
                "handheld run-and-gun follow",
                "low-angle whip pan",
                "drone-style rising reveal",
                "speed-ramped tracking shot",
            ),
            sound_cues=(
                "rising wind swells",
                "footsteps layered over a taiko pulse",
                "whoosh transitions",
                "crowd roar bed",
                "heartbeat bass drop",
            ),
            overlay_words=("The call", "No way back", "Jump", "Horizon found"),
            color_grade="warm teal-and-orange with punchy contrast",
            transition="whip-pan transitions",
            overlay_style="bold condensed sans captions with a quick pop-in",
            music_palette="Driving orchestral percussion with bright brass stabs",
            tempo_bpm=128,
        ),
        "mystery": GenreBundle(
            key="mystery",
            label="Mystery Noir",
            tone="suspenseful",
            pace="measured",
            opening_image="a lamp burning in a window that has been dark for years",
            senses=("wet stone", "the creak of mooring ropes"),
            place_rule="everyone knows a secret and nobody admits to keeping one",
            inciting="an unsigned letter slipped under the door",
            ally="a retired ferryman who remembers the old tides",
            obstacle="every witness tells a different version of the same night",
            adjective="heavy",
            turn="the clue was never hidden, only waiting to be read in the right order",
            impact="a key turning in a lock",
            climax_action="reads the answer aloud in front of everyone who lied",
            resolution="the fog thins just enough to show the road home",
            moral="the truth is patient with people who keep looking",
            closing_image="another unlit window",
            imagery=(
                "fog rolling over black water",
                "a flickering streetlamp",
                "hands turning a weathered letter",
                "rain streaking a window",
                "silhouettes on a pier",
                "a ticking pocket watch",
            ),
            camera_moves=(
                "slow dolly-in",
                "rack focus from foreground clue to face",
                "static locked-off frame",
                "creeping lateral slide",
                "overhead top-down reveal",
            ),
            sound_cues=(
                "low drone with a distant foghorn",
                "ticking clock layered under breath",
                "muffled footsteps on boards",
                "sharp string sting",
                "rain hiss fading to silence",
            ),
            overlay_words=("Something's off", "Follow the clue", "The truth", "Case closed"),
            color_grade="desaturated blue-green with crushed blacks",
            transition="slow cross-dissolves",
            overlay_style="typewriter captions that type on letter by letter",
            music_palette="Sparse piano motifs over a low cello drone",
            tempo_bpm=84,
        ),
        "romance": GenreBundle(
            key="romance",
            label="Romance Glow",
            tone="tender",
            pace="flowing",
            opening_image="a stranger's laugh drifting across the crowd",
            senses=("warm bread", "string lights buzzing softly"),
            place_rule="people linger a little longer than they planned",
            inciting="a misdelivered note meant for someone else",
            ally="a best friend who refuses to let the moment slip",
            obstacle="old fears keep rewriting every sentence worth saying",
            adjective="fragile",
            turn="the note was only a door and the courage has to be their own",
            impact="a song everyone suddenly knows the words to",
            climax_action="says the honest thing out loud before the music stops",
            resolution="two shadows walk the same way under the lights",
            moral="being seen is worth the risk of being known",
            closing_image="a bench with room for two",
            imagery=(
                "string lights in soft focus",
                "hands almost touching",
                "a handwritten note",
                "golden window glow",
                "rain on a cafe awning",
                "a shared umbrella",
            ),
            camera_moves=(
                "gentle handheld drift",
                "slow orbit around the pair",
                "shallow-focus close-up",
                "soft push-in",
                "lingering wide two-shot",
            ),
            sound_cues=(
                "soft acoustic guitar bed",
                "city murmur rolled down to a whisper",
                "heartbeat thump under silence",
                "wind chimes and distant laughter",
                "warm room tone swell",
            ),
            overlay_words=("Hello, stranger", "Say it", "Right now", "Stay"),
            color_grade="warm pastel highlights with lifted shadows",
            transition="soft light-leak dissolves",
            overlay_style="handwritten script captions with a gentle fade",
            music_palette="Fingerpicked acoustic guitar with airy strings",
            tempo_bpm=92,
        ),
        "scifi": GenreBundle(
            key="scifi",
            label="Sci-Fi Fuse",
            tone="awe-struck",
            pace="pulsing",
            opening_image="a signal blinking on a screen that should be off",
            senses=("ozone", "the thrum of cooling fans"),
            place_rule="the machines dream louder than the people",
            inciting="a transmission from a ship that vanished decades ago",
            ally="an outdated service android with a stubborn memory",
            obstacle="the station's systems lock down sector by sector",
            adjective="electric",
            turn="the signal is a message from a future version of this very moment",
            impact="a power surge through every circuit",
            climax_action="rewrites the command line with seconds left on the clock",
            resolution="the lights steady and the stars outside seem closer",
            moral="the future listens to whoever answers first",
            closing_image="a second signal",
            imagery=(
                "holographic interfaces",
                "neon reflections on chrome",
                "a starfield beyond the glass",
                "glitching monitors",
                "steam venting in a corridor",
                "a pulsing signal waveform",
            ),
            camera_moves=(
                "smooth gimbal glide",
                "snap zoom on the screen",
                "dutch-angle tilt",
                "slow orbit around the console",
                "pull-back reveal through the viewport",
            ),
            sound_cues=(
                "synth arpeggio pulse",
                "data glitch stutters",
                "deep sub-bass hum",
                "airlock hiss",
                "radio static sweep",
            ),
            overlay_words=("Signal found", "Lockdown", "Rewrite", "Transmission ends"),
            color_grade="cool cyan and magenta with neon bloom",
            transition="glitch cuts",
            overlay_style="monospace HUD captions with a scanline flicker",
            music_palette="Pulsing analog synths over a steady electronic kick",
            tempo_bpm=118,
        ),
        "fantasy": GenreBundle(
            key="fantasy",
            label="Fantasy Heart",
            tone="wondrous",
            pace="sweeping",
            opening_image="runes glowing faintly under the moss",
            senses=("pine resin", "bells that no one is ringing"),
            place_rule="old promises still bind the wind and the water",
            inciting="a dragon feather falling from a cloudless sky",
            ally="a sharp-tongued fox spirit who owes an ancient debt",
            obstacle="the forest paths twist back on themselves",
            adjective="enchanted",
            turn="the magic was never in the feather but in the one who caught it",
            impact="a bell tolling inside the chest",
            climax_action="speaks the forgotten name and the storm bows",
            resolution="the runes go quiet and the valley breathes again",
            moral="wonder answers those brave enough to ask",
            closing_image="a single glowing rune",
            imagery=(
                "sunbeams through ancient trees",
                "floating embers",
                "a glowing feather",
                "mist over a crystal lake",
                "stone arches wrapped in vines",
                "a sky full of lanterns",
            ),
            camera_moves=(
                "sweeping crane rise",
                "slow forward glide through branches",
                "low-angle hero framing",
                "circular orbit",
                "tilt-up to the sky",
            ),
            sound_cues=(
                "choir pad swells",
                "shimmering chimes",
                "rustling leaves and wingbeats",
                "deep rumble of distant thunder",
                "harp glissando",
            ),
            overlay_words=("The sign", "The trial", "The name", "Legend begins"),
            color_grade="rich emerald and gold with a soft glow",
            transition="light-bloom transitions",
            overlay_style="engraved serif captions with a soft glow",
            music_palette="Soaring strings and choir over a harp ostinato",
            tempo_bpm=100,
        ),
        "drama": GenreBundle(
            key="drama",
            label="Drama Surge",
            tone="intimate",
            pace="deliberate",
            opening_image="an empty chair at a crowded table",
            senses=("cold coffee", "the tick of an old kitchen clock"),
            place_rule="silence says more than anyone at the table",
            inciting="a phone call nobody expected",
            ally="a younger sibling who asks the questions no one else will",
            obstacle="old arguments surface in every quiet room",
            adjective="raw",
            turn="holding on and letting go can be the same act of love",
            impact="a door finally opening",
            climax_action="says the apology that waited years for its moment",
            resolution="the table is loud again and one chair is no longer empty",
            moral="repair begins with one honest sentence",
            closing_image="a light left on",
            imagery=(
                "hands wrapped around a mug",
                "rain on a kitchen window",
                "an old family photograph",
                "a half-packed suitcase",
                "late light across a hallway",
                "a phone face-down on the table",
            ),
            camera_moves=(
                "locked-off medium shot",
                "slow push-in on the eyes",
                "over-the-shoulder framing",
                "handheld breathing frame",
                "slow pull-back to reveal the room",
            ),
            sound_cues=(
                "quiet piano notes",
                "room tone with a ticking clock",
                "breath and fabric foley",
                "swelling cello line",
                "rain softening to silence",
            ),
            overlay_words=("The call", "Unsaid", "Let go", "Home"),
            color_grade="natural muted tones with soft contrast",
            transition="gentle match cuts",
            overlay_style="clean lowercase captions with generous breathing room",
            music_palette="Solo piano building into a warm cello and string bed",
            tempo_bpm=72,
        ),
    }
)


def normalize_genre(genre: str) -> str:
    """Map free text such as ' Sci Fi ' or 'Science Fiction' onto a catalog key."""
    key = _KEY_NOISE.sub("-", genre.strip().lower()).strip("-")
    if key in GENRE_BUNDLES:
        return key
    if key in _ALIASES:
        return _ALIASES[key]
    compact = key.replace("-", "")
    if compact in GENRE_BUNDLES:
        return compact
    return _ALIASES.get(compact, key)


def resolve_bundle(genre: str) -> GenreBundle:
    """Return the bundle for ``genre``; unknown genres use the default bundle."""
    key = normalize_genre(genre)
    bundle = GENRE_BUNDLES.get(key)
    if bundle is None:
        logger.warning("Unknown genre '%s'; falling back to '%s'", genre, DEFAULT_GENRE)
        return GENRE_BUNDLES[DEFAULT_GENRE]
    return bundle


def available_genres() -> list[tuple[str, str]]:
    return [(bundle.key, bundle.label) for bundle in GENRE_BUNDLES.values()]
