from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from storycrafter.common.text import (
    capitalize_first,
    clean_fragment,
    clip_words,
    count_words,
    short_reference,
)
from storycrafter.lexicon.model import GenreBundle

from .model import BeatSection, GenerationRequest, Narrative

logger = logging.getLogger(__name__)

TARGET_WORDS = 170
MAX_WORDS = 210
# Longest user phrase woven into the prose; longer inputs are clipped.
MAX_SLOT_WORDS = 16


@dataclass(frozen=True)
class SentenceTemplate:
    text: str
    # None marks a sentence that is always present; lower numbers are added first.
    priority: Optional[int] = None
    # Required sentences with a rank may be dropped, lowest first, to stay under the ceiling.
    drop_rank: Optional[int] = None


@dataclass(frozen=True)
class BeatTemplate:
    label: str
    sentences: tuple[SentenceTemplate, ...]


# {protagonist}, {setting} and {vibe} appear in full once; later mentions use
# {hero}, {place} and {feeling}.
BEAT_TEMPLATES: tuple[BeatTemplate, ...] = (
    BeatTemplate(
        label="Setup",
        sentences=(
            SentenceTemplate("In {setting}, {protagonist} notices {opening_image}."),
            SentenceTemplate("The air carries {sense_a} and {sense_b}.", drop_rank=1),
            SentenceTemplate("It is the kind of place where {place_rule}.", priority=1),
            SentenceTemplate("Inside, {hero} feels {vibe} and cannot shake it."),
            SentenceTemplate(
                "Nobody else seems to notice, which only makes the feeling more {adjective}.",
                priority=5,
            ),
        ),
    ),
    BeatTemplate(
        label="Complication",
        sentences=(
            SentenceTemplate("Then {inciting} changes everything."),
            SentenceTemplate("Help arrives from {ally}, but it comes with a question.", priority=2),
            SentenceTemplate("So {hero} pushes forward, even as {obstacle}.", drop_rank=5),
            SentenceTemplate(
                "Every step makes the {feeling} louder and the way back harder to find.",
                drop_rank=2,
            ),
            SentenceTemplate(
                "Time turns {adjective} now, and every choice seems to cost more than the last.",
                priority=6,
            ),
        ),
    ),
    BeatTemplate(
        label="Turning Point",
        sentences=(
            SentenceTemplate("At the edge of it all, {hero} realizes that {turn}."),
            SentenceTemplate("The truth lands like {impact}.", drop_rank=3),
            SentenceTemplate(
                "For one suspended breath, {place} seems to hold still and listen.",
                priority=3,
            ),
            SentenceTemplate("Instead of running, {hero} {climax_action}.", drop_rank=6),
            SentenceTemplate(
                "Every doubt from the beginning rearranges itself into a reason to stay.",
                priority=7,
            ),
        ),
    ),
    BeatTemplate(
        label="Resolution",
        sentences=(
            SentenceTemplate("When it is over, {resolution}."),
            SentenceTemplate(
                "Now {hero} carries that {feeling} forward, changed but unbroken.",
                drop_rank=4,
            ),
            SentenceTemplate("The lesson is simple: {moral}.", priority=4),
            SentenceTemplate("Somewhere in {place}, {closing_image} is still waiting.", drop_rank=7),
            SentenceTemplate("The next chapter can wait; for now, this moment is enough.", priority=8),
        ),
    ),
)


class NarrativeComposer:
    """Assemble a personalized short story from beat templates and a genre bundle."""

    def __init__(
        self,
        templates: Sequence[BeatTemplate] = BEAT_TEMPLATES,
        target_words: int = TARGET_WORDS,
        max_words: int = MAX_WORDS,
    ) -> None:
        if max_words < target_words:
            raise ValueError("max_words must be at least target_words")
        self.templates = tuple(templates)
        self.target_words = target_words
        self.max_words = max_words

    @property
    def beat_count(self) -> int:
        return len(self.templates)

    def compose(self, request: GenerationRequest, bundle: GenreBundle) -> Narrative:
        slots = self._slots(request, bundle)
        rendered = [
            [(self._render(sentence.text, slots), sentence) for sentence in beat.sentences]
            for beat in self.templates
        ]

        selected = self._select_sentences(rendered)
        sections = tuple(
            BeatSection(label=beat.label, sentences=tuple(sentences))
            for beat, sentences in zip(self.templates, selected)
        )
        story = "\n\n".join(section.text for section in sections)
        word_count = count_words(story)
        logger.debug(
            "Composed %s story with %d words across %d beats",
            bundle.key,
            word_count,
            len(sections),
        )
        return Narrative(
            request=request,
            sections=sections,
            story=story,
            word_count=word_count,
            tone=bundle.tone,
            pace=bundle.pace,
        )

    def _select_sentences(
        self, rendered: list[list[tuple[str, SentenceTemplate]]]
    ) -> list[list[str]]:
        """Fit the required sentences under the ceiling, then top up towards the target."""
        chosen: set[tuple[int, int]] = set()
        total = 0
        optional: list[tuple[int, int, int, int]] = []
        droppable: list[tuple[int, int, int, int]] = []
        for beat_idx, sentences in enumerate(rendered):
            for sentence_idx, (text, template) in enumerate(sentences):
                words = count_words(text)
                if template.priority is not None:
                    optional.append((template.priority, beat_idx, sentence_idx, words))
                    continue
                chosen.add((beat_idx, sentence_idx))
                total += words
                if template.drop_rank is not None:
                    droppable.append((template.drop_rank, beat_idx, sentence_idx, words))

        for _, beat_idx, sentence_idx, words in sorted(droppable):
            if total <= self.max_words:
                break
            chosen.discard((beat_idx, sentence_idx))
            total -= words
            logger.debug("Dropped sentence %d of beat %d to stay under %d words", sentence_idx, beat_idx, self.max_words)

        for _, beat_idx, sentence_idx, words in sorted(optional):
            if total >= self.target_words:
                break
            if total + words > self.max_words:
                continue
            chosen.add((beat_idx, sentence_idx))
            total += words

        return [
            [text for sentence_idx, (text, _) in enumerate(sentences) if (beat_idx, sentence_idx) in chosen]
            for beat_idx, sentences in enumerate(rendered)
        ]

    @staticmethod
    def _slots(request: GenerationRequest, bundle: GenreBundle) -> dict[str, str]:
        setting = _fragment(request.setting)
        protagonist = _fragment(request.protagonist)
        vibe = _fragment(request.vibe)
        return {
            "setting": setting,
            "protagonist": protagonist,
            "vibe": vibe,
            "place": short_reference(setting, max_words=8),
            "hero": short_reference(protagonist),
            "feeling": vibe if len(vibe.split()) <= 3 else "feeling",
            "opening_image": bundle.opening_image,
            "sense_a": bundle.senses[0],
            "sense_b": bundle.senses[1],
            "place_rule": bundle.place_rule,
            "inciting": bundle.inciting,
            "ally": bundle.ally,
            "obstacle": bundle.obstacle,
            "adjective": bundle.adjective,
            "turn": bundle.turn,
            "impact": bundle.impact,
            "climax_action": bundle.climax_action,
            "resolution": bundle.resolution,
            "moral": bundle.moral,
            "closing_image": bundle.closing_image,
        }

    @staticmethod
    def _render(template: str, slots: dict[str, str]) -> str:
        return capitalize_first(template.format(**slots))


def _fragment(text: str) -> str:
    return clip_words(clean_fragment(text) or text.strip(), MAX_SLOT_WORDS)
