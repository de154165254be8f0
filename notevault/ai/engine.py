"""
Insight engines: summaries, suggestions and patterns over a set of notes.

``InsightEngine`` is the local heuristic implementation: an extractive
summarizer weighted by word frequency, keyword overlap for connection and tag
suggestions, and Jaccard similarity for duplicate detection.
``LLMInsightEngine`` asks an LLM provider for summaries and falls back to the
local summarizer whenever the provider or its output fails.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from notevault.ai.provider import LLMProvider

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for of with by is are was were be been
    have has had do does did will would could should may might can this that
    these those
    """.split()
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WORD = re.compile(r"\b\w+\b")
_NUMBERED_TITLE = re.compile(r"\b(step|part|chapter|section)\s*\d+", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^\d+[.)]\s")

DUPLICATE_THRESHOLD = 0.8
MIN_DUPLICATE_LENGTH = 20
MIN_GROUP_SIZE = 3


class NoteLike(Protocol):
    id: str
    title: str
    content: str
    tags: list[str]


@dataclass
class SummaryResult:
    summary: str
    key_points: list[str] = field(default_factory=list)
    confidence: float = 0.5


@dataclass
class Suggestion:
    type: str  # improvement | connection | tag | structure
    title: str
    description: str
    confidence: float


@dataclass
class Pattern:
    type: str  # duplicate | related | sequence
    items: list[str]
    description: str
    confidence: float


def word_frequencies(text: str) -> Counter[str]:
    words = _WORD.findall(text.lower())
    return Counter(w for w in words if w not in STOP_WORDS and len(w) > 2)


def extract_keywords(text: str, limit: int = 10) -> list[str]:
    """Most frequent non-stop-words, most frequent first."""
    return [word for word, _ in word_frequencies(text).most_common(limit)]


def jaccard_similarity(a: str, b: str) -> float:
    words_a = set(a.split())
    words_b = set(b.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def _truncate(text: str, max_length: int) -> str:
    return text[:max_length] + "..." if len(text) > max_length else text


class InsightEngine:
    """Local heuristic engine. Deterministic and dependency-free."""

    name = "local"

    def summarize_text(self, text: str, max_length: int = 200) -> SummaryResult:
        sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]
        if len(sentences) <= 2:
            return SummaryResult(summary=text, key_points=sentences, confidence=0.9)

        freq = word_frequencies(text)
        last = len(sentences) - 1
        scored: list[tuple[float, int, str]] = []
        for index, sentence in enumerate(sentences):
            words = sentence.lower().split()
            score = sum(freq.get(w, 0) for w in words) / len(words)
            if index == 0:
                score *= 1.5
            elif index == last:
                score *= 1.2
            scored.append((score, index, sentence))

        top = sorted(scored, key=lambda item: item[0], reverse=True)[:3]
        top.sort(key=lambda item: item[1])
        picked = [sentence for _, _, sentence in top]
        return SummaryResult(
            summary=_truncate(". ".join(picked), max_length),
            key_points=picked,
            confidence=0.7,
        )

    def generate_suggestions(
        self, notes: Sequence[NoteLike], current_note: NoteLike | None = None
    ) -> list[Suggestion]:
        suggestions: list[Suggestion] = []
        if current_note is not None:
            suggestions.extend(self._improvements(current_note))
            suggestions.extend(self._connections(notes, current_note))
            suggestions.extend(self._tags(notes, current_note))
        return suggestions

    def find_patterns(self, notes: Sequence[NoteLike]) -> list[Pattern]:
        patterns: list[Pattern] = []
        duplicates = self._duplicates(notes)
        if duplicates:
            patterns.append(
                Pattern(
                    type="duplicate",
                    items=duplicates,
                    description="Found notes with similar content",
                    confidence=0.8,
                )
            )
        patterns.extend(self._related(notes))
        patterns.extend(self._sequences(notes))
        return patterns

    # ── Suggestions ──────────────────────────────────────────────────

    def _improvements(self, note: NoteLike) -> list[Suggestion]:
        found: list[Suggestion] = []
        content = note.content or ""
        if len(content) < 50:
            found.append(
                Suggestion(
                    "improvement",
                    "Expand content",
                    "This note seems quite brief. Consider adding more details or context.",
                    0.6,
                )
            )
        if len(content) > 1000 and "\n" not in content and "•" not in content:
            found.append(
                Suggestion(
                    "structure",
                    "Add structure",
                    "Consider breaking this long note into sections or bullet points "
                    "for better readability.",
                    0.7,
                )
            )
        if not note.title or len(note.title.strip()) < 3:
            found.append(
                Suggestion(
                    "improvement",
                    "Add descriptive title",
                    "A clear title will help you find and organize this note better.",
                    0.8,
                )
            )
        return found

    def _connections(self, notes: Sequence[NoteLike], current: NoteLike) -> list[Suggestion]:
        if len(notes) < 2:
            return []
        current_words = extract_keywords(f"{current.content} {current.title}")
        found: list[Suggestion] = []
        for note in notes:
            if note.id == current.id:
                continue
            other = set(extract_keywords(f"{note.content} {note.title}"))
            common = [w for w in current_words if w in other]
            if len(common) >= 2:
                found.append(
                    Suggestion(
                        "connection",
                        f'Connect to "{note.title}"',
                        f"These notes share common topics: {', '.join(common[:3])}",
                        min(0.9, len(common) * 0.2),
                    )
                )
        return found[:3]

    def _tags(self, notes: Sequence[NoteLike], current: NoteLike) -> list[Suggestion]:
        keywords = extract_keywords(f"{current.content} {current.title}")
        existing = [
            tag.lower()
            for note in notes
            if note.id != current.id
            for tag in (note.tags or [])
        ]
        own = {tag.lower() for tag in (current.tags or [])}
        found: list[Suggestion] = []
        seen: set[str] = set()
        for keyword in keywords:
            match = next((t for t in existing if t in keyword or keyword in t), None)
            if match and match not in seen and match not in own:
                seen.add(match)
                found.append(
                    Suggestion(
                        "tag",
                        f"Add tag: {match}",
                        f'This note seems related to the "{match}" category',
                        0.6,
                    )
                )
        for keyword in keywords[:3]:
            if keyword not in existing and keyword not in own and keyword not in seen:
                found.append(
                    Suggestion(
                        "tag",
                        f"Add tag: {keyword}",
                        f'"{keyword}" appears to be a key topic in this note',
                        0.5,
                    )
                )
        return found[:2]

    # ── Patterns ─────────────────────────────────────────────────────

    def _duplicates(self, notes: Sequence[NoteLike]) -> list[str]:
        duplicates: list[str] = []
        seen: list[str] = []
        for note in notes:
            normalized = " ".join((note.content or "").lower().split())
            if len(normalized) < MIN_DUPLICATE_LENGTH:
                continue
            if any(jaccard_similarity(normalized, prior) > DUPLICATE_THRESHOLD for prior in seen):
                duplicates.append(note.title or note.id)
            else:
                seen.append(normalized)
        return duplicates

    def _related(self, notes: Sequence[NoteLike]) -> list[Pattern]:
        groups: dict[str, list[str]] = {}
        for note in notes:
            for keyword in extract_keywords(f"{note.content} {note.title}", limit=3):
                groups.setdefault(keyword, []).append(note.title or note.id)
        patterns = [
            Pattern(
                type="related",
                items=titles[:5],
                description=f'Notes related to "{keyword}"',
                confidence=0.6,
            )
            for keyword, titles in groups.items()
            if len(titles) >= MIN_GROUP_SIZE
        ]
        return patterns[:3]

    def _sequences(self, notes: Sequence[NoteLike]) -> list[Pattern]:
        numbered = [
            n.title
            for n in notes
            if _NUMBERED_TITLE.search(n.title or "") or _LEADING_NUMBER.match(n.title or "")
        ]
        if len(numbered) < MIN_GROUP_SIZE:
            return []
        return [
            Pattern(
                type="sequence",
                items=numbered[:5],
                description="Found a sequence of numbered notes",
                confidence=0.8,
            )
        ]


SUMMARY_SYSTEM_PROMPT = (
    "You summarize personal notes. Reply with a JSON object: "
    '{"summary": string, "key_points": [string, ...]}. '
    "Keep the summary under the requested length and use only facts from the note."
)


class LLMInsightEngine(InsightEngine):
    """Summaries from an LLM provider; everything else stays local."""

    name = "openai"

    def __init__(self, provider: LLMProvider) -> None:
        self.provider = provider

    def summarize_text(self, text: str, max_length: int = 200) -> SummaryResult:
        prompt = f"Maximum summary length: {max_length} characters.\n\nNote:\n{text}"
        try:
            raw = self.provider.complete(
                prompt,
                system_prompt=SUMMARY_SYSTEM_PROMPT,
                response_format={"type": "json_object"},
            )
            payload: dict[str, Any] = json.loads(raw)
            summary = str(payload["summary"]).strip()
            if not summary:
                raise ValueError("empty summary")
            key_points = [str(p) for p in payload.get("key_points") or []]
        except Exception as exc:  # provider, transport or parse failure
            logger.warning("LLM summary failed, using local summarizer: %s", exc)
            return super().summarize_text(text, max_length)
        return SummaryResult(
            summary=_truncate(summary, max_length), key_points=key_points, confidence=0.85
        )
