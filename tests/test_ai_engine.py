"""Tests for the local heuristic insight engine."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from notevault.ai.engine import (
    InsightEngine,
    extract_keywords,
    jaccard_similarity,
    word_frequencies,
)


def _note(id: str, title: str, content: str, tags: list[str] | None = None):
    return SimpleNamespace(id=id, title=title, content=content, tags=tags or [])


@pytest.fixture
def engine() -> InsightEngine:
    return InsightEngine()


class TestTextHelpers:
    def test_word_frequencies_skip_stop_words_and_short_words(self):
        freq = word_frequencies("The cat and the DOG saw a cat on it")
        assert freq["cat"] == 2
        assert freq["dog"] == 1
        assert "the" not in freq
        assert "on" not in freq
        assert "saw" in freq

    def test_extract_keywords_most_frequent_first(self):
        assert extract_keywords("apple banana apple cherry apple banana", limit=2) == [
            "apple",
            "banana",
        ]

    def test_jaccard(self):
        assert jaccard_similarity("a b c", "a b c") == 1.0
        assert jaccard_similarity("a b", "c d") == 0.0
        assert jaccard_similarity("", "") == 0.0
        assert jaccard_similarity("a b c", "a b d") == pytest.approx(0.5)


class TestSummarize:
    def test_short_text_returned_whole(self, engine):
        result = engine.summarize_text("One sentence. Two sentences.")
        assert result.summary == "One sentence. Two sentences."
        assert result.key_points == ["One sentence", "Two sentences"]
        assert result.confidence == 0.9

    def test_picks_three_sentences_in_original_order(self, engine):
        text = (
            "Rockets need fuel. Weather was mild today. Rocket fuel burns hot. "
            "Lunch was fine. Rocket engines need fuel pumps."
        )
        result = engine.summarize_text(text, max_length=500)
        assert len(result.key_points) == 3
        assert result.key_points[0] == "Rockets need fuel"
        positions = [text.index(point) for point in result.key_points]
        assert positions == sorted(positions)
        assert result.confidence == 0.7

    def test_truncates_to_max_length(self, engine):
        text = ". ".join(f"Sentence number {i} about rockets" for i in range(6))
        result = engine.summarize_text(text, max_length=20)
        assert result.summary.endswith("...")
        assert len(result.summary) == 23


class TestSuggestions:
    def test_none_without_current_note(self, engine):
        assert engine.generate_suggestions([_note("1", "Title", "content")]) == []

    def test_brief_note_and_missing_title(self, engine):
        note = _note("1", "", "tiny")
        titles = [s.title for s in engine.generate_suggestions([note], note)]
        assert "Expand content" in titles
        assert "Add descriptive title" in titles

    def test_long_flat_note_gets_structure_suggestion(self, engine):
        note = _note("1", "Essay", "word " * 300)
        types = [s.type for s in engine.generate_suggestions([note], note)]
        assert "structure" in types

    def test_connection_suggested_for_shared_keywords(self, engine):
        current = _note("1", "Python testing", "pytest fixtures make python testing simple")
        related = _note("2", "Testing notes", "python testing with pytest fixtures")
        unrelated = _note("3", "Recipes", "flour sugar butter eggs")
        suggestions = engine.generate_suggestions([current, related, unrelated], current)
        connections = [s for s in suggestions if s.type == "connection"]
        assert [s.title for s in connections] == ['Connect to "Testing notes"']
        assert 0 < connections[0].confidence <= 0.9

    def test_tag_suggestions_capped_and_skip_own_tags(self, engine):
        current = _note(
            "1", "Garden", "tomatoes tomatoes basil basil peppers", tags=["tomatoes"]
        )
        other = _note("2", "Other", "unrelated", tags=["basil"])
        tags = [s for s in engine.generate_suggestions([current, other], current) if s.type == "tag"]
        assert len(tags) <= 2
        assert tags[0].title == "Add tag: basil"
        assert all(s.title != "Add tag: tomatoes" for s in tags)


class TestPatterns:
    def test_duplicates(self, engine):
        text = "meeting notes for the quarterly planning session with the team"
        notes = [
            _note("1", "Original", text),
            _note("2", "Copy", text.upper()),
            _note("3", "Other", "completely different content about gardening tools"),
        ]
        patterns = engine.find_patterns(notes)
        duplicate = next(p for p in patterns if p.type == "duplicate")
        assert duplicate.items == ["Copy"]

    def test_short_notes_never_duplicates(self, engine):
        notes = [_note("1", "a", "short"), _note("2", "b", "short")]
        assert all(p.type != "duplicate" for p in engine.find_patterns(notes))

    def test_sequence_needs_three_numbered_titles(self, engine):
        notes = [
            _note("1", "Step 1 setup", "x"),
            _note("2", "Step 2 build", "y"),
        ]
        assert all(p.type != "sequence" for p in engine.find_patterns(notes))

        notes.append(_note("3", "3. Deploy", "z"))
        sequence = next(p for p in engine.find_patterns(notes) if p.type == "sequence")
        assert sequence.items == ["Step 1 setup", "Step 2 build", "3. Deploy"]

    def test_related_groups_share_a_keyword(self, engine):
        notes = [
            _note(str(i), f"Kubernetes {i}", "kubernetes kubernetes cluster") for i in range(4)
        ]
        related = [p for p in engine.find_patterns(notes) if p.type == "related"]
        assert related
        assert related[0].description == 'Notes related to "kubernetes"'
        assert len(related[0].items) == 4
        assert len(related) <= 3
