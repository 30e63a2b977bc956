"""Unit tests for RetrievalIndex."""
import pytest

from pdf_notebook.models.passage import Passage, RetrievedHit
from pdf_notebook.services.retrieval_index import RetrievalIndex


class TestRetrievalIndex:
    """Test suite for RetrievalIndex class."""

    @pytest.fixture
    def passages(self):
        """Passages from a small three-page document."""
        return [
            Passage(page=1, text="Cats are mammals. Dogs are mammals too."),
            Passage(page=2, text="The quarterly revenue grew by twelve percent."),
            Passage(page=3, text="Photosynthesis converts light into chemical energy."),
        ]

    @pytest.fixture
    def index(self, passages):
        """Build an index over the fixture passages."""
        return RetrievalIndex.build(passages)

    def test_build(self, index, passages):
        """Test the index keeps every passage in order."""
        assert len(index) == 3
        assert not index.is_empty
        assert index.passages == tuple(passages)
        assert index.threshold == 0.4

    def test_invalid_threshold_raises_error(self, passages):
        """Test thresholds outside [0, 1] are rejected."""
        with pytest.raises(ValueError, match="threshold"):
            RetrievalIndex.build(passages, threshold=1.5)

    def test_exact_keyword_match(self, index):
        """Test a keyword present in one passage returns that passage first."""
        hits = index.search("mammals", top_k=3)

        assert len(hits) == 1
        assert hits[0] == RetrievedHit(page=1, text="Cats are mammals. Dogs are mammals too.", score=0.0)

    def test_case_insensitive(self, index):
        """Test matching ignores case."""
        hits = index.search("PHOTOSYNTHESIS", top_k=3)

        assert hits[0].page == 3
        assert hits[0].score == 0.0

    def test_typo_tolerance(self, index):
        """Test a misspelled keyword still matches."""
        hits = index.search("revenoo", top_k=3)

        assert hits
        assert hits[0].page == 2
        assert 0.0 < hits[0].score <= 0.4

    def test_unrelated_query_returns_nothing(self, index):
        """Test passages beyond the threshold are filtered out."""
        assert index.search("xyzzy qwv", top_k=3) == []

    def test_blank_query_returns_nothing(self, index):
        """Test blank queries return no hits."""
        assert index.search("", top_k=3) == []
        assert index.search("   ", top_k=3) == []

    def test_top_k_bounds_results(self):
        """Test search never returns more than top_k hits."""
        passages = [Passage(page=i, text=f"Mammals fact number {i}.") for i in range(1, 11)]
        index = RetrievalIndex.build(passages)

        assert len(index.search("mammals", top_k=3)) == 3
        assert len(index.search("mammals", top_k=1)) == 1
        assert index.search("mammals", top_k=0) == []

    def test_fewer_hits_than_top_k(self, index):
        """Test fewer hits are returned when few passages clear the threshold."""
        assert len(index.search("mammals", top_k=10)) == 1

    def test_empty_index_always_returns_nothing(self):
        """Test an index built from zero passages returns no hits."""
        index = RetrievalIndex.build([])

        assert index.is_empty
        assert index.search("mammals", top_k=4) == []
        assert index.search("anything at all", top_k=4) == []

    def test_hits_sorted_by_ascending_score(self):
        """Test better matches come first."""
        passages = [
            Passage(page=1, text="The mamal population is large."),
            Passage(page=2, text="Every mammal breathes air."),
        ]
        index = RetrievalIndex.build(passages)

        hits = index.search("mammal", top_k=2)

        assert [h.page for h in hits] == [2, 1]
        assert hits[0].score < hits[1].score

    def test_equal_scores_keep_passage_order(self):
        """Test ties are broken by passage position."""
        passages = [
            Passage(page=5, text="Budget approved."),
            Passage(page=2, text="Budget approved."),
        ]
        index = RetrievalIndex.build(passages)

        hits = index.search("budget", top_k=2)

        assert [h.page for h in hits] == [5, 2]

    def test_page_number_is_not_indexed(self):
        """Test the page number is metadata only."""
        index = RetrievalIndex.build([Passage(page=42, text="Nothing numeric here.")])

        assert index.search("42", top_k=1) == []

    def test_strict_threshold(self):
        """Test a zero threshold only admits exact substring matches."""
        index = RetrievalIndex.build([Passage(page=1, text="Revenue grew.")], threshold=0.0)

        assert index.search("revenu", top_k=1)[0].score == 0.0
        assert index.search("revenuw", top_k=1) == []

    def test_short_passages_do_not_match_inside_query(self):
        """Test tiny passages are not matched as substrings of a longer question."""
        index = RetrievalIndex.build([
            Passage(page=1, text="Cats are mammals. Dogs are mammals too."),
            Passage(page=2, text="I."),
            Passage(page=3, text="Notes"),
        ])

        hits = index.search("which animals are mammals", top_k=4)

        assert hits[0].page == 1
        assert [h.page for h in hits] == [1]
        assert all(h.page not in (2, 3) for h in index.search("what do the notes say about dogs", top_k=4))

    def test_short_passage_still_matches_itself(self):
        """Test a short passage is found by a query equal to its text."""
        index = RetrievalIndex.build([Passage(page=3, text="Notes")])

        assert index.search("notes", top_k=1) == [RetrievedHit(page=3, text="Notes", score=0.0)]

    def test_reordered_query_tokens(self):
        """Test a passage holding every query token matches regardless of order."""
        index = RetrievalIndex.build([Passage(page=1, text="Dogs are loyal companions.")])

        hits = index.search("companions loyal dogs", top_k=1)

        assert hits[0].score == 0.0
