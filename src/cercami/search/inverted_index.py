"""In-memory inverted index mapping terms to postings lists.

The index owns its analyzer and every postings list. ``lookup`` returns the
stored postings object itself; callers treat it as read-only and only use the
non-mutating protocol methods (``intersect`` always returns a new object).
"""

from __future__ import annotations

from collections.abc import Iterator

from cercami.domain.model import Document, IndexStats
from cercami.search.analyzers import Analyzer, StandardAnalyzer
from cercami.search.document_store import DocumentStore
from cercami.search.postings import BitmapPostings, PostingsList, SortedArrayPostings, get_postings_factory


class InvertedIndex:
    """Term -> postings mapping built by repeated ``add`` calls."""

    def __init__(
        self,
        *,
        analyzer: Analyzer | None = None,
        postings_backend: str = "bitmap",
        document_store: DocumentStore | None = None,
    ) -> None:
        self.analyzer: Analyzer = analyzer if analyzer is not None else StandardAnalyzer()
        self.postings_backend = postings_backend
        self._postings_factory: type[BitmapPostings] | type[SortedArrayPostings] = get_postings_factory(
            postings_backend
        )
        self.document_store = document_store
        self._postings: dict[str, PostingsList] = {}
        self._doc_ids: set[int] = set()

    def add(self, document: Document) -> None:
        """Index ``document.text`` under ``document.id``.

        Re-adding a document is a no-op for every postings list. The document
        store is written first so a conflicting payload fails before any
        postings change.
        """
        if self.document_store is not None:
            self.document_store.put(document)

        doc_id = document.id
        postings = self._postings
        factory = self._postings_factory
        for term in dict.fromkeys(self.analyzer.normalize(document.text)):
            entry = postings.get(term)
            if entry is None:
                entry = factory()
                postings[term] = entry
            entry.add(doc_id)
        self._doc_ids.add(doc_id)

    def lookup(self, term: str) -> PostingsList | None:
        """Return postings for an already-normalized term, or None if never indexed."""
        return self._postings.get(term)

    def term_count(self) -> int:
        return len(self._postings)

    def document_count(self) -> int:
        return len(self._doc_ids)

    def terms(self) -> Iterator[str]:
        return iter(self._postings)

    def stats(self) -> IndexStats:
        return IndexStats(
            document_count=self.document_count(),
            term_count=self.term_count(),
            postings_backend=self.postings_backend,
        )

    def __contains__(self, term: object) -> bool:
        return term in self._postings

    def __len__(self) -> int:
        return len(self._postings)
