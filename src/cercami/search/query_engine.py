"""Conjunctive (AND) query evaluation over an inverted index."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from cercami.search.inverted_index import InvertedIndex
from cercami.search.postings import PostingsList


logger = logging.getLogger(__name__)


def intersect(postings: Sequence[PostingsList]) -> PostingsList | None:
    """Fold pairwise intersection over ``postings``.

    Returns None for an empty sequence. Stops early once the accumulator is
    empty since no later intersection can grow it.
    """
    if not postings:
        return None
    accumulator = postings[0]
    for other in postings[1:]:
        if accumulator.cardinality() == 0:
            break
        accumulator = accumulator.intersect(other)
    return accumulator


class QueryEngine:
    """Evaluates queries against an index using the index's own analyzer."""

    def __init__(self, index: InvertedIndex) -> None:
        self.index = index

    def terms(self, query: str) -> list[str]:
        """Return the distinct normalized terms of ``query`` in query order."""
        return list(dict.fromkeys(self.index.analyzer.normalize(query)))

    def search(self, query: str) -> list[int]:
        """Return ascending ids of documents containing every query term."""
        terms = self.terms(query)
        if not terms:
            logger.debug("Query %r normalized to no terms", query)
            return []

        postings: list[PostingsList] = []
        for term in terms:
            entry = self.index.lookup(term)
            if entry is None:
                logger.debug("Query %r: term %r not indexed", query, term)
                return []
            postings.append(entry)

        # Rarest term first.
        postings.sort(key=lambda entry: entry.cardinality())
        result = intersect(postings)
        doc_ids = list(result.to_ordered_ids()) if result is not None else []
        logger.debug("Query %r matched %d documents over %d terms", query, len(doc_ids), len(terms))
        return doc_ids
