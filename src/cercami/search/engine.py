"""Search engine facade: staged index builds, queries, and rendering.

``build`` always indexes into a fresh staging index and document store and
publishes them only after the whole document iterable has been consumed. A
corpus that fails halfway leaves the previously published state untouched.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import os

from cercami.config import Settings
from cercami.corpus import iter_corpus
from cercami.domain.model import Document, IndexStats
from cercami.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_DOCUMENT_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    track_latency,
)
from cercami.observability.tracing import traced
from cercami.search.analyzers import Analyzer, StandardAnalyzer
from cercami.search.document_store import DocumentStore
from cercami.search.inverted_index import InvertedIndex
from cercami.search.query_engine import QueryEngine


logger = logging.getLogger(__name__)


class SearchEngine:
    """Owns the published index, its document store, and the query engine."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.analyzer: Analyzer = StandardAnalyzer(stemmer=self.settings.stemmer)
        self.index, self.documents = self._new_staging()
        self.query_engine = QueryEngine(self.index)

    @classmethod
    def from_corpus(cls, path: str | os.PathLike[str], settings: Settings | None = None) -> SearchEngine:
        """Build an engine from the XML corpus at ``path``."""
        engine = cls(settings)
        engine.build(iter_corpus(path, engine.settings))
        return engine

    def _new_staging(self) -> tuple[InvertedIndex, DocumentStore | None]:
        documents = DocumentStore() if self.settings.store_documents else None
        index = InvertedIndex(
            analyzer=self.analyzer,
            postings_backend=self.settings.postings_backend,
            document_store=documents,
        )
        return index, documents

    def build(self, documents: Iterable[Document]) -> IndexStats:
        """Index ``documents`` and publish the result atomically."""
        backend = self.settings.postings_backend
        with traced("index.build", {"index.backend": backend}) as span:
            with track_latency(INDEX_BUILD_LATENCY, backend=backend):
                staging_index, staging_documents = self._new_staging()
                for document in documents:
                    staging_index.add(document)

            self.index = staging_index
            self.documents = staging_documents
            self.query_engine = QueryEngine(staging_index)

            stats = staging_index.stats()
            INDEX_TERM_COUNT.labels(backend=backend).set(stats.term_count)
            INDEX_DOCUMENT_COUNT.labels(backend=backend).set(stats.document_count)
            if span is not None:
                span.set_attribute("index.documents", stats.document_count)
                span.set_attribute("index.terms", stats.term_count)

        logger.info(
            "Index published: %d documents, %d terms (%s postings)",
            stats.document_count,
            stats.term_count,
            backend,
        )
        return stats

    def search(self, query: str) -> list[int]:
        """Return ascending ids of documents matching every query term."""
        backend = self.settings.postings_backend
        with traced("index.search", {"index.backend": backend}) as span:
            with track_latency(SEARCH_LATENCY, backend=backend):
                doc_ids = self.query_engine.search(query)
            if span is not None:
                span.set_attribute("search.results", len(doc_ids))
        SEARCH_COUNT.labels(backend=backend, outcome="hit" if doc_ids else "empty").inc()
        return doc_ids

    def normalize(self, text: str) -> list[str]:
        return self.analyzer.normalize(text)

    def render(self, doc_ids: Iterable[int]) -> list[Document]:
        """Resolve ids to documents; empty when documents are not stored."""
        if self.documents is None:
            return []
        return self.documents.render(doc_ids)

    def stats(self) -> IndexStats:
        return self.index.stats()
