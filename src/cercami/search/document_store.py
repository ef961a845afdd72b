"""Companion store mapping document ids back to their payload for rendering."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from cercami.domain.model import Document
from cercami.errors import DocumentConflictError


class DocumentStore:
    """In-memory id -> Document mapping, populated in lock-step with the index."""

    def __init__(self) -> None:
        self._documents: dict[int, Document] = {}

    def put(self, document: Document) -> None:
        existing = self._documents.get(document.id)
        if existing is None:
            self._documents[document.id] = document
            return
        if existing != document:
            raise DocumentConflictError(f"Document id {document.id} already holds a different payload")

    def get(self, doc_id: int) -> Document | None:
        return self._documents.get(doc_id)

    def render(self, doc_ids: Iterable[int]) -> list[Document]:
        """Resolve ids to documents in the given order, skipping unknown ids."""
        documents = self._documents
        return [documents[doc_id] for doc_id in doc_ids if doc_id in documents]

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def __iter__(self) -> Iterator[Document]:
        for doc_id in sorted(self._documents):
            yield self._documents[doc_id]
