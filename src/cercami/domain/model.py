"""Domain models for indexed documents and search outcomes.

Value objects are immutable (frozen=True) so a published index can be shared
by concurrent readers without copying.
"""

from pydantic import BaseModel, ConfigDict, Field


MAX_DOC_ID = 2**32 - 1


class Document(BaseModel):
    """A corpus entry.

    ``id`` is the zero-based ordinal position of the entry in the corpus it
    was read from. ``text`` is the body that gets indexed; title and url are
    kept only for rendering.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, le=MAX_DOC_ID)
    title: str = ""
    url: str = ""
    text: str = ""


class IndexStats(BaseModel):
    """Counters describing a built index."""

    model_config = ConfigDict(frozen=True)

    document_count: int = Field(default=0, ge=0)
    term_count: int = Field(default=0, ge=0)
    postings_backend: str = "bitmap"


class SearchReport(BaseModel):
    """Outcome of a single query against a built index.

    ``doc_ids`` is strictly ascending. ``documents`` is only populated when the
    caller asked for rendered hits and a document store is available.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    terms: list[str] = Field(default_factory=list)
    doc_ids: list[int] = Field(default_factory=list)
    documents: list[Document] | None = None
    stats: IndexStats = Field(default_factory=IndexStats)
    build_seconds: float = Field(default=0.0, ge=0.0)
    search_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def result_count(self) -> int:
        return len(self.doc_ids)
