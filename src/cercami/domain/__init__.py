"""Domain layer - immutable value objects shared by the index and the CLI.

- Document: one corpus entry with its ordinal id
- IndexStats: counters describing a built index
- SearchReport: the outcome of one query, as rendered by the CLI
"""

from cercami.domain.model import MAX_DOC_ID, Document, IndexStats, SearchReport


__all__ = [
    "MAX_DOC_ID",
    "Document",
    "IndexStats",
    "SearchReport",
]
