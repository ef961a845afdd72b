"""
Inverted index and conjunctive query package.

- analyzers: Tokenizer and filters (lowercase, punctuation, stopwords, stemming)
- postings: Bitmap and sorted-array postings behind one protocol
- inverted_index: Term -> postings mapping
- document_store: Id -> document payload for rendering
- query_engine: AND queries by postings intersection
- engine: Staged build + publish facade used by the CLI
"""
