"""Shared test fixtures and configuration."""

import logging
import os
from pathlib import Path

import pytest

from cercami.domain.model import Document


# Complete test environment that overrides every config value
TEST_ENV = {
    "CERCAMI_POSTINGS_BACKEND": "bitmap",
    "CERCAMI_STEMMER": "snowball",
    "CERCAMI_STORE_DOCUMENTS": "true",
    "CERCAMI_DOCUMENT_TAG": "doc",
    "CERCAMI_TITLE_FIELD": "title",
    "CERCAMI_URL_FIELD": "url",
    "CERCAMI_TEXT_FIELD": "abstract",
    "CERCAMI_LOG_LEVEL": "warning",
    "CERCAMI_LOG_JSON": "false",
    "CERCAMI_LOG_EVERY": "10000",
    "CERCAMI_TRACING_ENABLED": "true",
    "CERCAMI_TRACING_EXPORTER": "none",
    "CERCAMI_SERVICE_NAME": "cercami-test",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset environment variables to the test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler swaps made by configure_logging inside a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


SAMPLE_TEXTS = (
    "The quick brown fox",
    "quick dog runs",
    "brown fox jumps",
)


@pytest.fixture
def sample_documents() -> list[Document]:
    """The three-document corpus used across index and query tests."""
    return [
        Document(
            id=doc_id,
            title=f"Document {doc_id}",
            url=f"https://example.com/doc/{doc_id}",
            text=text,
        )
        for doc_id, text in enumerate(SAMPLE_TEXTS)
    ]


def _render_corpus(entries: list[dict[str, str]], *, root: str = "feed", tag: str = "doc") -> str:
    """Serialize entries into the XML shape read by cercami.corpus."""
    lines = ['<?xml version="1.0" encoding="utf-8"?>', f"<{root}>"]
    for entry in entries:
        lines.append(f"  <{tag}>")
        for name, value in entry.items():
            lines.append(f"    <{name}>{value}</{name}>")
        lines.append(f"  </{tag}>")
    lines.append(f"</{root}>")
    return "\n".join(lines) + "\n"


@pytest.fixture
def render_corpus():
    """Return the helper serializing entries into corpus XML."""
    return _render_corpus


@pytest.fixture
def write_corpus(tmp_path):
    """Factory writing an XML corpus file and returning its path."""

    def _write(content: str, name: str = "corpus.xml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def corpus_path(write_corpus) -> Path:
    """XML corpus holding the three sample documents."""
    entries = [
        {
            "title": f"Document {doc_id}",
            "url": f"https://example.com/doc/{doc_id}",
            "abstract": text,
        }
        for doc_id, text in enumerate(SAMPLE_TEXTS)
    ]
    return write_corpus(_render_corpus(entries))
