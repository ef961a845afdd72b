"""Streaming reader for XML document collections.

The expected shape is a root container with repeated document entries, each
holding a title, a url and a body element, e.g. the Wikipedia abstract dump::

    <feed>
      <doc>
        <title>Wikipedia: Anarchism</title>
        <url>https://en.wikipedia.org/wiki/Anarchism</url>
        <abstract>Anarchism is a political philosophy ...</abstract>
        <links>...</links>
      </doc>
    </feed>

Document ids are not read from the source; each entry gets its zero-based
position in encounter order. Other children of the root and extra children of
an entry are ignored.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
import os
from pathlib import Path
from typing import BinaryIO

from lxml import etree  # type: ignore[import-untyped]

from cercami.config import Settings
from cercami.domain.model import Document
from cercami.errors import MalformedCorpusError, SourceUnavailableError


logger = logging.getLogger(__name__)


def iter_corpus(path: str | os.PathLike[str], settings: Settings | None = None) -> Iterator[Document]:
    """Yield documents from the corpus at ``path`` as they are parsed.

    The file is opened on the first ``next()`` call. Documents already
    yielded stay valid if a later entry turns out to be malformed; callers
    that need all-or-nothing semantics consume into a staging structure.

    Raises:
        SourceUnavailableError: the path cannot be opened for reading
        MalformedCorpusError: the content is not well-formed XML or an entry
            lacks one of the required fields
    """
    active = settings or Settings()
    source = Path(path)
    try:
        handle = source.open("rb")
    except OSError as exc:
        raise SourceUnavailableError(f"Cannot open corpus {source}: {exc.strerror or exc}") from exc

    with handle:
        yield from _iter_documents(handle, source, active)


def _iter_documents(handle: BinaryIO, source: Path, settings: Settings) -> Iterator[Document]:
    context = etree.iterparse(
        handle,
        events=("start", "end"),
        resolve_entities=False,
        no_network=True,
    )
    root = None
    depth = 0
    ordinal = 0
    try:
        for event, elem in context:
            if event == "start":
                if root is None:
                    root = elem
                depth += 1
                continue
            depth -= 1
            if depth != 1:
                continue
            if etree.QName(elem).localname != settings.document_tag:
                continue

            yield _to_document(elem, ordinal, settings)
            ordinal += 1
            if ordinal % settings.log_every == 0:
                logger.debug("Read %d documents from %s", ordinal, source)

            # Drop finished entries so memory stays flat on large dumps.
            elem.clear()
            while elem.getprevious() is not None:
                del root[0]
    except etree.XMLSyntaxError as exc:
        raise MalformedCorpusError(f"Corpus {source} is not well-formed XML after {ordinal} documents: {exc}") from exc

    if root is None:
        raise MalformedCorpusError(f"Corpus {source} has no root element")
    logger.info("Read %d documents from %s", ordinal, source)


def _to_document(elem: etree._Element, ordinal: int, settings: Settings) -> Document:
    values: list[str] = []
    for field in settings.corpus_fields():
        child = elem.find(f"{{*}}{field}")
        if child is None:
            raise MalformedCorpusError(f"Document {ordinal} is missing a <{field}> element")
        values.append("".join(child.itertext()).strip())
    title, url, text = values
    return Document(id=ordinal, title=title, url=url, text=text)
