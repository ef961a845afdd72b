"""Unit tests for the search engine facade."""

from prometheus_client import REGISTRY
import pytest

from cercami.config import Settings
from cercami.domain.model import Document
from cercami.errors import MalformedCorpusError, SourceUnavailableError
from cercami.search.engine import SearchEngine


pytestmark = pytest.mark.unit


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.fixture
def engine(sample_documents):
    built = SearchEngine()
    built.build(sample_documents)
    return built


def test_build_returns_stats(sample_documents):
    stats = SearchEngine().build(sample_documents)
    assert stats.document_count == 3
    assert stats.term_count == 6
    assert stats.postings_backend == "bitmap"


def test_end_to_end_queries(engine):
    assert engine.search("quick fox") == [0]
    assert engine.search("elephant") == []
    assert engine.search("brown") == [0, 2]


def test_render_resolves_documents(engine, sample_documents):
    assert engine.render(engine.search("brown")) == [sample_documents[0], sample_documents[2]]


def test_normalize_uses_engine_analyzer(engine):
    assert engine.normalize("The Running Foxes") == engine.index.analyzer.normalize("running foxes")


def test_empty_engine_matches_nothing():
    engine = SearchEngine()
    assert engine.search("fox") == []
    assert engine.stats().document_count == 0


def test_failed_build_keeps_published_index(engine):
    def broken_corpus():
        yield Document(id=0, text="elephant")
        raise MalformedCorpusError("Document 1 is missing a <abstract> element")

    with pytest.raises(MalformedCorpusError):
        engine.build(broken_corpus())

    assert engine.search("elephant") == []
    assert engine.search("quick fox") == [0]
    assert engine.stats().document_count == 3


def test_rebuild_replaces_previous_index(engine):
    engine.build([Document(id=0, text="elephant parade")])
    assert engine.search("elephant") == [0]
    assert engine.search("fox") == []


def test_settings_select_backend_and_stemmer(sample_documents):
    engine = SearchEngine(Settings(postings_backend="sorted-array", stemmer="none"))
    engine.build(sample_documents)
    assert engine.stats().postings_backend == "sorted-array"
    assert engine.search("runs") == [1]
    assert engine.search("run") == []


def test_documents_can_be_disabled(sample_documents):
    engine = SearchEngine(Settings(store_documents=False))
    engine.build(sample_documents)
    assert engine.documents is None
    assert engine.search("fox") == [0, 2]
    assert engine.render([0, 2]) == []


def test_from_corpus(corpus_path):
    engine = SearchEngine.from_corpus(corpus_path)
    assert engine.search("quick fox") == [0]
    assert engine.render([1])[0].text == "quick dog runs"


def test_from_corpus_missing_file(tmp_path):
    with pytest.raises(SourceUnavailableError):
        SearchEngine.from_corpus(tmp_path / "nope.xml")


def test_search_outcomes_are_counted(engine):
    hit_labels = {"backend": "bitmap", "outcome": "hit"}
    empty_labels = {"backend": "bitmap", "outcome": "empty"}
    hits = _sample("cercami_searches_total", hit_labels)
    empties = _sample("cercami_searches_total", empty_labels)

    engine.search("fox")
    engine.search("the of")

    assert _sample("cercami_searches_total", hit_labels) == hits + 1
    assert _sample("cercami_searches_total", empty_labels) == empties + 1


def test_build_publishes_gauges(sample_documents):
    SearchEngine(Settings(postings_backend="sorted-array")).build(sample_documents)
    assert _sample("cercami_index_term_count", {"backend": "sorted-array"}) == 6
    assert _sample("cercami_index_document_count", {"backend": "sorted-array"}) == 3
