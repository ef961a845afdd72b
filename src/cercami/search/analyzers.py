"""Analyzer utilities that turn raw text into index terms.

The design mirrors Whoosh's composable tokenizer/filter pipeline. The same
analyzer instance must be used for indexing and for querying; the inverted
index owns it and the query engine reads it from there.

Normalization order: lowercase, whitespace split, strip non-alphanumerics,
drop stopwords, stem.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol

from nltk.stem import PorterStemmer
from nltk.stem.snowball import SnowballStemmer


@dataclass(slots=True)
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int

    def copy_with(self, **updates: object) -> Token:
        data = {"text": self.text, "position": self.position}
        data.update(updates)
        return Token(**data)  # type: ignore[arg-type]


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str) -> list[Token]:  # pragma: no cover - interface definition
        ...

    def normalize(self, text: str) -> list[str]:  # pragma: no cover - interface definition
        ...


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class Stemmer(Protocol):
    """Reduces a single lowercase token to its root form."""

    def stem(self, token: str) -> str:  # pragma: no cover - interface definition
        ...


class WhitespaceTokenizer:
    """Splits text on runs of whitespace."""

    _PATTERN = re.compile(r"\S+", re.UNICODE)

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self._PATTERN.finditer(text)):
            yield Token(text=match.group(0), position=position)


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield token.copy_with(text=token.text.lower())


class AlphanumericFilter:
    """Strips every non-alphanumeric character and drops tokens left empty."""

    _NON_ALNUM = re.compile(r"[\W_]+", re.UNICODE)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stripped = self._NON_ALNUM.sub("", token.text)
            if not stripped:
                continue
            if stripped == token.text:
                yield token
            else:
                yield token.copy_with(text=stripped)


ENGLISH_STOPWORDS: frozenset[str] = frozenset(
    {
        "i", "me", "my", "myself", "we", "our", "ours", "ourselves", "you", "your",
        "yours", "yourself", "yourselves", "he", "him", "his", "himself", "she", "her",
        "hers", "herself", "it", "its", "itself", "they", "them", "their", "theirs",
        "themselves", "what", "which", "who", "whom", "this", "that", "these", "those",
        "am", "is", "are", "was", "were", "be", "been", "being", "have", "has", "had",
        "having", "do", "does", "did", "doing", "a", "an", "the", "and", "but", "if",
        "or", "because", "as", "until", "while", "of", "at", "by", "for", "with",
        "about", "against", "between", "into", "through", "during", "before", "after",
        "above", "below", "to", "from", "up", "down", "in", "out", "on", "off", "over",
        "under", "again", "further", "then", "once", "here", "there", "when", "where",
        "why", "how", "all", "any", "both", "each", "few", "more", "most", "other",
        "some", "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
        "very", "s", "t", "can", "will", "just", "don", "should", "now",
    }
)  # fmt: skip


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Iterable[str] | None = None) -> None:
        if stopwords is None:
            self.stopwords = ENGLISH_STOPWORDS
        else:
            self.stopwords = frozenset(word.lower() for word in stopwords)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text not in self.stopwords:
                yield token


class IdentityStemmer:
    """Stemmer that leaves tokens untouched."""

    def stem(self, token: str) -> str:
        return token


_STEMMER_FACTORIES: dict[str, Callable[[], Stemmer]] = {
    "snowball": lambda: SnowballStemmer("english"),
    "porter": lambda: PorterStemmer(),
    "none": lambda: IdentityStemmer(),
}


def get_stemmer(name: str | None) -> Stemmer:
    """Return stemmer by name, defaulting to English Snowball."""

    if name is None:
        return _STEMMER_FACTORIES["snowball"]()
    normalized = name.lower()
    if normalized not in _STEMMER_FACTORIES:
        msg = f"Unknown stemmer '{name}'. Available: {sorted(_STEMMER_FACTORIES)}"
        raise ValueError(msg)
    return _STEMMER_FACTORIES[normalized]()


class StemFilter:
    """Replaces each token with its stem, dropping anything stemmed to nothing."""

    def __init__(self, stemmer: Stemmer | None = None) -> None:
        self.stemmer = stemmer if stemmer is not None else get_stemmer(None)

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            stemmed = self.stemmer.stem(token.text)
            if stemmed:
                yield token.copy_with(text=stemmed)


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = list(stream)
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens


class StandardAnalyzer:
    """Default analyzer: lowercase, strip punctuation, drop stopwords, stem."""

    def __init__(
        self,
        *,
        stopwords: Iterable[str] | None = None,
        stemmer: Stemmer | str | None = None,
    ) -> None:
        if stemmer is None or isinstance(stemmer, str):
            stemmer = get_stemmer(stemmer)
        self.stemmer = stemmer
        filters: list[TokenFilter] = [
            LowercaseFilter(),
            AlphanumericFilter(),
            StopFilter(stopwords),
            StemFilter(stemmer),
        ]
        self.pipeline = AnalyzerPipeline(WhitespaceTokenizer(), filters)

    def __call__(self, text: str) -> list[Token]:
        if not text:
            return []
        return self.pipeline(text)

    def normalize(self, text: str) -> list[str]:
        """Return the ordered index terms for ``text``; duplicates are kept."""
        return [token.text for token in self(text)]


_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    "default": lambda: StandardAnalyzer(),
    "english": lambda: StandardAnalyzer(),
    "english-porter": lambda: StandardAnalyzer(stemmer="porter"),
    "english-nostem": lambda: StandardAnalyzer(stemmer="none"),
}


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the standard analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {sorted(_ANALYZER_FACTORIES)}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()


_default_analyzer: dict[str, Analyzer | None] = {"analyzer": None}


def normalize(text: str) -> list[str]:
    """Normalize ``text`` with the shared default analyzer."""
    analyzer = _default_analyzer["analyzer"]
    if analyzer is None:
        analyzer = get_analyzer(None)
        _default_analyzer["analyzer"] = analyzer
    return analyzer.normalize(text)
