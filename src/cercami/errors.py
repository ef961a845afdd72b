"""Error taxonomy for corpus loading and index construction.

Every error is raised where it is detected and surfaces unchanged to the CLI,
which logs the message and exits with a non-zero status. Searching never
raises: an unknown term or an empty query is an empty result.
"""


class CercamiError(Exception):
    """Base class for all errors raised by cercami."""


class UsageError(CercamiError):
    """Raised when a required input (corpus path, query) is not supplied."""


class SourceUnavailableError(CercamiError, OSError):
    """Raised when the corpus path cannot be opened for reading."""


class MalformedCorpusError(CercamiError, ValueError):
    """Raised when corpus content does not match the expected document shape."""


class DocumentConflictError(CercamiError, ValueError):
    """Raised when a document id is re-added with a different payload."""
