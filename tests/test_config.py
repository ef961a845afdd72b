"""Unit tests for the config module."""

import os
from unittest.mock import patch

from pydantic import ValidationError
import pytest

from cercami.config import Settings


pytestmark = pytest.mark.unit


class TestConfig:
    """Test configuration loading and validation."""

    def test_defaults_from_test_environment(self):
        settings = Settings()
        assert settings.postings_backend == "bitmap"
        assert settings.stemmer == "snowball"
        assert settings.store_documents is True
        assert settings.corpus_fields() == ("title", "url", "abstract")
        assert settings.log_level == "warning"

    @patch.dict(os.environ, {"CERCAMI_POSTINGS_BACKEND": "sorted-array", "CERCAMI_STEMMER": "porter"}, clear=False)
    def test_environment_overrides(self):
        settings = Settings()
        assert settings.postings_backend == "sorted-array"
        assert settings.stemmer == "porter"

    @patch.dict(os.environ, {"CERCAMI_POSTINGS_BACKEND": "roaring"}, clear=False)
    def test_unknown_backend_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings()

    def test_log_level_is_normalized(self):
        assert Settings(log_level="DEBUG").log_level == "debug"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            Settings(log_level="chatty")

    def test_log_every_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(log_every=0)

    def test_field_names_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            Settings(text_field="")

    def test_tracing_is_opt_in(self, monkeypatch):
        monkeypatch.delenv("CERCAMI_TRACING_ENABLED")
        monkeypatch.delenv("CERCAMI_TRACING_EXPORTER")
        settings = Settings(_env_file=None)
        assert settings.tracing_enabled is False
        assert settings.tracing_exporter == "console"

    def test_unknown_trace_exporter_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(tracing_exporter="otlp")
