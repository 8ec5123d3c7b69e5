"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from parstock.config.settings import (
    ReconciliationSettings,
    Settings,
    StorageSettings,
    SuggestSettings,
    get_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestDefaults:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("RECON_MODE", raising=False)
        settings = Settings(_env_file=None)

        assert settings.recon.mode == "local"
        assert settings.suggest.default_par_if_missing == 6
        assert settings.suggest.round_to_pack is True
        assert settings.variance.band_pct == 1.5
        assert settings.variance.include_uncounted is True
        assert settings.log_format == "auto"

    def test_db_path_joins_dir_and_name(self):
        storage = StorageSettings(data_dir=Path("/tmp/ps"), db_name="x.db")
        assert storage.db_path == Path("/tmp/ps/x.db")


class TestEnvironment:
    def test_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("RECON_MODE", "remote")
        monkeypatch.setenv("RECON_REMOTE_URL", "http://recon.internal:9000/")
        monkeypatch.setenv("SUGGEST_LOCK_RETRIES", "5")
        monkeypatch.setenv("VARIANCE_INCLUDE_UNCOUNTED", "false")

        settings = Settings(_env_file=None)

        assert settings.recon.mode == "remote"
        assert settings.recon.remote_url == "http://recon.internal:9000"
        assert settings.suggest.lock_retries == 5
        assert settings.variance.include_uncounted is False

    def test_get_settings_is_cached_until_reset(self, monkeypatch: pytest.MonkeyPatch):
        first = get_settings()
        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first


class TestBounds:
    def test_unknown_recon_mode(self):
        with pytest.raises(ValidationError):
            ReconciliationSettings(mode="hybrid")

    def test_parser_confidence_default_within_unit_interval(self):
        with pytest.raises(ValidationError):
            ReconciliationSettings(parser_confidence_default=1.5)

    def test_negative_tolerance(self):
        with pytest.raises(ValidationError):
            ReconciliationSettings(price_tolerance=-0.1)

    def test_lock_retries_at_least_one(self):
        with pytest.raises(ValidationError):
            SuggestSettings(lock_retries=0)

    def test_pool_size_at_least_one(self):
        with pytest.raises(ValidationError):
            StorageSettings(pool_size=0)
