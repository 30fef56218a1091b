import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from backoffice.core.config import AppSettings


def test_settings_read_environment(monkeypatch, tmp_path):
    for name in ("API_KEY", "ASSETS_DIR", "DATABASE_URL", "DB_URL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("API_TOKEN", "secret")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, ,https://b.example")
    monkeypatch.setenv("DEFAULT_MARKUP", "3")

    settings = AppSettings(_env_file=None)

    assert settings.API_KEY == "secret"
    assert settings.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]
    assert settings.DEFAULT_MARKUP == Decimal("3")
    assert settings.assets_dir == tmp_path / "assets"
    assert settings.db_url == f"sqlite:///{tmp_path / 'backoffice.db'}"


def test_settings_carry_only_used_fields(monkeypatch):
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9000")

    settings = AppSettings(_env_file=None)

    for name in ("BASE_DIR", "HOST", "PORT"):
        assert name not in AppSettings.model_fields
        assert not hasattr(settings, name)


def test_non_positive_default_markup_is_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_MARKUP", "0")

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None)
