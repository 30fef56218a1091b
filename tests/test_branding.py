import io
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from backoffice.core.config import settings
from backoffice.db.session import Base
from backoffice.crud.restaurants import create_restaurant
from backoffice.services.branding import (
    LogoTooLarge,
    UnsupportedLogoType,
    branding_view,
    delete_logo,
    hex_to_hsl,
    reset_to_defaults,
    store_logo,
    update_branding,
)

from backoffice.models import alert as alert_model  # noqa: F401
from backoffice.models import category as category_model  # noqa: F401
from backoffice.models import inventory as inventory_model  # noqa: F401
from backoffice.models import restaurant as restaurant_model  # noqa: F401


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def restaurant(db_session):
    return create_restaurant(db_session, {"name": "Bistro"}, owner_user_id="alice")


@pytest.fixture()
def assets_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "ASSETS_DIR", tmp_path)
    return tmp_path


def test_hex_to_hsl():
    assert hex_to_hsl("#3B82F6") == "217 91% 60%"
    assert hex_to_hsl("#000000") == "0 0% 0%"
    assert hex_to_hsl("#FFFFFF") == "0 0% 100%"
    with pytest.raises(ValueError):
        hex_to_hsl("blue")


def test_default_branding_view(restaurant):
    view = branding_view(restaurant)

    assert view.settings.primary_color == "#3B82F6"
    assert view.settings.secondary_color == "#1E40AF"
    assert view.settings.font_family == "Inter"
    assert view.theme["--primary"] == "217 91% 60%"
    assert view.theme["--font-family"] == "Inter"
    assert "Playfair Display" in [option.value for option in view.font_options]


def test_update_branding_validates(db_session, restaurant):
    updated = update_branding(db_session, restaurant, {"primary_color": "#ff0000", "font_family": "Poppins"})

    assert updated.primary_color == "#FF0000"
    assert updated.font_family == "Poppins"
    with pytest.raises(ValueError):
        update_branding(db_session, restaurant, {"secondary_color": "red"})
    with pytest.raises(ValueError):
        update_branding(db_session, restaurant, {"font_family": "Comic Sans"})
    with pytest.raises(ValueError):
        update_branding(db_session, restaurant, {"name": " "})


def test_reset_to_defaults(db_session, restaurant):
    update_branding(db_session, restaurant, {"primary_color": "#111111", "font_family": "Roboto"})

    reset = reset_to_defaults(db_session, restaurant)

    assert reset.primary_color == "#3B82F6"
    assert reset.font_family == "Inter"


def test_store_logo_replaces_previous_file(db_session, restaurant, assets_dir):
    store_logo(db_session, restaurant, "brand.png", "image/png", io.BytesIO(b"png-bytes"))
    updated = store_logo(db_session, restaurant, "brand.jpg", "image/jpeg", io.BytesIO(b"jpg-bytes"))

    folder = assets_dir / str(restaurant.id)
    assert updated.logo_url == f"/assets/{restaurant.id}/logo.jpg"
    assert sorted(path.name for path in folder.iterdir()) == ["logo.jpg"]
    assert (folder / "logo.jpg").read_bytes() == b"jpg-bytes"


def test_store_logo_rejects_non_images(db_session, restaurant, assets_dir):
    with pytest.raises(UnsupportedLogoType):
        store_logo(db_session, restaurant, "notes.pdf", "application/pdf", io.BytesIO(b"%PDF"))
    assert restaurant.logo_url is None


def test_store_logo_rejects_large_files(db_session, restaurant, assets_dir):
    with pytest.raises(LogoTooLarge):
        store_logo(db_session, restaurant, "big.png", "image/png", io.BytesIO(b"x" * 11), max_bytes=10)
    assert not (assets_dir / str(restaurant.id)).exists()


def test_delete_logo(db_session, restaurant, assets_dir):
    store_logo(db_session, restaurant, "brand.png", "image/png", io.BytesIO(b"png-bytes"))

    cleared = delete_logo(db_session, restaurant)

    assert cleared.logo_url is None
    assert list((assets_dir / str(restaurant.id)).iterdir()) == []
