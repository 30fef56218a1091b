"""Visual branding: colors, font and logo for a restaurant.

Logos are stored on local disk under ``settings.assets_dir/<restaurant_id>/``
and served by the ``/assets`` static mount.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from typing import IO, Any

from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud.restaurants import update_restaurant
from ..models.restaurant import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    Restaurant,
)
from ..schemas.branding import BrandingSettings, BrandingView, FontOption

logger = logging.getLogger(__name__)

FONT_OPTIONS: tuple[FontOption, ...] = (
    FontOption(value="Inter", label="Inter (Modern)"),
    FontOption(value="Roboto", label="Roboto (Clean)"),
    FontOption(value="Poppins", label="Poppins (Friendly)"),
    FontOption(value="Playfair Display", label="Playfair Display (Elegant)"),
    FontOption(value="Montserrat", label="Montserrat (Bold)"),
    FontOption(value="Open Sans", label="Open Sans (Classic)"),
)
DEFAULT_BRANDING = {
    "primary_color": DEFAULT_PRIMARY_COLOR,
    "secondary_color": DEFAULT_SECONDARY_COLOR,
    "font_family": DEFAULT_FONT_FAMILY,
}
ASSETS_URL_PREFIX = "/assets"
LOGO_STEM = "logo"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class UnsupportedLogoType(ValueError):
    pass


class LogoTooLarge(ValueError):
    pass


def hex_to_hsl(color: str) -> str:
    """Convert ``#RRGGBB`` to the ``"H S% L%"`` triple used by CSS variables."""

    if not _HEX_COLOR.match(color or ""):
        raise ValueError(f"invalid color: {color!r}")
    r, g, b = (int(color[i : i + 2], 16) / 255 for i in (1, 3, 5))
    high, low = max(r, g, b), min(r, g, b)
    lightness = (high + low) / 2
    hue = saturation = 0.0
    if high != low:
        delta = high - low
        saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r:
            hue = (g - b) / delta + (6 if g < b else 0)
        elif high == g:
            hue = (b - r) / delta + 2
        else:
            hue = (r - g) / delta + 4
        hue /= 6
    return f"{round(hue * 360)} {round(saturation * 100)}% {round(lightness * 100)}%"


def theme_variables(branding: BrandingSettings) -> dict[str, str]:
    return {
        "--primary": hex_to_hsl(branding.primary_color),
        "--secondary": hex_to_hsl(branding.secondary_color),
        "--font-family": branding.font_family,
    }


def branding_view(restaurant: Restaurant) -> BrandingView:
    current = BrandingSettings.model_validate(restaurant)
    return BrandingView(settings=current, theme=theme_variables(current), font_options=list(FONT_OPTIONS))


def _clean_updates(payload: dict[str, Any]) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    if "name" in payload:
        name = (payload.get("name") or "").strip()
        if not name:
            raise ValueError("name is required")
        updates["name"] = name
    for field in ("primary_color", "secondary_color"):
        if field in payload:
            value = (payload.get(field) or "").strip()
            if not _HEX_COLOR.match(value):
                raise ValueError(f"{field} must be a #RRGGBB color")
            updates[field] = value.upper()
    if "font_family" in payload:
        font = (payload.get("font_family") or "").strip()
        if font not in {option.value for option in FONT_OPTIONS}:
            raise ValueError(f"unsupported font_family: {font!r}")
        updates["font_family"] = font
    return updates


def update_branding(db: Session, restaurant: Restaurant, payload: dict[str, Any]) -> Restaurant:
    updates = _clean_updates(payload)
    if not updates:
        return restaurant
    return update_restaurant(db, restaurant, updates)


def reset_to_defaults(db: Session, restaurant: Restaurant) -> Restaurant:
    return update_restaurant(db, restaurant, dict(DEFAULT_BRANDING))


def _logo_dir(restaurant_id: int, *, ensure: bool = False) -> Path:
    path = settings.assets_dir / str(restaurant_id)
    if ensure:
        path.mkdir(parents=True, exist_ok=True)
    return path


def _remove_logo_files(restaurant_id: int) -> None:
    directory = _logo_dir(restaurant_id)
    if not directory.exists():
        return
    for existing in directory.glob(f"{LOGO_STEM}.*"):
        existing.unlink(missing_ok=True)


def _logo_extension(filename: str | None, content_type: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if suffix:
        return suffix
    return mimetypes.guess_extension(content_type) or ".img"


def store_logo(
    db: Session,
    restaurant: Restaurant,
    filename: str | None,
    content_type: str | None,
    file_data: IO[bytes],
    max_bytes: int | None = None,
) -> Restaurant:
    """Validate and save a logo image, replacing any previous one."""

    max_bytes = settings.LOGO_MAX_BYTES if max_bytes is None else max_bytes
    content_type = (content_type or "").lower()
    if not content_type.startswith("image/"):
        raise UnsupportedLogoType("Only image files can be used as a logo")
    try:
        file_data.seek(0)
    except (AttributeError, OSError):
        pass
    # Read one byte past the limit so oversize uploads are detected without a size header.
    data = file_data.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise LogoTooLarge(f"Logo must be at most {max_bytes // (1024 * 1024)}MB")

    _remove_logo_files(restaurant.id)
    storage_name = f"{LOGO_STEM}{_logo_extension(filename, content_type)}"
    dest = _logo_dir(restaurant.id, ensure=True) / storage_name
    with dest.open("wb") as buffer:
        buffer.write(data)
    logger.info(
        "branding.logo_stored",
        extra={"extra_data": {"restaurant_id": restaurant.id, "bytes": len(data), "content_type": content_type}},
    )
    url = f"{ASSETS_URL_PREFIX}/{restaurant.id}/{storage_name}"
    return update_restaurant(db, restaurant, {"logo_url": url})


def delete_logo(db: Session, restaurant: Restaurant) -> Restaurant:
    if not restaurant.logo_url:
        return restaurant
    _remove_logo_files(restaurant.id)
    return update_restaurant(db, restaurant, {"logo_url": None})


__all__ = [
    "DEFAULT_BRANDING",
    "FONT_OPTIONS",
    "LogoTooLarge",
    "UnsupportedLogoType",
    "branding_view",
    "delete_logo",
    "hex_to_hsl",
    "reset_to_defaults",
    "store_logo",
    "theme_variables",
    "update_branding",
]
