"""Process-wide registry of embedded Arabic-capable fonts."""

from __future__ import annotations

import base64
import binascii
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

FONT_ENV_VAR = "ORDER_DESK_ARABIC_FONT"

# (family name, base64 TTF program). Empty is a supported configuration: Arabic
# text then degrades to the core Helvetica font.
EMBEDDED_FONTS: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class FontAsset:
    name: str
    payload: bytes = b""

    @property
    def file_key(self) -> str:
        return f"{self.name}-Regular.ttf"


class FontRegistry:
    """Read-only list of font assets; the first one is the primary font."""

    def __init__(self, fonts: tuple[FontAsset, ...] = ()) -> None:
        self._fonts = tuple(fonts)

    @property
    def fonts(self) -> tuple[FontAsset, ...]:
        return self._fonts

    def has_embedded_font(self) -> bool:
        return bool(self._fonts)

    def get_primary_font(self) -> FontAsset | None:
        return self._fonts[0] if self._fonts else None


def _decode_table(table: tuple[tuple[str, str], ...]) -> list[FontAsset]:
    assets: list[FontAsset] = []
    for name, encoded in table:
        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Skipping embedded font %s: %s", name, exc)
            continue
        if payload:
            assets.append(FontAsset(name=name, payload=payload))
    return assets


def _font_from_env() -> FontAsset | None:
    configured = os.getenv(FONT_ENV_VAR, "").strip()
    if not configured:
        return None
    path = Path(configured)
    try:
        payload = path.read_bytes()
    except OSError as exc:
        logger.warning("Arabic font %s could not be read: %s", path, exc)
        return None
    name = path.stem.split("-")[0] or "Arabic"
    return FontAsset(name=name, payload=payload)


def build_registry() -> FontRegistry:
    assets = _decode_table(EMBEDDED_FONTS)
    env_font = _font_from_env()
    if env_font is not None:
        assets.append(env_font)
    if not assets:
        logger.info("No Arabic font registered; Arabic text will render with Helvetica fallbacks")
    return FontRegistry(tuple(assets))


registry = build_registry()


def has_embedded_font() -> bool:
    return registry.has_embedded_font()


def get_primary_font() -> FontAsset | None:
    return registry.get_primary_font()


def materialize(asset: FontAsset) -> Path:
    """Write the font program to a cache file so fpdf2 can load it by path."""
    cache_dir = Path(tempfile.gettempdir()) / "order_desk_fonts"
    cache_dir.mkdir(parents=True, exist_ok=True)
    target = cache_dir / asset.file_key
    if not target.exists() or target.stat().st_size != len(asset.payload):
        target.write_bytes(asset.payload)
    return target
