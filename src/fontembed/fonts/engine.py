"""
Document Engines
================

The loader works with any document-generation engine that exposes a font
registry, a virtual filesystem for font files and a font activation call.
VirtualDocumentEngine is an in-process implementation of that interface that
parses registered fonts with fontTools and answers text layout queries.
"""

import base64
import binascii
import logging
import struct
from io import BytesIO
from typing import Protocol, runtime_checkable

from fontTools.ttLib import TTFont, TTLibError

from fontembed.core.exceptions import (
    FontNotRegisteredError,
    FontRegistrationError,
    NoActiveFontError,
    VfsFileNotFoundError,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class DocumentEngine(Protocol):
    """Capabilities the font loader needs from a document engine."""

    def get_font_list(self) -> dict[str, list[str]]:
        """Registered styles keyed by family name."""
        ...

    def add_file_to_vfs(self, path: str, data: str) -> None:
        """Store base64 font data under a virtual path."""
        ...

    def add_font(self, path: str, family: str, style: str) -> None:
        """Register the virtual file at path as family/style."""
        ...

    def set_font(self, family: str, style: str) -> None:
        """Activate a registered family/style pair for layout."""
        ...


class VirtualDocumentEngine:
    """
    Reference document engine with a per-instance font registry.

    Registry and virtual filesystem belong to the instance, so separate
    documents never share font state.
    """

    def __init__(self):
        self.vfs: dict[str, str] = {}
        self._fonts: dict[tuple[str, str], TTFont] = {}
        self._registry: dict[str, list[str]] = {}
        self._active: tuple[str, str] | None = None

    def get_font_list(self) -> dict[str, list[str]]:
        return {family: list(styles) for family, styles in self._registry.items()}

    def add_file_to_vfs(self, path: str, data: str) -> None:
        self.vfs[path] = data

    def add_font(self, path: str, family: str, style: str) -> None:
        """
        Parse the virtual file and register it.

        Raises:
            VfsFileNotFoundError: If nothing was stored under path
            FontRegistrationError: If the file is not a usable TrueType font
        """
        if path not in self.vfs:
            raise VfsFileNotFoundError(path)

        try:
            raw = base64.b64decode(self.vfs[path], validate=True)
            font = TTFont(BytesIO(raw))
            # Touch the tables layout depends on so bad fonts fail here
            font["cmap"].getBestCmap()
            glyph_count = len(font["hmtx"].metrics)
            units_per_em = font["head"].unitsPerEm
        except (
            binascii.Error,
            TTLibError,
            KeyError,
            AssertionError,
            ValueError,
            struct.error,
        ) as e:
            raise FontRegistrationError(path, str(e)) from e

        self._fonts[(family, style)] = font
        styles = self._registry.setdefault(family, [])
        if style not in styles:
            styles.append(style)
        logger.debug(
            f"Registered {family} ({style}) from {path}: "
            f"{glyph_count} glyphs, {units_per_em} units/em"
        )

    def has_font(self, family: str, style: str) -> bool:
        return (family, style) in self._fonts

    def set_font(self, family: str, style: str = "normal") -> None:
        if (family, style) not in self._fonts:
            raise FontNotRegisteredError(family, style)
        self._active = (family, style)

    @property
    def active_font(self) -> tuple[str, str] | None:
        return self._active

    def get_string_width(self, text: str, font_size: float = 12.0) -> float:
        """
        Width of text in points using the active font's advance widths.

        Characters missing from the font use the .notdef advance.
        """
        if self._active is None:
            raise NoActiveFontError()

        font = self._fonts[self._active]
        cmap = font["cmap"].getBestCmap() or {}
        metrics = font["hmtx"].metrics
        notdef_advance = metrics.get(".notdef", (0, 0))[0]

        units = 0
        for char in text:
            glyph_name = cmap.get(ord(char))
            advance = metrics[glyph_name][0] if glyph_name in metrics else notdef_advance
            units += advance

        return units * font_size / font["head"].unitsPerEm
