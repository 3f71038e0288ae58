"""
Pytest configuration and fixtures for font embedding tests.
"""

import re
from io import BytesIO
from unittest.mock import Mock

import pytest
import requests

from fontembed.core.config import AcquirerConfig
from fontembed.core.models import FontAssetStore, FontVariantKey
from fontembed.fonts.codec import compress_font
from fontembed.fonts.engine import VirtualDocumentEngine

GSTATIC = "https://fonts.gstatic.com/s/sample/v1"

STYLESHEET_TEMPLATE = """/* latin */
@font-face {{
  font-family: '{family}';
  font-style: {style};
  font-weight: {weight};
  font-display: swap;
  src: url({url}) format('truetype');
}}
"""

VARIANT_AXES = {
    (0, 400): FontVariantKey.NORMAL,
    (0, 700): FontVariantKey.BOLD,
    (1, 400): FontVariantKey.ITALIC,
    (1, 700): FontVariantKey.BOLDITALIC,
}

# Bold variants are wider so layout results tell the variants apart
VARIANT_ADVANCES = {
    FontVariantKey.NORMAL: 500,
    FontVariantKey.BOLD: 600,
    FontVariantKey.ITALIC: 500,
    FontVariantKey.BOLDITALIC: 600,
}


def make_test_font(
    family: str = "Sample", style_name: str = "Regular", advance: int = 500
) -> bytes:
    """Creates a minimal TrueType font covering A, B, a, b and space."""
    from fontTools.fontBuilder import FontBuilder
    from fontTools.ttLib.tables._g_l_y_f import Glyph

    glyph_names = [".notdef", "space", "A", "B", "a", "b"]

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_names)
    fb.setupCharacterMap({32: "space", 65: "A", 66: "B", 97: "a", 98: "b"})
    fb.setupGlyf({name: Glyph() for name in glyph_names})
    metrics = {name: (advance, 0) for name in glyph_names}
    metrics["space"] = (250, 0)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": style_name})
    fb.setupOS2()
    fb.setupPost()

    buf = BytesIO()
    fb.font.save(buf)
    return buf.getvalue()


def make_response(status_code: int = 200, text: str = "", content: bytes = b"") -> Mock:
    """Create a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    response.content = content
    response.headers = {"content-length": str(len(content))}
    response.iter_content.return_value = [
        content[i : i + 8192] for i in range(0, len(content), 8192)
    ]
    return response


class FakeFontServer:
    """Stands in for the stylesheet API and the static font host."""

    def __init__(self, fonts: dict[FontVariantKey, bytes], family: str = "Sample"):
        self.fonts = fonts
        self.family = family
        self.css_status: dict[FontVariantKey, int] = {}
        self.font_status: dict[FontVariantKey, int] = {}
        self.without_ttf: set[FontVariantKey] = set()
        self.connection_errors: set[FontVariantKey] = set()
        self.requested: list[str] = []

    def font_url(self, variant: FontVariantKey) -> str:
        return f"{GSTATIC}/{self.family.lower()}-{variant.file_suffix}.ttf"

    def get(self, url, timeout=None, stream=False):
        self.requested.append(url)

        if url.startswith(GSTATIC):
            variant = next(v for v in self.fonts if self.font_url(v) == url)
            status = self.font_status.get(variant, 200)
            return make_response(status, content=self.fonts[variant] if status == 200 else b"")

        match = re.search(r"ital,wght@(\d),(\d+)", url)
        variant = VARIANT_AXES[(int(match.group(1)), int(match.group(2)))]
        if variant in self.connection_errors:
            raise requests.ConnectionError("connection refused")

        status = self.css_status.get(variant, 200)
        if status != 200:
            return make_response(status, text="error")

        if variant in self.without_ttf:
            src = f"{GSTATIC}/{self.family.lower()}-{variant.file_suffix}.woff2"
        else:
            src = self.font_url(variant)
        css = STYLESHEET_TEMPLATE.format(
            family=self.family,
            style="italic" if variant.is_italic else "normal",
            weight=700 if variant.is_bold else 400,
            url=src,
        )
        return make_response(200, text=css)


@pytest.fixture(scope="session")
def sample_fonts() -> dict[FontVariantKey, bytes]:
    """Raw TrueType data for all four variants of the Sample family."""
    return {
        variant: make_test_font("Sample", variant.file_suffix, VARIANT_ADVANCES[variant])
        for variant in FontVariantKey
    }


@pytest.fixture
def sample_store(sample_fonts) -> FontAssetStore:
    """Complete compressed store for the Sample family."""
    return FontAssetStore(
        family="Sample",
        assets={variant: compress_font(raw) for variant, raw in sample_fonts.items()},
    )


@pytest.fixture
def engine() -> VirtualDocumentEngine:
    """Fresh document engine with an empty registry."""
    return VirtualDocumentEngine()


@pytest.fixture
def font_server(sample_fonts) -> FakeFontServer:
    """Fake web font API serving the Sample family."""
    return FakeFontServer(sample_fonts)


@pytest.fixture
def acquirer_config(tmp_path) -> AcquirerConfig:
    """Acquirer configuration writing into a temporary store directory."""
    return AcquirerConfig(family="Sample", output_dir=tmp_path / "sample")
