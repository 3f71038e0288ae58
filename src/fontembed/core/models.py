"""Pydantic models for type-safe data structures."""

import re
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvalidWeightError


class FontVariantKey(str, Enum):
    """Style variants that make up a complete font family."""

    NORMAL = "normal"
    BOLD = "bold"
    ITALIC = "italic"
    BOLDITALIC = "bolditalic"

    @property
    def file_suffix(self) -> str:
        """Suffix used in file and module names (Regular, Bold, ...)."""
        return _FILE_SUFFIXES[self]

    @property
    def is_italic(self) -> bool:
        return self in (FontVariantKey.ITALIC, FontVariantKey.BOLDITALIC)

    @property
    def is_bold(self) -> bool:
        return self in (FontVariantKey.BOLD, FontVariantKey.BOLDITALIC)


_FILE_SUFFIXES = {
    FontVariantKey.NORMAL: "Regular",
    FontVariantKey.BOLD: "Bold",
    FontVariantKey.ITALIC: "Italic",
    FontVariantKey.BOLDITALIC: "BoldItalic",
}

ALL_VARIANTS: tuple[FontVariantKey, ...] = tuple(FontVariantKey)


def family_slug(family: str) -> str:
    """Lowercase identifier-safe form of a family name."""
    slug = re.sub(r"[^0-9a-zA-Z]+", "_", family).strip("_").lower()
    if not slug or slug[0].isdigit():
        slug = f"font_{slug}"
    return slug


class FontVariantRequest(BaseModel):
    """Acquisition parameters for one variant."""

    model_config = ConfigDict(frozen=True)

    variant: FontVariantKey = Field(..., description="Variant this request produces")
    italic: bool = Field(False, description="Value of the ital axis")
    weight: int = Field(400, description="Value of the wght axis")

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: int) -> int:
        if not 100 <= v <= 900:
            raise InvalidWeightError(v)
        return v


def default_variant_requests() -> list[FontVariantRequest]:
    """Requests for regular, bold, italic and bold italic at 400/700."""
    return [
        FontVariantRequest(variant=FontVariantKey.NORMAL, italic=False, weight=400),
        FontVariantRequest(variant=FontVariantKey.BOLD, italic=False, weight=700),
        FontVariantRequest(variant=FontVariantKey.ITALIC, italic=True, weight=400),
        FontVariantRequest(variant=FontVariantKey.BOLDITALIC, italic=True, weight=700),
    ]


class CompressedFontAsset(BaseModel):
    """Gzip-compressed, base64-encoded font data for one variant."""

    model_config = ConfigDict(frozen=True)

    data: str = Field(..., description="Base64 text of the gzip payload")
    original_size: int = Field(0, ge=0, description="Size of the raw font in bytes")
    compressed_size: int = Field(0, ge=0, description="Size of the gzip payload in bytes")

    @property
    def compression_ratio(self) -> float:
        """Fraction of the original size saved by compression."""
        if self.original_size == 0:
            return 0.0
        return 1 - self.compressed_size / self.original_size


class FontAssetStore(BaseModel):
    """Compressed variants of a single font family."""

    family: str = Field(..., min_length=1, description="Font family name")
    assets: dict[FontVariantKey, CompressedFontAsset] = Field(default_factory=dict)

    def get(self, variant: FontVariantKey) -> CompressedFontAsset | None:
        return self.assets.get(variant)

    def missing_variants(self) -> list[FontVariantKey]:
        """Variants of the complete set that this store does not hold."""
        return [variant for variant in ALL_VARIANTS if variant not in self.assets]

    @property
    def is_complete(self) -> bool:
        return not self.missing_variants()

    def __len__(self) -> int:
        return len(self.assets)


class VariantResult(BaseModel):
    """Outcome of acquiring one variant."""

    variant: FontVariantKey
    success: bool
    error: str | None = None
    original_size: int = 0
    compressed_size: int = 0


class BuildReport(BaseModel):
    """Outcome of an acquisition run."""

    SUMMARY_TEMPLATE: ClassVar[str] = "Downloaded {succeeded}/{total} {family} fonts"

    store: FontAssetStore
    results: list[VariantResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[FontVariantKey]:
        return [result.variant for result in self.results if result.success]

    @property
    def failed(self) -> list[FontVariantKey]:
        return [result.variant for result in self.results if not result.success]

    @property
    def is_empty(self) -> bool:
        return not self.succeeded

    def summary(self) -> str:
        return self.SUMMARY_TEMPLATE.format(
            succeeded=len(self.succeeded), total=len(self.results), family=self.store.family
        )
