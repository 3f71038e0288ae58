"""Core components for the font embedding pipeline."""

from .config import AcquirerConfig, AppConfig, LoaderConfig
from .exceptions import (
    AssetNotFoundError,
    DecompressionError,
    FontEmbedError,
    FontLoadError,
    NetworkError,
    StoreError,
)
from .models import (
    ALL_VARIANTS,
    BuildReport,
    CompressedFontAsset,
    FontAssetStore,
    FontVariantKey,
    FontVariantRequest,
    VariantResult,
)

__all__ = [
    "ALL_VARIANTS",
    "AcquirerConfig",
    "AppConfig",
    "AssetNotFoundError",
    "BuildReport",
    "CompressedFontAsset",
    "DecompressionError",
    "FontAssetStore",
    "FontEmbedError",
    "FontLoadError",
    "FontVariantKey",
    "FontVariantRequest",
    "LoaderConfig",
    "NetworkError",
    "StoreError",
    "VariantResult",
]
