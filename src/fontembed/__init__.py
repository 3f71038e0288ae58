"""Font Embedder
=============

Downloads a web font family at build time, stores it as compressed string
constants inside an importable package, and registers it with document
generation engines at run time.
"""

__version__ = "1.0.0"

from .core.config import AcquirerConfig, AppConfig, LoaderConfig
from .core.exceptions import FontEmbedError, FontLoadError
from .core.models import FontAssetStore, FontVariantKey, FontVariantRequest
from .fonts import (
    FontAcquirer,
    FontLoader,
    VirtualDocumentEngine,
    ensure_fonts_loaded,
    load_store,
    load_store_from_path,
    write_store,
)

__all__ = [
    "AcquirerConfig",
    "AppConfig",
    "FontAcquirer",
    "FontAssetStore",
    "FontEmbedError",
    "FontLoadError",
    "FontLoader",
    "FontVariantKey",
    "FontVariantRequest",
    "LoaderConfig",
    "VirtualDocumentEngine",
    "ensure_fonts_loaded",
    "load_store",
    "load_store_from_path",
    "write_store",
]
