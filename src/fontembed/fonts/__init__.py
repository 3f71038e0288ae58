"""Font Pipeline Module
====================

Build-time acquisition of web fonts into an embeddable asset store, and
run-time registration of that store with document engines.
"""

from .acquirer import FontAcquirer
from .codec import compress_font, decode_asset, decompress_font, encode_base64_chunked
from .engine import DocumentEngine, VirtualDocumentEngine
from .loader import FontLoader, ensure_fonts_loaded, registered_variants, virtual_font_path
from .store import load_store, load_store_from_path, store_from_module, write_store
from .stylesheet import build_stylesheet_url, extract_asset_url

__all__ = [
    "DocumentEngine",
    "FontAcquirer",
    "FontLoader",
    "VirtualDocumentEngine",
    "build_stylesheet_url",
    "compress_font",
    "decode_asset",
    "decompress_font",
    "encode_base64_chunked",
    "ensure_fonts_loaded",
    "extract_asset_url",
    "load_store",
    "load_store_from_path",
    "registered_variants",
    "store_from_module",
    "virtual_font_path",
    "write_store",
]
