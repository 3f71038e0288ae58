"""
Font Loader
===========

Registers the variants of an embedded FontAssetStore with a document engine.

Whether a family is already loaded is read from the engine's own registry on
every call; nothing is cached at module level. Calls on the same engine must
not run concurrently, since the registry check and the registration that
follows are not atomic.
"""

import logging
from collections.abc import Iterable

from fontembed.core.config import DEFAULT_CHUNK_SIZE, LoaderConfig
from fontembed.core.exceptions import MissingVariantError, VariantLoadFailedError
from fontembed.core.models import ALL_VARIANTS, FontAssetStore, FontVariantKey

from .codec import decompress_font, encode_base64_chunked
from .engine import DocumentEngine

logger = logging.getLogger(__name__)


def virtual_font_path(family: str, variant: FontVariantKey) -> str:
    """Virtual filesystem path for a family variant, e.g. Nunito-BoldItalic.ttf."""
    return f"{family.replace(' ', '')}-{variant.file_suffix}.ttf"


def registered_variants(engine: DocumentEngine, family: str) -> set[FontVariantKey]:
    """Variants of family the engine already has registered."""
    styles = engine.get_font_list().get(family) or []
    variants = set()
    for style in styles:
        try:
            variants.add(FontVariantKey(style))
        except ValueError:
            continue
    return variants


def ensure_fonts_loaded(
    engine: DocumentEngine,
    store: FontAssetStore,
    family: str | None = None,
    required: Iterable[FontVariantKey] = ALL_VARIANTS,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> list[FontVariantKey]:
    """
    Make sure the engine can lay out text in every required variant.

    Variants already present in the engine registry are skipped without
    decoding anything. Each missing variant is decompressed, re-encoded as
    base64 in chunks and registered. A failure in one variant does not stop
    the others; variants registered before a failure stay registered.

    Args:
        engine: Document engine to register fonts with
        store: Embedded compressed fonts
        family: Family name to register under, defaults to the store's family
        required: Variants that must be available when the call returns
        chunk_size: Bytes per base64 encoding step

    Returns:
        Variants registered by this call (empty if everything was loaded)

    Raises:
        FontLoadError: If any required variant could not be registered
    """
    family = family or store.family
    required = list(dict.fromkeys(required))

    present = registered_variants(engine, family)
    missing = [variant for variant in required if variant not in present]
    if not missing:
        logger.debug(f"{family} fonts already loaded")
        return []

    loaded: list[FontVariantKey] = []
    failures: dict[str, str] = {}
    first_error: Exception | None = None

    for variant in missing:
        try:
            _register_variant(engine, store, family, variant, chunk_size)
        except Exception as e:
            logger.error(f"Failed to load {family} {variant.value} font: {e}")
            failures[variant.value] = str(e)
            first_error = first_error or e
            continue
        loaded.append(variant)

    if failures:
        raise VariantLoadFailedError(family, failures) from first_error

    logger.info(f"Loaded {len(loaded)} {family} font variants")
    return loaded


def _register_variant(
    engine: DocumentEngine,
    store: FontAssetStore,
    family: str,
    variant: FontVariantKey,
    chunk_size: int,
) -> None:
    asset = store.get(variant)
    if asset is None:
        raise MissingVariantError(family, variant.value)

    raw = decompress_font(asset)
    path = virtual_font_path(family, variant)
    engine.add_file_to_vfs(path, encode_base64_chunked(raw, chunk_size))
    engine.add_font(path, family, variant.value)
    logger.debug(f"Registered {path} as {family} ({variant.value})")


class FontLoader:
    """Binds an asset store and loader settings for repeated use across engines."""

    def __init__(self, store: FontAssetStore, config: LoaderConfig | None = None):
        self.store = store
        self.config = config or LoaderConfig()

    @property
    def family(self) -> str:
        return self.config.family or self.store.family

    def ensure_loaded(self, engine: DocumentEngine) -> list[FontVariantKey]:
        """Register any missing required variants with engine."""
        return ensure_fonts_loaded(
            engine,
            self.store,
            family=self.family,
            required=self.config.required_variants,
            chunk_size=self.config.chunk_size,
        )

    def is_loaded(self, engine: DocumentEngine) -> bool:
        return set(self.config.required_variants) <= registered_variants(engine, self.family)
