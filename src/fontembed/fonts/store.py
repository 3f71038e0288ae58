"""
Asset Store Persistence
=======================

Writes a FontAssetStore as a Python package of string constants and reads
it back. The generated package is meant to be committed so that run-time
code can import fonts without any network or file access of its own.

Layout for family "Nunito"::

    nunito/
        __init__.py          # FAMILY, NUNITO_FONTS_COMPRESSED, FONT_SIZES
        nunito_regular.py    # NUNITO_REGULAR_COMPRESSED = "..."
        nunito_bold.py
        nunito_italic.py
        nunito_bolditalic.py
"""

import importlib
import importlib.util
import logging
import sys
import tempfile
from pathlib import Path
from types import ModuleType

from fontembed.core.exceptions import InvalidStoreError, StoreNotFoundError
from fontembed.core.models import (
    CompressedFontAsset,
    FontAssetStore,
    FontVariantKey,
    family_slug,
)

logger = logging.getLogger(__name__)


def variant_module_name(family: str, variant: FontVariantKey) -> str:
    return f"{family_slug(family)}_{variant.file_suffix.lower()}"


def variant_constant_name(family: str, variant: FontVariantKey) -> str:
    return f"{variant_module_name(family, variant).upper()}_COMPRESSED"


def index_constant_name(family: str) -> str:
    return f"{family_slug(family).upper()}_FONTS_COMPRESSED"


def _atomic_write(path: Path, content: str) -> None:
    with tempfile.NamedTemporaryFile(
        "w", dir=path.parent, delete=False, suffix=".tmp", encoding="utf-8"
    ) as temp_file:
        temp_file.write(content)
        temp_path = Path(temp_file.name)
    temp_path.replace(path)


def render_variant_module(family: str, variant: FontVariantKey, asset: CompressedFontAsset) -> str:
    """Source text of the module holding one variant."""
    constant = variant_constant_name(family, variant)
    prefix = constant.removesuffix("_COMPRESSED")
    return (
        f"# Auto-generated compressed TTF font file for {family!r} {variant.value}\n"
        f"# Original size: {asset.original_size / 1024:.1f}KB, "
        f"Compressed: {asset.compressed_size / 1024:.1f}KB\n"
        "\n"
        f"{prefix}_ORIGINAL_SIZE = {asset.original_size}\n"
        f"{prefix}_COMPRESSED_SIZE = {asset.compressed_size}\n"
        f'{constant} = "{asset.data}"\n'
    )


def render_index_module(store: FontAssetStore) -> str:
    """Source text of the package index aggregating all present variants."""
    family = store.family
    variants = [variant for variant in FontVariantKey if variant in store.assets]

    # The family only appears as a repr so any name renders as valid source
    lines = ['"""Auto-generated font index."""', f"# Family: {family!r}", ""]
    for variant in variants:
        module = variant_module_name(family, variant)
        prefix = module.upper()
        lines.append(
            f"from .{module} import {prefix}_COMPRESSED, "
            f"{prefix}_COMPRESSED_SIZE, {prefix}_ORIGINAL_SIZE"
        )
    if variants:
        lines.append("")

    index_name = index_constant_name(family)
    lines.append(f"FAMILY = {family!r}")
    lines.append("")
    lines.append(f"{index_name} = {{")
    for variant in variants:
        lines.append(f'    "{variant.value}": {variant_constant_name(family, variant)},')
    lines.append("}")
    lines.append("")
    lines.append("FONT_SIZES = {")
    for variant in variants:
        prefix = variant_module_name(family, variant).upper()
        lines.append(
            f'    "{variant.value}": ({prefix}_ORIGINAL_SIZE, {prefix}_COMPRESSED_SIZE),'
        )
    lines.append("}")
    lines.append("")
    lines.append(f"FONTS_COMPRESSED = {index_name}")
    lines.append("")
    return "\n".join(lines)


def write_store(store: FontAssetStore, output_dir: str | Path) -> Path:
    """
    Persist a store as an importable package.

    Only variants present in the store are referenced by the index. Modules
    left over from earlier builds are not touched.

    Args:
        store: Store to persist
        output_dir: Package directory, created if missing

    Returns:
        Path of the written package directory
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    for variant, asset in store.assets.items():
        module_path = output_dir / f"{variant_module_name(store.family, variant)}.py"
        _atomic_write(module_path, render_variant_module(store.family, variant, asset))
        logger.debug(f"Wrote {module_path}")

    _atomic_write(output_dir / "__init__.py", render_index_module(store))
    logger.info(f"✓ Created font index file in {output_dir} ({len(store)} variants)")
    return output_dir


def store_from_module(module: ModuleType) -> FontAssetStore:
    """Build a FontAssetStore from an imported store package."""
    location = getattr(module, "__name__", repr(module))
    family = getattr(module, "FAMILY", None)
    index = getattr(module, "FONTS_COMPRESSED", None)

    if not isinstance(family, str) or not family:
        raise InvalidStoreError(location, "FAMILY is missing")
    if not isinstance(index, dict):
        raise InvalidStoreError(location, "FONTS_COMPRESSED is missing")

    sizes = getattr(module, "FONT_SIZES", {}) or {}
    assets: dict[FontVariantKey, CompressedFontAsset] = {}
    for key, data in index.items():
        try:
            variant = FontVariantKey(key)
        except ValueError as e:
            raise InvalidStoreError(location, f"unknown variant {key!r}") from e
        if not isinstance(data, str):
            raise InvalidStoreError(location, f"variant {key!r} is not a string constant")

        original_size, compressed_size = sizes.get(key, (0, 0))
        assets[variant] = CompressedFontAsset(
            data=data, original_size=original_size, compressed_size=compressed_size
        )

    return FontAssetStore(family=family, assets=assets)


def load_store(module_name: str) -> FontAssetStore:
    """Import a store package by module name."""
    # Stores may be generated after the interpreter started
    importlib.invalidate_caches()
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        raise StoreNotFoundError(module_name) from e
    return store_from_module(module)


def load_store_from_path(directory: str | Path, module_name: str | None = None) -> FontAssetStore:
    """
    Import a store package from a directory that is not on sys.path.

    Args:
        directory: Package directory written by write_store
        module_name: Name to register the package under

    Returns:
        The loaded FontAssetStore
    """
    directory = Path(directory).resolve()
    init_path = directory / "__init__.py"
    if not init_path.is_file():
        raise StoreNotFoundError(str(directory))

    module_name = module_name or f"_fontembed_store_{family_slug(directory.name)}"

    # Drop earlier imports so a rewritten store is read fresh
    for name in [n for n in sys.modules if n == module_name or n.startswith(f"{module_name}.")]:
        del sys.modules[name]

    spec = importlib.util.spec_from_file_location(
        module_name, init_path, submodule_search_locations=[str(directory)]
    )
    if spec is None or spec.loader is None:
        raise StoreNotFoundError(str(directory))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise InvalidStoreError(str(directory), str(e)) from e

    return store_from_module(module)
