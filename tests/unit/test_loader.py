"""Tests for run-time font registration."""

import base64
from unittest.mock import Mock, patch

import pytest

from fontembed.core.config import LoaderConfig
from fontembed.core.exceptions import (
    DecompressionError,
    FontLoadError,
    MissingVariantError,
    VariantLoadFailedError,
)
from fontembed.core.models import CompressedFontAsset, FontAssetStore, FontVariantKey
from fontembed.fonts import codec
from fontembed.fonts.engine import DocumentEngine, VirtualDocumentEngine
from fontembed.fonts.loader import (
    FontLoader,
    ensure_fonts_loaded,
    registered_variants,
    virtual_font_path,
)


def _without(store: FontAssetStore, variant: FontVariantKey) -> FontAssetStore:
    return FontAssetStore(
        family=store.family,
        assets={key: asset for key, asset in store.assets.items() if key != variant},
    )


class TestVirtualFontPath:
    @pytest.mark.parametrize(
        "family,variant,expected",
        [
            ("Nunito", FontVariantKey.NORMAL, "Nunito-Regular.ttf"),
            ("Nunito", FontVariantKey.ITALIC, "Nunito-Italic.ttf"),
            ("Open Sans", FontVariantKey.BOLDITALIC, "OpenSans-BoldItalic.ttf"),
        ],
    )
    def test_path(self, family, variant, expected):
        assert virtual_font_path(family, variant) == expected


class TestEnsureFontsLoaded:
    def test_registers_all_variants(self, engine, sample_store):
        loaded = ensure_fonts_loaded(engine, sample_store)

        assert loaded == [
            FontVariantKey.NORMAL,
            FontVariantKey.BOLD,
            FontVariantKey.ITALIC,
            FontVariantKey.BOLDITALIC,
        ]
        assert sorted(engine.get_font_list()["Sample"]) == [
            "bold",
            "bolditalic",
            "italic",
            "normal",
        ]

    def test_vfs_holds_raw_font_base64(self, engine, sample_store, sample_fonts):
        ensure_fonts_loaded(engine, sample_store)

        assert set(engine.vfs) == {
            "Sample-Regular.ttf",
            "Sample-Bold.ttf",
            "Sample-Italic.ttf",
            "Sample-BoldItalic.ttf",
        }
        for variant, raw in sample_fonts.items():
            assert base64.b64decode(engine.vfs[f"Sample-{variant.file_suffix}.ttf"]) == raw

    def test_registered_fonts_lay_out_text(self, engine, sample_store):
        ensure_fonts_loaded(engine, sample_store)

        engine.set_font("Sample", "normal")
        regular = engine.get_string_width("ab", 10)
        engine.set_font("Sample", "bold")
        bold = engine.get_string_width("ab", 10)

        assert regular == pytest.approx(10.0)
        assert bold == pytest.approx(12.0)

    def test_second_call_is_a_no_op(self, engine, sample_store):
        ensure_fonts_loaded(engine, sample_store)
        vfs_before = dict(engine.vfs)

        with patch("fontembed.fonts.loader.decompress_font") as mock_decompress:
            loaded = ensure_fonts_loaded(engine, sample_store)

        assert loaded == []
        mock_decompress.assert_not_called()
        assert engine.vfs == vfs_before

    def test_only_missing_variants_are_registered(self, engine, sample_store):
        ensure_fonts_loaded(engine, sample_store, required=[FontVariantKey.NORMAL])

        with patch(
            "fontembed.fonts.loader.decompress_font", wraps=codec.decompress_font
        ) as mock_decompress:
            loaded = ensure_fonts_loaded(engine, sample_store)

        assert loaded == [
            FontVariantKey.BOLD,
            FontVariantKey.ITALIC,
            FontVariantKey.BOLDITALIC,
        ]
        assert mock_decompress.call_count == 3

    def test_required_subset(self, engine, sample_store):
        loaded = ensure_fonts_loaded(
            engine, sample_store, required=[FontVariantKey.BOLD, FontVariantKey.BOLD]
        )

        assert loaded == [FontVariantKey.BOLD]
        assert engine.get_font_list() == {"Sample": ["bold"]}

    def test_family_override(self, engine, sample_store):
        ensure_fonts_loaded(engine, sample_store, family="Body Text")

        assert "Body Text" in engine.get_font_list()
        assert "BodyText-Regular.ttf" in engine.vfs

    def test_chunk_size_does_not_change_vfs_data(self, sample_store):
        small = VirtualDocumentEngine()
        large = VirtualDocumentEngine()

        ensure_fonts_loaded(small, sample_store, chunk_size=7)
        ensure_fonts_loaded(large, sample_store, chunk_size=1024 * 1024)

        assert small.vfs == large.vfs

    def test_engines_are_independent(self, sample_store):
        first = VirtualDocumentEngine()
        second = VirtualDocumentEngine()

        ensure_fonts_loaded(first, sample_store)
        loaded = ensure_fonts_loaded(second, sample_store)

        assert len(loaded) == 4


class TestLoadFailures:
    def test_corrupt_variant_does_not_block_others(self, engine, sample_store):
        assets = dict(sample_store.assets)
        assets[FontVariantKey.ITALIC] = CompressedFontAsset(data="not*base64")
        store = FontAssetStore(family="Sample", assets=assets)

        with pytest.raises(FontLoadError) as exc_info:
            ensure_fonts_loaded(engine, store)

        assert isinstance(exc_info.value.__cause__, DecompressionError)
        assert set(exc_info.value.details) == {"italic"}
        assert sorted(engine.get_font_list()["Sample"]) == ["bold", "bolditalic", "normal"]

    def test_missing_variant(self, engine, sample_store):
        store = _without(sample_store, FontVariantKey.BOLDITALIC)

        with pytest.raises(VariantLoadFailedError) as exc_info:
            ensure_fonts_loaded(engine, store)

        assert isinstance(exc_info.value.__cause__, MissingVariantError)
        assert "bolditalic" in str(exc_info.value)
        assert len(engine.get_font_list()["Sample"]) == 3

    def test_missing_variant_not_required(self, engine, sample_store):
        store = _without(sample_store, FontVariantKey.BOLDITALIC)

        loaded = ensure_fonts_loaded(
            engine,
            store,
            required=[FontVariantKey.NORMAL, FontVariantKey.BOLD, FontVariantKey.ITALIC],
        )

        assert len(loaded) == 3

    def test_empty_store(self, engine):
        with pytest.raises(FontLoadError) as exc_info:
            ensure_fonts_loaded(engine, FontAssetStore(family="Sample"))

        assert len(exc_info.value.details) == 4
        assert engine.get_font_list() == {}

    def test_engine_errors_are_wrapped(self, sample_store):
        engine = Mock(spec=DocumentEngine)
        engine.get_font_list.return_value = {}
        engine.add_font.side_effect = RuntimeError("engine rejected font")

        with pytest.raises(FontLoadError) as exc_info:
            ensure_fonts_loaded(engine, sample_store)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert engine.add_font.call_count == 4

    def test_retry_after_failure_loads_remaining(self, engine, sample_store):
        store = _without(sample_store, FontVariantKey.ITALIC)
        with pytest.raises(FontLoadError):
            ensure_fonts_loaded(engine, store)

        loaded = ensure_fonts_loaded(engine, sample_store)

        assert loaded == [FontVariantKey.ITALIC]


class TestMockEngine:
    def test_already_registered_family_skips_engine_writes(self, sample_store):
        engine = Mock(spec=DocumentEngine)
        engine.get_font_list.return_value = {
            "Sample": ["normal", "bold", "italic", "bolditalic"]
        }

        assert ensure_fonts_loaded(engine, sample_store) == []
        engine.add_file_to_vfs.assert_not_called()
        engine.add_font.assert_not_called()

    def test_registration_calls(self, sample_store):
        engine = Mock(spec=DocumentEngine)
        engine.get_font_list.return_value = {"Sample": ["normal", "bold", "bolditalic"]}

        ensure_fonts_loaded(engine, sample_store)

        engine.add_file_to_vfs.assert_called_once()
        path, data = engine.add_file_to_vfs.call_args.args
        assert path == "Sample-Italic.ttf"
        assert isinstance(data, str)
        engine.add_font.assert_called_once_with("Sample-Italic.ttf", "Sample", "italic")

    def test_unknown_styles_are_ignored(self):
        engine = Mock(spec=DocumentEngine)
        engine.get_font_list.return_value = {"Sample": ["normal", "semibold"]}

        assert registered_variants(engine, "Sample") == {FontVariantKey.NORMAL}
        assert registered_variants(engine, "Other") == set()


class TestFontLoader:
    def test_defaults(self, engine, sample_store):
        loader = FontLoader(sample_store)

        assert loader.family == "Sample"
        assert not loader.is_loaded(engine)
        assert len(loader.ensure_loaded(engine)) == 4
        assert loader.is_loaded(engine)

    def test_config(self, engine, sample_store):
        config = LoaderConfig(
            family="Brand", chunk_size=99, required_variants=[FontVariantKey.NORMAL]
        )
        loader = FontLoader(sample_store, config)

        assert loader.ensure_loaded(engine) == [FontVariantKey.NORMAL]
        assert engine.get_font_list() == {"Brand": ["normal"]}
        assert loader.is_loaded(engine)

    def test_shared_across_engines(self, sample_store):
        loader = FontLoader(sample_store)
        engines = [VirtualDocumentEngine() for _ in range(3)]

        for engine in engines:
            loader.ensure_loaded(engine)

        assert all(loader.is_loaded(engine) for engine in engines)
