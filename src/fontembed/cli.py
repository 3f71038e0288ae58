"""
Command line interface for the font embedding pipeline
======================================================

Provides commands to download a font family into an asset store, inspect a
store, and verify that a store loads into a document engine.
"""

import logging
import sys
from pathlib import Path

import click

from fontembed.core.config import AppConfig
from fontembed.core.exceptions import FontEmbedError, StoreError
from fontembed.core.models import FontVariantKey
from fontembed.fonts.acquirer import FontAcquirer
from fontembed.fonts.engine import VirtualDocumentEngine
from fontembed.fonts.loader import FontLoader
from fontembed.fonts.store import load_store_from_path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SAMPLE_TEXT = "The quick brown fox jumps over the lazy dog"

logger = logging.getLogger(__name__)


def _format_sizes(original_size: int, compressed_size: int) -> str:
    ratio = 1 - compressed_size / original_size if original_size else 0.0
    return (
        f"{original_size / 1024:.1f}KB -> {compressed_size / 1024:.1f}KB "
        f"({ratio * 100:.1f}% reduction)"
    )


def _load_config(config_path: Path | None) -> AppConfig:
    if config_path:
        return AppConfig.from_yaml(config_path)
    return AppConfig.load_from_env()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration YAML file",
)
@click.pass_context
def cli(ctx, verbose, config):
    """Font embedding pipeline CLI."""
    try:
        app_config = _load_config(config)
    except FontEmbedError as e:
        raise click.ClickException(str(e)) from e

    logging.basicConfig(level=app_config.log_level, format=LOG_FORMAT)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.obj = app_config


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Asset store directory (overrides configuration)",
)
@click.option("--family", help="Font family to download (overrides configuration)")
@click.option("--workers", type=click.IntRange(min=1), help="Parallel variant downloads")
@click.option("--progress/--no-progress", default=None, help="Show download progress bars")
@click.option(
    "--fail-on-empty",
    is_flag=True,
    default=False,
    help="Exit with an error when no variant could be downloaded",
)
@click.pass_obj
def fetch(app_config: AppConfig, output, family, workers, progress, fail_on_empty):
    """Download font variants and write the embeddable asset store."""
    overrides = {}
    if output:
        overrides["output_dir"] = output
    if family:
        overrides["family"] = family
    if workers:
        overrides["max_workers"] = workers
    if progress is not None:
        overrides["show_progress"] = progress
    if fail_on_empty:
        overrides["fail_on_empty"] = True
    acquirer_config = app_config.acquirer.model_copy(update=overrides)

    click.echo(f"🔤 Setting up {acquirer_config.family} TTF fonts...")

    try:
        with FontAcquirer(acquirer_config) as acquirer:
            report = acquirer.run()
    except FontEmbedError as e:
        logger.exception(f"Font acquisition failed: {e}")
        sys.exit(1)

    for result in report.results:
        if result.success:
            sizes = _format_sizes(result.original_size, result.compressed_size)
            click.echo(f"   ✅ {result.variant.value}: {sizes}")
        else:
            click.echo(f"   ❌ {result.variant.value}: {result.error}")

    click.echo(f"📦 {report.summary()} into {acquirer_config.store_dir}")
    if report.is_empty:
        click.echo("⚠️ No fonts were downloaded; documents will use default fonts.", err=True)


@cli.command()
@click.argument("store_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
def info(store_dir: Path):
    """Show the variants held by an asset store."""
    try:
        store = load_store_from_path(store_dir)
    except StoreError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"📁 {store.family} ({len(store)}/{len(FontVariantKey)} variants)")
    for variant in FontVariantKey:
        asset = store.get(variant)
        if asset is None:
            click.echo(f"   ❌ {variant.value}: missing")
            continue
        sizes = _format_sizes(asset.original_size, asset.compressed_size)
        click.echo(f"   📄 {variant.value}: {sizes}")


@cli.command()
@click.argument("store_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--text", default=SAMPLE_TEXT, show_default=True, help="Text to lay out")
@click.pass_obj
def verify(app_config: AppConfig, store_dir: Path, text: str):
    """Load an asset store into a fresh engine and lay out text in every variant."""
    try:
        store = load_store_from_path(store_dir)
        loader = FontLoader(store, app_config.loader)
        engine = VirtualDocumentEngine()
        loader.ensure_loaded(engine)

        for variant in app_config.loader.required_variants:
            engine.set_font(loader.family, variant.value)
            width = engine.get_string_width(text, 12)
            click.echo(f"   ✅ {loader.family} {variant.value}: {width:.1f}pt at 12pt")
    except FontEmbedError as e:
        logger.exception(f"Font verification failed: {e}")
        sys.exit(1)

    click.echo(f"✅ {loader.family} fonts load correctly")


def main():
    cli()


if __name__ == "__main__":
    main()
