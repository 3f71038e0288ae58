"""
Font Acquirer
=============

Build-time download of a font family's TrueType variants from a web font
API. Each variant is resolved through its stylesheet, downloaded, compressed
and collected into a FontAssetStore.

Features:
- One attempt per request, failures are reported per variant
- Partial stores when some variants fail
- Optional parallel downloads and progress bars
"""

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import requests
from tqdm import tqdm

from fontembed.core.config import AcquirerConfig
from fontembed.core.exceptions import (
    EmptyFontStoreError,
    EmptyResponseError,
    FontEmbedError,
    HttpStatusError,
    TransportError,
)
from fontembed.core.models import (
    BuildReport,
    CompressedFontAsset,
    FontAssetStore,
    FontVariantRequest,
    VariantResult,
)

from .codec import compress_font
from .store import write_store
from .stylesheet import build_stylesheet_url, extract_asset_url

logger = logging.getLogger(__name__)


class FontAcquirer:
    """
    Downloads and compresses the variants of one font family.

    Variants are independent: a failed variant is logged and left out of the
    resulting store while the others are still attempted.
    """

    def __init__(self, config: AcquirerConfig | None = None):
        self.config = config or AcquirerConfig()
        self.session = self._create_session()
        # Worker threads get their own session; requests.Session is not thread-safe
        self._worker = threading.local()

    def _create_session(self) -> requests.Session:
        """Create HTTP session with appropriate configuration."""
        session = requests.Session()
        session.verify = self.config.verify_ssl
        session.headers.update({"User-Agent": self.config.user_agent})
        return session

    def _get(self, url: str, stream: bool = False) -> requests.Response:
        """Single GET attempt; non-success statuses become NetworkError."""
        try:
            session = getattr(self._worker, "session", self.session)
            response = session.get(url, timeout=self.config.timeout_seconds, stream=stream)
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e

        if not response.ok:
            response.close()
            raise HttpStatusError(url, response.status_code)
        return response

    def fetch_stylesheet(self, request: FontVariantRequest) -> str:
        """Fetch the stylesheet describing one variant."""
        css_url = build_stylesheet_url(
            self.config.family, request, self.config.css_api_url, self.config.display
        )
        logger.debug(f"Fetching stylesheet {css_url}")
        return self._get(css_url).text

    def fetch_variant(self, request: FontVariantRequest) -> bytes:
        """
        Download the raw TrueType data for one variant.

        Args:
            request: Variant acquisition parameters

        Returns:
            Raw font bytes

        Raises:
            NetworkError: If either request fails
            AssetNotFoundError: If the stylesheet has no TTF reference
        """
        css = self.fetch_stylesheet(request)
        ttf_url = extract_asset_url(css, self.config.asset_url_pattern)
        logger.info(f"  Found TTF URL: {ttf_url}")
        return self._download_bytes(ttf_url, request.variant.value)

    def _download_bytes(self, url: str, label: str) -> bytes:
        response = self._get(url, stream=self.config.show_progress)

        if not self.config.show_progress:
            data = response.content
        else:
            total_size = int(response.headers.get("content-length", 0))
            chunks: list[bytes] = []
            try:
                with tqdm(
                    total=total_size or None,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=f"Downloading {self.config.family} {label}",
                ) as pbar:
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            chunks.append(chunk)
                            pbar.update(len(chunk))
            except requests.RequestException as e:
                raise TransportError(url, str(e)) from e
            finally:
                response.close()
            data = b"".join(chunks)

        if not data:
            raise EmptyResponseError(url)
        return data

    def compress(self, raw: bytes) -> CompressedFontAsset:
        """Compress raw font bytes at the configured level."""
        return compress_font(raw, self.config.compression_level)

    def _acquire_variant(
        self, request: FontVariantRequest
    ) -> tuple[VariantResult, CompressedFontAsset | None]:
        name = f"{self.config.family.lower()}-{request.variant.value}"
        logger.info(f"Downloading {name} (weight {request.weight})...")

        try:
            asset = self.compress(self.fetch_variant(request))
        except FontEmbedError as e:
            logger.warning(f"✗ Failed to download {name}: {e}")
            return VariantResult(variant=request.variant, success=False, error=str(e)), None

        logger.info(f"✓ Downloaded and converted {name}")
        result = VariantResult(
            variant=request.variant,
            success=True,
            original_size=asset.original_size,
            compressed_size=asset.compressed_size,
        )
        return result, asset

    def build(self, requests_: Iterable[FontVariantRequest] | None = None) -> BuildReport:
        """
        Acquire every requested variant and report per-variant outcomes.

        Args:
            requests_: Variants to acquire, defaults to the configured set

        Returns:
            BuildReport whose store holds only the successful variants

        Raises:
            EmptyFontStoreError: If nothing succeeded and fail_on_empty is set
        """
        variant_requests = list(requests_ if requests_ is not None else self.config.variants)

        if self.config.max_workers > 1 and len(variant_requests) > 1:
            outcomes = self._acquire_parallel(variant_requests)
        else:
            outcomes = [self._acquire_variant(request) for request in variant_requests]

        store = FontAssetStore(family=self.config.family)
        results = []
        for result, asset in outcomes:
            results.append(result)
            if asset is not None:
                store.assets[result.variant] = asset

        report = BuildReport(store=store, results=results)
        logger.info(report.summary())

        if report.is_empty:
            if self.config.fail_on_empty:
                logger.error("No fonts were downloaded successfully")
                raise EmptyFontStoreError(self.config.family)
            logger.warning(
                "No fonts were downloaded successfully. "
                "Documents will fall back to default fonts."
            )

        return report

    def _acquire_parallel(
        self, variant_requests: list[FontVariantRequest]
    ) -> list[tuple[VariantResult, CompressedFontAsset | None]]:
        worker_sessions: list[requests.Session] = []

        def init_worker() -> None:
            self._worker.session = self._create_session()
            worker_sessions.append(self._worker.session)

        try:
            with ThreadPoolExecutor(
                max_workers=self.config.max_workers, initializer=init_worker
            ) as executor:
                return list(executor.map(self._acquire_variant, variant_requests))
        finally:
            for session in worker_sessions:
                session.close()

    def build_store(self, requests_: Iterable[FontVariantRequest] | None = None) -> FontAssetStore:
        """Acquire the requested variants and return the (possibly partial) store."""
        return self.build(requests_).store

    def run(self, output_dir: Path | None = None) -> BuildReport:
        """Acquire all configured variants and persist them as an importable store."""
        report = self.build()
        write_store(report.store, output_dir or self.config.store_dir)
        return report

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def __enter__(self) -> "FontAcquirer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
