"""Custom exceptions for the font embedding pipeline."""

from typing import Any


class FontEmbedError(Exception):
    """Base exception for all font embedding errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class NetworkError(FontEmbedError):
    """Exception raised for transport or HTTP failures."""


class AssetNotFoundError(FontEmbedError):
    """Exception raised when a stylesheet has no usable font reference."""


class DecompressionError(FontEmbedError):
    """Exception raised when stored font data cannot be decoded or inflated."""


class FontLoadError(FontEmbedError):
    """Exception raised when fonts cannot be registered with an engine."""


class ValidationError(FontEmbedError):
    """Exception raised for input validation errors."""


class ConfigurationError(FontEmbedError):
    """Exception raised for configuration errors."""


class StoreError(FontEmbedError):
    """Exception raised for asset store read/write errors."""


class EngineError(FontEmbedError):
    """Exception raised by a document engine."""


# Specific exception classes for TRY003 compliance
class HttpStatusError(NetworkError):
    """Exception raised when a server answers with a non-success status."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP error {status_code} for {url}", details={"status": status_code})
        self.status_code = status_code


class TransportError(NetworkError):
    """Exception raised when a request fails before a response arrives."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Request to {url} failed: {error}")


class EmptyResponseError(NetworkError):
    """Exception raised when a font download returns no bytes."""

    def __init__(self, url: str):
        super().__init__(f"Empty response body from {url}")


class TtfUrlNotFoundError(AssetNotFoundError):
    """Exception raised when no TTF url(...) reference is present in a stylesheet."""

    def __init__(self):
        super().__init__("TTF URL not found in CSS")


class UnusableUrlPatternError(ValidationError):
    """Exception raised when a url pattern cannot capture a font url."""

    def __init__(self, pattern: str, error: str):
        super().__init__(f"Unusable font url pattern {pattern!r}: {error}")


class InvalidBase64Error(DecompressionError):
    """Exception raised when stored font data is not valid base64."""

    def __init__(self, error: str):
        super().__init__(f"Stored font data is not valid base64: {error}")


class InvalidCompressedDataError(DecompressionError):
    """Exception raised when stored font data does not inflate."""

    def __init__(self, error: str):
        super().__init__(f"Stored font data is not valid gzip data: {error}")


class MissingVariantError(FontLoadError):
    """Exception raised when a required variant is absent from the asset store."""

    def __init__(self, family: str, variant: str):
        super().__init__(f"Asset store for {family} has no '{variant}' variant")


class VariantLoadFailedError(FontLoadError):
    """Exception raised when one or more variants could not be registered."""

    def __init__(self, family: str, failures: dict[str, str]):
        summary = ", ".join(f"{variant}: {error}" for variant, error in failures.items())
        super().__init__(f"Failed to load {family} fonts ({summary})", details=failures)


class EmptyFontStoreError(StoreError):
    """Exception raised when no variant could be acquired."""

    def __init__(self, family: str):
        super().__init__(f"No {family} font variants were downloaded successfully")


class StoreNotFoundError(StoreError):
    """Exception raised when an asset store package cannot be found."""

    def __init__(self, location: str):
        super().__init__(f"Font asset store not found: {location}")


class InvalidStoreError(StoreError):
    """Exception raised when an asset store module does not have the expected shape."""

    def __init__(self, location: str, error: str):
        super().__init__(f"Invalid font asset store {location}: {error}")


class FontRegistrationError(EngineError):
    """Exception raised when an engine rejects font data."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Cannot register font file {path}: {error}")


class VfsFileNotFoundError(EngineError):
    """Exception raised when a font refers to a missing virtual file."""

    def __init__(self, path: str):
        super().__init__(f"No file named {path} in the virtual filesystem")


class FontNotRegisteredError(EngineError):
    """Exception raised when activating a family/style pair that is not registered."""

    def __init__(self, family: str, style: str):
        super().__init__(f"Font {family} ({style}) is not registered")


class NoActiveFontError(EngineError):
    """Exception raised when a layout query runs before any font is set."""

    def __init__(self):
        super().__init__("No font has been set on the engine")


class InvalidChunkSizeError(ValueError):
    """Exception raised for non-positive chunk sizes."""

    def __init__(self, chunk_size: int):
        super().__init__(f"chunk_size must be a positive integer, got {chunk_size}")


class InvalidWeightError(ValueError):
    """Exception raised for font weights outside the CSS range."""

    def __init__(self, weight: int):
        super().__init__(f"weight must be between 100 and 900, got {weight}")


class InvalidCompressionLevelError(ValueError):
    """Exception raised for gzip levels outside 0-9."""

    def __init__(self, level: int):
        super().__init__(f"compression level must be between 0 and 9, got {level}")


class InvalidAssetUrlPatternError(ValueError):
    """Exception raised for url patterns that do not compile or lack a capture group."""

    def __init__(self, pattern: str, error: str):
        super().__init__(f"asset_url_pattern {pattern!r} is unusable: {error}")


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")
