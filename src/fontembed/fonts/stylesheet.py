"""
Stylesheet helpers for the web font API.
"""

import re
from urllib.parse import urlencode

from fontembed.core.config import DEFAULT_ASSET_URL_PATTERN
from fontembed.core.exceptions import TtfUrlNotFoundError, UnusableUrlPatternError
from fontembed.core.models import FontVariantRequest

_DEFAULT_PATTERN = re.compile(DEFAULT_ASSET_URL_PATTERN)


def build_stylesheet_url(
    family: str,
    request: FontVariantRequest,
    base_url: str = "https://fonts.googleapis.com/css2",
    display: str = "swap",
) -> str:
    """Build the CSS query selecting a single point on the ital,wght axis."""
    family_spec = f"{family}:ital,wght@{int(request.italic)},{request.weight}"
    # The API expects literal ':' '@' and ',' in the family parameter
    query = urlencode({"family": family_spec, "display": display}, safe=":@,")
    return f"{base_url}?{query}"


def extract_asset_url(css_text: str, pattern: str | re.Pattern[str] | None = None) -> str:
    """
    Extract the first TrueType url(...) reference from stylesheet text.

    Args:
        css_text: Stylesheet returned by the font API
        pattern: Regex whose first group captures the url; defaults to
            https urls on fonts.gstatic.com ending in .ttf

    Returns:
        The binary font url

    Raises:
        AssetNotFoundError: If no reference matches
        ValidationError: If the pattern does not compile or has no capture group
    """
    if pattern is None:
        compiled = _DEFAULT_PATTERN
    elif isinstance(pattern, str):
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise UnusableUrlPatternError(pattern, str(e)) from e
    else:
        compiled = pattern

    if compiled.groups < 1:
        raise UnusableUrlPatternError(compiled.pattern, "no capture group for the url")

    match = compiled.search(css_text)
    if not match:
        raise TtfUrlNotFoundError()
    return match.group(1)
