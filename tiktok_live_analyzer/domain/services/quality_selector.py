"""Stream quality selection."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Highest quality first
QUALITY_PRECEDENCE = ("uhd", "hd", "sd", "ld")


@dataclass(frozen=True)
class StreamSelection:
    """Chosen quality tier and its transport URL."""
    tier: str
    url: str


def variant_url(variant: Any) -> Optional[str]:
    """Return the FLV transport URL of a variant descriptor, if usable."""
    if not isinstance(variant, dict):
        return None
    main = variant.get("main")
    if not isinstance(main, dict):
        return None
    url = main.get("flv")
    if not isinstance(url, str) or not url.strip():
        return None
    return url


def select_stream(manifest: Optional[Dict[str, Any]]) -> Optional[StreamSelection]:
    """Pick the best available stream.

    Tiers are tried in ``QUALITY_PRECEDENCE`` order regardless of the
    manifest's own ordering.

    Args:
        manifest: Mapping of tier name to variant descriptor

    Returns:
        Selected tier and URL, or None if no tier carries a URL
    """
    if not manifest:
        return None
    for tier in QUALITY_PRECEDENCE:
        url = variant_url(manifest.get(tier))
        if url:
            return StreamSelection(tier=tier, url=url)
    return None
