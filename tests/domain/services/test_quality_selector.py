"""Tests for stream quality selection."""

from tiktok_live_analyzer.domain.services.quality_selector import (
    QUALITY_PRECEDENCE,
    select_stream,
)


def test_uhd_wins_over_hd():
    """Test the highest tier present is chosen."""
    manifest = {"uhd": {"main": {"flv": "u"}}, "hd": {"main": {"flv": "h"}}}
    selection = select_stream(manifest)
    assert selection.tier == "uhd"
    assert selection.url == "u"


def test_falls_through_to_sd():
    """Test lower tiers are used when higher ones are absent."""
    manifest = {"ld": {"main": {"flv": "url2"}}, "sd": {"main": {"flv": "url1"}}}
    selection = select_stream(manifest)
    assert selection.tier == "sd"
    assert selection.url == "url1"


def test_ignores_insertion_order():
    """Test precedence does not depend on the manifest ordering."""
    manifest = {
        "ld": {"main": {"flv": "l"}},
        "sd": {"main": {"flv": "s"}},
        "hd": {"main": {"flv": "h"}},
    }
    assert select_stream(manifest).tier == "hd"


def test_skips_variants_without_url():
    """Test tiers with empty or missing URLs are skipped."""
    manifest = {
        "uhd": {"main": {"flv": ""}},
        "hd": {"main": {}},
        "sd": "garbage",
        "ld": {"main": {"flv": "l"}},
    }
    assert select_stream(manifest).tier == "ld"


def test_empty_manifest():
    """Test nothing is selected from an empty or unusable manifest."""
    assert select_stream({}) is None
    assert select_stream(None) is None
    assert select_stream({"origin": {"main": {"flv": "o"}}}) is None


def test_precedence_order():
    assert QUALITY_PRECEDENCE == ("uhd", "hd", "sd", "ld")
