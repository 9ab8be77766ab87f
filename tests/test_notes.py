"""Tests for release notes merging."""

from acorn.core.catalog import normalize_version
from acorn.core.notes import merge_notes
from conftest import make_release


def versions(*pairs):
    return [normalize_version(make_release(tag, body=body)) for tag, body in pairs]


def test_merge_with_tags():
    merged = merge_notes(versions(("v1.1.0", "Fixes"), ("v1.0.0", "Initial")))
    assert merged == "## 1.1.0\nFixes\n\n## 1.0.0\nInitial\n\n"


def test_merge_without_tags():
    merged = merge_notes(versions(("v1.1.0", "Fixes"), ("v1.0.0", "Initial")), include_tag=False)
    assert merged == "Fixes\nInitial\n"


def test_skips_empty_notes():
    merged = merge_notes(versions(("v1.2.0", ""), ("v1.1.0", "Fixes")), include_tag=False)
    assert merged == "Fixes\n"


def test_nothing_to_merge():
    assert merge_notes([]) == ""
