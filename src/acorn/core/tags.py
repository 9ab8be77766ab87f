"""Release tag normalization and channel extraction."""

import re

from acorn.errors import InvalidTagFilter

STABLE_CHANNEL = "stable"
VERSION_GROUP = "version"

# JavaScript-style named group, e.g. /.*-v(?<version>.*)/
_JS_NAMED_GROUP = re.compile(r"\(\?<(?=[A-Za-z_])")


class TagFilter:
    """A tag name filter compiled from a user supplied pattern.

    The pattern must define a named group ``version`` holding the part of
    the tag that is the actual version, e.g. ``desktop-v(?P<version>.*)``.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        try:
            self.regex = re.compile(_JS_NAMED_GROUP.sub("(?P<", pattern))
        except re.error as e:
            raise InvalidTagFilter(pattern, str(e)) from e

        if VERSION_GROUP not in self.regex.groupindex:
            raise InvalidTagFilter(pattern, f"missing named group '{VERSION_GROUP}'")

    def __repr__(self) -> str:
        return f"TagFilter({self.pattern!r})"

    def test(self, tag: str) -> bool:
        """Whether the pattern matches anywhere in the tag."""
        return self.regex.search(tag) is not None

    def extract(self, tag: str) -> str | None:
        """The ``version`` group of the first match, or None."""
        match = self.regex.search(tag)
        if match is None:
            return None
        return match.group(VERSION_GROUP) or None


def compile_filter(pattern: "str | TagFilter | None") -> TagFilter | None:
    """Build a TagFilter from configuration, passing through None and compiled filters."""
    if pattern is None or isinstance(pattern, TagFilter):
        return pattern
    if not pattern.strip():
        return None
    return TagFilter(pattern)


def normalize_tag(tag: str, tag_filter: TagFilter | None = None) -> str:
    """Turn a release tag into a version string.

    With a filter, the ``version`` group is returned; a tag the filter does
    not match comes back unchanged. Without a filter a leading ``v`` is
    stripped.
    """
    if tag_filter is not None:
        version = tag_filter.extract(tag)
        return tag if version is None else version

    if tag.startswith("v"):
        return tag[1:]
    return tag


def _suffix_channel(version: str) -> str:
    parts = version.split("-")
    if len(parts) < 2:
        return STABLE_CHANNEL
    return parts[1].split(".")[0].lower() or STABLE_CHANNEL


def extract_channel(tag: str, tag_filter: TagFilter | None = None) -> str:
    """Channel of a tag: the pre-release token after the first dash, else stable.

    "v2.0.0-beta.1" -> "beta", "v1.0.0" -> "stable"
    """
    if tag_filter is None:
        return _suffix_channel(tag)

    version = tag_filter.extract(tag)
    if version is None:
        return STABLE_CHANNEL
    return _suffix_channel(version)
