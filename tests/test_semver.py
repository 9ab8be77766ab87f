"""Tests for semantic version parsing and range matching."""

import pytest

from acorn.core import semver
from acorn.errors import ComparatorFailure


class TestParseVersion:
    def test_plain(self):
        assert str(semver.parse_version("1.2.3")) == "1.2.3"

    def test_v_prefix_and_build_metadata(self):
        assert semver.parse_version("v1.2.3+build.5") == semver.parse_version("1.2.3")

    def test_prerelease_sorts_before_release(self):
        assert semver.parse_version("1.0.0-beta.1") < semver.parse_version("1.0.0")

    @pytest.mark.parametrize("value", ["1.0", "latest", "1.0.0.0", "01.0.0", ""])
    def test_rejects_non_semver(self, value):
        with pytest.raises(ComparatorFailure):
            semver.parse_version(value)

    def test_any_prerelease_identifier(self):
        assert str(semver.parse_version("1.0.0-nightly.5")) == "1.0.0-nightly.5"
        assert str(semver.parse_version("1.2.0-unstable.3")) == "1.2.0-unstable.3"

    @pytest.mark.parametrize("value", ["1.0.0-", "1.0.0-beta..1", "1.0.0-beta.", "1.0.0+"])
    def test_rejects_empty_identifiers(self, value):
        with pytest.raises(ComparatorFailure):
            semver.parse_version(value)


class TestPrecedence:
    @pytest.mark.parametrize(
        "lower, higher",
        [
            ("1.0.0-1", "1.0.0"),
            ("1.0.0-nightly.5", "1.0.0"),
            ("1.0.0-nightly.5", "1.0.0-nightly.10"),
            ("1.0.0-alpha", "1.0.0-alpha.1"),
            ("1.0.0-alpha.1", "1.0.0-alpha.beta"),
            ("1.0.0-alpha.beta", "1.0.0-beta"),
            ("1.0.0-beta.11", "1.0.0-rc.1"),
            ("1.0.0-rc.1", "1.0.0-rc.1.2"),
            ("1.0.0-1", "1.0.0-alpha"),
            ("1.0.0", "1.0.1-0"),
        ],
    )
    def test_ordering(self, lower, higher):
        assert semver.compare(lower, higher) == -1
        assert semver.compare(higher, lower) == 1

    def test_build_metadata_ignored(self):
        assert semver.compare("1.0.0-rc.1+build.1", "1.0.0-rc.1+build.2") == 0

    def test_sorting(self):
        versions = ["1.0.0", "1.0.0-rc.1", "1.0.0-beta.2", "1.0.0-beta.11", "1.0.0-alpha", "0.9.0"]
        assert sorted(versions, key=semver.parse_version) == [
            "0.9.0",
            "1.0.0-alpha",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]


class TestExactVersion:
    def test_pinned(self):
        assert semver.exact_version("1.2.0-beta.1") == semver.parse_version("1.2.0-beta.1")
        assert semver.exact_version("=v1.2.0") == semver.parse_version("1.2.0")

    @pytest.mark.parametrize("expression", [">=1.2.0", "^1.2.0", "1.x", "*", "latest"])
    def test_ranges_are_not_pinned(self, expression):
        assert semver.exact_version(expression) is None


class TestCompare:
    def test_numeric_not_lexical(self):
        assert semver.compare("1.10.0", "1.9.0") == 1
        assert semver.gt("1.10.0", "1.9.0")

    def test_equal(self):
        assert semver.compare("1.0.0", "v1.0.0") == 0

    def test_lower(self):
        assert semver.compare("0.9.9", "1.0.0") == -1


class TestSatisfies:
    @pytest.mark.parametrize(
        "version, expression, expected",
        [
            ("1.2.0", ">=1.2.0", True),
            ("1.1.9", ">=1.2.0", False),
            ("1.2.0", ">= 1.2.0", True),
            ("1.5.0", ">=1.0.0 <2.0.0", True),
            ("2.0.0", ">=1.0.0 <2.0.0", False),
            ("2.0.0", ">=1.0.0, <2.0.0", False),
            ("1.2.3", "1.2.3", True),
            ("1.2.4", "=1.2.3", False),
            ("1.9.0", "^1.2.0", True),
            ("2.0.0", "^1.2.0", False),
            ("0.2.9", "^0.2.3", True),
            ("0.3.0", "^0.2.3", False),
            ("1.2.9", "~1.2.3", True),
            ("1.3.0", "~1.2.3", False),
            ("1.7.0", "1.x", True),
            ("2.0.0", "1.x", False),
            ("1.2.5", "1.2.*", True),
            ("5.0.0", "*", True),
            ("2.5.0", "^1.0.0 || ^2.0.0", True),
            ("3.0.0", "^1.0.0 || ^2.0.0", False),
            ("1.3.0", ">1.2", True),
            ("1.2.9", ">1.2", False),
            ("1.2.9", "<=1.2", True),
            ("1.3.0", "!=1.2.*", True),
            ("1.2.4", "!=1.2.*", False),
            ("1.0.0", ">=1.0.0-1", True),
            ("1.0.0", ">=1.0.0-nightly.1", True),
            ("1.0.0-rc.1", ">=1.0.0-beta.3", True),
            ("1.0.0-alpha", ">=1.0.0-beta.3", False),
            ("1.2.0-unstable.3", "1.2.0-unstable.3", True),
            ("1.2.0-unstable.3", ">=1.2.0", False),
            ("2.0.0-beta.1", "^1.2.0", False),
            ("2.0.0-beta.1", "<2.0.0", True),
        ],
    )
    def test_ranges(self, version, expression, expected):
        assert semver.satisfies(version, expression) is expected

    def test_invalid_range(self):
        with pytest.raises(ComparatorFailure):
            semver.satisfies("1.0.0", ">=banana")

    def test_invalid_version(self):
        with pytest.raises(ComparatorFailure):
            semver.satisfies("1.0", ">=1.0.0")
