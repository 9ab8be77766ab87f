"""Semantic version parsing, ordering and range matching.

Versions must be strict ``MAJOR.MINOR.PATCH`` (optionally ``v`` prefixed,
with pre-release and build parts). The numeric core is compared with
``packaging``; pre-release identifiers follow semver precedence: compared
field by field, numeric fields as numbers and below alphanumeric ones, a
shorter list first, and any pre-release below the plain release. Build
metadata is ignored.

Range expressions use the npm subset::

    1.2.3  =1.2.3  >=1.2.0  <2.0.0  ^1.2.0  ~1.2  1.x  *
    >=1.0.0 <2.0.0        (conjunction, spaces or commas)
    ^1.0.0 || ^2.0.0      (alternation)

Pre-release versions are not excluded from ranges; they are matched by
precedence like any other version.
"""

import operator
import re
from dataclasses import dataclass, field
from typing import Callable

from packaging.version import Version

from acorn.errors import ComparatorFailure

IDENTIFIERS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

SEMVER_PATTERN = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<prerelease>{IDENTIFIERS}))?"
    rf"(?:\+(?P<build>{IDENTIFIERS}))?$"
)

COMPARATOR_PATTERN = re.compile(
    r"^(?P<op>>=|<=|==|!=|>|<|=|\^|~)?v?"
    r"(?P<numbers>[0-9xX*]+(?:\.[0-9xX*]+){0,2})"
    rf"(?:-(?P<prerelease>{IDENTIFIERS}))?"
    rf"(?:\+{IDENTIFIERS})?$"
)

WILDCARDS = ("x", "X", "*")

OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    ">=": operator.ge,
    ">": operator.gt,
    "<": operator.lt,
    "<=": operator.le,
}


def _precedence(prerelease: str) -> tuple:
    if not prerelease:
        return (1,)

    identifiers = []
    for identifier in prerelease.split("."):
        if identifier.isdigit():
            identifiers.append((0, int(identifier)))
        else:
            identifiers.append((1, identifier))
    return (0, tuple(identifiers))


@dataclass(frozen=True, order=True)
class SemVer:
    """A parsed semantic version, ordered by semver precedence."""

    core: Version
    precedence: tuple = field(repr=False)
    prerelease: str = field(default="", compare=False)

    def __str__(self) -> str:
        if self.prerelease:
            return f"{self.core}-{self.prerelease}"
        return str(self.core)


def parse_version(text: str) -> SemVer:
    """Parse a strict semantic version. Raises ComparatorFailure otherwise."""
    match = SEMVER_PATTERN.match(text.strip())
    if not match:
        raise ComparatorFailure(text)

    prerelease = match["prerelease"] or ""
    return SemVer(
        core=Version(f"{match['major']}.{match['minor']}.{match['patch']}"),
        precedence=_precedence(prerelease),
        prerelease=prerelease,
    )


def exact_version(expression: str) -> SemVer | None:
    """The version an expression pins exactly ("1.2.0", "=1.2.0-beta.1"), else None."""
    match = SEMVER_PATTERN.match(expression.strip().lstrip("="))
    if not match:
        return None
    return parse_version(match.group(0))


def compare(a: str, b: str) -> int:
    """-1, 0 or 1 as version `a` is lower than, equal to or greater than `b`."""
    va, vb = parse_version(a), parse_version(b)
    if va > vb:
        return 1
    if va < vb:
        return -1
    return 0


def gt(a: str, b: str) -> bool:
    return compare(a, b) > 0


Check = Callable[[SemVer], bool]


def _bump(numbers: list[int]) -> SemVer:
    """Lowest version above every version starting with `numbers`, pre-releases included."""
    bumped = numbers[:-1] + [numbers[-1] + 1]
    bumped += [0] * (3 - len(bumped))
    return parse_version(".".join(str(n) for n in bumped) + "-0")


def _test(op: str, bound: SemVer) -> Check:
    compare_to = OPERATORS[op]
    return lambda version: compare_to(version, bound)


def _comparator_tests(comparator: str) -> list[Check]:
    match = COMPARATOR_PATTERN.match(comparator)
    if not match:
        raise ComparatorFailure(comparator, "invalid range comparator")

    op = match["op"] or "="
    numbers = []
    for part in match["numbers"].split("."):
        if part in WILDCARDS:
            break
        numbers.append(int(part))

    if not numbers:
        if op in ("=", "==", ">=", "<=", "^", "~"):
            return []
        raise ComparatorFailure(comparator, "wildcard cannot be used with " + op)

    padded = numbers + [0] * (3 - len(numbers))
    exact = len(numbers) == 3
    text = ".".join(str(n) for n in padded)
    if exact and match["prerelease"]:
        text += "-" + match["prerelease"]
    lower = parse_version(text)

    if op in ("=", "=="):
        return [_test("==", lower)] if exact else [_test(">=", lower), _test("<", _bump(numbers))]
    if op == "!=":
        if exact:
            return [_test("!=", lower)]
        upper = _bump(numbers)
        return [lambda version: version < lower or version >= upper]
    if op == ">":
        return [_test(">", lower)] if exact else [_test(">=", _bump(numbers))]
    if op == "<=":
        return [_test("<=", lower)] if exact else [_test("<", _bump(numbers))]
    if op in (">=", "<"):
        return [_test(op, lower)]
    if op == "~":
        return [_test(">=", lower), _test("<", _bump(numbers[:2]))]

    # caret: allow changes that keep the left-most non-zero component
    major, minor, _ = padded
    if major > 0 or len(numbers) == 1:
        upper = _bump(numbers[:1])
    elif minor > 0 or len(numbers) == 2:
        upper = _bump(numbers[:2])
    else:
        upper = _bump(numbers)
    return [_test(">=", lower), _test("<", upper)]


def _range_tests(expression: str) -> list[list[Check]]:
    alternatives = []
    for alternative in expression.split("||"):
        # ">= 1.2.0" -> ">=1.2.0"
        alternative = re.sub(r"(>=|<=|==|!=|>|<|=|\^|~)\s+", r"\1", alternative)
        tests = []
        for comparator in alternative.replace(",", " ").split():
            tests.extend(_comparator_tests(comparator))
        alternatives.append(tests)
    return alternatives


def satisfies(version: str, expression: str) -> bool:
    """Whether `version` falls inside the range `expression`."""
    parsed = parse_version(version)
    return any(all(test(parsed) for test in tests) for tests in _range_tests(expression))
