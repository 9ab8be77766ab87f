"""Squirrel.Windows RELEASES file parsing and generation.

A RELEASES file lists one NuGet package per line::

    <sha1> <filename> <size>

where the filename embeds the package version, e.g.
``myapp-1.2.0-full.nupkg`` or ``myapp-1.2.0.102-delta.nupkg``.
"""

import logging
import re
from dataclasses import dataclass

from acorn.errors import MalformedReleasesFile

logger = logging.getLogger(__name__)

BOM = "\ufeff"

# Pre-release channels that can be encoded in a 4-part Windows version
CHANNELS = ["alpha", "beta", "unstable", "rc"]
CHANNEL_STEP = 100

PACKAGE_SUFFIX = re.compile(r"(-full|-delta)?\.nupkg$", re.IGNORECASE)
PACKAGE_NAME = re.compile(
    r"^(?P<app>.+?)-(?P<version>\d+(?:\.\d+){2,3}(?:-[0-9A-Za-z][0-9A-Za-z.-]*)?)$"
)
SEMVER_PRERELEASE = re.compile(r"^(?P<channel>[A-Za-z]+)\.?(?P<count>\d+)?$")


@dataclass
class ReleaseEntry:
    """One package line of a RELEASES file."""

    sha: str
    filename: str
    size: int
    app: str = ""
    version: str = ""
    semver: str = ""
    is_delta: bool = False

    @classmethod
    def from_filename(cls, sha: str, filename: str, size: int) -> "ReleaseEntry":
        """Build an entry, recovering app name and version from the package filename."""
        is_delta = filename.lower().endswith("-delta.nupkg")
        app, version = "", ""

        match = PACKAGE_NAME.match(PACKAGE_SUFFIX.sub("", filename))
        if match:
            app, version = match["app"], match["version"]

        return cls(
            sha=sha,
            filename=filename,
            size=size,
            app=app,
            version=version,
            semver=to_semver(version) if version else "",
            is_delta=is_delta,
        )

    def package_filename(self) -> str:
        """Canonical package filename for this entry."""
        kind = "delta" if self.is_delta else "full"
        return f"{self.app}-{self.version}-{kind}.nupkg"


def to_semver(version: str) -> str:
    """Map a Windows package version to semver.

    "1.2.0" -> "1.2.0", "1.2.0.203" -> "1.2.0-unstable.3"
    """
    if "-" in version:
        return version

    parts = version.split(".")
    semver = ".".join(parts[:3])
    if len(parts) < 4:
        return semver

    encoded = int(parts[3])
    channel_index = encoded // CHANNEL_STEP - 1
    if encoded <= 0 or not 0 <= channel_index < len(CHANNELS):
        return semver
    return f"{semver}-{CHANNELS[channel_index]}.{encoded % CHANNEL_STEP}"


def to_windows_version(semver: str) -> str:
    """Map a semver to a 4-part Windows version NuGet accepts.

    "1.2.0-beta.4" -> "1.2.0.204"; unknown channels are kept as "1.2.0".
    """
    core, _, prerelease = semver.partition("-")
    if not prerelease:
        return core

    match = SEMVER_PRERELEASE.match(prerelease)
    if not match or match["channel"].lower() not in CHANNELS:
        return core

    channel_index = CHANNELS.index(match["channel"].lower())
    count = int(match["count"] or 0)
    return f"{core}.{(channel_index + 1) * CHANNEL_STEP + count}"


def parse(content: str) -> list[ReleaseEntry]:
    """Parse RELEASES content. Blank lines are skipped, CRLF is accepted."""
    if content.startswith(BOM):
        content = content[len(BOM):]

    entries = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue

        fields = line.split()
        if len(fields) != 3:
            raise MalformedReleasesFile(line_number, line)

        sha, filename, size = fields
        if not size.isdigit():
            raise MalformedReleasesFile(line_number, line, "size is not a number")

        entry = ReleaseEntry.from_filename(sha, filename, int(size))
        if not entry.semver:
            logger.warning("RELEASES line %d: no version in package name %s", line_number, filename)
        entries.append(entry)
    return entries


def generate(entries: list[ReleaseEntry]) -> str:
    """Write entries back to RELEASES content, one line each, in order."""
    lines = []
    for entry in entries:
        filename = entry.filename or entry.package_filename()
        lines.append(f"{entry.sha} {filename} {entry.size}")
    return "\n".join(lines)
