"""Platform detection and asset matching."""

from __future__ import annotations

import os
import platform
import re
from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from acorn.models.version import Asset, Version


ARCH_SUFFIXES = ("arm64", "32", "64")


class Platform(str, Enum):
    """Closed set of platform identifiers.

    Generic members (no architecture) are requests; assets are always
    classified to a member with an architecture.
    """

    LINUX = "linux"
    LINUX_32 = "linux_32"
    LINUX_64 = "linux_64"
    LINUX_ARM64 = "linux_arm64"
    LINUX_DEB = "linux_deb"
    LINUX_DEB_32 = "linux_deb_32"
    LINUX_DEB_64 = "linux_deb_64"
    LINUX_DEB_ARM64 = "linux_deb_arm64"
    LINUX_RPM = "linux_rpm"
    LINUX_RPM_32 = "linux_rpm_32"
    LINUX_RPM_64 = "linux_rpm_64"
    LINUX_RPM_ARM64 = "linux_rpm_arm64"
    OSX = "osx"
    OSX_32 = "osx_32"
    OSX_64 = "osx_64"
    OSX_ARM64 = "osx_arm64"
    WINDOWS = "windows"
    WINDOWS_32 = "windows_32"
    WINDOWS_64 = "windows_64"
    WINDOWS_ARM64 = "windows_arm64"

    def __str__(self) -> str:
        return self.value

    @property
    def arch(self) -> str | None:
        """Architecture suffix, or None for a generic platform."""
        for suffix in ARCH_SUFFIXES:
            if self.value.endswith("_" + suffix):
                return suffix
        return None

    @property
    def is_generic(self) -> bool:
        return self.arch is None

    @property
    def family(self) -> "Platform":
        """The generic platform this one refines."""
        arch = self.arch
        if arch is None:
            return self
        return Platform(self.value[: -len(arch) - 1])

    def satisfied_by(self, available: "Platform") -> bool:
        """Whether an asset built for `available` can serve a request for this platform.

        A platform satisfies itself; a generic request is also satisfied by
        every platform that refines it (linux <- linux_64, linux_deb_64).
        """
        if available is self:
            return True
        return self.is_generic and available.value.startswith(self.value + "_")


# Names clients use for a whole platform family
PLATFORM_ALIASES = {
    "osx": Platform.OSX,
    "darwin": Platform.OSX,
    "mac": Platform.OSX,
    "macos": Platform.OSX,
    "windows": Platform.WINDOWS,
    "win": Platform.WINDOWS,
    "win32": Platform.WINDOWS,
    "linux": Platform.LINUX,
}

# Squirrel.Windows packages are always served as the default windows build
SQUIRREL_WINDOWS_FILES = ("releases",)
SQUIRREL_WINDOWS_EXTENSIONS = (".nupkg",)

# Family patterns, applied in order; later matches win (darwin contains "win")
FAMILY_PATTERNS = [
    (Platform.WINDOWS, [r"win", r"\.exe$", r"^latest\.yml$"]),
    (Platform.LINUX, [r"linux", r"ubuntu", r"\.appimage$", r"\.tgz$", r"\.tar\.gz$"]),
    (Platform.LINUX_RPM, [r"linux_rpm", r"\.rpm$"]),
    (Platform.LINUX_DEB, [r"linux_deb", r"\.deb$"]),
    (Platform.OSX, [r"mac", r"osx", r"darwin", r"\.dmg$"]),
]

# Architecture patterns, first match wins
ARCH_PATTERNS = [
    ("arm64", [r"arm64", r"aarch64"]),
    ("64", [r"x86_64", r"amd64", r"x64", r"(?<!\d)(?<!\d\.)64(?!\d|\.\d)"]),
    ("32", [r"ia32", r"i386", r"i686", r"x86", r"(?<!\d)(?<!\d\.)32(?!\d|\.\d)"]),
]

DEFAULT_ARCH = {Platform.OSX: "64"}

# Order for filetype when several assets fit
FILE_PREFERENCE = [".exe", ".dmg", ".deb", ".rpm", ".tgz", ".tar.gz", ".zip", ".nupkg"]


def _detect_family(name: str) -> Platform | None:
    family = None
    for candidate, patterns in FAMILY_PATTERNS:
        if any(re.search(pattern, name) for pattern in patterns):
            # .deb/.rpm only refine a linux match, never a windows or mac one
            if candidate in (Platform.LINUX_RPM, Platform.LINUX_DEB) and family not in (
                None,
                Platform.LINUX,
            ):
                continue
            family = candidate
    return family


def _detect_arch(name: str) -> str | None:
    for arch, patterns in ARCH_PATTERNS:
        if any(re.search(pattern, name) for pattern in patterns):
            return arch
    return None


def detect(filename: str) -> Platform | None:
    """Classify an asset filename. Returns None for files that are not installers."""
    name = filename.lower()
    if name.endswith(".blockmap"):
        name = name[: -len(".blockmap")]

    if name in SQUIRREL_WINDOWS_FILES or name.endswith(SQUIRREL_WINDOWS_EXTENSIONS):
        return Platform.WINDOWS_32

    family = _detect_family(name)
    if family is None:
        return None

    arch = _detect_arch(name) or DEFAULT_ARCH.get(family, "32")
    return Platform(f"{family.value}_{arch}")


def parse_platform(value: "str | Platform | None") -> Platform | None:
    """Resolve a free-form platform request to a canonical platform."""
    if value is None or isinstance(value, Platform):
        return value

    name = value.strip().lower()
    try:
        return Platform(name)
    except ValueError:
        pass

    if name in PLATFORM_ALIASES:
        return PLATFORM_ALIASES[name]
    return detect(name)


def detect_from_user_agent(user_agent: str | None) -> Platform | None:
    """Guess the platform of a browser or updater from its User-Agent."""
    if not user_agent:
        return None
    if "Macintosh" in user_agent or "Mac OS X" in user_agent:
        return Platform.OSX
    if "Windows" in user_agent:
        return Platform.WINDOWS
    if "Linux" in user_agent:
        if "x86_64" in user_agent:
            return Platform.LINUX_64
        return Platform.LINUX
    return None


def current_platform() -> Platform | None:
    """Platform of the machine running acorn."""
    system = platform.system().lower()
    machine = platform.machine().lower()

    families = {"darwin": Platform.OSX, "linux": Platform.LINUX, "windows": Platform.WINDOWS}
    family = families.get(system)
    if family is None:
        return None

    # Normalize architecture
    if machine in ("x86_64", "amd64"):
        arch = "64"
    elif machine in ("arm64", "aarch64"):
        arch = "arm64"
    elif machine in ("i386", "i686", "x86"):
        arch = "32"
    else:
        return family

    return Platform(f"{family.value}_{arch}")


def satisfies(requested: Platform, available: Iterable[Platform]) -> bool:
    """Check whether any available platform can serve the requested one."""
    return any(requested.satisfied_by(platform) for platform in available)


def file_extension(filename: str) -> str:
    """Extension of a filename, keeping compound archive suffixes."""
    name = filename.lower()
    if name.endswith(".tar.gz"):
        return ".tar.gz"
    return os.path.splitext(name)[1]


def resolve(version: "Version", platform: "str | Platform", wanted: str | None = None) -> "Asset | None":
    """Pick the asset of a version to download for a platform.

    Candidates are ranked by file type preference (with `wanted`, e.g.
    ".zip", moved to the front). Ties keep asset order.
    """
    requested = parse_platform(platform)
    if requested is None:
        return None

    preference = list(FILE_PREFERENCE)
    if wanted:
        wanted = wanted.lower()
        preference = [wanted] + [ext for ext in preference if ext != wanted]

    def rank(asset: "Asset") -> int:
        ext = file_extension(asset.filename)
        return preference.index(ext) if ext in preference else len(preference)

    candidates = [asset for asset in version.platforms if requested.satisfied_by(asset.type)]
    if not candidates:
        return None
    return sorted(candidates, key=rank)[0]
