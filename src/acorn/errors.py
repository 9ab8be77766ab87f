"""Error types raised by acorn.

Every failure the core reports derives from AcornError so callers can
handle them at one seam while still telling the kinds apart.
"""


class AcornError(Exception):
    """Base class for acorn errors."""

    pass


class ConfigError(AcornError):
    """Invalid or incomplete configuration."""

    pass


class VersionNotFound(AcornError):
    """No version matches the requested tag, channel and platform."""

    def __init__(self, tag: str, channel: str | None = None, platform: str | None = None):
        self.tag = tag
        self.channel = channel
        self.platform = platform

        details = []
        if channel:
            details.append(f"channel={channel}")
        if platform:
            details.append(f"platform={platform}")
        message = f"Version not found: {tag}"
        if details:
            message += f" ({', '.join(details)})"
        super().__init__(message)


class PlatformUndetected(AcornError):
    """No platform was given and none could be inferred from the client."""

    def __init__(self, hint: str | None = None):
        self.hint = hint
        super().__init__("No platform specified and impossible to detect one")


class AssetNotFound(AcornError):
    """A resolved version has no asset matching the request."""

    def __init__(self, tag: str, filename: str | None = None, platform: str | None = None):
        self.tag = tag
        self.filename = filename
        self.platform = platform

        if filename:
            message = f"File {filename} not found in version {tag}"
        else:
            message = f"No download available for platform {platform} for version {tag}"
        super().__init__(message)


class MalformedReleasesFile(AcornError):
    """A RELEASES line does not have the expected fields."""

    def __init__(self, line_number: int, line: str, reason: str = "expected 3 fields"):
        self.line_number = line_number
        self.line = line
        super().__init__(f"Malformed RELEASES line {line_number}: {line!r} ({reason})")


class InvalidTagFilter(AcornError):
    """A tag filter pattern could not be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid tag filter {pattern!r}: {reason}")


class ComparatorFailure(AcornError):
    """A tag or range expression is not valid semantic versioning."""

    def __init__(self, value: str, reason: str = "not a valid semantic version"):
        self.value = value
        super().__init__(f"Cannot compare {value!r}: {reason}")
