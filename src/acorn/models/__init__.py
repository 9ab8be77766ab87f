"""Data models for acorn."""

from acorn.models.release import RawRelease, RawAsset
from acorn.models.version import Asset, ChannelSummary, Version

__all__ = ["RawRelease", "RawAsset", "Asset", "ChannelSummary", "Version"]
