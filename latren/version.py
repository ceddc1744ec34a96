"""Engine version information and its textual form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

VERSION_MAJOR = 0
VERSION_MINOR = 1
DEBUG_BUILD = False


@dataclass(frozen=True)
class VersionInfo:
    """A major/minor version pair."""

    major: int
    minor: int


class BuildType(Enum):
    DEBUG = "DEBUG"
    RELEASE = "RELEASE"


def get_build_version() -> VersionInfo:
    """Return the version this package was built as."""
    return VersionInfo(VERSION_MAJOR, VERSION_MINOR)


def get_build_type() -> BuildType:
    """Return whether this is a debug or a release build."""
    return BuildType.DEBUG if DEBUG_BUILD else BuildType.RELEASE


def format_version(
    version: VersionInfo | None = None, build_type: BuildType | None = None
) -> str:
    """Format a version as ``v<major>.<minor> [<Build type>]``."""
    if version is None:
        version = get_build_version()
    if build_type is None:
        build_type = get_build_type()
    name = build_type.name.lower()
    name = name[:1].upper() + name[1:]
    return f"v{version.major}.{version.minor} [{name}]"