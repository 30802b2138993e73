"""Semantic-version helpers used for the producer/consumer compatibility check."""

from __future__ import annotations

from functools import lru_cache

import semver


@lru_cache(maxsize=128)
def parse_version(value: str) -> semver.Version:
    """Parse *value* as a semantic version. Raises ``ValueError`` if invalid."""
    return semver.Version.parse(value.strip())


def is_valid_version(value: str | None) -> bool:
    """Return ``True`` if *value* parses as a semantic version."""
    if not value:
        return False
    try:
        parse_version(value)
    except (TypeError, ValueError):
        return False
    return True


def compare_versions(left: str | semver.Version, right: str | semver.Version) -> int:
    """Three-way compare of two semantic versions: -1, 0 or 1."""
    lhs = left if isinstance(left, semver.Version) else parse_version(left)
    rhs = right if isinstance(right, semver.Version) else parse_version(right)
    return lhs.compare(rhs)


__all__ = ["compare_versions", "is_valid_version", "parse_version"]
