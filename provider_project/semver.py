"""Semantic-version ranges as understood by npm.

Parses version strings and range expressions (``^1.2.3``, ``~1.2``,
``>=0.12.2 <0.14.0``, ``1.2.x``, ``1.2.3 - 2.0.0``, ``a || b``) into
primitive comparators so that the generator can validate configured version
constraints and pin dev dependencies to the lowest version a range allows.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import NamedTuple, Optional


class SemverError(ValueError):
    """Raised when a version or range expression cannot be parsed."""


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """A parsed ``major.minor.patch[-prerelease]`` version."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            base += "-" + ".".join(self.prerelease)
        return base

    def as_tuple(self) -> tuple:
        """Sort key; a release sorts after all of its pre-releases."""
        pre_key = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in self.prerelease
        )
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre_key)

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def next_patch(self) -> "Version":
        """Smallest version strictly greater than this one."""
        if self.prerelease:
            return Version(self.major, self.minor, self.patch, self.prerelease + ("0",))
        return Version(self.major, self.minor, self.patch + 1)


_VERSION_RE = re.compile(
    r"^\s*v?(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?\s*$"
)

_PARTIAL_RE = re.compile(
    r"^v?(\d+|[xX*])"
    r"(?:\.(\d+|[xX*]))?"
    r"(?:\.(\d+|[xX*]))?"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)

_COERCE_RE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_version(text: str) -> Version:
    """Parse a full ``X.Y.Z`` version (pre-release and build metadata allowed).

    Raises:
        SemverError: If *text* is not a complete version.
    """
    match = _VERSION_RE.match(text)
    if not match:
        raise SemverError(f"Invalid version: {text!r}")
    major, minor, patch, pre = match.groups()
    return Version(
        int(major),
        int(minor),
        int(patch),
        tuple(pre.split(".")) if pre else (),
    )


def is_version(text: str) -> bool:
    """Return ``True`` if *text* is an exact version rather than a range."""
    return _VERSION_RE.match(text) is not None


def coerce(text: str) -> Optional[Version]:
    """Extract the first version-looking number from *text*.

    Missing components are filled with zeros, so ``"~> 3.1"`` coerces to
    ``3.1.0``.  Returns ``None`` when *text* contains no digits.
    """
    match = _COERCE_RE.search(text)
    if not match:
        return None
    major, minor, patch = match.groups()
    return Version(int(major), int(minor or 0), int(patch or 0))


# ---------------------------------------------------------------------------
# Comparators
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Comparator:
    """A primitive ``<op><version>`` test."""

    operator: str
    version: Version

    def __str__(self) -> str:
        return f"{self.operator}{self.version}"

    def test(self, version: Version) -> bool:
        if self.operator == ">=":
            return version >= self.version
        if self.operator == ">":
            return version > self.version
        if self.operator == "<=":
            return version <= self.version
        if self.operator == "<":
            return version < self.version
        return version == self.version


class _Partial(NamedTuple):
    major: Optional[int]
    minor: Optional[int]
    patch: Optional[int]
    prerelease: tuple[str, ...]


# Matches nothing: every version is >= 0.0.0-0.
_NOTHING = Comparator("<", Version(0, 0, 0, ("0",)))

_OPERATOR_RE = re.compile(r"^(<=|>=|~>|[<>=~^])?(.*)$")


def _parse_partial(text: str, source: str) -> _Partial:
    match = _PARTIAL_RE.match(text)
    if not match:
        raise SemverError(f"Invalid version range {source!r}: bad version {text!r}")
    parts: list[Optional[int]] = []
    wildcard = False
    for raw in match.groups()[:3]:
        if raw is None or wildcard or raw in ("x", "X", "*"):
            wildcard = True
            parts.append(None)
        else:
            parts.append(int(raw))
    pre = match.group(4)
    prerelease = tuple(pre.split(".")) if pre and parts[2] is not None else ()
    return _Partial(parts[0], parts[1], parts[2], prerelease)


def _floor(p: _Partial) -> Version:
    return Version(p.major or 0, p.minor or 0, p.patch or 0, p.prerelease)


def _expand(operator: str, p: _Partial) -> list[Comparator]:
    """Desugar one ``<op><partial>`` token into primitive comparators."""
    major, minor, patch = p.major, p.minor, p.patch

    if operator in ("", "="):
        if major is None:
            return []
        if minor is None:
            return [Comparator(">=", Version(major)), Comparator("<", Version(major + 1))]
        if patch is None:
            return [
                Comparator(">=", Version(major, minor)),
                Comparator("<", Version(major, minor + 1)),
            ]
        return [Comparator("=", _floor(p))]

    if operator in ("~", "~>"):
        if major is None:
            return []
        if minor is None:
            return [Comparator(">=", Version(major)), Comparator("<", Version(major + 1))]
        return [
            Comparator(">=", _floor(p)),
            Comparator("<", Version(major, minor + 1)),
        ]

    if operator == "^":
        if major is None:
            return []
        if minor is None:
            upper = Version(major + 1)
        elif major > 0:
            upper = Version(major + 1)
        elif patch is None or minor > 0:
            upper = Version(0, minor + 1)
        else:
            upper = Version(0, 0, patch + 1)
        return [Comparator(">=", _floor(p)), Comparator("<", upper)]

    if operator == ">":
        if major is None:
            return [_NOTHING]
        if minor is None:
            return [Comparator(">=", Version(major + 1))]
        if patch is None:
            return [Comparator(">=", Version(major, minor + 1))]
        return [Comparator(">", _floor(p))]

    if operator == ">=":
        return [] if major is None else [Comparator(">=", _floor(p))]

    if operator == "<":
        return [_NOTHING] if major is None else [Comparator("<", _floor(p))]

    # "<="
    if major is None:
        return []
    if minor is None:
        return [Comparator("<", Version(major + 1))]
    if patch is None:
        return [Comparator("<", Version(major, minor + 1))]
    return [Comparator("<=", _floor(p))]


def _expand_hyphen(low: _Partial, high: _Partial) -> list[Comparator]:
    comparators = _expand(">=", low)
    if high.major is None:
        return comparators
    if high.minor is None:
        return comparators + [Comparator("<", Version(high.major + 1))]
    if high.patch is None:
        return comparators + [Comparator("<", Version(high.major, high.minor + 1))]
    return comparators + [Comparator("<=", _floor(high))]


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Range:
    """A parsed range: a union (``||``) of comparator intersections."""

    raw: str
    comparator_sets: tuple[tuple[Comparator, ...], ...]

    def __str__(self) -> str:
        return self.raw

    def test(self, version: Version) -> bool:
        """Return ``True`` if *version* satisfies the range."""
        return any(
            all(c.test(version) for c in comparators)
            for comparators in self.comparator_sets
        )

    def min_version(self) -> Optional[Version]:
        """Return the lowest version that satisfies the range, if any."""
        for floor in (Version(0, 0, 0), Version(0, 0, 0, ("0",))):
            if self.test(floor):
                return floor

        lowest: Optional[Version] = None
        for comparators in self.comparator_sets:
            set_min: Optional[Version] = None
            for comparator in comparators:
                if comparator.operator == ">":
                    candidate = comparator.version.next_patch()
                elif comparator.operator in (">=", "="):
                    candidate = comparator.version
                else:
                    continue
                if set_min is None or candidate > set_min:
                    set_min = candidate
            if set_min is not None and (lowest is None or set_min < lowest):
                lowest = set_min

        if lowest is not None and self.test(lowest):
            return lowest
        return None


def parse_range(text: str) -> Range:
    """Parse an npm range expression.

    Raises:
        SemverError: If the expression is blank or contains an invalid token.
    """
    if not text or not text.strip():
        raise SemverError("Version range must not be empty")

    sets: list[tuple[Comparator, ...]] = []
    for raw_set in text.split("||"):
        raw_set = raw_set.strip()
        if not raw_set:
            raise SemverError(f"Invalid version range {text!r}: empty alternative")

        hyphen = re.fullmatch(r"(\S+)\s+-\s+(\S+)", raw_set)
        if hyphen:
            low = _parse_partial(hyphen.group(1), text)
            high = _parse_partial(hyphen.group(2), text)
            sets.append(tuple(_expand_hyphen(low, high)))
            continue

        # ">= 1.2.3" is the same comparator as ">=1.2.3"
        normalised = re.sub(r"(<=|>=|~>|[<>=~^])\s+", r"\1", raw_set)
        comparators: list[Comparator] = []
        for token in normalised.split():
            match = _OPERATOR_RE.match(token)
            operator = match.group(1) or ""
            comparators.extend(_expand(operator, _parse_partial(match.group(2), text)))
        sets.append(tuple(comparators))

    return Range(raw=text.strip(), comparator_sets=tuple(sets))


def min_version(text: str) -> Version:
    """Return the lowest version satisfying the range expression *text*.

    Raises:
        SemverError: If the range is invalid or no version satisfies it.
    """
    found = parse_range(text).min_version()
    if found is None:
        raise SemverError(f"Version range {text!r} is not satisfiable")
    return found


def satisfies(version: str | Version, range_text: str) -> bool:
    """Return ``True`` if *version* falls inside the range *range_text*."""
    if isinstance(version, str):
        version = parse_version(version)
    return parse_range(range_text).test(version)
