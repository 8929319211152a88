"""Out-of-date dependency entries found while diffing a manifest."""

from __future__ import annotations

from dataclasses import dataclass, field

SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


@dataclass(frozen=True)
class UpdateCandidate:
    """A tracked dependency whose declared bare version differs from expected.

    ``actual`` is the raw declared version, ``exact`` the same version with
    its specifier removed.
    """

    name: str
    actual: str
    exact: str
    expected: str

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "actual": self.actual,
            "exact": self.exact,
            "expected": self.expected,
        }


@dataclass(frozen=True)
class CandidateLists:
    """Update candidates for each dependency section of one manifest."""

    dependencies: tuple[UpdateCandidate, ...] = field(default_factory=tuple)
    dev_dependencies: tuple[UpdateCandidate, ...] = field(default_factory=tuple)
    peer_dependencies: tuple[UpdateCandidate, ...] = field(default_factory=tuple)

    @property
    def has_updates(self) -> bool:
        return bool(self.dependencies or self.dev_dependencies or self.peer_dependencies)

    def by_section(self) -> dict[str, tuple[UpdateCandidate, ...]]:
        """Return the lists keyed by their manifest section name."""
        return dict(
            zip(
                SECTIONS,
                (self.dependencies, self.dev_dependencies, self.peer_dependencies),
                strict=True,
            )
        )

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        return {
            section: [c.to_dict() for c in candidates]
            for section, candidates in self.by_section().items()
        }
