from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from .enums import DiagnosticSeverity, Ecosystem


@dataclass(frozen=True)
class Position:
    line: int  # 0-based
    character: int  # 0-based

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Located:
    """A piece of manifest text together with where it starts."""

    value: str
    position: Position


@dataclass(frozen=True)
class DependencyIdentity:
    name: str
    version: str

    def to_payload(self) -> dict[str, str]:
        return {"package": self.name, "version": self.version}


@dataclass(frozen=True)
class Dependency:
    name: Located
    version: Located

    @property
    def identity(self) -> DependencyIdentity:
        return DependencyIdentity(self.name.value, self.version.value)

    @property
    def range(self) -> Range:
        """Range covering the version text; diagnostics are anchored here."""
        start = self.version.position
        return Range(start, Position(start.line, start.character + len(self.version.value)))

    @staticmethod
    def at(name: str, version: str, line: int, name_char: int = 0, version_char: int | None = None) -> "Dependency":
        """Build a dependency whose name and version sit on the same line."""
        if version_char is None:
            version_char = name_char + len(name) + 1
        return Dependency(
            name=Located(name, Position(line, name_char)),
            version=Located(version, Position(line, version_char)),
        )


class DependencyMap:
    """Multi-map from identity to every declaration sharing it.

    Duplicate declarations collapse into one query unit but keep their own
    positions, so each of them can be flagged.
    """

    def __init__(self, dependencies: Iterable[Dependency] = ()) -> None:
        self._items: dict[DependencyIdentity, list[Dependency]] = defaultdict(list)
        for dep in dependencies:
            self._items[dep.identity].append(dep)

    def get(self, identity: DependencyIdentity) -> list[Dependency]:
        return list(self._items.get(identity, ()))

    def identities(self) -> list[DependencyIdentity]:
        return list(self._items)

    def __contains__(self, identity: object) -> bool:
        return identity in self._items

    def __iter__(self) -> Iterator[DependencyIdentity]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class TotalCount:
    vulnerability_count: int = 0
    advisory_count: int = 0
    exploit_count: int = 0

    def add(self, *, vulnerabilities: int = 0, advisories: int = 0, exploits: int = 0) -> None:
        self.vulnerability_count += vulnerabilities
        self.advisory_count += advisories
        self.exploit_count += exploits

    def to_dict(self) -> dict[str, int]:
        return {
            "vulnerabilityCount": self.vulnerability_count,
            "advisoryCount": self.advisory_count,
            "exploitCount": self.exploit_count,
        }


@dataclass(frozen=True)
class Diagnostic:
    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    source: Optional[str] = None
    code: Optional[str] = None

    @property
    def anchor(self) -> tuple[int, int]:
        return (self.range.start.line, self.range.start.character)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": int(self.severity),
        }
        if self.source is not None:
            data["source"] = self.source
        if self.code is not None:
            data["code"] = self.code
        return data


@dataclass(frozen=True)
class TextEdit:
    range: Range
    new_text: str


@dataclass(frozen=True)
class Command:
    title: str
    command: str


@dataclass(frozen=True)
class CodeAction:
    title: str
    kind: str = "quickfix"
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    edits: dict[str, tuple[TextEdit, ...]] = field(default_factory=dict, compare=False)
    command: Optional[Command] = None


@dataclass(frozen=True)
class RequestBatch:
    ecosystem: Ecosystem
    items: tuple[DependencyIdentity, ...]

    def __len__(self) -> int:
        return len(self.items)

    def to_payload(self) -> dict[str, Any]:
        return {
            "ecosystem": self.ecosystem.value,
            "package_versions": [item.to_payload() for item in self.items],
        }


@dataclass(frozen=True)
class CacheLookup:
    key: DependencyIdentity
    value: Optional[dict[str, Any]] = None

    @property
    def hit(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ProgressNotification:
    uri: str
    data: str
    done: bool
    diag_count: int = 0
    dep_count: int = 0
    vuln_count: Optional[TotalCount] = None


@dataclass
class CycleReport:
    """What one analysis cycle produced, returned to library callers."""

    uri: str
    ecosystem: Ecosystem
    cycle_id: int
    dependency_count: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)
    counts: TotalCount = field(default_factory=TotalCount)
    message: Optional[str] = None
    batches: int = 0
    failed_batches: int = 0
    error: Optional[str] = None
    superseded: bool = False

    @property
    def aborted(self) -> bool:
        return self.error is not None
