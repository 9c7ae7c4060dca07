"""Core data models for GemBump."""

from dataclasses import dataclass, field
from datetime import datetime

from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class GemDeclaration:
    """A `gem` declaration extracted from a single Gemfile line."""

    name: str
    current_version: str | None = None  # None means unpinned
    has_alt_source: bool = False  # git, github, path, source, ...
    raw_constraint: str | None = None


@dataclass(frozen=True)
class ManifestLine:
    """One physical line of a Gemfile."""

    raw: str
    indent: str
    line_number: int
    declaration: GemDeclaration | None = None

    @property
    def is_declaration(self) -> bool:
        return self.declaration is not None


class ReleaseRecord(BaseModel):
    """A single published release, as returned by the RubyGems versions API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    number: str
    prerelease: bool = False
    created_at: datetime

    @property
    def version(self) -> Version | None:
        try:
            return Version(self.number)
        except InvalidVersion:
            return None


@dataclass(frozen=True)
class Resolved:
    """The resolver picked a target version."""

    version: str


@dataclass(frozen=True)
class Skipped:
    """The declaration is passed through unchanged."""

    reason: str


Resolution = Resolved | Skipped


@dataclass
class GemChange:
    """A declaration that went through resolution and was rebuilt."""

    name: str
    line_number: int
    current_version: str | None
    target_version: str
    old_line: str
    new_line: str

    @property
    def changed(self) -> bool:
        return self.old_line != self.new_line


@dataclass
class SkippedGem:
    """A declaration left untouched, with the reason why."""

    name: str
    line_number: int
    reason: str


@dataclass
class UpdateReport:
    """Report of changes made to a Gemfile."""

    filename: str
    lines: list[str]
    changes: list[GemChange] = field(default_factory=list)
    skipped: list[SkippedGem] = field(default_factory=list)

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    @property
    def has_changes(self) -> bool:
        return any(change.changed for change in self.changes)
