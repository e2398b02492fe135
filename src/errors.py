"""Exceptions and non-fatal diagnostics raised or collected while building a layout."""

from dataclasses import dataclass


class TreeLayoutError(Exception):
    """Base class for fatal layout errors."""


class RootNotFoundError(TreeLayoutError):
    def __init__(self, person_id: str):
        super().__init__(f"Root person {person_id!r} not found in persons")
        self.person_id = person_id


class ConfigurationError(TreeLayoutError, ValueError):
    pass


@dataclass(frozen=True)
class Diagnostic:
    message: str

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class DanglingRelationshipWarning(Diagnostic):
    relationship_id: str = ""
    missing_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class CycleDetected(Diagnostic):
    parent_id: str = ""
    child_id: str = ""
    path: tuple[str, ...] = ()  # ancestry path that the dropped edge would close


@dataclass(frozen=True)
class DataQualityWarning(Diagnostic):
    person_id: str = ""
