"""Domain models for weight entries and chart points."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

DEFAULT_UNIT = "kg"
FIXED_POINT_SCALE = 10.0


class OperationType(str, Enum):
    """Kind of operation recorded in the entry log."""

    CREATE = "create"
    DELETE = "delete"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: str | None) -> "OperationType":
        """Parse a vendor operation string, case-insensitively."""
        normalized = (value or "").strip().lower()
        for member in (cls.CREATE, cls.DELETE):
            if normalized == member.value:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class RawEntry:
    """One logged operation from the scale's entry log.

    Rows sharing an ``entry_timestamp`` form the operation history of a
    single logical entry. ``weight`` is fixed-point (x10) in ``unit``.
    """

    operation_type: OperationType
    entry_timestamp: str
    server_timestamp: str
    weight: int
    unit: str | None = None
    source: str = ""
    body_fat: float | None = None
    muscle_mass: float | None = None
    bone_mass: float | None = None
    water: float | None = None
    bmi: float | None = None
    impedance: float | None = None
    pulse: float | None = None
    visceral_fat_level: float | None = None
    subcutaneous_fat_percent: float | None = None
    protein_percent: float | None = None
    skeletal_muscle_percent: float | None = None
    bmr: float | None = None
    metabolic_age: float | None = None

    @property
    def is_create(self) -> bool:
        return self.operation_type is OperationType.CREATE

    @property
    def is_delete(self) -> bool:
        return self.operation_type is OperationType.DELETE

    @property
    def display_unit(self) -> str:
        return self.unit or DEFAULT_UNIT

    @property
    def display_weight(self) -> float:
        return self.weight / FIXED_POINT_SCALE


@dataclass(frozen=True)
class ChartPoint:
    """Immutable projection of an entry used for charting."""

    date: datetime
    weight: float
    source_entry: RawEntry

    @classmethod
    def from_entry(cls, entry: RawEntry, date: datetime) -> "ChartPoint":
        """Build a point for an entry at a resolved date."""
        return cls(date=date, weight=entry.display_weight, source_entry=entry)

    @property
    def unit(self) -> str:
        return self.source_entry.display_unit


@dataclass(frozen=True)
class WeightRange:
    """Axis range for the weight scale."""

    min: float
    max: float
