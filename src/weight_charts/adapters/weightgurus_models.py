"""Pydantic models for Weight Gurus API payloads."""

import logging

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from weight_charts.domain.entries import OperationType, RawEntry

_logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class LoginResponse(_CamelModel):
    """Login response payload."""

    access_token: str
    refresh_token: str | None = None
    expires_at: str | None = None


class WeightGurusOperation(_CamelModel):
    """One operation row from the entry log endpoint."""

    operation_type: str = ""
    entry_timestamp: str
    server_timestamp: str = ""
    weight: int = 0
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

    def to_entry(self) -> RawEntry:
        """Convert the payload into a domain entry."""
        return RawEntry(
            operation_type=OperationType.from_raw(self.operation_type),
            entry_timestamp=self.entry_timestamp,
            server_timestamp=self.server_timestamp,
            weight=self.weight,
            unit=self.unit,
            source=self.source,
            body_fat=self.body_fat,
            muscle_mass=self.muscle_mass,
            bone_mass=self.bone_mass,
            water=self.water,
            bmi=self.bmi,
            impedance=self.impedance,
            pulse=self.pulse,
            visceral_fat_level=self.visceral_fat_level,
            subcutaneous_fat_percent=self.subcutaneous_fat_percent,
            protein_percent=self.protein_percent,
            skeletal_muscle_percent=self.skeletal_muscle_percent,
            bmr=self.bmr,
            metabolic_age=self.metabolic_age,
        )


def parse_operations(payload: dict[str, object]) -> list[RawEntry]:
    """Decode the ``operations`` list, skipping rows that fail validation."""
    raw_operations = payload.get("operations")
    if not isinstance(raw_operations, list):
        return []
    entries: list[RawEntry] = []
    skipped = 0
    for row in raw_operations:
        try:
            operation = WeightGurusOperation.model_validate(row)
        except ValidationError:
            skipped += 1
            continue
        entries.append(operation.to_entry())
    if skipped:
        _logger.warning("Skipped %s malformed operations", skipped)
    return entries
