"""Pydantic models for the chart API."""

from datetime import UTC, datetime

from pydantic import BaseModel, field_validator

from weight_charts.domain.entries import FIXED_POINT_SCALE, ChartPoint
from weight_charts.domain.periods import TimePeriod
from weight_charts.services.sections import SectionController


def ensure_aware(value: datetime) -> datetime:
    """Read naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class ChartPointModel(BaseModel):
    """Chart point payload."""

    date: datetime
    weight: float
    unit: str
    bmi: float | None = None
    source: str

    @classmethod
    def from_point(cls, point: ChartPoint) -> "ChartPointModel":
        bmi = point.source_entry.bmi
        return cls(
            date=point.date,
            weight=point.weight,
            unit=point.unit,
            bmi=bmi / FIXED_POINT_SCALE if bmi is not None else None,
            source=point.source_entry.source,
        )


class WeightRangeModel(BaseModel):
    """Axis range payload."""

    min: float
    max: float


class SectionResponse(BaseModel):
    """Full state of one chart section."""

    period: TimePeriod
    label: str
    has_data: bool
    points: list[ChartPointModel]
    visible_points: list[ChartPointModel]
    weight_range: WeightRangeModel
    selected_date: datetime | None
    selected_point: ChartPointModel | None
    selected_date_label: str | None
    scroll_position: datetime | None
    weight_display_value: str
    weight_display_label: str
    bmi_display_value: str | None

    @classmethod
    def from_section(cls, section: SectionController) -> "SectionResponse":
        selected = section.selected_point
        return cls(
            period=section.period,
            label=section.period.display_name,
            has_data=section.has_data,
            points=[ChartPointModel.from_point(p) for p in section.chart_points],
            visible_points=[
                ChartPointModel.from_point(p) for p in section.get_visible_points()
            ],
            weight_range=WeightRangeModel(
                min=section.weight_range.min, max=section.weight_range.max
            ),
            selected_date=section.selected_date,
            selected_point=ChartPointModel.from_point(selected) if selected else None,
            selected_date_label=(
                section.format_date(section.selected_date)
                if section.selected_date
                else None
            ),
            scroll_position=section.scroll_position,
            weight_display_value=section.weight_display_value(),
            weight_display_label=section.weight_display_label(),
            bmi_display_value=section.bmi_display_value(),
        )


class SelectionRequest(BaseModel):
    """Select the point nearest to a date, or clear with ``null``."""

    date: datetime | None = None

    @field_validator("date")
    @classmethod
    def date_is_aware(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


class ScrollRequest(BaseModel):
    """Move the viewport center."""

    position: datetime

    @field_validator("position")
    @classmethod
    def position_is_aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class ValueResponse(BaseModel):
    """Interpolated weight at an instant."""

    at: datetime
    weight: float | None
    nearest: ChartPointModel | None


class RefreshResponse(BaseModel):
    """Outcome of a refresh request."""

    status: str
    entries: int
    generation: int
    applied: bool
