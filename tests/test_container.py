"""Tests for container wiring."""

import asyncio
from datetime import UTC

import pytest

from weight_charts.adapters.sample_entry_source import SampleEntrySource
from weight_charts.adapters.weightgurus_client import HttpxWeightGurusClient
from weight_charts.config import Settings, resolve_timezone
from weight_charts.containers import build_container
from weight_charts.domain.periods import TimePeriod


def test_build_container_with_sample_source(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.entry_source, SampleEntrySource)
    assert container.entry_source.days == 60
    assert set(container.chart_service.sections) == set(TimePeriod)

    result = asyncio.run(container.chart_service.refresh())
    assert result.applied
    assert container.chart_service.section(TimePeriod.MONTH).has_data
    asyncio.run(container.close_resources())


def test_build_container_with_weightgurus(settings: Settings) -> None:
    settings.entry_source = "weightgurus"
    settings.weightgurus_email = "me@example.com"
    settings.weightgurus_password = "secret"

    container = build_container(settings)

    assert isinstance(container.entry_source, HttpxWeightGurusClient)
    asyncio.run(container.close_resources())


def test_weightgurus_requires_credentials(settings: Settings) -> None:
    settings.entry_source = "weightgurus"

    with pytest.raises(ValueError):
        build_container(settings)


def test_resolve_timezone() -> None:
    assert resolve_timezone("") is UTC
    assert resolve_timezone(" utc ") is UTC
