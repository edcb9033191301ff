"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from weight_charts.adapters.sample_entry_source import SampleEntrySource
from weight_charts.adapters.weightgurus_client import HttpxWeightGurusClient
from weight_charts.config import Settings, resolve_timezone
from weight_charts.services.cache import InMemoryEntryLogCache
from weight_charts.services.charts import ChartService, EntrySource
from weight_charts.services.sections import build_sections


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_source: EntrySource
    chart_service: ChartService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    close_callbacks: list[Callable[[], Awaitable[None]]] = []

    entry_source: EntrySource
    if resolved_settings.entry_source == "weightgurus":
        if not (
            resolved_settings.weightgurus_email
            and resolved_settings.weightgurus_password
        ):
            raise ValueError(
                "WEIGHTGURUS_EMAIL and WEIGHTGURUS_PASSWORD are required "
                "for the weightgurus entry source"
            )
        client = HttpxWeightGurusClient.create(
            email=resolved_settings.weightgurus_email,
            password=resolved_settings.weightgurus_password,
            base_url=resolved_settings.weightgurus_base_url,
        )
        close_callbacks.append(client.close)
        entry_source = client
    else:
        entry_source = SampleEntrySource(
            days=resolved_settings.sample_days,
            seed=resolved_settings.sample_seed,
        )

    chart_service = ChartService(
        entry_source=entry_source,
        sections=build_sections(tz=resolve_timezone(resolved_settings.chart_timezone)),
        cache=InMemoryEntryLogCache(),
        cache_ttl_seconds=resolved_settings.entries_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        for close in close_callbacks:
            await close()

    return AppContainer(
        settings=resolved_settings,
        entry_source=entry_source,
        chart_service=chart_service,
        close_resources=close_resources,
    )
