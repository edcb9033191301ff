"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

import httpx
from fastapi import FastAPI, HTTPException, Request, status

from weight_charts.adapters.weightgurus_client import WeightGurusError
from weight_charts.api.schemas import (
    ChartPointModel,
    RefreshResponse,
    ScrollRequest,
    SectionResponse,
    SelectionRequest,
    ValueResponse,
    ensure_aware,
)
from weight_charts.app_logging import configure_logging
from weight_charts.containers import AppContainer
from weight_charts.domain.periods import TimePeriod
from weight_charts.services.sections import SectionController


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.chart_service.refresh()
        except Exception:
            logger.exception("Initial chart refresh failed")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/charts/refresh")
    async def refresh_charts(request: Request, force: bool = False) -> RefreshResponse:
        """Reload the entry log and rebuild every section."""
        chart_service = _container(request).chart_service
        try:
            result = await chart_service.refresh(force=force)
        except (httpx.HTTPError, WeightGurusError) as exc:
            logger.exception("Chart refresh failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Entry source unavailable",
            ) from exc
        return RefreshResponse(
            status="ok",
            entries=result.entries,
            generation=result.generation,
            applied=result.applied,
        )

    @app.get("/charts/{period}")
    async def get_section(period: TimePeriod, request: Request) -> SectionResponse:
        """Return the state of one chart section."""
        return SectionResponse.from_section(_section(request, period))

    @app.put("/charts/{period}/selection")
    async def select_point(
        period: TimePeriod, selection: SelectionRequest, request: Request
    ) -> SectionResponse:
        """Select the point nearest to a date."""
        section = _section(request, period)
        section.select_point_at_date(selection.date)
        return SectionResponse.from_section(section)

    @app.delete("/charts/{period}/selection")
    async def clear_selection(period: TimePeriod, request: Request) -> SectionResponse:
        """Clear the current selection."""
        section = _section(request, period)
        section.clear_selection()
        return SectionResponse.from_section(section)

    @app.put("/charts/{period}/scroll")
    async def scroll(
        period: TimePeriod, scroll_request: ScrollRequest, request: Request
    ) -> SectionResponse:
        """Move the viewport center of a section."""
        section = _section(request, period)
        section.scroll_to(scroll_request.position)
        return SectionResponse.from_section(section)

    @app.get("/charts/{period}/value")
    async def value_at(
        period: TimePeriod, at: datetime, request: Request
    ) -> ValueResponse:
        """Return the interpolated weight and nearest point at an instant."""
        section = _section(request, period)
        moment = ensure_aware(at)
        nearest = section.nearest_point(moment)
        return ValueResponse(
            at=moment,
            weight=section.interpolated_weight(moment),
            nearest=ChartPointModel.from_point(nearest) if nearest else None,
        )

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _section(request: Request, period: TimePeriod) -> SectionController:
    return _container(request).chart_service.section(period)
