"""ASGI entrypoint for the weight charts API."""

from weight_charts.api.app import create_app
from weight_charts.containers import build_container

app = create_app(build_container())
