"""ASGI entrypoint for the swap suggestion API."""

from meal_swaps.api.app import create_app
from meal_swaps.containers import build_container

app = create_app(build_container())
