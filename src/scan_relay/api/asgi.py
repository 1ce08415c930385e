"""ASGI entrypoint for the scan relay API."""

from scan_relay.api.app import create_app
from scan_relay.containers import build_container

app = create_app(build_container())
