"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response, WebSocket, status
from fastapi.websockets import WebSocketDisconnect

from scan_relay.api.models import (
    CreateSessionRequest,
    PublishScanRequest,
    ScanEventResponse,
    SessionResponse,
)
from scan_relay.app_logging import configure_logging
from scan_relay.containers import AppContainer
from scan_relay.domain.errors import MalformedPayload, StoreUnavailable
from scan_relay.domain.scans import ScanEvent


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(
        body: CreateSessionRequest, request: Request
    ) -> SessionResponse:
        """Create a pairing session for a primary device."""
        state_container: AppContainer = request.app.state.container
        service = state_container.session_service
        try:
            session = await service.create_session(body.owner_id)
        except StoreUnavailable as exc:
            logger.warning("Session creation failed: owner=%s", body.owner_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return SessionResponse.from_session(session, service.pairing_url(session.id))

    @app.get("/sessions/{session_id}/pairing.svg")
    async def pairing_qr(session_id: str, request: Request) -> Response:
        """Render the pairing payload as a QR code."""
        state_container: AppContainer = request.app.state.container
        svg = state_container.session_service.render_pairing_qr(session_id)
        return Response(content=svg, media_type="image/svg+xml")

    @app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def teardown_session(session_id: str, request: Request) -> Response:
        """Best-effort removal of a session."""
        state_container: AppContainer = request.app.state.container
        await state_container.session_service.teardown_session(session_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/sessions/{session_id}/scans", status_code=status.HTTP_202_ACCEPTED)
    async def publish_scan(
        session_id: str, body: PublishScanRequest, request: Request
    ) -> ScanEventResponse:
        """Relay one scan from a secondary device."""
        state_container: AppContainer = request.app.state.container
        try:
            event = await state_container.relay.publish(
                session_id, body.payload, body.actor_id
            )
        except MalformedPayload as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        except StoreUnavailable as exc:
            logger.warning("Scan publish failed: session=%s", session_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return ScanEventResponse.from_event(event)

    @app.websocket("/sessions/{session_id}/events")
    async def session_events(websocket: WebSocket, session_id: str) -> None:
        """Stream fresh scans for a session until the client disconnects."""
        state_container: AppContainer = websocket.app.state.container
        await websocket.accept()

        async def forward(event: ScanEvent) -> None:
            await websocket.send_json(
                ScanEventResponse.from_event(event).model_dump(mode="json")
            )

        try:
            async with state_container.relay.listening(session_id, forward):
                while True:
                    await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Event stream closed: session=%s", session_id)
        except StoreUnavailable:
            logger.exception("Event stream failed: session=%s", session_id)
            await websocket.close(code=1011)

    return app
