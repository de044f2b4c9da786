"""Streaming transcription over a WebSocket.

Clients authenticate once with a bearer token in the handshake headers, send
JSON control frames (``{"event": "transcribe:start"}`` /
``{"event": "transcribe:stop"}``) and binary frames holding audio chunks.
Every chunk is transcribed on its own; results come back in send order,
numbered per connection.
"""

import asyncio
import contextlib
import json
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool

from signnova.auth.dependencies import AuthContext, extract_bearer_token, resolve_auth_context
from signnova.services.transcription import MAX_AUDIO_BYTES

router = APIRouter(tags=['realtime'])

logger = logging.getLogger(__name__)

START = 'transcribe:start'
READY = 'transcribe:ready'
AUDIO = 'transcribe:audio'
RESULT = 'transcribe:result'
ERROR = 'transcribe:error'
STOP = 'transcribe:stop'
STOPPED = 'transcribe:stopped'

TRANSCRIBE_FAILED = 'Failed to transcribe audio'


class TranscriptionHub:
    """Open transcription sockets, so shutdown can close them."""

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._connections)

    async def register(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.add(websocket)

    async def unregister(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.discard(websocket)

    async def close_all(self, code: int = status.WS_1001_GOING_AWAY) -> None:
        async with self._lock:
            connections = list(self._connections)
            self._connections.clear()
        for websocket in connections:
            # The peer may already be gone.
            with contextlib.suppress(RuntimeError):
                await websocket.close(code=code)


def parse_control_event(text: str) -> str:
    text = text.strip()
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, dict):
        return str(payload.get('event', ''))
    return text


async def send_event(websocket: WebSocket, event: str, data: dict | None = None) -> None:
    message = {'event': event}
    if data is not None:
        message['data'] = data
    await websocket.send_json(message)


def _authenticate(websocket: WebSocket) -> AuthContext | None:
    state = websocket.app.state
    db = state.session_factory()
    try:
        return resolve_auth_context(db, state.settings, extract_bearer_token(websocket.headers))
    finally:
        db.close()


async def transcribe_chunk(websocket: WebSocket, chunk: bytes, seq: int) -> None:
    if not chunk:
        await send_event(websocket, ERROR, {'message': 'Empty audio chunk', 'seq': seq})
        return
    if len(chunk) > MAX_AUDIO_BYTES:
        await send_event(websocket, ERROR, {'message': 'Audio chunk exceeds 25MB limit', 'seq': seq})
        return

    transcriber = websocket.app.state.transcriber
    try:
        text = await run_in_threadpool(transcriber.transcribe, chunk, 'audio.webm', 'audio/webm')
    except HTTPException as exc:
        await send_event(websocket, ERROR, {'message': exc.detail, 'seq': seq})
        return
    except Exception:
        logger.exception('Streaming transcription failed for chunk %s', seq)
        await send_event(websocket, ERROR, {'message': TRANSCRIBE_FAILED, 'seq': seq})
        return

    await send_event(websocket, RESULT, {'text': text, 'seq': seq})


@router.websocket('/ws/transcribe')
async def transcribe_socket(websocket: WebSocket):
    current_user = await run_in_threadpool(_authenticate, websocket)
    if current_user is None:
        logger.info('Rejected unauthenticated transcription socket')
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    hub: TranscriptionHub = websocket.app.state.realtime_hub
    await websocket.accept()
    await hub.register(websocket)
    logger.info('Client connected to transcription socket (user: %s)', current_user.email)

    seq = 0
    try:
        while True:
            message = await websocket.receive()
            if message['type'] == 'websocket.disconnect':
                break

            if message.get('bytes') is not None:
                seq += 1
                # Awaited in order: one outstanding transcription per connection.
                await transcribe_chunk(websocket, message['bytes'], seq)
                continue

            event = parse_control_event(message.get('text') or '')
            if event == START:
                logger.info('Transcription session started (user: %s)', current_user.id)
                await send_event(websocket, READY)
            elif event == STOP:
                logger.info('Transcription session stopped (user: %s)', current_user.id)
                await send_event(websocket, STOPPED)
            elif event == AUDIO:
                await send_event(websocket, ERROR, {'message': 'Send audio chunks as binary frames'})
            else:
                await send_event(websocket, ERROR, {'message': f'Unknown event: {event}'})
    except WebSocketDisconnect:
        pass
    finally:
        await hub.unregister(websocket)
        logger.info('Client disconnected from transcription socket (user: %s)', current_user.id)
