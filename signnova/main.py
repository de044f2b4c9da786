import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from signnova.core.config import Settings, load_settings, validate_runtime_config
from signnova.core.errors import register_error_handlers
from signnova.database import build_engine, build_session_factory, init_database
from signnova.realtime import transcribe_socket
from signnova.realtime.transcribe_socket import TranscriptionHub
from signnova.routes import (
    auth_routes,
    progress_routes,
    signs_routes,
    translate_routes,
    upload_routes,
    user_routes,
)
from signnova.services.storage import StorageClient, build_storage_client
from signnova.services.transcription import Transcriber, WhisperTranscriber

API_PREFIX = '/api'
LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'
LOCAL_ORIGIN_REGEX = r'https?://(localhost|127\.0\.0\.1)(:\d+)?'

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    transcriber: Transcriber | None = None,
    storage: StorageClient | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    validate_runtime_config(settings)

    app = FastAPI(title='SignNova API', version='1.0.0')

    app.state.settings = settings
    app.state.engine = engine or build_engine(settings.database_url, echo=settings.database_echo)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.transcriber = transcriber or WhisperTranscriber.from_settings(settings)
    app.state.storage = storage or build_storage_client(settings)
    app.state.realtime_hub = TranscriptionHub()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_urls,
        allow_origin_regex=LOCAL_ORIGIN_REGEX if settings.is_development else None,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
        expose_headers=['set-auth-token'],
    )

    register_error_handlers(app, expose_details=settings.is_development)

    @app.on_event('startup')
    def initialize_database() -> None:
        try:
            init_database(app.state.engine)
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')
        logger.info('SignNova API started (environment: %s)', settings.app_env)

    @app.on_event('shutdown')
    async def shutdown() -> None:
        logger.info('Shutting down server...')
        await app.state.realtime_hub.close_all()
        logger.info('Realtime connections closed')
        app.state.engine.dispose()
        logger.info('Database disconnected')

    @app.get(f'{API_PREFIX}/health')
    def health():
        return {'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()}

    app.include_router(auth_routes.router, prefix=f'{API_PREFIX}/auth')
    app.include_router(user_routes.router, prefix=f'{API_PREFIX}/users')
    app.include_router(signs_routes.router, prefix=f'{API_PREFIX}/signs')
    app.include_router(translate_routes.router, prefix=f'{API_PREFIX}/translate')
    app.include_router(progress_routes.router, prefix=f'{API_PREFIX}/progress')
    app.include_router(upload_routes.router, prefix=f'{API_PREFIX}/upload')
    app.include_router(transcribe_socket.router, prefix=API_PREFIX)

    return app


def run() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host='0.0.0.0', port=settings.port)


if __name__ == '__main__':
    run()
