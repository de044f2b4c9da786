"""
Accessors for the collaborators `create_app` stores on `app.state`.
"""

from fastapi import Request

from signnova.core.config import Settings
from signnova.services.storage import StorageClient
from signnova.services.transcription import Transcriber


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_transcriber(request: Request) -> Transcriber:
    return request.app.state.transcriber


def get_storage_client(request: Request) -> StorageClient:
    return request.app.state.storage
