import logging
from datetime import datetime

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pydantic import Field
from sqlalchemy.orm import Session

from signnova.auth.dependencies import AuthContext, get_current_user
from signnova.core.errors import BadRequestError
from signnova.database import get_db
from signnova.dependencies import get_transcriber
from signnova.schemas import ApiModel, PaginationResponse, RequestModel, SignLanguage, SignSummary
from signnova.services import translation as translation_service
from signnova.services.pagination import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from signnova.services.storage import read_limited
from signnova.services.transcription import MAX_AUDIO_BYTES, Transcriber, audio_filename, validate_audio_upload

router = APIRouter(tags=['translate'])

logger = logging.getLogger(__name__)


class TranscriptionResponse(ApiModel):
    text: str


class TextToSignRequest(RequestModel):
    text: str = Field(min_length=1)
    language: SignLanguage = translation_service.DEFAULT_LANGUAGE


class TextToSignResponse(ApiModel):
    text: str
    signs: list[SignSummary]


class TranslationResponse(ApiModel):
    id: str
    user_id: str
    input_text: str
    input_type: str
    language: str
    created_at: datetime


class TranslationHistoryResponse(ApiModel):
    translations: list[TranslationResponse]
    pagination: PaginationResponse


@router.post('/transcribe', response_model=TranscriptionResponse)
def transcribe(
    audio: UploadFile | None = File(default=None),
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
    transcriber: Transcriber = Depends(get_transcriber),
):
    if audio is None:
        raise BadRequestError('No audio file uploaded')

    content = read_limited(audio.file, MAX_AUDIO_BYTES)
    validate_audio_upload(audio.content_type, len(content))

    text = transcriber.transcribe(
        content,
        audio_filename(audio.filename, audio.content_type),
        audio.content_type,
    )
    translation_service.record_translation(
        db,
        current_user.id,
        input_text=text,
        input_type='speech',
        language=translation_service.SPEECH_LANGUAGE,
    )
    logger.info('Audio transcribed for user %s', current_user.id)

    return TranscriptionResponse(text=text)


@router.post('/text-to-sign', response_model=TextToSignResponse)
def text_to_sign(
    data: TextToSignRequest,
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = translation_service.text_to_sign(db, data.text, data.language)
    translation_service.record_translation(
        db,
        current_user.id,
        input_text=data.text,
        input_type='text',
        language=data.language,
    )
    logger.info('Text translated to signs for user %s', current_user.id)

    return TextToSignResponse(
        text=result.text,
        signs=[SignSummary.model_validate(sign) for sign in result.signs],
    )


@router.get('/history', response_model=TranslationHistoryResponse)
def get_history(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    current_user: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = translation_service.get_history(db, current_user.id, page, limit)
    return TranslationHistoryResponse(
        translations=[TranslationResponse.model_validate(item) for item in result.items],
        pagination=PaginationResponse.from_page(result),
    )
