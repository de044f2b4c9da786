import logging

from fastapi import APIRouter, Depends, File, UploadFile

from signnova.auth.dependencies import AuthContext, get_current_user
from signnova.core.errors import BadRequestError
from signnova.dependencies import get_storage_client
from signnova.schemas import ApiModel
from signnova.services.storage import MAX_UPLOAD_BYTES, StorageClient, build_object_key, read_limited

router = APIRouter(tags=['upload'])

logger = logging.getLogger(__name__)

AVATAR_PREFIX = 'avatars'
SIGN_VIDEO_PREFIX = 'sign-videos'


class UploadResponse(ApiModel):
    url: str


def store_upload(
    storage: StorageClient,
    upload: UploadFile | None,
    *,
    prefix: str,
    owner_id: str,
    missing_message: str,
) -> str:
    if upload is None:
        raise BadRequestError(missing_message)

    content = read_limited(upload.file, MAX_UPLOAD_BYTES)
    if not content:
        raise BadRequestError(missing_message)
    if len(content) > MAX_UPLOAD_BYTES:
        raise BadRequestError('File size exceeds 16MB limit')

    content_type = upload.content_type or 'application/octet-stream'
    key = build_object_key(prefix, owner_id, upload.filename, content_type)
    return storage.upload_bytes(key, content, content_type)


@router.post('/avatar', response_model=UploadResponse)
def upload_avatar(
    avatar: UploadFile | None = File(default=None),
    current_user: AuthContext = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage_client),
):
    url = store_upload(
        storage,
        avatar,
        prefix=AVATAR_PREFIX,
        owner_id=current_user.id,
        missing_message='No file uploaded',
    )
    logger.info('Avatar uploaded: %s', url)
    return UploadResponse(url=url)


@router.post('/sign-video', response_model=UploadResponse)
def upload_sign_video(
    video: UploadFile | None = File(default=None),
    current_user: AuthContext = Depends(get_current_user),
    storage: StorageClient = Depends(get_storage_client),
):
    url = store_upload(
        storage,
        video,
        prefix=SIGN_VIDEO_PREFIX,
        owner_id=current_user.id,
        missing_message='No video file uploaded',
    )
    logger.info('Sign video uploaded: %s', url)
    return UploadResponse(url=url)
