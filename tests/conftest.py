from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from signnova.auth import passwords
from signnova.core.config import Settings
from signnova.core.errors import InternalServerError
from signnova.database import build_engine, build_session_factory, init_database
from signnova.main import create_app
from signnova.models.sign import Sign
from signnova.models.user import User
from signnova.services.storage import InMemoryStorageClient


class FakeTranscriber:
    def __init__(self, text: str = 'hello world') -> None:
        self.text = text
        self.fail = False
        self.calls: list[tuple[bytes, str, str]] = []

    def transcribe(self, audio: bytes, filename: str = 'audio.webm', content_type: str = 'audio/webm') -> str:
        self.calls.append((audio, filename, content_type))
        if self.fail:
            raise InternalServerError('Failed to transcribe audio')
        return self.text


@pytest.fixture
def settings() -> Settings:
    return Settings(app_env='test', jwt_secret_key='test-secret', auth_base_url='http://testserver')


@pytest.fixture
def engine():
    engine = build_engine('sqlite://')
    init_database(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def storage() -> InMemoryStorageClient:
    return InMemoryStorageClient()


@pytest.fixture
def app(settings, engine, transcriber, storage):
    return create_app(settings, engine=engine, transcriber=transcriber, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    def _make_user(email: str = 'learner@example.com', password: str = 'correct-horse', name: str = 'Learner') -> User:
        user = User(
            email=email,
            name=name,
            hashed_password=passwords.hash_password(password),
            preferences={},
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_sign(db):
    base_time = datetime(2026, 1, 1, 12, 0)
    counter = {'value': 0}

    def _make_sign(word: str, language: str = 'ASL', **overrides) -> Sign:
        counter['value'] += 1
        fields = {
            'word': word,
            'language': language,
            'category': 'greetings',
            'difficulty': 'beginner',
            'video_url': f'https://cdn.example.com/{language}/{word}.mp4',
            'thumbnail': f'https://cdn.example.com/{language}/{word}.jpg',
            'created_at': base_time + timedelta(minutes=counter['value']),
        }
        fields.update(overrides)
        sign = Sign(**fields)
        db.add(sign)
        db.commit()
        db.refresh(sign)
        return sign

    return _make_sign


@pytest.fixture
def signup(client):
    def _signup(email: str = 'learner@example.com', password: str = 'correct-horse', name: str = 'Learner') -> dict:
        response = client.post('/api/auth/signup', json={'email': email, 'password': password, 'name': name})
        assert response.status_code == 201, response.text
        return response.json()['data']

    return _signup


@pytest.fixture
def auth_headers(signup) -> dict:
    data = signup()
    return {'Authorization': f"Bearer {data['token']}"}


@pytest.fixture
def current_user_id(client, auth_headers) -> str:
    return client.get('/api/users/me', headers=auth_headers).json()['id']
