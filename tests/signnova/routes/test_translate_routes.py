from datetime import datetime, timedelta

import pytest

from signnova.models.translation import Translation
from signnova.services.storage import read_limited


def test_text_to_sign_drops_unmatched_words_and_keeps_text(client, make_sign, auth_headers) -> None:
    hello = make_sign('hello')

    response = client.post('/api/translate/text-to-sign', json={'text': 'Hello, World!'}, headers=auth_headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload['text'] == 'Hello, World!'
    assert payload['signs'] == [
        {'id': hello.id, 'word': 'hello', 'videoUrl': hello.video_url, 'thumbnail': hello.thumbnail},
    ]


def test_text_to_sign_uses_requested_language(client, make_sign, auth_headers) -> None:
    make_sign('hello', language='ASL')
    bsl = make_sign('hello', language='BSL')

    payload = client.post(
        '/api/translate/text-to-sign',
        json={'text': 'hello', 'language': 'BSL'},
        headers=auth_headers,
    ).json()

    assert [sign['id'] for sign in payload['signs']] == [bsl.id]


@pytest.mark.parametrize('body', [{'text': ''}, {'text': 'hi', 'language': 'XX'}, {}])
def test_text_to_sign_validates_body(client, auth_headers, body: dict) -> None:
    assert client.post('/api/translate/text-to-sign', json=body, headers=auth_headers).status_code == 400


def test_text_to_sign_records_history(client, db, make_sign, auth_headers, current_user_id) -> None:
    make_sign('thanks')

    client.post('/api/translate/text-to-sign', json={'text': 'Thanks a lot', 'language': 'ASL'}, headers=auth_headers)

    record = db.query(Translation).one()
    assert record.user_id == current_user_id
    assert record.input_text == 'Thanks a lot'
    assert record.input_type == 'text'
    assert record.language == 'ASL'


def test_transcribe_returns_text_and_records_speech(client, db, transcriber, auth_headers) -> None:
    transcriber.text = 'good morning'

    response = client.post(
        '/api/translate/transcribe',
        files={'audio': ('clip.m4a', b'fake-audio', 'audio/m4a')},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json() == {'text': 'good morning'}
    assert transcriber.calls == [(b'fake-audio', 'clip.m4a', 'audio/m4a')]
    record = db.query(Translation).one()
    assert (record.input_text, record.input_type, record.language) == ('good morning', 'speech', 'ASL')


def test_transcribe_infers_extension_for_bare_filename(client, transcriber, auth_headers) -> None:
    client.post(
        '/api/translate/transcribe',
        files={'audio': ('recording', b'fake-audio', 'audio/x-m4a')},
        headers=auth_headers,
    )

    assert transcriber.calls[0][1] == 'audio.m4a'


def test_transcribe_rejects_unlisted_mime_before_adapter(client, db, transcriber, auth_headers) -> None:
    response = client.post(
        '/api/translate/transcribe',
        files={'audio': ('clip.mp4', b'fake-video', 'video/mp4')},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()['error'].startswith('Invalid file type.')
    assert transcriber.calls == []
    assert db.query(Translation).count() == 0


def test_transcribe_requires_audio_file(client, transcriber, auth_headers) -> None:
    response = client.post('/api/translate/transcribe', headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {'error': 'No audio file uploaded'}
    assert transcriber.calls == []


def test_transcribe_failure_is_500_without_history(client, db, transcriber, auth_headers) -> None:
    transcriber.fail = True

    response = client.post(
        '/api/translate/transcribe',
        files={'audio': ('clip.webm', b'fake-audio', 'audio/webm')},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json()['error'] == 'Failed to transcribe audio'
    assert db.query(Translation).count() == 0


def test_translation_endpoints_require_authentication(client) -> None:
    assert client.post('/api/translate/text-to-sign', json={'text': 'hi'}).status_code == 401
    assert client.get('/api/translate/history').status_code == 401


def test_history_is_paginated_newest_first(client, db, auth_headers, current_user_id) -> None:
    start = datetime(2026, 3, 1, 9, 0)
    for index in range(3):
        db.add(
            Translation(
                user_id=current_user_id,
                input_text=f'phrase {index}',
                input_type='text',
                language='ASL',
                created_at=start + timedelta(minutes=index),
            )
        )
    db.commit()

    response = client.get('/api/translate/history', params={'page': 1, 'limit': 2}, headers=auth_headers)

    assert response.status_code == 200
    payload = response.json()
    assert [item['inputText'] for item in payload['translations']] == ['phrase 2', 'phrase 1']
    assert payload['pagination'] == {'page': 1, 'limit': 2, 'total': 3, 'totalPages': 2}


def test_transcribe_stops_reading_oversized_audio(client, transcriber, auth_headers, monkeypatch) -> None:
    reads: list[int] = []

    def recording_read(stream, max_bytes):
        content = read_limited(stream, max_bytes)
        reads.append(len(content))
        return content

    monkeypatch.setattr('signnova.routes.translate_routes.MAX_AUDIO_BYTES', 4)
    monkeypatch.setattr('signnova.services.transcription.MAX_AUDIO_BYTES', 4)
    monkeypatch.setattr('signnova.routes.translate_routes.read_limited', recording_read)

    response = client.post(
        '/api/translate/transcribe',
        files={'audio': ('clip.webm', b'a' * 64, 'audio/webm')},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'File size exceeds 25MB limit'}
    assert reads == [5]
    assert transcriber.calls == []
