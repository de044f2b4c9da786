from signnova.services import storage as storage_module


def test_upload_avatar_stores_file_under_user_prefix(client, storage, auth_headers, current_user_id) -> None:
    response = client.post(
        '/api/upload/avatar',
        files={'avatar': ('me.png', b'png-bytes', 'image/png')},
        headers=auth_headers,
    )

    assert response.status_code == 200
    url = response.json()['url']
    [(key, (content, content_type))] = storage.stored_objects.items()
    assert key.startswith(f'avatars/{current_user_id}/')
    assert key.endswith('.png')
    assert (content, content_type) == (b'png-bytes', 'image/png')
    assert url == f'{storage.base_url}/{key}'


def test_upload_sign_video_uses_video_field(client, storage, auth_headers) -> None:
    response = client.post(
        '/api/upload/sign-video',
        files={'video': ('hello.mp4', b'mp4-bytes', 'video/mp4')},
        headers=auth_headers,
    )

    assert response.status_code == 200
    [key] = storage.stored_objects
    assert key.startswith('sign-videos/')


def test_upload_without_file_is_bad_request(client, auth_headers) -> None:
    response = client.post('/api/upload/sign-video', headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {'error': 'No video file uploaded'}


def test_upload_rejects_oversized_file(client, storage, auth_headers, monkeypatch) -> None:
    monkeypatch.setattr('signnova.routes.upload_routes.MAX_UPLOAD_BYTES', 4)

    response = client.post(
        '/api/upload/avatar',
        files={'avatar': ('big.png', b'12345', 'image/png')},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'File size exceeds 16MB limit'}
    assert storage.stored_objects == {}


def test_upload_requires_authentication(client) -> None:
    response = client.post('/api/upload/avatar', files={'avatar': ('me.png', b'x', 'image/png')})

    assert response.status_code == 401


def test_build_object_key_falls_back_to_mime_extension() -> None:
    key = storage_module.build_object_key('avatars', 'user-1', 'avatar', 'image/png')

    assert key.startswith('avatars/user-1/')
    assert key.endswith('.png')


def test_upload_reads_at_most_one_byte_past_the_limit(client, storage, auth_headers, monkeypatch) -> None:
    reads: list[int] = []

    def recording_read(stream, max_bytes):
        content = storage_module.read_limited(stream, max_bytes)
        reads.append(len(content))
        return content

    monkeypatch.setattr('signnova.routes.upload_routes.MAX_UPLOAD_BYTES', 4)
    monkeypatch.setattr('signnova.routes.upload_routes.read_limited', recording_read)

    response = client.post(
        '/api/upload/avatar',
        files={'avatar': ('big.png', b'x' * 64, 'image/png')},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'File size exceeds 16MB limit'}
    assert reads == [5]
    assert storage.stored_objects == {}
