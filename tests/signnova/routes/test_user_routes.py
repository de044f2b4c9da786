def test_get_me_returns_profile(client, auth_headers) -> None:
    response = client.get('/api/users/me', headers=auth_headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload['email'] == 'learner@example.com'
    assert payload['name'] == 'Learner'
    assert payload['preferences'] == {}
    assert 'hashedPassword' not in payload


def test_update_profile_changes_only_supplied_fields(client, auth_headers) -> None:
    response = client.patch(
        '/api/users/me',
        json={'avatar': 'https://cdn.example.com/avatars/me.png'},
        headers=auth_headers,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload['name'] == 'Learner'
    assert payload['avatar'] == 'https://cdn.example.com/avatars/me.png'


def test_update_profile_validates_fields(client, auth_headers) -> None:
    short_name = client.patch('/api/users/me', json={'name': 'A'}, headers=auth_headers)
    bad_avatar = client.patch('/api/users/me', json={'avatar': 'not a url'}, headers=auth_headers)

    assert short_name.status_code == 400
    assert bad_avatar.status_code == 400


def test_update_profile_keeps_avatar_url_as_sent(client, auth_headers) -> None:
    response = client.patch('/api/users/me', json={'avatar': 'https://cdn.example.com'}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()['avatar'] == 'https://cdn.example.com'


def test_update_profile_rejects_blank_name_and_trims_valid_one(client, auth_headers) -> None:
    blank = client.patch('/api/users/me', json={'name': '   '}, headers=auth_headers)
    padded = client.patch('/api/users/me', json={'name': '  New Name '}, headers=auth_headers)

    assert blank.status_code == 400
    assert padded.status_code == 200
    assert padded.json()['name'] == 'New Name'


def test_update_preferences_replaces_stored_preferences(client, auth_headers) -> None:
    response = client.patch(
        '/api/users/preferences',
        json={'preferences': {'language': 'BSL', 'avatarSpeed': 1.5, 'theme': 'dark'}},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()['preferences'] == {'language': 'BSL', 'avatarSpeed': 1.5, 'theme': 'dark'}
    assert client.get('/api/users/me', headers=auth_headers).json()['preferences']['theme'] == 'dark'


def test_update_preferences_rejects_out_of_range_speed(client, auth_headers) -> None:
    response = client.patch(
        '/api/users/preferences',
        json={'preferences': {'avatarSpeed': 3}},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_user_routes_require_authentication(client) -> None:
    assert client.get('/api/users/me').status_code == 401
    assert client.patch('/api/users/preferences', json={'preferences': {}}).status_code == 401
