from dataclasses import replace

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from signnova.main import create_app


def _app_with_failing_route(settings, engine, transcriber, storage):
    app = create_app(settings, engine=engine, transcriber=transcriber, storage=storage)

    @app.get('/api/boom')
    def boom():
        raise RuntimeError('secret detail')

    return app


def test_unhandled_error_hides_detail_outside_development(settings, engine, transcriber, storage) -> None:
    app = _app_with_failing_route(settings, engine, transcriber, storage)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get('/api/boom')

    assert response.status_code == 500
    assert response.json() == {'error': 'Internal server error'}


def test_unhandled_error_includes_message_in_development(settings, engine, transcriber, storage) -> None:
    app = _app_with_failing_route(replace(settings, app_env='development'), engine, transcriber, storage)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get('/api/boom')

    assert response.json() == {'error': 'Internal server error', 'message': 'secret detail'}


def _app_with_database_failure(settings, engine, transcriber, storage):
    app = create_app(settings, engine=engine, transcriber=transcriber, storage=storage)

    @app.get('/api/db-down')
    def db_down():
        raise OperationalError('SELECT 1', {}, Exception('connection refused'))

    return app


def test_database_error_is_service_unavailable(settings, engine, transcriber, storage) -> None:
    app = _app_with_database_failure(settings, engine, transcriber, storage)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get('/api/db-down')

    assert response.status_code == 503
    assert response.json() == {'error': 'Database unavailable'}


def test_database_error_includes_message_in_development(settings, engine, transcriber, storage) -> None:
    app = _app_with_database_failure(replace(settings, app_env='development'), engine, transcriber, storage)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get('/api/db-down')

    assert response.status_code == 503
    assert response.json()['error'] == 'Database unavailable'
    assert 'connection refused' in response.json()['message']


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get('/api/nowhere')

    assert response.status_code == 404
    assert response.json() == {'error': 'Not Found'}


def test_health(client) -> None:
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'ok'
    assert response.json()['timestamp']
