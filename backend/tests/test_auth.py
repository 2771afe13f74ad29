import logging

from windowquote.core.config import settings


def login(client, email='owner@example.com', password='secret123'):
    return client.post('/auth/login', data={'username': email, 'password': password})


def test_login_returns_token_and_cookie(client, admin):
    res = login(client)
    assert res.status_code == 200
    body = res.json()
    assert body['token_type'] == 'bearer'
    assert body['access_token']
    assert 'access_token' in res.cookies


def test_login_is_case_insensitive_on_email(client, admin):
    assert login(client, email='  Owner@Example.com ').status_code == 200


def test_wrong_password_rejected(client, admin, caplog):
    caplog.set_level(logging.ERROR, logger='windowquote.utils.errors')
    res = login(client, password='nope')
    assert res.status_code == 401
    assert res.json() == {'message': 'Incorrect email or password'}
    assert res.headers['WWW-Authenticate'] == 'Bearer'
    assert any('Incorrect email or password' in r.getMessage() for r in caplog.records)


def test_me_with_bearer_token(client, admin):
    token = login(client).json()['access_token']
    client.cookies.clear()
    res = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert res.status_code == 200
    assert res.json() == {'id': admin.id, 'email': 'owner@example.com', 'displayName': 'Owner'}


def test_cookie_session_reaches_admin_routes(client, admin):
    login(client)
    assert client.get('/api/bookings').status_code == 200


def test_logout_clears_cookie(client, admin):
    login(client)
    assert client.post('/auth/logout').status_code == 204
    client.cookies.clear()
    assert client.get('/auth/me').status_code == 401


def test_garbage_token_rejected(client, admin):
    res = client.get('/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
    assert res.status_code == 401
    assert res.json() == {'message': 'Not authenticated'}
    assert res.headers['WWW-Authenticate'] == 'Bearer'


def test_inactive_admin_rejected(client, admin, session_factory):
    token = login(client).json()['access_token']
    client.cookies.clear()
    db = session_factory()
    db.get(type(admin), admin.id).is_active = False
    db.commit()
    db.close()
    res = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert res.status_code == 401


def test_default_admin_bootstrap(session_factory, monkeypatch):
    from windowquote.models import AdminUser
    from windowquote.services.admin_bootstrap import ensure_default_admin
    from windowquote.utils.auth import verify_password

    monkeypatch.setattr(settings, 'DEFAULT_ADMIN_BOOTSTRAP', True)
    monkeypatch.setattr(settings, 'DEFAULT_ADMIN_EMAIL', 'Boss@Example.com')
    monkeypatch.setattr(settings, 'DEFAULT_ADMIN_PASSWORD', 'first-boot')
    db = session_factory()
    created = ensure_default_admin(db)
    assert created.email == 'boss@example.com'
    assert verify_password('first-boot', created.password)
    assert ensure_default_admin(db) is None
    assert db.query(AdminUser).count() == 1
    db.close()
