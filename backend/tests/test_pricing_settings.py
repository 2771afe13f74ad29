import logging
from concurrent.futures import ThreadPoolExecutor

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from windowquote.crud import crud_pricing
from windowquote.database import Base
from windowquote.models import PricingSettings

DEFAULTS = {
    'exteriorPrice': 10,
    'interiorAddon': 5,
    'screensAddon': 3,
    'sillsAddon': 3,
    'guttersFlatFee': 50,
    'solarPerPanel': 10,
    'commercialMultiplier': '1.5',
}


def count_rows(session_factory):
    db = session_factory()
    try:
        return db.query(PricingSettings).count()
    finally:
        db.close()


def test_get_creates_defaults_once(client, session_factory):
    first = client.get('/api/settings')
    second = client.get('/api/settings')
    assert first.status_code == 200
    assert first.json() == second.json()
    for key, value in DEFAULTS.items():
        assert first.json()[key] == value
    assert count_rows(session_factory) == 1


def test_update_requires_admin(client):
    res = client.post('/api/settings', json={'exteriorPrice': 20})
    assert res.status_code == 401
    assert res.json() == {'message': 'Not authenticated'}


def test_update_merges_only_supplied_fields(admin_client, session_factory):
    res = admin_client.post('/api/settings', json={'exteriorPrice': 12, 'commercialMultiplier': 2})
    assert res.status_code == 200
    body = res.json()
    assert body['exteriorPrice'] == 12
    assert body['commercialMultiplier'] == '2'
    assert body['interiorAddon'] == 5
    assert body['guttersFlatFee'] == 50

    assert admin_client.get('/api/settings').json() == body
    assert count_rows(session_factory) == 1


def test_update_rejects_negative_price(admin_client):
    res = admin_client.post('/api/settings', json={'solarPerPanel': -1})
    assert res.status_code == 400
    assert res.json()['field'] == 'solarPerPanel'


def test_update_rejects_bad_multiplier(admin_client):
    res = admin_client.post('/api/settings', json={'commercialMultiplier': 'abc'})
    assert res.status_code == 400
    assert res.json() == {
        'message': 'Multiplier must be a decimal number',
        'field': 'commercialMultiplier',
    }
    res = admin_client.post('/api/settings', json={'commercialMultiplier': '0'})
    assert res.status_code == 400
    assert res.json()['message'] == 'Multiplier must be greater than 0'


def test_update_rejects_null_and_unknown_fields(admin_client):
    res = admin_client.post('/api/settings', json={'exteriorPrice': None})
    assert res.status_code == 400
    assert res.json() == {'message': 'Value is required', 'field': 'exteriorPrice'}

    res = admin_client.post('/api/settings', json={'discount': 5})
    assert res.status_code == 400
    assert res.json()['field'] == 'discount'


def test_update_is_logged(admin_client, caplog):
    caplog.set_level(logging.INFO, logger='windowquote.crud.crud_pricing')
    admin_client.post('/api/settings', json={'sillsAddon': 4})
    assert any('sills_addon' in r.getMessage() for r in caplog.records)


def test_insert_conflict_rereads_existing_row(session_factory, monkeypatch, caplog):
    db = session_factory()
    winner = crud_pricing.get_settings(db)
    db.close()

    real_get_existing = crud_pricing._get_existing
    calls = []

    def miss_first_time(db):
        calls.append(1)
        if len(calls) == 1:
            return None
        return real_get_existing(db)

    monkeypatch.setattr(crud_pricing, '_get_existing', miss_first_time)
    caplog.set_level(logging.INFO, logger='windowquote.crud.crud_pricing')

    db = session_factory()
    try:
        loser = crud_pricing.get_settings(db)
    finally:
        db.close()

    assert loser.id == winner.id
    assert count_rows(session_factory) == 1
    assert any('concurrently' in r.getMessage() for r in caplog.records)


def test_concurrent_first_reads_create_one_row(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'pricing.db'}",
        connect_args={'check_same_thread': False, 'timeout': 15},
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    def read_id(_):
        db = Session()
        try:
            return crud_pricing.get_settings(db).id
        finally:
            db.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(read_id, range(16)))

    assert len(set(ids)) == 1
    assert count_rows(Session) == 1
    engine.dispose()


def test_update_rejects_values_that_cannot_be_stored(admin_client):
    res = admin_client.post('/api/settings', json={'exteriorPrice': 10**20})
    assert res.status_code == 400
    assert res.json()['field'] == 'exteriorPrice'

    res = admin_client.post('/api/settings', json={'commercialMultiplier': '1e30'})
    assert res.status_code == 400
    assert res.json() == {'message': 'Multiplier cannot exceed 100', 'field': 'commercialMultiplier'}
    assert admin_client.get('/api/settings').json()['exteriorPrice'] == 10
