import json
import logging

from windowquote.models import Booking, BookingStatus, PricingSettings


def test_create_booking_prices_on_server(client, booking_payload):
    res = client.post(
        '/api/bookings',
        json=booking_payload(interior=True, totalPrice=150),
    )
    assert res.status_code == 201
    body = res.json()
    assert body['totalPrice'] == 150
    assert body['status'] == 'pending'
    assert body['scheduledDate'] == '2030-06-15'
    assert body['customerEmail'] == 'jane@example.com'
    assert isinstance(body['id'], int)
    assert body['createdAt']


def test_commercial_booking_total(client, booking_payload):
    res = client.post(
        '/api/bookings',
        json=booking_payload(interior=True, isCommercial=True, totalPrice=225),
    )
    assert res.status_code == 201
    assert res.json()['totalPrice'] == 225


def test_solar_only_booking_total(client, booking_payload):
    res = client.post(
        '/api/bookings',
        json=booking_payload(windowCount=1, exterior=False, solar=True, solarPanelCount=4, totalPrice=40),
    )
    assert res.status_code == 201
    assert res.json()['totalPrice'] == 40


def test_client_total_is_not_trusted(client, booking_payload, caplog):
    caplog.set_level(logging.WARNING, logger='windowquote.crud.crud_booking')
    res = client.post('/api/bookings', json=booking_payload(totalPrice=1))
    assert res.status_code == 201
    assert res.json()['totalPrice'] == 100
    assert any('differs from server price' in r.getMessage() for r in caplog.records)


def test_caller_status_and_id_are_ignored(client, session_factory, booking_payload):
    res = client.post(
        '/api/bookings',
        json=booking_payload(id=999, status='confirmed', createdAt='2001-01-01T00:00:00'),
    )
    assert res.status_code == 201
    body = res.json()
    assert body['status'] == 'pending'
    assert body['id'] != 999
    assert not body['createdAt'].startswith('2001')

    db = session_factory()
    stored = db.query(Booking).one()
    db.close()
    assert stored.status == BookingStatus.PENDING


def test_zero_windows_rejected(client, session_factory, booking_payload):
    res = client.post('/api/bookings', json=booking_payload(windowCount=0))
    assert res.status_code == 400
    assert res.json() == {'message': 'At least 1 window required', 'field': 'windowCount'}

    db = session_factory()
    assert db.query(Booking).count() == 0
    db.close()


def test_bad_email_rejected(client, booking_payload):
    res = client.post('/api/bookings', json=booking_payload(customerEmail='not-an-email'))
    assert res.status_code == 400
    assert res.json() == {'message': 'Invalid email', 'field': 'customerEmail'}


def test_first_failing_field_is_reported(client, booking_payload):
    res = client.post(
        '/api/bookings',
        json=booking_payload(customerName='J', customerPhone='123'),
    )
    assert res.status_code == 400
    assert res.json() == {'message': 'Name is required', 'field': 'customerName'}


def test_short_phone_and_missing_date_rejected(client, booking_payload):
    res = client.post('/api/bookings', json=booking_payload(customerPhone='555-1234'))
    assert res.status_code == 400
    assert res.json()['field'] == 'customerPhone'

    payload = booking_payload()
    del payload['scheduledDate']
    res = client.post('/api/bookings', json=payload)
    assert res.status_code == 400
    assert res.json()['field'] == 'scheduledDate'


def test_iso_datetime_is_stored_as_calendar_day(client, booking_payload):
    res = client.post('/api/bookings', json=booking_payload(scheduledDate='2030-07-04T15:30:00.000Z'))
    assert res.status_code == 201
    assert res.json()['scheduledDate'] == '2030-07-04'


def test_create_sends_confirmation(client, booking_payload, sent_emails):
    res = client.post('/api/bookings', json=booking_payload())
    assert res.status_code == 201
    assert [to for to, _, _ in sent_emails] == ['jane@example.com']
    assert '$100.00' in sent_emails[0][2]


def test_list_requires_admin(client):
    assert client.get('/api/bookings').status_code == 401
    assert client.get('/api/bookings/stats').status_code == 401


def test_list_is_ordered_by_date(admin_client, booking_payload):
    for day in ('2030-09-01', '2030-03-10', '2030-06-20'):
        admin_client.post('/api/bookings', json=booking_payload(scheduledDate=day))
    res = admin_client.get('/api/bookings')
    assert res.status_code == 200
    assert [b['scheduledDate'] for b in res.json()] == ['2030-03-10', '2030-06-20', '2030-09-01']


def test_price_snapshot_survives_pricing_change(admin_client, booking_payload):
    created = admin_client.post('/api/bookings', json=booking_payload()).json()
    admin_client.post('/api/settings', json={'exteriorPrice': 99})
    listed = admin_client.get('/api/bookings').json()
    assert listed[0]['id'] == created['id']
    assert listed[0]['totalPrice'] == 100


def test_stats(admin_client, booking_payload):
    empty = admin_client.get('/api/bookings/stats').json()
    assert empty == {'totalRevenue': 0, 'totalBookings': 0, 'pendingBookings': 0, 'averageValue': 0.0}

    admin_client.post('/api/bookings', json=booking_payload())
    admin_client.post('/api/bookings', json=booking_payload(interior=True, scheduledDate='2030-06-16'))
    stats = admin_client.get('/api/bookings/stats').json()
    assert stats == {'totalRevenue': 250, 'totalBookings': 2, 'pendingBookings': 2, 'averageValue': 125.0}


def _raw_post(client, body):
    return client.post('/api/bookings', content=body, headers={'Content-Type': 'application/json'})


def test_non_finite_total_rejected(client, session_factory, booking_payload):
    template = json.dumps(booking_payload(totalPrice=None))
    for literal in ('NaN', 'Infinity', '1e400'):
        res = _raw_post(client, template.replace('"totalPrice": null', f'"totalPrice": {literal}'))
        assert res.status_code == 400, literal
        assert res.json()['field'] == 'totalPrice'

    db = session_factory()
    assert db.query(Booking).count() == 0
    db.close()


def test_oversized_counts_rejected(client, booking_payload):
    res = client.post('/api/bookings', json=booking_payload(windowCount=10**20))
    assert res.status_code == 400
    assert res.json() == {'message': 'Window count cannot exceed 100000', 'field': 'windowCount'}

    res = client.post('/api/bookings', json=booking_payload(solar=True, solarPanelCount=10**20))
    assert res.status_code == 400
    assert res.json() == {'message': 'Solar panel count cannot exceed 100000', 'field': 'solarPanelCount'}


def test_largest_allowed_booking_is_stored(client, booking_payload):
    res = client.post(
        '/api/bookings',
        json=booking_payload(windowCount=100_000, solar=True, solarPanelCount=100_000, isCommercial=True),
    )
    assert res.status_code == 201
    assert res.json()['totalPrice'] == (10 * 100_000 + 10 * 100_000) * 3 // 2


def test_first_booking_on_empty_store_creates_default_pricing(client, session_factory, booking_payload):
    res = client.post('/api/bookings', json=booking_payload(interior=True))
    assert res.status_code == 201
    assert res.json()['totalPrice'] == 150

    db = session_factory()
    assert db.query(PricingSettings).count() == 1
    assert db.query(Booking).count() == 1
    db.close()
