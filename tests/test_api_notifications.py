import json

import pytest

from app.models.notification import ADMIN_CHANNEL


@pytest.fixture
def seeded(lifecycle, booking_data):
    """One booking for u1, approved, so both the admin channel and u1 have a notification"""
    booking_id = lifecycle.create_booking(booking_data)
    lifecycle.update_booking_status(booking_id, 'approved')
    return booking_id


def test_admin_reads_admin_channel(client, admin_headers, seeded):
    data = client.get('/api/notifications', headers=admin_headers).get_json()['data']

    assert len(data['notifications']) == 1
    assert data['notifications'][0]['userId'] == ADMIN_CHANNEL
    assert data['notifications'][0]['type'] == 'booking_created'
    assert data['notifications'][0]['bookingId'] == seeded


def test_guest_reads_own_notifications(client, user_headers, other_user_headers, seeded):
    mine = client.get('/api/notifications', headers=user_headers).get_json()['data']
    theirs = client.get('/api/notifications', headers=other_user_headers).get_json()['data']

    assert [n['type'] for n in mine['notifications']] == ['booking_approved']
    assert theirs['notifications'] == []


def test_unread_count(client, user_headers, admin_headers, seeded):
    assert client.get('/api/notifications/unread-count', headers=user_headers).get_json()['data']['unreadCount'] == 1
    assert client.get('/api/notifications/unread-count', headers=admin_headers).get_json()['data']['unreadCount'] == 1


def test_mark_read(client, user_headers, seeded):
    notification_id = client.get('/api/notifications', headers=user_headers) \
        .get_json()['data']['notifications'][0]['id']

    response = client.put(f'/api/notifications/{notification_id}/read', headers=user_headers)

    assert response.status_code == 200
    assert response.get_json()['data']['notification']['read'] is True
    assert client.get('/api/notifications/unread-count', headers=user_headers).get_json()['data']['unreadCount'] == 0


def test_mark_read_of_someone_elses_notification(client, user_headers, other_user_headers, seeded):
    notification_id = client.get('/api/notifications', headers=user_headers) \
        .get_json()['data']['notifications'][0]['id']

    assert client.put(f'/api/notifications/{notification_id}/read', headers=other_user_headers).status_code == 404
    assert client.put('/api/notifications/missing/read', headers=user_headers).status_code == 404


def test_mark_all_read(client, admin_headers, lifecycle, booking_data):
    for _ in range(3):
        lifecycle.create_booking(booking_data)

    response = client.put('/api/notifications/read-all', headers=admin_headers)

    assert response.status_code == 200
    assert response.get_json()['data']['updated'] == 3
    assert client.get('/api/notifications/unread-count', headers=admin_headers).get_json()['data']['unreadCount'] == 0


def test_notifications_require_token(client):
    assert client.get('/api/notifications').status_code == 401


def test_stream_sends_initial_snapshot(client, user_headers, seeded):
    response = client.get('/api/notifications/stream', headers=user_headers)

    assert response.status_code == 200
    assert response.mimetype == 'text/event-stream'

    first_event = next(response.response)
    if isinstance(first_event, bytes):
        first_event = first_event.decode('utf-8')
    response.close()

    assert first_event.startswith('data: ')
    payload = json.loads(first_event[len('data: '):].strip())
    assert [n['type'] for n in payload] == ['booking_approved']
