import io
import os

from app.models.enums import BookingStatus
from app.models.notification import ADMIN_CHANNEL, Notification


def booking_payload(**overrides):
    payload = {
        "bookingType": "cottage",
        "itemName": "Standard Cottage",
        "bookingDate": "2025-02-14",
        "participants": 4,
        "totalAmount": 1500,
        "paymentMethod": "Cash",
    }
    payload.update(overrides)
    return payload


def multipart_payload(**overrides):
    data = {k: str(v) for k, v in booking_payload(paymentMethod="GCash", **overrides).items()}
    data["paymentProof"] = (io.BytesIO(b"\x89PNG proof"), "gcash-receipt.png")
    return data


def test_create_cash_booking(client, user_headers):
    response = client.post('/api/bookings', json=booking_payload(), headers=user_headers)

    assert response.status_code == 201
    data = response.get_json()
    assert data['success'] is True
    booking = data['data']['booking']
    assert booking['status'] == 'pending'
    assert booking['userId'] == 'u1'
    assert booking['userName'] == 'Juan Dela Cruz'
    assert booking['userEmail'] == 'juan@example.com'
    assert booking['totalAmount'] == 1500.0
    assert booking['paymentProofUrl'] is None

    notification = Notification.query.filter_by(user_id=ADMIN_CHANNEL).one()
    assert notification.booking_id == booking['id']
    assert '1,500' in notification.message


def test_create_booking_requires_auth(client):
    response = client.post('/api/bookings', json=booking_payload())
    assert response.status_code == 401


def test_create_non_cash_booking_requires_proof(client, user_headers):
    response = client.post('/api/bookings', json=booking_payload(paymentMethod="GCash"), headers=user_headers)

    assert response.status_code == 422
    assert 'paymentProof' in response.get_json()['errors']
    assert Notification.query.count() == 0


def test_create_booking_with_empty_proof_part_requires_proof(client, user_headers, app):
    data = multipart_payload()
    data["paymentProof"] = (io.BytesIO(b""), "")

    response = client.post(
        '/api/bookings',
        data=data,
        headers=user_headers,
        content_type='multipart/form-data'
    )

    assert response.status_code == 422
    assert 'paymentProof' in response.get_json()['errors']
    assert Notification.query.count() == 0
    assert not os.path.exists(os.path.join(app.config['UPLOAD_FOLDER'], 'payment-proofs'))


def test_create_booking_rejects_non_object_body(client, user_headers):
    response = client.post('/api/bookings', json=[booking_payload()], headers=user_headers)

    assert response.status_code == 422
    assert 'body' in response.get_json()['errors']
    assert Notification.query.count() == 0


def test_create_booking_with_proof_multipart(client, user_headers):
    response = client.post(
        '/api/bookings',
        data=multipart_payload(),
        headers=user_headers,
        content_type='multipart/form-data'
    )

    assert response.status_code == 201
    booking = response.get_json()['data']['booking']
    assert booking['paymentMethod'] == 'GCash'
    assert booking['paymentProofUrl'] == f"/uploads/payment-proofs/{booking['id']}/gcash-receipt.png"

    served = client.get(booking['paymentProofUrl'])
    assert served.status_code == 200
    assert served.data == b"\x89PNG proof"


def test_create_booking_field_errors(client, user_headers):
    response = client.post(
        '/api/bookings',
        json=booking_payload(bookingType="spa", totalAmount=-5),
        headers=user_headers
    )

    assert response.status_code == 422
    errors = response.get_json()['errors']
    assert 'booking_type' in errors
    assert 'total_amount' in errors


def test_create_booking_uses_payload_identity_without_claims(client, make_headers):
    headers = make_headers('u9')
    response = client.post(
        '/api/bookings',
        json=booking_payload(userName="Ana Reyes", userEmail="ana@example.com"),
        headers=headers
    )
    assert response.status_code == 201
    assert response.get_json()['data']['booking']['userName'] == 'Ana Reyes'


def test_list_my_bookings(client, user_headers, other_user_headers):
    client.post('/api/bookings', json=booking_payload(itemName="First"), headers=user_headers)
    client.post('/api/bookings', json=booking_payload(itemName="Theirs"), headers=other_user_headers)
    client.post('/api/bookings', json=booking_payload(itemName="Second"), headers=user_headers)

    response = client.get('/api/bookings', headers=user_headers)

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['total'] == 2
    assert {b['itemName'] for b in data['bookings']} == {'First', 'Second'}
    created = [b['createdAt'] for b in data['bookings']]
    assert created == sorted(created, reverse=True)


def test_get_booking_ownership(client, user_headers, other_user_headers, admin_headers):
    booking_id = client.post('/api/bookings', json=booking_payload(), headers=user_headers) \
        .get_json()['data']['booking']['id']

    assert client.get(f'/api/bookings/{booking_id}', headers=user_headers).status_code == 200
    assert client.get(f'/api/bookings/{booking_id}', headers=other_user_headers).status_code == 403
    assert client.get(f'/api/bookings/{booking_id}', headers=admin_headers).status_code == 200
    assert client.get('/api/bookings/missing', headers=user_headers).status_code == 404


def test_upload_payment_proof_endpoint(client, user_headers, other_user_headers):
    booking_id = client.post('/api/bookings', json=booking_payload(), headers=user_headers) \
        .get_json()['data']['booking']['id']

    forbidden = client.post(
        f'/api/bookings/{booking_id}/payment-proof',
        data={'paymentProof': (io.BytesIO(b'x'), 'proof.jpg')},
        headers=other_user_headers,
        content_type='multipart/form-data'
    )
    assert forbidden.status_code == 403

    response = client.post(
        f'/api/bookings/{booking_id}/payment-proof',
        data={'paymentProof': (io.BytesIO(b'jpeg bytes'), 'proof.jpg')},
        headers=user_headers,
        content_type='multipart/form-data'
    )
    assert response.status_code == 200
    assert response.get_json()['data']['paymentProofUrl'].endswith(f'{booking_id}/proof.jpg')


def test_upload_payment_proof_requires_file(client, user_headers):
    booking_id = client.post('/api/bookings', json=booking_payload(), headers=user_headers) \
        .get_json()['data']['booking']['id']

    response = client.post(f'/api/bookings/{booking_id}/payment-proof', data={}, headers=user_headers)
    assert response.status_code == 422


def test_upload_payment_proof_missing_booking(client, user_headers):
    response = client.post(
        '/api/bookings/missing/payment-proof',
        data={'paymentProof': (io.BytesIO(b'x'), 'proof.jpg')},
        headers=user_headers,
        content_type='multipart/form-data'
    )
    assert response.status_code == 404


def test_upload_too_large(app, client, user_headers):
    app.config['MAX_CONTENT_LENGTH'] = 1024
    response = client.post(
        '/api/bookings/anything/payment-proof',
        data={'paymentProof': (io.BytesIO(b'x' * 4096), 'proof.jpg')},
        headers=user_headers,
        content_type='multipart/form-data'
    )
    assert response.status_code == 413


def test_cancel_own_booking(client, user_headers, other_user_headers):
    booking_id = client.post('/api/bookings', json=booking_payload(), headers=user_headers) \
        .get_json()['data']['booking']['id']

    assert client.post(f'/api/bookings/{booking_id}/cancel', headers=other_user_headers).status_code == 403

    response = client.post(f'/api/bookings/{booking_id}/cancel', headers=user_headers)
    assert response.status_code == 200
    assert response.get_json()['data']['booking']['status'] == BookingStatus.CANCELLED.value

    still_there = client.get(f'/api/bookings/{booking_id}', headers=user_headers)
    assert still_there.get_json()['data']['booking']['status'] == 'cancelled'


def test_booking_summary(client, user_headers, admin_headers):
    keep = client.post('/api/bookings', json=booking_payload(bookingDate="2999-01-01", totalAmount=1200),
                       headers=user_headers).get_json()['data']['booking']['id']
    client.post('/api/bookings', json=booking_payload(totalAmount=800), headers=user_headers)
    client.put(f'/api/admin/bookings/{keep}/status', json={'status': 'approved'}, headers=admin_headers)

    response = client.get('/api/bookings/summary', headers=user_headers)

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['totalBookings'] == 2
    assert data['confirmedBookings'] == 1
    assert data['totalSpent'] == 1200.0
    assert [b['id'] for b in data['upcomingBookings']] == [keep]
