"""
Sample bookings for local development
Created through the lifecycle so the admin channel gets its notifications too.
"""
from datetime import date, timedelta

from app.models.enums import BookingStatus

SAMPLE_BOOKINGS = [
    {
        'user_id': 'guest-juan',
        'user_name': 'Juan Dela Cruz',
        'user_email': 'juan@example.com',
        'booking_type': 'cottage',
        'item_name': 'Standard Cottage',
        'days_ahead': 7,
        'participants': 4,
        'total_amount': 1500,
        'payment_method': 'GCash',
        'status': BookingStatus.APPROVED,
    },
    {
        'user_id': 'guest-maria',
        'user_name': 'Maria Santos',
        'user_email': 'maria@example.com',
        'booking_type': 'cottage',
        'item_name': 'Floating Cottage',
        'days_ahead': 14,
        'participants': 8,
        'total_amount': 3500,
        'payment_method': 'Cash',
        'status': BookingStatus.PENDING,
    },
    {
        'user_id': 'guest-juan',
        'user_name': 'Juan Dela Cruz',
        'user_email': 'juan@example.com',
        'booking_type': 'tour',
        'item_name': 'Island Hopping Tour',
        'days_ahead': 21,
        'participants': 2,
        'total_amount': 2400,
        'payment_method': 'PayMaya',
        'status': BookingStatus.REJECTED,
    },
    {
        'user_id': 'guest-ana',
        'user_name': 'Ana Reyes',
        'user_email': 'ana@example.com',
        'booking_type': 'watersport',
        'item_name': 'Jet Ski (30 minutes)',
        'days_ahead': -3,
        'participants': 1,
        'total_amount': 1800,
        'payment_method': 'Bank Transfer',
        'status': BookingStatus.COMPLETED,
    },
]


def create_sample_bookings(lifecycle):
    """Create the sample bookings and walk each to its target status"""
    today = date.today()
    bookings = []

    for sample in SAMPLE_BOOKINGS:
        data = {k: v for k, v in sample.items() if k not in ('days_ahead', 'status')}
        data['booking_date'] = today + timedelta(days=sample['days_ahead'])

        booking_id = lifecycle.create_booking(data)
        if sample['status'] == BookingStatus.COMPLETED:
            lifecycle.update_booking_status(booking_id, BookingStatus.APPROVED)
        if sample['status'] != BookingStatus.PENDING:
            lifecycle.update_booking_status(booking_id, sample['status'])

        bookings.append(lifecycle.get_booking(booking_id))

    print(f"✅ Created {len(bookings)} sample bookings")
    return bookings
