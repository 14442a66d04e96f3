"""
Booking Lifecycle
Pairs every booking mutation with its notification side effect
"""

import logging
from typing import Dict

from app.models.enums import BookingStatus, NotificationType
from app.models.notification import ADMIN_CHANNEL
from app.services.booking import BookingService
from app.services.notification import NotificationService
from app.utils.booking import BookingUtils

logger = logging.getLogger(__name__)


STATUS_NOTIFICATIONS = {
    BookingStatus.APPROVED: (
        NotificationType.BOOKING_APPROVED,
        'Booking Approved!',
        'Your booking for {item_name} has been approved!',
    ),
    BookingStatus.REJECTED: (
        NotificationType.BOOKING_REJECTED,
        'Booking Rejected',
        'Your booking for {item_name} has been rejected. Please contact us for more information.',
    ),
}


class BookingLifecycle:
    """
    Public entry point for booking operations

    The booking write and the notification write are two separate commits.
    If the notification write fails the booking change stands and the failure
    is only logged; callers see the booking result as successful.
    """

    def __init__(self, bookings: BookingService, notifications: NotificationService):
        self.bookings = bookings
        self.notifications = notifications

    def _notify(self, booking, **kwargs):
        try:
            return self.notifications.create_notification(booking_id=booking.id, **kwargs)
        except Exception:
            logger.exception(
                f"Booking {booking.id} was saved but writing its "
                f"{kwargs.get('notification_type')} notification failed"
            )
            return None

    def create_booking(self, data: Dict) -> str:
        """Persist a pending booking and alert the admin channel. Returns the booking id."""
        booking = self.bookings.create_booking(data)

        self._notify(
            booking,
            user_id=ADMIN_CHANNEL,
            notification_type=NotificationType.BOOKING_CREATED,
            title='New Booking Received',
            message=(
                f"{booking.user_name} booked {booking.item_name} for "
                f"{BookingUtils.format_peso(booking.total_amount)}"
            ),
        )
        return booking.id

    def update_booking_status(self, booking_id: str, status):
        """
        Write the status, then notify the owner on approval or rejection

        No de-duplication: approving twice sends two notifications.
        """
        booking, _ = self.bookings.update_booking_status(booking_id, status)

        template = STATUS_NOTIFICATIONS.get(booking.status)
        if template:
            notification_type, title, message = template
            self._notify(
                booking,
                user_id=booking.user_id,
                notification_type=notification_type,
                title=title,
                message=message.format(item_name=booking.item_name),
            )
        return booking

    def upload_payment_proof(self, booking_id: str, file) -> str:
        return self.bookings.upload_payment_proof(booking_id, file)

    def get_all_bookings(self, status=None):
        return self.bookings.get_all_bookings(status=status)

    def get_user_bookings(self, user_id: str):
        return self.bookings.get_user_bookings(user_id)

    def get_booking_by_id(self, booking_id: str):
        return self.bookings.get_booking_by_id(booking_id)

    def get_booking(self, booking_id: str):
        return self.bookings.get_booking(booking_id)

    def update_booking(self, booking_id: str, updates: Dict):
        """Generic update. A status change here does not notify; use update_booking_status."""
        return self.bookings.update_booking(booking_id, updates)

    def cancel_booking(self, booking_id: str):
        return self.bookings.cancel_booking(booking_id)

    def delete_booking(self, booking_id: str):
        return self.bookings.delete_booking(booking_id)

    def get_booking_stats(self):
        return self.bookings.get_booking_stats()

    def get_user_summary(self, user_id: str):
        return self.bookings.get_user_summary(user_id)
