"""
Booking Service
Persists bookings, payment proofs, status transitions and aggregate statistics
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.utils import secure_filename

from app.models.booking import Booking, utcnow
from app.models.enums import BookingStatus, BookingType, PaymentMethod
from app.services.errors import NotFoundError, ValidationError
from app.utils.booking import BookingUtils

logger = logging.getLogger(__name__)


# Transitions an admin is expected to make. Anything else is written anyway but logged.
STANDARD_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED},
    BookingStatus.APPROVED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.REJECTED: {BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}

REQUIRED_FIELDS = (
    'user_id', 'user_name', 'user_email', 'booking_type',
    'item_name', 'booking_date', 'total_amount', 'payment_method',
)

EDITABLE_FIELDS = (
    'user_name', 'user_email', 'booking_type', 'item_name', 'booking_date',
    'participants', 'total_amount', 'payment_method', 'payment_proof_url', 'status',
)

IMMUTABLE_FIELDS = ('id', 'user_id', 'created_at', 'updated_at')

REVENUE_STATUSES = (BookingStatus.APPROVED, BookingStatus.COMPLETED)

PAYMENT_PROOF_PREFIX = 'payment-proofs'


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"Must be one of: {', '.join(e.value for e in enum_cls)}")


def coerce_status(value) -> BookingStatus:
    try:
        return _coerce_enum(BookingStatus, value)
    except ValueError as e:
        raise ValidationError("Invalid booking status", errors={'status': str(e)})


class BookingService:
    """Booking record manager. Sends no notifications; see BookingLifecycle."""

    def __init__(self, session, blob_store, clock=None):
        """
        Args:
            session: SQLAlchemy session (db.session in the app)
            blob_store: BlobStore used for payment proofs
            clock: callable returning naive UTC datetimes, defaults to utcnow
        """
        self.session = session
        self.blob_store = blob_store
        self.clock = clock or utcnow

    # ===== helpers =====

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _touch(self, booking: Booking):
        """Bump updated_at, strictly increasing even if the clock has not moved"""
        now = self.clock()
        if booking.updated_at is not None and now <= booking.updated_at:
            now = booking.updated_at + timedelta(microseconds=1)
        booking.updated_at = now

    def _clean_fields(self, data: Dict, fields) -> Tuple[Dict, Dict]:
        """Normalise the given fields of data; returns (cleaned, errors)"""
        cleaned = {}
        errors = {}

        for field in fields:
            if field not in data:
                continue
            value = data[field]
            try:
                if field in ('user_name', 'user_email', 'item_name'):
                    value = str(value).strip() if value is not None else ''
                    if not value:
                        raise ValueError('Cannot be empty')
                elif field == 'booking_type':
                    value = _coerce_enum(BookingType, value)
                elif field == 'payment_method':
                    value = _coerce_enum(PaymentMethod, value)
                elif field == 'status':
                    value = _coerce_enum(BookingStatus, value)
                elif field == 'booking_date':
                    value = BookingUtils.parse_booking_date(value)
                    if value is None:
                        raise ValueError('Cannot be empty')
                elif field == 'total_amount':
                    value = BookingUtils.parse_amount(value)
                    if value is None:
                        raise ValueError('Cannot be empty')
                    if value < 0:
                        raise ValueError('Must not be negative')
                elif field == 'participants':
                    if value is not None and value != '':
                        if isinstance(value, bool) or int(value) != float(value):
                            raise ValueError('Must be a whole number')
                        value = int(value)
                        if value < 1:
                            raise ValueError('Must be at least 1')
                    else:
                        value = None
                elif field == 'payment_proof_url':
                    value = str(value).strip() if value else None
            except (TypeError, ValueError) as e:
                errors[field] = str(e)
                continue
            cleaned[field] = value

        return cleaned, errors

    def _log_transition(self, booking: Booking, previous: BookingStatus, status: BookingStatus):
        if status not in STANDARD_TRANSITIONS.get(previous, set()):
            logger.warning(
                f"Non-standard booking transition {previous.value} -> {status.value} "
                f"for booking {booking.id}"
            )

    # ===== create =====

    def create_booking(self, data: Dict) -> Booking:
        """
        Validate and persist a new pending booking

        Args:
            data: booking fields (snake_case). id, status and timestamps are ignored.

        Returns:
            The persisted Booking

        Raises:
            ValidationError: If a required field is missing or invalid
        """
        errors = {field: 'This field is required' for field in REQUIRED_FIELDS
                  if data.get(field) in (None, '')}

        cleaned, field_errors = self._clean_fields(
            data, [f for f in REQUIRED_FIELDS + ('participants',) if f not in errors and f != 'user_id']
        )
        errors.update(field_errors)
        if errors:
            raise ValidationError("Invalid booking", errors=errors)

        now = self.clock()
        booking = Booking(
            user_id=str(data['user_id']),
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
            **cleaned
        )

        self.session.add(booking)
        self._commit()

        logger.info(f"Created booking {booking.id} for user {booking.user_id}: {booking.item_name}")
        return booking

    # ===== payment proof =====

    def upload_payment_proof(self, booking_id: str, file) -> str:
        """
        Store a payment proof image and attach its URL to the booking

        Args:
            booking_id: Booking to attach the proof to
            file: object with ``filename`` and ``read()`` (e.g. werkzeug FileStorage)

        Returns:
            Public URL of the stored proof

        Raises:
            NotFoundError: If the booking does not exist
            StoreError: If the blob store write fails
        """
        booking = self.get_booking(booking_id)

        filename = secure_filename(getattr(file, 'filename', '') or '') or 'payment-proof'
        content_type = getattr(file, 'mimetype', None) or getattr(file, 'content_type', None)
        path = f"{PAYMENT_PROOF_PREFIX}/{booking.id}/{filename}"

        url = self.blob_store.put(path, file.read(), content_type=content_type)

        booking.payment_proof_url = url
        self._touch(booking)
        self._commit()

        logger.info(f"Attached payment proof to booking {booking.id}")
        return url

    # ===== queries =====

    def get_all_bookings(self, status=None) -> List[Booking]:
        """
        All bookings, newest first. Unpaginated: sized for a single resort's
        booking volume (a few thousand rows).
        """
        query = self.session.query(Booking)
        if status:
            query = query.filter(Booking.status == coerce_status(status))
        return query.order_by(Booking.created_at.desc()).all()

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        """A user's bookings, newest first. Sorted here so no composite index is needed."""
        bookings = self.session.query(Booking).filter(Booking.user_id == user_id).all()
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        if not booking_id:
            return None
        return self.session.get(Booking, booking_id)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    # ===== updates =====

    def update_booking_status(self, booking_id: str, status) -> Tuple[Booking, BookingStatus]:
        """
        Write a new status unconditionally

        Returns:
            (booking, previous_status)

        Raises:
            NotFoundError: If the booking does not exist
            ValidationError: If status is not a known BookingStatus
        """
        status = coerce_status(status)
        booking = self.get_booking(booking_id)
        previous = booking.status

        self._log_transition(booking, previous, status)
        booking.status = status
        self._touch(booking)
        self._commit()

        logger.info(f"Booking {booking.id} status {previous.value} -> {status.value}")
        return booking, previous

    def update_booking(self, booking_id: str, updates: Dict) -> Booking:
        """Field-level update of editable fields; always bumps updated_at"""
        immutable = [f for f in updates if f in IMMUTABLE_FIELDS]
        unknown = [f for f in updates if f not in EDITABLE_FIELDS and f not in IMMUTABLE_FIELDS]
        errors = {f: 'Field cannot be changed' for f in immutable}
        errors.update({f: 'Unknown field' for f in unknown})

        cleaned, field_errors = self._clean_fields(updates, EDITABLE_FIELDS)
        errors.update(field_errors)
        if errors:
            raise ValidationError("Invalid booking update", errors=errors)

        booking = self.get_booking(booking_id)

        if 'status' in cleaned:
            self._log_transition(booking, booking.status, cleaned['status'])

        for key, value in cleaned.items():
            setattr(booking, key, value)

        self._touch(booking)
        self._commit()
        return booking

    def cancel_booking(self, booking_id: str) -> Booking:
        """Soft delete: the record stays, marked cancelled"""
        booking, _ = self.update_booking_status(booking_id, BookingStatus.CANCELLED)
        return booking

    # Older callers use this name; it never hard-deletes.
    delete_booking = cancel_booking

    # ===== statistics =====

    def get_booking_stats(self) -> Dict:
        """
        Aggregate counts and revenue

        Full scan of the bookings table, O(n) per call.
        """
        total_bookings = 0
        total_revenue = Decimal('0.00')
        counts = {BookingStatus.PENDING: 0, BookingStatus.APPROVED: 0, BookingStatus.REJECTED: 0}

        rows = self.session.query(Booking.status, Booking.total_amount).all()
        for status, amount in rows:
            total_bookings += 1
            if status in REVENUE_STATUSES:
                total_revenue += Decimal(amount or 0)
            if status in counts:
                counts[status] += 1

        return {
            'total_bookings': total_bookings,
            'total_revenue': total_revenue,
            'pending_count': counts[BookingStatus.PENDING],
            'approved_count': counts[BookingStatus.APPROVED],
            'rejected_count': counts[BookingStatus.REJECTED],
        }

    def get_user_summary(self, user_id: str) -> Dict:
        """Guest dashboard figures derived from the user's bookings"""
        bookings = self.get_user_bookings(user_id)
        today = self.clock().date()

        approved = [b for b in bookings if b.status == BookingStatus.APPROVED]
        upcoming = sorted(
            (b for b in approved if b.booking_date and b.booking_date >= today),
            key=lambda b: b.booking_date
        )
        total_spent = sum(
            (Decimal(b.total_amount or 0) for b in bookings if b.status in REVENUE_STATUSES),
            Decimal('0.00')
        )

        return {
            'total_bookings': len(bookings),
            'confirmed_count': len(approved),
            'total_spent': total_spent,
            'upcoming': upcoming,
        }
