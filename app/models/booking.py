from datetime import datetime, timezone
import uuid
from app.extensions import db
from app.models.enums import BookingStatus, BookingType, PaymentMethod


def utcnow():
    """Naive UTC now; SQLite drops tzinfo on the way back out."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Guest info (copied from the account at booking time)
    user_id = db.Column(db.String(128), nullable=False, index=True)
    user_name = db.Column(db.String(120), nullable=False)
    user_email = db.Column(db.String(120), nullable=False)

    # What was booked
    booking_type = db.Column(db.Enum(BookingType), nullable=False)
    item_name = db.Column(db.String(200), nullable=False)
    booking_date = db.Column(db.Date, nullable=False)
    participants = db.Column(db.Integer)

    # Payment
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_method = db.Column(db.Enum(PaymentMethod), nullable=False)
    payment_proof_url = db.Column(db.String(500))

    status = db.Column(db.Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False, index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'userName': self.user_name,
            'userEmail': self.user_email,
            'bookingType': self.booking_type.value if self.booking_type else None,
            'itemName': self.item_name,
            'bookingDate': self.booking_date.isoformat() if self.booking_date else None,
            'participants': self.participants,
            'totalAmount': float(self.total_amount) if self.total_amount is not None else 0.0,
            'paymentMethod': self.payment_method.value if self.payment_method else None,
            'paymentProofUrl': self.payment_proof_url,
            'status': self.status.value if self.status else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Booking {self.id} {self.item_name} {self.status}>'
