import uuid
from app.extensions import db
from app.models.booking import utcnow
from app.models.enums import NotificationType

# Reserved recipient for resort staff; never a real user id
ADMIN_CHANNEL = 'admin'


class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(128), nullable=False, index=True)

    # Notification details
    type = db.Column(db.Enum(NotificationType), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)

    # Back-reference only; bookings are never hard-deleted
    booking_id = db.Column(db.String(36), index=True)

    read = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'type': self.type.value if self.type else None,
            'title': self.title,
            'message': self.message,
            'bookingId': self.booking_id,
            'read': self.read,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
