import enum


class BookingStatus(enum.Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class BookingType(enum.Enum):
    COTTAGE = 'cottage'
    TOUR = 'tour'
    WATERSPORT = 'watersport'


class PaymentMethod(enum.Enum):
    GCASH = 'GCash'
    PAYMAYA = 'PayMaya'
    BANK_TRANSFER = 'Bank Transfer'
    CASH = 'Cash'


class NotificationType(enum.Enum):
    BOOKING_CREATED = 'booking_created'
    BOOKING_APPROVED = 'booking_approved'
    BOOKING_REJECTED = 'booking_rejected'


class UserRole(enum.Enum):
    USER = 'user'
    ADMIN = 'admin'
