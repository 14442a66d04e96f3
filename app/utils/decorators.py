from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from app.models.enums import UserRole
from app.models.notification import ADMIN_CHANNEL
from app.utils.api_response import APIResponse


def is_admin() -> bool:
    """True when the current JWT carries the admin role claim"""
    return get_jwt().get('role') == UserRole.ADMIN.value


def notification_recipient() -> str:
    """Admins read the shared admin channel, everyone else their own feed"""
    return ADMIN_CHANNEL if is_admin() else get_jwt_identity()


def can_access_booking(booking) -> bool:
    return is_admin() or booking.user_id == get_jwt_identity()


def admin_required():
    """Decorator to require a valid JWT with the admin role"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            verify_jwt_in_request()
            if not is_admin():
                return APIResponse.forbidden("Admin access required")
            return f(*args, **kwargs)
        return decorated_function
    return decorator
