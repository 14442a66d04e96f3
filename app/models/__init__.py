from app.models.booking import Booking
from app.models.notification import Notification, ADMIN_CHANNEL
