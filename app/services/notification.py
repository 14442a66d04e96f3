"""
Notification Service
In-app notifications for guests and the admin channel, with live subscriptions
"""

import logging
import threading
from typing import Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from app.models.booking import utcnow
from app.models.enums import NotificationType
from app.models.notification import Notification
from app.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by NotificationFeed.subscribe; call it or unsubscribe() to release"""

    def __init__(self, feed, user_id: str, callback: Callable):
        self.feed = feed
        self.user_id = user_id
        self.callback = callback
        self.active = True

    def unsubscribe(self):
        if self.active:
            self.active = False
            self.feed._remove(self)

    __call__ = unsubscribe


class NotificationFeed:
    """
    In-process registry of live notification subscribers

    Delivery is synchronous on the writer's thread. A subscriber that is
    never released keeps its callback alive for the life of the feed.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Subscription]] = {}
        # Each SSE stream subscribes from its own request thread
        self._lock = threading.Lock()

    def subscribe(self, user_id: str, callback: Callable) -> Subscription:
        subscription = Subscription(self, user_id, callback)
        with self._lock:
            self._subscribers.setdefault(user_id, []).append(subscription)
        return subscription

    def _remove(self, subscription: Subscription):
        with self._lock:
            subscribers = self._subscribers.get(subscription.user_id, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscribers.pop(subscription.user_id, None)

    def has_subscribers(self, user_id: str) -> bool:
        with self._lock:
            return bool(self._subscribers.get(user_id))

    def subscriber_count(self, user_id: str = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._subscribers.get(user_id, []))
            return sum(len(subs) for subs in self._subscribers.values())

    def publish(self, user_id: str, notifications: List[Notification]):
        # Copy: callbacks may unsubscribe while we iterate
        with self._lock:
            subscribers = list(self._subscribers.get(user_id, []))

        for subscription in subscribers:
            if not subscription.active:
                continue
            try:
                subscription.callback(notifications)
            except Exception:
                logger.exception(f"Notification subscriber for {user_id} failed")


class NotificationService:
    """Create, query and mark-read in-app notifications"""

    def __init__(self, session, feed: NotificationFeed = None, clock=None):
        self.session = session
        self.feed = feed or NotificationFeed()
        self.clock = clock or utcnow

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _publish(self, user_id: str):
        """Push the fresh list to live subscribers. The write has already committed."""
        if not self.feed.has_subscribers(user_id):
            return
        try:
            notifications = self.get_user_notifications(user_id)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception(f"Could not load notifications for {user_id}; live subscribers not updated")
            return
        self.feed.publish(user_id, notifications)

    def create_notification(
        self,
        user_id: str,
        notification_type,
        title: str,
        message: str,
        booking_id: str = None,
        read: bool = False
    ) -> Notification:
        """
        Create in-app notification

        Args:
            user_id: Recipient user id, or ADMIN_CHANNEL for resort staff
            notification_type: NotificationType or its value
            title: Short heading
            message: Rendered body text
            booking_id: Optional booking back-reference
            read: Initial read flag

        Raises:
            ValidationError: If a required field is missing or the type is unknown
        """
        errors = {}
        if not user_id:
            errors['user_id'] = 'This field is required'
        if not title:
            errors['title'] = 'This field is required'
        if not message:
            errors['message'] = 'This field is required'
        if not notification_type:
            errors['type'] = 'This field is required'
        elif not isinstance(notification_type, NotificationType):
            try:
                notification_type = NotificationType(notification_type)
            except ValueError:
                errors['type'] = f"Must be one of: {', '.join(t.value for t in NotificationType)}"
        if errors:
            raise ValidationError("Invalid notification", errors=errors)

        notification = Notification(
            user_id=str(user_id),
            type=notification_type,
            title=title,
            message=message,
            booking_id=booking_id,
            read=bool(read),
            created_at=self.clock()
        )

        self.session.add(notification)
        self._commit()

        logger.info(f"Notification {notification.type.value} created for {notification.user_id}")
        self._publish(notification.user_id)
        return notification

    def get_user_notifications(self, user_id: str) -> List[Notification]:
        return (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .all()
        )

    def get_notification(self, notification_id: str) -> Notification:
        notification = self.session.get(Notification, notification_id) if notification_id else None
        if notification is None:
            raise NotFoundError(f"Notification {notification_id} not found")
        return notification

    def mark_notification_as_read(self, notification_id: str) -> Notification:
        """
        Flip a notification to read

        Raises:
            NotFoundError: If the notification does not exist
        """
        notification = self.get_notification(notification_id)

        if not notification.read:
            notification.read = True
            self._commit()
            self._publish(notification.user_id)
        return notification

    def mark_all_notifications_as_read(self, user_id: str) -> int:
        """
        Mark every unread notification of a user as read

        Notifications created while this runs may be left unread.

        Returns:
            Number of notifications flipped
        """
        unread = (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .all()
        )
        for notification in unread:
            notification.read = True

        if unread:
            self._commit()
            self._publish(user_id)
        return len(unread)

    def get_unread_notification_count(self, user_id: str) -> int:
        return (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .count()
        )

    def subscribe_to_notifications(self, user_id: str, callback: Callable) -> Subscription:
        """
        Live subscription to a user's notifications

        callback receives the full list (newest first) now and after every
        insert or read flip. Release with the returned handle.
        """
        subscription = self.feed.subscribe(user_id, callback)
        try:
            callback(self.get_user_notifications(user_id))
        except Exception:
            subscription.unsubscribe()
            raise
        return subscription
