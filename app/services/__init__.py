"""
Service wiring
Long-lived collaborators (blob store, notification feed) live on the app;
services are built per call around the current db.session.
"""
from flask import current_app

from app.extensions import db
from app.services.booking import BookingService
from app.services.lifecycle import BookingLifecycle
from app.services.notification import NotificationFeed, NotificationService
from app.services.storage import create_blob_store

EXTENSION_KEY = 'booking_core'


def init_services(app, blob_store=None):
    app.extensions[EXTENSION_KEY] = {
        'feed': NotificationFeed(),
        'blob_store': blob_store or create_blob_store(app.config),
    }


def get_notification_service() -> NotificationService:
    core = current_app.extensions[EXTENSION_KEY]
    return NotificationService(db.session, core['feed'])


def get_booking_lifecycle() -> BookingLifecycle:
    core = current_app.extensions[EXTENSION_KEY]
    return BookingLifecycle(
        BookingService(db.session, core['blob_store']),
        get_notification_service(),
    )
