import json
import logging
import queue

from flask import Response, current_app
from flask_jwt_extended import jwt_required

from app.extensions import db
from app.services import get_notification_service
from app.services.errors import NotFoundError
from app.utils.api_response import APIResponse
from app.utils.decorators import notification_recipient

from . import notifications_bp

logger = logging.getLogger(__name__)


@notifications_bp.route('', methods=['GET'])
@jwt_required()
def get_notifications():
    """
    Notifications for the caller, newest first

    Admins receive the shared admin channel.
    """
    try:
        service = get_notification_service()
        recipient = notification_recipient()
        notifications = service.get_user_notifications(recipient)

        return APIResponse.success(
            data={
                'notifications': [n.to_dict() for n in notifications],
                'unreadCount': sum(1 for n in notifications if not n.read)
            },
            message='Notifications retrieved successfully'
        )

    except Exception as e:
        current_app.logger.error(f"Get notifications error: {str(e)}")
        return APIResponse.server_error('An error occurred while fetching notifications')


@notifications_bp.route('/unread-count', methods=['GET'])
@jwt_required()
def get_unread_count():
    try:
        count = get_notification_service().get_unread_notification_count(notification_recipient())
        return APIResponse.success({'unreadCount': count})

    except Exception as e:
        current_app.logger.error(f"Unread count error: {str(e)}")
        return APIResponse.server_error('An error occurred while counting notifications')


@notifications_bp.route('/<notification_id>/read', methods=['PUT'])
@jwt_required()
def mark_notification_read(notification_id):
    """
    Mark notification as read

    Returns:
        200: Notification marked as read
        404: Notification not found or addressed to someone else
    """
    try:
        service = get_notification_service()
        notification = service.get_notification(notification_id)
        if notification.user_id != notification_recipient():
            return APIResponse.not_found('Notification not found')

        notification = service.mark_notification_as_read(notification_id)
        return APIResponse.success(
            data={'notification': notification.to_dict()},
            message='Notification marked as read'
        )

    except NotFoundError:
        return APIResponse.not_found('Notification not found')
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Mark notification read error: {str(e)}")
        return APIResponse.server_error('An error occurred while updating notification')


@notifications_bp.route('/read-all', methods=['PUT'])
@jwt_required()
def mark_all_read():
    try:
        updated = get_notification_service().mark_all_notifications_as_read(notification_recipient())
        return APIResponse.success({'updated': updated}, message='All notifications marked as read')

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Mark all notifications read error: {str(e)}")
        return APIResponse.server_error('An error occurred while updating notifications')


@notifications_bp.route('/stream', methods=['GET'])
@jwt_required()
def stream_notifications():
    """
    Server-Sent Events feed of the caller's notifications

    Each event carries the full list, newest first. The first event is sent
    immediately; later ones follow every insert or read change.
    """
    recipient = notification_recipient()
    keepalive = current_app.config.get('NOTIFICATION_STREAM_KEEPALIVE', 15)
    events = queue.Queue()

    subscription = get_notification_service().subscribe_to_notifications(
        recipient, lambda notifications: events.put([n.to_dict() for n in notifications])
    )

    def generate():
        try:
            while True:
                try:
                    payload = events.get(timeout=keepalive)
                except queue.Empty:
                    yield ': keep-alive\n\n'
                    continue
                yield f"data: {json.dumps(payload)}\n\n"
        finally:
            subscription.unsubscribe()
            logger.debug(f"Notification stream for {recipient} closed")

    response = Response(generate(), mimetype='text/event-stream')
    response.headers['Cache-Control'] = 'no-cache'
    response.headers['X-Accel-Buffering'] = 'no'
    # A generator that never started will not run its finally block
    response.call_on_close(subscription.unsubscribe)
    return response
