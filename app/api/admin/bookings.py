from flask import request, current_app
from flask_jwt_extended import get_jwt_identity

from app.api.admin import admin_bp
from app.api.bookings.schemas import BookingSchemas
from app.extensions import db
from app.services import get_booking_lifecycle
from app.services.errors import NotFoundError, ValidationError
from app.utils.api_response import APIResponse
from app.utils.decorators import admin_required

# ===== BOOKING MANAGEMENT =====

@admin_bp.route('/bookings', methods=['GET'])
@admin_required()
def get_bookings():
    """
    All bookings, newest first

    Query params:
        - status: Filter by status
    """
    try:
        bookings = get_booking_lifecycle().get_all_bookings(status=request.args.get('status') or None)
        return APIResponse.success({
            'bookings': [b.to_dict() for b in bookings],
            'total': len(bookings)
        })

    except ValidationError as e:
        return APIResponse.validation_error(e.errors, message=e.message)
    except Exception as e:
        current_app.logger.error(f"Get bookings error: {str(e)}")
        return APIResponse.server_error("Failed to fetch bookings")


@admin_bp.route('/bookings/stats', methods=['GET'])
@admin_required()
def get_booking_stats():
    """Get booking statistics"""
    try:
        stats = get_booking_lifecycle().get_booking_stats()
        return APIResponse.success({
            'totalBookings': stats['total_bookings'],
            'totalRevenue': float(stats['total_revenue']),
            'pendingCount': stats['pending_count'],
            'approvedCount': stats['approved_count'],
            'rejectedCount': stats['rejected_count']
        })

    except Exception as e:
        current_app.logger.error(f"Get booking stats error: {str(e)}")
        return APIResponse.server_error("Failed to fetch booking statistics")


@admin_bp.route('/bookings/<booking_id>/status', methods=['PUT'])
@admin_required()
def update_booking_status(booking_id):
    """
    Approve, reject, complete or cancel a booking

    Body:
        status: pending | approved | rejected | completed | cancelled
    """
    try:
        is_valid, errors, cleaned_data = BookingSchemas.validate_status_update(request.get_json(silent=True))
        if not is_valid:
            return APIResponse.validation_error(errors)

        booking = get_booking_lifecycle().update_booking_status(booking_id, cleaned_data['status'])

        current_app.logger.info(
            f"Admin {get_jwt_identity()} set booking {booking_id} to {cleaned_data['status']}"
        )
        return APIResponse.success({'booking': booking.to_dict()}, message='Booking status updated')

    except NotFoundError:
        return APIResponse.not_found("Booking not found")
    except ValidationError as e:
        return APIResponse.validation_error(e.errors, message=e.message)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Update booking status error: {str(e)}")
        return APIResponse.server_error("Failed to update booking status")


@admin_bp.route('/bookings/<booking_id>', methods=['PATCH'])
@admin_required()
def update_booking(booking_id):
    """Update booking details"""
    try:
        is_valid, errors, cleaned_data = BookingSchemas.validate_booking_update(request.get_json(silent=True))
        if not is_valid:
            return APIResponse.validation_error(errors)

        booking = get_booking_lifecycle().update_booking(booking_id, cleaned_data)
        return APIResponse.success({'booking': booking.to_dict()}, message='Booking updated successfully')

    except NotFoundError:
        return APIResponse.not_found("Booking not found")
    except ValidationError as e:
        return APIResponse.validation_error(e.errors, message=e.message)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Update booking error: {str(e)}")
        return APIResponse.server_error("Failed to update booking")


@admin_bp.route('/bookings/<booking_id>', methods=['DELETE'])
@admin_required()
def delete_booking(booking_id):
    """Soft delete: the booking is kept and marked cancelled"""
    try:
        booking = get_booking_lifecycle().delete_booking(booking_id)
        return APIResponse.success({'booking': booking.to_dict()}, message='Booking cancelled')

    except NotFoundError:
        return APIResponse.not_found("Booking not found")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Delete booking error: {str(e)}")
        return APIResponse.server_error("Failed to cancel booking")
