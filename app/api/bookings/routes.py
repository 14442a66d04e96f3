from flask import request, current_app
from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity

from app.extensions import db
from app.services import get_booking_lifecycle
from app.services.errors import NotFoundError, StoreError, ValidationError
from app.utils.api_response import APIResponse
from app.utils.decorators import can_access_booking
from app.api.bookings.schemas import BookingSchemas

from . import bookings_bp


def _request_payload():
    """JSON body, or form fields when the proof is sent as multipart"""
    if request.is_json:
        return request.get_json() or {}
    return request.form.to_dict()


@bookings_bp.route('', methods=['POST'])
@jwt_required()
def create_booking():
    """
    Create a booking, optionally with its payment proof in the same request

    Body (JSON or multipart/form-data):
        bookingType, itemName, bookingDate, participants, totalAmount,
        paymentMethod, userName, userEmail; file field paymentProof

    Returns:
        201: Booking created
        422: Validation failed
    """
    payload = _request_payload()
    proof = request.files.get('paymentProof')
    # A form submitted with no file chosen still sends an empty part
    if proof is not None and not proof.filename:
        proof = None

    try:
        is_valid, errors, cleaned_data = BookingSchemas.validate_booking_create(payload, proof is not None)
        if not is_valid:
            return APIResponse.validation_error(errors)

        claims = get_jwt()
        cleaned_data['user_id'] = get_jwt_identity()
        cleaned_data['user_name'] = claims.get('name') or cleaned_data.get('user_name')
        cleaned_data['user_email'] = claims.get('email') or cleaned_data.get('user_email')

        lifecycle = get_booking_lifecycle()
        booking_id = lifecycle.create_booking(cleaned_data)

        message = 'Booking submitted successfully'
        if proof is not None:
            try:
                lifecycle.upload_payment_proof(booking_id, proof)
            except StoreError as e:
                current_app.logger.error(f"Payment proof upload failed for booking {booking_id}: {str(e)}")
                message = 'Booking submitted but the payment proof upload failed; please re-upload it'

        booking = lifecycle.get_booking(booking_id)
        return APIResponse.success({'booking': booking.to_dict()}, message=message, status_code=201)

    except ValidationError as e:
        return APIResponse.validation_error(e.errors, message=e.message)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Create booking error: {str(e)}")
        return APIResponse.server_error("Failed to create booking")


@bookings_bp.route('', methods=['GET'])
@jwt_required()
def get_my_bookings():
    """Current user's bookings, newest first"""
    try:
        bookings = get_booking_lifecycle().get_user_bookings(get_jwt_identity())
        return APIResponse.success({
            'bookings': [b.to_dict() for b in bookings],
            'total': len(bookings)
        })
    except Exception as e:
        current_app.logger.error(f"Get bookings error: {str(e)}")
        return APIResponse.server_error("Failed to fetch bookings")


@bookings_bp.route('/summary', methods=['GET'])
@jwt_required()
def get_booking_summary():
    """Guest dashboard figures"""
    try:
        summary = get_booking_lifecycle().get_user_summary(get_jwt_identity())
        return APIResponse.success({
            'totalBookings': summary['total_bookings'],
            'confirmedBookings': summary['confirmed_count'],
            'totalSpent': float(summary['total_spent']),
            'upcomingBookings': [b.to_dict() for b in summary['upcoming']]
        })
    except Exception as e:
        current_app.logger.error(f"Booking summary error: {str(e)}")
        return APIResponse.server_error("Failed to fetch booking summary")


@bookings_bp.route('/<booking_id>', methods=['GET'])
@jwt_required()
def get_booking(booking_id):
    """Booking detail for its owner or an admin"""
    try:
        booking = get_booking_lifecycle().get_booking_by_id(booking_id)
        if not booking:
            return APIResponse.not_found("Booking not found")
        if not can_access_booking(booking):
            return APIResponse.forbidden("You cannot view this booking")

        return APIResponse.success({'booking': booking.to_dict()})

    except Exception as e:
        current_app.logger.error(f"Get booking error: {str(e)}")
        return APIResponse.server_error("Failed to fetch booking")


@bookings_bp.route('/<booking_id>/payment-proof', methods=['POST'])
@jwt_required()
def upload_payment_proof(booking_id):
    """
    Attach or replace the payment proof image

    Form:
        paymentProof: image file
    """
    proof = request.files.get('paymentProof')

    try:
        if proof is None or not proof.filename:
            return APIResponse.validation_error({'paymentProof': 'A payment proof file is required'})

        lifecycle = get_booking_lifecycle()
        booking = lifecycle.get_booking_by_id(booking_id)
        if not booking:
            return APIResponse.not_found("Booking not found")
        if not can_access_booking(booking):
            return APIResponse.forbidden("You cannot modify this booking")

        url = lifecycle.upload_payment_proof(booking_id, proof)
        return APIResponse.success({'paymentProofUrl': url}, message='Payment proof uploaded')

    except NotFoundError:
        return APIResponse.not_found("Booking not found")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Payment proof upload error: {str(e)}")
        return APIResponse.server_error("Failed to upload payment proof")


@bookings_bp.route('/<booking_id>/cancel', methods=['POST'])
@jwt_required()
def cancel_booking(booking_id):
    """Soft-cancel a booking; the record stays visible with status cancelled"""
    try:
        lifecycle = get_booking_lifecycle()
        booking = lifecycle.get_booking_by_id(booking_id)
        if not booking:
            return APIResponse.not_found("Booking not found")
        if not can_access_booking(booking):
            return APIResponse.forbidden("You cannot cancel this booking")

        booking = lifecycle.cancel_booking(booking_id)
        return APIResponse.success({'booking': booking.to_dict()}, message='Booking cancelled')

    except NotFoundError:
        return APIResponse.not_found("Booking not found")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Cancel booking error: {str(e)}")
        return APIResponse.server_error("Failed to cancel booking")
