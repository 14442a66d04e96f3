"""
Booking API Validation Schemas
Maps camelCase request payloads onto service fields
"""
from typing import Any, Dict, Tuple

from app.models.enums import BookingStatus, PaymentMethod


# request key -> service field
BOOKING_FIELDS = {
    'userName': 'user_name',
    'userEmail': 'user_email',
    'bookingType': 'booking_type',
    'itemName': 'item_name',
    'bookingDate': 'booking_date',
    'participants': 'participants',
    'totalAmount': 'total_amount',
    'paymentMethod': 'payment_method',
}

ADMIN_UPDATE_FIELDS = dict(BOOKING_FIELDS, paymentProofUrl='payment_proof_url', status='status',
                           userId='user_id', createdAt='created_at', updatedAt='updated_at')

NOT_AN_OBJECT = {'body': 'Request body must be a JSON object'}


class BookingSchemas:
    """Validation schemas for booking endpoints"""

    @staticmethod
    def validate_booking_create(data: Dict[str, Any], has_payment_proof: bool) -> Tuple[bool, Dict[str, str], Dict[str, Any]]:
        """
        Validate booking creation request

        Field-level checks happen in BookingService; this only maps names and
        applies the booking form rule that non-cash payments need a proof upload.

        Returns:
            (is_valid, errors, cleaned_data)
        """
        if not isinstance(data, dict):
            return False, dict(NOT_AN_OBJECT), {}

        errors = {}
        cleaned_data = {}

        for key, field in BOOKING_FIELDS.items():
            value = data.get(key)
            if isinstance(value, str):
                value = value.strip()
            if value not in (None, ''):
                cleaned_data[field] = value

        payment_method = cleaned_data.get('payment_method')
        if payment_method and payment_method != PaymentMethod.CASH.value and not has_payment_proof:
            errors['paymentProof'] = f'Payment proof is required for {payment_method} payments'

        return len(errors) == 0, errors, cleaned_data

    @staticmethod
    def validate_status_update(data: Dict[str, Any]) -> Tuple[bool, Dict[str, str], Dict[str, Any]]:
        """Validate admin status change request"""
        if data is not None and not isinstance(data, dict):
            return False, dict(NOT_AN_OBJECT), {}

        errors = {}
        cleaned_data = {}

        status = str((data or {}).get('status') or '').strip().lower()
        valid_statuses = [s.value for s in BookingStatus]
        if not status:
            errors['status'] = 'Status is required'
        elif status not in valid_statuses:
            errors['status'] = f'Status must be one of: {", ".join(valid_statuses)}'
        else:
            cleaned_data['status'] = status

        return len(errors) == 0, errors, cleaned_data

    @staticmethod
    def validate_booking_update(data: Dict[str, Any]) -> Tuple[bool, Dict[str, str], Dict[str, Any]]:
        """Validate admin booking update request"""
        if data is not None and not isinstance(data, dict):
            return False, dict(NOT_AN_OBJECT), {}

        errors = {}
        cleaned_data = {}

        if not data:
            errors['body'] = 'No fields to update'

        for key, value in (data or {}).items():
            field = ADMIN_UPDATE_FIELDS.get(key)
            if field is None:
                errors[key] = 'Unknown field'
            else:
                cleaned_data[field] = value

        return len(errors) == 0, errors, cleaned_data
