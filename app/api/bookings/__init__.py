"""
Booking API Blueprint
Guest-facing booking endpoints
"""
from flask import Blueprint

bookings_bp = Blueprint('bookings', __name__, url_prefix='/api/bookings')

from . import routes
