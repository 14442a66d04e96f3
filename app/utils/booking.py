from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union


class BookingUtils:
    """Parsing and formatting helpers shared by the booking services and API"""

    @staticmethod
    def parse_booking_date(value: Union[str, date, datetime, None]) -> Optional[date]:
        """Coerce a date, datetime or ISO-8601 string into a calendar date"""
        if value is None or value == '':
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            raise ValueError(f"Invalid date: {value}")

    @staticmethod
    def parse_amount(value) -> Optional[Decimal]:
        """Coerce a number or numeric string into a 2dp Decimal"""
        if value is None or value == '':
            return None
        if isinstance(value, bool):
            raise ValueError(f"Invalid amount: {value}")
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value}")
        if not amount.is_finite():
            raise ValueError(f"Invalid amount: {value}")
        return amount.quantize(Decimal('0.01'))

    @staticmethod
    def format_amount(amount) -> str:
        """Thousands-separated amount, decimals only when there are any: 1500 -> '1,500'"""
        amount = Decimal(str(amount))
        if amount == amount.to_integral_value():
            return f"{int(amount):,}"
        return f"{amount:,.2f}"

    @staticmethod
    def format_peso(amount) -> str:
        return f"₱{BookingUtils.format_amount(amount)}"
