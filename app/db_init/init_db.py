"""
Database Initialization Script
Creates tables and initializes the database with sample data for testing
"""

from app.extensions import db


def clear_database():
    """Drop all tables and recreate them"""
    print("🗑️  Dropping all tables...")
    db.drop_all()
    print("✅ Tables dropped successfully")

    print("📋 Creating tables...")
    db.create_all()
    print("✅ Tables created successfully")


def init_database(with_sample_data=True):
    """
    Initialize the database with tables and optionally sample data

    Args:
        with_sample_data (bool): Whether to populate with sample bookings
    """
    print("🚀 Initializing database...")

    print("📋 Creating tables...")
    db.create_all()
    print("✅ Tables created successfully")

    if with_sample_data:
        from app.services import get_booking_lifecycle
        from .sample_data import create_sample_bookings

        bookings = create_sample_bookings(get_booking_lifecycle())
        print(f"\n✅ Database initialized successfully!")
        print(f"   - Bookings: {len(bookings)}")
    else:
        print("✅ Database tables created (no sample data)")

    return True


def reset_database():
    """Drop everything and initialize again with sample data"""
    clear_database()
    return init_database(with_sample_data=True)
