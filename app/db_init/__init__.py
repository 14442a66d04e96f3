"""
Database Initialization Package
Provides CLI commands and utilities for initializing the database with sample data
"""

from .init_db import init_database, clear_database, reset_database
from .sample_data import create_sample_bookings

__all__ = [
    'init_database',
    'clear_database',
    'reset_database',
    'create_sample_bookings',
]
