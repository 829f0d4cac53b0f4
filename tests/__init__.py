"""
Test suite for the Appointment Booking API.

Contains unit tests for the booking services and API tests for the routers.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")
