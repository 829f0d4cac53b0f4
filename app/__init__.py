"""
Appointment Booking API

A FastAPI service for signing up, listing open time slots and booking or
cancelling appointments, with slot reservation done in a single transaction.
"""

__version__ = "1.0.0"
