"""
Clinic Booking System

A FastAPI backend for booking clinic appointment slots, with a
double-booking-safe booking path and real-time slot notifications.
"""

__version__ = "1.0.0"
