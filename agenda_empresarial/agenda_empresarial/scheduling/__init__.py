"""
Scheduling Services Module

This module provides core business logic for appointment scheduling:
- Time arithmetic on HH:mm (timeutils.py)
- Slot generation for UI (slots.py)
- Closure resolution (closures.py)
- Overlap detection (overlap.py)
- Booking and rescheduling (booking.py)
- Status transitions and receipts (status.py)
- Reports (reports.py)
"""
