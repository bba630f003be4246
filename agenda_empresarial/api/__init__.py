"""
Agenda Empresarial API

This module provides a modular API structure for the agenda UI.

Structure:
    api/
    ├── __init__.py              # This file
    ├── appointments/            # Appointments domain
    │   ├── __init__.py          # Re-exports endpoints
    │   └── endpoints.py         # Slots, booking, status, reports
    └── shared/                  # Shared utilities
        ├── __init__.py
        └── validators.py        # Input validators

Usage:
    from agenda_empresarial.api.appointments import create_appointment
    create_appointment(store, "2025-06-10", "10:00", service_id, client_id)
"""

# Re-export domains for convenient access
from . import appointments
from . import shared

__all__ = [
    "appointments",
    "shared",
]
