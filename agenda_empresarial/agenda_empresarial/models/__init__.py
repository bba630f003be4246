"""
Models Module

Pydantic models for the agenda:
- Catalog records (catalog.py)
- Settings and closure rules (agenda_settings.py)
- Appointments (appointment.py)
"""

from .catalog import Client, Service, Staff
from .agenda_settings import (
	AgendaSettings,
	DailyClosure,
	Marker,
	WeekdayClosure,
	normalize_settings,
)
from .appointment import (
	Appointment,
	STATUS_CANCELED,
	STATUS_CONFIRMED,
	STATUS_DONE,
	STATUS_OPEN,
)

__all__ = [
	"Client",
	"Service",
	"Staff",
	"AgendaSettings",
	"DailyClosure",
	"Marker",
	"WeekdayClosure",
	"normalize_settings",
	"Appointment",
	"STATUS_CANCELED",
	"STATUS_CONFIRMED",
	"STATUS_DONE",
	"STATUS_OPEN",
]
