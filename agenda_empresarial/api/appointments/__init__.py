"""
Appointments API Domain

Handles day slots, booking, rescheduling, status changes and reports.
"""

from agenda_empresarial.api.appointments.endpoints import (
	# Calendar
	get_day_slots,
	get_day_agenda,
	# Validation
	validate_appointment,
	# Booking
	create_appointment,
	reschedule_appointment,
	# Status
	set_appointment_status,
	complete_appointment,
	# Reports
	get_report_summary,
)

__all__ = [
	"get_day_slots",
	"get_day_agenda",
	"validate_appointment",
	"create_appointment",
	"reschedule_appointment",
	"set_appointment_status",
	"complete_appointment",
	"get_report_summary",
]
