"""
Reports Service

Aggregates appointments of a date range for the reports and
receipts pages. Amounts use the service list price (preco).
"""

from typing import Any, Dict, Iterable, List, Optional

from agenda_empresarial.agenda_empresarial.models import (
	STATUS_CANCELED,
	STATUS_CONFIRMED,
	STATUS_DONE,
	STATUS_OPEN,
	Appointment,
	Service,
)
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import to_minutes
from agenda_empresarial.agenda_empresarial.utils.dates import to_iso_date

STATUSES = (STATUS_DONE, STATUS_CONFIRMED, STATUS_OPEN, STATUS_CANCELED)


def filter_appointments(
	appointments: Iterable[Appointment],
	date_start: str,
	date_end: str,
	service_id: Optional[str] = None,
	staff_id: Optional[str] = None
) -> List[Appointment]:
	"""
	Appointments entre date_start y date_end (ambos inclusive).

	Ordenados por fecha y hora de inicio.
	"""
	date_start = to_iso_date(date_start)
	date_end = to_iso_date(date_end)

	result = [
		a for a in appointments
		if date_start <= a.date_iso <= date_end
		and (not service_id or a.service_id == service_id)
		and (not staff_id or a.staff_id == staff_id)
	]
	return sorted(result, key=lambda a: (a.date_iso, to_minutes(a.start)))


def get_summary(
	appointments: Iterable[Appointment],
	services: Iterable[Service],
	date_start: str,
	date_end: str,
	service_id: Optional[str] = None,
	staff_id: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Cantidad y monto por status en el rango.

	Returns:
		dict: {
			"date_start": "2025-06-01",
			"date_end": "2025-06-30",
			"by_status": {
				"done": {"quantity": 3, "amount": 180.0},
				"confirmed": {...}, "open": {...}, "canceled": {...}
			},
			"total": {"quantity": 5, "amount": 275.0}
		}
	"""
	prices = {s.id: s.preco for s in services}
	filtered = filter_appointments(appointments, date_start, date_end, service_id, staff_id)

	by_status = {status: {"quantity": 0, "amount": 0.0} for status in STATUSES}
	for appointment in filtered:
		bucket = by_status[appointment.status]
		bucket["quantity"] += 1
		bucket["amount"] += prices.get(appointment.service_id, 0)

	return {
		"date_start": to_iso_date(date_start),
		"date_end": to_iso_date(date_end),
		"by_status": by_status,
		"total": {
			"quantity": len(filtered),
			"amount": sum(b["amount"] for b in by_status.values()),
		},
	}


def get_receipts_overview(
	appointments: Iterable[Appointment],
	date_start: str,
	date_end: str,
	service_id: Optional[str] = None,
	staff_id: Optional[str] = None
) -> Dict[str, List[Appointment]]:
	"""
	Divide el rango (sin cancelados) en pendientes y concluidos.

	Returns:
		dict: {"pending": [open/confirmed], "done": [done]}
	"""
	filtered = filter_appointments(appointments, date_start, date_end, service_id, staff_id)
	return {
		"pending": [a for a in filtered if a.status in (STATUS_OPEN, STATUS_CONFIRMED)],
		"done": [a for a in filtered if a.status == STATUS_DONE],
	}
