"""
Overlap Detection Service

Detects scheduling conflicts (overlaps) between appointments,
considering:
- Same date only
- Appointment status (canceled never blocks)
- The appointment being rescheduled (excluded)

There is a single calendar for the business: appointments of
different staff at the same time still conflict.
"""

from typing import Any, Dict, Iterable, Optional

from agenda_empresarial.agenda_empresarial.models import Appointment
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import TimeValue, overlaps
from agenda_empresarial.agenda_empresarial.utils.dates import to_iso_date


def check_overlap(
	appointments: Iterable[Appointment],
	date_iso: str,
	start: TimeValue,
	end: TimeValue,
	exclude_appointment: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Detecta overlaps con appointments existentes.

	Args:
		appointments: todos los agendamientos del store
		date_iso: fecha del candidato
		start: inicio del candidato
		end: fin del candidato
		exclude_appointment: id del Appointment a excluir (para reagendar)

	Returns:
		dict: {
			"has_overlap": bool,
			"overlapping_appointments": [list of appointment ids]
		}

	Algoritmo:
		1. Filtrar appointments con:
			- date_iso = X
			- status != canceled
			- id != exclude_appointment
		2. Quedarse con los que cumplen start < a.end AND a.start < end
	"""
	date_iso = to_iso_date(date_iso)

	overlapping = [
		a.id
		for a in appointments
		if a.date_iso == date_iso
		and a.is_active
		and a.id != exclude_appointment
		and overlaps(start, end, a.start, a.end)
	]

	return {
		"has_overlap": bool(overlapping),
		"overlapping_appointments": overlapping,
	}
