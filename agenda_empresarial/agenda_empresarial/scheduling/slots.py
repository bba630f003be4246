"""
Slot Generation Service

Generates the discrete start times shown on the day board, considering:
- Business hours and slot size
- Hard-closed days (no slots at all)
- Existing appointments (taken)
- Soft closures (selectable, confirmation handled at booking time)
"""

from typing import Any, Dict, List, Sequence, Union

from agenda_empresarial.agenda_empresarial.exceptions import DataIntegrityError
from agenda_empresarial.agenda_empresarial.models import Appointment, AgendaSettings, normalize_settings
from agenda_empresarial.agenda_empresarial.scheduling.closures import get_day_closure, get_soft_closures
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import TimeValue, format_time, to_minutes
from agenda_empresarial.agenda_empresarial.utils.dates import to_iso_date

NOON = 12 * 60

SLOT_AVAILABLE = "available"
SLOT_TAKEN = "taken"
SLOT_CLOSURE = "closure"


def make_slots(work_start: TimeValue, work_end: TimeValue, step_minutes: int) -> List[str]:
	"""
	Genera los horarios de inicio de un día.

	Args:
		work_start: apertura (HH:mm)
		work_end: cierre (HH:mm), nunca se incluye
		step_minutes: separación entre slots

	Returns:
		list[str]: ["09:00", "09:30", ...] ordenada

	Raises:
		DataIntegrityError: si step_minutes no es positivo
	"""
	if isinstance(step_minutes, bool) or not isinstance(step_minutes, int) or step_minutes <= 0:
		raise DataIntegrityError(f"slotMinutes inválido: {step_minutes!r}")

	start = to_minutes(work_start)
	end = to_minutes(work_end)

	# range() excluye end, así un slot que empieza justo al cierre no aparece
	return [format_time(minute) for minute in range(start, end, step_minutes)]


def generate_day_slots(
	settings: Union[AgendaSettings, Dict[str, Any]],
	appointments: Sequence[Appointment],
	date_iso: str
) -> Dict[str, Any]:
	"""
	Arma el tablero de slots de un día.

	Args:
		settings: ajustes de la agenda
		appointments: todos los agendamientos (se filtran por fecha)
		date_iso: fecha YYYY-MM-DD

	Returns:
		dict: {
			"date": "2025-06-10",
			"weekday": 2,
			"day_closed": False,
			"is_holiday": False,
			"is_weekday_closed": False,
			"morning": [{"start": "09:00", "status": "available", "is_available": True}, ...],
			"afternoon": [...]
		}
	"""
	settings = normalize_settings(settings)
	date_iso = to_iso_date(date_iso)
	day = get_day_closure(settings, date_iso)

	result = {
		"date": date_iso,
		"weekday": day["weekday"],
		"day_closed": day["hard_closed"],
		"is_holiday": day["is_holiday"],
		"is_weekday_closed": day["is_weekday_closed"],
		"morning": [],
		"afternoon": [],
	}

	if day["hard_closed"]:
		return result

	busy = [
		(to_minutes(a.start), to_minutes(a.end))
		for a in appointments
		if a.date_iso == date_iso and a.is_active
	]
	closures = [
		(to_minutes(c.start), to_minutes(c.end))
		for c in get_soft_closures(settings, date_iso)
	]

	for start in make_slots(settings.work_start, settings.work_end, settings.slot_minutes):
		minute = to_minutes(start)

		if any(b_start <= minute < b_end for b_start, b_end in busy):
			status = SLOT_TAKEN
		elif any(c_start <= minute < c_end for c_start, c_end in closures):
			status = SLOT_CLOSURE
		else:
			status = SLOT_AVAILABLE

		slot = {
			"start": start,
			"status": status,
			"is_available": status != SLOT_TAKEN,
		}

		if minute < NOON:
			result["morning"].append(slot)
		else:
			result["afternoon"].append(slot)

	return result
