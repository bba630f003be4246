"""
Closure Resolution Service

Decides how the agenda is closed on a given date:
- Hard closures: blocked weekday or holiday marker (whole day unbookable)
- Soft closures: daily and per-weekday intervals (booking needs confirmation)

Works on normalized settings only; legacy holidays/specialDates were
already folded into markers by normalize_settings().
"""

from typing import Any, Dict, List, Union

from agenda_empresarial.agenda_empresarial.models import AgendaSettings, DailyClosure, normalize_settings
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import TimeValue, overlaps
from agenda_empresarial.agenda_empresarial.utils.dates import get_weekday, to_iso_date

SettingsLike = Union[AgendaSettings, Dict[str, Any]]


def is_holiday(settings: SettingsLike, date_iso: str) -> bool:
	"""
	True si algún marcador holiday cae en la fecha.

	Los marcadores special no cierran el día.
	"""
	settings = normalize_settings(settings)
	date_iso = to_iso_date(date_iso)
	return any(marker.matches(date_iso) for marker in settings.holiday_markers)


def get_day_closure(settings: SettingsLike, date_iso: str) -> Dict[str, Any]:
	"""
	Cierre de día completo.

	Args:
		settings: ajustes de la agenda
		date_iso: fecha YYYY-MM-DD

	Returns:
		dict: {
			"weekday": 0,
			"is_weekday_closed": True,
			"is_holiday": False,
			"hard_closed": True
		}
	"""
	settings = normalize_settings(settings)
	weekday = get_weekday(date_iso)

	is_weekday_closed = weekday in settings.blocked_weekdays
	holiday = is_holiday(settings, date_iso)

	# Ambos motivos pueden darse a la vez; se reportan los dos
	return {
		"weekday": weekday,
		"is_weekday_closed": is_weekday_closed,
		"is_holiday": holiday,
		"hard_closed": is_weekday_closed or holiday,
	}


def get_soft_closures(settings: SettingsLike, date_iso: str) -> List[DailyClosure]:
	"""
	Intervalos de cierre parcial que aplican a la fecha.

	Returns:
		list: dailyClosures + weekdayClosures del día de la semana
	"""
	settings = normalize_settings(settings)
	weekday = get_weekday(date_iso)

	closures: List[DailyClosure] = list(settings.daily_closures)
	closures.extend(c for c in settings.weekday_closures if c.weekday == weekday)
	return closures


def resolve_closures(
	settings: SettingsLike,
	date_iso: str,
	start: TimeValue,
	end: TimeValue
) -> Dict[str, Any]:
	"""
	Evalúa un intervalo candidato contra todas las reglas de cierre.

	Args:
		settings: ajustes de la agenda
		date_iso: fecha YYYY-MM-DD
		start: inicio del candidato (HH:mm o minutos)
		end: fin del candidato, puede pasar de 23:59 si viene de end_minutes()

	Returns:
		dict: {
			"hard_closed": bool,
			"is_holiday": bool,
			"is_weekday_closed": bool,
			"closure_hit": bool,
			"closures": [{"start": "12:00", "end": "14:00"}, ...]
		}
	"""
	settings = normalize_settings(settings)
	day = get_day_closure(settings, date_iso)

	hits = [
		{"start": c.start, "end": c.end}
		for c in get_soft_closures(settings, date_iso)
		if overlaps(start, end, c.start, c.end)
	]

	return {
		"hard_closed": day["hard_closed"],
		"is_holiday": day["is_holiday"],
		"is_weekday_closed": day["is_weekday_closed"],
		"closure_hit": bool(hits),
		"closures": hits,
	}
