"""
Time Arithmetic

Pure helpers for wall-clock times of a single day:
- HH:mm <-> minute-of-day conversion
- Adding minutes
- Half-open interval overlap

All comparisons are done on minute-of-day integers, never on strings.
"""

import re
from datetime import datetime, time, timedelta
from typing import Union

from agenda_empresarial.agenda_empresarial.exceptions import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

TimeValue = Union[str, int, time, timedelta]

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{1,2})$")


def parse_time(hhmm: str) -> int:
	"""
	Convierte "HH:mm" a minutos desde medianoche.

	Args:
		hhmm: string con dos enteros separados por ":"

	Returns:
		int: minuto del día (0-1439)

	Raises:
		InvalidTimeFormat: si no es HH:mm o está fuera de rango
	"""
	if not isinstance(hhmm, str):
		raise InvalidTimeFormat(f"Hora inválida: {hhmm!r}")

	match = _HHMM_RE.match(hhmm.strip())
	if not match:
		raise InvalidTimeFormat(f"Hora inválida: {hhmm!r}. Use HH:mm")

	hours, minutes = int(match.group(1)), int(match.group(2))
	if hours > 23 or minutes > 59:
		raise InvalidTimeFormat(f"Hora fuera de rango: {hhmm!r}")

	return hours * 60 + minutes


def format_time(minute_of_day: int) -> str:
	"""
	Convierte minutos desde medianoche a "HH:mm" (zero-padded).

	Raises:
		InvalidTimeFormat: si el valor no está en 0-1439
	"""
	if isinstance(minute_of_day, bool) or not isinstance(minute_of_day, int):
		raise InvalidTimeFormat(f"Minuto del día inválido: {minute_of_day!r}")
	if not 0 <= minute_of_day < MINUTES_PER_DAY:
		raise InvalidTimeFormat(f"Minuto del día fuera de rango: {minute_of_day}")

	return f"{minute_of_day // 60:02d}:{minute_of_day % 60:02d}"


def to_minutes(value: TimeValue) -> int:
	"""
	Convierte diferentes formatos de tiempo a minuto del día.

	Args:
		value: "HH:mm", int (minuto del día), time, o timedelta (desde medianoche)

	Returns:
		int: minuto del día
	"""
	if isinstance(value, bool):
		raise InvalidTimeFormat(f"Cannot convert {type(value)} to time")
	elif isinstance(value, int):
		if not 0 <= value < MINUTES_PER_DAY:
			raise InvalidTimeFormat(f"Minuto del día fuera de rango: {value}")
		return value
	elif isinstance(value, str):
		return parse_time(value)
	elif isinstance(value, time):
		return value.hour * 60 + value.minute
	elif isinstance(value, timedelta):
		# timedelta representa tiempo desde medianoche
		as_time = (datetime.min + value).time()
		return as_time.hour * 60 + as_time.minute
	else:
		raise InvalidTimeFormat(f"Cannot convert {type(value)} to time")


def add_minutes(hhmm: TimeValue, minutes: int) -> str:
	"""
	Suma minutos a una hora y devuelve "HH:mm".

	Pasar de 23:59 da la vuelta al día; quien necesite saber si se salió
	del horario debe usar end_minutes().
	"""
	return format_time((to_minutes(hhmm) + minutes) % MINUTES_PER_DAY)


def end_minutes(start: TimeValue, duration_minutes: int) -> int:
	"""Fin de un intervalo en minutos, sin dar la vuelta al día."""
	return to_minutes(start) + duration_minutes


def overlaps(a_start: TimeValue, a_end: TimeValue, b_start: TimeValue, b_end: TimeValue) -> bool:
	"""
	Intersección de intervalos semiabiertos [a_start, a_end) y [b_start, b_end).

	Intervalos vacíos o invertidos no fallan; simplemente no tienen
	significado útil y los valida quien llama.
	"""
	return _as_minutes(a_start) < _as_minutes(b_end) and _as_minutes(b_start) < _as_minutes(a_end)


def _as_minutes(value: TimeValue) -> int:
	# Permite fines sin vuelta (ej. 1470) calculados con end_minutes()
	if isinstance(value, int) and not isinstance(value, bool):
		return value
	return to_minutes(value)
