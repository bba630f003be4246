"""
Date Helpers

Local wall-clock date handling for the agenda:
- ISO date parsing (YYYY-MM-DD)
- Weekday with Sunday = 0
- "now" in the business timezone, returned naive
"""

from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser

from agenda_empresarial.agenda_empresarial.exceptions import DataIntegrityError
from agenda_empresarial.agenda_empresarial.utils.logger import log_error

DEFAULT_TIMEZONE = "Europe/Lisbon"


def getdate(value: Union[date, datetime, str]) -> date:
	"""
	Convierte un valor a datetime.date.

	Args:
		value: date, datetime o string ISO (YYYY-MM-DD)

	Returns:
		datetime.date

	Raises:
		DataIntegrityError: si el string no es una fecha ISO válida
	"""
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value

	try:
		return parser.isoparse(str(value).strip()).date()
	except (ValueError, OverflowError):
		raise DataIntegrityError(f"Fecha inválida: {value!r}. Use YYYY-MM-DD")


def to_iso_date(value: Union[date, datetime, str]) -> str:
	"""Formatea una fecha como YYYY-MM-DD."""
	return getdate(value).strftime("%Y-%m-%d")


def get_weekday(value: Union[date, datetime, str]) -> int:
	"""
	Día de la semana con domingo = 0 ... sábado = 6.

	Python usa lunes = 0, por eso se rota un lugar.
	"""
	return (getdate(value).weekday() + 1) % 7


def now_datetime(tz_name: Optional[str] = None) -> datetime:
	"""
	Fecha/hora actual en el timezone del negocio, sin tzinfo.

	Args:
		tz_name: nombre IANA (default Europe/Lisbon)

	Returns:
		datetime naive en hora local del negocio
	"""
	try:
		tz = pytz.timezone(tz_name or DEFAULT_TIMEZONE)
	except pytz.UnknownTimeZoneError:
		tz = pytz.timezone(DEFAULT_TIMEZONE)
		log_error(f"Invalid timezone '{tz_name}', usando {DEFAULT_TIMEZONE}", "Now Datetime")

	return datetime.now(tz).replace(tzinfo=None)
