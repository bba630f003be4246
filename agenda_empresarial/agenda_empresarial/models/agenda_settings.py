# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Agenda Settings

Business hours and closure configuration:
- Work hours and slot size
- Blocked weekdays (hard closure)
- Daily and per-weekday closures (soft closure)
- Calendar markers (holiday hard-closes, special is cosmetic)

Legacy settings stored `holidays` / `specialDates` separately;
normalize_settings() unifies them into `markers` once at load time.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from agenda_empresarial.agenda_empresarial.exceptions import DataIntegrityError
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import format_time, to_minutes
from agenda_empresarial.agenda_empresarial.utils.dates import getdate

DEFAULT_HOLIDAY_COLOR = "#ef4444"
DEFAULT_SPECIAL_COLOR = "#f59e0b"


def _normalize_hhmm(value: Any) -> str:
	return format_time(to_minutes(value))


class DailyClosure(BaseModel):
	"""Intervalo cerrado todos los días (ej. almuerzo)."""

	model_config = ConfigDict(populate_by_name=True)

	start: str
	end: str

	@field_validator("start", "end", mode="before")
	@classmethod
	def _normalize_times(cls, value: Any) -> str:
		return _normalize_hhmm(value)

	@model_validator(mode="after")
	def _validate_times(self) -> "DailyClosure":
		"""Valida que start < end."""
		if to_minutes(self.start) >= to_minutes(self.end):
			raise ValueError(f"Start ({self.start}) debe ser menor que End ({self.end})")
		return self


class WeekdayClosure(DailyClosure):
	"""Intervalo cerrado solo en un día de la semana (0=domingo ... 6=sábado)."""

	weekday: int = Field(..., ge=0, le=6)


class Marker(BaseModel):
	"""
	Marcador de calendario.

	- holiday: cierra el día entero
	- special: solo resalta el día
	annual=True compara solo mes y día.
	"""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	kind: Literal["holiday", "special"]
	date_iso: str = Field("", alias="dateISO")
	annual: bool = False
	description: Optional[str] = None
	color: Optional[str] = None

	@field_validator("date_iso")
	@classmethod
	def _validate_date_iso(cls, value: str) -> str:
		# Una fila recién agregada puede no tener fecha todavía
		if not value:
			return ""
		try:
			return getdate(value).strftime("%Y-%m-%d")
		except DataIntegrityError as e:
			raise ValueError(str(e))

	def matches(self, date_iso: str) -> bool:
		"""True si el marcador cae en date_iso (YYYY-MM-DD)."""
		if not self.date_iso:
			return False
		if self.annual:
			return date_iso[5:10] == self.date_iso[5:10]
		return date_iso == self.date_iso


class AgendaSettings(BaseModel):
	"""
	Ajustes de la agenda.

	Defaults iguales a los del negocio recién instalado:
	09:00-18:00, slots de 30 min, domingo cerrado.
	"""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	work_start: str = Field("09:00", alias="workStart")
	work_end: str = Field("18:00", alias="workEnd")
	slot_minutes: int = Field(30, gt=0, alias="slotMinutes")
	blocked_weekdays: List[int] = Field(default_factory=lambda: [0], alias="blockedWeekdays")
	daily_closures: List[DailyClosure] = Field(default_factory=list, alias="dailyClosures")
	weekday_closures: List[WeekdayClosure] = Field(default_factory=list, alias="weekdayClosures")
	markers: List[Marker] = Field(default_factory=list)
	timezone: str = "Europe/Lisbon"

	@field_validator("work_start", "work_end", mode="before")
	@classmethod
	def _normalize_times(cls, value: Any) -> str:
		return _normalize_hhmm(value)

	@field_validator("blocked_weekdays")
	@classmethod
	def _validate_weekdays(cls, value: List[int]) -> List[int]:
		for weekday in value:
			if not 0 <= weekday <= 6:
				raise ValueError(f"Weekday fuera de rango: {weekday}")
		return sorted(set(value))

	@property
	def holiday_markers(self) -> List[Marker]:
		return [m for m in self.markers if m.kind == "holiday"]


def _legacy_marker(record: Dict[str, Any], kind: str) -> Dict[str, Any]:
	"""Convierte un registro de holidays/specialDates al formato Marker."""
	marker = dict(record)
	marker["kind"] = marker.get("kind") or kind
	marker.setdefault("dateISO", marker.pop("date_iso", ""))
	if not marker.get("description"):
		marker["description"] = marker.pop("label", None) or ("Feriado" if kind == "holiday" else "Especial")
	if not marker.get("color"):
		marker["color"] = DEFAULT_HOLIDAY_COLOR if kind == "holiday" else DEFAULT_SPECIAL_COLOR
	marker["annual"] = bool(marker.get("annual"))
	return marker


def normalize_settings(raw: Union[AgendaSettings, Dict[str, Any], None]) -> AgendaSettings:
	"""
	Migra ajustes guardados a la forma canónica.

	Args:
		raw: dict tal como fue persistido (camelCase o snake_case)

	Returns:
		AgendaSettings con un único markers[]

	Raises:
		DataIntegrityError: si los datos guardados son inválidos
	"""
	if isinstance(raw, AgendaSettings):
		return raw

	data = dict(raw or {})
	markers = data.get("markers") or []
	holidays = data.pop("holidays", None) or []
	specials = data.pop("specialDates", None) or data.pop("special_dates", None) or []

	# markers gana si tiene algo; si no, se usa el legado
	if not markers:
		markers = (
			[_legacy_marker(h, "holiday") for h in holidays]
			+ [_legacy_marker(s, "special") for s in specials]
		)
	data["markers"] = markers

	try:
		return AgendaSettings.model_validate(data)
	except PydanticValidationError as e:
		raise DataIntegrityError(f"Ajustes inválidos: {e}") from e
