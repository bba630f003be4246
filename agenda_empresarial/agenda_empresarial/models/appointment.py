# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Appointment Model

Un agendamiento en el calendario único del negocio.

Ciclo de vida:
1. Se crea en "open" al reservar
2. El usuario confirma, cancela o (pasado el horario) concluye
3. Reagendar reescribe fecha/horario y vuelve a "open"

Nunca se borra: cancelar es un cambio de status.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from agenda_empresarial.agenda_empresarial.exceptions import DataIntegrityError
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import format_time, to_minutes
from agenda_empresarial.agenda_empresarial.utils.dates import getdate

STATUS_OPEN = "open"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELED = "canceled"
STATUS_DONE = "done"

AppointmentStatus = Literal["open", "confirmed", "canceled", "done"]


class Appointment(BaseModel):
	"""
	Appointment con intervalo semiabierto [start, end) en date_iso.

	Validations:
	- start/end en formato HH:mm
	- start < end
	- date_iso en formato YYYY-MM-DD
	"""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	id: str = Field(..., min_length=1)
	date_iso: str = Field(..., alias="dateISO")
	start: str
	end: str
	service_id: str = Field(..., alias="serviceId")
	client_id: Optional[str] = Field(None, alias="clientId")
	staff_id: Optional[str] = Field(None, alias="staffId")
	status: AppointmentStatus = STATUS_OPEN
	observacoes: Optional[str] = None
	created_at: Optional[datetime] = Field(None, alias="createdAt")

	# Campos del recibo (se completan al concluir)
	payment_method: Optional[str] = Field(None, alias="paymentMethod")
	discount_value: Optional[float] = Field(None, ge=0, alias="discountValue")
	discount_reason: Optional[str] = Field(None, alias="discountReason")
	receipt_note: Optional[str] = Field(None, alias="receiptNote")
	final_price: Optional[float] = Field(None, ge=0, alias="finalPrice")
	paid_at: Optional[datetime] = Field(None, alias="paidAt")

	@field_validator("date_iso")
	@classmethod
	def _validate_date_iso(cls, value: str) -> str:
		try:
			return getdate(value).strftime("%Y-%m-%d")
		except DataIntegrityError as e:
			raise ValueError(str(e))

	@field_validator("start", "end", mode="before")
	@classmethod
	def _normalize_times(cls, value: Any) -> str:
		return format_time(to_minutes(value))

	@model_validator(mode="after")
	def _validate_datetime_consistency(self) -> "Appointment":
		"""Valida que start < end."""
		if to_minutes(self.start) >= to_minutes(self.end):
			raise ValueError(f"Start ({self.start}) debe ser menor que End ({self.end})")
		return self

	@property
	def is_active(self) -> bool:
		"""Los cancelados no ocupan horario."""
		return self.status != STATUS_CANCELED

	def as_dict(self) -> Dict[str, Any]:
		"""Representación persistible (camelCase, JSON-safe)."""
		return self.model_dump(mode="json", by_alias=True, exclude_none=True)
