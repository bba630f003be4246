"""
Booking Service

Validates and commits new bookings and reschedules.

Cada operación termina en una de tres decisiones:
- accepted: el appointment fue guardado
- rejected: regla dura violada, no se guardó nada
- needs_confirmation: solo reagendar; repetir con override=True

Orden de validación (la primera regla que falla gana):
1. Selección requerida (servicio, y cliente en reservas nuevas)
2. Horario comercial: start >= workStart y start + duración <= workEnd
3. Día cerrado (día de la semana bloqueado o feriado)
4. Intervalo de cierre: rechazo en reservas nuevas, confirmación al reagendar
5. Conflicto con otro appointment activo
"""

import random
import string
import time
from typing import Any, Dict, Optional

from agenda_empresarial import hooks
from agenda_empresarial.agenda_empresarial.events import AgendaEvent, EventChannel
from agenda_empresarial.agenda_empresarial.exceptions import DoesNotExistError
from agenda_empresarial.agenda_empresarial.models import STATUS_OPEN, Appointment
from agenda_empresarial.agenda_empresarial.scheduling.closures import resolve_closures
from agenda_empresarial.agenda_empresarial.scheduling.overlap import check_overlap
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import end_minutes, format_time, to_minutes
from agenda_empresarial.agenda_empresarial.store import AgendaStore
from agenda_empresarial.agenda_empresarial.utils.dates import now_datetime, to_iso_date
from agenda_empresarial.agenda_empresarial.utils.logger import logger

OUTCOME_ACCEPTED = "accepted"
OUTCOME_REJECTED = "rejected"
OUTCOME_NEEDS_CONFIRMATION = "needs_confirmation"

REASON_MISSING_SELECTION = "missing selection"
REASON_OUTSIDE_HOURS = "outside business hours"
REASON_DAY_CLOSED = "day closed"
REASON_IN_CLOSURE = "falls in closure interval"
REASON_CONFLICT = "time conflict"
REASON_CLOSURE_CONFIRM = "closure interval"

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
	digits = []
	while value:
		value, rem = divmod(value, 36)
		digits.append(_BASE36[rem])
	return "".join(reversed(digits)) or "0"


def new_id(prefix: Optional[str] = None) -> str:
	"""
	Genera un id: prefijo + 7 caracteres aleatorios + timestamp, en base 36.

	Ej: "apt_k3j9x0almq8z1c4"
	"""
	prefix = prefix or hooks.appointment_id_prefix
	random_part = "".join(random.choices(_BASE36, k=7))
	return f"{prefix}_{random_part}{_to_base36(int(time.time() * 1000))}"


def _decision(
	outcome: str,
	reason: Optional[str] = None,
	message: Optional[str] = None,
	appointment: Optional[Appointment] = None,
	**details: Any
) -> Dict[str, Any]:
	return {
		"outcome": outcome,
		"reason": reason,
		"message": message,
		"appointment": appointment.as_dict() if appointment else None,
		"details": details,
	}


def validate_booking(
	store: AgendaStore,
	date_iso: Optional[str],
	start: Optional[str],
	service_id: Optional[str],
	client_id: Optional[str] = None,
	exclude_appointment: Optional[str] = None,
	override: bool = False,
	is_reschedule: bool = False
) -> Dict[str, Any]:
	"""
	Evalúa un candidato sin modificar el store.

	Args:
		store: store de la agenda
		date_iso: fecha YYYY-MM-DD
		start: hora de inicio HH:mm
		service_id: servicio (define la duración)
		client_id: cliente, requerido solo en reservas nuevas
		exclude_appointment: id propio al reagendar
		override: el usuario ya confirmó reagendar sobre un cierre
		is_reschedule: cambia la regla de cierre de rechazo a confirmación

	Returns:
		dict: decisión con "outcome", "reason", "message", "details".
		Si outcome es accepted, details trae date_iso/start/end normalizados.

	Raises:
		DoesNotExistError: si service_id no existe
		DataIntegrityError: si fecha u hora no tienen formato válido
	"""
	# 1. Selección requerida
	if not date_iso or not start or not service_id or (not is_reschedule and not client_id):
		return _decision(
			OUTCOME_REJECTED,
			REASON_MISSING_SELECTION,
			"Seleccione servicio y cliente" if not is_reschedule else "Seleccione un servicio",
		)

	service = store.get_service(service_id)
	if not service:
		raise DoesNotExistError(f"Servicio inexistente: {service_id}")

	settings = store.get_settings()
	date_iso = to_iso_date(date_iso)
	start_min = to_minutes(start)
	end_min = end_minutes(start_min, service.duracao_min)

	# 2. Horario comercial (fin sin vuelta al día)
	if start_min < to_minutes(settings.work_start) or end_min > to_minutes(settings.work_end):
		return _decision(
			OUTCOME_REJECTED,
			REASON_OUTSIDE_HOURS,
			f"Fuera del horario de atención ({settings.work_start} - {settings.work_end})",
		)

	closure = resolve_closures(settings, date_iso, start_min, end_min)

	# 3. Día cerrado
	if closure["hard_closed"]:
		message = "Día feriado, agenda cerrada" if closure["is_holiday"] else "Día de la semana cerrado"
		return _decision(
			OUTCOME_REJECTED,
			REASON_DAY_CLOSED,
			message,
			is_holiday=closure["is_holiday"],
			is_weekday_closed=closure["is_weekday_closed"],
		)

	# 4. Intervalo de cierre
	if closure["closure_hit"]:
		ranges = ", ".join(f"{c['start']}-{c['end']}" for c in closure["closures"])
		if not is_reschedule:
			return _decision(
				OUTCOME_REJECTED,
				REASON_IN_CLOSURE,
				f"El horario cae en un intervalo de cierre ({ranges})",
				closures=closure["closures"],
			)
		if not override:
			return _decision(
				OUTCOME_NEEDS_CONFIRMATION,
				REASON_CLOSURE_CONFIRM,
				f"El horario cae en un intervalo de cierre ({ranges}). ¿Confirmar de todas formas?",
				closures=closure["closures"],
			)

	# 5. Conflicto
	overlap = check_overlap(
		store.get_appointments(),
		date_iso,
		start_min,
		end_min,
		exclude_appointment=exclude_appointment
	)
	if overlap["has_overlap"]:
		return _decision(
			OUTCOME_REJECTED,
			REASON_CONFLICT,
			f"Conflicto con otro agendamiento: {', '.join(overlap['overlapping_appointments'])}",
			overlapping_appointments=overlap["overlapping_appointments"],
		)

	return _decision(
		OUTCOME_ACCEPTED,
		date_iso=date_iso,
		start=format_time(start_min),
		end=format_time(end_min),
	)


def book_appointment(
	store: AgendaStore,
	date_iso: Optional[str],
	start: Optional[str],
	service_id: Optional[str],
	client_id: Optional[str],
	staff_id: Optional[str] = None,
	observacoes: Optional[str] = None,
	channel: Optional[EventChannel] = None
) -> Dict[str, Any]:
	"""
	Crea un appointment nuevo si pasa todas las reglas.

	Los cierres parciales rechazan la reserva (no hay confirmación).

	Returns:
		dict: decisión; en accepted, "appointment" trae el registro guardado
	"""
	with store.transaction():
		decision = validate_booking(store, date_iso, start, service_id, client_id=client_id)
		if decision["outcome"] != OUTCOME_ACCEPTED:
			logger("booking").info(f"Reserva rechazada ({decision['reason']}) {date_iso} {start}")
			return decision

		slot = decision["details"]
		appointment = Appointment(
			id=new_id(),
			date_iso=slot["date_iso"],
			start=slot["start"],
			end=slot["end"],
			service_id=service_id,
			client_id=client_id,
			staff_id=staff_id,
			status=STATUS_OPEN,
			observacoes=observacoes,
			created_at=now_datetime(store.get_settings().timezone),
		)
		store.commit_new_appointment(appointment)

	logger("booking").info(f"Appointment {appointment.id} creado {appointment.date_iso} {appointment.start}")
	decision = _decision(OUTCOME_ACCEPTED, appointment=appointment)

	if channel:
		channel.publish(AgendaEvent.APPOINTMENT_CREATED, {"appointment": decision["appointment"]})

	return decision


def reschedule_appointment(
	store: AgendaStore,
	appointment_id: str,
	date_iso: Optional[str],
	start: Optional[str],
	service_id: Optional[str],
	override: bool = False,
	channel: Optional[EventChannel] = None
) -> Dict[str, Any]:
	"""
	Mueve un appointment existente.

	Un cierre parcial pide confirmación: la primera llamada devuelve
	needs_confirmation y solo con override=True se guarda. El status
	vuelve siempre a open.

	Raises:
		DoesNotExistError: si appointment_id o service_id no existen
	"""
	with store.transaction():
		current = _find_appointment(store, appointment_id)
		if not current:
			raise DoesNotExistError(f"Agendamiento inexistente: {appointment_id}")

		decision = validate_booking(
			store,
			date_iso,
			start,
			service_id,
			exclude_appointment=appointment_id,
			override=override,
			is_reschedule=True
		)
		if decision["outcome"] != OUTCOME_ACCEPTED:
			logger("booking").info(f"Reagendamiento de {appointment_id} no aplicado ({decision['reason']})")
			return decision

		slot = decision["details"]
		store.commit_appointment_patch(appointment_id, {
			"date_iso": slot["date_iso"],
			"start": slot["start"],
			"end": slot["end"],
			"service_id": service_id,
			"status": STATUS_OPEN,
		})
		updated = _find_appointment(store, appointment_id)

	logger("booking").info(
		f"Appointment {appointment_id} reagendado a {slot['date_iso']} {slot['start']}"
		+ (" (sobre cierre, confirmado)" if override else "")
	)
	decision = _decision(OUTCOME_ACCEPTED, appointment=updated)

	if channel:
		channel.publish(AgendaEvent.APPOINTMENT_RESCHEDULED, {
			"appointment": decision["appointment"],
			"previous": current.as_dict(),
		})

	return decision


def _find_appointment(store: AgendaStore, appointment_id: str) -> Optional[Appointment]:
	for appointment in store.get_appointments():
		if appointment.id == appointment_id:
			return appointment
	return None
