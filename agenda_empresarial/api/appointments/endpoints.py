"""
Appointment API Endpoints

Functions the agenda UI calls with plain values and a store handle.
Every endpoint:
- Validates its inputs before touching the engine
- Returns user-correctable problems as {"success": False, "message": ...}
- Logs and re-raises missing records and malformed stored data
"""

from datetime import datetime
from typing import Any, Dict, Optional

from agenda_empresarial.agenda_empresarial.events import EventChannel
from agenda_empresarial.agenda_empresarial.exceptions import (
	DataIntegrityError,
	DoesNotExistError,
	ValidationError,
)
from agenda_empresarial.agenda_empresarial.scheduling import booking, reports, status
from agenda_empresarial.agenda_empresarial.scheduling.closures import get_day_closure
from agenda_empresarial.agenda_empresarial.scheduling.slots import generate_day_slots
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import to_minutes
from agenda_empresarial.agenda_empresarial.store import InMemoryStore
from agenda_empresarial.agenda_empresarial.utils.dates import now_datetime
from agenda_empresarial.agenda_empresarial.utils.logger import log_error

from agenda_empresarial.api.shared import (
	validate_date_string,
	validate_time_string,
	validate_docname,
)


def _failure(message: str, **extra: Any) -> Dict[str, Any]:
	return {"success": False, "message": message, **extra}


def _from_decision(decision: Dict[str, Any]) -> Dict[str, Any]:
	return {
		"success": decision["outcome"] == booking.OUTCOME_ACCEPTED,
		"needs_confirmation": decision["outcome"] == booking.OUTCOME_NEEDS_CONFIRMATION,
		"outcome": decision["outcome"],
		"reason": decision["reason"],
		"message": decision["message"],
		"appointment": decision["appointment"],
	}


def get_day_slots(store: InMemoryStore, date: str) -> Dict[str, Any]:
	"""
	Obtiene el tablero de slots de un día.

	Args:
		store: store de la agenda
		date: fecha (YYYY-MM-DD)

	Returns:
		dict: ver generate_day_slots(); con "success": False si la fecha es inválida

	Example:
		```python
		board = get_day_slots(store, "2025-06-10")
		for slot in board["morning"]:
			print(slot["start"], slot["status"])
		```
	"""
	try:
		date = validate_date_string(date)
	except ValidationError as e:
		return _failure(str(e))

	try:
		return {"success": True, **generate_day_slots(store.get_settings(), store.get_appointments(), date)}
	except DataIntegrityError as e:
		log_error(f"Error generating slots for {date}: {str(e)}", "Get Day Slots")
		raise


def get_day_agenda(store: InMemoryStore, date: str, now: Optional[datetime] = None) -> Dict[str, Any]:
	"""
	Lista los agendamientos de un día con las acciones disponibles.

	Args:
		store: store de la agenda
		date: fecha (YYYY-MM-DD)
		now: hora local actual (default: ahora en el timezone del negocio)

	Returns:
		dict: {
			"success": True,
			"date": "2025-06-10",
			"day_closed": False,
			"is_holiday": False,
			"appointments": [
				{..., "service_nome": "Consulta Padrão", "client_nome": "Ana", "actions": ["confirm", ...]}
			]
		}
	"""
	try:
		date = validate_date_string(date)
	except ValidationError as e:
		return _failure(str(e))

	settings = store.get_settings()
	now = now or now_datetime(settings.timezone)
	day = get_day_closure(settings, date)

	rows = []
	day_appointments = [a for a in store.get_appointments() if a.date_iso == date]
	for appointment in sorted(day_appointments, key=lambda a: to_minutes(a.start)):
		service = store.get_service(appointment.service_id)
		client = store.get_client(appointment.client_id) if appointment.client_id else None
		rows.append({
			**appointment.as_dict(),
			"service_nome": service.nome if service else None,
			"client_nome": client.nome if client else None,
			"actions": status.get_available_actions(appointment, now),
		})

	return {
		"success": True,
		"date": date,
		"day_closed": day["hard_closed"],
		"is_holiday": day["is_holiday"],
		"appointments": rows,
	}


def validate_appointment(
	store: InMemoryStore,
	date: str,
	start: str,
	service_id: Optional[str],
	client_id: Optional[str] = None,
	appointment_id: Optional[str] = None,
	override: bool = False
) -> Dict[str, Any]:
	"""
	Valida un agendamiento ANTES de guardarlo.
	Útil para la UI: mostrar errores o pedir confirmación antes de enviar.

	Args:
		date: fecha (YYYY-MM-DD)
		start: inicio (HH:mm)
		service_id: servicio elegido
		client_id: cliente elegido (no se exige al reagendar)
		appointment_id: appointment existente (para reagendar)
		override: el usuario ya confirmó reagendar sobre un cierre

	Returns:
		dict: {
			"valid": bool,
			"errors": list[str],
			"warnings": list[str],
			"needs_confirmation": bool,
			"reason": str | None,
			"end": "HH:mm" | None
		}
	"""
	errors = []
	warnings = []

	try:
		date = validate_date_string(date)
		start = validate_time_string(start, "start")
		if appointment_id:
			appointment_id = validate_docname(appointment_id, "appointment_id")
	except ValidationError as e:
		errors.append(str(e))
		return {
			"valid": False,
			"errors": errors,
			"warnings": warnings,
			"needs_confirmation": False,
			"reason": None,
			"end": None
		}

	try:
		# Reagendar exige un appointment existente, igual que reschedule_appointment
		if appointment_id and not store.get_appointment(appointment_id):
			raise DoesNotExistError(f"Agendamiento inexistente: {appointment_id}")

		decision = booking.validate_booking(
			store,
			date,
			start,
			service_id,
			client_id=client_id,
			exclude_appointment=appointment_id,
			override=override,
			is_reschedule=bool(appointment_id)
		)
	except (DoesNotExistError, DataIntegrityError) as e:
		log_error(f"Error validating appointment: {str(e)}", "Validate Appointment")
		raise

	needs_confirmation = decision["outcome"] == booking.OUTCOME_NEEDS_CONFIRMATION
	if decision["outcome"] == booking.OUTCOME_REJECTED:
		errors.append(decision["message"])
	elif needs_confirmation:
		warnings.append(decision["message"])

	return {
		"valid": decision["outcome"] == booking.OUTCOME_ACCEPTED,
		"errors": errors,
		"warnings": warnings,
		"needs_confirmation": needs_confirmation,
		"reason": decision["reason"],
		"end": decision["details"].get("end")
	}


def create_appointment(
	store: InMemoryStore,
	date: str,
	start: str,
	service_id: Optional[str],
	client_id: Optional[str],
	staff_id: Optional[str] = None,
	observacoes: Optional[str] = None,
	channel: Optional[EventChannel] = None
) -> Dict[str, Any]:
	"""
	Crea un agendamiento nuevo.

	Returns:
		dict: {
			"success": bool,
			"needs_confirmation": False,
			"outcome": "accepted" | "rejected",
			"reason": str | None,
			"message": str | None,
			"appointment": dict | None
		}
	"""
	try:
		date = validate_date_string(date)
		start = validate_time_string(start, "start")
	except ValidationError as e:
		return _failure(str(e), outcome=booking.OUTCOME_REJECTED, appointment=None)

	try:
		decision = booking.book_appointment(
			store,
			date,
			start,
			service_id,
			client_id,
			staff_id=staff_id,
			observacoes=observacoes,
			channel=channel
		)
	except (DoesNotExistError, DataIntegrityError) as e:
		log_error(f"Error creating appointment: {str(e)}", "Create Appointment")
		raise

	return _from_decision(decision)


def reschedule_appointment(
	store: InMemoryStore,
	appointment_id: str,
	date: str,
	start: str,
	service_id: Optional[str],
	override: bool = False,
	channel: Optional[EventChannel] = None
) -> Dict[str, Any]:
	"""
	Reagenda un agendamiento existente.

	Si el horario cae en un cierre parcial la respuesta trae
	needs_confirmation=True y no se guarda nada; repetir con override=True.
	"""
	try:
		appointment_id = validate_docname(appointment_id, "appointment_id")
		date = validate_date_string(date)
		start = validate_time_string(start, "start")
	except ValidationError as e:
		return _failure(str(e), outcome=booking.OUTCOME_REJECTED, appointment=None)

	try:
		decision = booking.reschedule_appointment(
			store,
			appointment_id,
			date,
			start,
			service_id,
			override=override,
			channel=channel
		)
	except (DoesNotExistError, DataIntegrityError) as e:
		log_error(f"Error rescheduling appointment {appointment_id}: {str(e)}", "Reschedule Appointment")
		raise

	return _from_decision(decision)


def set_appointment_status(
	store: InMemoryStore,
	appointment_id: str,
	new_status: str,
	now: Optional[datetime] = None,
	channel: Optional[EventChannel] = None
) -> Dict[str, Any]:
	"""
	Confirma, cancela o concluye (sin recibo) un agendamiento.

	Returns:
		dict: {"success": bool, "message": str, "appointment": dict | None}
	"""
	try:
		appointment_id = validate_docname(appointment_id, "appointment_id")
		updated = status.set_appointment_status(store, appointment_id, new_status, now=now, channel=channel)
	except ValidationError as e:
		return _failure(str(e), appointment=None)
	except DoesNotExistError as e:
		log_error(f"Error changing status of {appointment_id}: {str(e)}", "Set Appointment Status")
		raise

	return {
		"success": True,
		"message": f"Status actualizado a {updated.status}",
		"appointment": updated.as_dict()
	}


def complete_appointment(
	store: InMemoryStore,
	appointment_id: str,
	payment_method: str = status.DEFAULT_PAYMENT_METHOD,
	discount_mode: str = status.DISCOUNT_NONE,
	discount: float = 0,
	discount_reason: Optional[str] = None,
	receipt_note: Optional[str] = None,
	now: Optional[datetime] = None,
	channel: Optional[EventChannel] = None
) -> Dict[str, Any]:
	"""
	Concluye un agendamiento y guarda el recibo.

	Returns:
		dict: {"success": bool, "message": str, "appointment": dict | None}
	"""
	try:
		appointment_id = validate_docname(appointment_id, "appointment_id")
		updated = status.complete_appointment(
			store,
			appointment_id,
			payment_method=payment_method,
			discount_mode=discount_mode,
			discount=discount,
			discount_reason=discount_reason,
			receipt_note=receipt_note,
			now=now,
			channel=channel
		)
	except ValidationError as e:
		return _failure(str(e), appointment=None)
	except DoesNotExistError as e:
		log_error(f"Error completing {appointment_id}: {str(e)}", "Complete Appointment")
		raise

	return {
		"success": True,
		"message": f"Recibo guardado, total {updated.final_price:.2f}",
		"appointment": updated.as_dict()
	}


def get_report_summary(
	store: InMemoryStore,
	date_start: str,
	date_end: str,
	service_id: Optional[str] = None,
	staff_id: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Resumen por status para la página de relatórios.

	Returns:
		dict: ver reports.get_summary(), más "success"
	"""
	try:
		date_start = validate_date_string(date_start, "date_start")
		date_end = validate_date_string(date_end, "date_end")
	except ValidationError as e:
		return _failure(str(e))

	if date_start > date_end:
		return _failure("date_start debe ser menor o igual que date_end")

	summary = reports.get_summary(
		store.get_appointments(),
		store.get_services(),
		date_start,
		date_end,
		service_id=service_id,
		staff_id=staff_id
	)
	return {"success": True, **summary}
