"""
Status Transitions

Actions the agenda offers for an existing appointment and the
completion (receipt) step.

Tabla de acciones:
- no pasado + open       -> confirm, cancel, reschedule
- no pasado + confirmed  -> cancel
- pasado + open/confirmed -> complete, cancel
- canceled               -> reschedule
- done                   -> (ninguna)

"Pasado" significa que dateISO + end ya quedó atrás en hora local.
Estas transiciones no pasan por las reglas de cierre ni de conflicto.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from agenda_empresarial.agenda_empresarial.events import AgendaEvent, EventChannel
from agenda_empresarial.agenda_empresarial.exceptions import DoesNotExistError, ValidationError
from agenda_empresarial.agenda_empresarial.models import (
	STATUS_CANCELED,
	STATUS_CONFIRMED,
	STATUS_DONE,
	STATUS_OPEN,
	Appointment,
)
from agenda_empresarial.agenda_empresarial.store import AgendaStore
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import to_minutes
from agenda_empresarial.agenda_empresarial.utils.dates import getdate, now_datetime
from agenda_empresarial.agenda_empresarial.utils.logger import logger

ACTION_CONFIRM = "confirm"
ACTION_CANCEL = "cancel"
ACTION_RESCHEDULE = "reschedule"
ACTION_COMPLETE = "complete"

# status destino -> acción que lo habilita
STATUS_ACTIONS = {
	STATUS_CONFIRMED: ACTION_CONFIRM,
	STATUS_CANCELED: ACTION_CANCEL,
	STATUS_DONE: ACTION_COMPLETE,
}

DISCOUNT_NONE = "none"
DISCOUNT_FIXED = "fixed"
DISCOUNT_PERCENT = "percent"

DEFAULT_PAYMENT_METHOD = "Dinheiro"


def _end_datetime(appointment: Appointment) -> datetime:
	minutes = to_minutes(appointment.end)
	return datetime.combine(getdate(appointment.date_iso), datetime.min.time()).replace(
		hour=minutes // 60, minute=minutes % 60
	)


def is_past(appointment: Appointment, now: Optional[datetime] = None, tz_name: Optional[str] = None) -> bool:
	"""True si el fin del appointment ya pasó (sin now: ahora en tz_name)."""
	return (now or now_datetime(tz_name)) > _end_datetime(appointment)


def get_available_actions(
	appointment: Appointment,
	now: Optional[datetime] = None,
	tz_name: Optional[str] = None
) -> List[str]:
	"""
	Acciones que la agenda ofrece para un appointment.

	Args:
		appointment: el agendamiento
		now: hora local actual (default: ahora en tz_name)
		tz_name: timezone del negocio (AgendaSettings.timezone)

	Returns:
		list[str]: subconjunto ordenado de confirm, cancel, reschedule, complete
	"""
	past = is_past(appointment, now, tz_name)
	status = appointment.status

	if status == STATUS_CANCELED:
		return [ACTION_RESCHEDULE]
	if status == STATUS_DONE:
		return []
	if past:
		return [ACTION_COMPLETE, ACTION_CANCEL]
	if status == STATUS_OPEN:
		return [ACTION_CONFIRM, ACTION_CANCEL, ACTION_RESCHEDULE]
	return [ACTION_CANCEL]


def _get_or_throw(store: AgendaStore, appointment_id: str) -> Appointment:
	for appointment in store.get_appointments():
		if appointment.id == appointment_id:
			return appointment
	raise DoesNotExistError(f"Agendamiento inexistente: {appointment_id}")


def set_appointment_status(
	store: AgendaStore,
	appointment_id: str,
	status: str,
	now: Optional[datetime] = None,
	channel: Optional[EventChannel] = None
) -> Appointment:
	"""
	Cambia el status si la tabla de acciones lo permite.

	Volver a "open" solo es posible reagendando.

	Raises:
		DoesNotExistError: si el id no existe
		ValidationError: si la transición no está permitida
	"""
	with store.transaction():
		appointment = _get_or_throw(store, appointment_id)
		now = now or now_datetime(store.get_settings().timezone)

		action = STATUS_ACTIONS.get(status)
		if not action or action not in get_available_actions(appointment, now):
			raise ValidationError(
				f"Transición no permitida: {appointment.status} -> {status} ({appointment_id})"
			)

		previous = appointment.status
		store.commit_appointment_patch(appointment_id, {"status": status})
		updated = _get_or_throw(store, appointment_id)

	logger("status").info(f"Appointment {appointment_id}: {previous} -> {status}")
	if channel:
		channel.publish(AgendaEvent.APPOINTMENT_STATUS_CHANGED, {
			"appointment": updated.as_dict(),
			"previous_status": previous,
		})
	return updated


def calculate_receipt(
	base_price: float,
	discount_mode: str = DISCOUNT_NONE,
	discount: float = 0
) -> Dict[str, float]:
	"""
	Calcula descuento y precio final.

	Args:
		base_price: precio del servicio
		discount_mode: none | fixed | percent
		discount: monto fijo, o porcentaje 0-100

	Returns:
		dict: {"discount_value": monto descontado, "final_price": precio a cobrar}

	Raises:
		ValidationError: modo desconocido, descuento negativo o porcentaje > 100
	"""
	discount = float(discount or 0)
	if discount < 0:
		raise ValidationError("El descuento no puede ser negativo")

	if discount_mode == DISCOUNT_NONE:
		return {"discount_value": 0, "final_price": base_price}
	if discount_mode == DISCOUNT_FIXED:
		return {"discount_value": discount, "final_price": max(0, base_price - discount)}
	if discount_mode == DISCOUNT_PERCENT:
		if discount > 100:
			raise ValidationError("El porcentaje de descuento debe estar entre 0 y 100")
		amount = base_price * discount / 100
		return {"discount_value": round(amount, 2), "final_price": max(0, base_price - amount)}

	raise ValidationError(f"Modo de descuento inválido: {discount_mode}")


def complete_appointment(
	store: AgendaStore,
	appointment_id: str,
	payment_method: str = DEFAULT_PAYMENT_METHOD,
	discount_mode: str = DISCOUNT_NONE,
	discount: float = 0,
	discount_reason: Optional[str] = None,
	receipt_note: Optional[str] = None,
	now: Optional[datetime] = None,
	channel: Optional[EventChannel] = None
) -> Appointment:
	"""
	Concluye un appointment y guarda los datos del recibo.

	También sirve para editar el recibo de uno ya concluido.

	Raises:
		DoesNotExistError: si el appointment o su servicio no existen
		ValidationError: si el appointment no se puede concluir todavía
	"""
	with store.transaction():
		appointment = _get_or_throw(store, appointment_id)
		now = now or now_datetime(store.get_settings().timezone)

		if appointment.status != STATUS_DONE and ACTION_COMPLETE not in get_available_actions(appointment, now):
			raise ValidationError(f"El agendamiento {appointment_id} no se puede concluir todavía")

		service = store.get_service(appointment.service_id)
		if not service:
			raise DoesNotExistError(f"Servicio inexistente: {appointment.service_id}")

		receipt = calculate_receipt(service.preco, discount_mode, discount)
		previous = appointment.status
		store.commit_appointment_patch(appointment_id, {
			"status": STATUS_DONE,
			"payment_method": payment_method,
			"discount_value": receipt["discount_value"],
			"discount_reason": discount_reason if discount_mode != DISCOUNT_NONE else "",
			"receipt_note": receipt_note or "",
			"final_price": receipt["final_price"],
			"paid_at": now,
		})
		updated = _get_or_throw(store, appointment_id)

	logger("status").info(f"Appointment {appointment_id} concluido, total {receipt['final_price']:.2f}")
	if channel and previous != STATUS_DONE:
		channel.publish(AgendaEvent.APPOINTMENT_STATUS_CHANGED, {
			"appointment": updated.as_dict(),
			"previous_status": previous,
		})
	return updated


def get_pending_completion(
	appointments: Iterable[Appointment],
	now: Optional[datetime] = None,
	tz_name: Optional[str] = None
) -> List[Appointment]:
	"""
	Appointments pasados que siguen open/confirmed.

	Ordenados por fecha y hora de inicio.
	"""
	now = now or now_datetime(tz_name)
	pending = [
		a for a in appointments
		if a.status in (STATUS_OPEN, STATUS_CONFIRMED) and is_past(a, now)
	]
	return sorted(pending, key=lambda a: (a.date_iso, to_minutes(a.start)))
