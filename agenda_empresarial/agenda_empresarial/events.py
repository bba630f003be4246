"""
Agenda Event Channel

Explicit command/event channel between the booking engine and the UI
controller. Components subscribe handlers per event; nothing is
broadcast through globals.

Handlers can also be declared in hooks.event_handlers as dotted paths:

	event_handlers = {
		"appointment_created": ["my_app.handlers.on_created"],
	}
"""

import importlib
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from agenda_empresarial.agenda_empresarial.utils.logger import log_error, logger

Handler = Callable[["AgendaEvent", Dict[str, Any]], None]


class AgendaEvent(str, Enum):
	APPOINTMENT_CREATED = "appointment_created"
	APPOINTMENT_RESCHEDULED = "appointment_rescheduled"
	APPOINTMENT_STATUS_CHANGED = "appointment_status_changed"
	SETTINGS_UPDATED = "settings_updated"
	# Comandos de UI (abrir/alternar el panel de ajustes)
	OPEN_SETTINGS = "open_settings"
	TOGGLE_SETTINGS = "toggle_settings"


class EventChannel:
	"""
	Registro de handlers por evento.

	Un handler que falla se registra en el log y no interrumpe
	al que publica ni a los demás handlers.
	"""

	def __init__(self):
		self._handlers: Dict[AgendaEvent, List[Handler]] = {}

	def subscribe(self, event: AgendaEvent, handler: Handler) -> Callable[[], None]:
		"""
		Suscribe un handler a un evento.

		Returns:
			función que lo da de baja
		"""
		event = AgendaEvent(event)
		self._handlers.setdefault(event, []).append(handler)
		return lambda: self.unsubscribe(event, handler)

	def unsubscribe(self, event: AgendaEvent, handler: Handler) -> None:
		handlers = self._handlers.get(AgendaEvent(event), [])
		if handler in handlers:
			handlers.remove(handler)

	def publish(self, event: AgendaEvent, payload: Optional[Dict[str, Any]] = None) -> int:
		"""
		Publica un evento.

		Args:
			event: AgendaEvent o su valor string
			payload: datos del evento

		Returns:
			int: cantidad de handlers que corrieron sin error
		"""
		event = AgendaEvent(event)
		payload = payload or {}
		delivered = 0

		for handler in list(self._handlers.get(event, [])):
			try:
				handler(event, payload)
				delivered += 1
			except Exception as e:
				log_error(
					f"Handler {getattr(handler, '__name__', handler)!r} falló en {event.value}: {e}",
					"Event Channel"
				)

		logger("events").debug(f"{event.value} entregado a {delivered} handler(s)")
		return delivered

	@classmethod
	def from_hooks(cls, event_handlers: Optional[Dict[str, List[str]]] = None) -> "EventChannel":
		"""
		Crea un canal con los handlers declarados en hooks.

		Args:
			event_handlers: mapa evento -> rutas punteadas (default hooks.event_handlers)

		Raises:
			ImportError / AttributeError: si una ruta no resuelve
		"""
		if event_handlers is None:
			from agenda_empresarial import hooks
			event_handlers = getattr(hooks, "event_handlers", {})

		channel = cls()
		for event_name, paths in event_handlers.items():
			for path in paths:
				channel.subscribe(AgendaEvent(event_name), _resolve_handler(path))
		return channel


def _resolve_handler(path: str) -> Handler:
	"""Importa "modulo.funcion" y devuelve la función."""
	module_path, _, attr = path.rpartition(".")
	module = importlib.import_module(module_path)
	return getattr(module, attr)


def log_agenda_event(event: AgendaEvent, payload: Dict[str, Any]) -> None:
	"""Handler por defecto: deja constancia del evento en el log."""
	appointment = payload.get("appointment") or {}
	logger("events").info(f"{event.value}: {appointment.get('id', '-')}")
