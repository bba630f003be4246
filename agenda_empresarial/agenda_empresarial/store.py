"""
Appointment Store

Contract the booking engine reads from and commits to, plus the
in-memory implementation used by embedding UIs and by the tests.

The engine only ever:
- reads settings, appointments and services
- commits a new appointment, or patches an existing one
inside a single transaction() block.
"""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Union

from pydantic import ValidationError as PydanticValidationError

from agenda_empresarial import hooks
from agenda_empresarial.agenda_empresarial.events import AgendaEvent, EventChannel
from agenda_empresarial.agenda_empresarial.exceptions import DataIntegrityError
from agenda_empresarial.agenda_empresarial.models import (
	AgendaSettings,
	Appointment,
	Client,
	Service,
	Staff,
	normalize_settings,
)
from agenda_empresarial.agenda_empresarial.utils.logger import logger

Listener = Callable[["InMemoryStore"], None]


def _by_field_name(model_cls: Any, data: Dict[str, Any]) -> Dict[str, Any]:
	"""Traduce claves camelCase (alias) al nombre del campo."""
	aliases = {f.alias: name for name, f in model_cls.model_fields.items() if f.alias}
	return {aliases.get(key, key): value for key, value in data.items()}


class AgendaStore(Protocol):
	"""Lo que el motor de reservas necesita de un store."""

	def get_settings(self) -> AgendaSettings:
		...

	def get_appointments(self) -> List[Appointment]:
		...

	def get_service(self, service_id: str) -> Optional[Service]:
		...

	def commit_new_appointment(self, appointment: Appointment) -> None:
		...

	def commit_appointment_patch(self, appointment_id: str, patch: Dict[str, Any]) -> None:
		...

	def transaction(self) -> Any:
		...


class InMemoryStore:
	"""
	Store en memoria con suscripción a cambios.

	Los listeners reciben el store después de cada mutación.
	"""

	def __init__(
		self,
		settings: Union[AgendaSettings, Dict[str, Any], None] = None,
		services: Optional[List[Service]] = None,
		clients: Optional[List[Client]] = None,
		staff: Optional[List[Staff]] = None,
		appointments: Optional[List[Appointment]] = None
	):
		self._lock = threading.RLock()
		self._listeners: List[Listener] = []
		self._settings = normalize_settings(settings)
		self._services: Dict[str, Service] = {s.id: s for s in services or []}
		self._clients: Dict[str, Client] = {c.id: c for c in clients or []}
		self._staff: Dict[str, Staff] = {s.id: s for s in staff or []}
		self._appointments: List[Appointment] = list(appointments or [])

	@classmethod
	def with_defaults(cls) -> "InMemoryStore":
		"""Store recién instalado: ajustes por defecto y catálogo inicial."""
		return cls(
			settings=hooks.default_settings,
			services=[Service.model_validate(s) for s in hooks.seed_services],
			staff=[Staff.model_validate(s) for s in hooks.seed_staff],
		)

	# ===== READS =====

	def get_settings(self) -> AgendaSettings:
		return self._settings

	def get_appointments(self) -> List[Appointment]:
		return list(self._appointments)

	def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
		for appointment in self._appointments:
			if appointment.id == appointment_id:
				return appointment
		return None

	def get_service(self, service_id: str) -> Optional[Service]:
		return self._services.get(service_id)

	def get_services(self) -> List[Service]:
		return list(self._services.values())

	def get_client(self, client_id: str) -> Optional[Client]:
		return self._clients.get(client_id)

	def get_staff(self, staff_id: str) -> Optional[Staff]:
		return self._staff.get(staff_id)

	# ===== COMMITS =====

	@contextmanager
	def transaction(self) -> Iterator["InMemoryStore"]:
		"""Serializa validar-y-guardar entre hilos."""
		with self._lock:
			yield self

	def commit_new_appointment(self, appointment: Appointment) -> None:
		"""
		Guarda un appointment nuevo.

		Raises:
			DataIntegrityError: si ya existe un appointment con ese id
		"""
		with self._lock:
			if any(a.id == appointment.id for a in self._appointments):
				raise DataIntegrityError(f"Appointment duplicado: {appointment.id}")
			self._appointments.append(appointment)
		self._notify()

	def commit_appointment_patch(self, appointment_id: str, patch: Dict[str, Any]) -> None:
		"""
		Aplica cambios parciales a un appointment.

		Un id inexistente no hace nada: quien llama ya verificó que existe.
		"""
		with self._lock:
			for index, appointment in enumerate(self._appointments):
				if appointment.id != appointment_id:
					continue
				data = appointment.model_dump()
				data.update(_by_field_name(Appointment, patch))
				try:
					self._appointments[index] = Appointment.model_validate(data)
				except PydanticValidationError as e:
					raise DataIntegrityError(f"Patch inválido para {appointment_id}: {e}") from e
				break
			else:
				logger("store").debug(f"Patch ignorado, appointment inexistente: {appointment_id}")
				return
		self._notify()

	# ===== CATALOG / SETTINGS =====

	def set_settings(
		self,
		patch: Union[AgendaSettings, Dict[str, Any]],
		channel: Optional[EventChannel] = None
	) -> AgendaSettings:
		"""
		Actualiza ajustes (merge superficial) y los normaliza.

		Args:
			patch: ajustes parciales (camelCase o snake_case)
			channel: si se pasa, publica settings_updated con los ajustes nuevos

		Raises:
			DataIntegrityError: si el resultado no es válido
		"""
		if isinstance(patch, AgendaSettings):
			patch = patch.model_dump()
		patch = _by_field_name(AgendaSettings, patch)

		with self._lock:
			merged = self._settings.model_dump()
			merged.update(patch)
			# Si el patch trae el formato viejo, que no gane el markers anterior
			if ("holidays" in patch or "specialDates" in patch) and not patch.get("markers"):
				merged["markers"] = []
			self._settings = normalize_settings(merged)
			settings = self._settings
		self._notify()

		if channel:
			channel.publish(AgendaEvent.SETTINGS_UPDATED, {
				"settings": settings.model_dump(mode="json", by_alias=True),
			})
		return settings

	def upsert_service(self, service: Service) -> None:
		with self._lock:
			self._services[service.id] = service
		self._notify()

	def upsert_client(self, client: Client) -> None:
		with self._lock:
			self._clients[client.id] = client
		self._notify()

	def upsert_staff(self, staff: Staff) -> None:
		with self._lock:
			self._staff[staff.id] = staff
		self._notify()

	# ===== SUBSCRIPTIONS =====

	def subscribe(self, listener: Listener) -> Callable[[], None]:
		"""
		Registra un listener de cambios.

		Returns:
			función que lo da de baja
		"""
		with self._lock:
			self._listeners.append(listener)

		def unsubscribe() -> None:
			with self._lock:
				if listener in self._listeners:
					self._listeners.remove(listener)

		return unsubscribe

	def _notify(self) -> None:
		with self._lock:
			listeners = list(self._listeners)
		for listener in listeners:
			listener(self)

	# ===== PERSISTENCE =====

	def snapshot(self) -> Dict[str, Any]:
		"""Estado completo en forma JSON-safe (camelCase)."""
		with self._lock:
			return {
				"settings": self._settings.model_dump(mode="json", by_alias=True),
				"services": [s.model_dump(mode="json", by_alias=True) for s in self._services.values()],
				"clients": [c.model_dump(mode="json", by_alias=True) for c in self._clients.values()],
				"staff": [s.model_dump(mode="json", by_alias=True) for s in self._staff.values()],
				"appointments": [a.as_dict() for a in self._appointments],
			}

	@classmethod
	def from_snapshot(cls, data: Dict[str, Any]) -> "InMemoryStore":
		"""
		Reconstruye un store desde un snapshot guardado.

		Los ajustes se migran al formato canónico al cargar.

		Raises:
			DataIntegrityError: si algún registro es inválido
		"""
		try:
			return cls(
				settings=normalize_settings(data.get("settings")),
				services=[Service.model_validate(s) for s in data.get("services", [])],
				clients=[Client.model_validate(c) for c in data.get("clients", [])],
				staff=[Staff.model_validate(s) for s in data.get("staff", [])],
				appointments=[Appointment.model_validate(a) for a in data.get("appointments", [])],
			)
		except PydanticValidationError as e:
			raise DataIntegrityError(f"Snapshot inválido: {e}") from e
