"""
Agenda Exceptions

Error taxonomy of the booking engine:
- ValidationError: user-correctable problem (shown as a message)
- DataIntegrityError: malformed stored data (times, settings)
- DoesNotExistError: unknown appointment/service id
"""


class AgendaError(Exception):
	"""Excepción base de la agenda."""
	pass


class ValidationError(AgendaError):
	"""Error corregible por el usuario (selección faltante, transición inválida, etc.)."""
	pass


class DataIntegrityError(AgendaError):
	"""Datos almacenados con formato inválido."""
	pass


class InvalidTimeFormat(DataIntegrityError, ValueError):
	"""Hora que no respeta el formato HH:mm."""
	pass


class DoesNotExistError(AgendaError):
	"""El id solicitado no existe en el store."""
	pass
