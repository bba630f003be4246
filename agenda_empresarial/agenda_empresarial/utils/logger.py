"""
Logging Service

Process-wide logging for the agenda app.

Usage:
	logger().info("...")
	logger("booking").warning("...")
	log_error("mensaje", "Titulo")
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "agenda_empresarial"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configure(base: logging.Logger) -> None:
	"""
	Configura handlers del logger raíz de la app una sola vez.

	Nivel desde AGENDA_LOG_LEVEL (default INFO).
	Si AGENDA_LOG_FILE está definido, agrega un FileHandler.
	"""
	# Evitar agregar handlers múltiples veces
	if base.handlers:
		return

	level_name = os.getenv("AGENDA_LOG_LEVEL", "INFO")
	base.setLevel(getattr(logging, level_name.upper(), logging.INFO))

	formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

	console_handler = logging.StreamHandler(sys.stdout)
	console_handler.setFormatter(formatter)
	base.addHandler(console_handler)

	log_file = os.getenv("AGENDA_LOG_FILE")
	if log_file:
		Path(log_file).parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(log_file)
		file_handler.setFormatter(formatter)
		base.addHandler(file_handler)


def logger(module: Optional[str] = None) -> logging.Logger:
	"""
	Obtiene el logger de la app o de un submódulo.

	Args:
		module: nombre corto del submódulo (ej. "booking")

	Returns:
		logging.Logger configurado
	"""
	base = logging.getLogger(ROOT_LOGGER_NAME)
	_configure(base)

	if not module:
		return base
	return base.getChild(module)


def log_error(message: str, title: Optional[str] = None) -> None:
	"""Registra un error con título opcional."""
	if title:
		logger().error(f"{title}: {message}")
	else:
		logger().error(message)
