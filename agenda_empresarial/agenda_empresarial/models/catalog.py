# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Catalog Models

Business records the booking engine reads:
- Service: drives appointment duration and price
- Client, Staff: referenced by appointments
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Service(BaseModel):
	"""
	Procedimiento ofrecido.

	duracao_min define end = start + duracao_min en reservas nuevas.
	"""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	id: str = Field(..., min_length=1)
	nome: str = Field(..., min_length=1)
	duracao_min: int = Field(..., gt=0, alias="duracaoMin")
	preco: float = Field(0, ge=0)
	equipe_id: Optional[str] = Field(None, alias="equipeId")


class Client(BaseModel):
	"""Cliente del negocio."""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	id: str = Field(..., min_length=1)
	cpf_nif: str = Field("", alias="cpfNif")
	nome: str = Field(..., min_length=1)
	idade: Optional[int] = Field(None, ge=0)
	telefone: Optional[str] = None
	email: Optional[str] = None
	observacoes: Optional[str] = None


class Staff(BaseModel):
	"""Profesional del equipo."""

	model_config = ConfigDict(populate_by_name=True, extra="allow")

	id: str = Field(..., min_length=1)
	nome: str = Field(..., min_length=1)
	funcao: Optional[str] = None
