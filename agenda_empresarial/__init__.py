"""Agenda Empresarial: booking engine for a small business agenda."""

__version__ = "0.0.1"
