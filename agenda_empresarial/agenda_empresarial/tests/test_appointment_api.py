"""
Tests for api/appointments/endpoints.py

Tests the UI-facing endpoints end to end on an in-memory store.
"""

import unittest
from datetime import datetime

from agenda_empresarial.agenda_empresarial.exceptions import DoesNotExistError, ValidationError
from agenda_empresarial.agenda_empresarial.models import Client
from agenda_empresarial.agenda_empresarial.store import InMemoryStore
from agenda_empresarial.api.appointments import (
	complete_appointment,
	create_appointment,
	get_day_agenda,
	get_day_slots,
	get_report_summary,
	reschedule_appointment,
	set_appointment_status,
	validate_appointment,
)
from agenda_empresarial.api.shared import validate_date_string, validate_docname, validate_time_string

TUESDAY = "2025-06-10"


class TestAppointmentAPI(unittest.TestCase):
	"""Tests for appointment API endpoints."""

	def setUp(self):
		"""Set up a default store with a lunch closure and one client."""
		self.store = InMemoryStore.with_defaults()
		self.store.set_settings({"dailyClosures": [{"start": "12:00", "end": "14:00"}]})
		self.store.upsert_client(Client(id="cli_1", nome="Ana"))

	def test_get_day_slots(self):
		"""Test the day board endpoint."""
		create_appointment(self.store, TUESDAY, "09:00", "srv_consulta", "cli_1")
		board = get_day_slots(self.store, TUESDAY)

		self.assertTrue(board["success"])
		self.assertEqual(board["morning"][0], {"start": "09:00", "status": "taken", "is_available": False})
		self.assertEqual(board["afternoon"][0]["status"], "closure")

	def test_get_day_slots_invalid_date(self):
		result = get_day_slots(self.store, "10/06/2025")
		self.assertFalse(result["success"])

	def test_validate_appointment(self):
		"""Test pre-submit validation for new and rescheduled bookings."""
		ok = validate_appointment(self.store, TUESDAY, "10:00", "srv_consulta", client_id="cli_1")
		self.assertTrue(ok["valid"])
		self.assertEqual(ok["end"], "11:00")

		closure = validate_appointment(self.store, TUESDAY, "12:00", "srv_curto", client_id="cli_1")
		self.assertFalse(closure["valid"])
		self.assertEqual(closure["reason"], "falls in closure interval")
		self.assertEqual(len(closure["errors"]), 1)

		bad = validate_appointment(self.store, TUESDAY, "noon", "srv_curto", client_id="cli_1")
		self.assertFalse(bad["valid"])
		self.assertIn("start", bad["errors"][0])

	def test_out_of_range_values_are_rejected(self):
		"""Test that well-shaped but impossible dates and times come back as failures."""
		late = create_appointment(self.store, TUESDAY, "25:00", "srv_consulta", "cli_1")
		self.assertFalse(late["success"])
		self.assertIn("out of range", late["message"])

		no_day = create_appointment(self.store, "2025-02-30", "10:00", "srv_consulta", "cli_1")
		self.assertFalse(no_day["success"])
		self.assertIn("not a calendar date", no_day["message"])

		self.assertFalse(get_day_slots(self.store, "2025-13-01")["success"])
		self.assertFalse(get_day_agenda(self.store, "2025-02-30")["success"])
		self.assertFalse(get_report_summary(self.store, "2025-06-01", "2025-06-31")["success"])

		bad_minutes = validate_appointment(self.store, TUESDAY, "10:75", "srv_consulta", client_id="cli_1")
		self.assertFalse(bad_minutes["valid"])
		self.assertEqual(len(bad_minutes["errors"]), 1)
		self.assertEqual(self.store.get_appointments(), [])

	def test_validate_unknown_appointment_raises(self):
		with self.assertRaises(DoesNotExistError):
			validate_appointment(self.store, TUESDAY, "10:00", "srv_curto", appointment_id="apt_nope")

	def test_validate_reschedule_warns(self):
		"""Test that a reschedule over a closure comes back as a warning."""
		created = create_appointment(self.store, TUESDAY, "10:00", "srv_curto", "cli_1")
		result = validate_appointment(
			self.store,
			TUESDAY,
			"12:00",
			"srv_curto",
			appointment_id=created["appointment"]["id"]
		)

		self.assertFalse(result["valid"])
		self.assertTrue(result["needs_confirmation"])
		self.assertEqual(result["errors"], [])
		self.assertEqual(len(result["warnings"]), 1)

	def test_create_appointment(self):
		"""Test creating, then conflicting."""
		first = create_appointment(self.store, TUESDAY, "10:00", "srv_consulta", "cli_1")
		second = create_appointment(self.store, TUESDAY, "10:30", "srv_curto", "cli_1")

		self.assertTrue(first["success"])
		self.assertEqual(first["appointment"]["status"], "open")
		self.assertFalse(second["success"])
		self.assertEqual(second["reason"], "time conflict")

	def test_create_unknown_service_raises(self):
		with self.assertRaises(DoesNotExistError):
			create_appointment(self.store, TUESDAY, "10:00", "srv_nope", "cli_1")

	def test_reschedule_flow(self):
		"""Test confirm-then-override on a closure."""
		created = create_appointment(self.store, TUESDAY, "10:00", "srv_curto", "cli_1")
		apt_id = created["appointment"]["id"]

		first = reschedule_appointment(self.store, apt_id, TUESDAY, "12:30", "srv_curto")
		self.assertFalse(first["success"])
		self.assertTrue(first["needs_confirmation"])

		second = reschedule_appointment(self.store, apt_id, TUESDAY, "12:30", "srv_curto", override=True)
		self.assertTrue(second["success"])
		self.assertEqual(second["appointment"]["start"], "12:30")

	def test_reschedule_invalid_id(self):
		result = reschedule_appointment(self.store, "<script>alert(1)</script>", TUESDAY, "10:00", "srv_curto")
		self.assertFalse(result["success"])

	def test_status_and_completion(self):
		"""Test confirm, complete with receipt and the agenda actions."""
		created = create_appointment(self.store, TUESDAY, "10:00", "srv_consulta", "cli_1")
		apt_id = created["appointment"]["id"]
		before = datetime(2025, 6, 10, 8, 0)
		after = datetime(2025, 6, 10, 11, 30)

		agenda = get_day_agenda(self.store, TUESDAY, now=before)
		self.assertEqual(agenda["appointments"][0]["actions"], ["confirm", "cancel", "reschedule"])
		self.assertEqual(agenda["appointments"][0]["service_nome"], "Consulta Padrão")
		self.assertEqual(agenda["appointments"][0]["client_nome"], "Ana")

		confirmed = set_appointment_status(self.store, apt_id, "confirmed", now=before)
		self.assertTrue(confirmed["success"])

		too_early = complete_appointment(self.store, apt_id, now=before)
		self.assertFalse(too_early["success"])

		done = complete_appointment(self.store, apt_id, discount_mode="fixed", discount=5, now=after)
		self.assertTrue(done["success"])
		self.assertEqual(done["appointment"]["finalPrice"], 55)
		self.assertEqual(done["appointment"]["status"], "done")

		again = set_appointment_status(self.store, apt_id, "canceled", now=after)
		self.assertFalse(again["success"])

	def test_status_unknown_id_raises(self):
		with self.assertRaises(DoesNotExistError):
			set_appointment_status(self.store, "apt_nope", "confirmed")

	def test_get_report_summary(self):
		create_appointment(self.store, TUESDAY, "10:00", "srv_consulta", "cli_1")
		create_appointment(self.store, TUESDAY, "15:00", "srv_curto", "cli_1")

		summary = get_report_summary(self.store, "2025-06-01", "2025-06-30")

		self.assertTrue(summary["success"])
		self.assertEqual(summary["by_status"]["open"], {"quantity": 2, "amount": 95.0})
		self.assertFalse(get_report_summary(self.store, "2025-06-30", "2025-06-01")["success"])


class TestValidators(unittest.TestCase):
	"""Tests for api/shared/validators.py"""

	def test_validate_date_string(self):
		self.assertEqual(validate_date_string(" 2025-06-10 "), "2025-06-10")
		with self.assertRaises(ValidationError):
			validate_date_string("2025/06/10")
		with self.assertRaises(ValidationError):
			validate_date_string("2025-02-30")
		with self.assertRaises(ValidationError):
			validate_date_string("")

	def test_validate_time_string(self):
		self.assertEqual(validate_time_string("9:30"), "9:30")
		with self.assertRaises(ValidationError):
			validate_time_string("930")
		with self.assertRaises(ValidationError):
			validate_time_string("24:00")
		with self.assertRaises(ValidationError):
			validate_time_string("10:60")

	def test_validate_docname(self):
		self.assertEqual(validate_docname("apt_abc123"), "apt_abc123")
		self.assertEqual(validate_docname("apt;1--x"), "apt;1--x")
		with self.assertRaises(ValidationError):
			validate_docname("x" * 141)
		with self.assertRaises(ValidationError):
			validate_docname("<script>alert(1)</script>")


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
