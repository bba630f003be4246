"""
Tests for scheduling/booking.py

Tests the booking and reschedule decisions: validation order,
hard rejections, closure confirmation on reschedule and commits.
"""

import unittest

from agenda_empresarial.agenda_empresarial.events import AgendaEvent, EventChannel
from agenda_empresarial.agenda_empresarial.exceptions import DoesNotExistError
from agenda_empresarial.agenda_empresarial.models import Appointment, Client, Service
from agenda_empresarial.agenda_empresarial.scheduling.booking import (
	OUTCOME_ACCEPTED,
	OUTCOME_NEEDS_CONFIRMATION,
	OUTCOME_REJECTED,
	REASON_CLOSURE_CONFIRM,
	REASON_CONFLICT,
	REASON_DAY_CLOSED,
	REASON_IN_CLOSURE,
	REASON_MISSING_SELECTION,
	REASON_OUTSIDE_HOURS,
	book_appointment,
	new_id,
	reschedule_appointment,
	validate_booking,
)
from agenda_empresarial.agenda_empresarial.store import InMemoryStore

TUESDAY = "2025-06-10"
SUNDAY = "2025-06-08"


def make_store(**settings):
	"""Store con dos servicios, un cliente y cierre de almuerzo."""
	base = {
		"workStart": "09:00",
		"workEnd": "18:00",
		"slotMinutes": 30,
		"blockedWeekdays": [0],
		"dailyClosures": [{"start": "12:00", "end": "14:00"}],
	}
	base.update(settings)
	return InMemoryStore(
		settings=base,
		services=[
			Service(id="srv_60", nome="Consulta Padrão", duracao_min=60, preco=60),
			Service(id="srv_30", nome="Procedimento Curto", duracao_min=30, preco=35),
		],
		clients=[Client(id="cli_1", nome="Ana")],
	)


class TestNewBooking(unittest.TestCase):
	"""Tests for book_appointment."""

	def setUp(self):
		"""Set up an empty agenda."""
		self.store = make_store()

	def test_accepted_booking(self):
		"""Test a valid booking is committed as open."""
		decision = book_appointment(self.store, TUESDAY, "10:00", "srv_60", "cli_1", staff_id="stf_1")

		self.assertEqual(decision["outcome"], OUTCOME_ACCEPTED)
		self.assertIsNone(decision["reason"])

		appointment = decision["appointment"]
		self.assertEqual(appointment["dateISO"], TUESDAY)
		self.assertEqual(appointment["start"], "10:00")
		self.assertEqual(appointment["end"], "11:00")
		self.assertEqual(appointment["status"], "open")
		self.assertEqual(appointment["serviceId"], "srv_60")
		self.assertEqual(appointment["clientId"], "cli_1")
		self.assertIn("createdAt", appointment)
		self.assertTrue(appointment["id"].startswith("apt_"))

		stored = self.store.get_appointments()
		self.assertEqual(len(stored), 1)
		self.assertEqual(stored[0].id, appointment["id"])

	def test_missing_selection(self):
		"""Test that service and client are required."""
		for service_id, client_id in [(None, "cli_1"), ("srv_60", None), ("", "")]:
			decision = book_appointment(self.store, TUESDAY, "10:00", service_id, client_id)
			self.assertEqual(decision["outcome"], OUTCOME_REJECTED)
			self.assertEqual(decision["reason"], REASON_MISSING_SELECTION)

		self.assertEqual(self.store.get_appointments(), [])

	def test_outside_business_hours(self):
		"""Test the start and unwrapped end guards."""
		early = book_appointment(self.store, TUESDAY, "08:30", "srv_30", "cli_1")
		late = book_appointment(self.store, TUESDAY, "17:30", "srv_60", "cli_1")

		self.assertEqual(early["reason"], REASON_OUTSIDE_HOURS)
		self.assertEqual(late["reason"], REASON_OUTSIDE_HOURS)

		# Termina exactamente al cierre
		last = book_appointment(self.store, TUESDAY, "17:00", "srv_60", "cli_1")
		self.assertEqual(last["outcome"], OUTCOME_ACCEPTED)
		self.assertEqual(last["appointment"]["end"], "18:00")

	def test_end_past_midnight_is_outside_hours(self):
		"""Test that a late service is rejected, not wrapped."""
		store = make_store(workStart="09:00", workEnd="23:59", dailyClosures=[])
		decision = book_appointment(store, TUESDAY, "23:30", "srv_60", "cli_1")

		self.assertEqual(decision["reason"], REASON_OUTSIDE_HOURS)

	def test_day_closed_weekday(self):
		"""Test a booking on a blocked Sunday."""
		decision = book_appointment(self.store, SUNDAY, "10:00", "srv_60", "cli_1")

		self.assertEqual(decision["outcome"], OUTCOME_REJECTED)
		self.assertEqual(decision["reason"], REASON_DAY_CLOSED)
		self.assertTrue(decision["details"]["is_weekday_closed"])
		self.assertFalse(decision["details"]["is_holiday"])

	def test_day_closed_annual_holiday(self):
		"""Test an annual holiday rejects the same day in another year."""
		store = make_store(markers=[{"kind": "holiday", "dateISO": "2025-01-01", "annual": True}])
		decision = book_appointment(store, "2030-01-01", "10:00", "srv_60", "cli_1")

		self.assertEqual(decision["outcome"], OUTCOME_REJECTED)
		self.assertEqual(decision["reason"], REASON_DAY_CLOSED)
		self.assertTrue(decision["details"]["is_holiday"])

	def test_closure_rejects_new_booking(self):
		"""Test that new bookings over a closure are rejected outright."""
		decision = book_appointment(self.store, TUESDAY, "11:30", "srv_60", "cli_1")

		self.assertEqual(decision["outcome"], OUTCOME_REJECTED)
		self.assertEqual(decision["reason"], REASON_IN_CLOSURE)
		self.assertEqual(self.store.get_appointments(), [])

	def test_time_conflict(self):
		"""Test that overlapping an active appointment is rejected."""
		book_appointment(self.store, TUESDAY, "10:00", "srv_30", "cli_1")
		decision = book_appointment(self.store, TUESDAY, "10:15", "srv_30", "cli_1")

		self.assertEqual(decision["outcome"], OUTCOME_REJECTED)
		self.assertEqual(decision["reason"], REASON_CONFLICT)
		self.assertEqual(len(decision["details"]["overlapping_appointments"]), 1)

	def test_canceled_does_not_conflict(self):
		"""Test that a canceled appointment frees its slot."""
		first = book_appointment(self.store, TUESDAY, "10:00", "srv_30", "cli_1")
		self.store.commit_appointment_patch(first["appointment"]["id"], {"status": "canceled"})

		second = book_appointment(self.store, TUESDAY, "10:00", "srv_30", "cli_1")
		self.assertEqual(second["outcome"], OUTCOME_ACCEPTED)

	def test_validation_order(self):
		"""Test that outside hours wins over a closed day."""
		decision = book_appointment(self.store, SUNDAY, "08:00", "srv_60", "cli_1")
		self.assertEqual(decision["reason"], REASON_OUTSIDE_HOURS)

		missing = book_appointment(self.store, SUNDAY, "08:00", "srv_60", None)
		self.assertEqual(missing["reason"], REASON_MISSING_SELECTION)

	def test_unknown_service(self):
		"""Test that an unknown service id is a missing record."""
		with self.assertRaises(DoesNotExistError):
			book_appointment(self.store, TUESDAY, "10:00", "srv_nope", "cli_1")

	def test_event_published(self):
		"""Test that accepted bookings publish appointment_created."""
		channel = EventChannel()
		received = []
		channel.subscribe(AgendaEvent.APPOINTMENT_CREATED, lambda event, payload: received.append(payload))

		book_appointment(self.store, TUESDAY, "10:00", "srv_30", "cli_1", channel=channel)
		book_appointment(self.store, SUNDAY, "10:00", "srv_30", "cli_1", channel=channel)

		self.assertEqual(len(received), 1)
		self.assertEqual(received[0]["appointment"]["start"], "10:00")

	def test_validate_does_not_commit(self):
		"""Test that validate_booking is a pure read."""
		decision = validate_booking(self.store, TUESDAY, "10:00", "srv_60", client_id="cli_1")

		self.assertEqual(decision["outcome"], OUTCOME_ACCEPTED)
		self.assertEqual(decision["details"]["end"], "11:00")
		self.assertEqual(self.store.get_appointments(), [])


class TestReschedule(unittest.TestCase):
	"""Tests for reschedule_appointment."""

	def setUp(self):
		"""Set up an agenda with one booked appointment."""
		self.store = make_store()
		self.store.commit_new_appointment(Appointment(
			id="apt_1",
			date_iso=TUESDAY,
			start="10:00",
			end="10:30",
			service_id="srv_30",
			client_id="cli_1",
			status="confirmed",
		))

	def test_closure_needs_confirmation(self):
		"""Test that a closure asks for confirmation and changes nothing."""
		decision = reschedule_appointment(self.store, "apt_1", TUESDAY, "12:30", "srv_30")

		self.assertEqual(decision["outcome"], OUTCOME_NEEDS_CONFIRMATION)
		self.assertEqual(decision["reason"], REASON_CLOSURE_CONFIRM)
		self.assertIsNone(decision["appointment"])

		unchanged = self.store.get_appointment("apt_1")
		self.assertEqual(unchanged.start, "10:00")
		self.assertEqual(unchanged.status, "confirmed")

	def test_closure_with_override(self):
		"""Test that override=True applies the move."""
		decision = reschedule_appointment(self.store, "apt_1", TUESDAY, "12:30", "srv_30", override=True)

		self.assertEqual(decision["outcome"], OUTCOME_ACCEPTED)
		moved = self.store.get_appointment("apt_1")
		self.assertEqual((moved.start, moved.end), ("12:30", "13:00"))
		self.assertEqual(moved.status, "open")

	def test_status_reset_to_open(self):
		"""Test that a canceled appointment comes back as open."""
		self.store.commit_appointment_patch("apt_1", {"status": "canceled"})
		decision = reschedule_appointment(self.store, "apt_1", "2025-06-11", "09:00", "srv_60")

		self.assertEqual(decision["outcome"], OUTCOME_ACCEPTED)
		moved = self.store.get_appointment("apt_1")
		self.assertEqual(moved.date_iso, "2025-06-11")
		self.assertEqual(moved.end, "10:00")
		self.assertEqual(moved.service_id, "srv_60")
		self.assertEqual(moved.status, "open")
		self.assertEqual(moved.client_id, "cli_1")

	def test_does_not_conflict_with_itself(self):
		"""Test shifting an appointment over its own previous slot."""
		decision = reschedule_appointment(self.store, "apt_1", TUESDAY, "10:15", "srv_30")
		self.assertEqual(decision["outcome"], OUTCOME_ACCEPTED)

	def test_conflict_with_other(self):
		"""Test that other appointments still block a reschedule."""
		book_appointment(self.store, TUESDAY, "15:00", "srv_60", "cli_1")
		decision = reschedule_appointment(self.store, "apt_1", TUESDAY, "15:30", "srv_30", override=True)

		self.assertEqual(decision["outcome"], OUTCOME_REJECTED)
		self.assertEqual(decision["reason"], REASON_CONFLICT)

	def test_hard_rules_still_reject(self):
		"""Test that closed days and hours are not confirmable."""
		closed = reschedule_appointment(self.store, "apt_1", SUNDAY, "10:00", "srv_30", override=True)
		late = reschedule_appointment(self.store, "apt_1", TUESDAY, "17:45", "srv_30", override=True)

		self.assertEqual(closed["reason"], REASON_DAY_CLOSED)
		self.assertEqual(late["reason"], REASON_OUTSIDE_HOURS)

	def test_client_not_required(self):
		"""Test that only the service is required when rescheduling."""
		missing = reschedule_appointment(self.store, "apt_1", TUESDAY, "10:00", None)
		self.assertEqual(missing["reason"], REASON_MISSING_SELECTION)

		ok = reschedule_appointment(self.store, "apt_1", TUESDAY, "16:00", "srv_30")
		self.assertEqual(ok["outcome"], OUTCOME_ACCEPTED)

	def test_unknown_appointment(self):
		"""Test that an unknown id is a missing record."""
		with self.assertRaises(DoesNotExistError):
			reschedule_appointment(self.store, "apt_nope", TUESDAY, "10:00", "srv_30")

	def test_event_published(self):
		"""Test that a reschedule publishes the previous and new record."""
		channel = EventChannel()
		received = []
		channel.subscribe(AgendaEvent.APPOINTMENT_RESCHEDULED, lambda event, payload: received.append(payload))

		reschedule_appointment(self.store, "apt_1", TUESDAY, "16:00", "srv_30", channel=channel)

		self.assertEqual(len(received), 1)
		self.assertEqual(received[0]["previous"]["start"], "10:00")
		self.assertEqual(received[0]["appointment"]["start"], "16:00")


class TestNewId(unittest.TestCase):
	"""Tests for id generation."""

	def test_format(self):
		"""Test prefix and base-36 body."""
		value = new_id("cli")
		prefix, _, body = value.partition("_")

		self.assertEqual(prefix, "cli")
		self.assertTrue(body.isalnum())
		self.assertEqual(body, body.lower())
		self.assertGreater(len(body), 7)

	def test_unique(self):
		"""Test that consecutive ids differ."""
		self.assertEqual(len({new_id() for _ in range(200)}), 200)


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
