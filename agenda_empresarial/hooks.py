app_name = "agenda_empresarial"
app_title = "Agenda Empresarial"
app_publisher = "Sebastian Ortiz Valencia"
app_description = "Agenda de citas para pequeños negocios: horarios, cierres y reservas"
app_email = "sebastianortiz989@gmail.com"
app_license = "mit"

# Default Settings
# ------------------
# Ajustes de un negocio recién instalado

default_settings = {
	"workStart": "09:00",
	"workEnd": "18:00",
	"slotMinutes": 30,
	"blockedWeekdays": [0],
	"dailyClosures": [],
	"weekdayClosures": [],
	"markers": [],
	"timezone": "Europe/Lisbon",
}

# Seed Data
# ------------------
# Catálogo inicial

seed_services = [
	{"id": "srv_consulta", "nome": "Consulta Padrão", "duracaoMin": 60, "preco": 60},
	{"id": "srv_curto", "nome": "Procedimento Curto", "duracaoMin": 30, "preco": 35},
]

seed_staff = [
	{"id": "stf_principal", "nome": "Profissional Principal", "funcao": "Designer"},
]

# Id prefixes
# ------------------

appointment_id_prefix = "apt"

# Event Handlers
# ---------------
# Handlers subscribed by EventChannel.from_hooks()

event_handlers = {
	"appointment_created": [
		"agenda_empresarial.agenda_empresarial.events.log_agenda_event"
	],
	"appointment_rescheduled": [
		"agenda_empresarial.agenda_empresarial.events.log_agenda_event"
	],
	"appointment_status_changed": [
		"agenda_empresarial.agenda_empresarial.events.log_agenda_event"
	],
}
