"""
Client-side shaping of the lists fetched from the clinic API.

The API returns plain resource lists. The dashboards join them by id (patient
and service names), search, sort, deduplicate, and summarize them here so that
the views stay free of list logic.
"""
# clinic/listings.py

import datetime
from collections import Counter

import pandas as pd

SORT_OPTIONS = ('Default', 'A-Z', 'Date')
UNKNOWN_PATIENT = 'Unknown Patient'
UNKNOWN_SERVICE = 'Unknown Service'


def parse_datetime(value):
    """Parses API datetimes such as '2024-05-01 09:30:00' or ISO strings.

    Returns:
        datetime.datetime or None: The parsed value, or None if unparseable.
    """
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value
    try:
        parsed = datetime.datetime.fromisoformat(str(value).replace('Z', '+00:00').replace(' ', 'T', 1))
    except ValueError:
        return None
    # Server timestamps may carry an offset; compare everything as naive local time.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _sort_key_datetime(value):
    return parse_datetime(value) or datetime.datetime.min


def combine_date_time(date_value, time_value):
    """Joins separate date and time inputs into 'YYYY-MM-DD HH:MM:SS'."""
    if not date_value or not time_value:
        return ''
    if isinstance(date_value, datetime.date):
        date_value = date_value.isoformat()
    if isinstance(time_value, datetime.time):
        time_value = time_value.strftime('%H:%M:%S')
    if len(time_value) == 5:
        time_value = f"{time_value}:00"
    return f"{date_value} {time_value}"


def format_date(value):
    parsed = parse_datetime(value)
    return parsed.strftime('%B %d, %Y') if parsed else (value or '')


def format_datetime(value):
    parsed = parse_datetime(value)
    return parsed.strftime('%B %d, %Y %I:%M %p') if parsed else (value or '')


# Lookups

def find_patient(patients, patient_id):
    return next((p for p in patients if p.get('patientId') == patient_id), None)


def patient_name(patients, patient_id):
    patient = find_patient(patients, patient_id)
    if not patient:
        return UNKNOWN_PATIENT
    return f"{patient.get('firstName', '')} {patient.get('lastName', '')}".strip()


def patient_email(patients, patient_id):
    patient = find_patient(patients, patient_id)
    return patient.get('email') or 'N/A' if patient else 'N/A'


def service_name(services, service_id, default=UNKNOWN_SERVICE):
    service = next((s for s in services if s.get('serviceId') == service_id), None)
    return service.get('serviceName') if service else default


def service_price(services, service_id):
    service = next((s for s in services if s.get('serviceId') == service_id), None)
    return service.get('price') if service else '0'


# Patient views

def pending_excluding_accepted(pending, accepted):
    """Drops pending appointments that already have an accepted counterpart."""
    accepted_ids = {item.get('appointmentId') for item in accepted}
    return [item for item in pending if item.get('appointmentId') not in accepted_ids]


def recent_activities(appointments, services, limit=3):
    """Summarizes a patient's most recent bookings for the dashboard home.

    Returns:
        list: Dictionaries with `id`, `type`, `date`, and `status`, newest first.
    """
    ordered = sorted(appointments, key=lambda a: _sort_key_datetime(a.get('createdAt')), reverse=True)
    return [
        {
            'id': appointment.get('appointmentId'),
            'type': f"You booked {service_name(services, appointment.get('serviceId'), 'Medical Service')}",
            'date': format_date(appointment.get('createdAt')),
            'status': appointment.get('status') or 'Pending',
        }
        for appointment in ordered[:limit]
    ]


# Staff and admin views

def _sort_appointments(items, patients, sort_by):
    if sort_by == 'A-Z':
        return sorted(items, key=lambda a: patient_name(patients, a.get('patientId')).lower())
    if sort_by == 'Date':
        return sorted(items, key=lambda a: _sort_key_datetime(a.get('preferredDateTime')))
    return list(items)


def filter_staff_appointments(appointments, patients, services, search='', sort_by='Default'):
    """Returns the appointments still awaiting staff action.

    Appointments whose status is 'accepted' (any case) are excluded. The search
    term matches the patient name, the service name, or the status.
    """
    term = (search or '').lower()
    filtered = []
    for appointment in appointments:
        status = (appointment.get('status') or '').lower()
        if status == 'accepted':
            continue
        haystack = (
            patient_name(patients, appointment.get('patientId')).lower(),
            service_name(services, appointment.get('serviceId')).lower(),
            status,
        )
        if any(term in field for field in haystack):
            filtered.append(appointment)
    return _sort_appointments(filtered, patients, sort_by)


def filter_accepted_appointments(accepted, patients, services, search='', sort_by='Default'):
    """Searches accepted appointments by patient or service name."""
    term = (search or '').lower()
    filtered = [
        appointment for appointment in accepted
        if term in patient_name(patients, appointment.get('patientId')).lower()
        or term in service_name(services, appointment.get('serviceId')).lower()
    ]
    return _sort_appointments(filtered, patients, sort_by)


def filter_patient_records(attended, patients, services, search=''):
    """Searches attended appointments, newest first."""
    term = (search or '').lower()
    filtered = [
        record for record in attended
        if term in patient_name(patients, record.get('patientId')).lower()
        or term in patient_email(patients, record.get('patientId')).lower()
        or term in service_name(services, record.get('serviceId')).lower()
        or term in (record.get('symptom') or '').lower()
    ]
    return sorted(filtered, key=lambda r: _sort_key_datetime(r.get('preferredDateTime')), reverse=True)


def filter_reminders(reminders, patients, search=''):
    """Searches reminders by patient name, message, or type, newest first."""
    term = (search or '').lower()
    filtered = [
        reminder for reminder in reminders
        if term in patient_name(patients, reminder.get('patientId')).lower()
        or term in (reminder.get('message') or '').lower()
        or term in (reminder.get('reminderType') or '').lower()
    ]
    return sorted(filtered, key=lambda r: _sort_key_datetime(r.get('preferredDateTime')), reverse=True)


def filter_staff_members(staff, search=''):
    """Searches staff by name, email, or phone, sorted by full name."""
    term = (search or '').lower()

    def full_name(member):
        return f"{member.get('firstName', '')} {member.get('lastName', '')}"

    filtered = [
        member for member in staff
        if term in full_name(member).lower()
        or term in (member.get('email') or '').lower()
        or (search or '') in (member.get('phone') or '')
    ]
    return sorted(filtered, key=lambda m: full_name(m).lower())


def filter_services(services, search=''):
    term = (search or '').lower()
    return [
        service for service in services
        if term in (service.get('serviceName') or '').lower()
        or term in (service.get('description') or '').lower()
    ]


def walk_in_patients(patients):
    return [patient for patient in patients if patient.get('role') == 'Walkin']


def appointment_stats(appointments, today=None):
    """Counts pending appointments and those preferred for today."""
    today = today or datetime.date.today()
    pending = [a for a in appointments if a.get('status') == 'Pending']
    todays = [
        a for a in appointments
        if (parse_datetime(a.get('preferredDateTime')) or datetime.datetime.min).date() == today
    ]
    return {'upcomingAppointments': len(pending), 'todayAppointments': len(todays)}


def accepted_stats(accepted):
    """Counts accepted appointments that are ongoing or completed."""
    ongoing = [a for a in accepted if not a.get('isAttended')]
    completed = [a for a in accepted if a.get('isAttended')]
    return {'ongoingAppointments': len(ongoing), 'completedAppointments': len(completed)}


def walk_ins_today(patients, today=None):
    today = today or datetime.date.today()
    return len([
        p for p in walk_in_patients(patients)
        if (parse_datetime(p.get('createdAt')) or datetime.datetime.min).date() == today
    ])


def most_booked_service(appointments, services):
    """Returns the (service name, count) booked most often, or ('No data', 0)."""
    if not appointments:
        return 'No data', 0
    counts = Counter(service_name(services, a.get('serviceId')) for a in appointments)
    return counts.most_common(1)[0]


def feedback_stats(feedbacks):
    """Summarizes ratings as an average (one decimal), a total, and a 1-5 distribution."""
    if not feedbacks:
        return {'average': 0, 'total': 0, 'distribution': {}}
    ratings = [int(f.get('rating') or 0) for f in feedbacks]
    distribution = {star: ratings.count(star) for star in range(1, 6)}
    return {
        'average': round(sum(ratings) / len(ratings), 1),
        'total': len(ratings),
        'distribution': distribution,
    }


def records_frame(records, patients, services):
    """Builds a table of attended appointments for display and CSV export."""
    rows = [
        {
            'Patient': patient_name(patients, record.get('patientId')),
            'Email': patient_email(patients, record.get('patientId')),
            'Service': service_name(services, record.get('serviceId')),
            'Appointment': format_datetime(record.get('preferredDateTime')),
            'Symptom': record.get('symptom', ''),
        }
        for record in records
    ]
    return pd.DataFrame(rows, columns=['Patient', 'Email', 'Service', 'Appointment', 'Symptom'])
