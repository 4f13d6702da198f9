"""
This module provides the HTTP client for the external clinic API.

All business logic and persistence live behind the API; this client only maps
the portal's actions onto REST calls with JSON bodies. It is responsible for:
- Building requests against a configurable base URL with a shared `requests.Session`.
- Turning non-2xx responses into `ApiError` carrying the server's `error` text.
- Turning transport failures into `NetworkError`.
- Unwrapping login responses into typed session records.
- Running independent reads concurrently for the dashboards (`fetch_all`).

Nothing is retried and no timeout is applied unless one is configured; a
failed call surfaces once and the user retries by hand.
"""
# clinic/api.py

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests

from clinic.config import DEFAULT_API_BASE_URL
from clinic.models import record_type_for

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please try again."

LOGIN_RESOURCES = {
    'patient': 'patients',
    'staff': 'staff',
    'admin': 'admins',
}


class ClinicApiError(Exception):
    """Base class for failures talking to the clinic API."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        return self.message


class ApiError(ClinicApiError):
    """The API answered with a non-2xx status."""


class NetworkError(ClinicApiError):
    """The request never reached the API or no response arrived."""

    def __init__(self, message=NETWORK_ERROR_MESSAGE):
        super().__init__(message)


def _error_message(response, default):
    """Extracts the user-facing error text from a failed response."""
    try:
        data = response.json()
    except ValueError:
        text = (response.text or '').strip()
        return text or default
    if isinstance(data, dict):
        return data.get('error') or data.get('message') or default
    if isinstance(data, str) and data:
        return data
    return default


def walk_in_email(first_name, last_name):
    """Returns the placeholder email used for walk-in patients without one."""
    return f"{first_name.strip().lower()}.{last_name.strip().lower()}@walkin.temp"


def walk_in_password(now=None):
    """Generates the temporary password given to a walk-in patient."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"walkin{str(millis)[-4:]}"


class ClinicApiClient:
    """A thin REST client for the clinic API.

    Args:
        base_url (str): The API root, e.g. 'http://localhost:3000/api'.
        session (requests.Session, optional): A session to reuse; one is created if omitted.
        timeout (float, optional): Per-request timeout in seconds; None waits indefinitely.
    """

    def __init__(self, base_url=DEFAULT_API_BASE_URL, session=None, timeout=None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, payload=None, default_error="Request failed", empty_on_404=False):
        url = f"{self.base_url}/{path.lstrip('/')}"
        kwargs = {'timeout': self.timeout}
        if payload is not None:
            kwargs['json'] = payload
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError() from e

        if empty_on_404 and response.status_code == 404:
            return []
        if not response.ok:
            message = _error_message(response, default_error)
            logger.info("%s %s returned %s: %s", method, url, response.status_code, message)
            raise ApiError(message, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # Authentication

    def login(self, role, email, password):
        """Logs in a patient, staff member, or admin.

        Returns:
            SessionRecord: The typed session built from the response wrapper.

        Raises:
            ApiError: If the credentials are rejected or the response is unusable.
            NetworkError: If the API cannot be reached.
        """
        resource = LOGIN_RESOURCES[role]
        data = self._request('POST', f"{resource}/login",
                             {'email': email, 'password': password},
                             default_error="Login failed")
        body = data.get(role) if isinstance(data, dict) else None
        if not isinstance(body, dict):
            raise ApiError("Login failed")
        try:
            return record_type_for(role).from_dict(body)
        except ValueError as e:
            raise ApiError(f"Login failed: {e}") from e

    def send_reset_link(self, email):
        return self._request('POST', "patients/send-reset-link", {'email': email})

    def reset_password(self, token, password):
        return self._request('POST', "auth/reset-password", {'token': token, 'password': password},
                             default_error="Password reset failed")

    # Patients

    def list_patients(self):
        return self._request('GET', "patients", default_error="Failed to fetch patients") or []

    def get_patient(self, patient_id):
        return self._request('GET', f"patients/{patient_id}", default_error="Failed to fetch profile")

    def register_patient(self, form):
        return self._request('POST', "patients", form,
                             default_error="Registration failed. Please try again.")

    def update_patient(self, patient_id, changes):
        return self._request('PUT', f"patients/{patient_id}", changes,
                             default_error="Failed to update profile")

    def register_walk_in(self, form, now=None):
        """Registers a walk-in patient with a generated temporary password.

        Returns:
            tuple: (response body, temporary password).
        """
        temp_password = walk_in_password(now)
        payload = dict(form)
        payload['password'] = temp_password
        payload['role'] = 'Walkin'
        payload['email'] = form.get('email') or walk_in_email(form.get('firstName', ''), form.get('lastName', ''))
        created = self._request('POST', "patients", payload,
                                default_error="Failed to register walk-in patient")
        return created, temp_password

    # Staff

    def list_staff(self):
        return self._request('GET', "staff", default_error="Failed to fetch staff") or []

    def create_staff(self, form):
        return self._request('POST', "staff", form, default_error="Failed to create staff member")

    def update_staff(self, staff_id, changes):
        return self._request('PUT', f"staff/{staff_id}", changes,
                             default_error="Failed to update staff member")

    def delete_staff(self, staff_id):
        return self._request('DELETE', f"staff/{staff_id}", default_error="Failed to delete staff member")

    # Admins

    def get_admin(self, admin_id):
        return self._request('GET', f"admins/{admin_id}", default_error="Failed to fetch profile")

    def update_admin(self, admin_id, changes):
        return self._request('PUT', f"admins/{admin_id}", changes,
                             default_error="Failed to update profile")

    # Medical services

    def list_services(self):
        return self._request('GET', "medical-services", default_error="Failed to fetch services") or []

    def create_service(self, service_name, price, description):
        return self._request('POST', "medical-services",
                             {'serviceName': service_name, 'price': price, 'description': description},
                             default_error="Failed to create service")

    def update_service(self, service_id, service_name, price, description):
        return self._request('PUT', f"medical-services/{service_id}",
                             {'serviceName': service_name, 'price': price, 'description': description},
                             default_error="Failed to update service")

    def delete_service(self, service_id):
        return self._request('DELETE', f"medical-services/{service_id}",
                             default_error="Failed to delete service")

    # Appointments

    def list_appointments(self):
        return self._request('GET', "appointments", default_error="Failed to fetch appointments") or []

    def list_patient_appointments(self, patient_id):
        return self._request('GET', f"appointments/patient/{patient_id}",
                             default_error="Error fetching appointments") or []

    def book_appointment(self, patient_id, service_id, preferred_datetime, symptom):
        return self._request('POST', "appointments", {
            'patientId': patient_id,
            'serviceId': service_id,
            'preferredDateTime': preferred_datetime,
            'symptom': symptom,
        }, default_error="Failed to book appointment")

    def update_appointment(self, appointment_id, preferred_datetime, symptom):
        return self._request('PUT', f"appointments/{appointment_id}",
                             {'preferredDateTime': preferred_datetime, 'symptom': symptom},
                             default_error="Failed to update appointment")

    def cancel_appointment(self, appointment_id):
        return self._request('DELETE', f"appointments/{appointment_id}",
                             default_error="Failed to cancel appointment")

    # Accepted appointments

    def list_accepted(self):
        return self._request('GET', "accepted-appointments",
                             default_error="Failed to fetch accepted appointments") or []

    def list_patient_accepted(self, patient_id):
        return self._request('GET', f"accepted-appointments/patient/{patient_id}",
                             default_error="Error fetching appointments") or []

    def list_attended(self):
        return self._request('GET', "accepted-appointments/attended",
                             default_error="Failed to fetch patient records") or []

    def accept_appointment(self, appointment_id):
        return self._request('POST', f"accepted-appointments/accept/{appointment_id}", {},
                             default_error="Failed to accept appointment")

    def mark_attended(self, accepted_id):
        return self._request('PUT', f"accepted-appointments/{accepted_id}/attend", {},
                             default_error="Failed to mark appointment as attended")

    # Feedback

    def list_feedback(self):
        return self._request('GET', "feedback", default_error="Failed to fetch feedback") or []

    def list_patient_feedback(self, patient_id):
        """Returns a patient's feedback; a 404 means none has been given yet."""
        return self._request('GET', f"feedback/patient/{patient_id}",
                             default_error="Failed to fetch feedbacks", empty_on_404=True) or []

    def submit_feedback(self, patient_id, rating, comment, is_anonymous=False):
        return self._request('POST', "feedback", {
            'patientId': patient_id,
            'rating': int(rating),
            'comment': comment.strip(),
            'isAnonymous': bool(is_anonymous),
        }, default_error="Failed to submit feedback")

    def update_feedback(self, feedback_id, patient_id, rating, comment, is_anonymous=False):
        return self._request('PUT', f"feedback/{feedback_id}", {
            'patientId': patient_id,
            'rating': int(rating),
            'comment': comment.strip(),
            'isAnonymous': bool(is_anonymous),
        }, default_error="Failed to submit feedback")

    def delete_feedback(self, feedback_id):
        return self._request('DELETE', f"feedback/{feedback_id}", default_error="Failed to delete feedback")

    # Reminders

    def list_reminders(self):
        return self._request('GET', "reminders", default_error="Failed to fetch reminders") or []

    def list_patient_reminders(self, patient_id):
        return self._request('GET', f"reminders/patient/{patient_id}",
                             default_error="Failed to fetch reminders") or []

    def create_reminder(self, patient_id, reminder_type, preferred_datetime, message):
        return self._request('POST', "reminders", {
            'patientId': patient_id,
            'reminderType': reminder_type,
            'preferredDateTime': preferred_datetime,
            'message': message,
            'isRead': False,
        }, default_error="Failed to create reminder")

    def mark_reminder_read(self, reminder_id):
        return self._request('PUT', f"reminders/{reminder_id}/read", {},
                             default_error="Failed to update reminder")

    def mark_reminder_unread(self, reminder_id):
        return self._request('PUT', f"reminders/{reminder_id}/unread", {},
                             default_error="Failed to update reminder")

    def delete_reminder(self, reminder_id):
        return self._request('DELETE', f"reminders/{reminder_id}", default_error="Failed to delete reminder")


def fetch_all(calls, max_workers=6):
    """Runs independent API calls concurrently.

    Each call resolves on its own; one failure does not cancel the others.

    Args:
        calls (dict): Maps a name to a zero-argument callable.
        max_workers (int): Upper bound on concurrent requests.

    Returns:
        dict: Maps each name to its result, or to the `ClinicApiError` it raised.

    Raises:
        Exception: Any other error raised by a call, once all calls have settled.
    """
    results = {}
    if not calls:
        return results
    with ThreadPoolExecutor(max_workers=min(max_workers, len(calls))) as executor:
        futures = {executor.submit(call): name for name, call in calls.items()}
        for future in as_completed(futures):
            name = futures[future]
            try:
                results[name] = future.result()
            except ClinicApiError as e:
                logger.warning("Dashboard load of %s failed: %s", name, e)
                results[name] = e
    return results
