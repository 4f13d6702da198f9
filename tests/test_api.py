"""
Unit tests for the clinic API client.

The `requests.Session` is replaced by a mock, so these tests check which
requests are built and how responses and transport failures are surfaced.
"""
import threading

import pytest
import requests

from clinic.api import (NETWORK_ERROR_MESSAGE, ApiError, ClinicApiClient, NetworkError, fetch_all,
                        walk_in_email, walk_in_password)
from clinic.models import AdminSession, PatientSession, StaffSession


def _sent(http_session):
    """Returns (method, url, json body) of the last request made."""
    args, kwargs = http_session.request.call_args
    return args[0], args[1], kwargs.get('json')


@pytest.mark.parametrize("role, resource, record_type, body", [
    ('patient', 'patients', PatientSession, {'patientId': 'P1', 'firstName': 'Ana'}),
    ('staff', 'staff', StaffSession, {'staffId': 'S1', 'firstName': 'Ben'}),
    ('admin', 'admins', AdminSession, {'id': 'A1', 'firstName': 'Cy'}),
])
def test_login_unwraps_role_record(api, http_session, fake_response, role, resource, record_type, body):
    http_session.request.return_value = fake_response(200, {role: body})

    record = api.login(role, 'user@clinic.test', 'secret')

    assert isinstance(record, record_type)
    assert record.first_name == body['firstName']
    assert _sent(http_session) == ('POST', f'http://clinic.test/api/{resource}/login',
                                   {'email': 'user@clinic.test', 'password': 'secret'})


def test_login_surfaces_server_error_verbatim(api, http_session, fake_response):
    http_session.request.return_value = fake_response(401, {'error': 'Invalid email or password'})

    with pytest.raises(ApiError) as exc_info:
        api.login('patient', 'a@b.co', 'nope')

    assert str(exc_info.value) == 'Invalid email or password'
    assert exc_info.value.status_code == 401


def test_login_without_wrapper_fails(api, http_session, fake_response):
    http_session.request.return_value = fake_response(200, {'message': 'ok'})
    with pytest.raises(ApiError, match="Login failed"):
        api.login('staff', 'a@b.co', 'pw')


def test_transport_failure_becomes_network_error(api, http_session):
    http_session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(NetworkError) as exc_info:
        api.list_services()

    assert str(exc_info.value) == NETWORK_ERROR_MESSAGE
    assert http_session.request.call_count == 1


def test_error_message_falls_back_to_default_and_text(api, http_session, fake_response):
    http_session.request.return_value = fake_response(500, {})
    with pytest.raises(ApiError, match="Failed to fetch services"):
        api.list_services()

    http_session.request.return_value = fake_response(502, text='Bad gateway')
    with pytest.raises(ApiError, match="Bad gateway"):
        api.list_services()


def test_no_timeout_unless_configured(http_session, fake_response):
    ClinicApiClient("http://clinic.test/api/", session=http_session).list_staff()
    assert http_session.request.call_args.kwargs['timeout'] is None
    assert http_session.request.call_args.args[1] == 'http://clinic.test/api/staff'

    ClinicApiClient("http://clinic.test/api", session=http_session, timeout=5.0).list_staff()
    assert http_session.request.call_args.kwargs['timeout'] == 5.0


def test_empty_body_returns_none_and_lists_default_to_empty(api, http_session, fake_response):
    http_session.request.return_value = fake_response(204)
    assert api.delete_service(3) is None
    assert api.list_appointments() == []


def test_patient_feedback_404_means_none(api, http_session, fake_response):
    http_session.request.return_value = fake_response(404, {'error': 'Not found'})
    assert api.list_patient_feedback('P1') == []

    with pytest.raises(ApiError):
        api.list_feedback()


def test_booking_and_appointment_requests(api, http_session):
    api.book_appointment('P1', 4, '2024-05-01 09:30:00', 'Cough')
    assert _sent(http_session) == ('POST', 'http://clinic.test/api/appointments', {
        'patientId': 'P1', 'serviceId': 4, 'preferredDateTime': '2024-05-01 09:30:00', 'symptom': 'Cough',
    })

    api.update_appointment(9, '2024-05-02 10:00:00', 'Fever')
    assert _sent(http_session) == ('PUT', 'http://clinic.test/api/appointments/9',
                                   {'preferredDateTime': '2024-05-02 10:00:00', 'symptom': 'Fever'})

    api.accept_appointment(9)
    assert _sent(http_session) == ('POST', 'http://clinic.test/api/accepted-appointments/accept/9', {})

    api.mark_attended(15)
    assert _sent(http_session) == ('PUT', 'http://clinic.test/api/accepted-appointments/15/attend', {})

    api.cancel_appointment(9)
    assert _sent(http_session) == ('DELETE', 'http://clinic.test/api/appointments/9', None)


def test_feedback_and_reminder_requests(api, http_session):
    api.submit_feedback('P1', '4', '  Great care  ', is_anonymous=1)
    assert _sent(http_session) == ('POST', 'http://clinic.test/api/feedback', {
        'patientId': 'P1', 'rating': 4, 'comment': 'Great care', 'isAnonymous': True,
    })

    api.create_reminder('P1', 'Medication', '2024-05-01 08:00:00', 'Take meds')
    method, url, body = _sent(http_session)
    assert (method, url) == ('POST', 'http://clinic.test/api/reminders')
    assert body['isRead'] is False

    api.mark_reminder_unread(3)
    assert _sent(http_session)[:2] == ('PUT', 'http://clinic.test/api/reminders/3/unread')


def test_register_walk_in_fills_placeholders(api, http_session, fake_response):
    http_session.request.return_value = fake_response(201, {'patientId': 'W1'})

    created, temp_password = api.register_walk_in(
        {'firstName': ' Juan ', 'lastName': 'Dela Cruz', 'phone': '0917', 'email': ''}, now=1700000001.5)

    assert created == {'patientId': 'W1'}
    assert temp_password == 'walkin1500'
    body = _sent(http_session)[2]
    assert body['role'] == 'Walkin'
    assert body['password'] == 'walkin1500'
    assert body['email'] == 'juan.dela cruz@walkin.temp'


def test_walk_in_helpers():
    assert walk_in_email('Ana', 'Reyes') == 'ana.reyes@walkin.temp'
    assert walk_in_password(12.3456) == 'walkin2345'


def test_reset_password_and_reset_link(api, http_session):
    api.send_reset_link('a@b.co')
    assert _sent(http_session) == ('POST', 'http://clinic.test/api/patients/send-reset-link', {'email': 'a@b.co'})
    api.reset_password('tok', 'newpass1')
    assert _sent(http_session) == ('POST', 'http://clinic.test/api/auth/reset-password',
                                   {'token': 'tok', 'password': 'newpass1'})


def test_fetch_all_collects_results_and_errors():
    def boom():
        raise ApiError("Failed to fetch staff", 500)

    results = fetch_all({'services': lambda: [1, 2], 'staff': boom, 'patients': lambda: []})

    assert results['services'] == [1, 2]
    assert results['patients'] == []
    assert isinstance(results['staff'], ApiError)


def test_fetch_all_runs_calls_concurrently():
    barrier = threading.Barrier(3, timeout=5)

    def wait():
        barrier.wait()
        return 'done'

    results = fetch_all({'a': wait, 'b': wait, 'c': wait})
    assert results == {'a': 'done', 'b': 'done', 'c': 'done'}


def test_fetch_all_with_no_calls():
    assert fetch_all({}) == {}


def test_fetch_all_lets_other_errors_propagate():
    def broken():
        raise TypeError("bad call")

    with pytest.raises(TypeError, match="bad call"):
        fetch_all({'services': lambda: [], 'staff': broken})
