"""
UI tests for the Clinic Portal using Streamlit's AppTest framework.

These tests simulate user interactions with the frontend to verify that the
views call the router and the session store as expected. The clinic API is
replaced by a small in-memory fake.
"""
import datetime
import json

from streamlit.testing.v1 import AppTest

from clinic.api import ApiError
from clinic.models import PatientSession
from clinic.router import ViewState


class FakeClinicApi:
    """Answers every read with an empty list and records the writes it receives."""

    def __init__(self, login_result=None, login_error=None):
        self.login_result = login_result
        self.login_error = login_error
        self.calls = []

    def login(self, role, email, password):
        self.calls.append(('login', role, email))
        if self.login_error:
            raise self.login_error
        return self.login_result

    def __getattr__(self, name):
        if name.startswith(('list_', 'get_')):
            return lambda *args: []
        raise AttributeError(name)


def test_ui_home_page_buttons(make_router):
    """
    Tests the buttons on the home page.

    Verifies that the login buttons open their panels and that the
    registration buttons navigate to the registration views.
    """
    router = make_router('/')

    def render(router):
        import gui as gui_module

        gui_module.show_home_page(router, None)

    app = AppTest.from_function(render, args=(router,), default_timeout=15)
    app.run()
    assert any("Wahing Medical Clinic" in md.value for md in app.markdown)

    next(b for b in app.button if b.label == "Staff Login").click().run()
    assert router.staff_login_open
    assert not router.patient_login_open

    next(b for b in app.button if b.label == "Register as Staff").click().run()
    assert router.current == ViewState.STAFF_REGISTER
    assert router.history.location() == ('/staff-register', '')


def test_ui_patient_login_success(make_router, sessions):
    """
    Tests a successful patient login from the login panel.

    Verifies that the session is stored with the remember-me marker and the
    router moves to the patient dashboard.
    """
    router = make_router('/')
    router.open_login()
    api = FakeClinicApi(login_result=PatientSession('P1', first_name='Ana'))

    def render(router, api, sessions):
        import gui as gui_module

        gui_module.show_patient_login(router, api, sessions)

    app = AppTest.from_function(render, args=(router, api, sessions), default_timeout=15)
    app.run()
    app.text_input[0].input("ana@clinic.test")
    app.text_input[1].input("Secret123")
    app.checkbox[0].check()
    next(b for b in app.button if b.label == "Login").click().run()

    assert api.calls == [('login', 'patient', 'ana@clinic.test')]
    assert router.current == ViewState.DASHBOARD
    assert not router.patient_login_open
    assert sessions.load('patient').record.first_name == 'Ana'
    assert sessions.remembered('patient')


def test_ui_login_shows_server_error(make_router, sessions):
    """Verifies that a rejected login shows the server's message and stores nothing."""
    router = make_router('/')
    api = FakeClinicApi(login_error=ApiError("Invalid email or password", 401))

    def render(router, api, sessions):
        import gui as gui_module

        gui_module.show_staff_login(router, api, sessions)

    app = AppTest.from_function(render, args=(router, api, sessions), default_timeout=15)
    app.run()
    app.text_input[0].input("jo@clinic.test")
    app.text_input[1].input("wrong")
    next(b for b in app.button if b.label == "Login").click().run()

    assert any("Invalid email or password" in err.value for err in app.error)
    assert not sessions.has('staff')
    assert router.current == ViewState.HOME


def test_ui_registration_step_validation(make_router):
    """
    Tests the input validation on the first registration step.

    Verifies that submitting an empty step shows the errors and does not
    advance the wizard.
    """
    router = make_router('/register')

    def render(router):
        import gui as gui_module

        gui_module.show_patient_register(router, None)

    app = AppTest.from_function(render, args=(router,), default_timeout=15)
    app.run()
    next(b for b in app.button if b.label == "Next").click().run()

    assert any("Please correct the errors below" in err.value for err in app.error)
    assert app.session_state["patient_reg_step"] == 1


def test_ui_patient_dashboard_logout(storage, sessions, make_router):
    """
    Tests logging out from the patient dashboard.

    Verifies that the patient session and its remember-me marker are cleared
    and that the home page is shown afterwards.
    """
    storage.set_item('patient', json.dumps({'patientId': 'P1', 'firstName': 'Ana'}))
    storage.set_item('rememberMe', 'true')
    router = make_router('/dashboard')
    api = FakeClinicApi()

    def render(router, api, sessions):
        import gui as gui_module

        gui_module.show_app(router, api, sessions)

    app = AppTest.from_function(render, args=(router, api, sessions), default_timeout=15)
    app.run()
    assert any("Welcome back, Ana!" in md.value for md in app.markdown)

    next(b for b in app.button if b.label == "Log Out").click().run()

    assert router.current == ViewState.HOME
    assert not sessions.has('patient')
    assert storage.get_item('rememberMe') is None
    assert any("Wahing Medical Clinic" in md.value for md in app.markdown)


def test_ui_malformed_staff_session_returns_home(storage, sessions, make_router):
    """Verifies that an unreadable staff session is discarded and the home page is shown."""
    storage.set_item('staff', '{not json')
    storage.set_item('rememberMeStaff', 'true')
    router = make_router('/staff-dashboard')
    api = FakeClinicApi()

    def render(router, api, sessions):
        import gui as gui_module

        gui_module.show_app(router, api, sessions)

    app = AppTest.from_function(render, args=(router, api, sessions), default_timeout=15)
    app.run()

    assert router.current == ViewState.HOME
    assert storage.get_item('staff') is None
    assert storage.get_item('rememberMeStaff') is None
    assert any("Wahing Medical Clinic" in md.value for md in app.markdown)


def test_ui_staff_login_register_link(make_router, sessions):
    """
    Tests the links under the staff login form.

    Verifies that "Forgot password?" shows the notice and that "Register"
    closes the panel before opening the staff registration view.
    """
    router = make_router('/')
    router.open_staff_login()
    api = FakeClinicApi()

    def render(router, api, sessions):
        import gui as gui_module

        gui_module.show_app(router, api, sessions)

    app = AppTest.from_function(render, args=(router, api, sessions), default_timeout=15)
    app.run()
    app.button(key="staff_forgot_password_btn").click().run()
    assert any("Forgot password functionality will be implemented soon." in info.value for info in app.info)

    app.button(key="staff_login_register_btn").click().run()

    assert router.current == ViewState.STAFF_REGISTER
    assert not router.staff_login_open
    assert router.history.location() == ('/staff-register', '')
    assert not app.exception


def test_ui_admin_login_forgot_password_notice(make_router, sessions):
    router = make_router('/')
    router.open_admin_login()

    def render(router, api, sessions):
        import gui as gui_module

        gui_module.show_admin_login(router, api, sessions)

    app = AppTest.from_function(render, args=(router, FakeClinicApi(), sessions), default_timeout=15)
    app.run()
    app.button(key="admin_forgot_password_btn").click().run()

    assert any("Please contact the system administrator for password reset." in info.value for info in app.info)
    assert router.admin_login_open


def test_ui_doctor_schedule_edits():
    """
    Tests the staff dashboard's doctor schedule.

    Verifies that the hour inputs start from each day's hours, that the
    availability button flips the status, and that notes can be deleted.
    """
    def render():
        import gui as gui_module

        gui_module._render_doctor_schedule()

    app = AppTest.from_function(render, default_timeout=15)
    app.run()
    assert app.time_input(key="schedule_start_5").value == datetime.time(8, 0)
    assert app.time_input(key="schedule_end_5").value == datetime.time(12, 0)

    app.button(key="schedule_toggle_0").click().run()
    assert app.session_state["doctor_schedule"][0]['status'] == 'Unavailable'
    assert app.button(key="schedule_toggle_0").label == "Mark as Available"
    assert app.selectbox(key="schedule_status_0").value == 'Unavailable'

    app.button(key="schedule_toggle_5").click().run()
    assert app.session_state["doctor_schedule"][5]['status'] == 'Available'

    app.button(key="delete_note_0").click().run()
    assert app.session_state["schedule_notes"] == ['Saturday Schedule may change next month']
    assert not app.exception
