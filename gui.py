"""
This module defines the user interface of the Clinic Portal using Streamlit.

It renders the home page, the three login panels, patient and staff
registration, and the role-specific dashboards (patient, staff, admin). Which
top-level view is shown is decided by the `ClientRouter`; every dashboard
reads its own session from the `SessionStore` and fetches its own data from
the clinic API.

The main entry point for the UI is `show_app`, called from `main.py`.
"""
# clinic-portal/gui.py

import datetime
import logging
import re
import uuid

import streamlit as st
import streamlit.components.v1 as components

from clinic import forms, listings, schedule
from clinic.api import ClinicApiError, NetworkError, fetch_all
from clinic.history import QueryParamsHistory
from clinic.router import (ClientRouter, ViewState, complete_login, end_session,
                           restore_session)

logger = logging.getLogger(__name__)

BROWSER_COOKIE = "clinic_browser"
BROWSER_ID_KEY = "browser_id"
BROWSER_ID_PATTERN = re.compile(r"[0-9a-f]{32}")
BROWSER_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

PATIENT_SECTIONS = ["home", "book", "appointments", "feedback", "reminders", "settings"]
STAFF_SECTIONS = ["dashboard", "appointments", "messages", "schedule", "feedback", "records", "settings"]
ADMIN_SECTIONS = ["dashboard", "services", "staff", "appointments", "feedback", "records", "settings"]

SECTION_LABELS = {
    "home": "🏠 Home",
    "book": "📅 Book Appointment",
    "appointments": "📋 Appointments",
    "feedback": "⭐ Feedback",
    "reminders": "🔔 Reminders",
    "settings": "⚙️ Settings",
    "dashboard": "📊 Dashboard",
    "messages": "✉️ Messages & Reminders",
    "schedule": "🗓️ Doctor Schedule",
    "records": "🗂️ Patient Records",
    "services": "🩺 Medical Services",
    "staff": "👥 Staff Management",
}

CLINIC_SERVICES = [
    ("🩺", "Medical Consultation", "Professional medical consultation services with experienced healthcare providers"),
    ("📋", "Medical Certificates & Prescriptions", "Issuance of medical certificates and prescriptions for various needs"),
    ("🔬", "Laboratory & Diagnostic Services", "Complete laboratory testing and diagnostic services for accurate health assessment"),
    ("💻", "Online & Home Consultation", "Convenient remote consultation services from the comfort of your home"),
    ("✂️", "Circumcision Services", "Safe and professional circumcision procedures with proper care"),
    ("💉", "Insulin & Drainage Procedures", "Expert insulin administration and drainage procedures"),
    ("👁️", "Cyst Removal", "Professional minor surgical procedures including cyst removal"),
    ("🩹", "Wound Care & Suturing", "Comprehensive wound care and professional suturing services"),
]

GENDER_OPTIONS = ["male", "female", "other", "prefer-not-to-say"]
RELATIONSHIP_OPTIONS = ["Parent", "Spouse", "Sibling", "Child", "Relative", "Friend", "Guardian", "Other"]
REMINDER_TYPES = ["Appointment", "Medication", "Follow-up", "General"]

PROFILE_FIELDS = [
    ("firstName", "First Name"),
    ("lastName", "Last Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("emergencyContactName", "Emergency Contact Name"),
    ("emergencyContactRelationship", "Emergency Contact Relationship"),
    ("emergencyContactPhone1", "Emergency Contact Phone"),
    ("emergencyContactPhone2", "Emergency Contact Phone (Alternate)"),
    ("streetAddress", "Street Address"),
    ("barangay", "Barangay"),
    ("municipality", "Municipality"),
]


# Router wiring

def _browser_cookie():
    """Reads this browser's id from its cookie, ignoring malformed values."""
    try:
        value = st.context.cookies.get(BROWSER_COOKIE)
    except RuntimeError:
        # No server runtime, as when run under AppTest.
        return None
    return value if value and BROWSER_ID_PATTERN.fullmatch(value) else None


def _write_browser_cookie(browser_id):
    components.html(
        f"<script>window.parent.document.cookie = "
        f"'{BROWSER_COOKIE}={browser_id}; path=/; max-age={BROWSER_COOKIE_MAX_AGE}; SameSite=Lax';</script>",
        height=0,
    )


def get_browser_id():
    """Returns the identifier that scopes stored sessions to this browser.

    The id lives in a long-lived cookie. A browser without one gets a fresh
    random id, kept in session state for this visit and written to the cookie
    so the next visit finds the same sessions.
    """
    browser_id = st.session_state.get(BROWSER_ID_KEY)
    if not browser_id or not BROWSER_ID_PATTERN.fullmatch(browser_id):
        browser_id = _browser_cookie() or uuid.uuid4().hex
        st.session_state[BROWSER_ID_KEY] = browser_id
    if _browser_cookie() != browser_id and not st.session_state.get('_browser_cookie_written'):
        _write_browser_cookie(browser_id)
        st.session_state['_browser_cookie_written'] = True
    return browser_id


def get_router(sessions):
    """Returns the router for this browser session, syncing it with the URL.

    On the first run the router is mounted from the current query parameters.
    On later runs a location the app did not write itself (browser back or
    forward) is handled like a popstate event.
    """
    history = QueryParamsHistory(st.query_params, st.session_state)
    router = st.session_state.get('router')
    if router is None:
        router = ClientRouter(history, sessions)
        router.mount()
        st.session_state.router = router
    else:
        router.history = history
        if history.changed_externally():
            router.on_popstate()
    history.remember_location()
    return router


def _flash(message, level="success"):
    """Queues a message to show after the next rerun."""
    st.session_state['flash'] = (level, message)


def _show_flash():
    flash = st.session_state.pop('flash', None)
    if flash:
        level, message = flash
        getattr(st, level)(message)


def _fetch(call, *args, fallback=None):
    """Runs a read against the API, showing the error and returning `fallback` on failure."""
    try:
        return call(*args)
    except ClinicApiError as e:
        st.error(str(e))
        return [] if fallback is None else fallback


def _loaded(results, name):
    """Returns a `fetch_all` result, treating a failed call as an empty list."""
    value = results.get(name)
    return [] if isinstance(value, ClinicApiError) or value is None else value


def show_app(router, api, sessions):
    """
    The top-level view switch of the portal.

    Renders exactly one of the six views for `router.current`, then any open
    login panels on top.

    Args:
        router (ClientRouter): The router for this browser session.
        api (ClinicApiClient): The clinic API client.
        sessions (SessionStore): The persistent session store.
    """
    _show_flash()
    current = router.current
    if current == ViewState.HOME:
        show_home_page(router, api)
    elif current == ViewState.REGISTER:
        show_patient_register(router, api)
    elif current == ViewState.STAFF_REGISTER:
        show_staff_register(router, api)
    elif current == ViewState.DASHBOARD:
        show_patient_dashboard(router, api, sessions)
    elif current == ViewState.STAFF_DASHBOARD:
        show_staff_dashboard(router, api, sessions)
    elif current == ViewState.ADMIN_DASHBOARD:
        show_admin_dashboard(router, api, sessions)

    if router.patient_login_open:
        show_patient_login(router, api, sessions)
    if router.staff_login_open:
        show_staff_login(router, api, sessions)
    if router.admin_login_open:
        show_admin_login(router, api, sessions)


# Home page

def show_home_page(router, api):
    """Displays the clinic's landing page with login and registration options."""
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown("<h1 style='text-align: center;'>Wahing Medical Clinic</h1>", unsafe_allow_html=True)
        st.markdown("<p style='text-align: center;'>Quality care for every patient, every day.</p>", unsafe_allow_html=True)
        st.button("Patient Login", on_click=router.open_login, use_container_width=True, type="primary")
        st.button("Staff Login", on_click=router.open_staff_login, use_container_width=True)
        st.button("Admin Login", on_click=router.open_admin_login, use_container_width=True)
        st.button("Create a Patient Account", on_click=router.navigate, args=(ViewState.REGISTER,),
                  use_container_width=True)
        st.button("Register as Staff", on_click=router.navigate, args=(ViewState.STAFF_REGISTER,),
                  use_container_width=True)

    token = st.query_params.get('token')
    if token:
        st.divider()
        _render_reset_password(api, token)

    st.divider()
    st.subheader("Our Services")
    columns = st.columns(4)
    for idx, (icon, title, description) in enumerate(CLINIC_SERVICES):
        with columns[idx % 4]:
            st.markdown(f"### {icon}")
            st.markdown(f"**{title}**")
            st.caption(description)


def _render_reset_password(api, token):
    """Renders the password reset form opened from an emailed link."""
    st.subheader("Reset Your Password")
    with st.form("reset_password_form"):
        password = st.text_input("New Password", type="password")
        confirm = st.text_input("Confirm Password", type="password")
        submitted = st.form_submit_button("Reset Password", use_container_width=True)
    if submitted:
        errors = forms.validate_new_password(token, password, confirm)
        if errors:
            st.error(next(iter(errors.values())))
            return
        try:
            data = api.reset_password(token, password)
        except ClinicApiError as e:
            st.error(str(e))
            return
        message = None
        if isinstance(data, dict):
            message = data.get('message') or data.get('status')
        st.success(message or "Password reset successful. You may now log in.")


# Login panels

def _switch_to_staff_login(router):
    router.close_login()
    router.open_staff_login()


def _switch_to_admin_login(router):
    router.close_login()
    router.open_admin_login()


def _go_to_register(router):
    router.close_login()
    router.navigate(ViewState.REGISTER)


def _go_to_staff_register(router):
    router.close_staff_login()
    router.navigate(ViewState.STAFF_REGISTER)


def _submit_login(router, api, sessions, role, email, password, remember):
    """Validates and submits a login form, opening the dashboard on success."""
    if forms.validate_login(email, password):
        st.error("Please fill in all required fields")
        return
    with st.spinner("Logging in..."):
        try:
            record = api.login(role, email.strip(), password)
        except ClinicApiError as e:
            st.error(str(e))
            return
    complete_login(router, sessions, role, record, remember=remember)
    _flash("Login successful!")
    st.rerun()


def show_patient_login(router, api, sessions):
    """Displays the patient login panel, including the forgot-password flow.

    Args:
        router (ClientRouter): Used to close this panel or switch to another one.
        api (ClinicApiClient): Used for the login and reset-link requests.
        sessions (SessionStore): Receives the session on a successful login.
    """
    with st.container(border=True):
        st.markdown("<h2 style='text-align: center;'>Patient Login</h2>", unsafe_allow_html=True)
        if st.session_state.get('show_forgot'):
            _render_forgot_password(api)
            return

        with st.form("patient_login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            remember = st.checkbox("Remember me")
            submitted = st.form_submit_button("Login", use_container_width=True, type="primary")
        if submitted:
            _submit_login(router, api, sessions, 'patient', email, password, remember)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Forgot password?", key="forgot_password_btn"):
                st.session_state.show_forgot = True
                st.session_state.forgot_email = email
                st.rerun()
            st.button("Create an account", key="patient_login_register_btn",
                      on_click=_go_to_register, args=(router,))
        with col2:
            st.button("Staff login", key="patient_login_staff_btn",
                      on_click=_switch_to_staff_login, args=(router,))
            st.button("Admin login", key="patient_login_admin_btn",
                      on_click=_switch_to_admin_login, args=(router,))
        st.button("Close", key="patient_login_close_btn", on_click=router.close_login)


def _render_forgot_password(api):
    """Renders the reset-link request; the confirmation never reveals whether the email exists."""
    with st.form("forgot_password_form"):
        email = st.text_input("Email", value=st.session_state.get('forgot_email', ''))
        submitted = st.form_submit_button("Send reset link", use_container_width=True)
    if submitted:
        errors = forms.validate_email(email)
        if errors:
            st.error(errors['email'])
        else:
            try:
                api.send_reset_link(email.strip())
            except NetworkError as e:
                st.error(str(e))
            except ClinicApiError:
                st.success("If the email exists, a reset link was sent.")
            else:
                st.success("If the email exists, a reset link was sent.")
    if st.button("← Back to login", key="forgot_back_btn"):
        st.session_state.show_forgot = False
        st.rerun()


def show_staff_login(router, api, sessions):
    """Displays the staff login panel."""
    with st.container(border=True):
        st.markdown("<h2 style='text-align: center;'>Staff Login</h2>", unsafe_allow_html=True)
        with st.form("staff_login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            remember = st.checkbox("Remember me")
            submitted = st.form_submit_button("Login", use_container_width=True, type="primary")
        if submitted:
            _submit_login(router, api, sessions, 'staff', email, password, remember)
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Forgot password?", key="staff_forgot_password_btn"):
                st.info("Forgot password functionality will be implemented soon.")
        with col2:
            st.button("Register", key="staff_login_register_btn",
                      on_click=_go_to_staff_register, args=(router,))
        st.button("Close", key="staff_login_close_btn", on_click=router.close_staff_login)


def show_admin_login(router, api, sessions):
    """Displays the administrator login panel."""
    with st.container(border=True):
        st.markdown("<h2 style='text-align: center;'>Admin Login</h2>", unsafe_allow_html=True)
        with st.form("admin_login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            remember = st.checkbox("Remember me")
            submitted = st.form_submit_button("Login", use_container_width=True, type="primary")
        if submitted:
            _submit_login(router, api, sessions, 'admin', email, password, remember)
        if st.button("Forgot password?", key="admin_forgot_password_btn"):
            st.info("Please contact the system administrator for password reset.")
        st.button("Close", key="admin_login_close_btn", on_click=router.close_admin_login)


# Registration

def show_patient_register(router, api):
    """Displays the four-step patient registration wizard.

    The values are kept in `st.session_state.patient_reg` between steps and
    each step is validated before moving on.
    """
    st.button("← Back to Home", on_click=router.navigate, args=(ViewState.HOME,))
    reg = st.session_state.setdefault('patient_reg', {})
    step = st.session_state.setdefault('patient_reg_step', 1)

    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown("<h2 style='text-align: center;'>Create Your Patient Account</h2>", unsafe_allow_html=True)
        st.progress(step / forms.REGISTRATION_STEPS, text=f"Step {step} of {forms.REGISTRATION_STEPS}")
        with st.form(f"patient_register_step_{step}"):
            if step == 1:
                reg['firstName'] = st.text_input("First Name", value=reg.get('firstName', ''))
                reg['lastName'] = st.text_input("Last Name", value=reg.get('lastName', ''))
                reg['email'] = st.text_input("Email", value=reg.get('email', ''))
                reg['phone'] = st.text_input("Phone", value=reg.get('phone', ''))
                reg['password'] = st.text_input("Password", type="password", value=reg.get('password', ''),
                                                help="At least 8 characters with uppercase, lowercase, and a number.")
                reg['confirmPassword'] = st.text_input("Confirm Password", type="password",
                                                       value=reg.get('confirmPassword', ''))
                dob = st.date_input("Date of Birth", value=None, min_value=datetime.date(1900, 1, 1),
                                    max_value=datetime.date.today())
                reg['dateOfBirth'] = dob.isoformat() if dob else reg.get('dateOfBirth', '')
                reg['gender'] = st.selectbox("Gender", GENDER_OPTIONS,
                                             format_func=lambda g: g.replace('-', ' ').capitalize())
            elif step == 2:
                reg['emergencyContactName'] = st.text_input("Emergency Contact Name",
                                                            value=reg.get('emergencyContactName', ''))
                reg['emergencyContactRelationship'] = st.selectbox("Relationship", RELATIONSHIP_OPTIONS)
                reg['emergencyContactPhone1'] = st.text_input("Primary Phone",
                                                              value=reg.get('emergencyContactPhone1', ''))
                reg['emergencyContactPhone2'] = st.text_input("Secondary Phone (Optional)",
                                                              value=reg.get('emergencyContactPhone2', ''))
            elif step == 3:
                reg['streetAddress'] = st.text_input("Street Address", value=reg.get('streetAddress', ''))
                reg['barangay'] = st.text_input("Barangay", value=reg.get('barangay', ''))
                reg['municipality'] = st.text_input("Municipality", value=reg.get('municipality', ''))
            else:
                st.markdown(f"**Name:** {reg.get('firstName', '')} {reg.get('lastName', '')}")
                st.markdown(f"**Email:** {reg.get('email', '')}")
                st.markdown(f"**Address:** {reg.get('streetAddress', '')}, {reg.get('barangay', '')}, "
                            f"{reg.get('municipality', '')}")
                reg['agreeToTerms'] = st.checkbox("I agree to the terms and conditions",
                                                  value=reg.get('agreeToTerms', False))

            back_col, next_col = st.columns(2)
            with back_col:
                previous = st.form_submit_button("Previous", disabled=step == 1, use_container_width=True)
            with next_col:
                label = "Register" if step == forms.REGISTRATION_STEPS else "Next"
                advance = st.form_submit_button(label, type="primary", use_container_width=True)

        if previous:
            st.session_state.patient_reg_step = max(step - 1, 1)
            st.rerun()
        if advance:
            errors = forms.validate_patient_step(step, reg)
            if errors:
                st.error("Please correct the errors below")
                for message in errors.values():
                    st.caption(f"• {message}")
            elif step < forms.REGISTRATION_STEPS:
                st.session_state.patient_reg_step = step + 1
                st.rerun()
            else:
                with st.spinner("Registering..."):
                    try:
                        api.register_patient(forms.registration_payload(reg))
                    except ClinicApiError as e:
                        st.error(str(e))
                        return
                del st.session_state['patient_reg']
                del st.session_state['patient_reg_step']
                _flash("Registration successful! Welcome to Wahing Medical Clinic.")
                router.navigate(ViewState.HOME)
                st.rerun()


def show_staff_register(router, api):
    """Displays the staff registration form."""
    st.button("← Back to Home", on_click=router.navigate, args=(ViewState.HOME,))
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown("<h2 style='text-align: center;'>Staff Registration</h2>", unsafe_allow_html=True)
        with st.form("staff_register_form", clear_on_submit=False):
            form = {
                'firstName': st.text_input("First Name"),
                'lastName': st.text_input("Last Name"),
                'email': st.text_input("Email"),
                'phone': st.text_input("Phone"),
                'password': st.text_input("Password", type="password"),
            }
            dob = st.date_input("Date of Birth", value=None, min_value=datetime.date(1900, 1, 1),
                                max_value=datetime.date.today())
            form['dateOfBirth'] = dob.isoformat() if dob else ''
            st.markdown("---")
            form['emergencyContactName'] = st.text_input("Emergency Contact Name")
            form['emergencyContactRelationship'] = st.text_input("Emergency Contact Relationship")
            form['emergencyContactPhone1'] = st.text_input("Emergency Contact Phone")
            form['emergencyContactPhone2'] = st.text_input("Emergency Contact Phone (Alternate)")
            st.markdown("---")
            form['streetAddress'] = st.text_input("Street Address")
            form['barangay'] = st.text_input("Barangay")
            form['municipality'] = st.text_input("Municipality")
            submitted = st.form_submit_button("Register", use_container_width=True, type="primary")

        if submitted:
            errors = forms.validate_staff_registration(form)
            if errors:
                st.error("Please correct the errors below")
                for message in errors.values():
                    st.caption(f"• {message}")
                return
            with st.spinner("Registering..."):
                try:
                    api.create_staff(form)
                except ClinicApiError as e:
                    st.error(str(e))
                    return
            st.success("Staff member registered successfully!")


# Shared dashboard pieces

def _sidebar_menu(title, record, sections, current, key_prefix):
    """Renders the dashboard navigation and returns the chosen section."""
    with st.sidebar:
        st.markdown(f"## {title}")
        st.caption(record.full_name)
        st.divider()
        chosen = current
        for section in sections:
            if st.button(SECTION_LABELS[section], key=f"{key_prefix}_nav_{section}", use_container_width=True,
                         type="primary" if section == current else "secondary"):
                chosen = section
        st.divider()
        logout = st.button("Log Out", key=f"{key_prefix}_logout_btn", use_container_width=True)
    return chosen, logout


def _render_profile_page(api, sessions, role, record):
    """Renders the profile editor shared by the three dashboards.

    The latest profile is read from the API; after a successful save the
    stored session is refreshed so the new details survive a reload.
    """
    st.header("My Profile")
    if role == 'patient':
        profile = _fetch(api.get_patient, record.record_id, fallback={})
    elif role == 'admin':
        profile = _fetch(api.get_admin, record.record_id, fallback={})
    else:
        profile = record.to_dict()
    profile = profile or record.to_dict()

    with st.form(f"{role}_profile_form"):
        changes = {}
        for field, label in PROFILE_FIELDS:
            if role != 'patient' and field.startswith('emergency'):
                continue
            changes[field] = st.text_input(label, value=profile.get(field) or '')
        submitted = st.form_submit_button("Save Changes", type="primary")

    if submitted:
        changes = {k: v.strip() for k, v in changes.items()}
        try:
            if role == 'patient':
                api.update_patient(record.record_id, changes)
            elif role == 'admin':
                api.update_admin(record.record_id, changes)
            else:
                api.update_staff(record.record_id, changes)
        except ClinicApiError as e:
            st.error(str(e))
            return
        sessions.update(role, record.updated(changes))
        _flash("Profile updated successfully!")
        st.rerun()


def _render_walk_in_registration(api, key_prefix):
    """Renders the walk-in patient form used at the front desk."""
    with st.expander("➕ Register Walk-in Patient"):
        with st.form(f"{key_prefix}_walk_in_form", clear_on_submit=True):
            form = {
                'firstName': st.text_input("First Name *"),
                'lastName': st.text_input("Last Name *"),
                'email': st.text_input("Email (optional)"),
                'phone': st.text_input("Phone *"),
            }
            dob = st.date_input("Date of Birth *", value=None, min_value=datetime.date(1900, 1, 1),
                                max_value=datetime.date.today())
            form['dateOfBirth'] = dob.isoformat() if dob else ''
            form['emergencyContactName'] = st.text_input("Emergency Contact Name")
            form['emergencyContactRelationship'] = st.text_input("Emergency Contact Relationship")
            form['emergencyContactPhone1'] = st.text_input("Emergency Contact Phone")
            form['emergencyContactPhone2'] = st.text_input("Emergency Contact Phone (Alternate)")
            form['streetAddress'] = st.text_input("Street Address")
            form['barangay'] = st.text_input("Barangay")
            form['municipality'] = st.text_input("Municipality")
            submitted = st.form_submit_button("Register Patient", type="primary")
        if submitted:
            if forms.validate_walk_in(form):
                st.error("Please fill in all required fields")
                return
            try:
                _, temp_password = api.register_walk_in(form)
            except NetworkError:
                st.error("Unable to register patient. Please try again later.")
                return
            except ClinicApiError as e:
                st.error(str(e))
                return
            st.success(f"Walk-in patient registered successfully! Temporary password: {temp_password}")


def _render_overview(api, role):
    """Renders the staff/admin dashboard overview from concurrent reads."""
    calls = {
        'appointments': api.list_appointments,
        'accepted': api.list_accepted,
        'services': api.list_services,
        'patients': api.list_patients,
    }
    if role == 'admin':
        calls['staff'] = api.list_staff
    with st.spinner("Loading dashboard..."):
        results = fetch_all(calls)
    failed = [name for name, value in results.items() if isinstance(value, ClinicApiError)]
    if failed:
        st.warning(f"Some dashboard data could not be loaded: {', '.join(sorted(failed))}")

    appointments = _loaded(results, 'appointments')
    accepted = _loaded(results, 'accepted')
    services = _loaded(results, 'services')
    patients = _loaded(results, 'patients')

    appointment_counts = listings.appointment_stats(appointments)
    accepted_counts = listings.accepted_stats(accepted)
    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Pending", appointment_counts['upcomingAppointments'])
    col2.metric("Today", appointment_counts['todayAppointments'])
    col3.metric("Ongoing", accepted_counts['ongoingAppointments'])
    col4.metric("Completed", accepted_counts['completedAppointments'])
    col5.metric("Walk-ins Today", listings.walk_ins_today(patients))

    name, count = listings.most_booked_service(appointments, services)
    st.info(f"Most booked service: **{name}** ({count} bookings)")
    if role == 'admin':
        st.caption(f"{len(patients)} patients · {len(_loaded(results, 'staff'))} staff members · "
                   f"{len(services)} services")

    _render_walk_in_registration(api, role)
    walk_ins = listings.walk_in_patients(patients)
    with st.expander(f"Walk-in Patients ({len(walk_ins)})"):
        if not walk_ins:
            st.info("No walk-in patients registered yet.")
        else:
            st.dataframe(
                [{
                    'Name': f"{p.get('firstName', '')} {p.get('lastName', '')}",
                    'Phone': p.get('phone', ''),
                    'Registered': listings.format_date(p.get('createdAt')),
                } for p in walk_ins],
                use_container_width=True, hide_index=True,
            )


def _render_appointment_management(api, admin_view=False):
    """Renders the pending and accepted appointment lists with staff actions."""
    st.header("Appointment Management")
    results = fetch_all({
        'appointments': api.list_appointments,
        'accepted': api.list_accepted,
        'patients': api.list_patients,
        'services': api.list_services,
    })
    if isinstance(results.get('appointments'), ClinicApiError):
        st.error(str(results['appointments']))
    appointments = _loaded(results, 'appointments')
    accepted = _loaded(results, 'accepted')
    patients = _loaded(results, 'patients')
    services = _loaded(results, 'services')

    search_col, sort_col = st.columns([3, 1])
    search = search_col.text_input("Search", placeholder="Patient, service, or status",
                                   key=f"appt_search_{admin_view}")
    sort_by = sort_col.selectbox("Sort by", listings.SORT_OPTIONS, key=f"appt_sort_{admin_view}")

    pending_tab, accepted_tab = st.tabs(["Pending Requests", "Accepted"])
    with pending_tab:
        pending = listings.filter_staff_appointments(appointments, patients, services, search, sort_by)
        if not pending:
            st.info("No pending appointments.")
        for appointment in pending:
            appointment_id = appointment.get('appointmentId')
            title = (f"{listings.patient_name(patients, appointment.get('patientId'))} · "
                     f"{listings.service_name(services, appointment.get('serviceId'))}")
            with st.expander(f"**{title}** - {appointment.get('status', 'Pending')}"):
                st.write(f"Preferred: {listings.format_datetime(appointment.get('preferredDateTime'))}")
                st.write(f"Symptom: {appointment.get('symptom', '')}")
                accept_col, cancel_col = st.columns(2)
                if accept_col.button("Accept", key=f"accept_{appointment_id}", type="primary"):
                    try:
                        api.accept_appointment(appointment_id)
                    except ClinicApiError as e:
                        st.error(str(e))
                    else:
                        _flash("Appointment accepted successfully")
                        st.rerun()
                if cancel_col.button("Cancel", key=f"cancel_{appointment_id}"):
                    try:
                        api.cancel_appointment(appointment_id)
                    except ClinicApiError as e:
                        st.error(str(e))
                    else:
                        _flash("Appointment cancelled successfully")
                        st.rerun()
                _render_reschedule_form(api, appointment, "Reschedule", "Appointment rescheduled successfully")

    with accepted_tab:
        accepted_rows = listings.filter_accepted_appointments(accepted, patients, services, search, sort_by)
        if not accepted_rows:
            st.info("No accepted appointments.")
        for appointment in accepted_rows:
            accepted_id = appointment.get('acceptedAppointmentId') or appointment.get('id')
            attended = bool(appointment.get('isAttended'))
            title = (f"{listings.patient_name(patients, appointment.get('patientId'))} · "
                     f"{listings.service_name(services, appointment.get('serviceId'))}")
            with st.expander(f"**{title}** - {'✅ Attended' if attended else '⏳ Ongoing'}"):
                st.write(f"Scheduled: {listings.format_datetime(appointment.get('preferredDateTime'))}")
                st.write(f"Symptom: {appointment.get('symptom', '')}")
                if not attended and st.button("Mark as Attended", key=f"attend_{accepted_id}"):
                    try:
                        api.mark_attended(accepted_id)
                    except ClinicApiError as e:
                        st.error(str(e))
                    else:
                        _flash("Appointment marked as attended")
                        st.rerun()


def _render_reschedule_form(api, appointment, submit_label, success_message):
    """Renders the date/time and symptom editor for one appointment."""
    appointment_id = appointment.get('appointmentId')
    current = listings.parse_datetime(appointment.get('preferredDateTime')) or datetime.datetime.now()
    with st.form(f"reschedule_{appointment_id}"):
        new_date = st.date_input("Date", value=current.date(), key=f"reschedule_date_{appointment_id}")
        new_time = st.time_input("Time", value=current.time().replace(second=0, microsecond=0),
                                 key=f"reschedule_time_{appointment_id}")
        symptom = st.text_area("Symptom", value=appointment.get('symptom', ''), key=f"reschedule_symptom_{appointment_id}")
        submitted = st.form_submit_button(submit_label)
    if submitted:
        preferred = listings.combine_date_time(new_date, new_time)
        if forms.validate_reschedule(preferred, symptom):
            st.error("Please fill in all required fields")
            return
        try:
            api.update_appointment(appointment_id, preferred, symptom.strip())
        except ClinicApiError as e:
            st.error(str(e))
            return
        _flash(success_message)
        st.rerun()


def _render_feedback_management(api):
    """Renders all patient feedback with rating statistics."""
    st.header("Patient Feedback")
    results = fetch_all({'feedback': api.list_feedback, 'patients': api.list_patients})
    if isinstance(results.get('feedback'), ClinicApiError):
        st.error(str(results['feedback']))
    feedbacks = _loaded(results, 'feedback')
    patients = _loaded(results, 'patients')

    stats = listings.feedback_stats(feedbacks)
    col1, col2 = st.columns(2)
    col1.metric("Average Rating", f"{stats['average']} / 5")
    col2.metric("Total Feedback", stats['total'])
    if stats['distribution']:
        st.bar_chart({f"{star}★": count for star, count in stats['distribution'].items()})

    search = st.text_input("Search feedback", key="feedback_search")
    term = search.lower()
    for feedback in feedbacks:
        anonymous = feedback.get('isAnonymous')
        author = "Anonymous" if anonymous else listings.patient_name(patients, feedback.get('patientId'))
        if term and term not in author.lower() and term not in (feedback.get('comment') or '').lower():
            continue
        feedback_id = feedback.get('feedbackId')
        rating = int(feedback.get('rating') or 0)
        with st.expander(f"{'⭐' * rating} - {author}"):
            st.write(feedback.get('comment', ''))
            st.caption(listings.format_datetime(feedback.get('createdAt')))
            if st.button("Delete", key=f"delete_feedback_{feedback_id}"):
                try:
                    api.delete_feedback(feedback_id)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Feedback deleted successfully")
                    st.rerun()


def _render_reminders_management(api):
    """Renders the staff view for creating and tracking patient reminders."""
    st.header("Messages & Reminders")
    results = fetch_all({'reminders': api.list_reminders, 'patients': api.list_patients})
    if isinstance(results.get('reminders'), ClinicApiError):
        st.error(str(results['reminders']))
    reminders = _loaded(results, 'reminders')
    patients = _loaded(results, 'patients')

    with st.expander("➕ Create Reminder"):
        with st.form("create_reminder_form", clear_on_submit=True):
            patient_ids = [p.get('patientId') for p in patients]
            patient_id = st.selectbox("Patient", patient_ids, index=None,
                                      format_func=lambda pid: listings.patient_name(patients, pid))
            reminder_type = st.selectbox("Type", REMINDER_TYPES)
            reminder_date = st.date_input("Date", value=None)
            reminder_time = st.time_input("Time", value=None)
            message = st.text_area("Message")
            submitted = st.form_submit_button("Create Reminder", type="primary")
        if submitted:
            if forms.validate_reminder(patient_id, reminder_date, reminder_time, message):
                st.error("Please fill in all required fields")
            else:
                try:
                    api.create_reminder(patient_id, reminder_type,
                                        listings.combine_date_time(reminder_date, reminder_time), message)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Reminder created successfully")
                    st.rerun()

    search = st.text_input("Search reminders", key="reminder_search")
    for reminder in listings.filter_reminders(reminders, patients, search):
        reminder_id = reminder.get('reminderId')
        status = "Read" if reminder.get('isRead') else "Unread"
        with st.expander(f"{reminder.get('reminderType', 'General')} · "
                         f"{listings.patient_name(patients, reminder.get('patientId'))} ({status})"):
            st.write(reminder.get('message', ''))
            st.caption(listings.format_datetime(reminder.get('preferredDateTime')))
            read_col, delete_col = st.columns(2)
            if not reminder.get('isRead') and read_col.button("Mark as read", key=f"read_{reminder_id}"):
                try:
                    api.mark_reminder_read(reminder_id)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Reminder marked as read")
                    st.rerun()
            if delete_col.button("Delete", key=f"delete_reminder_{reminder_id}"):
                try:
                    api.delete_reminder(reminder_id)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Reminder deleted successfully")
                    st.rerun()


def _render_patient_records(api):
    """Renders attended appointments as searchable records with CSV export."""
    st.header("Patient Records")
    results = fetch_all({
        'attended': api.list_attended,
        'patients': api.list_patients,
        'services': api.list_services,
    })
    if isinstance(results.get('attended'), ClinicApiError):
        st.error(str(results['attended']))
    patients = _loaded(results, 'patients')
    services = _loaded(results, 'services')

    search = st.text_input("Search records", placeholder="Name, email, service, or symptom", key="records_search")
    records = listings.filter_patient_records(_loaded(results, 'attended'), patients, services, search)
    if not records:
        st.info("No patient records found.")
        return
    records_df = listings.records_frame(records, patients, services)
    st.dataframe(records_df, use_container_width=True, hide_index=True)
    st.download_button(
        "Download Records (CSV)", records_df.to_csv(index=False).encode('utf-8'),
        f"patient_records_{datetime.date.today()}.csv", "text/csv"
    )


def _toggle_schedule_day(entry, idx):
    schedule.toggle_availability(entry)
    # Let the status box pick up the new value on the next run.
    st.session_state.pop(f"schedule_status_{idx}", None)


def _render_doctor_schedule():
    """Renders the weekly doctor schedule kept for the current browser session."""
    st.header("Doctor Schedule")
    days = st.session_state.setdefault('doctor_schedule', schedule.default_schedule())
    notes = st.session_state.setdefault('schedule_notes', schedule.default_notes())

    for idx, entry in enumerate(days):
        with st.expander(f"**{entry['day']}** - {entry['time'] or 'No hours'} ({entry['status']})"):
            start_value, end_value = schedule.parse_hours(entry['time'])
            with st.form(f"schedule_form_{idx}"):
                status = st.selectbox("Status", schedule.SCHEDULE_STATUSES,
                                      index=schedule.SCHEDULE_STATUSES.index(entry['status']),
                                      key=f"schedule_status_{idx}")
                start = st.time_input("Start", value=start_value, key=f"schedule_start_{idx}")
                end = st.time_input("End", value=end_value, key=f"schedule_end_{idx}")
                if st.form_submit_button("Update"):
                    schedule.update_day(entry, status, start, end)
                    st.rerun()
            toggle_label = "Mark as Unavailable" if entry['status'] == 'Available' else "Mark as Available"
            st.button(toggle_label, key=f"schedule_toggle_{idx}",
                      on_click=_toggle_schedule_day, args=(entry, idx))

    st.subheader("Notes")
    for idx, note in enumerate(notes):
        note_col, delete_col = st.columns([6, 1])
        note_col.markdown(f"- {note}")
        delete_col.button("Delete", key=f"delete_note_{idx}",
                          on_click=schedule.delete_note, args=(notes, idx))
    with st.form("schedule_note_form", clear_on_submit=True):
        new_note = st.text_input("Add a note")
        if st.form_submit_button("Add Note") and schedule.add_note(notes, new_note):
            st.rerun()


def _render_service_management(api):
    """Renders the admin CRUD page for medical services."""
    st.header("Medical Services")
    services = _fetch(api.list_services)

    with st.expander("➕ Add Service"):
        with st.form("create_service_form", clear_on_submit=True):
            name = st.text_input("Service Name")
            price = st.number_input("Price", min_value=0.0, step=50.0)
            description = st.text_area("Description")
            submitted = st.form_submit_button("Create Service", type="primary")
        if submitted:
            if forms.validate_service(name, price, description):
                st.error("Please fill in all required fields")
            else:
                try:
                    api.create_service(name.strip(), float(price), description.strip())
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Service created successfully")
                    st.rerun()

    search = st.text_input("Search services", key="service_search")
    for service in listings.filter_services(services, search):
        service_id = service.get('serviceId')
        with st.expander(f"**{service.get('serviceName')}** - ₱{service.get('price')}"):
            with st.form(f"edit_service_{service_id}"):
                name = st.text_input("Service Name", value=service.get('serviceName', ''), key=f"service_name_{service_id}")
                price = st.number_input("Price", min_value=0.0, step=50.0, value=float(service.get('price') or 0),
                                        key=f"service_price_{service_id}")
                description = st.text_area("Description", value=service.get('description', ''),
                                           key=f"service_description_{service_id}")
                save = st.form_submit_button("Save Changes")
            if save:
                if forms.validate_service(name, price, description):
                    st.error("Please fill in all required fields")
                else:
                    try:
                        api.update_service(service_id, name.strip(), float(price), description.strip())
                    except ClinicApiError as e:
                        st.error(str(e))
                    else:
                        _flash("Service updated successfully")
                        st.rerun()
            if st.button("Delete Service", key=f"delete_service_{service_id}"):
                try:
                    api.delete_service(service_id)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Service deleted successfully")
                    st.rerun()


def _render_staff_management(api):
    """Renders the admin CRUD page for staff accounts."""
    st.header("Staff Management")
    staff = _fetch(api.list_staff)

    with st.expander("➕ Add Staff Member"):
        with st.form("create_staff_form", clear_on_submit=True):
            form = {
                'firstName': st.text_input("First Name"),
                'lastName': st.text_input("Last Name"),
                'email': st.text_input("Email"),
                'phone': st.text_input("Phone"),
                'password': st.text_input("Password", type="password"),
            }
            submitted = st.form_submit_button("Create Staff", type="primary")
        if submitted:
            if forms.validate_staff_account(form):
                st.error("Please fill in all required fields")
            else:
                try:
                    api.create_staff(form)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Staff member created successfully")
                    st.rerun()

    search = st.text_input("Search staff", key="staff_search")
    for member in listings.filter_staff_members(staff, search):
        staff_id = member.get('staffId')
        with st.expander(f"**{member.get('firstName', '')} {member.get('lastName', '')}** · {member.get('email', '')}"):
            with st.form(f"edit_staff_{staff_id}"):
                changes = {
                    'firstName': st.text_input("First Name", value=member.get('firstName', ''), key=f"staff_firstName_{staff_id}"),
                    'lastName': st.text_input("Last Name", value=member.get('lastName', ''), key=f"staff_lastName_{staff_id}"),
                    'email': st.text_input("Email", value=member.get('email', ''), key=f"staff_email_{staff_id}"),
                    'phone': st.text_input("Phone", value=member.get('phone', ''), key=f"staff_phone_{staff_id}"),
                }
                save = st.form_submit_button("Save Changes")
            if save:
                if forms.validate_staff_account(changes, require_password=False):
                    st.error("Please fill in all required fields")
                else:
                    try:
                        api.update_staff(staff_id, changes)
                    except ClinicApiError as e:
                        st.error(str(e))
                    else:
                        _flash("Staff member updated successfully")
                        st.rerun()
            if st.button("Delete Staff Member", key=f"delete_staff_{staff_id}"):
                try:
                    api.delete_staff(staff_id)
                except ClinicApiError as e:
                    st.error(str(e))
                else:
                    _flash("Staff member deleted successfully")
                    st.rerun()


# Patient dashboard

def _patient_section(router):
    """Returns the patient dashboard section named by the URL fragment."""
    _, fragment = router.history.location()
    return fragment if fragment in PATIENT_SECTIONS else "home"


def show_patient_dashboard(router, api, sessions):
    """
    The patient dashboard. The active section is kept in the URL fragment so
    that a shared or reloaded link opens the same section.

    Args:
        router (ClientRouter): Used for section changes and navigation.
        api (ClinicApiClient): The clinic API client.
        sessions (SessionStore): Source of the patient session.
    """
    patient = restore_session(router, sessions, 'patient')
    if patient is None:
        st.rerun()

    section = _patient_section(router)
    chosen, logout = _sidebar_menu("Patient Portal", patient, PATIENT_SECTIONS, section, "patient")
    if logout:
        end_session(router, sessions, 'patient')
        st.rerun()
    if chosen != section:
        router.history.set_fragment(chosen)
        router.history.remember_location()
        st.rerun()

    if section == "home":
        _render_patient_home(router, api, patient)
    elif section == "book":
        _render_booking_page(api, patient)
    elif section == "appointments":
        _render_patient_appointments(api, patient)
    elif section == "feedback":
        _render_patient_feedback(api, patient)
    elif section == "reminders":
        _render_patient_reminders(api, patient)
    elif section == "settings":
        _render_profile_page(api, sessions, 'patient', patient)


def _render_patient_home(router, api, patient):
    st.markdown(f"## Welcome back, {patient.first_name or patient.full_name}!")
    results = fetch_all({
        'services': api.list_services,
        'appointments': lambda: api.list_patient_appointments(patient.record_id),
    })
    services = _loaded(results, 'services')
    activities = listings.recent_activities(_loaded(results, 'appointments'), services)

    st.subheader("Recent Activity")
    if not activities:
        st.info("No recent activity yet. Book your first appointment to get started.")
    for activity in activities:
        st.markdown(f"**{activity['type']}**")
        st.caption(f"{activity['date']} · {activity['status']}")
        st.divider()

    if st.button("Book an Appointment", type="primary"):
        router.history.set_fragment("book")
        router.history.remember_location()
        st.rerun()


def _render_booking_page(api, patient):
    """Renders the appointment booking form."""
    st.header("Book an Appointment")
    services = _fetch(api.list_services)
    if not services:
        st.info("No services are available for booking right now.")
        return

    with st.form("booking_form", clear_on_submit=True):
        service_id = st.selectbox(
            "Service", [s.get('serviceId') for s in services],
            format_func=lambda sid: f"{listings.service_name(services, sid)} - ₱{listings.service_price(services, sid)}"
        )
        preferred_date = st.date_input("Preferred Date", min_value=datetime.date.today())
        preferred_time = st.time_input("Preferred Time", value=datetime.time(9, 0))
        symptom = st.text_area("Symptoms / Reason for visit")
        submitted = st.form_submit_button("Book Appointment", type="primary")

    if submitted:
        if not service_id or not symptom.strip():
            st.error("Please fill in all required fields")
            return
        with st.spinner("Booking..."):
            try:
                api.book_appointment(patient.record_id, service_id,
                                     listings.combine_date_time(preferred_date, preferred_time), symptom.strip())
            except ClinicApiError as e:
                st.error(str(e))
                return
        st.success("Appointment booked successfully!")


def _render_patient_appointments(api, patient):
    """Renders the patient's pending and accepted appointments."""
    st.header("My Appointments")
    results = fetch_all({
        'pending': lambda: api.list_patient_appointments(patient.record_id),
        'accepted': lambda: api.list_patient_accepted(patient.record_id),
        'services': api.list_services,
    })
    if any(isinstance(value, ClinicApiError) for value in results.values()):
        st.error("Error fetching appointments")
    services = _loaded(results, 'services')
    accepted = _loaded(results, 'accepted')
    pending = listings.pending_excluding_accepted(_loaded(results, 'pending'), accepted)

    pending_tab, accepted_tab = st.tabs([f"Pending ({len(pending)})", f"Accepted ({len(accepted)})"])
    with pending_tab:
        if not pending:
            st.info("You have no pending appointments.")
        for appointment in pending:
            appointment_id = appointment.get('appointmentId')
            with st.expander(f"**{listings.service_name(services, appointment.get('serviceId'))}** - "
                             f"{listings.format_datetime(appointment.get('preferredDateTime'))}"):
                st.write(f"Price: ₱{listings.service_price(services, appointment.get('serviceId'))}")
                st.write(f"Symptom: {appointment.get('symptom', '')}")
                st.caption(f"Status: {appointment.get('status') or 'Pending'}")
                _render_reschedule_form(api, appointment, "Update Appointment", "Appointment updated successfully")
                if st.button("Cancel Appointment", key=f"patient_cancel_{appointment_id}"):
                    try:
                        api.cancel_appointment(appointment_id)
                    except ClinicApiError as e:
                        st.error(str(e))
                    else:
                        _flash("Appointment cancelled successfully")
                        st.rerun()
    with accepted_tab:
        if not accepted:
            st.info("No accepted appointments yet.")
        for appointment in accepted:
            status = "✅ Attended" if appointment.get('isAttended') else "📅 Confirmed"
            st.markdown(f"**{listings.service_name(services, appointment.get('serviceId'))}** · {status}")
            st.caption(listings.format_datetime(appointment.get('preferredDateTime')))
            st.divider()


def _render_patient_feedback(api, patient):
    """Renders the patient's feedback history and the feedback form."""
    st.header("My Feedback")
    feedbacks = _fetch(api.list_patient_feedback, patient.record_id)
    editing = st.session_state.get('editing_feedback')

    with st.form("feedback_form", clear_on_submit=True):
        st.subheader("Edit Feedback" if editing else "Share Your Experience")
        rating = st.slider("Rating", 1, 5, value=int(editing['rating']) if editing else 5)
        comment = st.text_area("Comment", value=editing.get('comment', '') if editing else '')
        anonymous = st.checkbox("Submit anonymously", value=bool(editing.get('isAnonymous')) if editing else False)
        submitted = st.form_submit_button("Update Feedback" if editing else "Submit Feedback", type="primary")

    if submitted:
        errors = forms.validate_feedback(rating, comment)
        if errors:
            st.error(next(iter(errors.values())))
        else:
            try:
                if editing:
                    api.update_feedback(editing['feedbackId'], patient.record_id, rating, comment, anonymous)
                else:
                    api.submit_feedback(patient.record_id, rating, comment, anonymous)
            except ClinicApiError as e:
                st.error(str(e))
            else:
                st.session_state.pop('editing_feedback', None)
                _flash("Feedback updated successfully!" if editing else "Feedback submitted successfully!")
                st.rerun()

    if not feedbacks:
        st.info("You have not shared any feedback yet.")
    for feedback in feedbacks:
        feedback_id = feedback.get('feedbackId')
        st.markdown(f"{'⭐' * int(feedback.get('rating') or 0)}")
        st.write(feedback.get('comment', ''))
        st.caption(listings.format_datetime(feedback.get('createdAt')))
        edit_col, delete_col = st.columns(2)
        if edit_col.button("Edit", key=f"edit_feedback_{feedback_id}"):
            st.session_state.editing_feedback = feedback
            st.rerun()
        if delete_col.button("Delete", key=f"patient_delete_feedback_{feedback_id}"):
            try:
                api.delete_feedback(feedback_id)
            except ClinicApiError as e:
                st.error(str(e))
            else:
                _flash("Feedback deleted successfully")
                st.rerun()
        st.divider()


def _render_patient_reminders(api, patient):
    """Renders reminders sent to the patient, with read/unread toggles."""
    st.header("Reminders")
    reminders = _fetch(api.list_patient_reminders, patient.record_id)
    unread = [r for r in reminders if not r.get('isRead')]
    st.caption(f"{len(unread)} unread")
    if not reminders:
        st.info("You have no reminders.")
    for reminder in sorted(reminders, key=lambda r: listings.parse_datetime(r.get('preferredDateTime'))
                           or datetime.datetime.min, reverse=True):
        reminder_id = reminder.get('reminderId')
        marker = "🔵" if not reminder.get('isRead') else "⚪"
        st.markdown(f"{marker} **{reminder.get('reminderType', 'General')}** - "
                    f"{listings.format_datetime(reminder.get('preferredDateTime'))}")
        st.write(reminder.get('message', ''))
        if reminder.get('isRead'):
            clicked = st.button("Mark as unread", key=f"unread_{reminder_id}")
            call = api.mark_reminder_unread
        else:
            clicked = st.button("Mark as read", key=f"patient_read_{reminder_id}")
            call = api.mark_reminder_read
        if clicked:
            try:
                call(reminder_id)
            except ClinicApiError as e:
                st.error(str(e))
            else:
                st.rerun()
        st.divider()


# Staff and admin dashboards

def show_staff_dashboard(router, api, sessions):
    """The staff dashboard: appointments, reminders, schedule, feedback, and records."""
    staff = restore_session(router, sessions, 'staff')
    if staff is None:
        st.rerun()

    section = st.session_state.get('staff_section', "dashboard")
    chosen, logout = _sidebar_menu("Staff Dashboard", staff, STAFF_SECTIONS, section, "staff")
    if logout:
        st.session_state.pop('staff_section', None)
        end_session(router, sessions, 'staff')
        st.rerun()
    if chosen != section:
        st.session_state.staff_section = chosen
        st.rerun()

    if section == "dashboard":
        st.markdown(f"## Staff Dashboard - {staff.full_name}")
        _render_overview(api, 'staff')
    elif section == "appointments":
        _render_appointment_management(api)
    elif section == "messages":
        _render_reminders_management(api)
    elif section == "schedule":
        _render_doctor_schedule()
    elif section == "feedback":
        _render_feedback_management(api)
    elif section == "records":
        _render_patient_records(api)
    elif section == "settings":
        _render_profile_page(api, sessions, 'staff', staff)


def show_admin_dashboard(router, api, sessions):
    """The admin console: services, staff accounts, and clinic-wide views."""
    admin = restore_session(router, sessions, 'admin')
    if admin is None:
        st.rerun()

    section = st.session_state.get('admin_section', "dashboard")
    chosen, logout = _sidebar_menu("Admin Console", admin, ADMIN_SECTIONS, section, "admin")
    if logout:
        st.session_state.pop('admin_section', None)
        end_session(router, sessions, 'admin')
        st.rerun()
    if chosen != section:
        st.session_state.admin_section = chosen
        st.rerun()

    if section == "dashboard":
        st.markdown(f"## Admin Console - {admin.full_name}")
        _render_overview(api, 'admin')
    elif section == "services":
        _render_service_management(api)
    elif section == "staff":
        _render_staff_management(api)
    elif section == "appointments":
        _render_appointment_management(api, admin_view=True)
    elif section == "feedback":
        _render_feedback_management(api)
    elif section == "records":
        _render_patient_records(api)
    elif section == "settings":
        _render_profile_page(api, sessions, 'admin', admin)
