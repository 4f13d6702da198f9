"""
This module implements the client session router of the Clinic Portal.

The router decides which top-level view is shown. The view is derived from the
current location (path and fragment) and gated on the presence of the matching
role's session in the session store. It also owns the three login modal flags
and the navigation actions passed down to the views.

Derivation rules, in order:
1. a path of '/dashboard' or any non-empty fragment selects the patient
   dashboard (a fragment on any path counts, which is a long-standing quirk);
2. '/register', '/staff-register', '/staff-dashboard' and '/admin-dashboard'
   select their views;
3. everything else is the home page.
Protected views fall back to home when their role has no stored session.
"""
# clinic/router.py

import enum
import logging

logger = logging.getLogger(__name__)


class ViewState(str, enum.Enum):
    """The top-level views the router can show."""
    HOME = 'home'
    REGISTER = 'register'
    STAFF_REGISTER = 'staffRegister'
    DASHBOARD = 'dashboard'
    STAFF_DASHBOARD = 'staffDashboard'
    ADMIN_DASHBOARD = 'adminDashboard'


STATE_PATHS = {
    ViewState.HOME: '/',
    ViewState.REGISTER: '/register',
    ViewState.STAFF_REGISTER: '/staff-register',
    ViewState.DASHBOARD: '/dashboard',
    ViewState.STAFF_DASHBOARD: '/staff-dashboard',
    ViewState.ADMIN_DASHBOARD: '/admin-dashboard',
}

# Views that need a stored session, keyed to the role whose session they read.
PROTECTED_STATES = {
    ViewState.DASHBOARD: 'patient',
    ViewState.STAFF_DASHBOARD: 'staff',
    ViewState.ADMIN_DASHBOARD: 'admin',
}


def path_for(state):
    """Returns the canonical path for a view state, '/' for anything unknown."""
    try:
        return STATE_PATHS[ViewState(state)]
    except ValueError:
        return '/'


def page_from_url(path, fragment=''):
    """Derives the candidate view state from a path and fragment."""
    fragment = (fragment or '').replace('#', '', 1)
    if path == '/dashboard' or fragment:
        return ViewState.DASHBOARD
    if path == '/register':
        return ViewState.REGISTER
    if path == '/staff-register':
        return ViewState.STAFF_REGISTER
    if path == '/staff-dashboard':
        return ViewState.STAFF_DASHBOARD
    if path == '/admin-dashboard':
        return ViewState.ADMIN_DASHBOARD
    return ViewState.HOME


def is_authenticated(state, has_session):
    """Checks the session gate for a view state.

    Args:
        state (ViewState): The candidate state.
        has_session (callable): Takes a role and returns True if a session is stored.

    Returns:
        bool: True if the state may be shown.
    """
    role = PROTECTED_STATES.get(state)
    if role is None:
        return True
    return bool(has_session(role))


def derive_state(path, fragment, has_session):
    """Derives the view state for a location and applies the session gate.

    Returns:
        tuple: (state, redirected), where `redirected` is True when the gate
               forced the home page.
    """
    candidate = page_from_url(path, fragment)
    if is_authenticated(candidate, has_session):
        return candidate, False
    return ViewState.HOME, True


class ClientRouter:
    """Holds the current view state and the login modal flags.

    Args:
        history: The address bar abstraction (see `clinic.history`).
        sessions (SessionStore): Used for the session presence check.
    """

    def __init__(self, history, sessions):
        self.history = history
        self.sessions = sessions
        self.current = ViewState.HOME
        self.patient_login_open = False
        self.staff_login_open = False
        self.admin_login_open = False

    def _sync_from_location(self):
        path, fragment = self.history.location()
        state, redirected = derive_state(path, fragment, self.sessions.has)
        if redirected:
            logger.debug("No session for %s; redirecting to home.", path)
            self.history.replace('/', state=ViewState.HOME.value)
        self.current = state
        return state

    def mount(self):
        """Sets the initial view from the current location."""
        return self._sync_from_location()

    def on_popstate(self):
        """Re-derives the view after a browser back/forward traversal."""
        return self._sync_from_location()

    def navigate(self, state):
        """Shows a view and pushes its canonical URL as a new history entry.

        The session gate is not applied; callers only navigate to a dashboard
        after a successful login.
        """
        try:
            state = ViewState(state)
        except ValueError:
            state = ViewState.HOME
        self.current = state
        self.history.push(path_for(state), state=state.value)
        logger.debug("Navigated to %s", state.value)
        return state

    def open_login(self):
        self.patient_login_open = True

    def close_login(self):
        self.patient_login_open = False

    def open_staff_login(self):
        self.staff_login_open = True

    def close_staff_login(self):
        self.staff_login_open = False

    def open_admin_login(self):
        self.admin_login_open = True

    def close_admin_login(self):
        self.admin_login_open = False

    def logout(self):
        """Closes every login modal and returns to the home page."""
        self.close_login()
        self.close_staff_login()
        self.close_admin_login()
        return self.navigate(ViewState.HOME)


# Dashboard-side session helpers. Reading, repairing and clearing a role's
# stored session belongs to the dashboards; the router only checks presence.

DASHBOARD_STATES = {role: state for state, role in PROTECTED_STATES.items()}


def complete_login(router, sessions, role, record, remember=False):
    """Stores a fresh login and opens the role's dashboard."""
    sessions.set(role, record, remember=remember)
    if role == 'patient':
        router.close_login()
    elif role == 'staff':
        router.close_staff_login()
    else:
        router.close_admin_login()
    return router.navigate(DASHBOARD_STATES[role])


def restore_session(router, sessions, role):
    """Loads the session a dashboard needs, recovering from bad stored data.

    A malformed entry is discarded along with its remember-me marker. In that
    case, or when nothing is stored, the router is sent home.

    Returns:
        SessionRecord or None: The record, or None after redirecting home.
    """
    result = sessions.load(role)
    if result.ok:
        return result.record
    if result.status == result.MALFORMED:
        logger.warning("Discarding unreadable %s session: %s", role, result.error)
        sessions.clear(role)
    router.navigate(ViewState.HOME)
    return None


def end_session(router, sessions, role):
    """Logs a role out: clears its stored session, then resets the router."""
    sessions.clear(role)
    return router.logout()
