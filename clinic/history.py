"""
This module abstracts the address bar and session history used by the router.

Two implementations share the same small interface:
- `MemoryHistory` keeps an in-process stack of entries with back/forward
  traversal. Tests use it to emulate browser navigation.
- `QueryParamsHistory` mirrors the location into Streamlit's query parameters.
  Streamlit does not expose the request path or hash to the app, so the path
  is kept in the `page` parameter and the fragment in the `section` parameter.

Both expose `location()`, `push()`, `replace()`, `set_fragment()` and `length`.
"""
# clinic/history.py

import logging

logger = logging.getLogger(__name__)

PAGE_PARAM = 'page'
SECTION_PARAM = 'section'


def split_url(url):
    """Splits a URL such as '/dashboard#book' into ('/dashboard', 'book')."""
    path, _, fragment = (url or '/').partition('#')
    return path or '/', fragment


class HistoryEntry:
    """A single entry in the session history."""

    def __init__(self, path='/', fragment='', state=None):
        self.path = path
        self.fragment = fragment
        self.state = state

    @property
    def url(self):
        return f"{self.path}#{self.fragment}" if self.fragment else self.path

    def __repr__(self):
        return f"HistoryEntry({self.url!r}, state={self.state!r})"


class MemoryHistory:
    """An in-memory session history with a movable cursor.

    Args:
        url (str): The initial location, e.g. '/dashboard' or '/#appointments'.
    """

    def __init__(self, url='/'):
        path, fragment = split_url(url)
        self.entries = [HistoryEntry(path, fragment)]
        self.index = 0

    @property
    def current(self):
        return self.entries[self.index]

    @property
    def length(self):
        return len(self.entries)

    def location(self):
        """Returns the current (path, fragment) pair."""
        return self.current.path, self.current.fragment

    def push(self, path, state=None, fragment=''):
        """Adds a new entry after the current one, dropping any forward entries."""
        del self.entries[self.index + 1:]
        self.entries.append(HistoryEntry(path, fragment, state))
        self.index += 1

    def replace(self, path, state=None, fragment=''):
        """Overwrites the current entry without changing the history length."""
        self.entries[self.index] = HistoryEntry(path, fragment, state)

    def set_fragment(self, fragment):
        """Pushes an entry that keeps the current path and changes the fragment."""
        self.push(self.current.path, self.current.state, fragment=fragment)

    def back(self):
        """Moves one entry back, returning False if already at the start."""
        if self.index == 0:
            return False
        self.index -= 1
        return True

    def forward(self):
        """Moves one entry forward, returning False if already at the end."""
        if self.index >= len(self.entries) - 1:
            return False
        self.index += 1
        return True


class QueryParamsHistory:
    """Mirrors the router location into Streamlit query parameters.

    The browser tracks real history entries for query parameter changes; the
    app only sees the resulting parameters on each rerun. To notice a browser
    back/forward traversal, the last location written by the app is kept in
    `memory` (normally `st.session_state`) and compared on the next run.

    Args:
        query_params: A mutable mapping, normally `st.query_params`.
        memory: A mutable mapping that survives reruns, normally `st.session_state`.
    """
    _LAST_KEY = '_router_last_location'
    _LENGTH_KEY = '_router_history_length'

    def __init__(self, query_params, memory):
        self.query_params = query_params
        self.memory = memory
        self.memory.setdefault(self._LENGTH_KEY, 1)

    @property
    def length(self):
        return self.memory[self._LENGTH_KEY]

    def location(self):
        """Reads the (path, fragment) pair from the query parameters."""
        path = self.query_params.get(PAGE_PARAM) or '/'
        if not path.startswith('/'):
            path = '/' + path
        fragment = self.query_params.get(SECTION_PARAM) or ''
        return path, fragment

    def _write(self, path, fragment):
        if path and path != '/':
            self.query_params[PAGE_PARAM] = path
        elif PAGE_PARAM in self.query_params:
            del self.query_params[PAGE_PARAM]
        if fragment:
            self.query_params[SECTION_PARAM] = fragment
        elif SECTION_PARAM in self.query_params:
            del self.query_params[SECTION_PARAM]
        self.memory[self._LAST_KEY] = (path, fragment)

    def push(self, path, state=None, fragment=''):
        self._write(path, fragment)
        self.memory[self._LENGTH_KEY] += 1

    def replace(self, path, state=None, fragment=''):
        self._write(path, fragment)

    def set_fragment(self, fragment):
        path, _ = self.location()
        self.push(path, fragment=fragment)

    def remember_location(self):
        """Records the current location as seen by the app."""
        self.memory[self._LAST_KEY] = self.location()

    def changed_externally(self):
        """Returns True if the location differs from the one the app last saw."""
        last = self.memory.get(self._LAST_KEY)
        if last is None:
            return False
        changed = tuple(last) != self.location()
        if changed:
            logger.debug("Location changed outside the app: %s -> %s", last, self.location())
        return changed
