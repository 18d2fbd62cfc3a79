# Per-request view of the browser session: signed-in user and flash message

from flask import g, session

USER_KEY = 'user'
FLASH_KEY = 'flash'


class SessionContext:
    """Explicit handle on the session state a request may touch.

    Holds at most one signed-in username and one pending flash message. The
    flash is cleared the first time it is read.
    """

    def __init__(self, store):
        self._store = store

    @property
    def user(self):
        return self._store.get(USER_KEY)

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    def sign_in(self, username):
        self._store[USER_KEY] = username

    def sign_out(self):
        self._store.pop(USER_KEY, None)

    def flash(self, message):
        self._store[FLASH_KEY] = message

    def pop_flash(self):
        return self._store.pop(FLASH_KEY, None)


def current_context() -> SessionContext:
    if 'session_context' not in g:
        g.session_context = SessionContext(session)
    return g.session_context
