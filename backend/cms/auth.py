# Sign up / sign in / sign out, and the signed-in gate for mutating routes

from functools import wraps
import logging

from flask import redirect, url_for

from .context import current_context
from .errors import InvalidCredentials, Unauthorized, UsernameTaken
from .security import DEFAULT_ITERATIONS, hash_password, verify_password

SIGNED_IN_REQUIRED = 'You must be signed in to do that'


class Authenticator:
    def __init__(self, credentials, iterations=DEFAULT_ITERATIONS):
        self.credentials = credentials
        self.iterations = iterations

    def sign_up(self, username, password):
        username = (username or '').strip()
        if not username or not password:
            raise InvalidCredentials('A username and password are required.')
        if username in self.credentials:
            raise UsernameTaken('username already taken')
        if not self.credentials.add(username, hash_password(password, self.iterations)):
            raise UsernameTaken('username already taken')
        logging.info(f'New user signed up: {username}')

    def sign_in(self, ctx, username, password):
        username = (username or '').strip()
        stored_hash = self.credentials.get(username) if username else None
        if stored_hash is None or not verify_password(stored_hash, password or ''):
            logging.info(f'Failed sign in for {username!r}')
            raise InvalidCredentials('invalid credentials')
        ctx.sign_in(username)
        logging.debug(f'User signed in: {username}')

    def sign_out(self, ctx):
        ctx.sign_out()


def require_signed_in(ctx):
    if not ctx.signed_in:
        raise Unauthorized(SIGNED_IN_REQUIRED)


def signed_in_only(view):
    """Run ``view`` only for a signed-in user; otherwise redirect home with a flash."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        ctx = current_context()
        try:
            require_signed_in(ctx)
        except Unauthorized as e:
            ctx.flash(e.message)
            return redirect(url_for('cms.index'))
        return view(*args, **kwargs)
    return wrapped
