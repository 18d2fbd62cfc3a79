# Error kinds raised by the stores and the authenticator


class CMSError(Exception):
    """Base class for recoverable errors. ``message`` is shown to the user."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidName(CMSError):
    pass


class NotFound(CMSError):
    pass


class UsernameTaken(CMSError):
    pass


class InvalidCredentials(CMSError):
    pass


class UnsupportedExtension(CMSError):
    pass


class Unauthorized(CMSError):
    pass
