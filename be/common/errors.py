"""Error taxonomy shared by services and routes.

Services raise these; ``app.create_app`` registers a handler that turns them
into the ``{"code", "msg"}`` envelope with the matching HTTP status.
"""


class ShareError(Exception):
    code = 1
    status = 400

    def __init__(self, msg=None):
        super().__init__(msg or self.__class__.__name__)
        self.msg = msg or self.__class__.__name__


class ValidationError(ShareError):
    """Input rejected before touching storage or the database."""
    code = 1001
    status = 400


class BackendWriteError(ShareError):
    """Storage put/remove or row insert/delete was rejected."""
    code = 2001
    status = 502


class BackendReadError(ShareError):
    code = 3001
    status = 502


class NotFoundError(ShareError):
    code = 4004
    status = 404


class AuthError(ShareError):
    code = 4001
    status = 401
