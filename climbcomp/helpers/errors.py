"""
Error kinds raised at the ledger / toggle / account boundary.

The scoring engine never raises any of these; it degrades to zero instead.
Each error carries the HTTP status the API layer answers with.
"""


class ClimbCompError(Exception):
    status_code = 400
    kind = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class InvalidInput(ClimbCompError):
    status_code = 400
    kind = "invalid_input"


class NotAuthenticated(ClimbCompError):
    status_code = 401
    kind = "not_authenticated"


class Forbidden(ClimbCompError):
    status_code = 403
    kind = "forbidden"


class NotFound(ClimbCompError):
    status_code = 404
    kind = "not_found"


class InvalidTransition(ClimbCompError):
    status_code = 409
    kind = "invalid_transition"


class Conflict(ClimbCompError):
    status_code = 409
    kind = "conflict"
