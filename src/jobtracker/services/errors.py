"""Service-layer exceptions.

Services raise these; the API layer is the only place that turns them
into HTTP status codes.
"""


class ValidationError(Exception):
    """Missing or malformed input (400)."""
    pass


class InvalidStatusError(ValidationError):
    """Job status outside Applied/Interviewing/Rejected/Offer (400)."""
    pass


class DuplicateEmailError(Exception):
    """Email already registered (409)."""
    pass


class InvalidCredentialsError(Exception):
    """Unknown email or wrong password, indistinguishable to the client (401)."""
    pass


class JobNotFoundError(Exception):
    """Job missing, or owned by someone else (404)."""
    pass
