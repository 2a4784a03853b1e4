class ApiError(Exception):
    """
    Structured HTTP failure raised by the API client.

    status is 0 when the server could not be reached at all.
    """

    def __init__(self, message, *, status=0, data=None, url=None, method=None):
        super().__init__(message)
        self.status = status
        self.data = data
        self.url = url
        self.method = method


class PlanGridError(Exception):
    """Base class of every failure the planning grid reports to the user."""

    title = "Operation failed"

    def __init__(self, detail="", *, cause=None):
        super().__init__(detail or self.title)
        self.detail = detail
        self.cause = cause

    def user_message(self):
        return self.title, self.detail


class NetworkFailure(PlanGridError):
    title = "Cannot reach the server"


class AuthFailure(PlanGridError):
    title = "Not authorized"


class NotFound(PlanGridError):
    title = "Not found"


class ValidationFailure(PlanGridError):
    title = "Rejected by the server"


class ServerFailure(PlanGridError):
    title = "Server error"


class SaveInProgress(PlanGridError):
    title = "Save already in progress"


class UnmappedDataFailure(PlanGridError):
    """A row without a composite identifier holds a non-zero amount."""

    title = "Rows without a backend mapping"

    def __init__(self, codes):
        self.codes = list(codes)
        super().__init__(
            "These rows have amounts but no backend identifier: " + ", ".join(self.codes)
        )


def classify(error, *, plan_id=None):
    """Translate an ApiError into the matching PlanGridError kind."""
    if isinstance(error, PlanGridError):
        return error
    if not isinstance(error, ApiError):
        return PlanGridError(str(error), cause=error)
    status = int(getattr(error, 'status', 0) or 0)
    message = str(error)

    if status == 0:
        return NetworkFailure(f"Network/DNS failure: {message}", cause=error)
    if status == 401:
        return AuthFailure("Token rejected or expired. Log out and log in again.", cause=error)
    if status == 403:
        return AuthFailure("Your role is not allowed to change this plan.", cause=error)
    if status == 404:
        where = f" (plan_id={plan_id})" if plan_id is not None else ""
        return NotFound(f"Plan or route not found{where}.", cause=error)
    if status == 422:
        return ValidationFailure(f"Payload does not match the server schema: {message}", cause=error)
    if 400 <= status < 500:
        return ValidationFailure(f"HTTP {status}: {message}", cause=error)
    return ServerFailure(f"HTTP {status}: {message}", cause=error)
