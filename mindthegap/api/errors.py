"""
API Errors

Every error response is {"error": message}. Route handlers raise ApiError
for request problems; storage exceptions are mapped by the handlers
registered in create_app().
"""


class ApiError(Exception):
    """A request the API refuses, with the status and message to return."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


MISSING_ID = "Missing id parameter"
MISSING_HOUSEHOLD_ID = "Missing householdId parameter"
UNSUPPORTED_FREQUENCY = "Unsupported frequency"
INVALID_PAYLOAD = "Invalid payload"
