class PropertyServiceError(Exception):
    """Base for errors rendered as JSON error bodies by the app's exception handlers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}

class AuthError(PropertyServiceError):
    """Missing, malformed or unverifiable bearer credential."""
    status_code = 403

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason

    def to_body(self) -> dict:
        body = {"msg": self.message}
        if self.reason:
            body["error"] = self.reason
        return body

class NotFoundError(PropertyServiceError):
    status_code = 404

class ForbiddenError(PropertyServiceError):
    status_code = 403

class InvalidFilterError(PropertyServiceError):
    status_code = 400
