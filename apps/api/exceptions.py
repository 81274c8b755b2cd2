"""Error taxonomy shared by the storage layer, AI client and routers."""


class MediConnectError(Exception):
    """Base class for all application errors"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class StorageError(MediConnectError):
    """Any failure of the storage layer"""


class StorageUnavailable(StorageError):
    """No usable database connection (gate tripped, pool exhausted, refused)"""

    status_code = 503
    default_message = "Database not available"


class StorageOperationFailed(StorageError):
    """A query reached the database and failed there"""

    status_code = 500
    default_message = "Database operation failed"


class ValidationFailed(MediConnectError):
    """Malformed or inconsistent input to a write operation"""

    status_code = 400
    default_message = "Invalid request"


class InvalidTransition(ValidationFailed):
    """A status change that the entity's lifecycle does not allow"""

    status_code = 409
    default_message = "Status transition not allowed"

    def __init__(self, entity: str, current: str, requested: str):
        self.entity = entity
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change {entity} status from '{current}' to '{requested}'")


class NotFound(MediConnectError):
    status_code = 404
    default_message = "Not found"


class UpstreamServiceFailed(MediConnectError):
    """The AI text-completion service errored or returned garbage"""

    status_code = 502
    default_message = "AI service unavailable"
