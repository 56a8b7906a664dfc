"""
Typed exceptions for RentDesk services.

Every error carries a machine-readable ``code`` and a human message, and is
caught by type at the API boundary:

    RentDeskError
    +-- NotFoundError            referenced record does not exist
    +-- InvalidInputError        missing/malformed field, bad number or period
    |   +-- InvalidAmountError   non-positive payment amount
    +-- ConflictError            duplicate key, overlapping lease, over-payment
    +-- FailedPreconditionError  required configuration is absent
    +-- StorageError             database failure
"""


class RentDeskError(Exception):
    """Base class for all service errors."""

    code: str = "RENTDESK_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"success": False, "code": self.code, "message": self.message}


class NotFoundError(RentDeskError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class InvalidInputError(RentDeskError):
    code = "INVALID_INPUT"
    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class InvalidAmountError(InvalidInputError):
    code = "INVALID_AMOUNT"

    def __init__(self, message: str = "Payment amount must be a positive number"):
        super().__init__(message, field="amount")


class ConflictError(RentDeskError):
    code = "CONFLICT"
    status_code = 409


class FailedPreconditionError(RentDeskError):
    code = "FAILED_PRECONDITION"
    status_code = 412


class StorageError(RentDeskError):
    code = "STORAGE_ERROR"
    status_code = 500
