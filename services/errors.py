"""
Error taxonomy shared by the storage adapter, the importer and the API.

Route handlers map these to HTTP status codes; nothing in the service
layer retries.
"""


class FireOpsError(Exception):
    """Base class for service-layer errors."""


class ValidationError(FireOpsError):
    """Malformed or missing field, or a violated data constraint."""

    def __init__(self, message: str, errors: list = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(FireOpsError):
    """Operation addressed a record that does not exist."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class StoreUnavailable(FireOpsError):
    """The backing store failed (connectivity, driver or engine error)."""
