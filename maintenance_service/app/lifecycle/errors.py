from shared.utils.app_status_code import AppStatusCode


def _value(status):
    return getattr(status, "value", status)


class MaintenanceError(Exception):
    """Base class for rule violations raised by the lifecycle core.

    Every subclass leaves the entities it was handed exactly as they were.
    """
    status_code = AppStatusCode.OPERATION_FAILED
    http_status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTransition(MaintenanceError):
    status_code = AppStatusCode.INVALID_STATUS_TRANSITION
    http_status = 409

    def __init__(self, current, requested, reason: str = None):
        self.current = current
        self.requested = requested
        self.reason = reason
        message = f"Cannot move request from {_value(current)} to {_value(requested)}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CapacityExceeded(MaintenanceError):
    status_code = AppStatusCode.STAFF_CAPACITY_EXCEEDED
    http_status = 409

    def __init__(self, staff_id: str, current_workload: int, max_capacity: int):
        self.staff_id = staff_id
        self.current_workload = current_workload
        self.max_capacity = max_capacity
        super().__init__(
            f"Staff {staff_id} is at capacity ({current_workload}/{max_capacity})")


class StaffUnavailable(MaintenanceError):
    status_code = AppStatusCode.STAFF_UNAVAILABLE
    http_status = 409

    def __init__(self, staff_id: str):
        self.staff_id = staff_id
        super().__init__(f"Staff {staff_id} is not available for new assignments")


class MissingResolution(MaintenanceError):
    status_code = AppStatusCode.MISSING_RESOLUTION
    http_status = 422

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(
            f"Request {request_id} cannot be completed without resolution notes")


class ArchiveNotAllowed(MaintenanceError):
    status_code = AppStatusCode.ARCHIVE_NOT_ALLOWED
    http_status = 409

    def __init__(self, request_id: str, status):
        self.request_id = request_id
        self.status = status
        super().__init__(
            f"Only completed or cancelled requests can be archived (request {request_id} is {_value(status)})")


class InvalidCapacity(MaintenanceError):
    status_code = AppStatusCode.INVALID_CAPACITY
    http_status = 422

    def __init__(self, max_capacity):
        self.max_capacity = max_capacity
        super().__init__(f"Capacity must be a positive integer, got {max_capacity!r}")


class InvalidCost(MaintenanceError):
    status_code = AppStatusCode.INVALID_COST
    http_status = 422

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} cannot be negative, got {value}")


class RequestNotFound(MaintenanceError):
    status_code = AppStatusCode.REQUEST_NOT_FOUND
    http_status = 404

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Maintenance request {request_id} not found")


class StaffNotFound(MaintenanceError):
    status_code = AppStatusCode.STAFF_NOT_FOUND
    http_status = 404

    def __init__(self, staff_id: str):
        self.staff_id = staff_id
        super().__init__(f"Staff member {staff_id} not found")
