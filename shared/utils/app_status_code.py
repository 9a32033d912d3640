class AppStatusCode:
    # success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"
    CREATED_SUCCESSFULLY = "102"

    # validation
    REQUIRED_VALIDATION_ERROR = "200"
    INVALID_INPUT = "201"
    MISSING_RESOLUTION = "202"
    INVALID_CAPACITY = "203"
    INVALID_COST = "204"

    # lifecycle / assignment
    INVALID_STATUS_TRANSITION = "300"
    STAFF_CAPACITY_EXCEEDED = "301"
    STAFF_UNAVAILABLE = "302"
    ARCHIVE_NOT_ALLOWED = "303"

    # lookups
    REQUEST_NOT_FOUND = "400"
    STAFF_NOT_FOUND = "401"
    USER_NOT_FOUND = "402"
    NOTIFICATION_NOT_FOUND = "403"

    OPERATION_FAILED = "500"
