class AppStatusCode:
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    INVALID_INPUT = "400"
    NOT_FOUND = "404"
    DUPLICATE_ADD_ERROR = "405"
    LEASE_TERMINATED = "409"

    OPERATION_FAILED = "500"
