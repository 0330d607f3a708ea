"""Domain errors shared by the IT management services"""


class ValidationError(ValueError):
    """A business rule rejected the request payload (HTTP 400)"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(Exception):
    """The caller's role may not perform the action (HTTP 403)"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
