"""Error taxonomy shared by services and the HTTP layer."""


class BlogError(Exception):
    """Base application error."""

    status_code = 400

    def __init__(self, message: str, code: str = "blog_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class AuthenticationError(BlogError):
    """No signed-in user for an operation that requires one."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, "not_authenticated")


class ValidationError(BlogError):
    """Submitted content failed validation before reaching the store."""

    status_code = 422

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class StoreError(BlogError):
    """The store rejected a read or write.

    Covers authorization denial, constraint violations and transport
    failures alike; ``code`` narrows it down where the store can tell.
    """

    STATUS_BY_CODE = {
        "not_found": 404,
        "forbidden": 403,
        "conflict": 409,
    }

    def __init__(self, message: str, code: str = "store_error"):
        super().__init__(message, code)
        self.status_code = self.STATUS_BY_CODE.get(code, 400)
