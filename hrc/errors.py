"""hrc errors - one class per way an invocation can abort.

Context is attached by raising the contextual error ``from`` the underlying
exception; the renderer walks that chain to decide what to show.
"""


class HrcError(Exception):
    """Base class for every fatal hrc error."""


class ClientConstructionError(HrcError):
    pass


class FileOpenError(HrcError):
    def __init__(self, path: str):
        super().__init__(f"Cannot open file `{path}`")
        self.path = path


class StdinReadError(HrcError):
    pass


class RequestBuildError(HrcError):
    pass


class TransportError(HrcError):
    pass


class JarReadError(HrcError):
    def __init__(self, path: str):
        super().__init__(f"Cannot read cookie jar `{path}`")
        self.path = path


class JarWriteError(HrcError):
    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ResponseReadError(HrcError):
    pass


class UnsupportedMethod(HrcError):
    def __init__(self, method: str):
        super().__init__(f"Method {method} is not implemented")
        self.method = method
