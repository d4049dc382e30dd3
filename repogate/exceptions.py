"""repogate exception classes."""



class RepoGateError(Exception):
    """Base exception for all repogate errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(RepoGateError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class DisabledError(RepoGateError):
    """Raised when the API surface is switched off."""

    def __init__(self, message: str = "API not enabled") -> None:
        super().__init__("API_DISABLED", message)


class MissingParameterError(RepoGateError):
    """Raised when a required parameter is absent or blank."""

    def __init__(self, name: str) -> None:
        super().__init__("MISSING_PARAMETER", f"{name} is a required parameter")
        self.parameter = name


class AuthenticationError(RepoGateError):
    """Raised when signature validation fails."""

    def __init__(self, message: str = "invalid signed url") -> None:
        super().__init__("INVALID_SIGNATURE", message)


class NotFoundError(RepoGateError):
    """Raised when a repository is not found."""

    def __init__(self, message: str) -> None:
        super().__init__("NOT_FOUND", message)


class ConflictError(RepoGateError):
    """Raised when a repository with the same name already exists."""

    def __init__(self, message: str = "repository name already exists") -> None:
        super().__init__("CONFLICT", message)


class ValidationError(RepoGateError):
    """Raised when a repository descriptor is rejected by the validator."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_FAILED", message)


class ServerError(RepoGateError):
    """Raised by the client on server errors (5xx) and connection failures."""

    pass
