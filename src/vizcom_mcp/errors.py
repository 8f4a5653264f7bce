"""Error taxonomy for the Vizcom MCP server."""


class VizcomError(Exception):
    """Base class for all Vizcom errors."""


class ConfigurationError(VizcomError):
    """Raised when local configuration is incomplete."""


class NotAuthenticatedError(VizcomError):
    """Raised when no session can be obtained from the environment or store."""


class AuthError(VizcomError):
    """Raised when the login exchange is rejected."""


class GraphQLError(VizcomError):
    """Raised when the server reports one or more application errors."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__(", ".join(messages))


class ProtocolError(VizcomError):
    """Raised when a response body is not a GraphQL envelope."""

    def __init__(self, status_code: int, body_excerpt: str) -> None:
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        super().__init__(
            f"Invalid response from Vizcom API (HTTP {status_code}): {body_excerpt}"
        )


class EmptyResultError(VizcomError):
    """Raised when the server returns neither errors nor data."""

    def __init__(self) -> None:
        super().__init__("No data returned from GraphQL")


class JobFailedError(VizcomError):
    """Raised when a generation output reports a failure reason."""

    def __init__(self, prompt_id: str, reason: str, outputs: list | None = None) -> None:
        self.prompt_id = prompt_id
        self.reason = reason
        self.outputs = outputs or []
        super().__init__(reason)


class JobTimeoutError(VizcomError):
    """Raised when polling exhausts its attempt budget."""

    def __init__(self, prompt_id: str, elapsed_seconds: float) -> None:
        self.prompt_id = prompt_id
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"Generation timed out after {elapsed_seconds:g}s. "
            f"Check status with prompt ID: {prompt_id}"
        )
