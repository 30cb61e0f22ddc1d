"""Public exception types for promptrelay."""

from __future__ import annotations


class PromptRelayError(Exception):
    """Base class for all promptrelay exceptions."""


class ConfigurationError(PromptRelayError):
    """Raised at startup when required settings are missing or invalid."""


class InvalidCursor(PromptRelayError):
    """Raised when a listing cursor is not a positive page number."""


class ListFailure(PromptRelayError):
    """Raised when the remote prompt catalog cannot be listed."""


class PromptNotResolvable(PromptRelayError):
    """Raised when neither the chat nor the text variant of a prompt resolves."""

    def __init__(
        self,
        name: str,
        cause: BaseException | None = None,
        chat_cause: BaseException | None = None,
    ) -> None:
        self.name = name
        self.cause = cause
        self.chat_cause = chat_cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to get prompt for '{name}'{detail}")


class InvalidTraceStructure(PromptRelayError):
    """Raised when a trace document has no list of observations."""


class IndexOutOfBounds(PromptRelayError):
    """Raised when an observation index falls outside the trace."""


class RemoteFetchFailure(PromptRelayError):
    """Raised when the remote service rejects or fails a request."""


class CacheWriteFailure(PromptRelayError):
    """Raised when a fetched trace cannot be persisted. Never fatal."""


class StorageReadFailure(PromptRelayError):
    """Raised when a cache entry exists but cannot be read."""


class TraceCacheLoadError(StorageReadFailure):
    """Raised when a cached trace file cannot be parsed."""
