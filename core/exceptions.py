"""
Exception definitions for cm-gpt-service.

Hierarchy:
- ServiceError: base class, all known errors
- ConfigError: configuration or template problems
- LLMError: upstream completion call errors
- GateRejected: request refused before reaching a handler (rate limit, token)
"""
from typing import Dict, Optional


class ServiceError(Exception):
    """Base exception for cm-gpt-service.

    Every expected error raised by the service inherits from this class.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: error description
            hint: operator-facing suggestion
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class ConfigError(ServiceError):
    """Configuration is missing or invalid (env, runtime.yaml, prompt templates)."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"check {config_path}" if config_path else "check the environment variables"
        super().__init__(message, hint)
        self.config_path = config_path


class LLMError(ServiceError):
    """Base class for upstream completion failures.

    Carries the call context so route handlers can log it.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.provider = provider or "unknown"
        self.model_name = model_name or "unknown"
        self.endpoint = endpoint
        self.status_code = status_code

        context = f"[{self.provider}/{self.model_name}]"
        super().__init__(f"{context} {message}")


class LLMConnectionError(LLMError):
    """Cannot reach the upstream service."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__("cannot connect to completion service", provider, model_name, endpoint)
        self.hint = "check network access and OPENAI_BASE_URL"


class LLMAuthError(LLMError):
    """Upstream rejected the API key."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__("authentication failed", provider, model_name, endpoint, status_code=401)
        self.hint = "check OPENAI_API_KEY"


class LLMTimeoutError(LLMError):
    """Upstream call timed out."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        message = "completion call timed out"
        if timeout_seconds:
            message = f"completion call timed out ({timeout_seconds}s)"
        super().__init__(message, provider, model_name, endpoint)
        self.timeout_seconds = timeout_seconds
        self.hint = "raise OPENAI_TIMEOUT or retry later"


class LLMRateLimitError(LLMError):
    """Upstream rate limit hit."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        endpoint: Optional[str] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__("upstream rate limit exceeded", provider, model_name, endpoint, status_code=429)
        self.retry_after = retry_after
        if retry_after:
            self.hint = f"retry in {retry_after} seconds"
        else:
            self.hint = "retry later"


class GateRejected(ServiceError):
    """A request was refused by the /api gate (rate limit or bearer token)."""

    def __init__(
        self,
        status_code: int,
        error: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.headers = headers or {}
