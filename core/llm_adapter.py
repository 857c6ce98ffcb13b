"""
LLM Adapter for cm-gpt-service.

Talks to the OpenAI Responses API (or any compatible endpoint) over httpx
and maps transport and HTTP failures onto the service exception hierarchy.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from core.config_manager import ServiceConfig
from core.exceptions import (
    ConfigError,
    LLMAuthError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)


@dataclass(frozen=True)
class CompletionParams:
    """
    One upstream call. Optional hints are None when absent; copies are made
    with dataclasses.replace, the value itself never changes.
    """
    model: str
    input: str
    max_output_tokens: int
    verbosity: Optional[str] = None
    reasoning_effort: Optional[str] = None
    temperature: Optional[float] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "input": self.input,
            "max_output_tokens": self.max_output_tokens,
        }
        if self.verbosity is not None:
            payload["text"] = {"verbosity": self.verbosity}
        if self.reasoning_effort is not None:
            payload["reasoning"] = {"effort": self.reasoning_effort}
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload


@dataclass
class LLMResponse:
    """Structured response from the completion API."""
    content: str
    model: str
    usage: Optional[Dict[str, Any]] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def extract_output_text(data: Dict[str, Any]) -> str:
    """
    Text of a Responses API payload.

    Uses the convenience "output_text" field when the server provides it,
    otherwise joins every output_text part of every message item.
    """
    direct = data.get("output_text")
    if isinstance(direct, str):
        return direct

    parts = []
    for item in data.get("output") or []:
        if not isinstance(item, dict):
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text":
                parts.append(str(content.get("text") or ""))
    return "".join(parts)


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or "No details"
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.text or "No details"


def _retry_after(response: httpx.Response) -> Optional[int]:
    value = response.headers.get("retry-after")
    try:
        return int(float(value)) if value else None
    except ValueError:
        return None


class BaseLLMAdapter(ABC):
    """Base class for completion adapters."""

    provider = "unknown"

    @abstractmethod
    def create(self, params: CompletionParams) -> LLMResponse:
        """Run one completion call."""
        pass


class OpenAIResponsesAdapter(BaseLLMAdapter):
    """Adapter for the OpenAI Responses API (POST {base_url}/responses)."""

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/responses"

    def create(self, params: CompletionParams) -> LLMResponse:
        if not self.api_key:
            raise ConfigError("OpenAI API key not found. Set OPENAI_API_KEY")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.endpoint, headers=headers, json=params.to_payload())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise LLMAuthError(
                    provider=self.provider,
                    model_name=params.model,
                    endpoint=self.endpoint,
                ) from e
            if status == 429:
                raise LLMRateLimitError(
                    provider=self.provider,
                    model_name=params.model,
                    endpoint=self.endpoint,
                    retry_after=_retry_after(e.response),
                ) from e
            raise LLMError(
                message=f"HTTP {status}: {_error_detail(e.response)}",
                provider=self.provider,
                model_name=params.model,
                endpoint=self.endpoint,
                status_code=status,
            ) from e
        except httpx.ConnectError as e:
            raise LLMConnectionError(
                provider=self.provider,
                model_name=params.model,
                endpoint=self.endpoint,
            ) from e
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(
                provider=self.provider,
                model_name=params.model,
                endpoint=self.endpoint,
                timeout_seconds=self.timeout,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(
                message=f"request failed: {e}",
                provider=self.provider,
                model_name=params.model,
                endpoint=self.endpoint,
            ) from e

        if not isinstance(data, dict):
            raise LLMError(
                message="unexpected response body",
                provider=self.provider,
                model_name=params.model,
                endpoint=self.endpoint,
            )

        return LLMResponse(
            content=extract_output_text(data),
            model=str(data.get("model") or params.model),
            usage=data.get("usage"),
            raw=data,
        )


def create_llm_adapter(
    config: ServiceConfig,
    transport: Optional[httpx.BaseTransport] = None,
) -> BaseLLMAdapter:
    """Factory for the configured completion adapter."""
    return OpenAIResponsesAdapter(
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        timeout=config.request_timeout,
        transport=transport,
    )
