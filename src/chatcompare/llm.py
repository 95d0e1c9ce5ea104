"""Concrete implementations for chat-completion transports."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from .config import ClientConfig
from .models import Usage


class LLM(ABC):
    """Abstract Base Class for all chat-completion transports."""

    @abstractmethod
    async def generate_response(
        self, messages: List[Dict[str, Any]], model: str, **kwargs: Any
    ) -> Any:
        """Issues one chat-completion request to the named model.

        This method should return the provider's native, rich response object
        directly from their SDK.

        Parameters
        ----------
        messages : List[Dict[str, Any]]
            A list of role-tagged message dictionaries.
        model : str
            The target identifier, e.g. ``"openai/gpt-4o-mini"``.
        **kwargs : Any
            Provider-specific parameters (e.g., temperature, max_tokens) to be
            passed directly to the SDK.

        Returns
        -------
        Any
            The provider's native, rich response object.
        """
        pass

    @abstractmethod
    def extract_content(self, response: Any) -> Optional[str]:
        """Extracts the text content from the provider's native response object.

        Parameters
        ----------
        response : Any
            The provider's native response object from generate_response.

        Returns
        -------
        Optional[str]
            The generated text, or None if the response carries none.
        """
        pass

    def extract_usage(self, response: Any) -> Optional[Usage]:
        """Extracts token usage, if the provider reported any."""
        return None


class OpenRouter(LLM):
    """OpenAI-compatible transport pointed at OpenRouter.

    The credential is read from the shared ``ClientConfig`` on every call. The
    SDK client is built once; a changed credential yields a ``with_options``
    copy, which shares the original connection pool.
    """

    def __init__(self, config: ClientConfig):
        self.config = config
        self._client = None

    @property
    def client(self):
        from openai import AsyncOpenAI

        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.credential,
                base_url=self.config.base_url,
                default_headers=self.config.headers or None,
            )
        elif self._client.api_key != self.config.credential:
            self._client = self._client.with_options(api_key=self.config.credential)
        return self._client

    async def generate_response(self, messages, model, **kwargs):
        return await self.client.chat.completions.create(
            model=model, messages=messages, **kwargs
        )

    def extract_content(self, response: Any) -> Optional[str]:
        if not response.choices:
            return None
        message = response.choices[0].message
        return message.content if message is not None else None

    def extract_usage(self, response: Any) -> Optional[Usage]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        return Usage(
            prompt_tokens=usage.prompt_tokens or 0,
            completion_tokens=usage.completion_tokens or 0,
            total_tokens=usage.total_tokens or 0,
        )


class Echo(LLM):
    """Offline transport that echoes the prompt back.

    ``delays`` and ``failures`` are keyed by model identifier, which makes it
    possible to script slow or failing targets.
    """

    def __init__(
        self,
        delay: float = 0.0,
        delays: Optional[Dict[str, float]] = None,
        failures: Optional[Dict[str, Union[str, Exception]]] = None,
    ):
        self.delay = delay
        self.delays = dict(delays or {})
        self.failures = dict(failures or {})
        self.calls: List[str] = []

    async def generate_response(self, messages, model, **kwargs):
        self.calls.append(model)
        await asyncio.sleep(self.delays.get(model, self.delay))

        failure = self.failures.get(model)
        if isinstance(failure, Exception):
            raise failure
        if failure is not None:
            raise RuntimeError(failure)

        user_prompt = messages[-1]["content"] if messages else "No message provided"
        content = f"**Echo LLM - static response for testing**\n\n_Your prompt:_\n\n{user_prompt}"
        prompt_tokens = sum(len(m["content"].split()) for m in messages)
        completion_tokens = len(content.split())
        return {
            "content": content,
            "model": model,
            "usage": {
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
        }

    def extract_content(self, response: Any) -> Optional[str]:
        if isinstance(response, dict):
            return response.get("content")
        return str(response)

    def extract_usage(self, response: Any) -> Optional[Usage]:
        if isinstance(response, dict) and response.get("usage"):
            return Usage(**response["usage"])
        return None
