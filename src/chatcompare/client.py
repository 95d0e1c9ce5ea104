"""The backend client: one chat-completion call per target, normalized to an Outcome."""

import asyncio
import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .config import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, ClientConfig
from .llm import LLM
from .models import ChatMessage, Outcome

logger = logging.getLogger(__name__)

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


def unique_targets(targets: Iterable[str]) -> List[str]:
    """Drops repeated identifiers while keeping first-seen order."""
    return list(dict.fromkeys(targets))


class BackendClient:
    """Issues chat-completion calls on behalf of the dispatcher.

    Every failure mode, from a missing credential to a malformed payload, comes
    back as an ``Outcome`` with ``error`` set; nothing is raised to the caller.

    Parameters
    ----------
    llm : LLM
        The transport that performs the actual request.
    config : ClientConfig
        Shared credential holder. The same object is usually handed to the
        transport, so ``configure`` takes effect for both.
    timeout : float, optional
        Upper bound in seconds for one call. ``None`` waits indefinitely.
    """

    def __init__(
        self, llm: LLM, config: ClientConfig, timeout: Optional[float] = None
    ):
        self.llm = llm
        self.config = config
        self.timeout = timeout

    def configure(self, credential: Optional[str]) -> None:
        self.config.configure(credential)

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    async def send(
        self,
        target: str,
        envelope: Sequence[ChatMessage],
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> Outcome:
        if not target or not target.strip():
            return Outcome.failure(target or "", "Target identifier is empty")
        if not envelope:
            return Outcome.failure(target, "Request envelope is empty")
        if not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
            return Outcome.failure(
                target,
                f"Temperature must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}",
            )
        if max_tokens <= 0:
            return Outcome.failure(target, "max_tokens must be positive")
        if not self.is_configured:
            return Outcome.failure(target, "OpenRouter API key not configured")

        messages = [m.model_dump() for m in envelope]
        try:
            call = self.llm.generate_response(
                messages, target, temperature=temperature, max_tokens=max_tokens
            )
            if self.timeout is not None:
                response = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                response = await call
            content = self.llm.extract_content(response)
            if not content:
                raise ValueError("No response received from model")
            usage = self.llm.extract_usage(response)
        except asyncio.TimeoutError as e:
            if self.timeout is None:
                error = str(e) or "Request timed out"
            else:
                error = f"Request timed out after {self.timeout}s"
            logger.error("Request to %s timed out: %s", target, error)
            return Outcome.failure(target, error)
        except Exception as e:
            logger.error("Error calling backend for model %s: %s", target, e)
            return Outcome.failure(target, str(e) or "Unknown error occurred")

        logger.debug("Received %d characters from %s", len(content), target)
        return Outcome(target=target, content=content, usage=usage)

    async def send_to_many(
        self,
        targets: Iterable[str],
        envelope: Sequence[ChatMessage],
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        on_outcome: Optional[Callable[[Outcome], None]] = None,
    ) -> Dict[str, Outcome]:
        """Sends the same envelope to every target at once and waits for all of them.

        ``on_outcome`` is called with each Outcome as soon as its own request
        settles, so fast targets need not wait for slow ones.
        """
        targets = unique_targets(targets)

        async def settle(target: str) -> Outcome:
            outcome = await self.send(target, envelope, temperature, max_tokens)
            if on_outcome is not None:
                on_outcome(outcome)
            return outcome

        settled = await asyncio.gather(
            *(settle(t) for t in targets),
            return_exceptions=True,
        )

        results: Dict[str, Outcome] = {}
        for target, result in zip(targets, settled):
            if isinstance(result, BaseException):
                logger.error("Request for %s failed unexpectedly: %s", target, result)
                results[target] = Outcome.failure(
                    target, str(result) or "Request failed"
                )
            else:
                results[target] = result
        return results
