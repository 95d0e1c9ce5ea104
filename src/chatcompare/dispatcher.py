"""Fans a user message out to several targets and folds the results into the store."""

import logging
from typing import Iterable, List, Optional

from .client import BackendClient, unique_targets
from .config import DEFAULT_MAX_TOKENS, DEFAULT_SYSTEM_PROMPT, DEFAULT_TEMPERATURE
from .errors import CredentialRequiredError, DispatchError, TargetBusyError
from .models import SYSTEM_ROLE, USER_ROLE, ChatMessage, DispatchReport, Outcome
from .store import Store

logger = logging.getLogger(__name__)

DISPATCH_FAILED = "Failed to get response from model"


def build_envelope(
    user_text: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT
) -> List[ChatMessage]:
    """The system instruction followed by the new user message.

    Earlier turns are not replayed; every request is a single-turn prompt.
    """
    return [
        ChatMessage(role=SYSTEM_ROLE, content=system_prompt),
        ChatMessage(role=USER_ROLE, content=user_text),
    ]


class Dispatcher:
    """Bridges a send action to the backend client and the conversation store."""

    def __init__(
        self,
        client: BackendClient,
        store: Store,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        self.client = client
        self.store = store
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens

    def busy_targets(self, targets: Iterable[str]) -> List[str]:
        busy = []
        for target in targets:
            state = self.store.get(target)
            if state is not None and state.loading:
                busy.append(target)
        return busy

    async def send_to_targets(
        self,
        targets: Iterable[str],
        user_text: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> DispatchReport:
        """Sends ``user_text`` to every target concurrently.

        Raises
        ------
        CredentialRequiredError
            No credential is configured. No state is touched.
        ValueError
            ``user_text`` or a target identifier is blank. No state is touched.
        TargetBusyError
            A requested target still has a request in flight. No state is touched.
        DispatchError
            The fan-out itself failed; every target of the batch is put into
            an error state before this is raised.
        """
        if not self.client.is_configured:
            logger.warning("Dispatch rejected: no API key configured")
            raise CredentialRequiredError(
                "Please configure your OpenRouter API key to use this feature"
            )
        if not user_text or not user_text.strip():
            raise ValueError("Message text is empty")

        targets = unique_targets(targets)
        if not targets:
            return DispatchReport()
        if any(not t or not t.strip() for t in targets):
            raise ValueError("Target identifiers must be non-empty")

        busy = self.busy_targets(targets)
        if busy:
            logger.warning("Dispatch rejected: %s still loading", ", ".join(busy))
            raise TargetBusyError(busy)

        # Every target shows as pending before the first request goes out.
        request_ids = {}
        for target in targets:
            self.store.initialize(target)
            request_ids[target] = self.store.add_user_turn(target, user_text).id

        envelope = build_envelope(user_text, self.system_prompt)
        applied = set()

        def apply(outcome: Outcome) -> None:
            applied.add(outcome.target)
            self._apply(outcome, request_ids.get(outcome.target))

        try:
            outcomes = await self.client.send_to_many(
                targets,
                envelope,
                self.temperature if temperature is None else temperature,
                self.max_tokens if max_tokens is None else max_tokens,
                on_outcome=apply,
            )
        except Exception as e:
            logger.error("Error sending messages: %s", e)
            for target in targets:
                if target in applied:
                    continue
                if self._is_current(target, request_ids[target]):
                    self.store.set_error(target, DISPATCH_FAILED)
            raise DispatchError("Failed to send messages to models") from e

        report = DispatchReport(targets=targets)
        for target in targets:
            outcome = outcomes.get(target) or Outcome.failure(target, "Request failed")
            report.outcomes[target] = outcome
            if target not in applied:
                self._apply(outcome, request_ids[target])

        logger.info(
            "Received responses from %d of %d models", report.received, len(targets)
        )
        return report

    def _is_current(self, target: str, request_id: Optional[str]) -> bool:
        state = self.store.get(target)
        return (
            state is not None
            and state.loading
            and request_id is not None
            and state.request_id == request_id
        )

    def _apply(self, outcome: Outcome, request_id: Optional[str]) -> None:
        target = outcome.target
        if not self._is_current(target, request_id):
            logger.debug("Dropping stale outcome for %s: state was cleared", target)
            return
        if outcome.ok:
            self.store.add_assistant_turn(target, outcome.content, outcome.usage)
        else:
            logger.debug("Model %s failed: %s", target, outcome.error)
            self.store.set_error(target, outcome.error)
