"""
The main entrypoint for the chatcompare package.

This module contains the ModelComparison class, which wires the backend
client, the conversation store and the dispatcher together around one shared
credential holder. Each collaborator can be swapped for a custom one.
"""

import logging
from typing import Dict, Iterable, List, Optional

from . import catalog, config, credentials, llm, store
from .client import BackendClient
from .config import ClientConfig, Settings
from .dispatcher import Dispatcher
from .models import ConversationState, DispatchReport

logger = logging.getLogger(__name__)

__all__ = ["ModelComparison", "Settings"]


class ModelComparison:
    """
    Sends one prompt to several models and keeps their answers side by side.

    Parameters
    ----------
    settings : Settings, optional
        Application settings. Defaults to ``Settings()``, which reads the
        environment and a local ``.env`` file.
    llm : llm.LLM, optional
        Chat-completion transport. Defaults to ``llm.OpenRouter`` bound to
        this instance's ``ClientConfig``.
    store : store.Store, optional
        Per-target conversation state. Defaults to ``store.InMemory()``.
    credentials : credentials.Credentials, optional
        Where a credential is persisted between sessions. Defaults to
        ``credentials.File`` at ``settings.credentials_path``.

    Examples
    --------
    >>> app = ModelComparison()
    >>> app.configure("sk-or-v1-...")
    >>> report = await app.send(["openai/gpt-4o-mini", "deepseek/deepseek-chat"], "Hi")
    >>> app.get("openai/gpt-4o-mini").messages[-1].content
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        llm: Optional["llm.LLM"] = None,
        store: Optional["store.Store"] = None,
        credentials: Optional["credentials.Credentials"] = None,
    ) -> None:
        llm_module = globals()["llm"]
        store_module = globals()["store"]
        credentials_module = globals()["credentials"]

        self.settings = settings if settings is not None else Settings()
        self.credentials = (
            credentials
            if credentials is not None
            else credentials_module.File(self.settings.credentials_path)
        )

        self.config = ClientConfig.from_settings(self.settings)
        self.config.configure(
            credentials_module.resolve_credential(
                self.settings.api_key, self.credentials
            )
        )

        self.llm = llm if llm is not None else llm_module.OpenRouter(self.config)
        self.store = store if store is not None else store_module.InMemory()
        self.client = BackendClient(
            self.llm, self.config, timeout=self.settings.request_timeout
        )
        self.dispatcher = Dispatcher(
            self.client,
            self.store,
            system_prompt=self.settings.system_prompt,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
        )

    @property
    def is_configured(self) -> bool:
        return self.client.is_configured

    def configure_logging(self) -> None:
        """Sets up root logging at ``settings.log_level``."""
        config.configure_logging(self.settings.log_level)

    def configure(self, credential: Optional[str], persist: bool = False) -> None:
        """Sets the API key used by every subsequent request."""
        self.client.configure(credential)
        if persist:
            if self.config.credential:
                self.credentials.save(self.config.credential)
            else:
                self.credentials.clear()
        logger.info("API key %s", "configured" if self.is_configured else "cleared")

    async def send(
        self,
        targets: Iterable[str],
        text: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> DispatchReport:
        return await self.dispatcher.send_to_targets(
            targets, text, temperature=temperature, max_tokens=max_tokens
        )

    def clear(self, target: Optional[str] = None) -> None:
        """Clears one target's conversation, or every conversation if none is given."""
        if target is None:
            self.store.clear_all()
        else:
            self.store.clear(target)

    def get(self, target: str) -> Optional[ConversationState]:
        return self.store.get(target)

    def get_all(self) -> Dict[str, ConversationState]:
        return self.store.get_all()

    def available_models(self) -> List["catalog.ModelInfo"]:
        return catalog.available_models()
