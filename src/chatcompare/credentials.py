"""Concrete implementations for credential storage."""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class Credentials(ABC):
    """Interface for persisting the API key between sessions."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """Returns the stored credential, or None if nothing is stored."""
        pass

    @abstractmethod
    def save(self, credential: str) -> None:
        """Stores a credential, replacing any previous one."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Removes the stored credential."""
        pass


class InMemory(Credentials):
    """Keeps the credential for the lifetime of the process only."""

    def __init__(self, credential: Optional[str] = None):
        self._credential = credential

    def load(self) -> Optional[str]:
        return self._credential

    def save(self, credential: str) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None


class File(Credentials):
    """Stores the credential in a small JSON file readable only by its owner."""

    KEY = "openrouter_api_key"

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable credentials file %s: %s", self.path, e)
            return None
        credential = data.get(self.KEY) if isinstance(data, dict) else None
        return credential or None

    def save(self, credential: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({self.KEY: credential}, f)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


def resolve_credential(
    configured: Optional[str], store: Optional[Credentials]
) -> Optional[str]:
    """Picks the credential to start with: explicit configuration first, then storage."""
    if configured and configured.strip():
        return configured.strip()
    if store is None:
        return None
    return store.load()
