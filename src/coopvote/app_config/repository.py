from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ConfigEntry


class ConfigRepository(Protocol):
    def get(self, key: str) -> Optional[ConfigEntry]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ConfigEntry]:
        raise NotImplementedError

    def upsert(self, key: str, value: str, *, updated_by: Optional[str]) -> None:
        raise NotImplementedError

    def ping(self) -> None:
        """Run a trivial query; raises when the database is unreachable."""
        raise NotImplementedError
