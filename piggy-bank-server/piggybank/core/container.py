"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass

from piggybank.core.config import Settings
from piggybank.infrastructure.database import Database


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    database: Database

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationContainer":
        return cls(settings=settings, database=Database(settings))

    async def startup(self) -> None:
        if self.settings.database.create_all:
            await self.database.create_all()

    async def shutdown(self) -> None:
        await self.database.dispose()


__all__ = ["ApplicationContainer"]
