"""
Base connector — the contract between KitchenLedger and a record source.

A source may be the back-office database, a folder of spreadsheet exports,
or an in-process store. Whatever it is, it hands the analyzers one
KitchenDataset with catalog and ledger records already validated.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kitchenledger.models.dataset import KitchenDataset


class BaseConnector(ABC):
    """Source of catalog and ledger records.

    Subclasses set ``name`` and implement ``pull()`` and
    ``validate_credentials()``. Config entries pass ``credentials`` plus any
    connector-specific options as keyword arguments.

    Example::

        class BackOfficeConnector(BaseConnector):
            name = "backoffice"

            async def pull(self) -> KitchenDataset:
                rows = await self.client.fetch_all()
                return KitchenDataset(products=[Product(**r) for r in rows["products"]], ...)

            async def validate_credentials(self) -> bool:
                return await self.client.ping()
    """

    name: str = "base"
    description: str = "Base connector"

    def __init__(self, credentials: dict[str, Any] | None = None, **options: Any) -> None:
        self.credentials = credentials or {}
        self.options = options

    @abstractmethod
    async def pull(self) -> KitchenDataset:
        """Read every record the source holds into a KitchenDataset."""
        ...

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Whether the source can be reached with the configured settings."""
        ...

    async def health_check(self) -> dict[str, Any]:
        """Report reachability without raising."""
        error = None
        try:
            healthy = await self.validate_credentials()
        except Exception as e:
            healthy, error = False, str(e)
        return {"connector": self.name, "healthy": healthy, "error": error}
