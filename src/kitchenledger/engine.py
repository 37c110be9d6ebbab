"""
KitchenLedger — Main orchestrator.

The KitchenLedger class is the top-level entry point that pulls records from
the configured connectors and runs the costing and reconciliation engines
over them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from kitchenledger.analyzers.composition import CompositionResolver
from kitchenledger.analyzers.reconciliation import (
    FoodCostMetrics,
    ReconciliationEngine,
    ReconciliationReport,
)
from kitchenledger.config import KitchenLedgerConfig
from kitchenledger.connectors.registry import ConnectorRegistry
from kitchenledger.models.dataset import KitchenDataset

logger = logging.getLogger("kitchenledger")


def merge_datasets(datasets: list[KitchenDataset]) -> KitchenDataset:
    """Concatenate the records of several datasets."""
    merged = KitchenDataset(source="+".join(ds.source for ds in datasets) or "empty")
    for ds in datasets:
        merged.products.extend(ds.products)
        merged.recipes.extend(ds.recipes)
        merged.dishes.extend(ds.dishes)
        merged.stock_movements.extend(ds.stock_movements)
        merged.waste.extend(ds.waste)
        merged.personal_meals.extend(ds.personal_meals)
        merged.sales.extend(ds.sales)
        merged.editable_inventory.extend(ds.editable_inventory)
        merged.orders.extend(ds.orders)
    return merged


@dataclass
class KitchenLedger:
    """Top-level orchestrator.

    Usage::

        from kitchenledger import KitchenLedger

        ledger = KitchenLedger.from_config("kitchenledger.yaml")
        report = ledger.reconcile_sync(2025, 3)
        metrics = ledger.food_cost_sync(2025, 3)
    """

    config: KitchenLedgerConfig
    connector_registry: ConnectorRegistry = field(default_factory=ConnectorRegistry)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> KitchenLedger:
        """Create an instance from a config file or keyword arguments."""
        config = KitchenLedgerConfig.load(config_path, **overrides)
        instance = cls(config=config)
        instance._setup()
        return instance

    def _setup(self) -> None:
        """Initialize connectors from config."""
        self.connector_registry = ConnectorRegistry()
        self.connector_registry.auto_discover(self.config)
        logger.info(
            "KitchenLedger initialized with %d connectors",
            len(self.connector_registry),
        )

    async def load_dataset(self) -> KitchenDataset:
        """Pull from every active connector and merge the results."""
        connectors = self.connector_registry.active_connectors
        if not connectors:
            logger.warning("No connectors configured; analysing an empty dataset")
            return KitchenDataset(source="empty")

        datasets = await asyncio.gather(*(c.pull() for c in connectors))
        for connector, ds in zip(connectors, datasets):
            logger.info("Pulled %d products, %d sales from %s", len(ds.products), len(ds.sales), connector.name)
        return merge_datasets(list(datasets))

    def resolver(self, dataset: KitchenDataset) -> CompositionResolver:
        return CompositionResolver(
            dataset,
            target_food_cost_pct=self.config.costing.target_food_cost_pct,
            vat_rate=self.config.costing.vat_rate,
        )

    async def reconcile(self, year: int, month: int) -> ReconciliationReport:
        """Reconcile counted stock against the ledgers for a calendar month."""
        dataset = await self.load_dataset()
        return ReconciliationEngine(dataset).reconcile_month(year, month)

    async def food_cost(self, year: int, month: int) -> FoodCostMetrics:
        """Real vs theoretical food cost for a calendar month."""
        dataset = await self.load_dataset()
        return ReconciliationEngine(dataset).food_cost_metrics(year, month)

    def reconcile_sync(self, year: int, month: int) -> ReconciliationReport:
        """Synchronous wrapper around :meth:`reconcile`."""
        return asyncio.run(self.reconcile(year, month))

    def food_cost_sync(self, year: int, month: int) -> FoodCostMetrics:
        """Synchronous wrapper around :meth:`food_cost`."""
        return asyncio.run(self.food_cost(year, month))
