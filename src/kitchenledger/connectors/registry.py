"""
Connector Registry — builds the record sources named in config.

A config entry's ``type`` is either a built-in short name or the dotted path
of a BaseConnector subclass. Several sources of the same type may coexist
(e.g. one CSV export directory per kitchen); each gets its own key.
"""

from __future__ import annotations

import importlib
import logging

from kitchenledger.config import ConnectorConfig, KitchenLedgerConfig
from kitchenledger.connectors.base import BaseConnector

logger = logging.getLogger("kitchenledger.connectors.registry")

BUILTIN_CONNECTORS: dict[str, str] = {
    "csv": "kitchenledger.connectors.csv_connector.CSVConnector",
    "memory": "kitchenledger.connectors.memory.InMemoryStore",
}


class ConnectorRegistry:
    """Keyed collection of the connectors a ledger pulls from.

    Keys default to the connector's ``name``; a second connector with the
    same name is stored as ``name-2``, then ``name-3``, and so on.
    """

    def __init__(self) -> None:
        self._connectors: dict[str, BaseConnector] = {}

    def __len__(self) -> int:
        return len(self._connectors)

    def __contains__(self, key: str) -> bool:
        return key in self._connectors

    @property
    def active_connectors(self) -> list[BaseConnector]:
        return list(self._connectors.values())

    def register(self, connector: BaseConnector, key: str | None = None) -> str:
        """Add a connector and return the key it was stored under."""
        base = key or connector.name
        key, n = base, 1
        while key in self._connectors:
            n += 1
            key = f"{base}-{n}"
        self._connectors[key] = connector
        logger.info("Registered %s connector as %r", connector.name, key)
        return key

    def unregister(self, key: str) -> BaseConnector | None:
        return self._connectors.pop(key, None)

    def get(self, key: str) -> BaseConnector | None:
        return self._connectors.get(key)

    def auto_discover(self, config: KitchenLedgerConfig) -> None:
        """Register every enabled connector listed in ``config``."""
        for entry in config.connectors:
            if not entry.enabled:
                logger.debug("Connector %s disabled in config; skipping", entry.type)
                continue
            connector = self.build(entry)
            if connector is not None:
                self.register(connector)

    @staticmethod
    def build(entry: ConnectorConfig) -> BaseConnector | None:
        """Instantiate the connector a config entry describes.

        Returns ``None`` (and logs) when the type cannot be resolved to a
        BaseConnector subclass.
        """
        target = BUILTIN_CONNECTORS.get(entry.type, entry.type)
        module_path, _, class_name = target.rpartition(".")
        if not module_path:
            logger.error("Unknown connector type %r", entry.type)
            return None

        try:
            connector_cls = getattr(importlib.import_module(module_path), class_name)
        except (ImportError, AttributeError) as e:
            logger.error("Cannot load connector %r: %s", entry.type, e)
            return None

        if not (isinstance(connector_cls, type) and issubclass(connector_cls, BaseConnector)):
            logger.error("%s is not a BaseConnector subclass", target)
            return None
        return connector_cls(credentials=entry.credentials, **entry.options)
