"""Connectors package — record sources for the analyzers."""
from kitchenledger.connectors.base import BaseConnector
from kitchenledger.connectors.csv_connector import CSVConnector
from kitchenledger.connectors.memory import InMemoryStore

__all__ = [
    "BaseConnector",
    "CSVConnector",
    "InMemoryStore",
]
