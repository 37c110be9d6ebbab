"""
KitchenLedger — restaurant food costing and inventory reconciliation.

Real dish costs from waste and yield adjustments, and stock variance from
counted inventory against movements, waste, staff meals and POS sales.
"""

__version__ = "0.1.0"
__all__ = ["KitchenLedger"]

from kitchenledger.engine import KitchenLedger  # noqa: E402
