"""
KitchenLedger configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class CostingConfig(BaseModel):
    """Defaults used when pricing dishes and recipes."""

    target_food_cost_pct: float = Field(
        default=30.0, gt=0.0, lt=100.0, description="Target food cost % for suggested prices"
    )
    vat_rate: float = Field(default=0.10, ge=0.0, description="VAT included in selling prices")


class ConnectorConfig(BaseModel):
    """Configuration for a single data connector."""

    type: str = Field(description="Connector type: csv, memory, or a dotted class path")
    enabled: bool = True
    credentials: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)


class KitchenLedgerConfig(BaseModel):
    """Root configuration for KitchenLedger."""

    costing: CostingConfig = Field(default_factory=CostingConfig)
    connectors: list[ConnectorConfig] = Field(default_factory=list)

    # Output settings
    output_dir: str = Field(default="./kitchenledger_reports")
    currency: str = Field(default="€", description="Symbol used when formatting amounts")
    log_level: str = Field(default="WARNING")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> KitchenLedgerConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_target = os.environ.get("KITCHENLEDGER_TARGET_FOOD_COST")
        env_vat = os.environ.get("KITCHENLEDGER_VAT_RATE")
        env_data_dir = os.environ.get("KITCHENLEDGER_DATA_DIR")
        env_log_level = os.environ.get("KITCHENLEDGER_LOG_LEVEL")

        if env_target or env_vat:
            costing = data.get("costing", {})
            if env_target:
                costing["target_food_cost_pct"] = float(env_target)
            if env_vat:
                costing["vat_rate"] = float(env_vat)
            data["costing"] = costing

        if env_data_dir:
            connectors = data.get("connectors", [])
            connectors.append({"type": "csv", "options": {"data_dir": env_data_dir}})
            data["connectors"] = connectors

        if env_log_level:
            data["log_level"] = env_log_level.upper()

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
