"""Generation settings.

GeneratorConfig is a frozen pydantic model. Values can come from keyword
arguments or from HEXWFC_* environment variables (the CLI loads a .env file
first), e.g. HEXWFC_RADIUS=6, HEXWFC_SEED=42, HEXWFC_HEAP_ORDER=max.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .wfc.heap import HeapOrder

ENV_PREFIX = "HEXWFC_"


class GeneratorConfig(BaseModel):
    """Settings for one world generation run."""

    model_config = ConfigDict(frozen=True)

    radius: int = Field(default=4, ge=0)
    height: int = Field(default=2, ge=0)
    seed: int | None = None
    heap_order: HeapOrder = HeapOrder.MIN

    # Contradiction handling
    max_retries: int = Field(default=10, ge=1)
    max_backtracks: int = Field(default=0, ge=0)
    snapshot_interval: int = Field(default=50, ge=1)

    # Placement pacing: yield to the event loop every N placements (0 = never)
    yield_every: int = Field(default=1, ge=0)

    include_empty: bool = False
    catalog_path: Path | None = None

    @field_validator("radius")
    @classmethod
    def _radius_is_even(cls, value: int) -> int:
        if value % 2 != 0:
            raise ValueError(f"radius must be even, got {value}")
        return value

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> GeneratorConfig:
        """
        Build a config from HEXWFC_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.
            **overrides: Explicit values (e.g. from the command line). None
                         values are ignored so unset CLI flags fall through.

        Raises:
            pydantic.ValidationError: If any value is invalid.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            key = f"{ENV_PREFIX}{name.upper()}"
            if key in env and env[key] != "":
                values[name] = env[key]

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
