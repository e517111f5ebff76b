"""Registry configuration — capacity, fee, burn principal, and field bounds.

Parameters live in config/registry_params.json. Two operational values may
be overridden from the environment (or a .env file at the project root):

    CERTREG_MAX_CERTS      capacity of the issuance counter
    CERTREG_ISSUANCE_FEE   fee in effect before the authority changes it

RegistryConfig() with no arguments carries the same defaults as the
shipped params file, so an engine can be built without touching disk.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv


DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
PARAMS_FILENAME = "registry_params.json"

BURN_PRINCIPAL = "SP000000000000000000002Q6VF78"

ENV_MAX_CERTS = "CERTREG_MAX_CERTS"
ENV_ISSUANCE_FEE = "CERTREG_ISSUANCE_FEE"


@dataclass(frozen=True)
class RegistryConfig:
    """Immutable registry parameters."""

    max_certs: int = 10000
    initial_issuance_fee: int = 500
    burn_principal: str = BURN_PRINCIPAL
    score_max: int = 100
    compliance_level_min: int = 1
    compliance_level_max: int = 5
    grace_period_max: int = 90
    location_max_length: int = 100
    category_max_length: int = 50
    review_rate_max: int = 10
    proof_hash_length: int = 32
    revoke_reason_max_length: int = 200

    def __post_init__(self) -> None:
        if self.max_certs < 0:
            raise ValueError(f"max_certs must be >= 0, got {self.max_certs}")
        if self.initial_issuance_fee < 0:
            raise ValueError(
                f"initial_issuance_fee must be >= 0, got {self.initial_issuance_fee}"
            )
        if self.compliance_level_min > self.compliance_level_max:
            raise ValueError("compliance_level_min cannot exceed compliance_level_max")

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> RegistryConfig:
        """Build from the parsed registry_params.json structure."""
        bounds = params["field_bounds"]
        return cls(
            max_certs=params["capacity"]["max_certs"],
            initial_issuance_fee=params["fees"]["initial_issuance_fee"],
            burn_principal=params["authority"]["burn_principal"],
            score_max=bounds["score_max"],
            compliance_level_min=bounds["compliance_level_min"],
            compliance_level_max=bounds["compliance_level_max"],
            grace_period_max=bounds["grace_period_max"],
            location_max_length=bounds["location_max_length"],
            category_max_length=bounds["category_max_length"],
            review_rate_max=bounds["review_rate_max"],
            proof_hash_length=bounds["proof_hash_length"],
            revoke_reason_max_length=bounds["revoke_reason_max_length"],
        )

    @classmethod
    def from_config_dir(
        cls,
        config_dir: Path = DEFAULT_CONFIG_DIR,
        env_file: Optional[Path] = None,
    ) -> RegistryConfig:
        """Load registry_params.json, then apply environment overrides."""
        params = json.loads((config_dir / PARAMS_FILENAME).read_text(encoding="utf-8"))
        return cls.from_params(params).with_env_overrides(env_file)

    def with_env_overrides(self, env_file: Optional[Path] = None) -> RegistryConfig:
        """Return a copy with CERTREG_* environment values applied."""
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        overrides: dict[str, int] = {}
        raw_max = os.getenv(ENV_MAX_CERTS)
        if raw_max:
            overrides["max_certs"] = _parse_int(ENV_MAX_CERTS, raw_max)
        raw_fee = os.getenv(ENV_ISSUANCE_FEE)
        if raw_fee:
            overrides["initial_issuance_fee"] = _parse_int(ENV_ISSUANCE_FEE, raw_fee)
        if not overrides:
            return self
        return replace(self, **overrides)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
