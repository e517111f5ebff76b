"""Sustainability certification registry.

A single-authority registry that issues, updates, revokes, and queries
sustainability certifications for identified businesses.
"""

from certreg.config import RegistryConfig
from certreg.models import (
    CallContext,
    CertType,
    CertUpdate,
    Certification,
    IssuanceRequest,
    Metrics,
    RegistryError,
    RegistryResult,
    SettlementInstruction,
)
from certreg.service import RegistryEngine

__version__ = "0.1.0"

__all__ = [
    "CallContext",
    "CertType",
    "CertUpdate",
    "Certification",
    "IssuanceRequest",
    "Metrics",
    "RegistryConfig",
    "RegistryEngine",
    "RegistryError",
    "RegistryResult",
    "SettlementInstruction",
]
