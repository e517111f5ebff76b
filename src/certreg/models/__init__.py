"""Core data models for the certification registry."""

from certreg.models.certification import (
    CallContext,
    CertType,
    CertUpdate,
    Certification,
    IssuanceRequest,
    Metrics,
    SettlementInstruction,
)
from certreg.models.result import ERROR_CODES, RegistryError, RegistryResult

__all__ = [
    "CallContext",
    "CertType",
    "CertUpdate",
    "Certification",
    "ERROR_CODES",
    "IssuanceRequest",
    "Metrics",
    "RegistryError",
    "RegistryResult",
    "SettlementInstruction",
]
