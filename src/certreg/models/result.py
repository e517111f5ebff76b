"""Registry error kinds and the tagged result returned by every operation.

Error kinds are a closed enumeration so callers branch on kind, never on
message text. The integer codes exist only for hosts that need the
legacy numeric encoding at their boundary.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional


class RegistryError(str, enum.Enum):
    """Every way a registry operation can fail."""
    NOT_AUTHORIZED = "not_authorized"
    INVALID_ISSUE_DATE = "invalid_issue_date"
    INVALID_EXPIRY_DATE = "invalid_expiry_date"
    CERT_ALREADY_EXISTS = "cert_already_exists"
    CERT_NOT_FOUND = "cert_not_found"
    INVALID_SCORE = "invalid_score"
    INVALID_RENEWAL_PERIOD = "invalid_renewal_period"
    MAX_CERTS_EXCEEDED = "max_certs_exceeded"
    INVALID_CERT_TYPE = "invalid_cert_type"
    INVALID_COMPLIANCE_LEVEL = "invalid_compliance_level"
    INVALID_GRACE_PERIOD = "invalid_grace_period"
    INVALID_LOCATION = "invalid_location"
    INVALID_CATEGORY = "invalid_category"
    INVALID_REVIEW_RATE = "invalid_review_rate"
    INVALID_PROOF_HASH = "invalid_proof_hash"
    INVALID_METRICS = "invalid_metrics"
    INVALID_REVOKE_REASON = "invalid_revoke_reason"
    AUTHORITY_NOT_SET = "authority_not_set"
    ALREADY_SET = "already_set"
    INVALID_PRINCIPAL = "invalid_principal"

    @property
    def code(self) -> int:
        """Legacy numeric code for this kind."""
        return ERROR_CODES[self]


ERROR_CODES: dict[RegistryError, int] = {
    RegistryError.NOT_AUTHORIZED: 100,
    RegistryError.INVALID_ISSUE_DATE: 103,
    RegistryError.INVALID_EXPIRY_DATE: 104,
    RegistryError.CERT_ALREADY_EXISTS: 106,
    RegistryError.CERT_NOT_FOUND: 107,
    RegistryError.INVALID_SCORE: 110,
    RegistryError.INVALID_RENEWAL_PERIOD: 111,
    RegistryError.MAX_CERTS_EXCEEDED: 114,
    RegistryError.INVALID_CERT_TYPE: 115,
    RegistryError.INVALID_COMPLIANCE_LEVEL: 116,
    RegistryError.INVALID_GRACE_PERIOD: 117,
    RegistryError.INVALID_LOCATION: 118,
    RegistryError.INVALID_CATEGORY: 119,
    RegistryError.INVALID_REVIEW_RATE: 120,
    RegistryError.INVALID_PROOF_HASH: 121,
    RegistryError.INVALID_METRICS: 122,
    RegistryError.INVALID_REVOKE_REASON: 123,
    RegistryError.AUTHORITY_NOT_SET: 124,
    RegistryError.ALREADY_SET: 125,
    RegistryError.INVALID_PRINCIPAL: 126,
}


@dataclass(frozen=True)
class RegistryResult:
    """Result of a registry operation.

    On success, value carries the operation's payload (a cert id, a
    boolean, a count). On failure, error names the first rule that
    rejected the call and value is None. Warnings never change the
    outcome; they report degraded ambient services such as the audit log.
    """
    success: bool
    value: Any = None
    error: Optional[RegistryError] = None
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, value: Any = True, warnings: Optional[list[str]] = None) -> RegistryResult:
        return cls(success=True, value=value, warnings=list(warnings or []))

    @classmethod
    def fail(cls, error: RegistryError) -> RegistryResult:
        return cls(success=False, error=error)

    def to_wire(self) -> dict[str, Any]:
        """Encode as {"ok", "value"} with numeric error codes on failure."""
        if self.success:
            return {"ok": True, "value": self.value}
        return {"ok": False, "value": self.error.code if self.error else None}
