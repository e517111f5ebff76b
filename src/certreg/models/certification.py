"""Certification models — records, update slots, requests, and call context.

A Certification is an immutable value. Mutations never write fields in
place: the store reads the current record, builds a replacement with only
the permitted fields changed, and swaps the stored entry.

Structural invariants enforced by these models:
- auditor_id, issue_date, proof_hash and the descriptive fields never change
  after issuance (there is no API that replaces them).
- status only moves from True to False.
- CertUpdate is a single slot per business, not a history.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Any, Optional


class CertType(str, enum.Enum):
    """Closed set of certification programmes."""
    ECO = "eco"
    GREEN = "green"
    SUSTAINABLE = "sustainable"


@dataclass(frozen=True)
class Metrics:
    """Environmental magnitudes attested at issuance. All must be positive."""
    carbon: int
    waste: int
    energy: int

    @property
    def all_positive(self) -> bool:
        return self.carbon > 0 and self.waste > 0 and self.energy > 0


@dataclass(frozen=True)
class CallContext:
    """Ambient values for a single call, made explicit.

    caller is the already-authenticated identity performing the call.
    height is the current block height supplied by the host clock.
    """
    caller: str
    height: int


@dataclass(frozen=True)
class IssuanceRequest:
    """Every field the issuer supplies for a new certification.

    Values are carried as given; nothing is validated here. The
    validation pipeline decides whether the request is acceptable.
    """
    business_id: str
    auditor_id: str
    issue_date: int
    expiry_date: int
    score: int
    renewal_period: int
    cert_type: str
    compliance_level: int
    grace_period: int
    location: str
    category: str
    review_rate: int
    proof_hash: bytes
    metrics: Metrics


@dataclass(frozen=True)
class Certification:
    """A certification held by one business."""
    cert_id: int
    auditor_id: str
    issue_date: int
    expiry_date: int
    status: bool
    score: int
    renewal_period: int
    cert_type: CertType
    compliance_level: int
    grace_period: int
    location: str
    category: str
    review_rate: int
    proof_hash: bytes
    metrics: Metrics

    @classmethod
    def from_request(cls, cert_id: int, request: IssuanceRequest) -> Certification:
        """Build the active record for a request that passed validation."""
        return cls(
            cert_id=cert_id,
            auditor_id=request.auditor_id,
            issue_date=request.issue_date,
            expiry_date=request.expiry_date,
            status=True,
            score=request.score,
            renewal_period=request.renewal_period,
            cert_type=CertType(request.cert_type),
            compliance_level=request.compliance_level,
            grace_period=request.grace_period,
            location=request.location,
            category=request.category,
            review_rate=request.review_rate,
            proof_hash=bytes(request.proof_hash),
            metrics=request.metrics,
        )

    def revoked(self) -> Certification:
        return replace(self, status=False)

    def rescored(self, new_score: int, new_expiry: int) -> Certification:
        return replace(self, score=new_score, expiry_date=new_expiry)

    def is_valid_at(self, height: int) -> bool:
        """Active and not yet expired at the given height."""
        return self.status and height < self.expiry_date

    def to_record(self) -> dict[str, Any]:
        return {
            "cert_id": self.cert_id,
            "auditor_id": self.auditor_id,
            "issue_date": self.issue_date,
            "expiry_date": self.expiry_date,
            "status": self.status,
            "score": self.score,
            "renewal_period": self.renewal_period,
            "cert_type": self.cert_type.value,
            "compliance_level": self.compliance_level,
            "grace_period": self.grace_period,
            "location": self.location,
            "category": self.category,
            "review_rate": self.review_rate,
            "proof_hash": self.proof_hash.hex(),
            "metrics": {
                "carbon": self.metrics.carbon,
                "waste": self.metrics.waste,
                "energy": self.metrics.energy,
            },
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> Certification:
        m = data["metrics"]
        return cls(
            cert_id=data["cert_id"],
            auditor_id=data["auditor_id"],
            issue_date=data["issue_date"],
            expiry_date=data["expiry_date"],
            status=data["status"],
            score=data["score"],
            renewal_period=data["renewal_period"],
            cert_type=CertType(data["cert_type"]),
            compliance_level=data["compliance_level"],
            grace_period=data["grace_period"],
            location=data["location"],
            category=data["category"],
            review_rate=data["review_rate"],
            proof_hash=bytes.fromhex(data["proof_hash"]),
            metrics=Metrics(
                carbon=m["carbon"], waste=m["waste"], energy=m["energy"],
            ),
        )


@dataclass(frozen=True)
class CertUpdate:
    """The most recent score/expiry change applied to a certification.

    Only the latest update is retained. Earlier updates are overwritten.
    """
    update_score: int
    update_expiry: int
    update_height: int
    updater: str


@dataclass(frozen=True)
class SettlementInstruction:
    """An advisory fee transfer for the host ledger to execute.

    sender pays amount to recipient. The registry decides that the
    transfer happens and how much; execution belongs to the host.
    """
    amount: int
    sender: str
    recipient: Optional[str]
