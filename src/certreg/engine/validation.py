"""Validation pipeline — ordered field checks for every registry mutation.

Checks are fail-closed and short-circuit: the first violated rule is the
reported error, and nothing after it is evaluated. The order below is part
of the registry's contract. When several fields are invalid at once,
callers always observe the earliest rule in this list:

     1. capacity                  MAX_CERTS_EXCEEDED
     2. issue date <= height      INVALID_ISSUE_DATE
     3. expiry date > height      INVALID_EXPIRY_DATE
     4. score in range            INVALID_SCORE
     5. renewal period > 0        INVALID_RENEWAL_PERIOD
     6. known cert type           INVALID_CERT_TYPE
     7. compliance level range    INVALID_COMPLIANCE_LEVEL
     8. grace period bound        INVALID_GRACE_PERIOD
     9. location length           INVALID_LOCATION
    10. category length           INVALID_CATEGORY
    11. review rate bound         INVALID_REVIEW_RATE
    12. proof hash length         INVALID_PROOF_HASH
    13. positive metrics          INVALID_METRICS
    14. business not certified    CERT_ALREADY_EXISTS
    15. caller is the auditor     NOT_AUTHORIZED
    16. authority is set          AUTHORITY_NOT_SET

Rules 15 and 16 are delegated to the authorization gate so that the
auditor and authority rules live in one place.

The pipeline is stateless. Anything it needs from registry state, capacity
included, is passed in by the caller for the duration of one call, so the
checks always agree with the store that will commit the record.
"""

from __future__ import annotations

from typing import Callable, Optional

from certreg.config import RegistryConfig
from certreg.engine.authorization import AuthorizationGate
from certreg.models.certification import CallContext, CertType, IssuanceRequest
from certreg.models.result import RegistryError


Check = Callable[[], Optional[RegistryError]]

CERT_TYPE_VALUES = frozenset(t.value for t in CertType)


def first_failure(checks: list[Check]) -> Optional[RegistryError]:
    """Run checks in order and return the first error, or None."""
    for check in checks:
        error = check()
        if error is not None:
            return error
    return None


class ValidationPipeline:
    """Ordered validation for issuance, update, and revocation inputs."""

    def __init__(
        self,
        config: RegistryConfig,
        gate: Optional[AuthorizationGate] = None,
    ) -> None:
        self._config = config
        self._gate = gate or AuthorizationGate()

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def validate_issuance(
        self,
        request: IssuanceRequest,
        ctx: CallContext,
        *,
        next_cert_id: int,
        max_certs: int,
        already_certified: bool,
        authority: Optional[str],
    ) -> Optional[RegistryError]:
        """Return the first violated issuance rule, or None if all pass."""
        cfg = self._config
        return first_failure([
            lambda: self._check_capacity(next_cert_id, max_certs),
            lambda: self.check_issue_date(request.issue_date, ctx.height),
            lambda: self.check_expiry(request.expiry_date, ctx.height),
            lambda: self.check_score(request.score),
            lambda: (
                RegistryError.INVALID_RENEWAL_PERIOD
                if request.renewal_period <= 0 else None
            ),
            lambda: (
                RegistryError.INVALID_CERT_TYPE
                if _type_name(request.cert_type) not in CERT_TYPE_VALUES else None
            ),
            lambda: (
                RegistryError.INVALID_COMPLIANCE_LEVEL
                if not (
                    cfg.compliance_level_min
                    <= request.compliance_level
                    <= cfg.compliance_level_max
                ) else None
            ),
            lambda: (
                RegistryError.INVALID_GRACE_PERIOD
                if request.grace_period > cfg.grace_period_max else None
            ),
            lambda: (
                RegistryError.INVALID_LOCATION
                if not _bounded_text(request.location, cfg.location_max_length)
                else None
            ),
            lambda: (
                RegistryError.INVALID_CATEGORY
                if not _bounded_text(request.category, cfg.category_max_length)
                else None
            ),
            lambda: (
                RegistryError.INVALID_REVIEW_RATE
                if request.review_rate > cfg.review_rate_max else None
            ),
            lambda: (
                RegistryError.INVALID_PROOF_HASH
                if len(request.proof_hash) != cfg.proof_hash_length else None
            ),
            lambda: (
                RegistryError.INVALID_METRICS
                if not request.metrics.all_positive else None
            ),
            lambda: (
                RegistryError.CERT_ALREADY_EXISTS if already_certified else None
            ),
            lambda: self._gate.check_issuer(request.auditor_id, ctx),
            lambda: self._gate.check_authority_present(authority),
        ])

    def _check_capacity(self, next_cert_id: int, max_certs: int) -> Optional[RegistryError]:
        if next_cert_id >= max_certs:
            return RegistryError.MAX_CERTS_EXCEEDED
        return None

    # ------------------------------------------------------------------
    # Field rules shared with update
    # ------------------------------------------------------------------

    def check_issue_date(self, issue_date: int, height: int) -> Optional[RegistryError]:
        if issue_date > height:
            return RegistryError.INVALID_ISSUE_DATE
        return None

    def check_expiry(self, expiry_date: int, height: int) -> Optional[RegistryError]:
        if expiry_date <= height:
            return RegistryError.INVALID_EXPIRY_DATE
        return None

    def check_score(self, score: int) -> Optional[RegistryError]:
        if not (0 <= score <= self._config.score_max):
            return RegistryError.INVALID_SCORE
        return None

    # ------------------------------------------------------------------
    # Update / revocation payloads
    # ------------------------------------------------------------------

    def validate_update(
        self,
        new_score: int,
        new_expiry: int,
        ctx: CallContext,
    ) -> Optional[RegistryError]:
        """Score first, then expiry. Existence and auditor are checked upstream."""
        return first_failure([
            lambda: self.check_score(new_score),
            lambda: self.check_expiry(new_expiry, ctx.height),
        ])

    def validate_revocation(self, reason: str) -> Optional[RegistryError]:
        if not _bounded_text(reason, self._config.revoke_reason_max_length):
            return RegistryError.INVALID_REVOKE_REASON
        return None


def _type_name(cert_type: object) -> object:
    """Plain string value for CertType members, the input unchanged otherwise."""
    if isinstance(cert_type, CertType):
        return cert_type.value
    return cert_type


def _bounded_text(value: str, max_length: int) -> bool:
    """Non-empty and at most max_length characters."""
    return bool(value) and len(value) <= max_length
