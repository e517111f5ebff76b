"""Registry engine — unified facade for the certification registry.

This is the primary interface for programmatic access to the registry.
It orchestrates all subsystems:
- Authority configuration (write-once authority, issuance fee)
- Issuance (validation pipeline → authorization → fee settlement → commit)
- Update and revocation (authorization gate → payload validation → commit)
- Read queries (record lookup, validity, counts, reverse index)
- Audit trail (append-only event log)

Every operation is a single synchronous unit. Caller identity and current
block height arrive explicitly in a CallContext; the engine has no clock
and no notion of a "current sender". The host serializes calls.

Mutations either apply completely or not at all. A rejected call returns a
failed RegistryResult naming the first violated rule and leaves every
piece of registry state untouched.
"""

from __future__ import annotations

from typing import Any, Optional

from certreg.config import RegistryConfig
from certreg.engine.authorization import AuthorizationGate
from certreg.engine.validation import ValidationPipeline
from certreg.models.certification import (
    CallContext,
    CertUpdate,
    Certification,
    IssuanceRequest,
    SettlementInstruction,
)
from certreg.models.result import RegistryResult
from certreg.persistence.event_log import EventKind, EventLog, EventRecord
from certreg.registry.authority import AuthorityConfig
from certreg.registry.store import CertificationStore
from certreg.settlement.sink import RecordingSettlementSink, SettlementSink


class RegistryEngine:
    """Certification registry facade.

    Usage:
        engine = RegistryEngine(RegistryConfig.from_config_dir())
        engine.set_authority(CallContext("deployer", 0), "A1")

        ctx = CallContext(caller="B1", height=0)
        result = engine.issue_certification(ctx, request)
        result.value  # assigned cert id

        engine.check_cert_validity(CallContext("anyone", 50), "X").value
        engine.update_certification(ctx, "X", new_score=90, new_expiry=200)
        engine.revoke_certification(ctx, "X", "Non-compliance")

    Audit trail (optional):
        engine = RegistryEngine(config, event_log=EventLog(path))
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        settlement_sink: Optional[SettlementSink] = None,
        event_log: Optional[EventLog] = None,
        *,
        store: Optional[CertificationStore] = None,
        authority: Optional[AuthorityConfig] = None,
    ) -> None:
        self._config = config or RegistryConfig()
        if settlement_sink is None:
            settlement_sink = RecordingSettlementSink()
        if not isinstance(settlement_sink, SettlementSink):
            raise TypeError(
                f"Settlement sink must implement SettlementSink, got {type(settlement_sink)}"
            )
        self._sink = settlement_sink
        self._gate = AuthorizationGate()
        self._pipeline = ValidationPipeline(self._config, self._gate)
        self._store = store or CertificationStore(self._config.max_certs)
        self._authority = authority or AuthorityConfig(
            self._config.burn_principal, self._config.initial_issuance_fee,
        )
        self._event_log = event_log
        self._event_counter = event_log.count if event_log is not None else 0
        self._audit_degraded = False

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def settlement_sink(self) -> SettlementSink:
        return self._sink

    @property
    def event_log(self) -> Optional[EventLog]:
        return self._event_log

    @property
    def authority(self) -> Optional[str]:
        return self._authority.authority

    @property
    def issuance_fee(self) -> int:
        return self._authority.issuance_fee

    @property
    def audit_degraded(self) -> bool:
        return self._audit_degraded

    # ------------------------------------------------------------------
    # Authority
    # ------------------------------------------------------------------

    def set_authority(self, ctx: CallContext, principal: str) -> RegistryResult:
        """Set the authority principal. Succeeds at most once per registry."""
        error = self._authority.set_authority(principal)
        if error is not None:
            return RegistryResult.fail(error)
        warning = self._record_event(
            EventKind.AUTHORITY_SET, ctx,
            {"authority": principal},
        )
        return RegistryResult.ok(True, warnings=_warnings(warning))

    def set_issuance_fee(self, ctx: CallContext, new_fee: int) -> RegistryResult:
        """Replace the issuance fee. Requires the authority to be set."""
        previous = self._authority.issuance_fee
        error = self._authority.set_issuance_fee(new_fee)
        if error is not None:
            return RegistryResult.fail(error)
        warning = self._record_event(
            EventKind.ISSUANCE_FEE_CHANGED, ctx,
            {"previous_fee": previous, "new_fee": new_fee},
        )
        return RegistryResult.ok(True, warnings=_warnings(warning))

    # ------------------------------------------------------------------
    # Certification lifecycle
    # ------------------------------------------------------------------

    def issue_certification(
        self,
        ctx: CallContext,
        request: IssuanceRequest,
    ) -> RegistryResult:
        """Issue a certification and emit the fee settlement instruction.

        Returns the assigned cert id on success. The settlement
        instruction reaches the sink before the record is committed, so
        a sink that raises leaves the registry unchanged.
        """
        error = self._pipeline.validate_issuance(
            request,
            ctx,
            next_cert_id=self._store.next_cert_id,
            max_certs=self._store.max_certs,
            already_certified=self._store.is_certified(request.business_id),
            authority=self._authority.authority,
        )
        if error is not None:
            return RegistryResult.fail(error)

        instruction = SettlementInstruction(
            amount=self._authority.issuance_fee,
            sender=ctx.caller,
            recipient=self._authority.authority,
        )
        self._sink.submit(instruction)

        cert = self._store.issue(request)

        warnings = _warnings(
            self._record_event(
                EventKind.FEE_SETTLEMENT_EMITTED, ctx,
                {
                    "business_id": request.business_id,
                    "amount": instruction.amount,
                    "sender": instruction.sender,
                    "recipient": instruction.recipient,
                },
            ),
            self._record_event(
                EventKind.CERT_ISSUED, ctx,
                {
                    "business_id": request.business_id,
                    "cert_id": cert.cert_id,
                    "cert_type": cert.cert_type.value,
                    "score": cert.score,
                    "expiry_date": cert.expiry_date,
                    "proof_hash": cert.proof_hash.hex(),
                },
            ),
        )
        return RegistryResult.ok(cert.cert_id, warnings=warnings)

    def revoke_certification(
        self,
        ctx: CallContext,
        business_id: str,
        reason: str,
    ) -> RegistryResult:
        """Revoke a certification. Repeat revocation by its auditor succeeds."""
        error = (
            self._gate.check_record_access(self._store.get(business_id), ctx)
            or self._pipeline.validate_revocation(reason)
        )
        if error is not None:
            return RegistryResult.fail(error)

        self._store.revoke(business_id)
        warning = self._record_event(
            EventKind.CERT_REVOKED, ctx,
            {"business_id": business_id, "reason": reason},
        )
        return RegistryResult.ok(True, warnings=_warnings(warning))

    def update_certification(
        self,
        ctx: CallContext,
        business_id: str,
        new_score: int,
        new_expiry: int,
    ) -> RegistryResult:
        """Replace score and expiry, recording this call as the latest update."""
        error = (
            self._gate.check_record_access(self._store.get(business_id), ctx)
            or self._pipeline.validate_update(new_score, new_expiry, ctx)
        )
        if error is not None:
            return RegistryResult.fail(error)

        self._store.update(
            business_id, new_score, new_expiry,
            height=ctx.height, updater=ctx.caller,
        )
        warning = self._record_event(
            EventKind.CERT_UPDATED, ctx,
            {
                "business_id": business_id,
                "new_score": new_score,
                "new_expiry": new_expiry,
            },
        )
        return RegistryResult.ok(True, warnings=_warnings(warning))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_certification(self, business_id: str) -> Optional[Certification]:
        return self._store.get(business_id)

    def get_cert_update(self, business_id: str) -> Optional[CertUpdate]:
        """Latest update applied to a certification, if any."""
        return self._store.get_update(business_id)

    def business_for_cert(self, cert_id: int) -> Optional[str]:
        return self._store.business_for_cert(cert_id)

    def check_cert_validity(self, ctx: CallContext, business_id: str) -> RegistryResult:
        """Always succeeds. The value is False for unknown businesses."""
        return RegistryResult.ok(self._store.check_validity(business_id, ctx.height))

    def get_cert_count(self) -> RegistryResult:
        """Always succeeds. Counts every issuance, revoked ones included."""
        return RegistryResult.ok(self._store.count())

    def is_certified(self, business_id: str) -> bool:
        return self._store.is_certified(business_id)

    def status(self) -> dict[str, Any]:
        """Return registry-wide status summary."""
        last = self._event_log.last_event if self._event_log else None
        return {
            "certifications": {
                "issued": self._store.count(),
                "active": self._store.active_count(),
                "capacity": self._store.max_certs,
            },
            "authority": {
                "set": self._authority.is_set,
                "principal": self._authority.authority,
                "issuance_fee": self._authority.issuance_fee,
            },
            "audit": {
                "events": self._event_log.count if self._event_log else 0,
                "last_event_id": last.event_id if last else None,
                "degraded": self._audit_degraded,
            },
        }

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_records(self) -> dict[str, Any]:
        """Serialise registry state for an external persistence layer."""
        return {
            "authority": self._authority.authority,
            "issuance_fee": self._authority.issuance_fee,
            "store": self._store.to_records(),
        }

    @classmethod
    def from_records(
        cls,
        config: RegistryConfig,
        data: dict[str, Any],
        settlement_sink: Optional[SettlementSink] = None,
        event_log: Optional[EventLog] = None,
    ) -> RegistryEngine:
        """Restore engine state from persistence records."""
        return cls(
            config,
            settlement_sink=settlement_sink,
            event_log=event_log,
            store=CertificationStore.from_records(data["store"]),
            authority=AuthorityConfig.restore(
                config.burn_principal,
                data.get("authority"),
                data["issuance_fee"],
            ),
        )

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------

    def _next_event_id(self) -> str:
        """Generate a monotonically increasing unique event ID."""
        self._event_counter += 1
        return f"EVT-{self._event_counter:08d}"

    def _record_event(
        self,
        kind: EventKind,
        ctx: CallContext,
        payload: dict[str, Any],
    ) -> Optional[str]:
        """Append an audit event after a committed mutation.

        MUST NOT roll back registry state: the mutation has already been
        applied. On failure the engine is flagged audit-degraded and a
        warning string is returned for the result.
        """
        if self._event_log is None:
            return None
        try:
            event = EventRecord.create(
                event_id=self._next_event_id(),
                event_kind=kind,
                actor_id=ctx.caller,
                payload={**payload, "height": ctx.height},
            )
            self._event_log.append(event)
        except (ValueError, OSError) as e:
            self._audit_degraded = True
            return f"Audit degraded: {e}; state committed but event not recorded"
        return None


def _warnings(*items: Optional[str]) -> list[str]:
    return [w for w in items if w]
