"""Certification store — the registry's record of who holds which certification.

The store owns three maps and one counter:
- business id → Certification (one certification per business, never deleted)
- business id → CertUpdate (latest update only)
- cert id → business id (reverse index, written together with the forward map)
- next_cert_id, the issuance counter, bounded by max_certs

Certification ids are dense and zero-based: the n-th successful issuance
receives id n. Revoked certifications keep their id and still count.

The store enforces existence and uniqueness but no field rules. Callers
run the validation pipeline and authorization gate first; the store's
own ValueErrors only fire when that contract is broken.
"""

from __future__ import annotations

from typing import Any, Optional

from certreg.models.certification import (
    CertUpdate,
    Certification,
    IssuanceRequest,
)


class CertificationStore:
    """In-memory certification records with a bounded issuance counter.

    Usage:
        store = CertificationStore(max_certs=10000)
        cert = store.issue(request)
        store.update(request.business_id, 90, 200, height=50, updater="B1")
        store.revoke(request.business_id)
        store.check_validity(request.business_id, height=60)
    """

    def __init__(self, max_certs: int) -> None:
        if max_certs < 0:
            raise ValueError(f"max_certs must be >= 0, got {max_certs}")
        self._max_certs = max_certs
        self._next_cert_id = 0
        self._certifications: dict[str, Certification] = {}
        self._updates: dict[str, CertUpdate] = {}
        self._businesses_by_id: dict[int, str] = {}

    @property
    def max_certs(self) -> int:
        return self._max_certs

    @property
    def next_cert_id(self) -> int:
        return self._next_cert_id

    @property
    def has_capacity(self) -> bool:
        return self._next_cert_id < self._max_certs

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def issue(self, request: IssuanceRequest) -> Certification:
        """Create the certification for a validated request.

        Raises:
            ValueError: If the store is full or the business already
                holds a certification.
        """
        if not self.has_capacity:
            raise ValueError(
                f"Certification capacity reached: {self._max_certs}"
            )
        if request.business_id in self._certifications:
            raise ValueError(
                f"Business already certified: {request.business_id}"
            )

        cert = Certification.from_request(self._next_cert_id, request)

        # Both maps and the counter change together or not at all;
        # nothing below can raise.
        self._certifications[request.business_id] = cert
        self._businesses_by_id[cert.cert_id] = request.business_id
        self._next_cert_id += 1
        return cert

    def revoke(self, business_id: str) -> Certification:
        """Mark a certification inactive. Revoking twice is a no-op."""
        cert = self._get(business_id)
        revoked = cert.revoked()
        self._certifications[business_id] = revoked
        return revoked

    def update(
        self,
        business_id: str,
        new_score: int,
        new_expiry: int,
        height: int,
        updater: str,
    ) -> Certification:
        """Replace score and expiry, and overwrite the latest-update slot."""
        cert = self._get(business_id)
        updated = cert.rescored(new_score, new_expiry)
        self._certifications[business_id] = updated
        self._updates[business_id] = CertUpdate(
            update_score=new_score,
            update_expiry=new_expiry,
            update_height=height,
            updater=updater,
        )
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, business_id: str) -> Optional[Certification]:
        return self._certifications.get(business_id)

    def get_update(self, business_id: str) -> Optional[CertUpdate]:
        return self._updates.get(business_id)

    def business_for_cert(self, cert_id: int) -> Optional[str]:
        return self._businesses_by_id.get(cert_id)

    def count(self) -> int:
        """Number of certifications ever issued, revoked ones included."""
        return self._next_cert_id

    def is_certified(self, business_id: str) -> bool:
        """Whether a record exists, regardless of status or expiry."""
        return business_id in self._certifications

    def check_validity(self, business_id: str, height: int) -> bool:
        """Active and unexpired at height. Unknown businesses are simply invalid."""
        cert = self._certifications.get(business_id)
        if cert is None:
            return False
        return cert.is_valid_at(height)

    def active_count(self) -> int:
        return sum(1 for c in self._certifications.values() if c.status)

    def _get(self, business_id: str) -> Certification:
        cert = self._certifications.get(business_id)
        if cert is None:
            raise ValueError(f"Certification not found: {business_id}")
        return cert

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def to_records(self) -> dict[str, Any]:
        """Serialise store state for an external persistence layer."""
        return {
            "max_certs": self._max_certs,
            "next_cert_id": self._next_cert_id,
            "certifications": {
                bid: cert.to_record()
                for bid, cert in self._certifications.items()
            },
            "updates": {
                bid: {
                    "update_score": u.update_score,
                    "update_expiry": u.update_expiry,
                    "update_height": u.update_height,
                    "updater": u.updater,
                }
                for bid, u in self._updates.items()
            },
        }

    @classmethod
    def from_records(cls, data: dict[str, Any]) -> CertificationStore:
        """Restore store state, rebuilding the reverse index.

        Raises:
            ValueError: If the records break the dense-id invariant.
        """
        store = cls(data["max_certs"])
        for bid, record in data.get("certifications", {}).items():
            cert = Certification.from_record(record)
            if cert.cert_id in store._businesses_by_id:
                raise ValueError(f"Duplicate cert_id in records: {cert.cert_id}")
            store._certifications[bid] = cert
            store._businesses_by_id[cert.cert_id] = bid

        next_cert_id = data["next_cert_id"]
        if sorted(store._businesses_by_id) != list(range(next_cert_id)):
            raise ValueError(
                f"Certification ids are not dense 0..{next_cert_id - 1}"
            )
        if next_cert_id > store._max_certs:
            raise ValueError(
                f"next_cert_id {next_cert_id} exceeds max_certs {store._max_certs}"
            )
        store._next_cert_id = next_cert_id

        for bid, u in data.get("updates", {}).items():
            if bid not in store._certifications:
                raise ValueError(f"Update recorded for unknown business: {bid}")
            store._updates[bid] = CertUpdate(
                update_score=u["update_score"],
                update_expiry=u["update_expiry"],
                update_height=u["update_height"],
                updater=u["updater"],
            )
        return store
