"""Authorization gate — who may touch which certification.

The auditor who issues a certification is recorded on it and is the only
identity that can later update or revoke it. There is no override, no
delegation, and no role that outranks the auditor of record; the registry
authority collects fees but cannot edit certifications.
"""

from __future__ import annotations

from typing import Optional

from certreg.models.certification import CallContext, Certification
from certreg.models.result import RegistryError


class AuthorizationGate:
    """Stateless authorization checks. Each returns an error kind or None."""

    def check_issuer(
        self,
        auditor_id: str,
        ctx: CallContext,
    ) -> Optional[RegistryError]:
        """An issuer may only issue in their own name."""
        if ctx.caller != auditor_id:
            return RegistryError.NOT_AUTHORIZED
        return None

    def check_authority_present(
        self,
        authority: Optional[str],
    ) -> Optional[RegistryError]:
        if authority is None:
            return RegistryError.AUTHORITY_NOT_SET
        return None

    def check_record_access(
        self,
        record: Optional[Certification],
        ctx: CallContext,
    ) -> Optional[RegistryError]:
        """Gate for update and revoke: record must exist, caller must be its auditor."""
        if record is None:
            return RegistryError.CERT_NOT_FOUND
        if record.auditor_id != ctx.caller:
            return RegistryError.NOT_AUTHORIZED
        return None
