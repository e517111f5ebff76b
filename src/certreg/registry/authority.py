"""Authority configuration — the single principal that receives issuance fees.

The authority is set exactly once for the lifetime of a registry and can
never be replaced. Until it is set, no certification can be issued and
the fee cannot be changed.
"""

from __future__ import annotations

from typing import Optional

from certreg.models.result import RegistryError


class AuthorityConfig:
    """Write-once authority principal plus the current issuance fee."""

    def __init__(self, burn_principal: str, issuance_fee: int) -> None:
        if issuance_fee < 0:
            raise ValueError(f"Issuance fee must be >= 0, got {issuance_fee}")
        self._burn_principal = burn_principal
        self._authority: Optional[str] = None
        self._issuance_fee = issuance_fee

    @property
    def authority(self) -> Optional[str]:
        return self._authority

    @property
    def issuance_fee(self) -> int:
        return self._issuance_fee

    @property
    def is_set(self) -> bool:
        return self._authority is not None

    def set_authority(self, principal: str) -> Optional[RegistryError]:
        """Store the authority. Returns an error kind, or None on success.

        The burn principal is rejected outright, before the write-once
        check.
        """
        if principal == self._burn_principal:
            return RegistryError.INVALID_PRINCIPAL
        if self._authority is not None:
            return RegistryError.ALREADY_SET
        self._authority = principal
        return None

    def set_issuance_fee(self, new_fee: int) -> Optional[RegistryError]:
        """Overwrite the fee. Any non-negative integer is accepted.

        Raises:
            ValueError: If new_fee is negative.
        """
        if new_fee < 0:
            raise ValueError(f"Issuance fee must be >= 0, got {new_fee}")
        if self._authority is None:
            return RegistryError.AUTHORITY_NOT_SET
        self._issuance_fee = new_fee
        return None

    @classmethod
    def restore(
        cls,
        burn_principal: str,
        authority: Optional[str],
        issuance_fee: int,
    ) -> AuthorityConfig:
        """Rebuild from snapshot values.

        Raises:
            ValueError: If the snapshot names the burn principal as authority.
        """
        if authority == burn_principal:
            raise ValueError(f"Snapshot authority cannot be the burn principal: {authority}")
        config = cls(burn_principal, issuance_fee)
        config._authority = authority
        return config
