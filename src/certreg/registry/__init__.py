"""Registry state — certification store and authority configuration."""

from certreg.registry.authority import AuthorityConfig
from certreg.registry.store import CertificationStore

__all__ = [
    "AuthorityConfig",
    "CertificationStore",
]
