"""Registry rule engines — validation pipeline and authorization gate."""

from certreg.engine.authorization import AuthorizationGate
from certreg.engine.validation import ValidationPipeline

__all__ = [
    "AuthorizationGate",
    "ValidationPipeline",
]
