"""Settlement subsystem — the boundary between the registry and the host ledger."""

from certreg.settlement.sink import RecordingSettlementSink, SettlementSink

__all__ = [
    "RecordingSettlementSink",
    "SettlementSink",
]
