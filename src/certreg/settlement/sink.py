"""Settlement sink — where issuance fee instructions go.

The registry never moves value. On each successful issuance it produces one
SettlementInstruction and hands it to a sink supplied by the host. The
host's ledger executes (or rejects) the transfer; the registry neither
confirms, retries, nor rolls back.

Adding a new ledger = implement the SettlementSink Protocol. No change to
the registry engine, validation, or store.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from certreg.models.certification import SettlementInstruction


@runtime_checkable
class SettlementSink(Protocol):
    """Contract for anything that accepts fee settlement instructions."""

    def submit(self, instruction: SettlementInstruction) -> None:
        """Accept one instruction. Raising signals a host-level failure."""
        ...


class RecordingSettlementSink:
    """In-memory sink that keeps every instruction in submission order.

    Usage:
        sink = RecordingSettlementSink()
        engine = RegistryEngine(config, settlement_sink=sink)
        ...
        sink.instructions  # [SettlementInstruction(amount=500, ...)]
    """

    def __init__(self) -> None:
        self._instructions: List[SettlementInstruction] = []

    def submit(self, instruction: SettlementInstruction) -> None:
        self._instructions.append(instruction)

    @property
    def instructions(self) -> List[SettlementInstruction]:
        return list(self._instructions)
