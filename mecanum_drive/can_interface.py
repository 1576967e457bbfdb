"""CAN frame type and the abstract interface every CAN transport implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Union

MAX_DLC = 8
_MAX_CAN_ID = 0xFFFFFFFF


class CanError(Exception):
    """Raised when a CAN transport fails to open, send or receive."""


@dataclass(frozen=True)
class CanFrame:
    """A classic CAN frame: identifier, data length code and payload."""

    arbitration_id: int
    dlc: int
    data: Union[bytes, Iterable[int]] = b""

    def __post_init__(self) -> None:
        payload = bytes(self.data)
        if not 0 <= self.arbitration_id <= _MAX_CAN_ID:
            raise ValueError(f"arbitration id out of range: {self.arbitration_id:#x}")
        if not 0 <= self.dlc <= MAX_DLC:
            raise ValueError(f"dlc must be between 0 and {MAX_DLC}, got {self.dlc}")
        if len(payload) < self.dlc:
            raise ValueError(
                f"data holds {len(payload)} bytes but dlc is {self.dlc}"
            )
        object.__setattr__(self, "data", payload)


class CanInterface(ABC):
    """A bidirectional CAN transport."""

    @abstractmethod
    def send(self, frame: CanFrame) -> None:
        """Send one frame; raise CanError on failure."""

    @abstractmethod
    def receive(self, timeout_ms: int) -> Optional[CanFrame]:
        """Wait up to timeout_ms for a frame; return None on timeout.

        Raise CanError when the transport fails.
        """