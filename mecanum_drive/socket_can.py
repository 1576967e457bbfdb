"""CAN transport over a Linux SocketCAN raw socket."""

from __future__ import annotations

import logging
import socket
import struct
from typing import Optional

from .can_interface import MAX_DLC, CanError, CanFrame, CanInterface

logger = logging.getLogger("SocketCanInterface")

_AF_CAN = getattr(socket, "AF_CAN", 29)
_CAN_RAW = getattr(socket, "CAN_RAW", 1)
# struct can_frame: u32 can_id, u8 can_dlc, 3 pad bytes, 8 data bytes.
_FRAME = struct.Struct("=IB3x8s")


class SocketCanInterface(CanInterface):
    """A raw SocketCAN socket bound to one interface such as "can0"."""

    def __init__(self, interface_name: str) -> None:
        self.interface_name = interface_name
        self._sock: Optional[socket.socket] = None
        try:
            self._sock = socket.socket(_AF_CAN, socket.SOCK_RAW, _CAN_RAW)
        except OSError as err:
            logger.error("Failed to create CAN socket")
            raise CanError(f"failed to create CAN socket: {err}") from err
        try:
            self._sock.bind((interface_name,))
        except OSError as err:
            logger.error("Failed to bind CAN socket to interface %s", interface_name)
            self.close()
            raise CanError(
                f"failed to bind CAN socket to interface {interface_name}: {err}"
            ) from err
        logger.info("SocketCAN interface %s initialized", interface_name)

    @property
    def closed(self) -> bool:
        return self._sock is None

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise CanError(f"CAN interface {self.interface_name} is closed")
        return self._sock

    def send(self, frame: CanFrame) -> None:
        sock = self._socket()
        packet = _FRAME.pack(frame.arbitration_id, frame.dlc, frame.data[: frame.dlc])
        try:
            written = sock.send(packet)
        except OSError as err:
            logger.error("Failed to send CAN frame")
            raise CanError(f"failed to send CAN frame: {err}") from err
        if written != _FRAME.size:
            logger.error("Failed to send CAN frame")
            raise CanError(f"short write: {written} of {_FRAME.size} bytes")

    def receive(self, timeout_ms: int) -> Optional[CanFrame]:
        sock = self._socket()
        sock.settimeout(max(timeout_ms, 0) / 1000.0)
        try:
            packet = sock.recv(_FRAME.size)
        except (TimeoutError, BlockingIOError):
            return None
        except OSError as err:
            logger.error("Failed to receive CAN frame")
            raise CanError(f"failed to receive CAN frame: {err}") from err
        if len(packet) != _FRAME.size:
            logger.error("Failed to receive CAN frame")
            raise CanError(f"short read: {len(packet)} of {_FRAME.size} bytes")
        can_id, dlc, data = _FRAME.unpack(packet)
        dlc = min(dlc, MAX_DLC)
        return CanFrame(can_id, dlc, data[:dlc])

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
            logger.info("SocketCAN interface closed")

    def __enter__(self) -> "SocketCanInterface":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()