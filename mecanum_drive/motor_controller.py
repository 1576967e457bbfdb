"""DS402 motor drive control over CANopen SDO transfers."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Sequence

from . import constants as c
from .can_interface import CanError, CanFrame, CanInterface

logger = logging.getLogger("MotorController")

_CONTROLWORD_OBJECT = 0x6040
_STATUSWORD_OBJECT = 0x6041
_QUICK_STOP_OPTION_OBJECT = 0x605A
_MODE_OF_OPERATION_OBJECT = 0x6060
_VELOCITY_ACTUAL_OBJECT = 0x606C
_VELOCITY_WINDOW_OBJECT = 0x606D
_VELOCITY_THRESHOLD_OBJECT = 0x606F
_MAX_TORQUE_OBJECT = 0x6072
_TORQUE_ACTUAL_OBJECT = 0x6077
_PROFILE_VELOCITY_OBJECT = 0x6081
_END_VELOCITY_OBJECT = 0x6082
_PROFILE_ACCELERATION_OBJECT = 0x6083
_PROFILE_DECELERATION_OBJECT = 0x6084
_QUICK_STOP_DECELERATION_OBJECT = 0x6085
_TARGET_VELOCITY_OBJECT = 0x60FF

_SPEED_BASE_ID = 0x200
_SPEED_SCALE = 1000.0

_INT16 = (-(1 << 15), (1 << 15) - 1)
_INT32 = (-(1 << 31), (1 << 31) - 1)
_UINT16 = (0, (1 << 16) - 1)
_UINT32 = (0, (1 << 32) - 1)


class OperationMode(IntEnum):
    """DS402 modes of operation (object 0x6060)."""

    NO_OPERATION = 0x00
    PROFILE_POSITION = 0x01
    PROFILE_VELOCITY = 0x03
    PROFILE_TORQUE = 0x04
    HOMING = 0x06


class QuickStopOptionCode(IntEnum):
    """DS402 quick stop option codes (object 0x605A)."""

    CUSTOM_STOP_TIME = -3
    CUSTOM_STOP_RATE = -2
    IMMEDIATE_STOP = -1
    IMMEDIATE_DISABLE_SWITCH = 0
    NORMAL_RAMP_DISABLE_SWITCH = 1
    QUICK_STOP_RAMP_DISABLE_SWITCH = 2
    NORMAL_RAMP_STAY_QUICK_STOP = 5
    QUICK_STOP_RAMP_STAY_QUICK_STOP = 6


class SdoError(CanError):
    """Raised when an SDO transfer gets no valid answer from the drive."""


def _check_range(name: str, value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _le_bytes(value: int, size: int) -> bytes:
    return (value & ((1 << (8 * size)) - 1)).to_bytes(size, "little")


class MotorController:
    """Drives one CANopen DS402 motor node over a shared CAN interface."""

    def __init__(self, can: CanInterface, node_id: int) -> None:
        if not 0 <= node_id <= 0xFF:
            raise ValueError(f"node id must fit in one byte, got {node_id}")
        self.can = can
        self.node_id = node_id

    def write_speeds(self, speeds: Sequence[float]) -> None:
        """Send each speed, scaled by 1000, as a big-endian int32 frame at 0x200 + index."""
        for offset, speed in enumerate(speeds):
            value = int(speed * _SPEED_SCALE)
            data = (value & 0xFFFFFFFF).to_bytes(4, "big")
            self.can.send(CanFrame(_SPEED_BASE_ID + offset, 4, data))

    def _sdo_transaction(self, request: bytes, expected_cmd: int) -> bytes:
        request_frame = CanFrame(
            c.SDO_REQUEST_BASE_ID + self.node_id, c.SDO_DLC, request
        )
        try:
            self.can.send(request_frame)
        except CanError as err:
            logger.error("Failed to send SDO command.")
            raise SdoError(f"node {self.node_id}: failed to send SDO command") from err

        response = self.can.receive(c.RECEIVE_TIMEOUT_MS)
        if response is None:
            logger.error("Failed to receive SDO response.")
            raise SdoError(f"node {self.node_id}: no SDO response")
        expected_id = c.SDO_RESPONSE_BASE_ID + self.node_id
        if response.arbitration_id != expected_id:
            logger.error(
                "Unexpected SDO response CAN ID: 0x%X", response.arbitration_id
            )
            raise SdoError(
                f"node {self.node_id}: unexpected SDO response id "
                f"{response.arbitration_id:#x}"
            )
        if len(response.data) < c.SDO_DLC:
            logger.error("SDO response data length is insufficient.")
            raise SdoError(f"node {self.node_id}: SDO response too short")
        if response.data[0] != expected_cmd:
            logger.error("SDO response error: 0x%X", response.data[0])
            raise SdoError(
                f"node {self.node_id}: SDO response error {response.data[0]:#x}"
            )
        return response.data

    def _download(self, name: str, index: int, cmd: int, payload: bytes) -> None:
        request = (
            bytes([cmd])
            + index.to_bytes(2, "little")
            + b"\x00"
            + payload.ljust(4, b"\x00")
        )
        try:
            self._sdo_transaction(request, c.SDO_EXPECTED_RESPONSE_DOWNLOAD)
        except SdoError:
            logger.error("%s(%u): failed", name, self.node_id)
            raise

    def _upload(self, index: int) -> int:
        request = (
            bytes([c.SDO_UPLOAD_CMD]) + index.to_bytes(2, "little") + bytes(5)
        )
        response = self._sdo_transaction(request, c.SDO_EXPECTED_RESPONSE_UPLOAD)
        return int.from_bytes(response[4:8], "little")

    def _send_control_word(self, control_value: int) -> None:
        try:
            self._download(
                "SendControlWord",
                _CONTROLWORD_OBJECT,
                c.SDO_DOWNLOAD_2BYTE_CMD,
                _le_bytes(control_value, 2),
            )
        except SdoError:
            logger.error(
                "SendControlWord(%u): Failed to send 0x%04X",
                self.node_id,
                control_value,
            )
            raise
        logger.info(
            "SendControlWord(%u): 0x%04X sent successfully.",
            self.node_id,
            control_value,
        )

    def read_statusword(self) -> int:
        """Read the statusword (object 0x6041)."""
        return self._upload(_STATUSWORD_OBJECT) & 0xFFFF

    def get_torque_actual_value(self) -> int:
        """Read the actual torque (object 0x6077) as a signed 16-bit value."""
        raw = self._upload(_TORQUE_ACTUAL_OBJECT) & 0xFFFF
        return raw - 0x10000 if raw & 0x8000 else raw

    def get_velocity_actual_value(self) -> int:
        """Read the actual velocity (object 0x606C) as a signed 32-bit value."""
        raw = self._upload(_VELOCITY_ACTUAL_OBJECT)
        return raw - (1 << 32) if raw & 0x80000000 else raw

    def fault_reset(self) -> None:
        self._send_control_word(c.FAULT_RESET_VALUE)

    def shutdown(self) -> None:
        self._send_control_word(c.SHUTDOWN_VALUE)

    def switch_on(self) -> None:
        self._send_control_word(c.SWITCH_ON_VALUE)

    def enable_operation(self) -> None:
        self._send_control_word(c.ENABLE_OPERATION_VALUE)

    def disable_voltage(self) -> None:
        self._send_control_word(c.DISABLE_VOLTAGE_VALUE)

    def disable_operation(self) -> None:
        self._send_control_word(c.DISABLE_OPERATION_VALUE)

    def set_mode_of_operation(self, mode: OperationMode) -> None:
        """Set the modes of operation (object 0x6060)."""
        mode = OperationMode(mode)
        self._download(
            "SetModeOfOperation",
            _MODE_OF_OPERATION_OBJECT,
            c.SDO_DOWNLOAD_1BYTE_CMD,
            _le_bytes(mode.value, 1),
        )
        logger.info("SetModeOfOperation(%u): mode %d", self.node_id, mode.value)

    def set_target_velocity(self, velocity: int) -> None:
        """Set the target velocity (object 0x60FF)."""
        _check_range("velocity", velocity, _INT32)
        self._download(
            "SetTargetVelocity",
            _TARGET_VELOCITY_OBJECT,
            c.SDO_DOWNLOAD_4BYTE_CMD,
            _le_bytes(velocity, 4),
        )

    def set_velocity_threshold(self, threshold: int) -> None:
        """Set the velocity threshold (object 0x606F)."""
        _check_range("threshold", threshold, _UINT16)
        self._download(
            "SetVelocityThreshold",
            _VELOCITY_THRESHOLD_OBJECT,
            c.SDO_DOWNLOAD_2BYTE_CMD,
            _le_bytes(threshold, 2),
        )

    def set_velocity_window(self, window: int) -> None:
        """Set the velocity window (object 0x606D)."""
        _check_range("window", window, _UINT16)
        self._download(
            "SetVelocityWindow",
            _VELOCITY_WINDOW_OBJECT,
            c.SDO_DOWNLOAD_2BYTE_CMD,
            _le_bytes(window, 2),
        )

    def set_quick_stop_option_code(self, option: QuickStopOptionCode) -> None:
        """Set the quick stop option code (object 0x605A)."""
        option = QuickStopOptionCode(option)
        _check_range("option", option.value, _INT16)
        self._download(
            "SetQuickStopOptionCode",
            _QUICK_STOP_OPTION_OBJECT,
            c.SDO_DOWNLOAD_2BYTE_CMD,
            _le_bytes(option.value, 2),
        )

    def set_quick_stop_deceleration(self, deceleration: int) -> None:
        """Set the quick stop deceleration (object 0x6085)."""
        _check_range("deceleration", deceleration, _UINT32)
        self._download(
            "SetQuickStopDeceleration",
            _QUICK_STOP_DECELERATION_OBJECT,
            c.SDO_DOWNLOAD_4BYTE_CMD,
            _le_bytes(deceleration, 4),
        )

    def set_profile_acceleration(self, acceleration: int) -> None:
        """Set the profile acceleration (object 0x6083)."""
        _check_range("acceleration", acceleration, _UINT32)
        self._download(
            "SetProfileAcceleration",
            _PROFILE_ACCELERATION_OBJECT,
            c.SDO_DOWNLOAD_4BYTE_CMD,
            _le_bytes(acceleration, 4),
        )

    def set_profile_deceleration(self, deceleration: int) -> None:
        """Set the profile deceleration (object 0x6084)."""
        _check_range("deceleration", deceleration, _UINT32)
        self._download(
            "SetProfileDeceleration",
            _PROFILE_DECELERATION_OBJECT,
            c.SDO_DOWNLOAD_4BYTE_CMD,
            _le_bytes(deceleration, 4),
        )

    def set_end_velocity(self, velocity: int) -> None:
        """Set the end velocity (object 0x6082)."""
        _check_range("velocity", velocity, _INT32)
        self._download(
            "SetEndVelocity",
            _END_VELOCITY_OBJECT,
            c.SDO_DOWNLOAD_4BYTE_CMD,
            _le_bytes(velocity, 4),
        )

    def set_profile_velocity(self, velocity: int) -> None:
        """Set the profile velocity (object 0x6081)."""
        _check_range("velocity", velocity, _INT32)
        self._download(
            "SetProfileVelocity",
            _PROFILE_VELOCITY_OBJECT,
            c.SDO_DOWNLOAD_4BYTE_CMD,
            _le_bytes(velocity, 4),
        )

    def set_max_torque(self, max_torque: int) -> None:
        """Set the maximum torque limit (object 0x6072)."""
        _check_range("max_torque", max_torque, _UINT16)
        self._download(
            "SetMaxTorque",
            _MAX_TORQUE_OBJECT,
            c.SDO_DOWNLOAD_2BYTE_CMD,
            _le_bytes(max_torque, 2),
        )