"""Mecanum wheel kinematics and coordinated control of the four wheel drives."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .can_interface import CanError
from .motor_controller import MotorController
from .socket_can import SocketCanInterface

logger = logging.getLogger("MotionController")

WHEEL_COUNT = 4


@dataclass
class Vector3:
    """A three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Twist:
    """A velocity command: linear velocity and angular velocity."""

    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)


class MotionController:
    """Turns body velocity commands into wheel speeds and drives the motors."""

    def __init__(
        self,
        wheel_radius: float,
        wheel_separation_x: float,
        wheel_separation_y: float,
        motors: Sequence[Optional[MotorController]] = (),
    ) -> None:
        if wheel_radius == 0:
            raise ValueError("wheel radius must be non-zero")
        if len(motors) > WHEEL_COUNT:
            raise ValueError(f"at most {WHEEL_COUNT} motors, got {len(motors)}")
        self.wheel_radius = wheel_radius
        self.wheel_separation_x = wheel_separation_x
        self.wheel_separation_y = wheel_separation_y
        self.motors: tuple[Optional[MotorController], ...] = tuple(motors)

    @classmethod
    def from_can(
        cls,
        can_device: str,
        node_ids: Sequence[int],
        wheel_radius: float,
        wheel_separation_x: float,
        wheel_separation_y: float,
    ) -> "MotionController":
        """Open a SocketCAN device and attach one motor per node id."""
        if len(node_ids) != WHEEL_COUNT:
            raise ValueError(
                f"expected {WHEEL_COUNT} node ids, got {len(node_ids)}"
            )
        can = SocketCanInterface(can_device)
        motors = [MotorController(can, node_id) for node_id in node_ids]
        return cls(wheel_radius, wheel_separation_x, wheel_separation_y, motors)

    def compute(self, cmd: Twist) -> tuple[float, float, float, float]:
        """Wheel speeds (front left, front right, rear left, rear right)."""
        k = self.wheel_separation_x / 2.0 + self.wheel_separation_y / 2.0
        vx = cmd.linear.x
        vy = cmd.linear.y
        wz = cmd.angular.z
        r = self.wheel_radius
        return (
            (vx - vy - k * wz) / r,
            (vx + vy + k * wz) / r,
            (vx + vy - k * wz) / r,
            (vx - vy + k * wz) / r,
        )

    def write_speeds(self, speeds: Sequence[float]) -> None:
        """Send the wheel speeds through the first motor's CAN bus."""
        if not self.motors or self.motors[0] is None:
            raise RuntimeError("no motor controller configured")
        self.motors[0].write_speeds(speeds)

    def _for_each_motor(self, label: str, *steps: str) -> None:
        failures: list[CanError] = []
        for motor in self.motors:
            if motor is None:
                continue
            for step in steps:
                try:
                    getattr(motor, step)()
                except CanError as err:
                    failures.append(err)
        if failures:
            logger.error("%s failed on %d step(s)", label, len(failures))
            raise CanError(
                f"{label} failed on {len(failures)} step(s): {failures[0]}"
            ) from failures[0]

    def servo_on(self) -> None:
        """Switch on and enable every motor; raise CanError if any step failed."""
        self._for_each_motor("servo on", "switch_on", "enable_operation")

    def servo_off(self) -> None:
        """Disable operation on every motor; raise CanError if any step failed."""
        self._for_each_motor("servo off", "disable_operation")