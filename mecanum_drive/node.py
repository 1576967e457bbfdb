"""Command handling for the mecanum base: velocity commands and servo triggers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .can_interface import CanError
from .motion_controller import MotionController, Twist

logger = logging.getLogger("motion_controller_node")


@dataclass(frozen=True)
class NodeParameters:
    """Configuration of the motion controller node."""

    wheel_radius: float = 0.075
    wheel_separation_x: float = 0.30
    wheel_separation_y: float = 0.25
    can_device: str = "can0"
    node_ids: tuple[int, int, int, int] = (1, 2, 3, 4)


@dataclass(frozen=True)
class TriggerResponse:
    """Outcome of a trigger request."""

    success: bool
    message: str


class MotionControllerNode:
    """Receives velocity commands and servo on/off requests for the base."""

    def __init__(
        self,
        parameters: Optional[NodeParameters] = None,
        motion_controller: Optional[MotionController] = None,
    ) -> None:
        self.parameters = parameters if parameters is not None else NodeParameters()
        if motion_controller is None:
            p = self.parameters
            motion_controller = MotionController.from_can(
                p.can_device,
                p.node_ids,
                p.wheel_radius,
                p.wheel_separation_x,
                p.wheel_separation_y,
            )
        self.motion_controller = motion_controller

    def cmd_vel_callback(self, msg: Twist) -> tuple[float, float, float, float]:
        """Convert a velocity command to wheel speeds and send them."""
        speeds = self.motion_controller.compute(msg)
        try:
            self.motion_controller.write_speeds(speeds)
        except (CanError, RuntimeError) as err:
            logger.warning("failed to write wheel speeds: %s", err)
        return speeds

    def handle_servo_on(self) -> TriggerResponse:
        try:
            self.motion_controller.servo_on()
        except CanError:
            return TriggerResponse(False, "servo on failed")
        return TriggerResponse(True, "servo on")

    def handle_servo_off(self) -> TriggerResponse:
        try:
            self.motion_controller.servo_off()
        except CanError:
            return TriggerResponse(False, "servo off failed")
        return TriggerResponse(True, "servo off")