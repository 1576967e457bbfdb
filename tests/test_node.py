import pytest

from mecanum_drive.can_interface import CanError, CanFrame, CanInterface
from mecanum_drive.motion_controller import MotionController, Twist, Vector3
from mecanum_drive.motor_controller import MotorController
from mecanum_drive.node import MotionControllerNode, NodeParameters, TriggerResponse


class FakeCan(CanInterface):
    def __init__(self, failing=False, fail_send=False):
        self.sent = []
        self.failing = failing
        self.fail_send = fail_send

    def send(self, frame):
        if self.fail_send:
            raise CanError("send failed")
        self.sent.append(frame)

    def receive(self, timeout_ms):
        if self.failing:
            return None
        node = self.sent[-1].arbitration_id - 0x600
        return CanFrame(0x580 + node, 8, bytes([0x60]) + bytes(7))


def make_node(can, params=None):
    params = params or NodeParameters()
    motors = [MotorController(can, n) for n in params.node_ids]
    mc = MotionController(
        params.wheel_radius, params.wheel_separation_x, params.wheel_separation_y, motors
    )
    return MotionControllerNode(params, mc)


def test_default_parameters():
    params = NodeParameters()
    assert params.wheel_radius == 0.075
    assert params.wheel_separation_x == 0.30
    assert params.wheel_separation_y == 0.25
    assert params.can_device == "can0"
    assert params.node_ids == (1, 2, 3, 4)


def test_servo_on_success():
    node = make_node(FakeCan())
    assert node.handle_servo_on() == TriggerResponse(True, "servo on")


def test_servo_on_failure():
    node = make_node(FakeCan(failing=True))
    assert node.handle_servo_on() == TriggerResponse(False, "servo on failed")


def test_servo_off_success():
    node = make_node(FakeCan())
    assert node.handle_servo_off() == TriggerResponse(True, "servo off")


def test_servo_off_failure():
    node = make_node(FakeCan(failing=True))
    assert node.handle_servo_off() == TriggerResponse(False, "servo off failed")


def test_cmd_vel_sends_computed_speeds():
    can = FakeCan()
    node = make_node(can)
    cmd = Twist(linear=Vector3(x=0.5, y=0.1), angular=Vector3(z=0.2))
    speeds = node.cmd_vel_callback(cmd)
    assert speeds == node.motion_controller.compute(cmd)
    assert [f.arbitration_id for f in can.sent] == [0x200, 0x201, 0x202, 0x203]
    for frame, speed in zip(can.sent, speeds):
        assert int.from_bytes(frame.data, "big", signed=True) == int(speed * 1000.0)


def test_cmd_vel_survives_send_failure():
    can = FakeCan(fail_send=True)
    node = make_node(can)
    speeds = node.cmd_vel_callback(Twist(linear=Vector3(x=1.0)))
    assert len(speeds) == 4
    assert can.sent == []


def test_cmd_vel_without_motors_still_computes():
    mc = MotionController(0.1, 0.2, 0.2)
    node = MotionControllerNode(NodeParameters(), mc)
    speeds = node.cmd_vel_callback(Twist(linear=Vector3(x=1.0)))
    assert speeds == pytest.approx((10.0, 10.0, 10.0, 10.0))