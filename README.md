# mecanum_drive

Drive a four-wheel mecanum robot: turn body velocity commands into wheel
speeds and talk to CANopen (DS402) servo drives over Linux SocketCAN.
The package has no dependencies beyond the Python standard library.

## What is inside

- `mecanum_drive.can_interface`: the frozen `CanFrame` value type
  (`arbitration_id`, `dlc`, `data`; the constructor checks the id range, a
  `dlc` of 0 to 8 and that `data` holds at least `dlc` bytes), the abstract
  `CanInterface` with `send(frame)` and `receive(timeout_ms)` (which returns
  `None` on timeout), and the `CanError` exception.
- `mecanum_drive.socket_can`: `SocketCanInterface`, a raw SocketCAN socket
  bound to an interface such as `can0`. Opening, sending and receiving raise
  `CanError` on failure. It is a context manager, `close()` releases the
  socket and the `closed` property tells whether it has been released.
- `mecanum_drive.constants`: SDO command specifiers, the request/response
  COB-ID bases (`0x600` / `0x580`), the 1000 ms receive timeout and the DS402
  controlword values.
- `mecanum_drive.motor_controller`: `MotorController`, one DS402 drive
  addressed by node id.
  - Controlwords: `fault_reset`, `shutdown`, `switch_on`,
    `enable_operation`, `disable_voltage`, `disable_operation`.
  - Object writes: `set_mode_of_operation`, `set_target_velocity`,
    `set_velocity_threshold`, `set_velocity_window`,
    `set_quick_stop_option_code`, `set_quick_stop_deceleration`,
    `set_profile_acceleration`, `set_profile_deceleration`,
    `set_end_velocity`, `set_profile_velocity`, `set_max_torque`. Values
    outside the object's integer range raise `ValueError`.
  - Object reads: `read_statusword`, `get_torque_actual_value` (signed
    16-bit), `get_velocity_actual_value` (signed 32-bit).
  - `write_speeds(speeds)` sends each speed, multiplied by 1000 and
    truncated, as a big-endian 32-bit frame on CAN id `0x200 + index`.

  `OperationMode` and `QuickStopOptionCode` name the allowed values. An SDO
  exchange that cannot be sent, gets no answer, or gets an answer with the
  wrong CAN id, a short payload or an unexpected command byte raises
  `SdoError` (a subclass of `CanError`).
- `mecanum_drive.motion_controller`: the `Vector3` and `Twist` command types
  and `MotionController`, which computes the four wheel speeds, sends them,
  and switches all servos on or off.
- `mecanum_drive.node`: `MotionControllerNode`, which handles velocity
  commands and servo on/off triggers, configured by `NodeParameters` and
  answering with `TriggerResponse`.

## Wheel kinematics

With wheel radius `r`, half separations `Lx = sep_x / 2`, `Ly = sep_y / 2`
and `k = Lx + Ly`, a command `(vx, vy, wz)` gives, in the order front-left,
front-right, rear-left, rear-right:

```
(vx - vy - k*wz) / r
(vx + vy + k*wz) / r
(vx + vy - k*wz) / r
(vx - vy + k*wz) / r
```

Kinematics need no hardware:

```python
from mecanum_drive.motion_controller import MotionController, Twist, Vector3

controller = MotionController(0.1, 0.2, 0.2)
speeds = controller.compute(Twist(linear=Vector3(x=1.0)))
# (10.0, 10.0, 10.0, 10.0)
```

A wheel radius of zero raises `ValueError`. `write_speeds` on a controller
without motors raises `RuntimeError`.

## Driving real motors

```python
from mecanum_drive.motion_controller import MotionController, Twist, Vector3

controller = MotionController.from_can("can0", (1, 2, 3, 4), 0.075, 0.30, 0.25)
controller.servo_on()
controller.write_speeds(controller.compute(Twist(linear=Vector3(y=0.2))))
controller.servo_off()
```

`from_can` needs exactly four node ids. `servo_on` runs `switch_on` and
`enable_operation` on every motor, `servo_off` runs `disable_operation`;
both try every step on every motor and then raise `CanError` if any step
failed. `write_speeds` sends all four speeds through the first motor's bus.

A single drive can be talked to directly:

```python
from mecanum_drive.socket_can import SocketCanInterface
from mecanum_drive.motor_controller import MotorController, OperationMode

with SocketCanInterface("can0") as bus:
    motor = MotorController(bus, 1)
    motor.set_mode_of_operation(OperationMode.PROFILE_VELOCITY)
    motor.set_target_velocity(1000)
    status = motor.read_statusword()
```

SocketCAN requires Linux and a configured CAN interface. Any other
transport can be used by subclassing `CanInterface`.

## The node

`NodeParameters` defaults: wheel radius 0.075, wheel separation 0.30 (x)
and 0.25 (y), CAN device `can0`, motor node ids 1 to 4. Without a
`motion_controller` argument, `MotionControllerNode` opens the CAN device
through `MotionController.from_can`.

- `cmd_vel_callback(twist)` computes the wheel speeds, sends them, and
  returns them; a send failure is logged, not raised.
- `handle_servo_on()` / `handle_servo_off()` return a `TriggerResponse`
  with `success` and a message of `"servo on"` / `"servo off"`, or
  `"servo on failed"` / `"servo off failed"`.

## What this package does not do

There is no command-line program and no message transport: nothing
subscribes to velocity topics or serves trigger requests. Your application
receives commands by whatever means it uses and calls the
`MotionControllerNode` methods itself.

## Tests

Install the `test` extra and run `pytest` from the project root.