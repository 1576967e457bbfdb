"""Mecanum wheel kinematics and CANopen DS402 motor control over SocketCAN."""

__version__ = "0.1.0"