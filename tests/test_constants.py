import pytest

from mecanum_drive import constants as c
from mecanum_drive.can_interface import CanFrame


def _sdo_frame(base_id, node_id, cmd, payload=b"\x00\x00\x00\x00"):
    data = bytes([cmd, 0x40, 0x60, 0x00]) + payload
    return CanFrame(base_id + node_id, c.SDO_DLC, data)


@pytest.mark.parametrize("size", [1, 2, 3, 4])
def test_download_command_encodes_unused_bytes(size):
    frame = _sdo_frame(c.SDO_REQUEST_BASE_ID, 1, c.SDO_DOWNLOAD_CMD_BY_SIZE[size])
    cmd = frame.data[0]
    # Expedited, size indicated: bits 0-1 set, bits 2-3 hold 4 - size.
    assert cmd & 0x03 == 0x03
    assert (cmd >> 2) & 0x03 == 4 - size
    assert cmd >> 4 == c.SDO_DOWNLOAD_4BYTE_CMD >> 4
    assert frame.arbitration_id == 0x601


@pytest.mark.parametrize("size", [1, 2, 3, 4])
def test_upload_response_encodes_unused_bytes(size):
    frame = _sdo_frame(c.SDO_RESPONSE_BASE_ID, 2, c.SDO_UPLOAD_RESPONSE_BY_SIZE[size])
    cmd = frame.data[0]
    assert cmd & 0x03 == 0x03
    assert (cmd >> 2) & 0x03 == 4 - size
    assert cmd & 0xF0 == c.SDO_UPLOAD_CMD
    assert frame.arbitration_id == 0x582


def test_default_upload_response_is_two_byte():
    frame = _sdo_frame(c.SDO_RESPONSE_BASE_ID, 1, c.SDO_EXPECTED_RESPONSE_UPLOAD)
    assert frame.data[0] == 0x4B
    assert frame.data[0] == c.SDO_EXPECTED_RESPONSE_UPLOAD_2BYTE


@pytest.mark.parametrize("node_id", [1, 4, 0x7F])
def test_cob_ids_leave_room_for_node_ids(node_id):
    request = _sdo_frame(c.SDO_REQUEST_BASE_ID, node_id, c.SDO_UPLOAD_CMD)
    response = _sdo_frame(c.SDO_RESPONSE_BASE_ID, node_id, c.SDO_EXPECTED_RESPONSE_UPLOAD)
    assert request.arbitration_id & 0x7F == node_id
    assert response.arbitration_id & 0x7F == node_id
    assert request.arbitration_id <= 0x7FF
    assert request.arbitration_id - response.arbitration_id == 0x80


def test_switch_on_and_disable_operation_share_a_word():
    switch_on = _sdo_frame(
        c.SDO_REQUEST_BASE_ID, 1, c.SDO_DOWNLOAD_2BYTE_CMD,
        c.SWITCH_ON_VALUE.to_bytes(2, "little") + b"\x00\x00",
    )
    disable = _sdo_frame(
        c.SDO_REQUEST_BASE_ID, 1, c.SDO_DOWNLOAD_2BYTE_CMD,
        c.DISABLE_OPERATION_VALUE.to_bytes(2, "little") + b"\x00\x00",
    )
    assert switch_on == disable
    assert switch_on.data[4:6] == b"\x07\x00"
    assert c.ENABLE_OPERATION_VALUE & c.SWITCH_ON_VALUE == c.SWITCH_ON_VALUE


@pytest.mark.parametrize(
    "word",
    [
        c.FAULT_RESET_VALUE,
        c.SHUTDOWN_VALUE,
        c.SWITCH_ON_VALUE,
        c.ENABLE_OPERATION_VALUE,
        c.DISABLE_VOLTAGE_VALUE,
        c.DISABLE_OPERATION_VALUE,
        c.START_HOMING_OPERATION_VALUE,
        c.POSITION_NEW_SET_POINT,
        c.POSITION_CHANGE_SET_IMMEDIATELY,
    ],
)
def test_control_words_fit_sixteen_bits(word):
    frame = _sdo_frame(
        c.SDO_REQUEST_BASE_ID, 1, c.SDO_DOWNLOAD_2BYTE_CMD,
        word.to_bytes(2, "little") + b"\x00\x00",
    )
    assert int.from_bytes(frame.data[4:6], "little") == word
    assert frame.data[6:] == b"\x00\x00"


def test_sdo_frames_use_full_length():
    frame = CanFrame(c.SDO_REQUEST_BASE_ID + 1, c.SDO_DLC, bytes(c.SDO_DLC))
    assert len(frame.data) == 8
    assert frame.dlc == 8
    with pytest.raises(ValueError):
        CanFrame(c.SDO_REQUEST_BASE_ID + 1, c.SDO_DLC + 1, bytes(c.SDO_DLC + 1))
    assert c.RECEIVE_TIMEOUT_MS == 1000