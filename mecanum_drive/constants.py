"""CANopen SDO and DS402 control word constants used by the motor drivers."""

SDO_REQUEST_BASE_ID = 0x600
SDO_RESPONSE_BASE_ID = 0x580
SDO_DLC = 8
RECEIVE_TIMEOUT_MS = 1000

SDO_EXPECTED_RESPONSE_UPLOAD = 0x4B
SDO_EXPECTED_RESPONSE_DOWNLOAD = 0x60

SDO_DOWNLOAD_4BYTE_CMD = 0x23
SDO_DOWNLOAD_3BYTE_CMD = 0x27
SDO_DOWNLOAD_2BYTE_CMD = 0x2B
SDO_DOWNLOAD_1BYTE_CMD = 0x2F

SDO_UPLOAD_CMD = 0x40
SDO_EXPECTED_RESPONSE_UPLOAD_4BYTE = 0x43
SDO_EXPECTED_RESPONSE_UPLOAD_3BYTE = 0x47
SDO_EXPECTED_RESPONSE_UPLOAD_2BYTE = 0x4B
SDO_EXPECTED_RESPONSE_UPLOAD_1BYTE = 0x4F

# Expedited transfer command bytes keyed by payload size in bytes.
SDO_DOWNLOAD_CMD_BY_SIZE = {
    1: SDO_DOWNLOAD_1BYTE_CMD,
    2: SDO_DOWNLOAD_2BYTE_CMD,
    3: SDO_DOWNLOAD_3BYTE_CMD,
    4: SDO_DOWNLOAD_4BYTE_CMD,
}
SDO_UPLOAD_RESPONSE_BY_SIZE = {
    1: SDO_EXPECTED_RESPONSE_UPLOAD_1BYTE,
    2: SDO_EXPECTED_RESPONSE_UPLOAD_2BYTE,
    3: SDO_EXPECTED_RESPONSE_UPLOAD_3BYTE,
    4: SDO_EXPECTED_RESPONSE_UPLOAD_4BYTE,
}

FAULT_RESET_VALUE = 0x0080
SHUTDOWN_VALUE = 0x0006
SWITCH_ON_VALUE = 0x0007
ENABLE_OPERATION_VALUE = 0x000F
DISABLE_VOLTAGE_VALUE = 0x0000
DISABLE_OPERATION_VALUE = 0x0007
START_HOMING_OPERATION_VALUE = 0x001F
POSITION_NEW_SET_POINT = 0x005F
POSITION_CHANGE_SET_IMMEDIATELY = 0x002F