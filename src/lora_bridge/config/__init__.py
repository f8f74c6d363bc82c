"""
配置模块
=======

包含协议常量定义和配置管理功能。
"""

from .constants import *
from .settings import *

__all__ = [
    # 常量
    "MessageType",
    "FramingMode",
    "HEADER_BYTE",
    "FOOTER_BYTE",
    "HEADER_HEX",
    "FOOTER_HEX",
    "FRAME_OVERHEAD_SIZE",
    "MIN_FRAME_BODY_HEX_LENGTH",
    "MAX_PAYLOAD_LENGTH",
    "DEFAULT_BAUDRATE",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_WRITE_TIMEOUT",
    "DEFAULT_READ_BUFFER_SIZE",
    "DEFAULT_CONSUME_INTERVAL",
    "MAX_REPORTED_READ_ERRORS",
    "DEFAULT_JOIN_TIMEOUT",
    "TEST_FRAME_HEX",
    "CANNED_COMMAND_TYPE",
    "CANNED_COMMAND_PAYLOAD",
    # 配置
    "SerialConfig",
    "SessionConfig",
]
