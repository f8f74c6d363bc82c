"""
核心模块
========

包含十六进制编解码、校验算法、帧提取与解析、消息队列、串口管理和会话管理等核心功能。
"""

from .checksum import calculate_checksum
from .errors import (
    BridgeError,
    TransportError,
    FrameMalformed,
    MalformedHex,
    FrameTooShort,
)
from .formatter import format_message
from .frame_extractor import FrameExtractor
from .frame_handler import FrameHandler
from .hex_codec import bytes_to_hex, hex_to_bytes
from .message import Message
from .message_queue import MessageQueue
from .serial_manager import SerialManager
from .session import BridgeSession

__all__ = [
    "calculate_checksum",
    "BridgeError",
    "TransportError",
    "FrameMalformed",
    "MalformedHex",
    "FrameTooShort",
    "format_message",
    "FrameExtractor",
    "FrameHandler",
    "bytes_to_hex",
    "hex_to_bytes",
    "Message",
    "MessageQueue",
    "SerialManager",
    "BridgeSession",
]
