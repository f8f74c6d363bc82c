"""
消息格式化模块
==============

将消息渲染为界面显示的文本。
"""

from .hex_codec import hex_to_ascii
from .message import Message


def format_message(message: Message) -> str:
    """
    格式化消息

    ASCII 部分只是尽力展示，负载中不可打印的字节原样转换为字符，不作为判断依据。

    Examples:
        >>> format_message(message)
        'Data: 4C4544206973206F6E (ASCII: LED is on, Len: 9, Checksum: 5D, Valid: True)'
    """
    return (
        f"{message.type_label}: {message.payload_hex} "
        f"(ASCII: {hex_to_ascii(message.payload)}, "
        f"Len: {message.declared_length}, "
        f"Checksum: {message.received_checksum:02X}, "
        f"Valid: {message.is_checksum_valid})"
    )
