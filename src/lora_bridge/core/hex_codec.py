"""
十六进制编解码模块
==================

串口读取到的原始字节先转换为十六进制文本，再交给帧提取器处理。
"""

import string

from .errors import MalformedHex

_HEX_DIGITS = frozenset(string.hexdigits)


def bytes_to_hex(data: bytes) -> str:
    """
    将字节转换为十六进制文本

    每个字节两个大写字符，无分隔符，顺序不变。

    Examples:
        >>> bytes_to_hex(b'\\xea\\x01')
        'EA01'
    """
    return bytes(data).hex().upper()


def hex_to_bytes(text: str) -> bytes:
    """
    将十六进制文本转换为字节

    Args:
        text: 十六进制文本，大小写均可

    Returns:
        解码后的字节

    Raises:
        MalformedHex: 长度为奇数或包含非十六进制字符时抛出
    """
    if len(text) % 2 != 0:
        raise MalformedHex(f"十六进制文本长度为奇数: {len(text)}")

    # bytes.fromhex 会忽略空白，这里要求每个字符都是十六进制数字
    invalid = set(text) - _HEX_DIGITS
    if invalid:
        raise MalformedHex(f"包含非十六进制字符: {''.join(sorted(invalid))!r}")

    return bytes.fromhex(text)


def hex_to_ascii(data: bytes) -> str:
    """
    负载的ASCII展示，每个字节对应一个字符

    仅用于显示，不可打印的字节不做任何处理。
    """
    return "".join(chr(byte) for byte in data)


def format_hex_bytes(data: bytes) -> str:
    """以空格分隔的十六进制形式显示字节，如 'EA 01 02'"""
    return " ".join(f"{byte:02X}" for byte in data)
