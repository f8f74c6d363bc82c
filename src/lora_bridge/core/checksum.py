"""
校验算法模块
============

提供帧校验和的计算。
"""


def calculate_checksum(msg_type: int, declared_length: int, payload: bytes) -> int:
    """
    计算帧校验和

    采用异或折叠：以 类型 ^ 长度 为初值，依次异或每个负载字节。
    这是简单的非加密校验，异或结果相同的不同负载会发生碰撞。

    Args:
        msg_type: 消息类型字节
        declared_length: 声明的负载长度字节
        payload: 负载数据

    Returns:
        校验和，单字节无符号整数

    Raises:
        TypeError: 当负载不是bytes类型时抛出

    Examples:
        >>> calculate_checksum(0x01, 0x02, b'on')
        2
        >>> calculate_checksum(0x01, 0x00, b'')
        1
    """
    if not isinstance(payload, (bytes, bytearray)):
        raise TypeError("负载数据必须是bytes类型")

    checksum = (msg_type ^ declared_length) & 0xFF
    for byte in payload:
        checksum ^= byte

    return checksum & 0xFF
