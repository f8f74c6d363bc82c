"""
系统常量定义
============

定义LoRa桥接串口协议中使用的各种常量。

数据帧格式：| 帧头 0xEA | 类型(1B) | 长度(1B) | 负载(NB) | 校验(1B) | 帧尾 0x55 |
"""

from enum import Enum, IntEnum
from typing import Final


class MessageType(IntEnum):
    """消息类型枚举"""

    MANAGEMENT = 0x01  # 管理消息
    DATA = 0x02  # 数据消息


class FramingMode(str, Enum):
    """帧提取模式"""

    COMPAT = "compat"  # 兼容模式：首个帧头 + 最后一个帧尾，全局剔除标记
    STRICT = "strict"  # 严格模式：按长度字段定位帧尾，只剔除首尾标记


# 帧标记
HEADER_BYTE: Final[int] = 0xEA  # 帧头
FOOTER_BYTE: Final[int] = 0x55  # 帧尾
HEADER_HEX: Final[str] = f"{HEADER_BYTE:02X}"
FOOTER_HEX: Final[str] = f"{FOOTER_BYTE:02X}"

# 帧大小
FRAME_OVERHEAD_SIZE: Final[int] = 5  # 帧头 + 类型 + 长度 + 校验 + 帧尾
MIN_FRAME_BODY_HEX_LENGTH: Final[int] = 6  # 类型 + 长度 + 校验(空负载)
MAX_PAYLOAD_LENGTH: Final[int] = 0xFF  # 长度字段只有1字节

# 串口配置默认值
DEFAULT_BAUDRATE: Final[int] = 9600  # 默认波特率
DEFAULT_READ_TIMEOUT: Final[float] = 1.0  # 读取超时(秒)
DEFAULT_WRITE_TIMEOUT: Final[float] = 1.0  # 写入超时(秒)
DEFAULT_READ_BUFFER_SIZE: Final[int] = 1024  # 单次读取最大字节数

# 会话配置默认值
DEFAULT_CONSUME_INTERVAL: Final[float] = 0.05  # 消费循环周期(秒)
MAX_REPORTED_READ_ERRORS: Final[int] = 3  # 连续读取错误达到该次数后不再提示界面
DEFAULT_JOIN_TIMEOUT: Final[float] = 2.0  # 停止线程时的等待时间(秒)

# 测试帧与固定命令
TEST_FRAME_HEX: Final[str] = "EA02094C4544206973206F6E5D55"  # DATA "LED is on"
CANNED_COMMAND_TYPE: Final[int] = MessageType.MANAGEMENT
CANNED_COMMAND_PAYLOAD: Final[bytes] = b"on"
