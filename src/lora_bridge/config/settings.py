"""
配置管理
========

提供串口和桥接会话相关的配置类。
"""

from dataclasses import dataclass
from typing import Optional, Union
import serial

from .constants import (
    DEFAULT_BAUDRATE,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    DEFAULT_READ_BUFFER_SIZE,
    DEFAULT_CONSUME_INTERVAL,
    DEFAULT_JOIN_TIMEOUT,
    MAX_REPORTED_READ_ERRORS,
    FramingMode,
)


@dataclass
class SerialConfig:
    """串口配置类"""

    port: str  # 串口号
    baudrate: int = DEFAULT_BAUDRATE  # 波特率
    bytesize: int = serial.EIGHTBITS  # 数据位
    parity: str = serial.PARITY_NONE  # 校验位
    stopbits: float = serial.STOPBITS_ONE  # 停止位
    timeout: float = DEFAULT_READ_TIMEOUT  # 读取超时时间
    write_timeout: Optional[float] = DEFAULT_WRITE_TIMEOUT  # 写入超时时间

    def to_serial_kwargs(self) -> dict:
        """转换为serial.Serial的参数字典"""
        return {
            "port": self.port,
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "parity": self.parity,
            "stopbits": self.stopbits,
            "timeout": self.timeout,
            "write_timeout": self.write_timeout,
        }


@dataclass
class SessionConfig:
    """桥接会话配置类"""

    read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE  # 单次读取最大字节数
    consume_interval: float = DEFAULT_CONSUME_INTERVAL  # 消费循环周期(秒)
    max_reported_read_errors: int = MAX_REPORTED_READ_ERRORS  # 界面提示的连续错误上限
    framing_mode: Union[FramingMode, str] = FramingMode.COMPAT  # 帧提取模式
    queue_maxsize: int = 0  # 消息队列容量，0表示不限
    join_timeout: float = DEFAULT_JOIN_TIMEOUT  # 停止线程的等待时间(秒)

    def __post_init__(self):
        """参数验证"""
        if self.read_buffer_size <= 0:
            raise ValueError("read_buffer_size必须大于0")
        if self.consume_interval <= 0:
            raise ValueError("consume_interval必须大于0")
        if self.max_reported_read_errors < 0:
            raise ValueError("max_reported_read_errors不能为负数")
        if self.queue_maxsize < 0:
            raise ValueError("queue_maxsize不能为负数")
        if self.join_timeout <= 0:
            raise ValueError("join_timeout必须大于0")
        # 允许以字符串形式传入，例如命令行参数
        self.framing_mode = FramingMode(self.framing_mode)
