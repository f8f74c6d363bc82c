"""
串口管理模块
============

提供串口的统一管理和操作接口。
"""

import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

import serial
from serial.tools import list_ports

from ..config.settings import SerialConfig
from .errors import TransportError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SerialManager:
    """
    串口管理器

    读取线程和发送线程共用同一个串口对象。写操作之间用锁互斥，
    读写之间不互斥(串口是全双工的)。
    """

    def __init__(self, config: SerialConfig):
        """
        初始化串口管理器

        Args:
            config: 串口配置对象
        """
        self.config = config
        self._port: Optional[serial.Serial] = None
        self._write_lock = threading.Lock()

    @property
    def port(self) -> Optional[serial.Serial]:
        """获取串口对象"""
        return self._port

    @property
    def is_open(self) -> bool:
        """检查串口是否已打开"""
        return self._port is not None and self._port.is_open

    def open(self) -> bool:
        """
        打开串口连接

        Returns:
            成功返回True，失败返回False
        """
        try:
            if self.is_open:
                logger.warning(f"串口 {self.config.port} 已经打开")
                return True

            self._port = serial.Serial(**self.config.to_serial_kwargs())

            logger.info(
                f"成功打开串口 {self.config.port}，波特率: {self.config.baudrate}"
            )
            return True

        except (serial.SerialException, ValueError, OSError) as e:
            logger.error(f"打开串口失败: {e}")
            self._port = None
            return False

    def close(self) -> None:
        """关闭串口连接，失败只记录日志"""
        try:
            if self._port and self._port.is_open:
                self._port.close()
                logger.info(f"已关闭串口 {self.config.port}")
        except (serial.SerialException, OSError) as e:
            logger.error(f"关闭串口失败: {e}")
        finally:
            self._port = None

    def write(self, data: bytes) -> bool:
        """
        向串口写入数据

        写入超时由 SerialConfig.write_timeout 决定。

        Args:
            data: 要写入的字节数据

        Returns:
            成功返回True，失败返回False
        """
        port = self._port
        if port is None or not port.is_open:
            logger.error("串口未打开，无法写入数据")
            return False

        try:
            with self._write_lock:
                bytes_written = port.write(data)
                port.flush()
            return bytes_written == len(data)

        except (serial.SerialException, OSError) as e:
            # 写入超时 SerialTimeoutException 也是 SerialException
            logger.error(f"写入数据失败: {e}")
            return False

    def read(self, size: int) -> bytes:
        """
        从串口读取数据

        缓冲区已有数据时立即返回(最多 size 字节)，否则阻塞到读取超时。

        Args:
            size: 单次读取的最大字节数

        Returns:
            读取到的数据，超时返回空bytes

        Raises:
            TransportError: 串口未打开或读取失败时抛出
        """
        port = self._port
        if port is None or not port.is_open:
            raise TransportError("串口未打开，无法读取数据")

        try:
            waiting = port.in_waiting
            return port.read(min(max(waiting, 1), size))
        except (serial.SerialException, OSError, TypeError) as e:
            # 关闭过程中 pyserial 可能抛出 TypeError
            raise TransportError(f"读取数据失败: {e}") from e

    @contextmanager
    def connection(self):
        """
        上下文管理器，自动管理串口连接

        Examples:
            >>> config = SerialConfig(port='COM3')
            >>> manager = SerialManager(config)
            >>> with manager.connection():
            ...     manager.write(b'\\xea\\x01\\x00\\x01\\x55')
        """
        try:
            if not self.open():
                raise TransportError(f"无法打开串口 {self.config.port}")
            yield self
        finally:
            self.close()

    @staticmethod
    def list_available_ports() -> List[Dict[str, str]]:
        """
        获取系统可用的串口列表

        Returns:
            串口信息列表，每个元素包含device、description等字段
        """
        try:
            ports = []
            for port_info in list_ports.comports():
                ports.append(
                    {
                        "device": port_info.device,
                        "description": port_info.description or "未知设备",
                        "hwid": port_info.hwid or "未知硬件ID",
                    }
                )
            return ports
        except OSError as e:
            logger.error(f"获取串口列表失败: {e}")
            return []

    @staticmethod
    def print_available_ports() -> None:
        """打印系统可用的串口信息"""
        ports = SerialManager.list_available_ports()

        if not ports:
            print("没有找到可用的串口。")
            return

        print("可用的串口：")
        for port in ports:
            print(f"  {port['device']} - {port['description']}")

    def __enter__(self):
        """支持with语句"""
        if not self.open():
            raise TransportError(f"无法打开串口 {self.config.port}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        self.close()
