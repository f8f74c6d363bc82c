"""
IO线程模块
==========

串口读取线程：持续读取串口数据，转换为十六进制文本后交给帧提取器。
读取错误不会终止线程，只有显式停止才会退出。
"""

import threading
from typing import Callable, Optional

from ..config.constants import DEFAULT_READ_BUFFER_SIZE, MAX_REPORTED_READ_ERRORS
from .errors import TransportError
from .hex_codec import bytes_to_hex
from .presentation import PresentationSurface
from .serial_manager import SerialManager
from ..utils.logger import get_logger

logger = get_logger(__name__)


class BackgroundWorker:
    """后台循环线程基类，通过 threading.Event 取消"""

    name = "worker"

    def __init__(self):
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False

    def start(self) -> bool:
        """
        启动线程

        Returns:
            启动成功返回True，失败返回False
        """
        if self._running:
            logger.warning(f"{self.name}线程已经在运行")
            return True

        try:
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run, name=f"lora-bridge-{self.name}", daemon=True
            )
            self._thread.start()
            self._running = True

            logger.info(f"{self.name}线程已启动")
            return True

        except RuntimeError as e:
            logger.error(f"启动{self.name}线程失败: {e}")
            return False

    def stop(self, timeout: float = 2.0) -> bool:
        """
        停止线程

        Args:
            timeout: 等待线程结束的超时时间(秒)

        Returns:
            停止成功返回True，超时返回False
        """
        if not self._running:
            return True

        logger.debug(f"正在停止{self.name}线程...")
        self._stop_event.set()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout)

            if self._thread.is_alive():
                logger.warning(f"{self.name}线程未在{timeout}秒内结束")
                return False

        self._running = False
        logger.info(f"{self.name}线程已停止")
        return True

    @property
    def is_running(self) -> bool:
        """检查线程是否在运行"""
        return self._running and self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        """支持with语句"""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        self.stop()


class ReaderThread(BackgroundWorker):
    """
    串口读取线程

    连续读取错误的前 max_reported_errors 次会提示到界面，之后只记录调试日志，
    读取循环本身继续运行。成功读取一次后连续错误计数清零。
    """

    name = "读取"

    def __init__(
        self,
        serial_manager: SerialManager,
        on_hex_chunk: Callable[[str], None],
        surface: Optional[PresentationSurface] = None,
        read_size: int = DEFAULT_READ_BUFFER_SIZE,
        max_reported_errors: int = MAX_REPORTED_READ_ERRORS,
        error_backoff: float = 0.01,
    ):
        """
        初始化读取线程

        Args:
            serial_manager: 串口管理器
            on_hex_chunk: 收到数据块后的回调，参数为十六进制文本
            surface: 界面输出
            read_size: 单次读取最大字节数
            max_reported_errors: 提示到界面的连续错误次数上限
            error_backoff: 读取出错后的等待时间(秒)
        """
        super().__init__()
        self.serial_manager = serial_manager
        self.on_hex_chunk = on_hex_chunk
        self.surface = surface or PresentationSurface()
        self.read_size = read_size
        self.max_reported_errors = max_reported_errors
        self.error_backoff = error_backoff

        # 统计信息
        self.chunks_received = 0
        self.bytes_received = 0
        self.read_errors = 0
        self.consecutive_errors = 0

    def start(self) -> bool:
        if not self.serial_manager.is_open:
            logger.error("串口未打开，无法启动读取线程")
            return False
        return super().start()

    def get_statistics(self) -> dict:
        """
        获取读取线程统计信息

        Returns:
            包含统计信息的字典
        """
        return {
            "running": self.is_running,
            "chunks_received": self.chunks_received,
            "bytes_received": self.bytes_received,
            "read_errors": self.read_errors,
            "consecutive_errors": self.consecutive_errors,
        }

    def _run(self) -> None:
        """读取线程主循环"""
        logger.debug("读取线程开始运行")

        while not self._stop_event.is_set():
            try:
                data = self.serial_manager.read(self.read_size)
            except TransportError as e:
                self._handle_read_error(e)
                self._stop_event.wait(self.error_backoff)
                continue

            self.consecutive_errors = 0
            if data:
                self._handle_chunk(data)

        logger.debug("读取线程已结束")

    def _handle_chunk(self, data: bytes) -> None:
        """处理一次读取到的数据"""
        self.chunks_received += 1
        self.bytes_received += len(data)

        hex_chunk = bytes_to_hex(data)
        logger.debug(f"收到十六进制数据块: {hex_chunk}")
        self.surface.append_log(f"收到数据块: {hex_chunk}")

        self.on_hex_chunk(hex_chunk)

    def _handle_read_error(self, error: TransportError) -> None:
        """记录读取错误，超过上限后不再提示界面"""
        self.read_errors += 1

        if self.consecutive_errors < self.max_reported_errors:
            logger.error(f"读取串口数据出错: {error}")
            self.surface.set_status(f"读取数据出错: {error}")
            self.surface.append_log(f"读取串口数据出错: {error}")
        else:
            logger.debug(f"读取串口数据出错(已连续{self.consecutive_errors + 1}次): {error}")

        self.consecutive_errors += 1
