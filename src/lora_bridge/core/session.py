"""
桥接会话模块
============

统一管理串口、帧提取器、消息队列以及读取/消费/发送线程的生命周期。

数据流::

    串口原始字节 -> 十六进制文本 -> FrameExtractor -> FrameHandler.unpack_frame
        -> MessageQueue -> ConsumerThread -> 界面

发送方向由 FrameHandler.pack_frame 生成原始字节直接写入串口。
"""

import threading
from typing import List, Optional, Union

from ..config.constants import (
    TEST_FRAME_HEX,
    CANNED_COMMAND_TYPE,
    CANNED_COMMAND_PAYLOAD,
    MessageType,
)
from ..config.settings import SerialConfig, SessionConfig
from .consumer import ConsumerThread
from .errors import FrameMalformed
from .frame_extractor import FrameExtractor
from .frame_handler import FrameHandler
from .hex_codec import format_hex_bytes
from .io_thread import ReaderThread
from .message import Message
from .message_queue import MessageQueue
from .presentation import PresentationSurface
from .serial_manager import SerialManager
from ..utils.logger import get_logger

logger = get_logger(__name__)


class BridgeSession:
    """
    桥接会话

    串口不可用时会话仍然可以启动(只运行消费线程)，此时可以通过
    inject_test_frame 注入测试帧。
    """

    def __init__(
        self,
        serial_config: Optional[SerialConfig] = None,
        config: Optional[SessionConfig] = None,
        surface: Optional[PresentationSurface] = None,
        serial_manager: Optional[SerialManager] = None,
    ):
        """
        初始化桥接会话

        Args:
            serial_config: 串口配置，为None且未提供serial_manager时会话不连接串口
            config: 会话配置(可选)
            surface: 界面输出(可选)
            serial_manager: 外部创建的串口管理器(可选)，优先于serial_config
        """
        self.config = config or SessionConfig()
        self.surface = surface or PresentationSurface()

        if serial_manager is None and serial_config is not None:
            serial_manager = SerialManager(serial_config)
        self.serial_manager = serial_manager

        self.message_queue = MessageQueue(maxsize=self.config.queue_maxsize)
        self.extractor = FrameExtractor(
            mode=self.config.framing_mode,
            on_candidate=self._on_candidate,
            on_reject=self._on_reject,
        )
        self.consumer = ConsumerThread(
            self.message_queue, surface=self.surface, interval=self.config.consume_interval
        )
        self.reader: Optional[ReaderThread] = None

        # 读取线程和注入测试帧都会写缓冲区
        self._ingest_lock = threading.Lock()
        self._send_threads: List[threading.Thread] = []
        self._started = False

        # 统计信息
        self.packets_sent = 0
        self.send_failures = 0

    @property
    def is_started(self) -> bool:
        """会话是否已启动"""
        return self._started

    def start(self) -> bool:
        """
        启动会话

        Returns:
            串口读取已启动返回True；串口不可用返回False(消费线程仍在运行)
        """
        if self._started:
            logger.warning("会话已经启动")
            return self.reader is not None and self.reader.is_running

        self.consumer.start()
        self._started = True

        if self.serial_manager is None:
            self.surface.set_status("未配置串口设备")
            self.surface.append_log("未配置串口设备，仅支持注入测试帧")
            return False

        if not self.serial_manager.is_open and not self.serial_manager.open():
            self.surface.set_status("无法打开串口设备")
            self.surface.append_log(f"无法打开串口 {self.serial_manager.config.port}")
            return False

        self.surface.append_log(
            f"串口已打开，波特率: {self.serial_manager.config.baudrate}"
        )

        self.reader = ReaderThread(
            self.serial_manager,
            on_hex_chunk=self.ingest_hex,
            surface=self.surface,
            read_size=self.config.read_buffer_size,
            max_reported_errors=self.config.max_reported_read_errors,
        )
        return self.reader.start()

    def stop(self) -> None:
        """
        停止会话

        先关闭串口(失败只记录日志)，再停止所有线程。队列中未消费的消息直接丢弃。
        """
        if self.serial_manager is not None:
            self.serial_manager.close()
            self.surface.append_log("串口已关闭")

        timeout = self.config.join_timeout
        if self.reader is not None:
            self.reader.stop(timeout)
        self.consumer.stop(timeout)

        for thread in self._send_threads:
            thread.join(timeout)
        self._send_threads.clear()

        dropped = self.message_queue.clear()
        if dropped:
            logger.info(f"丢弃未处理的消息 {dropped} 条")

        self._started = False

    def ingest_hex(self, hex_chunk: str) -> List[Message]:
        """
        处理一段十六进制文本，解析成功的消息加入队列

        Args:
            hex_chunk: 十六进制文本

        Returns:
            本次解析成功的消息列表
        """
        with self._ingest_lock:
            messages = self.extractor.ingest(hex_chunk)
            for message in messages:
                self.message_queue.put(message)
                self.surface.append_log(f"消息已解析并入队: {message.payload_hex}")
        return messages

    def inject_test_frame(self, hex_text: str = TEST_FRAME_HEX) -> List[Message]:
        """
        注入一段字面十六进制文本，走与串口数据相同的处理流程

        Args:
            hex_text: 十六进制文本，默认为内置测试帧

        Returns:
            解析成功的消息列表
        """
        self.surface.append_log(f"注入测试帧: {hex_text}")
        return self.ingest_hex(hex_text)

    def send_packet(
        self, msg_type: Union[MessageType, int], payload: bytes
    ) -> threading.Thread:
        """
        在独立线程中发送一个数据帧，不重试

        Args:
            msg_type: 消息类型
            payload: 负载数据

        Returns:
            执行发送的线程
        """
        self._send_threads = [t for t in self._send_threads if t.is_alive()]

        thread = threading.Thread(
            target=self.send_now,
            args=(msg_type, payload),
            name="lora-bridge-send",
            daemon=True,
        )
        thread.start()
        self._send_threads.append(thread)
        return thread

    def send_canned_command(self) -> threading.Thread:
        """发送固定命令(管理消息，负载为 on)"""
        return self.send_packet(CANNED_COMMAND_TYPE, CANNED_COMMAND_PAYLOAD)

    def send_now(self, msg_type: Union[MessageType, int], payload: bytes) -> bool:
        """
        在当前线程中打包并写入一个数据帧

        Returns:
            成功返回True，失败返回False
        """
        frame = FrameHandler.pack_frame(msg_type, payload)
        if frame is None:
            self.send_failures += 1
            self.surface.append_log("数据包构造失败")
            return False

        if self.serial_manager is None or not self.serial_manager.write(frame):
            self.send_failures += 1
            logger.error(f"发送数据包失败: {format_hex_bytes(frame)}")
            self.surface.append_log(f"发送数据包失败: {format_hex_bytes(frame)}")
            return False

        self.packets_sent += 1
        logger.info(f"数据包已发送: {format_hex_bytes(frame)}")
        self.surface.append_log(f"数据包已发送: {format_hex_bytes(frame)}")
        return True

    def get_statistics(self) -> dict:
        """
        获取会话统计信息

        Returns:
            包含统计信息的字典
        """
        stats = {
            "started": self._started,
            "queue_size": self.message_queue.qsize(),
            "messages_queued": self.message_queue.messages_queued,
            "messages_dropped": self.message_queue.messages_dropped,
            "messages_consumed": self.consumer.messages_consumed,
            "frames_extracted": self.extractor.frames_extracted,
            "frames_rejected": self.extractor.frames_rejected,
            "packets_sent": self.packets_sent,
            "send_failures": self.send_failures,
        }
        if self.reader is not None:
            stats["reader"] = self.reader.get_statistics()
        return stats

    def _on_candidate(self, candidate: str) -> None:
        self.surface.append_log(f"发现候选帧: {candidate}")

    def _on_reject(self, candidate: str, error: FrameMalformed) -> None:
        self.surface.append_log(f"候选帧解析失败: {candidate}, 原因: {error}")

    def __enter__(self):
        """支持with语句"""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        self.stop()
