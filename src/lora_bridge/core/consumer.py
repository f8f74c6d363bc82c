"""
消息消费模块
============

按固定周期从消息队列取出消息，格式化后输出到界面。
"""

from typing import Callable, Optional

from ..config.constants import DEFAULT_CONSUME_INTERVAL
from .formatter import format_message
from .io_thread import BackgroundWorker
from .message import Message
from .message_queue import MessageQueue
from .presentation import PresentationSurface
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ConsumerThread(BackgroundWorker):
    """消费线程，每个周期最多处理一条消息"""

    name = "消费"

    def __init__(
        self,
        message_queue: MessageQueue,
        surface: Optional[PresentationSurface] = None,
        interval: float = DEFAULT_CONSUME_INTERVAL,
        formatter: Callable[[Message], str] = format_message,
    ):
        """
        初始化消费线程

        Args:
            message_queue: 消息队列
            surface: 界面输出
            interval: 消费周期(秒)
            formatter: 消息格式化函数
        """
        super().__init__()
        self.message_queue = message_queue
        self.surface = surface or PresentationSurface()
        self.interval = interval
        self.formatter = formatter

        self.messages_consumed = 0

    def consume_once(self) -> Optional[str]:
        """
        处理一条消息

        Returns:
            格式化后的文本，队列为空时返回None
        """
        message = self.message_queue.get_nowait()
        if message is None:
            return None

        text = self.formatter(message)
        self.messages_consumed += 1

        self.surface.set_status(text)
        self.surface.append_log(f"已处理消息: {text}")
        logger.info(f"已处理消息: {text}")
        return text

    def _run(self) -> None:
        """消费线程主循环"""
        logger.debug("消费线程开始运行")

        while not self._stop_event.wait(self.interval):
            self.consume_once()

        logger.debug("消费线程已结束")
