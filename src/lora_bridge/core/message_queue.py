"""
消息队列模块
============

读取线程与消费线程之间的线程安全消息通道。
"""

import queue
from typing import Optional

from .message import Message
from ..utils.logger import get_logger

logger = get_logger(__name__)


class MessageQueue:
    """
    先进先出消息队列

    默认不限容量，消费跟不上生产时队列会持续增长。
    指定 maxsize 后队列满时丢弃最老的消息。
    """

    def __init__(self, maxsize: int = 0):
        """
        初始化消息队列

        Args:
            maxsize: 队列容量，0表示不限
        """
        self._queue: "queue.Queue[Message]" = queue.Queue(maxsize=maxsize)

        # 统计信息
        self.messages_queued = 0
        self.messages_dropped = 0

    @property
    def maxsize(self) -> int:
        """队列容量"""
        return self._queue.maxsize

    def put(self, message: Message) -> None:
        """
        将消息加入队列

        Args:
            message: 要加入的消息
        """
        try:
            self._queue.put_nowait(message)
            self.messages_queued += 1

        except queue.Full:
            # 队列满，丢弃最老的消息
            try:
                self._queue.get_nowait()
            except queue.Empty:
                pass  # 消费线程刚好取走
            self._queue.put_nowait(message)
            self.messages_queued += 1
            self.messages_dropped += 1
            logger.warning("消息队列满，丢弃旧消息")

    def get(self, timeout: Optional[float] = None) -> Optional[Message]:
        """
        从队列获取消息

        Args:
            timeout: 超时时间(秒)，None表示阻塞等待

        Returns:
            成功返回消息，超时返回None
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def get_nowait(self) -> Optional[Message]:
        """立即获取一条消息，队列为空时返回None"""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def qsize(self) -> int:
        """当前队列长度"""
        return self._queue.qsize()

    def empty(self) -> bool:
        """队列是否为空"""
        return self._queue.empty()

    def clear(self) -> int:
        """
        清空队列

        Returns:
            被丢弃的消息数量
        """
        dropped = 0
        while self.get_nowait() is not None:
            dropped += 1
        return dropped
