"""
帧提取模块
==========

维护尚未消费的十六进制文本缓冲区，从中切出完整的候选帧并交给解析器。

串口每次读取的数据块可能在任意位置截断帧，提取器负责跨数据块重组。
帧头帧尾标记不做转义，负载中出现同值字节时两种模式的处理不同：

- 兼容模式：首个帧头到最后一个帧尾之间的全部文本作为候选帧。缓冲区中同时
  存在多个完整帧时会合并为一个超长候选帧，解析器忽略校验字节之后的内容，
  因此只得到第一条消息。
- 严格模式：按字节对齐查找帧头，根据长度字段确定帧尾位置并校验。
  当前帧头还在等待数据(或找不到对齐的帧头)时，如果后面已经有一个帧尾位置
  正确且校验和一致的完整帧，就丢弃它之前的内容，从该帧重新同步。这样噪声
  产生的超长长度字段不会阻塞后续帧，奇数长度的文本输入造成的半字节错位也能
  自动恢复。代价是：负载中恰好嵌有一个完整合法帧的长帧，在其余部分到达之前
  会被截断。
"""

import string
from typing import Callable, List, Optional

from ..config.constants import (
    HEADER_HEX,
    FOOTER_HEX,
    FRAME_OVERHEAD_SIZE,
    FramingMode,
)
from .checksum import calculate_checksum
from .errors import FrameMalformed, MalformedHex
from .frame_handler import FrameHandler
from .hex_codec import hex_to_bytes
from .message import Message
from ..utils.logger import get_logger

logger = get_logger(__name__)

# 候选帧解析失败回调: (候选帧文本, 异常)
RejectCallback = Callable[[str, FrameMalformed], None]


class FrameExtractor:
    """
    帧提取器

    缓冲区只增不减，直到切出候选帧或丢弃帧头之前的垃圾数据时才从头部裁剪。
    兼容模式下缓冲区没有容量上限。
    """

    def __init__(
        self,
        mode: FramingMode = FramingMode.COMPAT,
        on_candidate: Optional[Callable[[str], None]] = None,
        on_reject: Optional[RejectCallback] = None,
    ):
        """
        初始化帧提取器

        Args:
            mode: 帧提取模式
            on_candidate: 切出候选帧时的回调(用于详细日志)
            on_reject: 候选帧解析失败时的回调
        """
        self.mode = FramingMode(mode)
        self.on_candidate = on_candidate
        self.on_reject = on_reject
        self._buffer = ""

        # 统计信息
        self.frames_extracted = 0
        self.frames_rejected = 0
        self.chars_discarded = 0

    @property
    def pending(self) -> str:
        """尚未消费的缓冲区文本"""
        return self._buffer

    def reset(self) -> None:
        """清空缓冲区"""
        self._buffer = ""

    def ingest(self, hex_chunk: str) -> List[Message]:
        """
        追加十六进制数据块并提取其中所有完整帧

        Args:
            hex_chunk: 新到达的十六进制文本

        Returns:
            本次解析成功的消息列表(可能为空)
        """
        self._buffer += hex_chunk
        messages: List[Message] = []

        while True:
            candidate = self._next_candidate()
            if candidate is None:
                break  # 没有完整帧，等待更多数据

            self.frames_extracted += 1
            logger.debug(f"发现候选帧: {candidate}")
            if self.on_candidate:
                self.on_candidate(candidate)

            try:
                message = FrameHandler.unpack_frame(candidate, self.mode)
            except FrameMalformed as e:
                self.frames_rejected += 1
                logger.warning(f"候选帧解析失败: {candidate}, 原因: {e}")
                if self.on_reject:
                    self.on_reject(candidate, e)
                continue

            messages.append(message)

        return messages

    def _next_candidate(self) -> Optional[str]:
        """切出下一个候选帧，没有完整帧时返回None"""
        if self.mode == FramingMode.STRICT:
            return self._next_candidate_strict()
        return self._next_candidate_compat()

    def _next_candidate_compat(self) -> Optional[str]:
        """首个帧头到最后一个帧尾"""
        start = self._buffer.find(HEADER_HEX)
        end = self._buffer.rfind(FOOTER_HEX)
        if start == -1 or end == -1 or end <= start:
            return None

        frame_end = end + len(FOOTER_HEX)
        candidate = self._buffer[start:frame_end]
        self.chars_discarded += start
        self._buffer = self._buffer[frame_end:]
        return candidate

    def _next_candidate_strict(self) -> Optional[str]:
        """按长度字段定位帧尾"""
        while True:
            start = self._find_aligned_header()
            if start is None:
                # 数据流可能错开了半个字节，已有完整帧到达时以它重新对齐
                realigned = self._find_complete_frame(0)
                if realigned is not None:
                    logger.debug(f"按完整帧重新对齐，丢弃 {realigned} 个字符")
                    self._discard(realigned)
                    continue

                self._discard_unaligned_garbage()
                return None

            self._discard(start)

            # 帧头 + 类型 + 长度 共6个字符
            if len(self._buffer) < 6:
                return None

            frame_len = self._frame_length_at(0)
            if frame_len is None:
                logger.debug(f"长度字段非法，丢弃帧头重新同步: {self._buffer[:6]}")
                self._discard(len(HEADER_HEX))
                continue

            if len(self._buffer) < frame_len:
                # 长度字段可能来自噪声，后面已有完整帧时不再等待
                later = self._find_complete_frame(len(HEADER_HEX))
                if later is None:
                    return None
                logger.debug(f"声明长度 {frame_len} 尚未到齐，后面已有完整帧，丢弃帧头重新同步")
                self._discard(later)
                continue

            candidate = self._buffer[:frame_len]
            if candidate.endswith(FOOTER_HEX):
                self._buffer = self._buffer[frame_len:]
                return candidate

            logger.debug(f"帧尾位置不匹配，丢弃帧头重新同步: {candidate}")
            self._discard(len(HEADER_HEX))

    def _frame_length_at(self, index: int) -> Optional[int]:
        """根据 index 处帧头后的长度字段计算整帧的十六进制字符数"""
        length_hex = self._buffer[index + 4:index + 6]
        if len(length_hex) < 2 or any(char not in string.hexdigits for char in length_hex):
            return None
        return (FRAME_OVERHEAD_SIZE + int(length_hex, 16)) * 2

    def _is_complete_frame_at(self, index: int) -> bool:
        """index 处是否已有帧尾位置正确且校验和一致的完整帧"""
        frame_len = self._frame_length_at(index)
        if frame_len is None or len(self._buffer) < index + frame_len:
            return False

        candidate = self._buffer[index:index + frame_len]
        if not candidate.endswith(FOOTER_HEX):
            return False

        try:
            body = hex_to_bytes(candidate[len(HEADER_HEX):-len(FOOTER_HEX)])
        except MalformedHex:
            return False
        return calculate_checksum(body[0], body[1], body[2:-1]) == body[-1]

    def _find_complete_frame(self, start: int) -> Optional[int]:
        """从 start 开始查找第一个完整帧的位置，不要求字节对齐"""
        index = self._buffer.find(HEADER_HEX, start)
        while index != -1:
            if self._is_complete_frame_at(index):
                return index
            index = self._buffer.find(HEADER_HEX, index + 1)
        return None

    def _discard_unaligned_garbage(self) -> None:
        """
        没有可用帧头时丢弃垃圾数据

        按整字节丢弃，保留第一个未对齐帧头以及末尾可能是半个帧头的字符，
        等待后续数据判断它们是否属于一个错位的帧。
        """
        keep_from = len(self._buffer)
        unaligned = self._buffer.find(HEADER_HEX)
        if unaligned != -1:
            keep_from = unaligned
        elif self._buffer.endswith(HEADER_HEX[0]):
            keep_from -= 1
        self._discard(keep_from - keep_from % 2)

    def _find_aligned_header(self) -> Optional[int]:
        """查找位于字节边界上的第一个帧头"""
        index = self._buffer.find(HEADER_HEX)
        while index != -1:
            if index % 2 == 0:
                return index
            index = self._buffer.find(HEADER_HEX, index + 1)
        return None

    def _discard(self, count: int) -> None:
        """从缓冲区头部丢弃指定数量的字符"""
        if count <= 0:
            return
        self.chars_discarded += count
        self._buffer = self._buffer[count:]
