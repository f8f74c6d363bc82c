"""
数据帧处理模块
==============

负责桥接协议数据帧的封装和解析。

数据帧格式：| 帧头 0xEA | 类型(1B) | 长度(1B) | 负载(NB) | 校验(1B) | 帧尾 0x55 |

发送方向直接写原始字节，接收方向处理的是十六进制文本。
"""

from typing import Optional, Union

from ..config.constants import (
    HEADER_BYTE,
    FOOTER_BYTE,
    HEADER_HEX,
    FOOTER_HEX,
    MIN_FRAME_BODY_HEX_LENGTH,
    MAX_PAYLOAD_LENGTH,
    FramingMode,
    MessageType,
)
from .checksum import calculate_checksum
from .errors import FrameTooShort
from .hex_codec import hex_to_bytes
from .message import Message
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FrameHandler:
    """数据帧处理器"""

    @staticmethod
    def pack_frame(
        msg_type: Union[MessageType, int], payload: bytes
    ) -> Optional[bytes]:
        """
        将消息类型和负载打包成数据帧

        Args:
            msg_type: 消息类型，可以是MessageType枚举或整数
            payload: 负载数据，最长255字节

        Returns:
            打包后的原始字节帧，失败时返回None

        Examples:
            >>> FrameHandler.pack_frame(MessageType.MANAGEMENT, b'on').hex().upper()
            'EA01026F6E0255'
        """
        if payload is None:
            logger.error("负载为空，无法计算校验和")
            return None

        msg_type = int(msg_type)
        if not 0 <= msg_type <= 0xFF:
            logger.error(f"消息类型超出单字节范围: {msg_type}")
            return None

        if len(payload) > MAX_PAYLOAD_LENGTH:
            logger.error(f"负载过长: {len(payload)} > {MAX_PAYLOAD_LENGTH}")
            return None

        try:
            declared_length = len(payload)
            checksum = calculate_checksum(msg_type, declared_length, payload)

            return (
                bytes([HEADER_BYTE, msg_type, declared_length])
                + bytes(payload)
                + bytes([checksum, FOOTER_BYTE])
            )

        except TypeError as e:
            logger.error(f"打包数据帧失败: {e}")
            return None

    @staticmethod
    def strip_markers(
        candidate_hex: str, mode: FramingMode = FramingMode.COMPAT
    ) -> str:
        """
        去除候选帧中的帧头帧尾标记

        兼容模式下删除文本中所有的 EA 与 55 (包括负载中的同值字节以及跨字节边界的匹配)；
        严格模式下只去掉开头的帧头和结尾的帧尾。
        """
        if mode == FramingMode.COMPAT:
            return candidate_hex.replace(HEADER_HEX, "").replace(FOOTER_HEX, "")

        body = candidate_hex
        if body.startswith(HEADER_HEX):
            body = body[len(HEADER_HEX):]
        if body.endswith(FOOTER_HEX):
            body = body[: -len(FOOTER_HEX)]
        return body

    @staticmethod
    def unpack_frame(
        candidate_hex: str, mode: FramingMode = FramingMode.COMPAT
    ) -> Message:
        """
        解析候选帧

        校验和不匹配不会导致解析失败，消息照常返回，is_checksum_valid 为 False，
        是否丢弃由消费方决定。

        Args:
            candidate_hex: 候选帧的十六进制文本(包含帧头帧尾)
            mode: 帧提取模式，决定标记的剔除方式

        Returns:
            解析得到的消息

        Raises:
            FrameTooShort: 剩余文本不足以容纳类型、长度、负载与校验
            MalformedHex: 包含非法十六进制字符
        """
        body = FrameHandler.strip_markers(candidate_hex, mode)

        if len(body) < MIN_FRAME_BODY_HEX_LENGTH:
            raise FrameTooShort(f"数据长度不足一帧: {len(body)} 个十六进制字符")

        msg_type, declared_length = hex_to_bytes(body[:4])

        payload_end = 4 + declared_length * 2
        checksum_end = payload_end + 2
        if len(body) < checksum_end:
            raise FrameTooShort(
                f"负载被截断: 声明长度={declared_length}, "
                f"需要{checksum_end}个字符, 实际{len(body)}个"
            )

        payload = hex_to_bytes(body[4:payload_end])
        received_checksum = hex_to_bytes(body[payload_end:checksum_end])[0]
        calculated_checksum = calculate_checksum(msg_type, declared_length, payload)

        if received_checksum != calculated_checksum:
            logger.warning(
                f"校验和错误: 接收=0x{received_checksum:02X}, "
                f"计算=0x{calculated_checksum:02X}"
            )

        return Message(
            msg_type=msg_type,
            declared_length=declared_length,
            payload=payload,
            received_checksum=received_checksum,
            calculated_checksum=calculated_checksum,
        )
