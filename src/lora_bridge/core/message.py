"""
协议消息模块
============

定义经过校验的协议消息。
"""

from dataclasses import dataclass, field

from ..config.constants import MessageType
from .hex_codec import bytes_to_hex

_TYPE_LABELS = {
    MessageType.MANAGEMENT: "Management",
    MessageType.DATA: "Data",
}


def type_label(msg_type: int) -> str:
    """消息类型的显示名称，未知类型返回 Unknown"""
    return _TYPE_LABELS.get(msg_type, "Unknown")


@dataclass(frozen=True)
class Message:
    """
    协议消息

    只由帧解析器创建，创建后不可修改。
    相等性与哈希只覆盖对端发送的字段，calculated_checksum 是本地推导值，不参与比较。
    """

    msg_type: int
    declared_length: int
    payload: bytes
    received_checksum: int
    calculated_checksum: int = field(compare=False)

    @property
    def is_checksum_valid(self) -> bool:
        """接收校验和与本地计算值是否一致"""
        return self.received_checksum == self.calculated_checksum

    @property
    def payload_hex(self) -> str:
        """负载的十六进制文本"""
        return bytes_to_hex(self.payload)

    @property
    def type_label(self) -> str:
        """消息类型名称"""
        return type_label(self.msg_type)

    def __repr__(self) -> str:
        return (
            f"Message(type=0x{self.msg_type:02X}, len={self.declared_length}, "
            f"payload={self.payload_hex or '(empty)'}, "
            f"checksum=0x{self.received_checksum:02X}, valid={self.is_checksum_valid})"
        )
