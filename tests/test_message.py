"""
协议消息测试
============

测试 Message 的相等性、不可变性和显示格式。
"""

import dataclasses

import pytest

from lora_bridge.config.constants import MessageType
from lora_bridge.core.formatter import format_message
from lora_bridge.core.message import Message, type_label


def make_message(**overrides) -> Message:
    """构造 'LED is on' 数据消息"""
    fields = dict(
        msg_type=0x02,
        declared_length=9,
        payload=b"LED is on",
        received_checksum=0x5D,
        calculated_checksum=0x5D,
    )
    fields.update(overrides)
    return Message(**fields)


class TestMessageIdentity:
    """测试消息的相等性与哈希"""

    def test_equal_messages(self):
        assert make_message() == make_message()
        assert hash(make_message()) == hash(make_message())

    def test_calculated_checksum_excluded(self):
        """
        本地计算的校验和不参与相等性比较

        两条消息对端发送的字段一致时视为同一条消息
        """
        valid = make_message()
        invalid = make_message(calculated_checksum=0x00)

        assert valid == invalid
        assert hash(valid) == hash(invalid)
        assert valid.is_checksum_valid
        assert not invalid.is_checksum_valid

    @pytest.mark.parametrize(
        "field_name,value",
        [
            ("msg_type", 0x01),
            ("declared_length", 8),
            ("payload", b"LED is of"),
            ("received_checksum", 0x5C),
        ],
    )
    def test_identity_fields(self, field_name, value):
        """参数化测试：任一身份字段不同即不相等"""
        assert make_message() != make_message(**{field_name: value})

    def test_usable_in_set(self):
        messages = {make_message(), make_message(calculated_checksum=1)}
        assert len(messages) == 1

    def test_immutable(self):
        """消息创建后不可修改"""
        message = make_message()
        with pytest.raises(dataclasses.FrozenInstanceError):
            message.payload = b"changed"  # type: ignore[misc]


class TestMessageProperties:
    """测试派生属性"""

    def test_payload_hex(self):
        assert make_message().payload_hex == "4C4544206973206F6E"

    @pytest.mark.parametrize(
        "msg_type,label",
        [
            (MessageType.MANAGEMENT, "Management"),
            (MessageType.DATA, "Data"),
            (0x00, "Unknown"),
            (0x7E, "Unknown"),
            (0xFF, "Unknown"),
        ],
    )
    def test_type_label(self, msg_type, label):
        assert type_label(msg_type) == label
        assert make_message(msg_type=int(msg_type)).type_label == label

    def test_repr(self):
        text = repr(make_message())
        assert "type=0x02" in text
        assert "valid=True" in text


class TestFormatMessage:
    """测试消息格式化"""

    def test_data_message(self):
        assert format_message(make_message()) == (
            "Data: 4C4544206973206F6E (ASCII: LED is on, Len: 9, Checksum: 5D, Valid: True)"
        )

    def test_management_message_invalid(self):
        message = Message(
            msg_type=0x01,
            declared_length=2,
            payload=b"on",
            received_checksum=0x03,
            calculated_checksum=0x02,
        )
        assert format_message(message) == (
            "Management: 6F6E (ASCII: on, Len: 2, Checksum: 03, Valid: False)"
        )

    def test_unknown_empty_message(self):
        message = Message(
            msg_type=0x10,
            declared_length=0,
            payload=b"",
            received_checksum=0x10,
            calculated_checksum=0x10,
        )
        text = format_message(message)
        assert text.startswith("Unknown:")
        assert "Len: 0" in text
        assert "Checksum: 10" in text
