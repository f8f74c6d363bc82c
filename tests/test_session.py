"""
桥接会话测试
============

测试 BridgeSession 的端到端数据流：注入/读取 -> 提取 -> 队列 -> 消费 -> 界面，
以及发送方向的打包和写入。
"""

import threading
import time
from unittest.mock import Mock

import pytest

from lora_bridge.config.constants import TEST_FRAME_HEX, FramingMode
from lora_bridge.config.settings import SerialConfig, SessionConfig
from lora_bridge.core.presentation import RecordingPresentation
from lora_bridge.core.serial_manager import SerialManager
from lora_bridge.core.session import BridgeSession

LED_TEXT = "Data: 4C4544206973206F6E (ASCII: LED is on, Len: 9, Checksum: 5D, Valid: True)"
CANNED_FRAME = bytes([0xEA, 0x01, 0x02, 0x6F, 0x6E, 0x02, 0x55])


def wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def make_serial_manager(*chunks, opened=True, write_ok=True):
    """构造模拟串口管理器，按顺序返回给定数据块"""
    manager = Mock(spec=SerialManager)
    manager.config = SerialConfig(port="COM3")
    manager.is_open = opened
    manager.open.return_value = opened
    manager.write.return_value = write_ok

    remaining = list(chunks)
    lock = threading.Lock()

    def read(size):
        with lock:
            if remaining:
                return remaining.pop(0)
        time.sleep(0.005)
        return b""

    manager.read.side_effect = read
    return manager


@pytest.fixture
def surface():
    return RecordingPresentation()


@pytest.fixture
def fast_config():
    return SessionConfig(consume_interval=0.01)


class TestSessionWithoutSerial:
    """未连接串口时的会话"""

    def test_start_without_serial(self, surface, fast_config):
        session = BridgeSession(config=fast_config, surface=surface)

        assert session.start() is False
        assert session.is_started
        assert surface.statuses == ["未配置串口设备"]
        session.stop()

    def test_inject_test_frame(self, surface, fast_config):
        """注入测试帧后界面状态显示格式化后的消息"""
        with BridgeSession(config=fast_config, surface=surface) as session:
            messages = session.inject_test_frame()

            assert len(messages) == 1
            assert wait_until(lambda: surface.current_status == LED_TEXT)

        assert f"注入测试帧: {TEST_FRAME_HEX}" in surface.logs
        assert "消息已解析并入队: 4C4544206973206F6E" in surface.logs

    def test_inject_without_start(self, surface):
        """未启动时注入的消息留在队列中"""
        session = BridgeSession(surface=surface)

        session.inject_test_frame()

        assert session.message_queue.qsize() == 1
        assert surface.statuses == []

    def test_rejected_candidate_logged(self, surface):
        session = BridgeSession(surface=surface)

        assert session.inject_test_frame("EA010555") == []

        assert any(line.startswith("候选帧解析失败: EA010555") for line in surface.logs)
        assert session.get_statistics()["frames_rejected"] == 1

    def test_send_without_serial_fails(self, surface):
        session = BridgeSession(surface=surface)

        assert session.send_now(0x01, b"on") is False
        assert session.send_failures == 1
        assert "发送数据包失败: EA 01 02 6F 6E 02 55" in surface.logs


class TestSessionWithSerial:
    """连接模拟串口的会话"""

    def test_reads_flow_to_surface(self, surface, fast_config):
        """串口数据跨多个数据块到达"""
        frame = bytes.fromhex(TEST_FRAME_HEX)
        manager = make_serial_manager(frame[:4], frame[4:10], frame[10:])

        with BridgeSession(config=fast_config, surface=surface, serial_manager=manager) as session:
            assert session.reader is not None
            assert wait_until(lambda: surface.current_status == LED_TEXT)

        manager.close.assert_called_once()
        assert "串口已关闭" in surface.logs

    def test_opens_port_when_closed(self, surface, fast_config):
        manager = make_serial_manager(opened=False)

        session = BridgeSession(config=fast_config, surface=surface, serial_manager=manager)

        assert session.start() is False
        manager.open.assert_called_once()
        assert surface.current_status == "无法打开串口设备"
        session.stop()

    def test_serial_config_creates_manager(self):
        session = BridgeSession(serial_config=SerialConfig(port="COM7"))

        assert isinstance(session.serial_manager, SerialManager)
        assert session.serial_manager.config.port == "COM7"

    def test_send_now_writes_raw_frame(self, surface):
        manager = make_serial_manager()
        session = BridgeSession(surface=surface, serial_manager=manager)

        assert session.send_now(0x01, b"on") is True

        manager.write.assert_called_once_with(CANNED_FRAME)
        assert session.packets_sent == 1
        assert "数据包已发送: EA 01 02 6F 6E 02 55" in surface.logs

    def test_send_canned_command_in_thread(self, surface):
        manager = make_serial_manager()
        session = BridgeSession(surface=surface, serial_manager=manager)

        thread = session.send_canned_command()
        thread.join(timeout=2.0)

        manager.write.assert_called_once_with(CANNED_FRAME)
        assert session.packets_sent == 1

    def test_send_write_failure(self, surface):
        manager = make_serial_manager(write_ok=False)
        session = BridgeSession(surface=surface, serial_manager=manager)

        assert session.send_now(0x02, b"LED is on") is False
        assert session.send_failures == 1
        assert session.packets_sent == 0

    def test_send_invalid_payload(self, surface):
        manager = make_serial_manager()
        session = BridgeSession(surface=surface, serial_manager=manager)

        assert session.send_now(0x01, b"\x00" * 256) is False

        manager.write.assert_not_called()
        assert "数据包构造失败" in surface.logs

    def test_concurrent_sends(self):
        manager = make_serial_manager()
        session = BridgeSession(serial_manager=manager)

        threads = [session.send_packet(0x02, bytes([i])) for i in range(10)]
        for thread in threads:
            thread.join(timeout=2.0)

        assert manager.write.call_count == 10


class TestSessionLifecycle:
    """测试会话生命周期和配置"""

    def test_stop_discards_pending_messages(self, surface):
        session = BridgeSession(config=SessionConfig(consume_interval=10), surface=surface)
        session.start()
        session.inject_test_frame()
        session.inject_test_frame()

        session.stop()

        assert session.message_queue.empty()
        assert not session.consumer.is_running
        assert not session.is_started

    def test_strict_mode_from_config(self):
        session = BridgeSession(config=SessionConfig(framing_mode="strict"))
        assert session.extractor.mode == FramingMode.STRICT

        messages = session.inject_test_frame(TEST_FRAME_HEX + "EA01026F6E0255")

        assert [m.payload for m in messages] == [b"LED is on", b"on"]

    def test_strict_mode_recovers_from_odd_injection(self):
        """注入奇数长度文本后，串口数据仍然正常解析"""
        session = BridgeSession(config=SessionConfig(framing_mode="strict"))

        session.inject_test_frame("E")
        for _ in range(3):
            session.ingest_hex(TEST_FRAME_HEX)

        assert session.message_queue.qsize() == 3

    def test_bounded_queue_from_config(self):
        session = BridgeSession(config=SessionConfig(queue_maxsize=1))

        session.inject_test_frame()
        session.inject_test_frame()

        assert session.message_queue.qsize() == 1
        assert session.get_statistics()["messages_dropped"] == 1

    def test_statistics(self, surface, fast_config):
        manager = make_serial_manager()
        with BridgeSession(config=fast_config, surface=surface, serial_manager=manager) as session:
            session.inject_test_frame()
            assert wait_until(lambda: session.consumer.messages_consumed == 1)
            stats = session.get_statistics()

        assert stats["started"] is True
        assert stats["frames_extracted"] == 1
        assert stats["messages_queued"] == 1
        assert stats["messages_consumed"] == 1
        assert "reader" in stats
