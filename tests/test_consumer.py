"""
消费线程测试
============
"""

import time

from lora_bridge.core.consumer import ConsumerThread
from lora_bridge.core.frame_handler import FrameHandler
from lora_bridge.config.constants import TEST_FRAME_HEX
from lora_bridge.core.message_queue import MessageQueue
from lora_bridge.core.presentation import RecordingPresentation

LED_TEXT = "Data: 4C4544206973206F6E (ASCII: LED is on, Len: 9, Checksum: 5D, Valid: True)"


def wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestConsumeOnce:
    """测试单次消费"""

    def test_empty_queue(self):
        surface = RecordingPresentation()
        consumer = ConsumerThread(MessageQueue(), surface=surface)

        assert consumer.consume_once() is None
        assert surface.statuses == []
        assert consumer.messages_consumed == 0

    def test_message_displayed(self):
        queue = MessageQueue()
        queue.put(FrameHandler.unpack_frame(TEST_FRAME_HEX))
        surface = RecordingPresentation()
        consumer = ConsumerThread(queue, surface=surface)

        assert consumer.consume_once() == LED_TEXT

        assert surface.current_status == LED_TEXT
        assert surface.logs == [f"已处理消息: {LED_TEXT}"]
        assert consumer.messages_consumed == 1
        assert queue.empty()

    def test_one_message_per_call(self):
        queue = MessageQueue()
        for _ in range(3):
            queue.put(FrameHandler.unpack_frame(TEST_FRAME_HEX))
        consumer = ConsumerThread(queue)

        consumer.consume_once()

        assert queue.qsize() == 2

    def test_custom_formatter(self):
        queue = MessageQueue()
        queue.put(FrameHandler.unpack_frame(TEST_FRAME_HEX))
        consumer = ConsumerThread(queue, formatter=lambda m: m.payload.decode())

        assert consumer.consume_once() == "LED is on"


class TestConsumerThread:
    """测试周期性消费"""

    def test_drains_queue_in_order(self):
        queue = MessageQueue()
        surface = RecordingPresentation()
        queue.put(FrameHandler.unpack_frame(TEST_FRAME_HEX))
        queue.put(FrameHandler.unpack_frame("EA01026F6E0255"))

        with ConsumerThread(queue, surface=surface, interval=0.01) as consumer:
            assert wait_until(lambda: consumer.messages_consumed == 2)

        assert surface.statuses[0] == LED_TEXT
        assert surface.statuses[1].startswith("Management: 6F6E")

    def test_stop_is_prompt(self):
        consumer = ConsumerThread(MessageQueue(), interval=0.05)
        consumer.start()

        started = time.time()
        assert consumer.stop(timeout=1.0) is True
        assert time.time() - started < 1.0
