"""
日志模块测试
============
"""

import logging

from lora_bridge.utils import logger as logger_module
from lora_bridge.utils.logger import ColoredFormatter, get_logger, set_level, setup_logger


def make_record(level=logging.WARNING, msg="帧尾位置不匹配", exc_info=None):
    return logging.LogRecord(
        name="lora_bridge.test",
        level=level,
        pathname="/src/lora_bridge/core/frame_extractor.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
        func="ingest",
    )


class TestColoredFormatter:
    def test_format_includes_location(self):
        text = ColoredFormatter().format(make_record())

        assert "帧尾位置不匹配" in text
        assert "[frame_extractor.py.ingest():42]" in text
        assert text.startswith(ColoredFormatter.COLORS["WARNING"])
        assert text.endswith(ColoredFormatter.COLORS["RESET"])

    def test_format_exception(self):
        try:
            raise ValueError("bad hex")
        except ValueError:
            import sys

            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        text = ColoredFormatter().format(record)

        assert "Traceback" in text
        assert "ValueError: bad hex" in text


class TestSetupLogger:
    def test_env_level_override(self, monkeypatch):
        """环境变量覆盖传入的日志级别"""
        monkeypatch.setenv(logger_module.LOG_LEVEL_ENV, "debug")

        log = setup_logger("lora_bridge.test.env", level=logging.WARNING, console_output=False)

        assert log.level == logging.DEBUG

    def test_invalid_env_level_ignored(self, monkeypatch):
        monkeypatch.setenv(logger_module.LOG_LEVEL_ENV, "LOUD")

        log = setup_logger("lora_bridge.test.invalid", level=logging.ERROR, console_output=False)

        assert log.level == logging.ERROR

    def test_log_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv(logger_module.LOG_LEVEL_ENV, raising=False)
        log_file = tmp_path / "bridge.log"

        log = setup_logger("lora_bridge.test.file", log_file=str(log_file), console_output=False)
        log.info("数据包已发送: EA 01 02 6F 6E 02 55")
        for handler in log.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "INFO" in content
        assert "EA 01 02 6F 6E 02 55" in content

        for handler in log.handlers:
            handler.close()

    def test_get_logger_cached(self):
        assert get_logger("lora_bridge.test.cached") is get_logger("lora_bridge.test.cached")

    def test_set_level(self):
        log = get_logger("lora_bridge.test.level")
        original = log.level

        set_level(logging.DEBUG)
        assert log.level == logging.DEBUG

        set_level(original)
