#!/usr/bin/env python3
"""
LoRa桥接串口协议工具 - 模块CLI入口
==================================

支持通过 python -m lora_bridge 调用
"""

import sys
import argparse
import logging

from .cli.bridge_cli import BridgeCLI, parse_message_type
from .config.constants import DEFAULT_BAUDRATE, FramingMode
from .core.errors import MalformedHex
from .utils.logger import get_logger, set_level

logger = get_logger(__name__)

# 版本信息
VERSION = "1.0.0"
PROGRAM_NAME = "LoRa桥接串口协议工具"


def _add_serial_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--port", required=True, help="串口号（如 COM3, /dev/ttyUSB0）")
    parser.add_argument(
        "--baudrate", type=int, default=DEFAULT_BAUDRATE, help=f"波特率（默认{DEFAULT_BAUDRATE}）"
    )


def _add_payload_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type", dest="msg_type", default="management",
        help="消息类型：management / data / 数字（默认management）",
    )
    payload_group = parser.add_mutually_exclusive_group()
    payload_group.add_argument("--payload", default="on", help="文本负载（默认 on）")
    payload_group.add_argument("--hex", dest="hex_payload", help="十六进制负载，如 6F6E")


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog="lora_bridge",
        description=f"{PROGRAM_NAME} v{VERSION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例：
  # 监听串口并解析消息
  python -m lora_bridge monitor --port COM3 --baudrate 9600

  # 发送固定命令
  python -m lora_bridge send --port COM3 --type management --payload on

  # 离线解码十六进制文本
  python -m lora_bridge decode EA02094C4544206973206F6E5D55
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"{PROGRAM_NAME} v{VERSION}"
    )
    parser.add_argument("--debug", action="store_true", help="输出调试日志")

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    subparsers.add_parser("ports", help="列出可用串口")

    monitor_parser = subparsers.add_parser("monitor", help="监听串口并解析消息")
    monitor_parser.add_argument("--port", help="串口号，不指定时交互选择")
    monitor_parser.add_argument(
        "--baudrate", type=int, default=DEFAULT_BAUDRATE, help=f"波特率（默认{DEFAULT_BAUDRATE}）"
    )
    monitor_parser.add_argument("--strict", action="store_true", help="使用严格帧提取模式")
    monitor_parser.add_argument("--verbose", action="store_true", help="显示详细日志")

    send_parser = subparsers.add_parser("send", help="发送一个数据帧")
    _add_serial_arguments(send_parser)
    _add_payload_arguments(send_parser)

    encode_parser = subparsers.add_parser("encode", help="打包数据帧并输出十六进制")
    _add_payload_arguments(encode_parser)

    decode_parser = subparsers.add_parser("decode", help="离线解码十六进制文本")
    decode_parser.add_argument("hex_text", help="十六进制文本")
    decode_parser.add_argument("--strict", action="store_true", help="使用严格帧提取模式")

    return parser


def _framing_mode(args) -> FramingMode:
    return FramingMode.STRICT if args.strict else FramingMode.COMPAT


def run(args) -> bool:
    """执行子命令，返回是否成功"""
    if args.command == "ports":
        BridgeCLI.show_available_ports()
        return True

    if args.command == "monitor":
        return BridgeCLI.monitor(
            port=args.port,
            baudrate=args.baudrate,
            framing_mode=_framing_mode(args),
            verbose=args.verbose,
        )

    if args.command == "decode":
        lines = BridgeCLI.decode(args.hex_text, _framing_mode(args))
        for line in lines:
            print(line)
        if not lines:
            print("未解析出任何消息")
        return bool(lines)

    # send / encode 需要构造负载
    msg_type = parse_message_type(args.msg_type)
    payload = BridgeCLI.build_payload(args.payload, args.hex_payload)

    if args.command == "encode":
        frame_hex = BridgeCLI.encode(msg_type, payload)
        if frame_hex is None:
            print("❌ 数据帧打包失败")
            return False
        print(frame_hex)
        return True

    return BridgeCLI.send(args.port, msg_type, payload, baudrate=args.baudrate)


def main(argv=None):
    """主函数"""
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        if not args.command:
            parser.print_help()
            return

        if args.debug:
            set_level(logging.DEBUG)

        success = run(args)
        sys.exit(0 if success else 1)

    except (ValueError, MalformedHex) as e:
        print(f"❌ 参数错误: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\n👋 用户中断程序，退出")
        sys.exit(1)


if __name__ == "__main__":
    main()
