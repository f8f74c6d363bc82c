"""
命令行接口模块
==============

提供串口监听、命令发送和离线编解码的命令行接口。
"""

from .bridge_cli import BridgeCLI, parse_message_type

__all__ = [
    "BridgeCLI",
    "parse_message_type",
]
