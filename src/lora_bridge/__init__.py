"""
LoRa桥接串口协议工具
====================

通过USB串口与LoRa桥接设备通信，将连续的串口字节流切分为经过校验的协议消息。

主要功能：
- 跨数据块的帧重组
- 帧结构与校验和验证
- 协议帧打包发送
- 控制台监听界面

作者: lanford
版本: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "lanford"
__email__ = ""
__description__ = "LoRa桥接串口协议工具"

# 导出主要类
from .core.frame_handler import FrameHandler
from .core.frame_extractor import FrameExtractor
from .core.message import Message
from .core.session import BridgeSession

__all__ = [
    "FrameHandler",
    "FrameExtractor",
    "Message",
    "BridgeSession",
]
