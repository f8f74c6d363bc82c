"""
异常定义
========

协议引擎使用的异常类型。

- TransportError: 串口打开/读取/写入失败，记录日志后继续运行
- FrameMalformed: 候选帧结构错误，丢弃该候选帧后继续提取
- MalformedHex / FrameTooShort: FrameMalformed 的具体原因

数据不足(等待更多输入)与校验和不匹配(消息照常投递)都不是异常。
"""


class BridgeError(Exception):
    """桥接协议异常基类"""


class TransportError(BridgeError):
    """串口传输异常"""


class FrameMalformed(BridgeError, ValueError):
    """候选帧结构错误"""


class MalformedHex(FrameMalformed):
    """十六进制文本非法(奇数长度或包含非十六进制字符)"""


class FrameTooShort(FrameMalformed):
    """帧长度不足以容纳类型、长度、负载与校验"""
