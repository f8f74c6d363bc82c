"""
界面输出模块
============

协议引擎只通过两个调用与界面交互：设置当前状态文本、追加详细日志行。
"""

import threading
from typing import List, Optional


class PresentationSurface:
    """界面接口，默认实现不做任何输出"""

    def set_status(self, text: str) -> None:
        """设置当前状态文本"""

    def append_log(self, line: str) -> None:
        """追加一行详细日志"""


class ConsolePresentation(PresentationSurface):
    """控制台界面"""

    def __init__(self, verbose: bool = False):
        """
        Args:
            verbose: 是否打印详细日志行
        """
        self.verbose = verbose
        self._print_lock = threading.Lock()

    def set_status(self, text: str) -> None:
        with self._print_lock:
            print(f"📟 {text}", flush=True)

    def append_log(self, line: str) -> None:
        if not self.verbose:
            return
        with self._print_lock:
            print(f"   · {line}", flush=True)


class RecordingPresentation(PresentationSurface):
    """在内存中记录全部输出，供离线解码和测试使用"""

    def __init__(self):
        self.statuses: List[str] = []
        self.logs: List[str] = []
        self._lock = threading.Lock()

    @property
    def current_status(self) -> Optional[str]:
        """最近一次设置的状态文本"""
        with self._lock:
            return self.statuses[-1] if self.statuses else None

    def set_status(self, text: str) -> None:
        with self._lock:
            self.statuses.append(text)

    def append_log(self, line: str) -> None:
        with self._lock:
            self.logs.append(line)
