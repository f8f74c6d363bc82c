"""
桥接设备命令行接口
==================

提供串口监听、发送命令、离线编解码等命令行入口。
"""

from typing import List, Optional

from ..config.constants import DEFAULT_BAUDRATE, FramingMode, MessageType
from ..config.settings import SerialConfig, SessionConfig
from ..core.formatter import format_message
from ..core.frame_extractor import FrameExtractor
from ..core.frame_handler import FrameHandler
from ..core.hex_codec import bytes_to_hex, hex_to_bytes
from ..core.presentation import ConsolePresentation
from ..core.serial_manager import SerialManager
from ..core.session import BridgeSession
from ..utils.logger import get_logger

logger = get_logger(__name__)

MONITOR_HELP = "命令: t=注入测试帧  s=发送固定命令  i=统计信息  h=帮助  q=退出"


class BridgeCLI:
    """桥接设备命令行接口"""

    @staticmethod
    def show_available_ports() -> None:
        """显示可用的串口"""
        SerialManager.print_available_ports()

    @staticmethod
    def get_user_input_port() -> Optional[str]:
        """获取用户选择的串口号"""
        ports = SerialManager.list_available_ports()

        if not ports:
            print("❌ 没有找到可用的串口。")
            print("   请检查:")
            print("   1. USB串口设备是否已连接")
            print("   2. 串口驱动是否已安装")
            print("   3. 是否有足够的权限访问串口")
            return None

        print("可用的串口列表:")
        for i, port in enumerate(ports, 1):
            print(f"  {i}. {port['device']} - {port['description']}")

        while True:
            try:
                choice = input(f"\n请选择串口号 (1-{len(ports)}): ").strip()
                if not choice:
                    print("请输入有效的选择。")
                    continue

                index = int(choice) - 1
                if 0 <= index < len(ports):
                    selected_port = ports[index]["device"]
                    print(f"✅ 已选择: {selected_port}")
                    return selected_port
                print(f"请输入1到{len(ports)}之间的数字。")
            except ValueError:
                print("请输入有效的数字。")
            except (KeyboardInterrupt, EOFError):
                print("\n用户取消选择")
                return None

    @staticmethod
    def build_payload(text: Optional[str] = None, hex_text: Optional[str] = None) -> bytes:
        """
        根据命令行参数构造负载

        Args:
            text: 文本负载，按UTF-8编码
            hex_text: 十六进制负载，允许空格分隔

        Raises:
            MalformedHex: 十六进制负载非法
        """
        if hex_text is not None:
            return hex_to_bytes("".join(hex_text.split()))
        return (text or "").encode("utf-8")

    @staticmethod
    def encode(msg_type: int, payload: bytes) -> Optional[str]:
        """将消息打包并以十六进制文本返回，失败返回None"""
        frame = FrameHandler.pack_frame(msg_type, payload)
        if frame is None:
            return None
        return bytes_to_hex(frame)

    @staticmethod
    def decode(hex_text: str, mode: FramingMode = FramingMode.COMPAT) -> List[str]:
        """
        离线解码一段十六进制文本

        Returns:
            每条消息的格式化文本
        """
        rejected: List[str] = []
        extractor = FrameExtractor(
            mode=mode, on_reject=lambda candidate, error: rejected.append(candidate)
        )
        messages = extractor.ingest("".join(hex_text.split()))

        for candidate in rejected:
            print(f"⚠️  丢弃无法解析的候选帧: {candidate}")
        if extractor.pending:
            print(f"⏳ 未组成完整帧的剩余数据: {extractor.pending}")

        return [format_message(message) for message in messages]

    @staticmethod
    def send(
        port: str,
        msg_type: int,
        payload: bytes,
        baudrate: int = DEFAULT_BAUDRATE,
    ) -> bool:
        """打开串口发送一个数据帧后关闭"""
        session = BridgeSession(serial_config=SerialConfig(port=port, baudrate=baudrate))
        if session.serial_manager is None or not session.serial_manager.open():
            print(f"❌ 无法打开串口 {port}")
            return False

        try:
            success = session.send_now(msg_type, payload)
            if success:
                print("✅ 数据包发送成功")
            else:
                print("❌ 数据包发送失败")
            return success
        finally:
            session.serial_manager.close()

    @staticmethod
    def monitor(
        port: Optional[str] = None,
        baudrate: int = DEFAULT_BAUDRATE,
        framing_mode: FramingMode = FramingMode.COMPAT,
        verbose: bool = False,
    ) -> bool:
        """
        交互式监听

        串口打开失败时仍然进入交互，可以注入测试帧验证解析流程。
        """
        if port is None:
            port = BridgeCLI.get_user_input_port()

        serial_config = SerialConfig(port=port, baudrate=baudrate) if port else None
        session_config = SessionConfig(framing_mode=framing_mode)
        surface = ConsolePresentation(verbose=verbose)

        session = BridgeSession(
            serial_config=serial_config, config=session_config, surface=surface
        )

        with session:
            if session.reader is not None and session.reader.is_running:
                print(f"📡 正在监听 {port}，波特率 {baudrate}")
            else:
                print("⚠️  串口未连接，仅可注入测试帧")
            print(MONITOR_HELP)

            BridgeCLI._command_loop(session)

        return True

    @staticmethod
    def _command_loop(session: BridgeSession) -> None:
        """读取用户命令直到退出"""
        while True:
            try:
                command = input().strip().lower()
            except (KeyboardInterrupt, EOFError):
                print("\n👋 退出监听")
                return

            if command == "q":
                print("👋 退出监听")
                return
            elif command == "t":
                session.inject_test_frame()
            elif command == "s":
                session.send_canned_command()
            elif command == "i":
                for key, value in session.get_statistics().items():
                    print(f"  {key}: {value}")
            elif command in ("h", "?"):
                print(MONITOR_HELP)
            elif command:
                print(f"❓ 未知命令: {command}")
                print(MONITOR_HELP)


def parse_message_type(value: str) -> int:
    """解析命令行中的消息类型，支持名称、十进制和0x前缀十六进制"""
    name = value.strip().upper()
    if name in MessageType.__members__:
        return int(MessageType[name])

    msg_type = int(name, 16) if name.startswith("0X") else int(name, 10)
    if not 0 <= msg_type <= 0xFF:
        raise ValueError(f"消息类型超出单字节范围: {value}")
    return msg_type

