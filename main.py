#!/usr/bin/env python3
"""
LoRa桥接串口协议工具 - 主程序入口
================================

交互式菜单，适合直接双击运行或打包为可执行文件。

使用方法：
    python main.py              # 交互式菜单
    python main.py --help       # 显示帮助信息
"""

import sys
import argparse
from pathlib import Path

# 添加src路径到Python路径
sys.path.insert(0, str(Path(__file__).parent / "src"))

from lora_bridge.cli.bridge_cli import BridgeCLI
from lora_bridge.config.constants import TEST_FRAME_HEX
from lora_bridge.utils.logger import get_logger

logger = get_logger(__name__)

# 版本信息
VERSION = "1.0.0"
PROGRAM_NAME = "LoRa桥接串口协议工具"


class LoraBridgeApp:
    """LoRa桥接串口协议工具主应用类"""

    def __init__(self):
        """初始化应用"""
        self.running = True

    def show_banner(self):
        """显示程序横幅"""
        print("=" * 50)
        print(f"{PROGRAM_NAME} v{VERSION}")
        print("=" * 50)
        print("USB串口连接LoRa桥接设备，实时解析协议消息")
        print("=" * 50)
        print()

    def show_menu(self):
        """显示主菜单"""
        print("请选择操作：")
        print("1. 📡 监听串口")
        print("2. 🧪 解码内置测试帧")
        print("3. 查看帮助")
        print("4. 退出程序")
        print()

    def show_help(self):
        """显示帮助信息"""
        print("\n" + "=" * 50)
        print("帮助信息")
        print("=" * 50)
        print()
        print("📋 帧格式：EA | 类型 | 长度 | 负载 | 校验 | 55")
        print("   - 类型 01 为管理消息，02 为数据消息")
        print("   - 校验 = 类型 ^ 长度 ^ 所有负载字节")
        print()
        print("📡 监听模式命令：")
        print("   t - 注入测试帧")
        print("   s - 发送固定命令 (管理消息 on)")
        print("   i - 查看统计信息")
        print("   q - 退出监听")
        print()
        print("=" * 50)
        input("按回车键返回主菜单...")
        print()

    def get_user_choice(self) -> str:
        """获取用户选择"""
        while True:
            try:
                choice = input("请输入选择 (1-4): ").strip()
                if choice in ["1", "2", "3", "4"]:
                    return choice
                print("❌ 无效选择，请输入 1-4 之间的数字")
            except KeyboardInterrupt:
                print("\n\n👋 用户取消操作，程序退出")
                return "4"
            except EOFError:
                return "4"

    def handle_monitor(self):
        """处理监听操作"""
        try:
            print("\n" + "=" * 30)
            print("📡 监听串口")
            print("=" * 30)
            BridgeCLI.monitor()
        except Exception as e:
            logger.error(f"监听操作异常: {e}")
            print(f"\n💥 监听操作异常: {e}")
        finally:
            print()

    def handle_decode_test_frame(self):
        """解码内置测试帧"""
        print(f"\n测试帧: {TEST_FRAME_HEX}")
        for line in BridgeCLI.decode(TEST_FRAME_HEX):
            print(f"  {line}")
        print()

    def run_interactive(self):
        """运行交互式界面"""
        self.show_banner()

        while self.running:
            self.show_menu()
            choice = self.get_user_choice()

            if choice == "1":
                self.handle_monitor()
            elif choice == "2":
                self.handle_decode_test_frame()
            elif choice == "3":
                self.show_help()
            elif choice == "4":
                print("\n👋 感谢使用，程序退出！")
                self.running = False

        print()


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description=f"{PROGRAM_NAME} v{VERSION}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例：
  python main.py              # 启动交互式界面

命令行模式请使用 python -m lora_bridge --help
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"{PROGRAM_NAME} v{VERSION}"
    )

    return parser


def main():
    """主函数"""
    try:
        parser = create_parser()
        parser.parse_args()

        app = LoraBridgeApp()
        app.run_interactive()

    except KeyboardInterrupt:
        print("\n\n👋 用户中断程序，退出")
        sys.exit(1)


if __name__ == "__main__":
    main()
