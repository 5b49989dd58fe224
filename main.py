import sys
import os
# 防止 sys.stdout / sys.stderr 为 None（常见于 PyInstaller --noconsole）
if sys.stdout is None:
    sys.stdout = open(os.devnull, "w")
if sys.stderr is None:
    sys.stderr = open(os.devnull, "w")
import logging
from pathlib import Path

import flet as ft

from records_app import RecordsApp

# === 配置（均可通过环境变量覆盖）===
RECORDS_PATH = os.environ.get("RECORDS_PATH") or str(Path(os.environ.get("HOME", ".")) / "records.json")
LOG_FILE = os.environ.get("RECORDS_LOG_FILE", "records_app.log")
LOG_LEVEL = os.environ.get("RECORDS_LOG_LEVEL", "INFO").upper()
WEB_PORT = 8550

# 配置日志
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOG_FILE, encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


def main(page: ft.Page):
    page.title = "记录清单"
    page.window_min_width = 320
    page.window_min_height = 600
    page.scroll = ft.ScrollMode.AUTO
    page.padding = 10
    page.bgcolor = ft.Colors.BLUE_GREY_50

    logger.info(f"应用启动，记录文件: {RECORDS_PATH}")
    page.add(RecordsApp(page, RECORDS_PATH))


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "web":
        # 启动为 Web 应用（可通过浏览器访问）
        logger.info(f"以 Web 模式启动，端口 {WEB_PORT}")
        ft.app(target=main, view=ft.AppView.WEB_BROWSER, port=WEB_PORT)
    else:
        # 默认启动为桌面应用
        ft.app(target=main)
