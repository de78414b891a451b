#!/usr/bin/env python3
"""模板编辑器预览脚本.

使用内存存储和生成的示例背景启动编辑器，不读写本地数据库。

运行方式:
    python scripts/preview_template_editor.py
"""

import io
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
from PIL import Image, ImageDraw
from PyQt6.QtWidgets import QApplication

from certforge.core.config_manager import ConfigManager
from certforge.core.editor_controller import EditorController
from certforge.models.app_settings import EnvironmentConfig, Settings
from certforge.services.template_storage import MemoryStore, TemplateStorage
from certforge.ui.editor_window import EditorWindow
from certforge.ui.theme_manager import ThemeManager
from certforge.utils.image_utils import bytes_to_data_uri


def sample_background(width: int, height: int) -> str:
    """生成带边框的示例证书背景."""
    image = Image.new("RGB", (width, height), (253, 250, 240))
    draw = ImageDraw.Draw(image)
    draw.rectangle((20, 20, width - 21, height - 21), outline=(180, 140, 60), width=8)
    draw.rectangle((40, 40, width - 41, height - 41), outline=(200, 170, 100), width=2)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return bytes_to_data_uri(buffer.getvalue(), "image/png")


def main() -> int:
    load_dotenv()
    app = QApplication(sys.argv)

    settings = Settings()
    store = MemoryStore()
    config = ConfigManager(settings=settings, store=store)

    controller = EditorController(TemplateStorage(store))
    controller.set_background(sample_background(*settings.canvas_size))
    controller.set_name("Certificate of Completion")
    text_id = controller.add_text()
    controller.update_text(text_id, content="Certificate of Completion", fontSize=40, fontWeight="bold")

    theme_manager = ThemeManager(config)
    env = EnvironmentConfig(viewport_width=1400)
    theme_manager.apply_initial_theme(env, app)

    window = EditorWindow(controller, theme_manager, env=env, canvas_size=settings.canvas_size)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
