"""应用常量定义."""

from pathlib import Path

# ===================
# 应用信息
# ===================
APP_NAME = "Certificate Template Editor"
APP_VERSION = "1.0.0"
APP_AUTHOR = "certforge"

# ===================
# 路径常量
# ===================
# 应用数据目录
APP_DATA_DIR = Path.home() / ".certforge"

# 本地键值存储数据库文件路径
DATABASE_PATH = APP_DATA_DIR / "storage.db"

# 日志目录
LOG_DIR = APP_DATA_DIR / "logs"

# ===================
# 存储键
# ===================
TEMPLATE_STORAGE_KEY = "certificateTemplate"
THEME_STORAGE_KEY = "theme"

# ===================
# 画布设置
# ===================
DEFAULT_CANVAS_WIDTH = 1000
DEFAULT_CANVAS_HEIGHT = 707

# 文字元素拖拽时使用的名义尺寸（文字没有测量前的渲染框）
TEXT_NOMINAL_EXTENT = 50

# ===================
# 图片资源
# ===================
SUPPORTED_IMAGE_FORMATS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif"}

# 最大图片文件大小 (20MB)
MAX_IMAGE_FILE_SIZE = 20 * 1024 * 1024

# ===================
# UI 设置
# ===================
WINDOW_MIN_WIDTH = 1024
WINDOW_MIN_HEIGHT = 768

# 小于此宽度时使用紧凑布局
COMPACT_LAYOUT_BREAKPOINT = 992
