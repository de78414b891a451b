"""证书模板编辑器 - 应用入口."""

from __future__ import annotations

import sys


def main() -> int:
    """应用主入口函数.

    Returns:
        退出码，0 表示正常退出
    """
    from PyQt6.QtWidgets import QApplication

    from certforge.app import Application
    from certforge.utils.constants import APP_AUTHOR, APP_NAME, APP_VERSION
    from certforge.utils.exceptions import AppException
    from certforge.utils.logger import setup_logger

    logger = setup_logger(__name__)
    logger.info(f"启动 {APP_NAME}")

    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName(APP_NAME)
    qt_app.setApplicationVersion(APP_VERSION)
    qt_app.setOrganizationName(APP_AUTHOR)

    app = Application()
    try:
        app.initialize()
        app.show_main_window()

        exit_code = qt_app.exec()

        logger.info(f"应用正常退出，退出码: {exit_code}")
        return exit_code

    except AppException as e:
        logger.exception(f"应用运行时发生错误: {e}")
        return 1
    finally:
        app.cleanup()


if __name__ == "__main__":
    sys.exit(main())
