"""保存与加载集成测试.

通过应用初始化流程创建控制器，使用 SQLite 存储完成完整的编辑、保存、加载流程。
"""

import pytest

from certforge.app import Application
from certforge.core.config_manager import ConfigManager
from certforge.core.geometry import CanvasRect
from certforge.models.app_settings import ThemeMode
from certforge.models.elements import FontWeight, Position, TextAlign


@pytest.fixture
def application(config):
    app = Application(config)
    app.initialize()
    return app


class TestApplicationInitialize:
    """应用初始化测试."""

    def test_creates_controller(self, application, settings):
        """初始化后创建控制器和数据目录."""
        assert application.is_initialized
        assert application.controller is not None
        assert settings.db_path.parent.is_dir()

    def test_initialize_twice(self, application):
        """重复初始化不替换控制器."""
        controller = application.controller
        application.initialize()
        assert application.controller is controller


class TestSaveLoadRoundTrip:
    """完整编辑流程测试."""

    @pytest.mark.asyncio
    async def test_edit_save_and_reload(self, application, settings, sample_background_image, image_factory):
        """编辑后保存，新的应用实例能加载相同的模板."""
        controller = application.controller
        assert await controller.upload_background(sample_background_image)
        await controller.upload_images([image_factory("logo.png"), image_factory("seal.png")])

        controller.set_name("Certificate of Completion")
        text_id = controller.add_text()
        controller.set_selected_content("Jane Doe")
        controller.set_font_size(40)
        controller.toggle_bold()
        controller.set_text_align(TextAlign.LEFT)

        controller.pointer_down("text", text_id)
        controller.pointer_move(320, 240, CanvasRect(0, 0, *settings.canvas_size))
        controller.pointer_up()

        assert controller.save() is True
        application.cleanup()

        reopened = Application(ConfigManager(settings=settings))
        reopened.initialize()
        try:
            restored = reopened.controller
            assert restored.load() is True

            document = restored.document
            assert document.name == "Certificate of Completion"
            assert document.background_image == controller.document.background_image
            assert len(document.images) == 2

            text = document.get_text(text_id)
            assert text.content == "Jane Doe"
            assert text.font_size == 40
            assert text.font_weight == FontWeight.BOLD
            assert text.text_align == TextAlign.LEFT
            assert text.position == Position(x=320, y=240)
            assert restored.selection is None
        finally:
            reopened.cleanup()

    def test_save_refused_leaves_storage_empty(self, application):
        """未设置背景时不写入存储."""
        application.controller.add_text()

        assert application.controller.save() is False
        assert application.controller.storage.exists() is False

    def test_theme_preference_shared_store(self, application, config):
        """主题偏好与模板共用同一存储."""
        config.save_theme_preference(ThemeMode.DARK)
        application.controller.set_background("data:image/png;base64,AAAA")
        application.controller.save()

        assert sorted(config.store.keys()) == ["certificateTemplate", "theme"]
        assert config.load_theme_preference() == ThemeMode.DARK
