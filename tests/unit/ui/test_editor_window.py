"""编辑器主窗口单元测试."""

import pytest
from PyQt6.QtWidgets import QMessageBox

from certforge.core.config_manager import ConfigManager
from certforge.core.editor_controller import EditorController
from certforge.models.app_settings import EnvironmentConfig, Settings
from certforge.models.elements import FontWeight
from certforge.ui.editor_window import EditorWindow
from certforge.ui.theme_manager import ThemeManager
from certforge.utils.exceptions import StorageError


class FailingStorage:
    """读写总是失败的存储."""

    def save(self, document):
        raise StorageError("disk full")

    def load(self):
        raise StorageError("disk gone")


@pytest.fixture
def theme_manager(qapp, memory_store) -> ThemeManager:
    return ThemeManager(ConfigManager(settings=Settings(_env_file=None), store=memory_store))


@pytest.fixture
def message_boxes(monkeypatch):
    """记录弹出的消息框."""
    shown = []
    for kind in ("warning", "critical", "information"):
        monkeypatch.setattr(
            QMessageBox,
            kind,
            staticmethod(lambda parent, title, text, *args, _kind=kind: shown.append((_kind, text))),
        )
    return shown


@pytest.fixture
def window(qtbot, controller, theme_manager) -> EditorWindow:
    widget = EditorWindow(controller, theme_manager, env=EnvironmentConfig(viewport_width=1400))
    qtbot.addWidget(widget)
    return widget


class TestLayout:
    """布局测试."""

    def test_standard_layout(self, window):
        """宽屏使用标准布局."""
        assert not window.toolbar.is_compact

    def test_compact_layout(self, qtbot, controller, theme_manager):
        """窄屏使用紧凑布局."""
        window = EditorWindow(controller, theme_manager, env=EnvironmentConfig(viewport_width=800))
        qtbot.addWidget(window)
        assert window.toolbar.is_compact

    def test_initial_state(self, window):
        """初始时上下文控件禁用，文字面板隐藏."""
        assert not window.toolbar.text_controls_enabled
        assert not window.toolbar.save_button.isEnabled()
        assert window.text_panel.isHidden()
        assert window.name_edit.text() == "Untitled Template"


class TestToolbarWiring:
    """工具栏与控制器联动测试."""

    def test_add_text_enables_text_controls(self, window, controller):
        """添加文字后启用文字控件并显示面板."""
        window.toolbar.add_text_button.click()

        assert len(controller.document.text_elements) == 1
        assert window.toolbar.text_controls_enabled
        assert not window.toolbar.image_controls_enabled
        assert not window.text_panel.isHidden()

    def test_bold_button_updates_text(self, window, controller):
        """粗体按钮修改选中文字."""
        window.toolbar.add_text_button.click()
        window.toolbar.bold_button.click()

        assert controller.selected_text.font_weight == FontWeight.BOLD
        assert window.toolbar.bold_button.isChecked()

    def test_text_panel_edits_content(self, window, controller):
        """文字面板修改内容."""
        window.toolbar.add_text_button.click()
        window.text_panel.editor.setPlainText("Jane Doe")

        assert controller.selected_text.content == "Jane Doe"

    def test_image_slider_resizes_image(self, window, controller):
        """尺寸滑块修改选中图片."""
        controller.add_image("img")
        window.toolbar.image_size_slider.slider.setValue(320)

        assert controller.selected_image.size == 320

    def test_delete_button(self, window, controller):
        """删除按钮删除选中元素."""
        controller.add_image("img")
        window.toolbar.delete_image_button.click()

        assert controller.document.images == []
        assert not window.toolbar.image_controls_enabled

    def test_name_edit(self, window, controller, qtbot):
        """编辑模板名称."""
        window.name_edit.clear()
        qtbot.keyClicks(window.name_edit, "Award")
        assert controller.document.name == "Award"

    def test_save_enabled_after_background(self, window, controller, background_uri):
        """设置背景后启用保存."""
        controller.set_background(background_uri)
        assert window.toolbar.save_button.isEnabled()


class TestDocumentActions:
    """保存、加载、重置测试."""

    def test_save_without_background_warns(self, window, message_boxes):
        """未设置背景时提示."""
        assert window.save_template() is False
        assert message_boxes == [("warning", "Please upload a background image first.")]

    def test_save_success(self, window, controller, memory_store, background_uri, message_boxes):
        """保存成功."""
        controller.set_background(background_uri)

        assert window.save_template() is True
        assert memory_store.load("certificateTemplate")["backgroundImage"] == background_uri
        assert message_boxes == []

    def test_save_failure_reports(self, qtbot, theme_manager, background_uri, message_boxes):
        """存储失败时显示错误."""
        controller = EditorController(FailingStorage())
        controller.set_background(background_uri)
        window = EditorWindow(controller, theme_manager)
        qtbot.addWidget(window)

        assert window.save_template() is False
        assert message_boxes == [("critical", "Failed to access the template storage.")]

    def test_load_restores(self, window, controller, background_uri):
        """加载恢复已保存的模板."""
        controller.set_background(background_uri)
        controller.set_name("Award")
        controller.save()
        controller.reset(lambda: True)

        assert window.load_template() is True
        assert controller.document.name == "Award"
        assert window.name_edit.text() == "Award"

    def test_load_nothing_saved(self, window):
        assert window.load_template() is False

    def test_reset_cancelled(self, window, controller, background_uri, monkeypatch):
        """取消重置时保留内容."""
        controller.set_background(background_uri)
        monkeypatch.setattr(window, "confirm_reset", lambda: False)

        window.toolbar.reset_button.click()

        assert controller.document.background_image == background_uri

    def test_reset_confirmed(self, window, controller, background_uri, monkeypatch):
        """确认后清空模板."""
        controller.set_background(background_uri)
        controller.add_text()
        monkeypatch.setattr(window, "confirm_reset", lambda: True)

        assert window.reset_template() is True
        assert controller.document.is_empty
        assert window.text_panel.isHidden()

    def test_confirm_reset_uses_question(self, window, monkeypatch):
        """确认对话框."""
        monkeypatch.setattr(
            QMessageBox,
            "question",
            staticmethod(lambda *args, **kwargs: QMessageBox.StandardButton.Yes),
        )
        assert window.confirm_reset() is True


class TestUploads:
    """图片上传测试."""

    def test_upload_images(self, window, controller, qtbot, image_factory, temp_dir):
        """上传多张图片，失败的文件被跳过."""
        paths = [str(image_factory("a.png")), str(image_factory("b.png")), str(temp_dir / "missing.png")]

        with qtbot.waitSignal(window.asset_loader.load_finished, timeout=5000) as blocker:
            window.upload_images(paths)

        assert blocker.args[1:] == [2, 1]
        assert len(controller.document.images) == 2

    def test_upload_background(self, window, controller, qtbot, sample_background_image):
        """上传背景图."""
        with qtbot.waitSignal(window.asset_loader.load_finished, timeout=5000):
            window.upload_background(str(sample_background_image))

        assert controller.document.background_image.startswith("data:image/png;base64,")
        assert window.toolbar.save_button.isEnabled()

    def test_delete_shortcut(self, window, controller):
        """Delete 快捷键删除选中元素."""
        controller.add_text()

        window._delete_shortcut.activated.emit()

        assert controller.document.text_elements == []
