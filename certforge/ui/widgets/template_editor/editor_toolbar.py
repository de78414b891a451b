"""编辑器工具栏组件.

提供模板编辑器的工具栏：文档操作、文字样式和图片尺寸控件。

Features:
    - 添加文字、上传背景、上传图片（多选）
    - 保存 / 加载 / 重置、主题切换
    - 文字控件：字体、字号、颜色、粗体、斜体、对齐
    - 图片控件：尺寸滑块
    - 上下文控件仅在选中对应元素时启用
    - 紧凑布局（窄屏时控件分两行排列）
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QBoxLayout,
    QButtonGroup,
    QColorDialog,
    QComboBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QWidget,
)

from certforge.core.editor_controller import IMAGE_SIZE_MAX, IMAGE_SIZE_MIN, ToolbarState
from certforge.models.elements import (
    DEFAULT_IMAGE_SIZE,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TEXT_FONT_FAMILY,
    DEFAULT_TEXT_FONT_SIZE,
    FONT_FAMILIES,
    FONT_SIZES,
    TextAlign,
)
from certforge.utils.constants import SUPPORTED_IMAGE_FORMATS
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)


def image_file_filter() -> str:
    """文件对话框的图片过滤器."""
    patterns = " ".join(f"*{ext}" for ext in sorted(SUPPORTED_IMAGE_FORMATS))
    return f"Images ({patterns});;All files (*)"


# ===================
# 辅助控件
# ===================


class ColorButton(QPushButton):
    """颜色选择按钮."""

    color_changed = pyqtSignal(str)  # #rrggbb

    def __init__(self, color: str = DEFAULT_TEXT_COLOR, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._color = color
        self.setFixedSize(72, 26)
        self._update_style()
        self.clicked.connect(self._pick_color)

    @property
    def color(self) -> str:
        """获取当前颜色."""
        return self._color

    def set_color(self, color: str) -> None:
        """设置颜色（不发出信号）."""
        self._color = color
        self._update_style()

    def _update_style(self) -> None:
        qcolor = QColor(self._color)
        brightness = (qcolor.red() * 299 + qcolor.green() * 587 + qcolor.blue() * 114) / 1000
        text_color = "#000" if brightness > 128 else "#fff"
        self.setStyleSheet(
            f"QPushButton {{ background-color: {self._color}; "
            f"color: {text_color}; border: 1px solid #ccc; }}"
        )
        self.setText(self._color)

    def _pick_color(self) -> None:
        """打开颜色选择器."""
        color = QColorDialog.getColor(QColor(self._color), self, "Text color")
        if color.isValid():
            self._color = color.name()
            self._update_style()
            self.color_changed.emit(self._color)


class LabeledSlider(QWidget):
    """带标签和数值显示的滑块."""

    value_changed = pyqtSignal(int)

    def __init__(
        self,
        label: str,
        min_val: int,
        max_val: int,
        value: int,
        suffix: str = "px",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._suffix = suffix

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        layout.addWidget(QLabel(label))

        self._slider = QSlider(Qt.Orientation.Horizontal)
        self._slider.setRange(min_val, max_val)
        self._slider.setValue(value)
        self._slider.setMinimumWidth(120)
        self._slider.valueChanged.connect(self._on_value_changed)
        layout.addWidget(self._slider, 1)

        self._value_label = QLabel(f"{value}{suffix}")
        self._value_label.setFixedWidth(48)
        self._value_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        layout.addWidget(self._value_label)

    @property
    def slider(self) -> QSlider:
        return self._slider

    @property
    def value(self) -> int:
        """获取当前值."""
        return self._slider.value()

    def set_value(self, value: int) -> None:
        """设置值（不发出信号）."""
        self._slider.blockSignals(True)
        self._slider.setValue(value)
        self._value_label.setText(f"{value}{self._suffix}")
        self._slider.blockSignals(False)

    def _on_value_changed(self, value: int) -> None:
        self._value_label.setText(f"{value}{self._suffix}")
        self.value_changed.emit(value)


# ===================
# 编辑器工具栏
# ===================


class EditorToolbar(QWidget):
    """编辑器工具栏.

    Signals:
        add_text_requested: 请求添加文字
        background_selected: 选择了背景图 (file_path)
        images_selected: 选择了图片 (file_paths)
        save_requested: 请求保存
        load_requested: 请求加载
        reset_requested: 请求重置
        theme_toggle_requested: 请求切换主题
        font_family_changed: 字体变化 (family)
        font_size_changed: 字号变化 (size)
        color_changed: 颜色变化 (#rrggbb)
        bold_toggled: 切换粗体
        italic_toggled: 切换斜体
        align_changed: 对齐方式变化 (left/center/right)
        image_size_changed: 图片尺寸变化 (size)
        delete_requested: 请求删除选中元素

    Example:
        >>> toolbar = EditorToolbar()
        >>> toolbar.add_text_requested.connect(controller.add_text)
        >>> toolbar.apply_state(controller.toolbar_state())
    """

    add_text_requested = pyqtSignal()
    background_selected = pyqtSignal(str)
    images_selected = pyqtSignal(list)
    save_requested = pyqtSignal()
    load_requested = pyqtSignal()
    reset_requested = pyqtSignal()
    theme_toggle_requested = pyqtSignal()
    font_family_changed = pyqtSignal(str)
    font_size_changed = pyqtSignal(int)
    color_changed = pyqtSignal(str)
    bold_toggled = pyqtSignal()
    italic_toggled = pyqtSignal()
    align_changed = pyqtSignal(str)
    image_size_changed = pyqtSignal(int)
    delete_requested = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        """初始化工具栏.

        Args:
            parent: 父组件
        """
        super().__init__(parent)
        self.setObjectName("editorToolbar")
        self._compact = False
        self._setup_ui()
        self.apply_state(ToolbarState(False, False, False))

    def _setup_ui(self) -> None:
        """设置UI."""
        self._layout = QBoxLayout(QBoxLayout.Direction.LeftToRight, self)
        self._layout.setContentsMargins(8, 6, 8, 6)
        self._layout.setSpacing(12)

        self._document_group = self._create_document_group()
        self._text_group = self._create_text_group()
        self._image_group = self._create_image_group()

        self._layout.addWidget(self._document_group)
        self._layout.addWidget(self._text_group)
        self._layout.addWidget(self._image_group)
        self._layout.addStretch()

    def _create_document_group(self) -> QWidget:
        """文档操作按钮组."""
        group = QWidget(self)
        layout = QHBoxLayout(group)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.add_text_button = QPushButton("Add Text")
        self.add_text_button.clicked.connect(self.add_text_requested)
        layout.addWidget(self.add_text_button)

        self.background_button = QPushButton("Background")
        self.background_button.setToolTip("Upload background image")
        self.background_button.clicked.connect(self._choose_background)
        layout.addWidget(self.background_button)

        self.images_button = QPushButton("Images")
        self.images_button.setToolTip("Upload one or more images")
        self.images_button.clicked.connect(self._choose_images)
        layout.addWidget(self.images_button)

        self.save_button = QPushButton("Save")
        self.save_button.setObjectName("primaryButton")
        self.save_button.clicked.connect(self.save_requested)
        layout.addWidget(self.save_button)

        self.load_button = QPushButton("Load")
        self.load_button.clicked.connect(self.load_requested)
        layout.addWidget(self.load_button)

        self.reset_button = QPushButton("Reset")
        self.reset_button.setObjectName("dangerButton")
        self.reset_button.clicked.connect(self.reset_requested)
        layout.addWidget(self.reset_button)

        self.theme_button = QPushButton("Theme")
        self.theme_button.setToolTip("Toggle light/dark theme")
        self.theme_button.clicked.connect(self.theme_toggle_requested)
        layout.addWidget(self.theme_button)

        return group

    def _create_text_group(self) -> QWidget:
        """文字样式控件组."""
        group = QWidget(self)
        layout = QHBoxLayout(group)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.font_family_combo = QComboBox()
        self.font_family_combo.addItems(FONT_FAMILIES)
        self.font_family_combo.setCurrentText(DEFAULT_TEXT_FONT_FAMILY)
        self.font_family_combo.currentTextChanged.connect(self.font_family_changed.emit)
        layout.addWidget(self.font_family_combo)

        self.font_size_combo = QComboBox()
        for size in FONT_SIZES:
            self.font_size_combo.addItem(f"{size}px", size)
        self.font_size_combo.setCurrentIndex(FONT_SIZES.index(DEFAULT_TEXT_FONT_SIZE))
        self.font_size_combo.currentIndexChanged.connect(self._on_font_size_index)
        layout.addWidget(self.font_size_combo)

        self.color_button = ColorButton()
        self.color_button.color_changed.connect(self.color_changed.emit)
        layout.addWidget(self.color_button)

        self.bold_button = QPushButton("B")
        self.bold_button.setCheckable(True)
        self.bold_button.setToolTip("Bold")
        self.bold_button.clicked.connect(lambda _checked: self.bold_toggled.emit())
        layout.addWidget(self.bold_button)

        self.italic_button = QPushButton("I")
        self.italic_button.setCheckable(True)
        self.italic_button.setToolTip("Italic")
        self.italic_button.clicked.connect(lambda _checked: self.italic_toggled.emit())
        layout.addWidget(self.italic_button)

        self._align_group = QButtonGroup(self)
        self._align_group.setExclusive(True)
        self.align_buttons: dict[TextAlign, QPushButton] = {}
        for align, label in (
            (TextAlign.LEFT, "Left"),
            (TextAlign.CENTER, "Center"),
            (TextAlign.RIGHT, "Right"),
        ):
            button = QPushButton(label)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, value=align: self.align_changed.emit(value.value))
            self._align_group.addButton(button)
            self.align_buttons[align] = button
            layout.addWidget(button)

        self.delete_text_button = QPushButton("Delete")
        self.delete_text_button.clicked.connect(self.delete_requested)
        layout.addWidget(self.delete_text_button)

        return group

    def _create_image_group(self) -> QWidget:
        """图片尺寸控件组."""
        group = QWidget(self)
        layout = QHBoxLayout(group)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.image_size_slider = LabeledSlider("Size", IMAGE_SIZE_MIN, IMAGE_SIZE_MAX, DEFAULT_IMAGE_SIZE)
        self.image_size_slider.value_changed.connect(self.image_size_changed.emit)
        layout.addWidget(self.image_size_slider)

        self.delete_image_button = QPushButton("Delete")
        self.delete_image_button.clicked.connect(self.delete_requested)
        layout.addWidget(self.delete_image_button)

        return group

    # ========================
    # 状态同步
    # ========================

    @property
    def text_controls_enabled(self) -> bool:
        return self._text_group.isEnabled()

    @property
    def image_controls_enabled(self) -> bool:
        return self._image_group.isEnabled()

    @property
    def is_compact(self) -> bool:
        return self._compact

    def apply_state(self, state: ToolbarState) -> None:
        """根据控制器状态刷新控件（不发出信号）.

        Args:
            state: 工具栏状态
        """
        self._text_group.setEnabled(state.text_controls_enabled)
        self._image_group.setEnabled(state.image_controls_enabled)
        self.save_button.setEnabled(state.can_save)
        self.save_button.setToolTip("" if state.can_save else "Upload a background image first")

        text = state.selected_text
        if text is not None:
            self.font_family_combo.blockSignals(True)
            self.font_family_combo.setCurrentText(text.font_family)
            self.font_family_combo.blockSignals(False)

            self.font_size_combo.blockSignals(True)
            index = self.font_size_combo.findData(text.font_size)
            if index < 0:
                self.font_size_combo.addItem(f"{text.font_size}px", text.font_size)
                index = self.font_size_combo.count() - 1
            self.font_size_combo.setCurrentIndex(index)
            self.font_size_combo.blockSignals(False)

            self.color_button.set_color(text.color)
            self.bold_button.setChecked(text.is_bold)
            self.italic_button.setChecked(text.is_italic)
            self.align_buttons[text.text_align].setChecked(True)

        image = state.selected_image
        if image is not None:
            self.image_size_slider.set_value(int(image.size))

    def set_compact(self, compact: bool) -> None:
        """切换紧凑布局（控件组纵向排列）."""
        self._compact = compact
        direction = QBoxLayout.Direction.TopToBottom if compact else QBoxLayout.Direction.LeftToRight
        self._layout.setDirection(direction)

    # ========================
    # 文件选择
    # ========================

    def _on_font_size_index(self, index: int) -> None:
        size = self.font_size_combo.itemData(index)
        if size is not None:
            self.font_size_changed.emit(int(size))

    def _choose_background(self) -> None:
        """打开背景图选择对话框."""
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select background image",
            "",
            image_file_filter(),
        )
        if file_path:
            self.background_selected.emit(file_path)

    def _choose_images(self) -> None:
        """打开图片多选对话框."""
        file_paths, _ = QFileDialog.getOpenFileNames(
            self,
            "Select images",
            "",
            image_file_filter(),
        )
        if file_paths:
            logger.debug(f"选择了 {len(file_paths)} 张图片")
            self.images_selected.emit(file_paths)
