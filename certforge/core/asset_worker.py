"""图片加载工作器模块.

在 Qt 线程中运行异步图片读取，读取结果通过信号送回界面线程。

Features:
    - 每次加载请求使用独立的工作线程和事件循环
    - 多张图片并发读取，按读取完成顺序发出信号
    - 单个文件失败不影响其他文件
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable, Optional, Sequence

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from certforge.core.editor_controller import AssetResult
from certforge.services.asset_loader import AssetSource
from certforge.utils.error_handler import get_user_friendly_message
from certforge.utils.logger import setup_logger

logger = setup_logger(__name__)

# 加载目标
TARGET_BACKGROUND = "background"
TARGET_IMAGE = "image"

# 批量读取函数，通常为 EditorController.load_assets
BatchLoader = Callable[[Sequence[AssetSource]], AsyncIterator[AssetResult]]


class AssetLoadWorker(QObject):
    """图片加载工作器.

    在工作线程的事件循环中消费批量读取结果，逐个通过信号送回界面线程，
    文档修改由界面线程完成。

    Signals:
        asset_loaded: 图片读取完成 (target, data_uri)
        asset_failed: 图片读取失败 (source, error_message)
        finished: 本次请求全部处理完毕 (loaded_count, failed_count)
    """

    asset_loaded = pyqtSignal(str, str)  # target, data_uri
    asset_failed = pyqtSignal(str, str)  # source, error_message
    finished = pyqtSignal(int, int)  # loaded_count, failed_count

    def __init__(
        self,
        target: str,
        sources: Sequence[AssetSource],
        load_assets: BatchLoader,
        parent: Optional[QObject] = None,
    ) -> None:
        """初始化工作器.

        Args:
            target: 加载目标（background / image）
            sources: 图片来源
            load_assets: 批量读取函数
            parent: 父对象
        """
        super().__init__(parent)
        self._target = target
        self._sources = list(sources)
        self._load_assets = load_assets
        self._loaded = 0
        self._failed = 0

    @property
    def target(self) -> str:
        return self._target

    @pyqtSlot()
    def start_loading(self) -> None:
        """在当前线程中创建事件循环并执行加载."""
        logger.debug(f"开始加载 {len(self._sources)} 个图片 -> {self._target}")
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(self._run())
        finally:
            asyncio.set_event_loop(None)
            loop.close()
            self.finished.emit(self._loaded, self._failed)

    async def _run(self) -> None:
        async for result in self._load_assets(self._sources):
            if not result.ok:
                self._failed += 1
                self.asset_failed.emit(result.label, get_user_friendly_message(result.error))
                continue
            self._loaded += 1
            self.asset_loaded.emit(self._target, result.asset)


class AssetLoadController(QObject):
    """图片加载控制器.

    管理工作线程生命周期，把工作器信号转发给界面。

    Signals:
        asset_loaded: 图片读取完成 (target, data_uri)
        asset_failed: 图片读取失败 (source, error_message)
        load_finished: 一次请求处理完毕 (target, loaded_count, failed_count)

    Example:
        >>> loader = AssetLoadController(controller.load_assets, window)
        >>> loader.asset_loaded.connect(window.on_asset_loaded)
        >>> loader.load(TARGET_IMAGE, ["a.png", "b.png"])
    """

    asset_loaded = pyqtSignal(str, str)
    asset_failed = pyqtSignal(str, str)
    load_finished = pyqtSignal(str, int, int)

    def __init__(self, load_assets: BatchLoader, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._load_assets = load_assets
        self._jobs: list[tuple[QThread, AssetLoadWorker]] = []

    @property
    def is_running(self) -> bool:
        """是否有正在进行的加载."""
        return bool(self._jobs)

    def load(self, target: str, sources: Sequence[AssetSource]) -> None:
        """在工作线程中加载图片.

        Args:
            target: 加载目标（background / image）
            sources: 图片来源
        """
        if not sources:
            return

        thread = QThread(self)
        worker = AssetLoadWorker(target, sources, self._load_assets)
        worker.moveToThread(thread)

        thread.started.connect(worker.start_loading)
        worker.asset_loaded.connect(self.asset_loaded)
        worker.asset_failed.connect(self.asset_failed)
        worker.finished.connect(self._on_worker_finished)

        self._jobs.append((thread, worker))
        thread.start()
        logger.info(f"图片加载已启动: {target}, {len(sources)} 个文件")

    @pyqtSlot(int, int)
    def _on_worker_finished(self, loaded: int, failed: int) -> None:
        """工作器完成回调（界面线程）."""
        worker = self.sender()
        job = next((job for job in self._jobs if job[1] is worker), None)
        if job is None:
            return
        thread = job[0]
        thread.quit()
        thread.wait(1000)
        self._jobs.remove(job)
        worker.deleteLater()
        thread.deleteLater()
        self.load_finished.emit(worker.target, loaded, failed)

    def stop(self) -> None:
        """等待所有工作线程结束."""
        for thread, _worker in list(self._jobs):
            thread.quit()
            thread.wait(5000)
        self._jobs.clear()
