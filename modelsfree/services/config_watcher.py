"""配置文件监控器"""

import asyncio
import logging
import os
from typing import Callable, List, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config_manager import ConfigManager
from ..utils.exceptions import ConfigError

ChangeCallback = Callable[[dict, dict], None]


class ConfigFileHandler(FileSystemEventHandler):
    """配置文件变更事件处理器"""

    def __init__(self, config_path: str, callback: Callable[[], None]):
        self.config_path = config_path
        self.callback = callback
        self.logger = logging.getLogger(__name__)

    def _handle(self, path: str):
        if os.path.abspath(path) != self.config_path:
            return
        self.logger.info(f"检测到配置文件变更: {self.config_path}")
        try:
            self.callback()
        except Exception as e:
            self.logger.error(f"处理配置变更失败: {e}")

    def on_modified(self, event):
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event):
        # 编辑器保存时常用“写临时文件再改名”的方式
        if not event.is_directory:
            self._handle(event.dest_path)


class ConfigWatcher:
    """配置文件监控器，支持热更新

    watchdog 的事件在观察者线程中触发；指定 loop 时，重新加载和回调
    会被转到该事件循环中执行，回调可以安全地操作 asyncio 对象。
    """

    def __init__(self, config_manager: ConfigManager,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        初始化配置监控器

        Args:
            config_manager: 配置管理器实例
            loop: 执行回调的事件循环，为空时在观察者线程中直接执行
        """
        self.config_manager = config_manager
        self.loop = loop
        self.observer: Optional[Observer] = None
        self.change_callbacks: List[ChangeCallback] = []
        self.logger = logging.getLogger(__name__)
        self._running = False

    def add_change_callback(self, callback: ChangeCallback):
        """添加配置变更回调函数，参数为 (旧配置, 新配置)"""
        self.change_callbacks.append(callback)

    def remove_change_callback(self, callback: ChangeCallback):
        if callback in self.change_callbacks:
            self.change_callbacks.remove(callback)

    def _schedule_reload(self):
        if self.loop is not None and not self.loop.is_closed():
            self.loop.call_soon_threadsafe(self._on_config_changed)
        else:
            self._on_config_changed()

    def _on_config_changed(self):
        """重新加载配置并通知回调，加载失败时保留原配置"""
        # 同一次保存可能触发多个事件
        if not self.config_manager.is_config_changed():
            return

        old_config = self.config_manager.config.copy()
        try:
            new_config = self.config_manager.reload_config()
        except ConfigError as e:
            self.logger.error(f"配置重新加载失败，继续使用原配置: {e}")
            return

        self.logger.info("配置文件已重新加载")

        for callback in list(self.change_callbacks):
            try:
                callback(old_config, new_config)
            except Exception as e:
                self.logger.error(f"配置变更回调执行失败: {e}")

    def start_watching(self):
        """
        开始监控配置文件

        Raises:
            ConfigError: 启动失败
        """
        if self._running:
            self.logger.warning("配置监控器已经在运行")
            return

        if not self.config_manager.config_path:
            raise ConfigError("未指定配置文件，无法监控")

        config_path = os.path.abspath(self.config_manager.config_path)
        try:
            self.observer = Observer()
            handler = ConfigFileHandler(config_path, self._schedule_reload)
            self.observer.schedule(handler, os.path.dirname(config_path), recursive=False)
            self.observer.start()
            self._running = True
            self.logger.info(f"开始监控配置文件: {self.config_manager.config_path}")
        except OSError as e:
            self.logger.error(f"启动配置监控失败: {e}")
            self.observer = None
            raise ConfigError(f"启动配置监控失败: {e}", cause=e)

    def stop_watching(self):
        """停止监控配置文件"""
        if not self._running:
            return

        if self.observer:
            self.observer.stop()
            self.observer.join()
            self.observer = None

        self._running = False
        self.logger.info("配置文件监控已停止")

    def is_running(self) -> bool:
        return self._running

    async def watch_config_changes_async(self, check_interval: float = 5):
        """
        异步方式监控配置变更（轮询方式，用于 watchdog 不可用的文件系统）

        Args:
            check_interval: 检查间隔（秒）
        """
        self.logger.info(f"开始异步监控配置文件变更，检查间隔: {check_interval}秒")

        while True:
            try:
                self._on_config_changed()
                await asyncio.sleep(check_interval)
            except asyncio.CancelledError:
                self.logger.info("配置监控任务已取消")
                break

    def __enter__(self):
        self.start_watching()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop_watching()
