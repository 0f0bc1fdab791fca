"""监控循环模块

按固定间隔对目标列表发起并发探测，每一轮使用独立的取消范围，
结果写入状态表并逐条通知订阅者
"""

import asyncio
import inspect
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set

from .status_store import StatusStore
from ..models.ping import StatusSnapshot, Target
from ..probes import probe_client_factory
from ..utils.exceptions import MonitorError

DEFAULT_CHECK_INTERVAL = 30

TargetSource = Callable[[], List[Target]]
Subscriber = Callable[[StatusSnapshot], Any]


class MonitorState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class MonitorLoop:
    """监控循环

    start() 后立即探测一轮，之后每隔 interval 秒探测一轮。每轮开始时重新调用
    target_provider 获取目标列表，因此过滤条件的变化从下一轮开始生效。
    stop() 会打断正在进行的探测和等待，返回后不再写入状态表或通知订阅者。
    """

    def __init__(self, target_provider: TargetSource,
                 status_store: Optional[StatusStore] = None,
                 prober=None,
                 interval: float = DEFAULT_CHECK_INTERVAL,
                 probe_timeout: Optional[float] = None):
        """初始化监控循环

        Args:
            target_provider: 无参可调用对象，返回本轮的目标列表
            status_store: 状态表，为空时新建
            prober: 具有 ``async probe(target, timeout, cancel_event)`` 方法的对象，
                默认使用全局探测客户端工厂
            interval: 两轮探测之间的间隔（秒）
            probe_timeout: 单次探测超时时间（秒），为空时使用客户端默认值

        Raises:
            ValueError: 间隔值无效
        """
        if interval <= 0:
            raise ValueError("检查间隔必须是正数")

        self.target_provider = target_provider
        self.status_store = status_store if status_store is not None else StatusStore()
        self.prober = prober if prober is not None else probe_client_factory
        self.interval = interval
        self.probe_timeout = probe_timeout

        self.state = MonitorState.IDLE
        self.cycle_count = 0
        self.last_cycle_time: Optional[datetime] = None
        self.subscribers: List[Subscriber] = []

        self._driver_task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._active_scopes: Set[asyncio.Event] = set()
        # 同一时刻只允许一轮探测，run_once 与驱动循环共用
        self._cycle_lock: Optional[asyncio.Lock] = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_running(self) -> bool:
        return self.state is MonitorState.RUNNING

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """注册结果订阅者，每个目标探测完成时调用

        订阅者可以是普通函数或协程函数，抛出的异常只记录日志

        Returns:
            取消订阅的函数
        """
        self.subscribers.append(callback)

        def unsubscribe():
            if callback in self.subscribers:
                self.subscribers.remove(callback)

        return unsubscribe

    async def start(self):
        """启动监控循环"""
        if self.is_running:
            self.logger.warning("监控循环已经在运行")
            return

        self.state = MonitorState.RUNNING
        self._stop_event = asyncio.Event()
        self._driver_task = asyncio.create_task(self._run_cycles())
        self.logger.info(f"启动监控循环，检查间隔: {self.interval}秒")

    async def stop(self):
        """停止监控循环，可重复调用"""
        was_running = self.is_running
        self.state = MonitorState.IDLE

        for scope in list(self._active_scopes):
            scope.set()
        if self._stop_event is not None:
            self._stop_event.set()

        task = self._driver_task
        self._driver_task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        if was_running:
            self.logger.info("监控循环已停止")

    async def run_once(self) -> Dict[str, StatusSnapshot]:
        """立即执行一轮探测

        Returns:
            本轮写入的状态快照，键为目标键

        Raises:
            MonitorError: 监控循环正在运行
        """
        if self.is_running:
            raise MonitorError("监控循环运行中，不能同时执行单轮探测")

        targets = self._dedupe(self.target_provider())
        if not targets:
            self.logger.info("目标列表为空，无需探测")
            return {}
        return await self._run_cycle(targets)

    def update_interval(self, interval: float):
        """更新检查间隔，从下一次等待开始生效

        Raises:
            ValueError: 间隔值无效
        """
        if interval <= 0:
            raise ValueError("检查间隔必须是正数")

        old_interval = self.interval
        self.interval = interval
        self.logger.info(f"更新检查间隔: {old_interval}s -> {interval}s")

    def get_stats(self) -> Dict[str, Any]:
        """获取监控循环统计信息"""
        return {
            'state': self.state.value,
            'interval': self.interval,
            'probe_timeout': self.probe_timeout,
            'cycle_count': self.cycle_count,
            'last_cycle_time': self.last_cycle_time.isoformat() if self.last_cycle_time else None,
            'subscribers': len(self.subscribers),
            'status': self.status_store.get_stats(),
        }

    async def _run_cycles(self):
        """驱动循环：探测一轮，等待，再探测"""
        try:
            while self.is_running:
                try:
                    targets = self._dedupe(self.target_provider())
                except Exception as e:
                    self.logger.error(f"构建目标列表失败: {e}")
                    targets = None

                if targets is not None:
                    if not targets:
                        self.logger.info("目标列表为空，监控结束")
                        self.state = MonitorState.IDLE
                        break
                    await self._run_cycle(targets)

                if not self.is_running or await self._wait_interval():
                    break

        except asyncio.CancelledError:
            self.logger.info("监控循环被取消")

    async def _wait_interval(self) -> bool:
        """可被 stop() 打断的等待，返回是否收到停止请求"""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            return True
        except asyncio.TimeoutError:
            return False

    async def _run_cycle(self, targets: List[Target]) -> Dict[str, StatusSnapshot]:
        """以新的取消范围并发探测所有目标，等待全部结束"""
        if self._cycle_lock is None:
            self._cycle_lock = asyncio.Lock()
        async with self._cycle_lock:
            return await self._probe_all(targets)

    async def _probe_all(self, targets: List[Target]) -> Dict[str, StatusSnapshot]:
        scope = asyncio.Event()
        self._active_scopes.add(scope)
        self.cycle_count += 1
        self.last_cycle_time = datetime.now()
        self.logger.debug(f"第 {self.cycle_count} 轮探测开始，目标数: {len(targets)}")

        try:
            tasks = [asyncio.create_task(self._probe_target(target, scope)) for target in targets]
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            self._active_scopes.discard(scope)

        snapshots = {}
        for target, result in zip(targets, results):
            if isinstance(result, Exception):
                self.logger.error(f"探测 {target.key} 异常: {result}")
            elif isinstance(result, StatusSnapshot):
                snapshots[result.key] = result

        self.logger.debug(f"第 {self.cycle_count} 轮探测完成，写入 {len(snapshots)} 条结果")
        return snapshots

    async def _probe_target(self, target: Target,
                            scope: asyncio.Event) -> Optional[StatusSnapshot]:
        outcome = await self.prober.probe(target, timeout=self.probe_timeout,
                                          cancel_event=scope)

        # 取消范围已关闭，丢弃结果
        if outcome.is_cancelled or scope.is_set():
            return None

        snapshot = self.status_store.update(target, outcome)
        await self._notify(snapshot, scope)
        return snapshot

    async def _notify(self, snapshot: StatusSnapshot, scope: asyncio.Event):
        for callback in list(self.subscribers):
            if scope.is_set():
                return
            try:
                result = callback(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self.logger.error(f"订阅者回调执行失败: {e}")

    def _dedupe(self, targets: List[Target]) -> List[Target]:
        # 同一轮内每个键只允许一个探测
        unique: Dict[str, Target] = {}
        for target in targets:
            if target.key in unique:
                self.logger.debug(f"忽略重复目标: {target.key}")
                continue
            unique[target.key] = target
        return list(unique.values())
