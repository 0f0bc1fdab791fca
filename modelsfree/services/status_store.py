"""状态表模块

保存每个探测目标最近一次的探测结果（不保留历史），并记录状态变化
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Any

from ..models.ping import ProbeOutcome, ProbeStatus, StatusSnapshot, Target


class StatusStore:
    """状态表

    以 ``provider:model`` 为键，每个键只保留最新的 StatusSnapshot
    """

    def __init__(self):
        self.snapshots: Dict[str, StatusSnapshot] = {}
        self.last_updated: Optional[datetime] = None
        self.logger = logging.getLogger(__name__)

    def update(self, target: Target, outcome: ProbeOutcome) -> StatusSnapshot:
        """写入目标的最新探测结果

        Args:
            target: 探测目标
            outcome: 探测结果（不应为 cancelled）

        Returns:
            新的状态快照
        """
        snapshot = StatusSnapshot(target=target, outcome=outcome)
        previous = self.snapshots.get(target.key)
        self.snapshots[target.key] = snapshot
        self.last_updated = snapshot.last_checked

        if previous is None:
            self.logger.info(f"{target.key} 初始状态: {self._describe(outcome)}")
        elif previous.status is not outcome.status:
            self.logger.warning(
                f"{target.key} 状态变化: {self._describe(previous.outcome)} -> "
                f"{self._describe(outcome)}"
            )
        else:
            self.logger.debug(f"{target.key} 状态: {self._describe(outcome)}")

        return snapshot

    @staticmethod
    def _describe(outcome: ProbeOutcome) -> str:
        if outcome.status is ProbeStatus.SUCCESS:
            return f"{outcome.status.value} ({outcome.latency_ms}ms)"
        return f"{outcome.status.value} ({outcome.message})"

    def get(self, key: str) -> Optional[StatusSnapshot]:
        return self.snapshots.get(key)

    def get_all(self) -> Dict[str, StatusSnapshot]:
        return self.snapshots.copy()

    def clear(self):
        """清空状态表"""
        self.snapshots.clear()
        self.last_updated = None
        self.logger.debug("已清空状态表")

    def get_stats(self) -> Dict[str, Any]:
        """按探测状态统计目标数量"""
        counts = {status.value: 0 for status in ProbeStatus if status is not ProbeStatus.CANCELLED}
        latencies = []
        for snapshot in self.snapshots.values():
            counts[snapshot.status.value] = counts.get(snapshot.status.value, 0) + 1
            if snapshot.outcome.latency_ms is not None:
                latencies.append(snapshot.outcome.latency_ms)

        return {
            'total_targets': len(self.snapshots),
            'status_counts': counts,
            'avg_latency_ms': round(sum(latencies) / len(latencies)) if latencies else None,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }

    def __len__(self) -> int:
        return len(self.snapshots)

    def __contains__(self, key: str) -> bool:
        return key in self.snapshots
