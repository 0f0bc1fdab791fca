"""结果看板模块

订阅监控循环，为每个模型维护ping历史，供排序、结论和最佳模型选择使用
"""

import logging
from typing import Callable, Dict, List, Optional, Any

from .metrics import find_best_model, get_avg, get_uptime, get_verdict, sort_results
from ..catalogue import get_models, get_provider
from ..models.catalogue import ModelEntry
from ..models.ping import (
    ModelResult, ModelStatus, PingResult, ProbeOutcome, ProbeStatus, StatusSnapshot
)

DEFAULT_MAX_HISTORY = 100


def outcome_to_ping(outcome: ProbeOutcome) -> Optional[PingResult]:
    """把探测结果转换为ping记录，缺少密钥时不产生记录"""
    if outcome.status is ProbeStatus.SUCCESS:
        return PingResult(ms=outcome.latency_ms, code=str(outcome.http_status or 200))
    if outcome.status is ProbeStatus.HTTP_ERROR:
        return PingResult(ms=None, code=str(outcome.http_status))
    if outcome.status is ProbeStatus.TIMEOUT:
        return PingResult(ms=None, code='000')
    if outcome.status is ProbeStatus.NETWORK_ERROR:
        return PingResult(ms=None, code='ERR')
    return None


def outcome_to_model_status(outcome: ProbeOutcome) -> ModelStatus:
    if outcome.status is ProbeStatus.SUCCESS:
        return ModelStatus.UP
    if outcome.status is ProbeStatus.TIMEOUT:
        return ModelStatus.TIMEOUT
    if outcome.status is ProbeStatus.MISSING_CREDENTIAL:
        return ModelStatus.NOAUTH
    return ModelStatus.DOWN


class ResultBoard:
    """按目标键保存 ModelResult 的看板"""

    def __init__(self, models: Optional[List[ModelEntry]] = None,
                 max_history: int = DEFAULT_MAX_HISTORY):
        """
        Args:
            models: 初始模型列表，默认为整个目录
            max_history: 每个模型保留的ping记录数
        """
        self.max_history = max_history
        self.results: Dict[str, ModelResult] = {}
        self.logger = logging.getLogger(__name__)

        for model in (models if models is not None else get_models()):
            self._add_model(model)

    def _add_model(self, model: ModelEntry) -> ModelResult:
        result = ModelResult(
            idx=len(self.results) + 1,
            model_id=model.model_id,
            label=model.label,
            tier=model.tier,
            swe_score=model.swe_score,
            ctx=model.ctx,
            provider_key=model.provider_key
        )
        self.results[result.key] = result
        return result

    def attach(self, monitor_loop) -> Callable[[], None]:
        """订阅监控循环，返回取消订阅函数"""
        return monitor_loop.subscribe(self.record)

    def record(self, snapshot: StatusSnapshot) -> ModelResult:
        """记录一次探测结果"""
        result = self.results.get(snapshot.key)
        if result is None:
            # 按提供商探测时目标模型可能不在当前看板中
            provider = get_provider(snapshot.target.provider_key)
            result = self._add_model(ModelEntry(
                model_id=snapshot.target.model_id,
                label=snapshot.target.model_id,
                tier='—',
                swe_score='—',
                ctx='—',
                provider_key=provider.key if provider else snapshot.target.provider_key
            ))

        outcome = snapshot.outcome
        ping = outcome_to_ping(outcome)
        if ping is not None:
            result.pings.append(ping)
            if len(result.pings) > self.max_history:
                del result.pings[:-self.max_history]

        result.status = outcome_to_model_status(outcome)
        result.http_code = str(outcome.http_status) if outcome.http_status is not None else (
            ping.code if ping is not None else None)
        return result

    def get_result(self, key: str) -> Optional[ModelResult]:
        return self.results.get(key)

    def get_results(self, include_hidden: bool = False) -> List[ModelResult]:
        return [r for r in self.results.values() if include_hidden or not r.hidden]

    def probed_results(self) -> List[ModelResult]:
        """至少有一次探测结果的模型"""
        return [r for r in self.results.values() if r.status is not ModelStatus.PENDING]

    def set_visible(self, keys: List[str]):
        """只显示指定键的模型"""
        visible = set(keys)
        for key, result in self.results.items():
            result.hidden = key not in visible

    def sorted(self, column: str = 'avg', descending: bool = False) -> List[ModelResult]:
        return sort_results(self.get_results(), column, descending)

    def best(self) -> Optional[ModelResult]:
        return find_best_model(self.probed_results())

    def to_rows(self, results: Optional[List[ModelResult]] = None) -> List[Dict[str, Any]]:
        """转换为表格行"""
        rows = []
        for result in (results if results is not None else self.get_results()):
            last = result.pings[-1] if result.pings else None
            avg = get_avg(result)
            rows.append({
                'rank': result.idx,
                'tier': result.tier,
                'provider': result.provider_key,
                'model': result.model_id,
                'label': result.label,
                'ping': last.ms if last and last.is_success else None,
                'avg': None if avg == float('inf') else avg,
                'uptime': get_uptime(result),
                'condition': result.status.value,
                'verdict': get_verdict(result).value,
                'http_code': result.http_code,
            })
        return rows
