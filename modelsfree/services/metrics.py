"""基于ping历史的统计指标"""

import math
from typing import Callable, Dict, List, Optional

from ..catalogue.filters import expand_tier_filter
from ..models.catalogue import TIER_ORDER, TIER_LETTER_MAP, parse_ctx, parse_swe_score
from ..models.ping import ModelResult, ModelStatus, Verdict, VERDICT_ORDER

SORT_COLUMNS = ['rank', 'tier', 'origin', 'model', 'ping', 'avg', 'swe', 'ctx',
                'condition', 'verdict', 'uptime']


def get_avg(result: ModelResult) -> float:
    """成功ping的平均延迟（毫秒，取整），没有成功记录时返回 inf"""
    latencies = [p.ms or 0 for p in result.pings if p.is_success]
    if not latencies:
        return math.inf
    return round(sum(latencies) / len(latencies))


def get_uptime(result: ModelResult) -> int:
    """成功ping占比（百分比，取整）"""
    if not result.pings:
        return 0
    successful = sum(1 for p in result.pings if p.is_success)
    return round(successful / len(result.pings) * 100)


def get_last_ping_ms(result: ModelResult) -> float:
    """最近一次ping的延迟，最近一次不成功时返回 inf"""
    if not result.pings:
        return math.inf
    last = result.pings[-1]
    if last.is_success and last.ms is not None:
        return last.ms
    return math.inf


def get_verdict(result: ModelResult) -> Verdict:
    """
    根据状态和平均延迟给出结论

    判断顺序：
        1. 最近一次返回429 -> Overloaded
        2. 当前超时或不可用，但之前成功过 -> Unstable
        3. 当前超时或不可用 -> Not Active
        4. 没有成功记录 -> Pending
        5. 按平均延迟: <400 Perfect, <1000 Normal, <3000 Slow, <5000 Very Slow, 其余 Unstable
    """
    avg = get_avg(result)
    was_up_before = any(p.is_success for p in result.pings)
    failing = result.status in (ModelStatus.TIMEOUT, ModelStatus.DOWN)

    if result.http_code == '429':
        return Verdict.OVERLOADED
    if failing and was_up_before:
        return Verdict.UNSTABLE
    if failing:
        return Verdict.NOT_ACTIVE
    if avg == math.inf:
        return Verdict.PENDING
    if avg < 400:
        return Verdict.PERFECT
    if avg < 1000:
        return Verdict.NORMAL
    if avg < 3000:
        return Verdict.SLOW
    if avg < 5000:
        return Verdict.VERY_SLOW
    return Verdict.UNSTABLE


def _tier_index(tier: str) -> int:
    return TIER_ORDER.index(tier) if tier in TIER_ORDER else len(TIER_ORDER)


_SORT_KEYS: Dict[str, Callable[[ModelResult], object]] = {
    'rank': lambda r: r.idx,
    'tier': lambda r: _tier_index(r.tier),
    'origin': lambda r: r.provider_key,
    'model': lambda r: r.label.lower(),
    'ping': get_last_ping_ms,
    'avg': get_avg,
    'swe': lambda r: parse_swe_score(r.swe_score),
    'ctx': lambda r: parse_ctx(r.ctx),
    'condition': lambda r: r.status.value,
    'verdict': lambda r: VERDICT_ORDER.index(get_verdict(r)),
    'uptime': get_uptime,
}


def sort_results(results: List[ModelResult], column: str = 'avg',
                 descending: bool = False) -> List[ModelResult]:
    """
    按列排序结果，返回新列表

    Raises:
        ValueError: 不支持的排序列
    """
    if column not in _SORT_KEYS:
        raise ValueError(f"不支持的排序列: {column}，可选: {SORT_COLUMNS}")
    return sorted(results, key=_SORT_KEYS[column], reverse=descending)


def filter_by_tier(results: List[ModelResult], tier_letter: str) -> Optional[List[ModelResult]]:
    """按等级字母过滤，字母无效时返回 None"""
    if tier_letter.upper() not in TIER_LETTER_MAP:
        return None
    allowed = expand_tier_filter(tier_letter)
    return [r for r in results if r.tier in allowed]


def filter_by_provider(results: List[ModelResult], provider_key: str) -> List[ModelResult]:
    return [r for r in results if r.provider_key == provider_key]


def find_best_model(results: List[ModelResult]) -> Optional[ModelResult]:
    """选出最佳模型：在线优先，其次平均延迟低，再次可用率高"""
    if not results:
        return None
    return min(results, key=lambda r: (r.status is not ModelStatus.UP, get_avg(r), -get_uptime(r)))
