"""模型目录的过滤、排序与统计"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..models.catalogue import ModelEntry, TIER_ORDER, TIER_LETTER_MAP

SORT_FIELDS = ['name', 'tier', 'swe', 'ctx']


@dataclass
class ModelFilter:
    """目录过滤条件，字段为 None 表示不过滤"""
    search: Optional[str] = None
    tier: Optional[str] = None
    provider: Optional[str] = None

    def matches(self, model: ModelEntry) -> bool:
        if self.search:
            needle = self.search.lower()
            if needle not in model.model_id.lower() and needle not in model.label.lower():
                return False

        if self.tier and model.tier not in expand_tier_filter(self.tier):
            return False

        if self.provider and model.provider_key != self.provider:
            return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        return {'search': self.search, 'tier': self.tier, 'provider': self.provider}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ModelFilter':
        data = data or {}
        return cls(search=data.get('search'), tier=data.get('tier'),
                   provider=data.get('provider'))


def is_valid_tier_filter(tier: str) -> bool:
    """等级过滤条件可以是具体等级（"A+"）或等级字母（"A"）"""
    return tier.upper() in TIER_ORDER or tier.upper() in TIER_LETTER_MAP


def expand_tier_filter(tier: str) -> List[str]:
    """把过滤条件展开为等级列表

    "A" 既是等级又是字母时按字母处理，匹配 A+/A/A-
    """
    tier = tier.upper()
    if tier in TIER_LETTER_MAP:
        return TIER_LETTER_MAP[tier]
    if tier in TIER_ORDER:
        return [tier]
    return []


def filter_models(models: Iterable[ModelEntry],
                  model_filter: Optional[ModelFilter] = None) -> List[ModelEntry]:
    if model_filter is None:
        return list(models)
    return [model for model in models if model_filter.matches(model)]


def _tier_rank(tier: str) -> int:
    try:
        return TIER_ORDER.index(tier)
    except ValueError:
        return len(TIER_ORDER)


def sort_models(models: Iterable[ModelEntry], sort_by: str = 'tier',
                descending: bool = False) -> List[ModelEntry]:
    """
    排序模型列表

    升序时 tier 从好到差，swe 和 ctx 从大到小（越大越好），name 按字母顺序。

    Args:
        models: 模型列表
        sort_by: name | tier | swe | ctx
        descending: 是否反转顺序

    Returns:
        排序后的新列表
    """
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"不支持的排序字段: {sort_by}，可选: {SORT_FIELDS}")

    if sort_by == 'name':
        key = lambda m: m.label.lower()
    elif sort_by == 'tier':
        key = lambda m: _tier_rank(m.tier)
    elif sort_by == 'swe':
        key = lambda m: -m.swe_value
    else:
        key = lambda m: -m.ctx_value

    # sorted 是稳定排序，相同键保持目录顺序
    return sorted(models, key=key, reverse=descending)


def calculate_stats(models: List[ModelEntry]) -> Dict[str, Any]:
    """计算目录统计信息：总数、S级数量、平均SWE得分、等级分布、提供商分布"""
    total = len(models)
    tier_distribution = {tier: 0 for tier in TIER_ORDER}
    provider_counts: Dict[str, int] = {}

    for model in models:
        if model.tier in tier_distribution:
            tier_distribution[model.tier] += 1
        provider_counts[model.provider_key] = provider_counts.get(model.provider_key, 0) + 1

    top_tier_count = tier_distribution['S+'] + tier_distribution['S']
    avg_swe_score = round(sum(m.swe_value for m in models) / total, 1) if total else 0.0

    return {
        'total_models': total,
        'total_providers': len(provider_counts),
        'top_tier_count': top_tier_count,
        'avg_swe_score': avg_swe_score,
        'tier_distribution': tier_distribution,
        'provider_counts': provider_counts,
    }
