"""提供商与模型目录的数据模型"""

from dataclasses import dataclass
from typing import Dict, List, Optional

# 由好到差排列，依据 SWE-bench Verified 得分
TIER_ORDER: List[str] = ['S+', 'S', 'A+', 'A', 'A-', 'B+', 'B', 'B-', 'C+', 'C', 'D']

# 命令行 --tier 字母到等级的映射
TIER_LETTER_MAP: Dict[str, List[str]] = {
    'S': ['S+', 'S'],
    'A': ['A+', 'A', 'A-'],
    'B': ['B+', 'B', 'B-'],
    'C': ['C+', 'C'],
    'D': ['D'],
}


@dataclass(frozen=True)
class ProviderConfig:
    """提供商配置"""
    key: str
    name: str
    url: str
    env_var_name: str
    probe_endpoint: str
    ping_model: str
    api_style: str = 'openai'
    key_prefix: Optional[str] = None
    hint: Optional[str] = None


@dataclass(frozen=True)
class ModelEntry:
    """目录中的一个模型"""
    model_id: str
    label: str
    tier: str
    swe_score: str
    ctx: str
    provider_key: str

    @property
    def key(self) -> str:
        return f"{self.provider_key}:{self.model_id}"

    @property
    def swe_value(self) -> float:
        return parse_swe_score(self.swe_score)

    @property
    def ctx_value(self) -> float:
        return parse_ctx(self.ctx)


def parse_swe_score(score: str) -> float:
    """解析 "73.1%" 形式的SWE得分，无法解析返回0"""
    if not score or score == '—':
        return 0.0
    try:
        return float(score.replace('%', ''))
    except ValueError:
        return 0.0


def parse_ctx(ctx: str) -> float:
    """解析上下文长度（单位：千token），"1M" -> 1000，"128k" -> 128"""
    if not ctx or ctx == '—':
        return 0.0
    value = ctx.lower()
    try:
        if 'm' in value:
            return float(value.replace('m', '')) * 1000
        if 'k' in value:
            return float(value.replace('k', ''))
    except ValueError:
        return 0.0
    return 0.0
