"""数据模型模块"""

from .catalogue import ModelEntry, ProviderConfig, TIER_ORDER, TIER_LETTER_MAP
from .ping import (
    ApiStyle, ModelResult, ModelStatus, PingResult, ProbeOutcome, ProbeStatus,
    StatusSnapshot, Target, Verdict, VERDICT_ORDER
)

__all__ = ['ModelEntry', 'ProviderConfig', 'TIER_ORDER', 'TIER_LETTER_MAP',
           'ApiStyle', 'ModelResult', 'ModelStatus', 'PingResult', 'ProbeOutcome',
           'ProbeStatus', 'StatusSnapshot', 'Target', 'Verdict', 'VERDICT_ORDER']
