"""免费模型目录"""

from typing import List, Optional

from ..models.catalogue import ModelEntry, ProviderConfig
from .filters import (
    ModelFilter, calculate_stats, expand_tier_filter, filter_models,
    is_valid_tier_filter, sort_models
)
from .providers import PROVIDERS
from .sources import SOURCES

MODELS: List[ModelEntry] = [
    ModelEntry(model_id, label, tier, swe_score, ctx, provider_key)
    for provider_key, rows in SOURCES.items()
    for model_id, label, tier, swe_score, ctx in rows
]


def get_models() -> List[ModelEntry]:
    """按目录顺序返回全部模型"""
    return list(MODELS)


def get_models_by_provider(provider_key: str) -> List[ModelEntry]:
    return [model for model in MODELS if model.provider_key == provider_key]


def get_model(provider_key: str, model_id: str) -> Optional[ModelEntry]:
    for model in MODELS:
        if model.provider_key == provider_key and model.model_id == model_id:
            return model
    return None


def get_provider(provider_key: str) -> Optional[ProviderConfig]:
    return PROVIDERS.get(provider_key)


def get_provider_keys() -> List[str]:
    return list(PROVIDERS.keys())


def find_provider_by_env_var(env_var_name: str) -> Optional[ProviderConfig]:
    """根据环境变量名查找提供商"""
    for provider in PROVIDERS.values():
        if provider.env_var_name == env_var_name:
            return provider
    return None


def get_total_model_count() -> int:
    return len(MODELS)


__all__ = ['MODELS', 'PROVIDERS', 'SOURCES', 'ModelFilter', 'calculate_stats',
           'expand_tier_filter', 'filter_models', 'is_valid_tier_filter', 'sort_models',
           'get_models', 'get_models_by_provider', 'get_model', 'get_provider',
           'get_provider_keys', 'find_provider_by_env_var', 'get_total_model_count']
