"""探测目标构建模块"""

import logging
from typing import List, Optional

from .key_store import KeyStore
from ..catalogue import PROVIDERS, filter_models, get_models, get_provider
from ..catalogue.filters import ModelFilter
from ..models.catalogue import ModelEntry, ProviderConfig
from ..models.ping import Target

VALID_MODES = ['models', 'providers']


class TargetProvider:
    """根据当前过滤条件生成目标列表

    实例可直接作为 MonitorLoop 的 target_provider。每次调用都重新读取过滤条件
    和密钥，所以修改过滤条件或保存新密钥后，下一轮探测即可生效。

    mode:
        models    -- 目录中每个符合条件的模型一个目标
        providers -- 每个提供商一个目标，使用其 ping_model
    """

    def __init__(self, key_store: KeyStore, model_filter: Optional[ModelFilter] = None,
                 mode: str = 'models'):
        if mode not in VALID_MODES:
            raise ValueError(f"不支持的探测模式: {mode}，可选: {VALID_MODES}")

        self.key_store = key_store
        self.model_filter = model_filter or ModelFilter()
        self.mode = mode
        self.logger = logging.getLogger(__name__)

    def update_filter(self, model_filter: Optional[ModelFilter] = None,
                      mode: Optional[str] = None):
        """修改过滤条件或探测模式，只影响之后生成的目标列表"""
        if mode is not None:
            if mode not in VALID_MODES:
                raise ValueError(f"不支持的探测模式: {mode}，可选: {VALID_MODES}")
            self.mode = mode
        if model_filter is not None:
            self.model_filter = model_filter
        self.logger.info(f"目标过滤条件已更新: mode={self.mode}, filter={self.model_filter.to_dict()}")

    def __call__(self) -> List[Target]:
        if self.mode == 'providers':
            return self.build_provider_targets()
        return self.build_model_targets()

    def build_model_targets(self) -> List[Target]:
        targets = []
        for model in filter_models(get_models(), self.model_filter):
            if not self.key_store.is_provider_enabled(model.provider_key):
                continue
            provider = get_provider(model.provider_key)
            targets.append(self._make_target(provider, model.model_id))
        return targets

    def build_provider_targets(self) -> List[Target]:
        targets = []
        for provider in PROVIDERS.values():
            if self.model_filter.provider and provider.key != self.model_filter.provider:
                continue
            if not self.key_store.is_provider_enabled(provider.key):
                continue
            targets.append(self._make_target(provider, provider.ping_model))
        return targets

    def target_for_model(self, model: ModelEntry) -> Target:
        return self._make_target(get_provider(model.provider_key), model.model_id)

    def _make_target(self, provider: ProviderConfig, model_id: str) -> Target:
        return Target(
            provider_key=provider.key,
            model_id=model_id,
            endpoint=provider.probe_endpoint,
            credential=self.key_store.get_key(provider.key),
            api_style=provider.api_style
        )
