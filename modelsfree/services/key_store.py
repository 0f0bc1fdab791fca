"""API密钥存储模块

密钥保存在用户目录下的JSON文件中，格式：
{"apiKeys": {"groq": "gsk_..."}, "providers": {"groq": {"enabled": true}}}
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Any

from ..catalogue import find_provider_by_env_var, get_provider, get_provider_keys
from ..models.catalogue import ProviderConfig
from ..utils.exceptions import ErrorCode, KeyStoreError

DEFAULT_KEY_FILE = '~/.modelsfree.json'


class KeyStore:
    """API密钥存储

    查找顺序：密钥文件 -> 配置文件 api_keys -> 环境变量
    """

    def __init__(self, key_file: Optional[str] = DEFAULT_KEY_FILE,
                 config_keys: Optional[Dict[str, str]] = None,
                 environ: Optional[Dict[str, str]] = None):
        """初始化密钥存储

        Args:
            key_file: 密钥文件路径，为None时只在内存中保存
            config_keys: 配置文件中的 api_keys，键可以是提供商标识或环境变量名
            environ: 环境变量字典，默认使用 os.environ
        """
        self.key_file = Path(key_file).expanduser() if key_file else None
        self.environ = environ if environ is not None else os.environ
        self.api_keys: Dict[str, str] = {}
        self.providers: Dict[str, Dict[str, Any]] = {}
        self.config_keys: Dict[str, str] = {}
        self.logger = logging.getLogger(__name__)

        self.set_config_keys(config_keys or {})

        if self.key_file:
            self._load()

    def set_config_keys(self, config_keys: Dict[str, str]):
        """设置配置文件中的密钥，环境变量名会被转换为提供商标识"""
        resolved = {}
        for name, value in config_keys.items():
            if not value:
                continue
            provider = get_provider(name) or find_provider_by_env_var(name)
            if provider is None:
                self.logger.warning(f"忽略未知的API密钥配置: {name}")
                continue
            resolved[provider.key] = value
        self.config_keys = resolved

    def _require_provider(self, provider_key: str) -> ProviderConfig:
        provider = get_provider(provider_key)
        if provider is None:
            raise KeyStoreError(
                f"未知的提供商 '{provider_key}'。支持的提供商: {get_provider_keys()}",
                error_code=ErrorCode.UNKNOWN_PROVIDER,
                provider_key=provider_key
            )
        return provider

    def get_key(self, provider_key: str) -> Optional[str]:
        """获取提供商的API密钥，未配置时返回None"""
        provider = get_provider(provider_key)
        if provider is None:
            return None

        stored = self.api_keys.get(provider_key)
        if stored:
            return stored

        configured = self.config_keys.get(provider_key)
        if configured:
            return configured

        return self.environ.get(provider.env_var_name) or None

    def get_key_source(self, provider_key: str) -> Optional[str]:
        """返回密钥来源: file | config | env，未配置时返回None"""
        provider = get_provider(provider_key)
        if provider is None:
            return None
        if self.api_keys.get(provider_key):
            return 'file'
        if self.config_keys.get(provider_key):
            return 'config'
        if self.environ.get(provider.env_var_name):
            return 'env'
        return None

    def has_key(self, provider_key: str) -> bool:
        return self.get_key(provider_key) is not None

    def set_key(self, provider_key: str, api_key: str):
        """
        保存提供商的API密钥并写入密钥文件

        Raises:
            KeyStoreError: 提供商未知、密钥为空或写入失败
        """
        provider = self._require_provider(provider_key)
        api_key = (api_key or '').strip()
        if not api_key:
            raise KeyStoreError("API密钥不能为空", provider_key=provider_key)

        if provider.key_prefix and '/' not in provider.key_prefix \
                and not api_key.startswith(provider.key_prefix):
            self.logger.warning(
                f"{provider.name} 的密钥通常以 '{provider.key_prefix}' 开头，请确认是否正确")

        self.api_keys[provider_key] = api_key
        self._save()
        self.logger.info(f"已保存 {provider.name} 的API密钥: {self.mask_key(api_key)}")

    def remove_key(self, provider_key: str) -> bool:
        """
        删除密钥文件中保存的API密钥

        Returns:
            是否删除了密钥

        Raises:
            KeyStoreError: 提供商未知或写入失败
        """
        self._require_provider(provider_key)
        if provider_key not in self.api_keys:
            return False

        del self.api_keys[provider_key]
        self._save()
        self.logger.info(f"已删除 {provider_key} 的API密钥")
        return True

    def set_provider_enabled(self, provider_key: str, enabled: bool):
        """
        启用或禁用提供商

        Raises:
            KeyStoreError: 提供商未知或写入失败
        """
        self._require_provider(provider_key)
        self.providers.setdefault(provider_key, {})['enabled'] = bool(enabled)
        self._save()
        self.logger.info(f"{provider_key} 已{'启用' if enabled else '禁用'}")

    def is_provider_enabled(self, provider_key: str) -> bool:
        """未单独设置的提供商默认启用"""
        return bool(self.providers.get(provider_key, {}).get('enabled', True))

    def enabled_providers(self) -> List[str]:
        return [key for key in get_provider_keys() if self.is_provider_enabled(key)]

    @staticmethod
    def mask_key(api_key: Optional[str]) -> str:
        """遮盖密钥，只显示前4位和后4位"""
        if not api_key:
            return ''
        if len(api_key) <= 8:
            return '*' * len(api_key)
        return f"{api_key[:4]}{'*' * (len(api_key) - 8)}{api_key[-4:]}"

    def get_summary(self) -> Dict[str, Dict[str, Any]]:
        """获取每个提供商的密钥配置情况（密钥已遮盖）"""
        summary = {}
        for key in get_provider_keys():
            api_key = self.get_key(key)
            summary[key] = {
                'configured': api_key is not None,
                'source': self.get_key_source(key),
                'masked_key': self.mask_key(api_key),
                'enabled': self.is_provider_enabled(key),
            }
        return summary

    def _save(self):
        """保存到密钥文件，权限设置为仅当前用户可读写"""
        if not self.key_file:
            return

        data = {'apiKeys': self.api_keys, 'providers': self.providers}
        try:
            self.key_file.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.key_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                # 已存在的文件保留旧权限，写入前收紧
                os.chmod(self.key_file, 0o600)
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise KeyStoreError(
                f"写入密钥文件失败: {e}",
                error_code=ErrorCode.KEY_PERSISTENCE_ERROR,
                cause=e
            )

    def _load(self):
        """从密钥文件加载，文件不存在或损坏时视为空"""
        if not self.key_file.exists():
            return

        try:
            with open(self.key_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"读取密钥文件失败: {e}")
            return

        if not isinstance(data, dict):
            self.logger.error(f"密钥文件格式错误: {self.key_file}")
            return

        api_keys = data.get('apiKeys') or {}
        providers = data.get('providers') or {}
        self.api_keys = {
            k: v for k, v in api_keys.items()
            if isinstance(v, str) and v and get_provider(k) is not None
        }
        self.providers = {
            k: v for k, v in providers.items()
            if isinstance(v, dict) and get_provider(k) is not None
        }
        self.logger.info(f"从 {self.key_file} 加载了 {len(self.api_keys)} 个API密钥")
