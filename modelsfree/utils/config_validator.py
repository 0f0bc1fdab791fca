"""配置验证工具"""

from typing import Dict, Any

from .exceptions import ConfigError
from ..catalogue import get_provider, get_provider_keys, find_provider_by_env_var
from ..catalogue.filters import is_valid_tier_filter


class ConfigValidator:
    """配置验证器"""

    VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    VALID_MODES = ['models', 'providers']

    @staticmethod
    def validate_global_config(global_config: Dict[str, Any]) -> None:
        """
        验证全局配置

        Args:
            global_config: 全局配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(global_config, dict):
            raise ConfigError("全局配置必须是字典类型")

        check_interval = global_config.get('check_interval')
        if check_interval is not None:
            if (not isinstance(check_interval, int) or isinstance(check_interval, bool)
                    or check_interval <= 0):
                raise ConfigError("check_interval 必须是正整数")

        probe_timeout = global_config.get('probe_timeout')
        if probe_timeout is not None:
            if (not isinstance(probe_timeout, (int, float)) or isinstance(probe_timeout, bool)
                    or probe_timeout <= 0):
                raise ConfigError("probe_timeout 必须是正数")

        log_level = global_config.get('log_level')
        if log_level is not None:
            if log_level not in ConfigValidator.VALID_LOG_LEVELS:
                raise ConfigError(
                    f"log_level 必须是以下值之一: {ConfigValidator.VALID_LOG_LEVELS}")

        for path_key in ('log_file', 'key_file'):
            value = global_config.get(path_key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{path_key} 必须是字符串路径")

    @staticmethod
    def validate_monitor_config(monitor_config: Dict[str, Any]) -> None:
        """
        验证监控配置（探测模式和过滤条件）

        Args:
            monitor_config: monitor 配置节

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(monitor_config, dict):
            raise ConfigError("monitor配置必须是字典类型")

        mode = monitor_config.get('mode', 'models')
        if mode not in ConfigValidator.VALID_MODES:
            raise ConfigError(
                f"monitor.mode 必须是以下值之一: {ConfigValidator.VALID_MODES}")

        filters = monitor_config.get('filters') or {}
        if not isinstance(filters, dict):
            raise ConfigError("monitor.filters 必须是字典类型")

        unknown = set(filters) - {'provider', 'search', 'tier'}
        if unknown:
            raise ConfigError(f"monitor.filters 包含未知字段: {sorted(unknown)}")

        provider = filters.get('provider')
        if provider is not None and get_provider(provider) is None:
            raise ConfigError(
                f"未知的提供商 '{provider}'。支持的提供商: {get_provider_keys()}")

        tier = filters.get('tier')
        if tier is not None and not is_valid_tier_filter(str(tier)):
            raise ConfigError(f"无效的等级过滤条件: {tier}")

        search = filters.get('search')
        if search is not None and not isinstance(search, str):
            raise ConfigError("monitor.filters.search 必须是字符串")

    @staticmethod
    def validate_api_keys(api_keys: Dict[str, Any]) -> None:
        """
        验证 api_keys 配置，键可以是提供商标识或其环境变量名

        Args:
            api_keys: api_keys 配置节

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(api_keys, dict):
            raise ConfigError("api_keys配置必须是字典类型")

        for name, value in api_keys.items():
            if get_provider(name) is None and find_provider_by_env_var(name) is None:
                raise ConfigError(f"api_keys 中存在未知的提供商或环境变量名: {name}")
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"api_keys.{name} 必须是字符串")
