"""配置管理器"""

import os
import yaml
from typing import Dict, Any, Optional

from ..catalogue.filters import ModelFilter
from ..utils.exceptions import ConfigError, ErrorCode
from ..utils.config_validator import ConfigValidator
from ..utils.log_manager import get_logger

DEFAULT_GLOBAL_CONFIG: Dict[str, Any] = {
    'check_interval': 30,
    'probe_timeout': 15,
    'log_level': 'INFO',
    'log_file': None,
    'key_file': '~/.modelsfree.json',
}


class ConfigManager:
    """配置管理器，负责YAML配置文件的加载、解析和验证

    配置文件包含三个部分：global（间隔、超时、日志、密钥文件）、
    monitor（探测模式和过滤条件）、api_keys（可选的密钥覆盖）
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        初始化配置管理器

        Args:
            config_path: 配置文件路径，为None时只使用默认配置
        """
        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self.last_modified: Optional[float] = None
        self.logger = get_logger('config_manager')

    def load_config(self) -> Dict[str, Any]:
        """
        加载YAML配置文件

        Returns:
            Dict[str, Any]: 配置字典

        Raises:
            ConfigError: 配置加载或验证失败
        """
        if self.config_path is None:
            self.logger.info("未指定配置文件，使用默认配置")
            self.config = {}
            return self.config

        self.logger.info(f"开始加载配置文件: {self.config_path}")

        try:
            if not os.path.exists(self.config_path):
                self.logger.error(f"配置文件不存在: {self.config_path}")
                raise ConfigError(f"配置文件不存在: {self.config_path}",
                                  error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                                  config_path=self.config_path)

            with open(self.config_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)

            # 空文件等同于全部使用默认值
            if config is None:
                self.logger.warning("配置文件为空，使用默认配置")
                config = {}

            self._validate_config(config)

            filters = (config.get('monitor') or {}).get('filters') or {}
            self.logger.info(
                f"配置验证成功，探测模式: {(config.get('monitor') or {}).get('mode', 'models')}，"
                f"过滤条件: {filters or '无'}，配置密钥数: {len(config.get('api_keys') or {})}"
            )

            old_config = self.config.copy() if self.config else {}
            self.config = config
            self.last_modified = os.path.getmtime(self.config_path)

            if old_config:
                self._log_config_changes(old_config, config)
            else:
                self.logger.info("首次加载配置文件")

            return self.config

        except ConfigError:
            raise
        except yaml.YAMLError as e:
            self.logger.error(f"YAML格式错误: {e}")
            raise ConfigError(f"YAML格式错误: {e}", error_code=ErrorCode.CONFIG_PARSE_ERROR,
                              config_path=self.config_path, cause=e)
        except PermissionError as e:
            self.logger.error(f"没有权限读取配置文件: {self.config_path}")
            raise ConfigError(f"没有权限读取配置文件: {self.config_path}",
                              config_path=self.config_path, cause=e)
        except OSError as e:
            self.logger.error(f"加载配置文件失败: {e}", exc_info=True)
            raise ConfigError(f"加载配置文件失败: {e}", config_path=self.config_path, cause=e)

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        验证配置文件内容

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(config, dict):
            raise ConfigError("配置文件根节点必须是字典类型")

        unknown = set(config) - {'global', 'monitor', 'api_keys'}
        if unknown:
            self.logger.warning(f"忽略未知的配置节: {sorted(unknown)}")

        if config.get('global') is not None:
            ConfigValidator.validate_global_config(config['global'])

        if config.get('monitor') is not None:
            ConfigValidator.validate_monitor_config(config['monitor'])

        if config.get('api_keys') is not None:
            ConfigValidator.validate_api_keys(config['api_keys'])

    def get_global_config(self) -> Dict[str, Any]:
        """获取全局配置（已合并默认值）"""
        merged = DEFAULT_GLOBAL_CONFIG.copy()
        merged.update({k: v for k, v in (self.config.get('global') or {}).items()
                       if v is not None})
        return merged

    def get_monitor_config(self) -> Dict[str, Any]:
        return self.config.get('monitor') or {}

    def get_mode(self) -> str:
        return self.get_monitor_config().get('mode', 'models')

    def get_model_filter(self) -> ModelFilter:
        return ModelFilter.from_dict(self.get_monitor_config().get('filters'))

    def get_api_keys(self) -> Dict[str, str]:
        return dict(self.config.get('api_keys') or {})

    def is_config_changed(self) -> bool:
        """
        检查配置文件是否已修改

        Returns:
            bool: 配置文件是否已修改
        """
        if self.config_path is None:
            return False

        try:
            if not os.path.exists(self.config_path):
                return False

            current_modified = os.path.getmtime(self.config_path)
            return self.last_modified is None or current_modified > self.last_modified

        except OSError:
            return False

    def reload_config(self) -> Dict[str, Any]:
        """
        重新加载配置文件

        Raises:
            ConfigError: 配置重新加载失败，此时保留原配置
        """
        self.logger.info("重新加载配置文件")
        return self.load_config()

    def _log_config_changes(self, old_config: Dict[str, Any], new_config: Dict[str, Any]) -> None:
        for section in ('global', 'monitor'):
            old_section = old_config.get(section) or {}
            new_section = new_config.get(section) or {}
            if old_section != new_section:
                self.logger.info(f"{section} 配置已修改")
                self.logger.debug(f"旧 {section} 配置: {old_section}")
                self.logger.debug(f"新 {section} 配置: {new_section}")

        # 密钥内容不写日志，只记录提供商
        old_keys = set((old_config.get('api_keys') or {}).keys())
        new_keys = set((new_config.get('api_keys') or {}).keys())
        if old_keys != new_keys:
            self.logger.info(f"api_keys 配置变更: {sorted(old_keys)} -> {sorted(new_keys)}")
