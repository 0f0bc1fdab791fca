"""工具模块"""

from .exceptions import ModelsFreeError, ConfigError, ProbeError, MonitorError, KeyStoreError
from .log_manager import LogManager, LogLevel, get_logger, configure_logging, log_manager

__all__ = [
    'ModelsFreeError', 'ConfigError', 'ProbeError', 'MonitorError', 'KeyStoreError',
    'LogManager', 'LogLevel', 'get_logger', 'configure_logging', 'log_manager'
]
