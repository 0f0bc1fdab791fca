"""自定义异常类和错误代码"""

import traceback
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime


class ErrorCode(Enum):
    """错误代码枚举"""
    # 通用错误 (1000-1999)
    UNKNOWN_ERROR = 1000
    INITIALIZATION_ERROR = 1001
    VALIDATION_ERROR = 1002

    # 配置错误 (2000-2999)
    CONFIG_FILE_NOT_FOUND = 2000
    CONFIG_PARSE_ERROR = 2001
    CONFIG_VALIDATION_ERROR = 2002
    CONFIG_RELOAD_ERROR = 2003

    # 探测错误 (3000-3999)
    PROBE_ERROR = 3000
    UNKNOWN_API_STYLE = 3001
    UNKNOWN_PROVIDER = 3002

    # 监控循环错误 (5000-5999)
    MONITOR_ERROR = 5000
    TARGET_RESOLUTION_ERROR = 5001

    # 密钥存储错误 (6000-6999)
    KEY_STORE_ERROR = 6000
    KEY_PERSISTENCE_ERROR = 6001


class ModelsFreeError(Exception):
    """modelsfree 基础异常类"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            'error_code': self.error_code.value,
            'error_name': self.error_code.name,
            'message': self.message,
            'details': self.details,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'cause': str(self.cause) if self.cause else None,
            'traceback': traceback.format_exc() if self.cause else None
        }

    def format_error(self) -> str:
        """格式化错误信息"""
        error_msg = f"[{self.error_code.name}] {self.message}"
        if self.details:
            details_str = ", ".join([f"{k}={v}" for k, v in self.details.items()])
            error_msg += f" (详情: {details_str})"
        if self.cause:
            error_msg += f" (原因: {str(self.cause)})"
        return error_msg


class ConfigError(ModelsFreeError):
    """配置相关异常"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_VALIDATION_ERROR,
        config_path: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', {})
        if config_path:
            details['config_path'] = config_path
        super().__init__(message, error_code, details, **kwargs)


class ProbeError(ModelsFreeError):
    """探测客户端相关异常（注册、分发失败）"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.PROBE_ERROR,
        api_style: Optional[str] = None,
        target_key: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', {})
        if api_style:
            details['api_style'] = api_style
        if target_key:
            details['target_key'] = target_key
        super().__init__(message, error_code, details, **kwargs)


class MonitorError(ModelsFreeError):
    """监控循环相关异常"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.MONITOR_ERROR,
        **kwargs
    ):
        super().__init__(message, error_code, **kwargs)


class KeyStoreError(ModelsFreeError):
    """API密钥存储相关异常"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.KEY_STORE_ERROR,
        provider_key: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', {})
        if provider_key:
            details['provider_key'] = provider_key
        super().__init__(message, error_code, details, **kwargs)
