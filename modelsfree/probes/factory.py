"""探测客户端工厂"""

import asyncio
from typing import Dict, List, Optional, Type

from .base import BaseProbeClient, DEFAULT_PROBE_TIMEOUT
from ..models.ping import ProbeOutcome, Target
from ..utils.exceptions import ErrorCode, ProbeError


class ProbeClientFactory:
    """探测客户端工厂类，按请求格式（api_style）注册和分发探测客户端"""

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT):
        """
        初始化工厂

        Args:
            timeout: 创建客户端时使用的默认超时时间（秒）
        """
        self.timeout = timeout
        self._client_classes: Dict[str, Type[BaseProbeClient]] = {}
        self._clients: Dict[str, BaseProbeClient] = {}

    def register_client(self, api_style: str, client_class: Type[BaseProbeClient]):
        """
        注册探测客户端类

        Args:
            api_style: 请求格式名称
            client_class: 探测客户端类

        Raises:
            ProbeError: 注册失败
        """
        if not issubclass(client_class, BaseProbeClient):
            raise ProbeError(f"探测客户端类 {client_class.__name__} 必须继承自 BaseProbeClient")

        if api_style in self._client_classes:
            raise ProbeError(f"请求格式 '{api_style}' 已经注册了探测客户端")

        self._client_classes[api_style] = client_class

    def unregister_client(self, api_style: str):
        self._client_classes.pop(api_style, None)
        self._clients.pop(api_style, None)

    def get_client(self, api_style: str) -> BaseProbeClient:
        """
        获取指定请求格式的探测客户端实例（按格式缓存）

        Raises:
            ProbeError: 请求格式不支持
        """
        if api_style not in self._client_classes:
            raise ProbeError(
                f"不支持的请求格式: '{api_style}'",
                error_code=ErrorCode.UNKNOWN_API_STYLE,
                api_style=api_style
            )

        client = self._clients.get(api_style)
        if client is None:
            client = self._client_classes[api_style](timeout=self.timeout)
            self._clients[api_style] = client
        return client

    def get_supported_styles(self) -> List[str]:
        return list(self._client_classes.keys())

    def is_style_supported(self, api_style: str) -> bool:
        return api_style in self._client_classes

    async def probe(self, target: Target, timeout: Optional[float] = None,
                    cancel_event: Optional[asyncio.Event] = None) -> ProbeOutcome:
        """
        按目标的请求格式选择客户端并执行探测

        Raises:
            ProbeError: 目标的请求格式不支持
        """
        client = self.get_client(target.api_style)
        return await client.probe(target, timeout=timeout, cancel_event=cancel_event)


# 全局工厂实例
probe_client_factory = ProbeClientFactory()


def register_probe(api_style: str):
    """
    装饰器：注册探测客户端类

    Args:
        api_style: 请求格式名称

    Returns:
        装饰器函数
    """
    def decorator(client_class: Type[BaseProbeClient]):
        probe_client_factory.register_client(api_style, client_class)
        return client_class

    return decorator
