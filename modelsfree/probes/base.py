"""探测客户端基类"""

import asyncio
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import aiohttp

from ..models.ping import ProbeOutcome, ProbeStatus, Target
from ..utils.log_manager import get_logger

DEFAULT_PROBE_TIMEOUT = 15

PING_PROMPT = 'ping'
PING_MAX_TOKENS = 5

# 有固定提示语的HTTP状态码，其余非2xx显示为 "HTTP <code>"
HTTP_ERROR_MESSAGES = {
    401: 'Invalid API key',
    404: 'Model not found',
    429: 'Rate limited',
}


@dataclass
class ProbeRequest:
    """一次探测要发出的HTTP请求"""
    url: str
    json: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)


class BaseProbeClient(ABC):
    """探测客户端抽象基类

    每次探测只发出一个POST请求，不重试。所有失败都归类为 ProbeOutcome，
    不会向调用方抛出异常。
    """

    api_style = 'base'

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT):
        """
        初始化探测客户端

        Args:
            timeout: 默认单次探测超时时间（秒）
        """
        self.timeout = timeout
        self.logger = get_logger(f'probe.{self.api_style}')

    @abstractmethod
    def build_request(self, target: Target) -> ProbeRequest:
        """
        构造探测请求

        Args:
            target: 探测目标（凭据已确认非空）

        Returns:
            ProbeRequest: 请求地址、头、查询参数和JSON体
        """
        pass

    async def probe(self, target: Target, timeout: Optional[float] = None,
                    cancel_event: Optional[asyncio.Event] = None) -> ProbeOutcome:
        """
        对目标执行一次探测

        Args:
            target: 探测目标
            timeout: 超时时间（秒），为空时使用客户端默认值
            cancel_event: 取消事件，被置位时放弃请求并返回 cancelled

        Returns:
            ProbeOutcome: 探测结果
        """
        if cancel_event is not None and cancel_event.is_set():
            return ProbeOutcome.cancelled()

        if not target.credential:
            self.logger.debug(f"{target.key} 未配置API密钥，跳过探测")
            return ProbeOutcome.missing_credential()

        timeout = self.timeout if timeout is None else timeout
        request_task = asyncio.ensure_future(self._send(target, timeout))

        if cancel_event is None:
            return await request_task

        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)

            if request_task in done:
                return request_task.result()

            request_task.cancel()
            await asyncio.gather(request_task, return_exceptions=True)
            self.logger.debug(f"{target.key} 探测已取消")
            return ProbeOutcome.cancelled()
        finally:
            for task in (request_task, cancel_task):
                if not task.done():
                    task.cancel()

    async def _send(self, target: Target, timeout: float) -> ProbeOutcome:
        """发送请求并分类结果"""
        client_timeout = aiohttp.ClientTimeout(total=timeout)

        try:
            request = self.build_request(target)
            async with aiohttp.ClientSession(timeout=client_timeout) as session:
                started = time.perf_counter()
                async with session.post(request.url, json=request.json,
                                        headers=request.headers,
                                        params=request.params) as response:
                    # 计时到读完响应头为止，不包含响应体
                    latency_ms = max(0, int(round((time.perf_counter() - started) * 1000)))

                    if 200 <= response.status < 300:
                        self.logger.debug(f"{target.key} 探测成功，延迟 {latency_ms}ms")
                        return ProbeOutcome(
                            status=ProbeStatus.SUCCESS,
                            latency_ms=latency_ms,
                            http_status=response.status
                        )

                    detail = await self._read_error_detail(response)
                    message = HTTP_ERROR_MESSAGES.get(response.status, f"HTTP {response.status}")
                    self.logger.debug(f"{target.key} 探测失败: {message}")
                    return ProbeOutcome(
                        status=ProbeStatus.HTTP_ERROR,
                        message=message,
                        http_status=response.status,
                        detail=detail
                    )

        # ServerTimeoutError 同时是 ClientError，必须先处理超时
        except asyncio.TimeoutError:
            self.logger.debug(f"{target.key} 探测超时（{timeout}秒）")
            return ProbeOutcome(status=ProbeStatus.TIMEOUT, message="Request timed out")
        except aiohttp.ClientError as e:
            self.logger.debug(f"{target.key} 网络错误: {e}")
            return ProbeOutcome(status=ProbeStatus.NETWORK_ERROR, message="Network error",
                                detail=str(e) or None)
        except Exception as e:
            self.logger.warning(f"{target.key} 探测异常: {e}")
            return ProbeOutcome(status=ProbeStatus.NETWORK_ERROR, message="Network error",
                                detail=str(e) or None)

    async def _read_error_detail(self, response: aiohttp.ClientResponse) -> Optional[str]:
        """尽量从错误响应体中提取提供商给出的错误信息，失败时返回 None"""
        try:
            body = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError):
            return None

        if not body:
            return None

        try:
            data = json.loads(body)
        except ValueError:
            return body[:200]

        if isinstance(data, dict):
            error = data.get('error')
            if isinstance(error, dict) and error.get('message'):
                return str(error['message'])
            if isinstance(error, str):
                return error
            if data.get('message'):
                return str(data['message'])
            if data.get('detail'):
                return str(data['detail'])
        # 列表形式的错误体（部分Google接口）
        if isinstance(data, list) and data and isinstance(data[0], dict):
            error = data[0].get('error')
            if isinstance(error, dict) and error.get('message'):
                return str(error['message'])

        return body[:200]
