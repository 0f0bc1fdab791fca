"""Google AI Studio 探测客户端"""

from .base import BaseProbeClient, ProbeRequest, PING_MAX_TOKENS, PING_PROMPT
from .factory import register_probe
from ..models.ping import Target


@register_probe('google')
class GoogleAIProbeClient(BaseProbeClient):
    """
    generateContent 接口探测

    地址为 ``<endpoint>/<model>:generateContent``，密钥通过 ``key`` 查询参数传递，
    请求体格式与OpenAI兼容接口不同。
    """

    api_style = 'google'

    def build_request(self, target: Target) -> ProbeRequest:
        return ProbeRequest(
            url=f"{target.endpoint.rstrip('/')}/{target.model_id}:generateContent",
            params={'key': target.credential},
            headers={'Content-Type': 'application/json'},
            json={
                'contents': [{'parts': [{'text': PING_PROMPT}]}],
                'generationConfig': {'maxOutputTokens': PING_MAX_TOKENS},
            }
        )
