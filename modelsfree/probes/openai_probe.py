"""OpenAI兼容接口探测客户端"""

from .base import BaseProbeClient, ProbeRequest, PING_MAX_TOKENS, PING_PROMPT
from .factory import register_probe
from ..models.ping import Target


@register_probe('openai')
class OpenAICompatibleProbeClient(BaseProbeClient):
    """chat/completions 接口探测，Bearer 认证"""

    api_style = 'openai'

    def build_request(self, target: Target) -> ProbeRequest:
        return ProbeRequest(
            url=target.endpoint,
            headers={
                'Authorization': f'Bearer {target.credential}',
                'Content-Type': 'application/json',
            },
            json={
                'model': target.model_id,
                'messages': [{'role': 'user', 'content': PING_PROMPT}],
                'max_tokens': PING_MAX_TOKENS,
            }
        )
