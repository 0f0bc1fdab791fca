"""探测客户端模块"""

from .base import BaseProbeClient, ProbeRequest, DEFAULT_PROBE_TIMEOUT, HTTP_ERROR_MESSAGES
from .factory import ProbeClientFactory, probe_client_factory, register_probe
from .google_probe import GoogleAIProbeClient
from .openai_probe import OpenAICompatibleProbeClient

__all__ = ['BaseProbeClient', 'ProbeRequest', 'DEFAULT_PROBE_TIMEOUT', 'HTTP_ERROR_MESSAGES',
           'ProbeClientFactory', 'probe_client_factory', 'register_probe',
           'GoogleAIProbeClient', 'OpenAICompatibleProbeClient']
