"""测试公共夹具"""

import asyncio
import socket

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from modelsfree.services.key_store import KeyStore
from modelsfree.utils.log_manager import log_manager


class FakeProvider:
    """模拟提供商接口，记录收到的请求并返回预设响应"""

    def __init__(self):
        self.requests = []
        self.status = 200
        self.body = {'choices': [{'message': {'content': 'pong'}}]}
        self.raw_body = None
        self.delay = 0.0
        self.release = asyncio.Event()
        self.server = None

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append({
            'path': request.path,
            'query': dict(request.query),
            'headers': dict(request.headers),
            'json': await request.json(),
        })

        if self.delay:
            try:
                await asyncio.wait_for(self.release.wait(), self.delay)
            except asyncio.TimeoutError:
                pass

        if self.raw_body is not None:
            return web.Response(text=self.raw_body, status=self.status)
        return web.json_response(self.body, status=self.status)

    def url(self, path: str = '/v1/chat/completions') -> str:
        return str(self.server.make_url(path))


@pytest_asyncio.fixture
async def fake_provider():
    """启动本地模拟提供商接口"""
    provider = FakeProvider()
    app = web.Application()
    app.router.add_route('POST', '/{tail:.*}', provider.handle)

    server = TestServer(app)
    await server.start_server()
    provider.server = server

    yield provider

    provider.release.set()
    await server.close()


@pytest.fixture
def closed_port_url():
    """一个没有服务监听的本地地址"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return f'http://127.0.0.1:{port}/v1/chat/completions'


@pytest.fixture
def key_store(tmp_path):
    """不读取真实环境变量的密钥存储"""
    return KeyStore(key_file=str(tmp_path / 'keys.json'), environ={})


@pytest.fixture(autouse=True)
def reset_log_handlers():
    """每个测试结束后恢复默认日志配置并关闭文件句柄"""
    yield
    log_manager.configure({'log_level': 'INFO', 'enable_file': False, 'enable_console': True})
    log_manager.cleanup()
