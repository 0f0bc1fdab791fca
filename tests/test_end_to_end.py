"""端到端测试：真实HTTP探测、监控循环、结果看板和应用程序"""

import asyncio
import os

import pytest
import yaml

from main import ModelsFreeApp
from modelsfree.catalogue.filters import ModelFilter
from modelsfree.models.ping import ModelStatus, ProbeStatus, Target
from modelsfree.services.metrics import find_best_model, get_verdict
from modelsfree.services.monitor_loop import MonitorLoop
from modelsfree.services.result_board import ResultBoard


class TestMonitorEndToEnd:
    """测试监控循环与真实HTTP探测"""

    @pytest.mark.asyncio
    async def test_mixed_targets(self, fake_provider, closed_port_url):
        """测试成功、网络错误和缺少密钥的目标"""
        url = fake_provider.url()
        targets = [
            Target('groq', 'ok', url, 'key'),
            Target('cerebras', 'broken', closed_port_url, 'key'),
            Target('sambanova', 'nokey', url, None),
            Target('googleai', 'gemma-3-4b-it', fake_provider.url('/v1beta/models'), 'AIza-key',
                   api_style='google'),
        ]
        board = ResultBoard(models=[])
        loop = MonitorLoop(lambda: targets, interval=60, probe_timeout=5)
        board.attach(loop)

        snapshots = await loop.run_once()

        assert snapshots['groq:ok'].status is ProbeStatus.SUCCESS
        assert snapshots['cerebras:broken'].status is ProbeStatus.NETWORK_ERROR
        assert snapshots['sambanova:nokey'].status is ProbeStatus.MISSING_CREDENTIAL
        assert snapshots['googleai:gemma-3-4b-it'].status is ProbeStatus.SUCCESS

        # 缺少密钥的目标不发请求
        assert len(fake_provider.requests) == 2
        paths = {r['path'] for r in fake_provider.requests}
        assert '/v1beta/models/gemma-3-4b-it:generateContent' in paths

        assert board.get_result('groq:ok').status is ModelStatus.UP
        assert board.get_result('sambanova:nokey').status is ModelStatus.NOAUTH
        assert board.get_result('sambanova:nokey').pings == []
        assert board.get_result('cerebras:broken').http_code == 'ERR'

    @pytest.mark.asyncio
    async def test_rate_limited_target(self, fake_provider):
        fake_provider.status = 429
        fake_provider.body = {'error': {'message': 'rate limit exceeded'}}
        targets = [Target('groq', 'limited', fake_provider.url(), 'key')]
        board = ResultBoard(models=[])
        loop = MonitorLoop(lambda: targets, interval=60)
        board.attach(loop)

        snapshots = await loop.run_once()

        outcome = snapshots['groq:limited'].outcome
        assert outcome.message == 'Rate limited'
        assert outcome.detail == 'rate limit exceeded'
        assert get_verdict(board.get_result('groq:limited')).value == 'Overloaded'

    @pytest.mark.asyncio
    async def test_stop_during_slow_probe(self, fake_provider):
        """测试探测进行中停止，不写入结果"""
        fake_provider.delay = 5
        targets = [Target('groq', 'slow', fake_provider.url(), 'key')]
        loop = MonitorLoop(lambda: targets, interval=60, probe_timeout=10)

        await loop.start()
        for _ in range(100):
            if fake_provider.requests:
                break
            await asyncio.sleep(0.02)

        event_loop = asyncio.get_running_loop()
        started = event_loop.time()
        await loop.stop()

        assert event_loop.time() - started < 2
        assert len(loop.status_store) == 0

    @pytest.mark.asyncio
    async def test_history_over_cycles(self, fake_provider):
        """测试多轮探测累积历史并选出最佳模型"""
        targets = [Target('groq', 'a', fake_provider.url(), 'key'),
                   Target('groq', 'b', fake_provider.url(), 'key')]
        board = ResultBoard(models=[])
        loop = MonitorLoop(lambda: targets, interval=0.05, probe_timeout=5)
        board.attach(loop)

        await loop.start()
        try:
            for _ in range(200):
                if loop.cycle_count >= 3 and all(
                        len(r.pings) >= 3 for r in board.get_results()):
                    break
                await asyncio.sleep(0.02)
        finally:
            await loop.stop()

        for result in board.get_results():
            assert len(result.pings) >= 3
            assert all(p.code == '200' for p in result.pings)
        assert find_best_model(board.get_results()) is not None


class TestModelsFreeApp:
    """测试主应用程序"""

    def write_config(self, path, data):
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f)

    @pytest.mark.asyncio
    async def test_initialize_from_config(self, tmp_path):
        config_path = str(tmp_path / 'config.yaml')
        self.write_config(config_path, {
            'global': {'check_interval': 12, 'probe_timeout': 3, 'log_level': 'ERROR',
                       'key_file': str(tmp_path / 'keys.json')},
            'monitor': {'mode': 'providers', 'filters': {'provider': 'groq'}},
            'api_keys': {'GROQ_API_KEY': 'gsk_config'},
        })

        app = ModelsFreeApp(config_path)
        await app.initialize()

        assert app.monitor_loop.interval == 12
        assert app.monitor_loop.probe_timeout == 3
        assert app.target_provider.mode == 'providers'

        targets = app.target_provider()
        assert [t.key for t in targets] == ['groq:llama-3.1-8b-instant']
        assert targets[0].credential == 'gsk_config'

        status = app.get_status()
        assert status['is_running'] is False
        assert status['filter']['provider'] == 'groq'
        assert status['keys']['groq']['source'] == 'config'

    @pytest.mark.asyncio
    async def test_overrides_take_priority(self, tmp_path):
        config_path = str(tmp_path / 'config.yaml')
        self.write_config(config_path, {
            'global': {'log_level': 'ERROR', 'key_file': str(tmp_path / 'keys.json')},
            'monitor': {'filters': {'provider': 'groq', 'tier': 'S'}},
        })

        app = ModelsFreeApp(config_path, overrides={
            'filters': {'provider': 'cerebras', 'tier': None, 'search': None},
            'mode': 'models',
        })
        await app.initialize()

        assert app.target_provider.model_filter == ModelFilter(tier='S', provider='cerebras')

    @pytest.mark.asyncio
    async def test_config_change_applies_to_next_cycle(self, tmp_path):
        """测试配置变更更新过滤条件和间隔"""
        config_path = str(tmp_path / 'config.yaml')
        self.write_config(config_path, {
            'global': {'check_interval': 30, 'log_level': 'ERROR',
                       'key_file': str(tmp_path / 'keys.json')},
            'monitor': {'filters': {'provider': 'groq'}},
        })
        app = ModelsFreeApp(config_path)
        await app.initialize()

        self.write_config(config_path, {
            'global': {'check_interval': 45, 'probe_timeout': 4, 'log_level': 'ERROR',
                       'key_file': str(tmp_path / 'keys.json')},
            'monitor': {'filters': {'provider': 'cerebras'}},
            'api_keys': {'cerebras': 'csk_new'},
        })
        new_time = os.path.getmtime(config_path) + 2
        os.utime(config_path, (new_time, new_time))
        app.config_watcher._on_config_changed()

        assert app.monitor_loop.interval == 45
        assert app.monitor_loop.probe_timeout == 4
        targets = app.target_provider()
        assert {t.provider_key for t in targets} == {'cerebras'}
        assert all(t.credential == 'csk_new' for t in targets)

    @pytest.mark.asyncio
    async def test_start_and_shutdown(self, tmp_path):
        config_path = str(tmp_path / 'config.yaml')
        self.write_config(config_path, {
            'global': {'log_level': 'ERROR', 'key_file': str(tmp_path / 'keys.json')},
            'monitor': {'filters': {'provider': 'codestral'}},
        })
        app = ModelsFreeApp(config_path)
        await app.initialize()
        app.key_store.environ = {}

        task = asyncio.create_task(app.start())
        for _ in range(100):
            if app.status_store.get('codestral:codestral-latest'):
                break
            await asyncio.sleep(0.02)

        assert app.is_running
        assert app.status_store.get('codestral:codestral-latest').status is \
            ProbeStatus.MISSING_CREDENTIAL

        app.shutdown()
        await asyncio.wait_for(task, timeout=5)

        assert not app.is_running
        assert not app.monitor_loop.is_running
        assert not app.config_watcher.is_running()
