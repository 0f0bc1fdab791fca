"""测试结果看板"""

import pytest

from modelsfree.catalogue import get_total_model_count
from modelsfree.models.catalogue import ModelEntry
from modelsfree.models.ping import (
    ModelStatus, ProbeOutcome, ProbeStatus, StatusSnapshot, Target
)
from modelsfree.services.monitor_loop import MonitorLoop
from modelsfree.services.result_board import (
    ResultBoard, outcome_to_model_status, outcome_to_ping
)


def snapshot(model_id, outcome, provider_key='groq'):
    target = Target(provider_key, model_id, 'https://example.com', 'key')
    return StatusSnapshot(target=target, outcome=outcome)


SUCCESS = ProbeOutcome(status=ProbeStatus.SUCCESS, latency_ms=150, http_status=200)
RATE_LIMITED = ProbeOutcome(status=ProbeStatus.HTTP_ERROR, message='Rate limited', http_status=429)
TIMEOUT = ProbeOutcome(status=ProbeStatus.TIMEOUT, message='Request timed out')
NETWORK = ProbeOutcome(status=ProbeStatus.NETWORK_ERROR, message='Network error')


class TestOutcomeConversion:
    """测试探测结果到ping记录的转换"""

    def test_success(self):
        ping = outcome_to_ping(SUCCESS)
        assert ping.ms == 150
        assert ping.code == '200'
        assert outcome_to_model_status(SUCCESS) is ModelStatus.UP

    def test_http_error(self):
        ping = outcome_to_ping(RATE_LIMITED)
        assert ping.ms is None
        assert ping.code == '429'
        assert outcome_to_model_status(RATE_LIMITED) is ModelStatus.DOWN

    def test_timeout(self):
        assert outcome_to_ping(TIMEOUT).code == '000'
        assert outcome_to_model_status(TIMEOUT) is ModelStatus.TIMEOUT

    def test_network_error(self):
        assert outcome_to_ping(NETWORK).code == 'ERR'
        assert outcome_to_model_status(NETWORK) is ModelStatus.DOWN

    def test_missing_credential(self):
        outcome = ProbeOutcome.missing_credential()
        assert outcome_to_ping(outcome) is None
        assert outcome_to_model_status(outcome) is ModelStatus.NOAUTH


class TestResultBoard:
    """测试结果看板"""

    def setup_method(self):
        self.models = [
            ModelEntry('a', 'Model A', 'S', '60.0%', '128k', 'groq'),
            ModelEntry('b', 'Model B', 'B', '25.0%', '128k', 'groq'),
        ]
        self.board = ResultBoard(models=self.models)

    def test_defaults_to_full_catalogue(self):
        assert len(ResultBoard().get_results()) == get_total_model_count()

    def test_initial_state(self):
        results = self.board.get_results()
        assert [r.key for r in results] == ['groq:a', 'groq:b']
        assert [r.idx for r in results] == [1, 2]
        assert all(r.status is ModelStatus.PENDING for r in results)
        assert self.board.probed_results() == []
        assert self.board.best() is None

    def test_record_history(self):
        self.board.record(snapshot('a', SUCCESS))
        result = self.board.record(snapshot('a', RATE_LIMITED))

        assert [p.code for p in result.pings] == ['200', '429']
        assert result.status is ModelStatus.DOWN
        assert result.http_code == '429'

    def test_record_missing_credential(self):
        """测试缺少密钥不写入历史"""
        result = self.board.record(snapshot('a', ProbeOutcome.missing_credential()))
        assert result.pings == []
        assert result.status is ModelStatus.NOAUTH
        assert result.http_code is None

    def test_record_timeout_code(self):
        result = self.board.record(snapshot('a', TIMEOUT))
        assert result.http_code == '000'

    def test_history_limit(self):
        board = ResultBoard(models=self.models, max_history=3)
        for _ in range(5):
            board.record(snapshot('a', SUCCESS))
        assert len(board.get_result('groq:a').pings) == 3

    def test_record_unknown_model(self):
        """测试不在看板中的目标会被追加"""
        result = self.board.record(snapshot('llama3.1-8b', SUCCESS, provider_key='cerebras'))

        assert result.key == 'cerebras:llama3.1-8b'
        assert result.tier == '—'
        assert result.idx == 3
        assert self.board.get_result('cerebras:llama3.1-8b') is result

    def test_best(self):
        self.board.record(snapshot('a', RATE_LIMITED))
        self.board.record(snapshot('b', SUCCESS))
        assert self.board.best().key == 'groq:b'

    def test_set_visible(self):
        self.board.set_visible(['groq:b'])
        assert [r.key for r in self.board.get_results()] == ['groq:b']
        assert len(self.board.get_results(include_hidden=True)) == 2

    def test_sorted(self):
        self.board.record(snapshot('a', SUCCESS))
        self.board.record(snapshot('b', ProbeOutcome(status=ProbeStatus.SUCCESS, latency_ms=50,
                                                     http_status=200)))
        assert [r.key for r in self.board.sorted('avg')] == ['groq:b', 'groq:a']
        assert [r.key for r in self.board.sorted('tier')] == ['groq:a', 'groq:b']

    def test_to_rows(self):
        self.board.record(snapshot('a', SUCCESS))
        rows = self.board.to_rows()

        assert rows[0]['model'] == 'a'
        assert rows[0]['ping'] == 150
        assert rows[0]['avg'] == 150
        assert rows[0]['uptime'] == 100
        assert rows[0]['condition'] == 'up'
        assert rows[0]['verdict'] == 'Perfect'
        assert rows[1]['avg'] is None
        assert rows[1]['verdict'] == 'Pending'

    @pytest.mark.asyncio
    async def test_attach_to_monitor_loop(self):
        """测试订阅监控循环"""

        class Prober:
            async def probe(self, target, timeout=None, cancel_event=None):
                return SUCCESS

        targets = [Target('groq', 'a', 'https://example.com', 'key')]
        loop = MonitorLoop(lambda: targets, prober=Prober(), interval=60)
        unsubscribe = self.board.attach(loop)

        await loop.run_once()
        assert self.board.get_result('groq:a').status is ModelStatus.UP

        unsubscribe()
        await loop.run_once()
        assert len(self.board.get_result('groq:a').pings) == 1
