"""测试统计指标"""

import math

import pytest

from modelsfree.models.ping import ModelResult, ModelStatus, PingResult, Verdict
from modelsfree.services.metrics import (
    filter_by_provider, filter_by_tier, find_best_model, get_avg, get_last_ping_ms,
    get_uptime, get_verdict, sort_results
)


def make_result(model_id='m', tier='A', pings=None, status=ModelStatus.UP,
                http_code=None, provider_key='groq', idx=1, label=None,
                swe_score='40.0%', ctx='128k'):
    result = ModelResult(idx, model_id, label or model_id, tier, swe_score, ctx, provider_key)
    result.pings = pings or []
    result.status = status
    result.http_code = http_code
    return result


class TestAverages:
    """测试平均延迟和可用率"""

    def test_avg_uses_successful_pings_only(self):
        result = make_result(pings=[PingResult(100, '200'), PingResult(None, '500'),
                                    PingResult(301, '200')])
        assert get_avg(result) == 200

    def test_avg_without_success(self):
        result = make_result(pings=[PingResult(None, '000')])
        assert get_avg(result) == math.inf
        assert get_avg(make_result()) == math.inf

    def test_uptime(self):
        result = make_result(pings=[PingResult(100, '200'), PingResult(None, '429'),
                                    PingResult(None, '000')])
        assert get_uptime(result) == 33
        assert get_uptime(make_result()) == 0

    def test_last_ping(self):
        result = make_result(pings=[PingResult(100, '200'), PingResult(150, '200')])
        assert get_last_ping_ms(result) == 150

        result.pings.append(PingResult(None, 'ERR'))
        assert get_last_ping_ms(result) == math.inf


class TestVerdict:
    """测试结论判断"""

    @pytest.mark.parametrize('latency, expected', [
        (100, Verdict.PERFECT),
        (399, Verdict.PERFECT),
        (400, Verdict.NORMAL),
        (999, Verdict.NORMAL),
        (2000, Verdict.SLOW),
        (4000, Verdict.VERY_SLOW),
        (6000, Verdict.UNSTABLE),
    ])
    def test_by_latency(self, latency, expected):
        result = make_result(pings=[PingResult(latency, '200')])
        assert get_verdict(result) is expected

    def test_overloaded(self):
        """测试429优先"""
        result = make_result(pings=[PingResult(100, '200'), PingResult(None, '429')],
                             status=ModelStatus.DOWN, http_code='429')
        assert get_verdict(result) is Verdict.OVERLOADED

    def test_unstable_after_success(self):
        result = make_result(pings=[PingResult(100, '200'), PingResult(None, '000')],
                             status=ModelStatus.TIMEOUT, http_code='000')
        assert get_verdict(result) is Verdict.UNSTABLE

    def test_not_active(self):
        result = make_result(pings=[PingResult(None, '500')], status=ModelStatus.DOWN,
                             http_code='500')
        assert get_verdict(result) is Verdict.NOT_ACTIVE

    def test_pending(self):
        assert get_verdict(make_result(status=ModelStatus.PENDING)) is Verdict.PENDING
        assert get_verdict(make_result(status=ModelStatus.NOAUTH)) is Verdict.PENDING


class TestSortResults:
    """测试结果排序"""

    def setup_method(self):
        self.fast = make_result('fast', tier='B', pings=[PingResult(100, '200')], idx=2,
                                swe_score='20.0%', ctx='32k')
        self.slow = make_result('slow', tier='S+', pings=[PingResult(900, '200')], idx=1,
                                swe_score='70.0%', ctx='1M')
        self.down = make_result('down', tier='A', pings=[PingResult(None, '500')],
                                status=ModelStatus.DOWN, idx=3)
        self.results = [self.slow, self.fast, self.down]

    def test_sort_by_avg(self):
        """测试没有成功记录的排在最后"""
        assert sort_results(self.results, 'avg') == [self.fast, self.slow, self.down]

    def test_sort_by_tier(self):
        assert sort_results(self.results, 'tier') == [self.slow, self.down, self.fast]

    def test_sort_by_rank_descending(self):
        assert sort_results(self.results, 'rank', descending=True) == [
            self.down, self.fast, self.slow]

    def test_sort_by_swe_and_ctx(self):
        assert sort_results(self.results, 'swe')[0] is self.fast
        assert sort_results(self.results, 'ctx', descending=True)[0] is self.slow

    def test_sort_by_verdict(self):
        assert sort_results(self.results, 'verdict')[0] is self.fast

    def test_invalid_column(self):
        with pytest.raises(ValueError):
            sort_results(self.results, 'price')


class TestFilters:
    """测试结果过滤"""

    def test_filter_by_tier(self):
        results = [make_result('a', tier='A+'), make_result('b', tier='A-'),
                   make_result('c', tier='B')]
        assert [r.model_id for r in filter_by_tier(results, 'a')] == ['a', 'b']
        assert filter_by_tier(results, 'X') is None

    def test_filter_by_provider(self):
        results = [make_result('a'), make_result('b', provider_key='cerebras')]
        assert [r.model_id for r in filter_by_provider(results, 'cerebras')] == ['b']


class TestFindBestModel:
    """测试最佳模型选择"""

    def test_prefers_up_and_fast(self):
        fast_down = make_result('fast-down', pings=[PingResult(50, '200'), PingResult(None, '500')],
                                status=ModelStatus.DOWN)
        slow_up = make_result('slow-up', pings=[PingResult(800, '200')])
        fast_up = make_result('fast-up', pings=[PingResult(200, '200')])

        assert find_best_model([fast_down, slow_up, fast_up]) is fast_up

    def test_uptime_breaks_ties(self):
        flaky = make_result('flaky', pings=[PingResult(200, '200'), PingResult(None, '000'),
                                            PingResult(200, '200')])
        steady = make_result('steady', pings=[PingResult(200, '200')])
        assert find_best_model([flaky, steady]) is steady

    def test_empty(self):
        assert find_best_model([]) is None
