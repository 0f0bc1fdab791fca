"""测试状态表"""

from modelsfree.models.ping import ProbeOutcome, ProbeStatus, Target
from modelsfree.services.status_store import StatusStore


def success(latency_ms):
    return ProbeOutcome(status=ProbeStatus.SUCCESS, latency_ms=latency_ms, http_status=200)


class TestStatusStore:
    """测试状态表"""

    def setup_method(self):
        self.store = StatusStore()
        self.target = Target('groq', 'a', 'https://example.com', 'key')

    def test_update_and_get(self):
        snapshot = self.store.update(self.target, success(120))

        assert self.store.get('groq:a') is snapshot
        assert 'groq:a' in self.store
        assert len(self.store) == 1
        assert self.store.last_updated == snapshot.last_checked

    def test_latest_result_wins(self):
        """测试只保留最新结果"""
        self.store.update(self.target, success(120))
        timeout = ProbeOutcome(status=ProbeStatus.TIMEOUT, message='Request timed out')
        self.store.update(self.target, timeout)

        assert len(self.store) == 1
        assert self.store.get('groq:a').status is ProbeStatus.TIMEOUT

    def test_get_missing(self):
        assert self.store.get('groq:missing') is None
        assert 'groq:missing' not in self.store

    def test_get_all_returns_copy(self):
        self.store.update(self.target, success(120))
        snapshots = self.store.get_all()
        snapshots.clear()
        assert len(self.store) == 1

    def test_clear(self):
        self.store.update(self.target, success(120))
        self.store.clear()
        assert len(self.store) == 0
        assert self.store.last_updated is None

    def test_stats(self):
        other = Target('groq', 'b', 'https://example.com', 'key')
        third = Target('groq', 'c', 'https://example.com')
        self.store.update(self.target, success(100))
        self.store.update(other, success(300))
        self.store.update(third, ProbeOutcome.missing_credential())

        stats = self.store.get_stats()
        assert stats['total_targets'] == 3
        assert stats['status_counts']['success'] == 2
        assert stats['status_counts']['missing-credential'] == 1
        assert 'cancelled' not in stats['status_counts']
        assert stats['avg_latency_ms'] == 200
        assert stats['last_updated'] is not None

    def test_stats_empty(self):
        stats = self.store.get_stats()
        assert stats['total_targets'] == 0
        assert stats['avg_latency_ms'] is None
        assert stats['last_updated'] is None
