"""
Tests for ChatBoard Maintenance Module

Tests offline retention runs and statistics.
"""

from chatboard.config import Config
from chatboard.core.board import MessageBoard
from chatboard.core.maintenance import MaintenanceManager


class MockBoard(MessageBoard):
    """Board over an in-memory database with a small retention limit."""

    def __init__(self, retention_limit=3):
        config = Config()
        config.database.path = ":memory:"
        config.limits.retention_limit = retention_limit
        super().__init__(config)
        self.setup()


class TestRetention:
    """Tests for offline retention runs."""

    def setup_method(self):
        self.board = MockBoard()
        self.maintenance = MaintenanceManager(self.board)
        self.repo = self.maintenance.message_repo

    def teardown_method(self):
        self.board.close()

    def test_run_retention(self):
        """Rows inserted behind the service's back are pruned."""
        for i in range(6):
            self.repo.insert_message("1.1.1.1", "anonymous", f"m{i}", timestamp=100 + i)

        deleted = self.maintenance.run_retention()

        assert deleted == 3
        assert [m.body for m in self.repo.recent_messages(10)] == ["m3", "m4", "m5"]

    def test_run_retention_under_limit(self):
        self.repo.insert_message("1.1.1.1", "anonymous", "only")

        assert self.maintenance.run_retention() == 0
        assert self.repo.count_messages() == 1


class TestStatistics:
    """Tests for statistics collection."""

    def setup_method(self):
        self.board = MockBoard()
        self.maintenance = MaintenanceManager(self.board)

    def teardown_method(self):
        self.board.close()

    def test_empty_stats(self):
        stats = self.maintenance.get_stats()

        assert stats["messages"] == 0
        assert stats["accounts"] == 0
        assert stats["retention_limit"] == 3
        assert stats["oldest"] == "Never"
        assert stats["newest"] == "Never"

    def test_stats_with_data(self):
        self.board.account_service.register("alice", "secret")
        repo = self.maintenance.message_repo
        repo.insert_message("1.1.1.1", "alice", "a", timestamp=0)
        repo.insert_message("1.1.1.1", "alice", "b", timestamp=86400)

        stats = self.maintenance.get_stats()

        assert stats["messages"] == 2
        assert stats["accounts"] == 1
        assert stats["oldest"] == "1970-01-01T00:00:00Z"
        assert stats["newest"] == "1970-01-02T00:00:00Z"
