"""Unit tests for app.services.activity_log.ActivityLogWriter."""

import unittest
from unittest.mock import MagicMock

from app.services.activity_log import ActivityLogWriter
from tests.fakes import FakeClock, InMemoryUnitOfWork


class TestActivityLogWriter(unittest.TestCase):
    def test_append_writes_timestamped_record_and_commits(self) -> None:
        uow = InMemoryUnitOfWork()
        clock = FakeClock()
        writer = ActivityLogWriter(uow, clock=clock)
        self.assertTrue(writer.append("acc-1", "logged in"))
        [record] = uow.activities.list_for_account("acc-1")
        self.assertEqual(record.activity, "logged in")
        self.assertEqual(record.occurred_at, clock.now)
        self.assertEqual(uow.commits, 1)

    def test_failed_write_is_rolled_back_and_reported(self) -> None:
        uow = MagicMock()
        uow.commit.side_effect = RuntimeError("disk full")
        writer = ActivityLogWriter(uow)
        with self.assertLogs("app.services.activity_log", level="WARNING") as logs:
            self.assertFalse(writer.append("acc-1", "registered"))
        uow.rollback.assert_called_once()
        self.assertIn("Activity log write failed", logs.output[0])


if __name__ == "__main__":
    unittest.main()
