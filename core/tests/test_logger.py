"""
core/tests/test_logger.py

The SQLite logger singleton writes to the test logging database configured
by the root conftest.
"""
from __future__ import annotations

import unittest
import uuid

from core.config.config_service import config_service
from core.logging.logic.logger import Logger, logger


class TestLogger(unittest.TestCase):
    def setUp(self) -> None:
        self.ref = f"ref-{uuid.uuid4().hex[:8]}"

    def test_singleton(self) -> None:
        self.assertIs(Logger(), logger)
        self.assertEqual(logger.db_path, config_service.database.logging)

    def test_log_and_query(self) -> None:
        entry = logger.log("TestFeature", "Something", user_id=7, reference_id=self.ref, message="hello")
        self.assertIsNotNone(entry.id)
        found = logger.query_logs(reference_id=self.ref)
        self.assertEqual(len(found), 1)
        self.assertEqual(found[0].event, "Something")
        self.assertEqual(found[0].user_id, 7)
        self.assertEqual(found[0].log_level, "INFO")
        self.assertEqual(found[0].username, "unknown")

    def test_level_is_normalized_and_filtered(self) -> None:
        logger.log("TestFeature", "Careful", level="warning", reference_id=self.ref)
        logger.log("TestFeature", "Fine", reference_id=self.ref)
        warnings = logger.query_logs(reference_id=self.ref, level="WARNING")
        self.assertEqual([e.event for e in warnings], ["Careful"])

    def test_unknown_level_rejected(self) -> None:
        with self.assertRaises(ValueError):
            logger.log("TestFeature", "Bad", level="LOUD")

    def test_as_dict_contains_local_time(self) -> None:
        entry = logger.log("TestFeature", "Dict", reference_id=self.ref)
        data = entry.as_dict()
        self.assertIn("timestamp_utc", data)
        self.assertRegex(data["timestamp"], r"^\d{4}\.\d{2}\.\d{2} \d{2}:\d{2}:\d{2}$")
        self.assertEqual(data["reference_id"], self.ref)


if __name__ == "__main__":
    unittest.main()
