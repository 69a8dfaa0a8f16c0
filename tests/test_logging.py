import logging
import tempfile
import unittest
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from layered_config.logging import init_logging
from layered_config.models import FileLoggingSettings, FileRotationSettings, LoggingSettings


class InitLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        root = logging.getLogger()
        saved_handlers = list(root.handlers)
        saved_level = root.level
        for handler in saved_handlers:
            root.removeHandler(handler)

        def restore() -> None:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

        self.addCleanup(restore)

    def test_console_only_by_default(self) -> None:
        init_logging(LoggingSettings(level="ERROR"))
        root = logging.getLogger()
        self.assertEqual(root.level, logging.ERROR)
        self.assertEqual(len(root.handlers), 1)

    def test_rotating_file_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "app.log"
            settings = LoggingSettings(
                level="DEBUG",
                file=FileLoggingSettings(path=str(log_path), rotation=FileRotationSettings(backup_count=2)),
            )
            init_logging(settings)
            logging.getLogger("layered_config.test").debug("hello")

            file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, TimedRotatingFileHandler)]
            self.assertEqual(len(file_handlers), 1)
            self.assertEqual(file_handlers[0].backupCount, 2)
            file_handlers[0].flush()
            self.assertIn("hello", log_path.read_text(encoding="utf-8"))

            for handler in list(logging.getLogger().handlers):
                logging.getLogger().removeHandler(handler)
                handler.close()


if __name__ == "__main__":
    unittest.main()
