import io
import logging
import unittest
from unittest.mock import patch

from fnclient.utils.logger import (
    HANDLER_NAME,
    PACKAGE_LOGGER,
    configure_logging,
    get_logger,
    resolve_level,
)


class LoggerTests(unittest.TestCase):
    def setUp(self) -> None:
        package = logging.getLogger(PACKAGE_LOGGER)
        self.addCleanup(setattr, package, "handlers", list(package.handlers))
        self.addCleanup(package.setLevel, package.level)
        root = logging.getLogger()
        self.addCleanup(setattr, root, "handlers", list(root.handlers))

    def console_handlers(self):
        return [
            h for h in logging.getLogger(PACKAGE_LOGGER).handlers if h.get_name() == HANDLER_NAME
        ]

    def test_resolve_level_names_and_numbers(self) -> None:
        self.assertEqual(resolve_level("debug"), logging.DEBUG)
        self.assertEqual(resolve_level(" Warning "), logging.WARNING)
        self.assertEqual(resolve_level(logging.ERROR), logging.ERROR)
        self.assertEqual(resolve_level("chatty"), logging.INFO)

    def test_resolve_level_reads_environment(self) -> None:
        with patch.dict("os.environ", {"FN_LOG_LEVEL": "error"}):
            self.assertEqual(resolve_level(None), logging.ERROR)

    def test_configure_twice_keeps_one_console_handler(self) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")
        self.assertEqual(len(self.console_handlers()), 1)
        self.assertEqual(logging.getLogger(PACKAGE_LOGGER).level, logging.DEBUG)

    def test_root_handlers_are_left_alone(self) -> None:
        marker = logging.NullHandler()
        logging.getLogger().addHandler(marker)
        configure_logging("INFO")
        self.assertIn(marker, logging.getLogger().handlers)

    def test_records_include_thread_name(self) -> None:
        stream = io.StringIO()
        configure_logging("INFO", stream=stream)
        get_logger("fnclient.tests").info("hello")
        line = stream.getvalue()
        self.assertIn("fnclient.tests [MainThread] | hello", line)

    def test_names_outside_package_are_namespaced(self) -> None:
        self.assertEqual(get_logger("tools").name, "fnclient.tools")
        self.assertEqual(get_logger().name, PACKAGE_LOGGER)
        self.assertEqual(get_logger("fnclient.io").name, "fnclient.io")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
