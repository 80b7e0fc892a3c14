import unittest
import logging
from monospline.log_config import (
    setup_logger,
    set_package_log_level,
    package_log_level,
    package_loggers,
    resolve_level,
)

class TestLogConfig(unittest.TestCase):
    def tearDown(self):
        set_package_log_level("WARNING")

    def test_single_handler(self):
        logger = setup_logger("monospline.tests.single")
        setup_logger("monospline.tests.single")
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.WARNING)
        self.assertFalse(logger.propagate)

    def test_force_replaces_handler(self):
        logger = setup_logger("monospline.tests.force")
        first = logger.handlers[0]
        setup_logger("monospline.tests.force", level=logging.DEBUG, force=True)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsNot(logger.handlers[0], first)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_set_package_log_level(self):
        import monospline.optimizer.convex
        set_package_log_level("debug")
        self.assertEqual(logging.getLogger("monospline.optimizer.convex").level, logging.DEBUG)
        set_package_log_level(logging.ERROR)
        self.assertEqual(logging.getLogger("monospline.model.monotonic_spline").level, logging.ERROR)
        # loggers outside the package are untouched
        other = logging.getLogger("another_package")
        other.setLevel(logging.INFO)
        set_package_log_level("DEBUG")
        self.assertEqual(other.level, logging.INFO)

    def test_fit_logs_at_debug(self):
        import numpy as np
        from monospline import MonotonicSplineInterpolator
        set_package_log_level("DEBUG")
        logger = logging.getLogger("monospline.model.monotonic_spline")
        with self.assertLogs(logger, level="DEBUG") as captured:
            MonotonicSplineInterpolator().fit(np.arange(1.0, 10.0), np.linspace(0.0, 1.0, 9))
        self.assertTrue(any("Fitting 9 points" in line for line in captured.output))
        self.assertTrue(any("completed in" in line for line in captured.output))

    def test_resolve_level(self):
        self.assertEqual(resolve_level("info"), logging.INFO)
        self.assertEqual(resolve_level("nonsense"), logging.WARNING)
        self.assertEqual(resolve_level(logging.ERROR), logging.ERROR)
        self.assertEqual(setup_logger("monospline.tests.named", level="DEBUG").level, logging.DEBUG)

    def test_package_loggers_namespace(self):
        setup_logger("monospline.tests.member")
        logging.getLogger("monosplineextra.module")
        names = {logger.name for logger in package_loggers()}
        self.assertIn("monospline", names)
        self.assertIn("monospline.tests.member", names)
        self.assertNotIn("monosplineextra.module", names)

    def test_package_log_level_restores(self):
        import numpy as np
        from monospline import MonotonicSplineInterpolator
        logger = logging.getLogger("monospline.optimizer.convex")
        logger.setLevel(logging.ERROR)
        with package_log_level("DEBUG"):
            self.assertEqual(logger.level, logging.DEBUG)
            with self.assertLogs(logger, level="DEBUG") as captured:
                MonotonicSplineInterpolator().fit(np.arange(1.0, 10.0), np.linspace(0.0, 1.0, 9))
            self.assertTrue(any("Phase-1 margin" in line for line in captured.output))
        self.assertEqual(logger.level, logging.ERROR)
