import os
import unittest
from unittest.mock import patch

import simpleremote.config as config


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self):
        """Prepare test preconditions for each test case."""
        self._state = {
            "ECP_PORT": config.ECP_PORT,
            "DEVICE_INFO_TIMEOUT_S": config.DEVICE_INFO_TIMEOUT_S,
            "RECONNECT_TIMEOUT_S": config.RECONNECT_TIMEOUT_S,
            "DEBUG": config.DEBUG,
            "CONSOLE_LOG": config.CONSOLE_LOG,
            "LOG_ENABLED": config.LOG_ENABLED,
            "DATA_DIR": config.DATA_DIR,
            "PREFS_FILE": config.PREFS_FILE,
            "LOG_FILE": config.LOG_FILE,
        }

    def tearDown(self):
        """Clean up resources created by each test case."""
        for key, value in self._state.items():
            setattr(config, key, value)

    def test_env_float_rejects_bad_and_non_positive_values(self):
        """Validate scenario: invalid timeouts fall back to defaults."""
        with patch.dict(os.environ, {"X_T": "abc"}):
            self.assertEqual(config._env_float("X_T", 3.0), 3.0)
        with patch.dict(os.environ, {"X_T": "-1"}):
            self.assertEqual(config._env_float("X_T", 3.0), 3.0)
        with patch.dict(os.environ, {"X_T": " 1.5 "}):
            self.assertEqual(config._env_float("X_T", 3.0), 1.5)

    def test_reload_from_env_updates_runtime_values(self):
        """Validate scenario: reload picks up ports, timeouts, paths and log flags."""
        env = {
            "SIMPLEREMOTE_ECP_PORT": "9000",
            "SIMPLEREMOTE_DEVICE_INFO_TIMEOUT_S": "2.5",
            "SIMPLEREMOTE_RECONNECT_TIMEOUT_S": "4",
            "SIMPLEREMOTE_DEBUG": "1",
            "SIMPLEREMOTE_CONSOLE": "1",
            "SIMPLEREMOTE_LOG": "0",
            "SIMPLEREMOTE_DATA_DIR": os.path.join(os.sep, "tmp", "sr-data"),
            "SIMPLEREMOTE_PREFS_FILE": "",
        }
        with patch.dict(os.environ, env, clear=False):
            config.reload_from_env()

        self.assertEqual(config.ECP_PORT, 9000)
        self.assertEqual(config.DEVICE_INFO_TIMEOUT_S, 2.5)
        self.assertEqual(config.RECONNECT_TIMEOUT_S, 4.0)
        self.assertTrue(config.DEBUG)
        self.assertTrue(config.CONSOLE_LOG)
        self.assertTrue(config.LOG_ENABLED)
        self.assertEqual(config.PREFS_FILE, os.path.join(os.sep, "tmp", "sr-data", "simpleremote_prefs.json"))
        self.assertEqual(config.LOG_FILE, os.path.join(os.sep, "tmp", "sr-data", "simpleremote.log"))

    def test_explicit_prefs_file_wins(self):
        """Validate scenario: SIMPLEREMOTE_PREFS_FILE overrides the data dir default."""
        target = os.path.join(os.sep, "tmp", "custom-prefs.json")
        with patch.dict(os.environ, {"SIMPLEREMOTE_PREFS_FILE": target}, clear=False):
            config.reload_from_env()
        self.assertEqual(config.PREFS_FILE, target)


if __name__ == "__main__":
    unittest.main()
