# tests/test_config.py

import os
import tempfile
import unittest

from backend.config import DEFAULTS, load_config
from backend.errors import ConfigError


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, text):
        path = os.path.join(self.tmp.name, "game_config.yaml")
        with open(path, "w") as f:
            f.write(text)
        return path

    def test_missing_file_gives_defaults(self):
        config = load_config(os.path.join(self.tmp.name, "absent.yaml"))
        self.assertEqual(config, DEFAULTS)
        self.assertIsNot(config["server"], DEFAULTS["server"])

    def test_sections_are_merged(self):
        path = self._write("server:\n  port: 8080\nleaderboard:\n  limit: 5\n")
        config = load_config(path)
        self.assertEqual(config["server"]["port"], 8080)
        self.assertEqual(config["server"]["host"], DEFAULTS["server"]["host"])
        self.assertEqual(config["leaderboard"]["limit"], 5)
        self.assertEqual(config["defaults"]["difficulty"], "easy")

    def test_bad_section(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("server: 8080\n"))

    def test_not_a_mapping(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("- a\n- b\n"))

    def test_shipped_config(self):
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        config = load_config(os.path.join(root, "config", "game_config.yaml"))
        self.assertEqual(config["leaderboard"]["limit"], 10)


if __name__ == "__main__":
    unittest.main()
