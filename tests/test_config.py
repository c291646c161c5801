import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from tutorschedule.config import SchedulerConfig, load_config
from tutorschedule.shift import DEFAULT_TAG_DELIMITERS


def _clean_env() -> dict:
    return {k: v for k, v in os.environ.items() if not k.startswith("TUTORSCHEDULE_")}


class TestConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as d, mock.patch.dict(os.environ, _clean_env(), clear=True):
            config = load_config(Path(d) / "missing.env")
        self.assertEqual(config.match_threshold, 0.9)
        self.assertEqual(config.tag_delimiters, DEFAULT_TAG_DELIMITERS)
        self.assertFalse(config.merge_touching)
        self.assertIsNone(config.access_token)
        self.assertEqual(config.raw_dir, config.data_dir / "raw")

    def test_env_file(self) -> None:
        with tempfile.TemporaryDirectory() as d, mock.patch.dict(os.environ, _clean_env(), clear=True):
            env = Path(d) / ".env"
            env.write_text(
                "TUTORSCHEDULE_MATCH_THRESHOLD=0.8\n"
                "TUTORSCHEDULE_TAG_DELIMITERS='| ;'\n"
                "TUTORSCHEDULE_MERGE_TOUCHING=yes\n"
                f"TUTORSCHEDULE_DATA_DIR={d}\n"
                "TUTORSCHEDULE_ACCESS_TOKEN=abc\n",
                encoding="utf-8",
            )
            config = load_config(env)

            self.assertEqual(config.match_threshold, 0.8)
            self.assertEqual(config.tag_delimiters, ("|", ";"))
            self.assertTrue(config.merge_touching)
            self.assertEqual(config.data_dir, Path(d).resolve())
            self.assertEqual(config.catalog_path, Path(d).resolve() / "courseCatalog.csv")
            self.assertEqual(config.access_token, "abc")

    def test_invalid_values(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            missing = Path(d) / "missing.env"
            for key, value in [("MATCH_THRESHOLD", "high"), ("MATCH_THRESHOLD", "1.5"), ("MERGE_TOUCHING", "maybe")]:
                env = _clean_env()
                env[f"TUTORSCHEDULE_{key}"] = value
                with mock.patch.dict(os.environ, env, clear=True):
                    with self.assertRaises(ValueError):
                        load_config(missing)

    def test_threshold_range(self) -> None:
        with self.assertRaises(ValueError):
            SchedulerConfig(match_threshold=1.0)


if __name__ == "__main__":
    unittest.main()
