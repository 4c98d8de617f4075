import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from judgeview.config import BrowserConfig, load_config
from judgeview.fetch import HttpFetcher
from judgeview.session import BrowserSession


class ConfigTests(unittest.TestCase):
    def test_load_yaml_with_overrides(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "cfg.yaml"
            p.write_text(
                "source: data\ndatasets: [a, b]\njudgements: ['1']\nstrict: false\n",
                encoding="utf-8",
            )
            cfg = load_config(p, {"strict": True, "source": None})
        self.assertEqual(cfg.source, "data")
        self.assertTrue(cfg.strict)
        self.assertEqual(cfg.judgements, ["1"])
        self.assertIsNone(cfg.strata)
        self.assertEqual(cfg.resolve_dataset(None), "a")
        self.assertEqual(cfg.resolve_dataset("b"), "b")

    def test_defaults_without_file(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop("JUDGEVIEW_SOURCE", None)
            os.environ.pop("JUDGEVIEW_DATASET", None)
            cfg = load_config()
        self.assertEqual(cfg.source, ".")
        self.assertEqual(cfg.query_file_template, "{dataset}.tsv")
        self.assertEqual(cfg.result_file_template, "{dataset}_result.tsv")
        with self.assertRaises(ValueError):
            cfg.resolve_dataset(None)

    def test_environment_defaults(self) -> None:
        env = {"JUDGEVIEW_SOURCE": "http://localhost:8000", "JUDGEVIEW_DATASET": "avs"}
        with mock.patch.dict(os.environ, env):
            cfg = BrowserConfig()
        self.assertEqual(cfg.resolve_dataset(None), "avs")
        self.assertIsInstance(BrowserSession.from_config(cfg).fetcher, HttpFetcher)

    def test_template_needs_dataset_slot(self) -> None:
        with self.assertRaises(ValidationError):
            BrowserConfig(result_file_template="results.tsv")

    def test_missing_config_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/judgeview.yaml")


if __name__ == "__main__":
    unittest.main()
