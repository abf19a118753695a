import json
import os
import tempfile
import unittest

from plan_fixtures import plan_json
from typer.testing import CliRunner

from roomoffset.cli import app


class CLITests(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.tmp = tempfile.TemporaryDirectory()
        self.plan = os.path.join(self.tmp.name, "plan.json")
        with open(self.plan, "w", encoding="utf-8") as f:
            json.dump(plan_json(), f)

    def tearDown(self):
        self.tmp.cleanup()

    def test_offset(self):
        out = os.path.join(self.tmp.name, "result.json")
        result = self.runner.invoke(app, ["offset", "--plan", self.plan, "--space", "101", "--out", out])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("121.00", result.output)
        with open(out, encoding="utf-8") as f:
            self.assertAlmostEqual(json.load(f)["area_difference"], 21.0, places=9)

    def test_offset_without_boundary(self):
        result = self.runner.invoke(app, ["offset", "--plan", self.plan, "--space", "999"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("no boundary segments", result.output)

    def test_offset_missing_plan(self):
        missing = os.path.join(self.tmp.name, "missing.json")
        result = self.runner.invoke(app, ["offset", "--plan", missing, "--space", "101"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("File not found", result.output)

    def test_batch(self):
        out = os.path.join(self.tmp.name, "batch.json")
        result = self.runner.invoke(app, ["batch", "--plan", self.plan, "--out", out, "--workers", "2"])
        self.assertEqual(result.exit_code, 0, result.output)
        with open(out, encoding="utf-8") as f:
            saved = json.load(f)
        self.assertEqual(saved["success_count"], 1)
        self.assertEqual(saved["fail_count"], 1)

    def test_batch_without_matches(self):
        result = self.runner.invoke(app, ["batch", "--plan", self.plan, "--filter", "KITCHEN"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No rooms found", result.output)

    def test_separation_lines(self):
        out = os.path.join(self.tmp.name, "lines.json")
        result = self.runner.invoke(
            app, ["separation-lines", "--plan", self.plan, "--space", "101", "--out", out]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        with open(out, encoding="utf-8") as f:
            # every wall of the office is exterior, so there is no hallway line
            self.assertEqual(json.load(f)["line_count"], 0)


if __name__ == "__main__":
    unittest.main()
