from __future__ import annotations

import json
import re
import subprocess
import sys
import unittest
from pathlib import Path


def run_script(root: Path, *args: str) -> subprocess.CompletedProcess:
    result = subprocess.run(
        [sys.executable, *args],
        cwd=root,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"{args[0]} failed:\n{result.stdout}\n{result.stderr}")
    return result


class TestScriptOutput(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.root = Path(__file__).resolve().parents[1]

    def test_replay_lifecycle_prints_only_json(self) -> None:
        result = run_script(self.root, "scripts/replay_lifecycle.py")
        payload = json.loads(result.stdout)

        serials = sorted(item["serial_number"] for item in payload["incidents"])
        self.assertEqual(serials, ["BDM-VT0001", "BDM-VT0002"])
        self.assertEqual(payload["summary"]["counts"]["total"], 2)
        self.assertIn("incident created", result.stderr)

    def test_incident_snapshot_prints_only_json(self) -> None:
        result = run_script(self.root, "scripts/incident_snapshot.py", "--top", "3", "--codes")
        payload = json.loads(result.stdout)

        self.assertEqual(payload["counts"]["total"], 20)
        self.assertEqual(len(payload["top_media_platforms"]), 3)
        self.assertTrue(payload["category_codes"])


class TestPackaging(unittest.TestCase):
    def test_long_description_is_a_readme(self) -> None:
        root = Path(__file__).resolve().parents[1]
        text = (root / "pyproject.toml").read_text(encoding="utf-8")
        for name in re.findall(r'^readme\s*=\s*"([^"]+)"', text, flags=re.MULTILINE):
            self.assertTrue(Path(name).name.upper().startswith("README"), f"not a readme: {name}")
            self.assertTrue((root / name).exists(), f"missing readme: {name}")
        self.assertIn('name = "mediascope"', text)


if __name__ == "__main__":
    unittest.main()
