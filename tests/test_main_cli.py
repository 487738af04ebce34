import io
import json
import shutil
import unittest
import uuid
from contextlib import redirect_stdout
from pathlib import Path

from app.justifiedgrid.main import load_images, main, rows_to_dicts

ROOT = Path(__file__).resolve().parents[1]
SAMPLE_MANIFEST = ROOT / "data" / "sample_images.json"


def run_cli(*argv: str) -> tuple[int, str]:
    buf = io.StringIO()
    with redirect_stdout(buf):
        code = main(list(argv))
    return code, buf.getvalue()


class TestMainCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_path = Path(".tmp-tests-cli-" + str(uuid.uuid4())[:8])
        self.tmp_path.mkdir(exist_ok=True, parents=True)
        self.manifest = self.tmp_path / "three.json"
        self.manifest.write_text(
            json.dumps(
                [
                    {"id": "a", "src": "a.jpg", "width": 400, "height": 300},
                    {"id": "b", "src": "b.jpg", "width": 300, "height": 300},
                    {"id": "c", "src": "c.jpg", "width": 500, "height": 250},
                ]
            ),
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp_path, ignore_errors=True)

    def test_json_output(self):
        code, out = run_cli("--manifest", str(self.manifest), "--width", "860", "--json")
        self.assertEqual(code, 0)
        rows = json.loads(out)
        self.assertEqual([[i["id"] for i in r["images"]] for r in rows], [["a", "b"], ["c"]])
        self.assertEqual(rows[0]["images"][0], {"id": "a", "src": "a.jpg", "width": 488, "height": 366})

    def test_summary_output(self):
        code, out = run_cli("--manifest", str(self.manifest), "--width", "860", "--gutter", "5")
        self.assertEqual(code, 0)
        self.assertIn("Rows: 2", out)
        self.assertIn("row 0: 2 images", out)

    def test_html_output(self):
        target = self.tmp_path / "site" / "grid.html"
        code, _ = run_cli("--manifest", str(self.manifest), "--width", "860", "--html", str(target))
        self.assertEqual(code, 0)
        self.assertIn("<ul", target.read_text(encoding="utf-8"))

    def test_errors_return_nonzero(self):
        code, out = run_cli("--manifest", str(self.tmp_path / "missing.json"), "--width", "860")
        self.assertEqual(code, 1)
        self.assertIn("Error:", out)

        code, _ = run_cli("--manifest", str(self.manifest), "--width", "860", "--min-row-height", "900")
        self.assertEqual(code, 1)

    def test_strict_flag(self):
        self.manifest.write_text(
            json.dumps([{"id": "z", "src": "z.jpg", "width": 0, "height": 10}]), encoding="utf-8"
        )
        code, _ = run_cli("--manifest", str(self.manifest), "--width", "860", "--strict")
        self.assertEqual(code, 1)

    def test_sample_data_lays_out_every_image(self):
        images = load_images(str(SAMPLE_MANIFEST))
        code, out = run_cli("--manifest", str(SAMPLE_MANIFEST), "--width", "1200", "--json")
        self.assertEqual(code, 0)
        ids = [i["id"] for r in json.loads(out) for i in r["images"]]
        self.assertEqual(ids, [i.id for i in images])

    def test_rows_to_dicts_empty(self):
        self.assertEqual(rows_to_dicts([]), [])


if __name__ == "__main__":
    unittest.main()
