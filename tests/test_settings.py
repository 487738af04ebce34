import unittest

from app.justifiedgrid.errors import InvalidConfigError
from app.justifiedgrid.settings import DEFAULT_SETTINGS, GridSettings


class TestGridSettings(unittest.TestCase):
    def test_defaults(self):
        s = DEFAULT_SETTINGS
        self.assertEqual((s.min_row_height, s.max_row_height, s.gutter, s.debounce_ms), (150, 400, 5, 300))
        self.assertAlmostEqual(s.debounce_s, 0.3)

    def test_overrides_ignore_none(self):
        s = DEFAULT_SETTINGS.with_overrides(min_row_height=None, gutter=10)
        self.assertEqual((s.min_row_height, s.gutter), (150, 10))
        self.assertEqual(DEFAULT_SETTINGS.gutter, 5)

    def test_layout_config(self):
        config = GridSettings(min_row_height=100, max_row_height=200, gutter=2).layout_config(640)
        self.assertEqual(
            (config.container_width, config.min_row_height, config.max_row_height, config.gutter),
            (640, 100, 200, 2),
        )

    def test_invalid(self):
        with self.assertRaises(InvalidConfigError):
            DEFAULT_SETTINGS.with_overrides(min_row_height=500)
        with self.assertRaises(ValueError):
            GridSettings(debounce_ms=-1)


if __name__ == "__main__":
    unittest.main()
