import unittest

from news_digest import themes
from news_digest.datamodels import DARK, LIGHT


class TestColorSchemeDetection(unittest.TestCase):
    def test_unset_defaults_to_dark(self):
        self.assertEqual(themes.detect_color_scheme({}), DARK)

    def test_light_background(self):
        self.assertEqual(themes.detect_color_scheme({"COLORFGBG": "0;15"}), LIGHT)
        self.assertEqual(themes.detect_color_scheme({"COLORFGBG": "0;7"}), LIGHT)

    def test_dark_background(self):
        self.assertEqual(themes.detect_color_scheme({"COLORFGBG": "15;0"}), DARK)

    def test_three_field_value_uses_last_field(self):
        self.assertEqual(themes.detect_color_scheme({"COLORFGBG": "0;default;15"}), LIGHT)

    def test_garbage_is_dark(self):
        self.assertEqual(themes.detect_color_scheme({"COLORFGBG": "nonsense"}), DARK)


class TestThemeSelection(unittest.TestCase):
    def test_theme_for_preference(self):
        self.assertIs(themes.theme_for(LIGHT), themes.DIGEST_LIGHT)
        self.assertIs(themes.theme_for(DARK), themes.DIGEST_DARK)
        self.assertFalse(themes.theme_for(LIGHT).dark)
        self.assertTrue(themes.theme_for(DARK).dark)

    def test_unknown_preference_falls_back_to_dark(self):
        self.assertIs(themes.theme_for("sepia"), themes.DIGEST_DARK)

    def test_toggled(self):
        self.assertEqual(themes.toggled(LIGHT), DARK)
        self.assertEqual(themes.toggled(DARK), LIGHT)
        self.assertEqual(themes.toggled(themes.toggled(LIGHT)), LIGHT)

    def test_section_colors_rotate(self):
        colors = [themes.section_color(i) for i in range(6)]
        self.assertEqual(colors[:4], list(themes.SECTION_COLORS))
        self.assertEqual(colors[4], colors[0])
        self.assertEqual(colors[5], colors[1])


if __name__ == "__main__":
    unittest.main()
