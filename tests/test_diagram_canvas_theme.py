from __future__ import annotations

from dataclasses import replace
import unittest
import xml.etree.ElementTree as ET

from diagram_plot import DEFAULT_THEME, SvgCanvas, format_number, validate_theme
from diagram_plot.canvas import SVG_NS, clipped_group, escape_text, points_attr, svg_element

NS = {"svg": SVG_NS}


class CanvasTests(unittest.TestCase):
    def test_format_number(self) -> None:
        self.assertEqual(format_number(5.0), "5")
        self.assertEqual(format_number(0.1), "0.1")
        self.assertEqual(format_number(-0.0), "0")
        self.assertEqual(format_number(2.5), "2.5")
        self.assertEqual(format_number(1e-7), "0.0000001")
        self.assertEqual(format_number(-12), "-12")

    def test_svg_element_escapes_and_skips_none(self) -> None:
        markup = svg_element("text", {"fill": 'a"b', "stroke": None, "x": 1.0}, escape_text("x<y & z"))
        self.assertEqual(markup, '<text fill="a&quot;b" x="1">x&lt;y &amp; z</text>')
        self.assertEqual(svg_element("rect", {"width": 3}), '<rect width="3"/>')

    def test_draw_text_escapes_content_once(self) -> None:
        canvas = SvgCanvas(200, 100)
        canvas.draw_text(10, 10, "x<y & z")
        canvas.draw_wrapped_text(100, 50, "a<b", max_width_px=100, font_px=10)
        body = canvas.body()
        self.assertIn(">x&lt;y &amp; z</text>", body)
        self.assertIn(">a&lt;b</tspan>", body)
        self.assertNotIn("&amp;lt;", body)

    def test_points_attr_and_clipped_group(self) -> None:
        self.assertEqual(points_attr([(1.0, 2.5), (3, 4)]), "1,2.5 3,4")
        self.assertEqual(clipped_group("plane", ""), "")
        self.assertEqual(clipped_group("plane", "<g/>"), '<g clip-path="url(#plane)"><g/></g>')

    def test_empty_canvas_has_no_defs(self) -> None:
        root = ET.fromstring(SvgCanvas(200, 100).to_svg())
        self.assertEqual(root.tag, f"{{{SVG_NS}}}svg")
        self.assertEqual(root.get("width"), "200")
        self.assertEqual(root.get("viewBox"), "0 0 200 100")
        self.assertIsNone(root.find("svg:defs", NS))

    def test_clip_rect_lands_in_defs_before_body(self) -> None:
        canvas = SvgCanvas(200, 100)
        canvas.draw_line(0, 0, 10, 10, stroke="#000000")
        canvas.set_clip_rect(10, 20, 30, 40)
        svg = canvas.to_svg()
        self.assertLess(svg.index("<defs>"), svg.index("<line"))
        root = ET.fromstring(svg)
        clip = root.find("svg:defs/svg:clipPath", NS)
        assert clip is not None
        self.assertEqual(clip.get("id"), "chart-area")
        rect = clip.find("svg:rect", NS)
        assert rect is not None
        self.assertEqual((rect.get("x"), rect.get("y"), rect.get("width"), rect.get("height")), ("10", "20", "30", "40"))

    def test_draw_text_skips_empty_and_rotates_about_anchor(self) -> None:
        canvas = SvgCanvas(100, 100)
        canvas.draw_text(5, 5, "")
        self.assertEqual(canvas.body(), "")
        canvas.draw_text(15, 50, "Depth", rotate_deg=-90, anchor="middle")
        root = ET.fromstring(canvas.to_svg())
        text = root.find("svg:text", NS)
        assert text is not None
        self.assertEqual(text.get("transform"), "rotate(-90, 15, 50)")
        self.assertEqual(text.text, "Depth")

    def test_draw_wrapped_text_emits_tspans(self) -> None:
        canvas = SvgCanvas(300, 100)
        count = canvas.draw_wrapped_text(150, 10, "one two three four", max_width_px=60, font_px=10)
        self.assertEqual(count, 2)
        root = ET.fromstring(canvas.to_svg())
        spans = root.findall("svg:text/svg:tspan", NS)
        self.assertEqual([s.text for s in spans], ["one two", "three four"])
        self.assertEqual([s.get("dy") for s in spans], ["0", "12"])

    def test_background_rect_only_when_themed(self) -> None:
        plain = ET.fromstring(SvgCanvas(50, 50).to_svg())
        self.assertIsNone(plain.find("svg:rect", NS))
        themed = ET.fromstring(SvgCanvas(50, 50, theme=replace(DEFAULT_THEME, background="#FFFFFF")).to_svg())
        rect = themed.find("svg:rect", NS)
        assert rect is not None
        self.assertEqual(rect.get("fill"), "#FFFFFF")

    def test_invalid_canvas_arguments(self) -> None:
        with self.assertRaises(ValueError):
            SvgCanvas(0, 10)
        with self.assertRaises(ValueError):
            SvgCanvas(10, 10, clip_id="")


class ThemeTests(unittest.TestCase):
    def test_validate_theme_defaults(self) -> None:
        self.assertEqual(validate_theme(), DEFAULT_THEME)

    def test_validate_theme_applies_overrides(self) -> None:
        theme = validate_theme({"axis": "#ff0000", "padding_px": 10})
        self.assertEqual(theme.axis, "#ff0000")
        self.assertEqual(theme.padding_px, 10.0)
        self.assertEqual(DEFAULT_THEME.padding_px, 20.0)

    def test_validate_theme_rejects_bad_tokens(self) -> None:
        for overrides in (
            {"not_a_token": 1},
            {"axis": "red"},
            {"padding_px": 0},
            {"padding_px": True},
            {"font_family": "  "},
        ):
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError):
                    validate_theme(overrides)


if __name__ == "__main__":
    unittest.main()
