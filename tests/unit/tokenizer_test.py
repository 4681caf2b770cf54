"""Tests for brace matching over PHP source."""

from yii_locator.core.tokenizer import find_array_keys, find_body_bounds, find_body_end
from yii_locator.models import UNBOUNDED


class TestFindBodyEnd:
    def test_simple_body(self) -> None:
        text = "function actionIndex() { return 1; }"
        assert find_body_end(text, 0) == len(text)

    def test_nested_braces(self) -> None:
        text = "function a() { if ($x) { foo(); } else { bar(); } } tail"
        assert find_body_end(text, 0) == text.index(" tail")

    def test_brace_in_double_quoted_string_is_ignored(self) -> None:
        text = 'function actionA() { $s = "}"; return 1; }'
        assert find_body_end(text, 0) == len(text)

    def test_brace_in_single_quoted_string_with_escaped_quote(self) -> None:
        text = "function a() { $s = 'it\\'s } here'; }"
        assert find_body_end(text, 0) == len(text)

    def test_escaped_backslash_before_quote_closes_string(self) -> None:
        text = "function a() { $s = 'dir\\\\'; } rest"
        assert find_body_end(text, 0) == text.index(" rest")

    def test_braces_in_comments_are_ignored(self) -> None:
        text = "function a() {\n// }\n# }\n/* } */\nreturn; }"
        assert find_body_end(text, 0) == len(text)

    def test_unterminated_body_is_unbounded(self) -> None:
        assert find_body_end("function a() { if (1) {", 0) == UNBOUNDED

    def test_starts_scanning_at_offset(self) -> None:
        text = "function a() { } function b() { { } }"
        start = text.index("function b")
        assert find_body_end(text, start) == len(text)


class TestFindBodyBounds:
    def test_reports_open_brace_offset(self) -> None:
        text = "function a()\n{\n}\n"
        open_offset, end = find_body_bounds(text, 0)
        assert open_offset == text.index("{")
        assert end == text.index("}") + 1

    def test_stray_closing_brace_before_body_is_skipped(self) -> None:
        text = "} { x }"
        assert find_body_bounds(text, 0) == (2, len(text))

    def test_no_body_at_all(self) -> None:
        assert find_body_bounds("abstract function a();", 0) == (UNBOUNDED, UNBOUNDED)

    def test_semicolon_before_body_means_no_body(self) -> None:
        text = "abstract public function actionBase();\npublic function actionReal() { }"
        assert find_body_bounds(text, text.index("(")) == (UNBOUNDED, UNBOUNDED)

    def test_semicolon_inside_default_string_is_not_a_terminator(self) -> None:
        text = "function a($sep = ';') { }"
        assert find_body_bounds(text, 0) == (text.index("{"), len(text))


class TestFindArrayKeys:
    def test_top_level_keys_only(self) -> None:
        text = "array('captcha' => array('class' => 'X'), \"page\" => 'CViewAction', 'plain')"
        keys = find_array_keys(text, len("array("))
        assert keys == [("captcha", text.index("captcha")), ("page", text.index("page"))]

    def test_short_array_syntax_and_comments(self) -> None:
        text = "['a' => 1, /* 'b' => 2, */ // 'c' => 3\n 'd' => [1, 2]] + ['e' => 5]"
        assert [key for key, _ in find_array_keys(text, 1)] == ["a", "d"]

    def test_stops_at_end_offset(self) -> None:
        text = "array('a' => 1, 'b' => 2)"
        assert [key for key, _ in find_array_keys(text, 6, text.index("'b'"))] == ["a"]
