"""Tests for the data-only SavedVariables reader."""

import pytest

from transcriptor_fixture.savedvars.lua_data import MAX_TABLE_DEPTH, LuaSyntaxError, loads


def _value(text: str):
    """Parse a single literal by assigning it to a throwaway global."""
    return loads(f"value = {text}")["value"]


class TestLoads:

    def test_top_level_assignments(self):
        data = loads('Foo = 1\nBar = "two"\nBaz = true\n')
        assert data == {"Foo": 1, "Bar": "two", "Baz": True}

    def test_nil_assignment_is_dropped(self):
        assert loads("Foo = nil") == {}

    def test_transcript_shaped_table(self):
        text = """
TranscriptDB = {
	["[2024-02-10]@[20:14:51] - Zone: Blackwing Lair"] = {
		["total"] = {
			"<0.00 20:14:51> [ENCOUNTER_START] 610#Razorgore#9#40", -- [1]
			"<1.50 20:14:52> [CLEU] SPELL_CAST_START#Creature-0-1-2-3-12435-0#Razorgore##nil#22425#Fireball Volley", -- [2]
		},
	},
	["ignoredEvents"] = {
	},
}
"""
        data = loads(text)
        entry = data["TranscriptDB"]["[2024-02-10]@[20:14:51] - Zone: Blackwing Lair"]
        assert entry["total"][0].startswith("<0.00 20:14:51>")
        assert len(entry["total"]) == 2
        assert data["TranscriptDB"]["ignoredEvents"] == []

    def test_sequential_integer_keys_become_list(self):
        assert _value("{[1] = 'a', [2] = 'b'}") == ["a", "b"]

    def test_sparse_integer_keys_stay_dict(self):
        assert _value("{[12345] = true, [678] = true}") == {12345: True, 678: True}

    def test_mixed_positional_and_named(self):
        assert _value("{1, 2, x = 3}") == {1: 1, 2: 2, "x": 3}

    def test_numbers(self):
        assert _value("{-5, 1.5, 0x1F, 1e3}") == [-5, 1.5, 31, 1000.0]

    def test_comments_are_skipped(self):
        text = "--[[ block\ncomment ]]\nFoo = { -- trailing\n 1 ; 2 }\n"
        assert loads(text) == {"Foo": [1, 2]}

    def test_long_bracket_string(self):
        assert _value("[==[a]]b]==]") == "a]]b"

    def test_long_bracket_skips_leading_newline(self):
        assert _value("[[\nline]]") == "line"


class TestStringEscapes:

    @pytest.mark.parametrize(("source", "expected"), [
        (r'"a\"b"', 'a"b'),
        (r"'it\'s'", "it's"),
        (r'"back\\slash"', "back\\slash"),
        (r'"tab\there"', "tab\there"),
        (r'"\65\066"', "AB"),
        (r'"\x41"', "A"),
        (r'"\u{48}i"', "Hi"),
        ('"a\\z   \n  b"', "ab"),
    ])
    def test_escape(self, source, expected):
        assert _value(source) == expected

    def test_decimal_escapes_form_utf8(self):
        assert _value(r'"\195\169"') == "é"

    def test_plain_utf8_is_kept(self):
        assert _value('"Kel\'Thuzad – Naxxramas"') == "Kel'Thuzad – Naxxramas"

    def test_invalid_utf8_escape_kept_as_raw_byte(self):
        assert _value(r'"Intrud\195"') == "Intrud\udcc3"

    def test_surrogate_code_point_kept_as_raw_bytes(self):
        assert _value(r'"\u{D800}"') == "\udced\udca0\udc80"


class TestRejectsCode:

    @pytest.mark.parametrize("text", [
        "Foo = os.exit()",
        "Foo = bar",
        "Foo = { print('x') }",
        "Foo = 1 + 2",
        'Foo = "unterminated',
        "Foo = { 1, 2",
        "= 1",
    ])
    def test_syntax_error(self, text):
        with pytest.raises(LuaSyntaxError):
            loads(text)

    def test_error_reports_line(self):
        with pytest.raises(LuaSyntaxError) as exc_info:
            loads("Foo = 1\nBar = {\n  baz()\n}")
        assert exc_info.value.line == 3

    def test_trailing_input_after_value(self):
        with pytest.raises(LuaSyntaxError):
            loads('Foo = "a" "b"')

    @pytest.mark.parametrize("text", [
        "Foo = { [{}] = 1 }",
        "Foo = { [{1, 2}] = 1 }",
        "Foo = { [nil] = 1 }",
    ])
    def test_invalid_table_key(self, text):
        with pytest.raises(LuaSyntaxError, match="invalid table key"):
            loads(text)

    @pytest.mark.parametrize("escape", [r"\u{110000}", r"\u{FFFFFFFFFF}", r"\256", r"\xZZ", "\\"])
    def test_bad_escape(self, escape):
        with pytest.raises(LuaSyntaxError):
            loads(f'Foo = "{escape}"')

    def test_deep_nesting(self):
        text = "Foo = " + "{" * (MAX_TABLE_DEPTH + 1) + "}" * (MAX_TABLE_DEPTH + 1)
        with pytest.raises(LuaSyntaxError, match="nested too deeply"):
            loads(text)

    def test_nesting_at_limit(self):
        text = "Foo = " + "{" * MAX_TABLE_DEPTH + "}" * MAX_TABLE_DEPTH
        assert "Foo" in loads(text)
