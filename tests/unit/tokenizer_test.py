"""Tests for the Python source tokenizer."""

from __future__ import annotations

from codechecker.services.tokenizer import NUMBER_LITERAL, STRING_LITERAL, PythonTokenizer, tokenize
from codechecker.services.types import TokenKind


def _texts(source: str) -> list[str]:
    return [t.text for t in tokenize(source)]


class TestClassification:
    def test_assignment_tokens(self) -> None:
        tokens = tokenize("x = 1")
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.OPERATOR, "="),
            (TokenKind.LITERAL, NUMBER_LITERAL),
        ]

    def test_keywords_and_builtin_types(self) -> None:
        tokens = tokenize("def f(n): return int(n) if True else None")
        kinds = {t.text: t.kind for t in tokens}
        assert kinds["def"] == TokenKind.KEYWORD
        assert kinds["return"] == TokenKind.KEYWORD
        assert kinds["int"] == TokenKind.KEYWORD
        assert kinds["True"] == TokenKind.KEYWORD
        assert kinds["None"] == TokenKind.KEYWORD
        assert kinds["f"] == TokenKind.IDENTIFIER
        assert kinds["n"] == TokenKind.IDENTIFIER

    def test_print_is_an_identifier(self) -> None:
        assert tokenize("print")[0].kind == TokenKind.IDENTIFIER

    def test_longest_operator_wins(self) -> None:
        assert _texts("a **= b // c != d -> e := f") == [
            "a", "**=", "b", "//", "c", "!=", "d", "->", "e", ":=", "f",
        ]

    def test_delimiters(self) -> None:
        tokens = tokenize("@deco\nfoo(a[0], b.c)")
        delimiters = [t.text for t in tokens if t.kind == TokenKind.DELIMITER]
        assert delimiters == ["@", "(", "[", "]", ",", ".", ")"]

    def test_unknown_character_is_an_operator(self) -> None:
        tokens = tokenize("a $ b")
        assert tokens[1].text == "$"
        assert tokens[1].kind == TokenKind.OPERATOR


class TestLiterals:
    def test_numbers_collapse(self) -> None:
        assert _texts("x = 1") == _texts("x = 999999")
        assert _texts("y = 3.14e-10") == ["y", "=", NUMBER_LITERAL]

    def test_strings_collapse(self) -> None:
        assert _texts("s = 'hello'") == ["s", "=", STRING_LITERAL]
        assert _texts('s = "it\'s"') == ["s", "=", STRING_LITERAL]

    def test_escaped_quote_stays_inside_string(self) -> None:
        assert _texts('s = "a\\"b" + t') == ["s", "=", STRING_LITERAL, "+", "t"]

    def test_prefixed_strings_are_single_literals(self) -> None:
        assert _texts('msg = f"hi {name}"') == ["msg", "=", STRING_LITERAL]
        assert _texts("data = rb'\\x00'") == ["data", "=", STRING_LITERAL]

    def test_empty_string(self) -> None:
        assert _texts("s = '' + ''") == ["s", "=", STRING_LITERAL, "+", STRING_LITERAL]

    def test_hash_inside_string_is_not_a_comment(self) -> None:
        assert _texts("s = '#not a comment' + t") == ["s", "=", STRING_LITERAL, "+", "t"]


class TestCommentsAndBlocks:
    def test_line_comments_are_dropped(self) -> None:
        assert _texts("x = 1  # set x\n# whole line\n") == _texts("x = 1")

    def test_comment_stripped_sequences_are_identical(self) -> None:
        assert tokenize("x = 1  # comment\ny = 2") == tokenize("x = 1\ny = 2")

    def test_docstring_produces_no_tokens(self) -> None:
        source = 'def f():\n    """Doc\n    more"""\n    return 1\n'
        assert _texts(source) == ["def", "f", "(", ")", ":", "return", NUMBER_LITERAL]

    def test_single_line_triple_quoted_block(self) -> None:
        assert _texts("x = '''abc'''") == ["x", "="]

    def test_prefixed_triple_quoted_block(self) -> None:
        assert _texts('x = r"""abc"""') == ["x", "="]
        assert _texts('x = RB"""abc"""') == ["x", "="]

    def test_prefixed_multiline_block(self) -> None:
        source = "y = f'''first {a}\nsecond\n'''\nz = 1\n"
        tokens = tokenize(source)
        assert [t.text for t in tokens] == ["y", "=", "z", "=", NUMBER_LITERAL]
        assert tokens[2].line == 4

    def test_identifier_before_triple_quote_is_kept(self) -> None:
        assert _texts('xr"""abc"""') == ["xr"]

    def test_unterminated_triple_quote_swallows_the_rest(self) -> None:
        assert _texts('x = 1\ns = """open\ny = 2\n') == ["x", "=", NUMBER_LITERAL, "s", "="]

    def test_unterminated_string_ends_at_line_end(self) -> None:
        tokens = tokenize("s = 'abc\ny = 2")
        assert [t.text for t in tokens] == ["s", "=", STRING_LITERAL, "y", "=", NUMBER_LITERAL]
        assert tokens[3].line == 2


class TestPositionsAndLines:
    def test_positions_are_consecutive(self) -> None:
        tokens = tokenize("def add(a, b):\n    return a + b\n")
        assert [t.position for t in tokens] == list(range(len(tokens)))

    def test_lines_are_one_based(self) -> None:
        tokens = tokenize("a = 1\n\nb = 2")
        assert tokens[0].line == 1
        assert tokens[3].text == "b"
        assert tokens[3].line == 3

    def test_lines_after_docstring(self) -> None:
        tokens = tokenize('"""\nmodule doc\n"""\nvalue = 1\n')
        assert tokens[0].text == "value"
        assert tokens[0].line == 4


class TestRobustness:
    def test_empty_and_blank_sources(self) -> None:
        assert tokenize("") == []
        assert tokenize("   \n\t\n") == []

    def test_malformed_input_never_raises(self) -> None:
        for source in ["'''", "'", '"abc', "\\", "f'", "x = (", "1e+", "@@@"]:
            tokenize(source)

    def test_scrub_keeps_length(self, tokenizer: PythonTokenizer) -> None:
        source = 's = "a#b"  # note\n"""x\ny"""\nz = 1\n'
        scrubbed = tokenizer.scrub(source)
        assert len(scrubbed) == len(source)
        assert scrubbed.count("\n") == source.count("\n")
        assert "note" not in scrubbed

    def test_deterministic(self, tokenizer: PythonTokenizer) -> None:
        source = "for i in range(3):\n    print(i * 2)\n"
        assert tokenizer.tokenize(source) == tokenizer.tokenize(source)
