"""Python source tokenizer producing canonicalised token streams for comparison."""
from __future__ import annotations

from typing import List, Optional, Tuple

from codechecker.services.types import Token, TokenKind

STRING_LITERAL = "STRING_LITERAL"
NUMBER_LITERAL = "NUMBER"

KEYWORDS = frozenset({
    "False", "None", "True", "and", "as", "assert", "async", "await",
    "break", "class", "continue", "def", "del", "elif", "else", "except",
    "finally", "for", "from", "global", "if", "import", "in", "is",
    "lambda", "nonlocal", "not", "or", "pass", "raise", "return", "try",
    "while", "with", "yield",
    # built-in type names
    "str", "int", "float", "bool", "list", "dict", "tuple", "set",
})

THREE_CHAR_OPERATORS = frozenset({"**=", "//=", "<<=", ">>="})
TWO_CHAR_OPERATORS = frozenset({
    "**", "//", "==", "!=", ">=", "<=", "<<", ">>",
    "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "->", ":=",
})
DELIMITERS = frozenset("()[]{}:.,;@")

STRING_PREFIXES = frozenset({"r", "u", "b", "f", "br", "rb", "fr", "rf"})
QUOTES = ("'", '"')
TRIPLE_QUOTES = ('"""', "'''")
NUMBER_CHARS = frozenset("0123456789.eE+-")


def _is_identifier_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_identifier_part(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


class PythonTokenizer:
    """Turn Python source into classified tokens.

    Comments and triple-quoted blocks are dropped, string and number literals
    collapse to ``STRING_LITERAL`` / ``NUMBER``. Malformed input never raises:
    an unterminated string ends at its line, an unterminated triple-quoted
    block swallows the rest of the source.
    """

    def tokenize(self, source: str) -> List[Token]:
        scrubbed = self.scrub(source)
        tokens: List[Token] = []
        length = len(scrubbed)
        line = 1
        i = 0

        while i < length:
            ch = scrubbed[i]

            if ch == "\n":
                line += 1
                i += 1
            elif ch.isspace():
                i += 1
            elif ch == "#":
                while i < length and scrubbed[i] != "\n":
                    i += 1
            elif ch in QUOTES:
                i = self._skip_string(scrubbed, i)
                tokens.append(Token(TokenKind.LITERAL, STRING_LITERAL, len(tokens), line))
            elif ch.isdigit():
                while i < length and scrubbed[i] in NUMBER_CHARS:
                    i += 1
                tokens.append(Token(TokenKind.LITERAL, NUMBER_LITERAL, len(tokens), line))
            elif _is_identifier_start(ch):
                start = i
                i += 1
                while i < length and _is_identifier_part(scrubbed[i]):
                    i += 1
                word = scrubbed[start:i]
                if i < length and scrubbed[i] in QUOTES and word.lower() in STRING_PREFIXES:
                    i = self._skip_string(scrubbed, i)
                    tokens.append(Token(TokenKind.LITERAL, STRING_LITERAL, len(tokens), line))
                else:
                    kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
                    tokens.append(Token(kind, word, len(tokens), line))
            else:
                text, kind = self._read_operator(scrubbed, i)
                tokens.append(Token(kind, text, len(tokens), line))
                i += len(text)

        return tokens

    def scrub(self, source: str) -> str:
        """Blank out comments and string contents, keeping every line's length.

        Quote characters of single-line strings survive so the scanner still
        sees one literal per string; triple-quoted blocks vanish entirely.
        """
        lines = source.split("\n")
        open_triple: Optional[str] = None
        scrubbed = []
        for text in lines:
            cleaned, open_triple = self._scrub_line(text, open_triple)
            scrubbed.append(cleaned)
        return "\n".join(scrubbed)

    def _scrub_line(self, line: str, open_triple: Optional[str]) -> Tuple[str, Optional[str]]:
        out = list(line)
        length = len(line)
        i = 0

        if open_triple:
            end = line.find(open_triple)
            if end == -1:
                return " " * length, open_triple
            self._blank(out, 0, end + 3)
            i = end + 3

        quote: Optional[str] = None
        while i < length:
            ch = line[i]

            if quote:
                if ch == "\\":
                    self._blank(out, i, i + 2)
                    i += 2
                elif ch == quote:
                    quote = None
                    i += 1
                else:
                    out[i] = " "
                    i += 1
                continue

            if ch == "#":
                self._blank(out, i, length)
                break

            delimiter = line[i:i + 3]
            if delimiter in TRIPLE_QUOTES:
                start = self._prefix_start(line, i)
                end = line.find(delimiter, i + 3)
                if end == -1:
                    self._blank(out, start, length)
                    return "".join(out), delimiter
                self._blank(out, start, end + 3)
                i = end + 3
                continue

            if ch in QUOTES:
                quote = ch
            i += 1

        return "".join(out), None

    @staticmethod
    def _prefix_start(line: str, quote_at: int) -> int:
        """Start of a string prefix (``r``, ``rb``, ``f`` ...) glued to the quote at ``quote_at``."""
        start = quote_at
        while start > 0 and _is_identifier_part(line[start - 1]):
            start -= 1
        if line[start:quote_at].lower() in STRING_PREFIXES:
            return start
        return quote_at

    @staticmethod
    def _blank(chars: List[str], start: int, end: int) -> None:
        for k in range(start, min(end, len(chars))):
            chars[k] = " "

    @staticmethod
    def _skip_string(text: str, start: int) -> int:
        """Return the index just past the string opened at ``start``."""
        quote = text[start]
        i = start + 1
        escaped = False
        while i < len(text):
            ch = text[i]
            if ch == "\n":
                break
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                return i + 1
            i += 1
        return i

    @staticmethod
    def _read_operator(text: str, start: int) -> Tuple[str, TokenKind]:
        three = text[start:start + 3]
        if three in THREE_CHAR_OPERATORS:
            return three, TokenKind.OPERATOR
        two = text[start:start + 2]
        if two in TWO_CHAR_OPERATORS:
            return two, TokenKind.OPERATOR
        ch = text[start]
        if ch in DELIMITERS:
            return ch, TokenKind.DELIMITER
        return ch, TokenKind.OPERATOR


_default_tokenizer = PythonTokenizer()


def tokenize(source: str) -> List[Token]:
    """Tokenize ``source`` with a shared, stateless tokenizer."""
    return _default_tokenizer.tokenize(source)
