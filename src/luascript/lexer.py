## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import functools

import lark
from .types import Token, TYPE_NAMES, KEYWORDS
from .errors import ScriptLexError


GRAMMAR = r"""start: (NUMBER | STRING | WORD | OPERATOR | PUNCTUATION | COMMENT)*

// COMMENTS
COMMENT.3: /\/\/[^\n]*/

// TOKENS
OPERATOR.2: /==|!=|<=|>=|\.\.|[-+*\/%^<>=]/
NUMBER.1: /\d+(?:\.\d+)?/
STRING: /"[^"]*"/
WORD: /[A-Za-z_][A-Za-z0-9_]*/
PUNCTUATION: /[\[\](){}:,.;]/

// WHITESPACE
%import common.WS
%ignore WS
"""


@functools.cache
def _build_lexer() -> lark.Lark:
    return lark.Lark(GRAMMAR, parser="lalr", lexer="basic")


def _classify_word(word: str) -> str:
    if word in TYPE_NAMES: return 'type-name'
    if word in KEYWORDS: return 'keyword'
    return 'identifier'


def tokenize(source: str, filename=None, keep_comments=True) -> list[Token]:
    """Scan source text into a flat list of tokens annotated with line and column."""
    tokens = []
    try:
        for tok in _build_lexer().lex(source):
            match tok.type:
                case 'WORD':
                    kind, text = _classify_word(tok.value), tok.value
                case 'STRING':
                    kind, text = 'string', tok.value[1:-1]
                case 'COMMENT':
                    if not keep_comments: continue
                    kind, text = 'comment', tok.value
                case _:
                    kind, text = tok.type.lower(), tok.value
            tokens.append(Token(kind, text, tok.line, tok.column))
    except lark.exceptions.UnexpectedCharacters as exc:
        char = source[exc.pos_in_stream] if exc.pos_in_stream < len(source) else ''
        detail = "Unterminated string literal" if char == '"' else f"Unexpected character `{char}`"
        raise ScriptLexError(f"{detail} at line {exc.line}, column {exc.column}.", filename=filename,
                             line=exc.line, column=exc.column, token=char, position=exc.pos_in_stream) from None
    return tokens
