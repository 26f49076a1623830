"""Lexical extraction of declarations from Solidity source.

This is deliberately an approximate scanner, not a parser. Each declaration
kind is found through a fixed syntactic anchor, and attributes such as
visibility or mutability are inferred from a short window of the text that
*precedes* the anchor. Known consequences:

* comments and string literals are scanned like code, so keyword-like text
  inside them can produce or alter matches;
* a window can pick up keywords that belong to the previous declaration;
* the function anchor requires the body brace right after the optional
  visibility/mutability/returns clauses, so functions with custom modifiers,
  ``override`` or no body are not inventoried;
* only elementary state variable types are recognized (no mappings, arrays or
  user-defined types).

The same primitives back the heuristic ABI fallback in ``abi_builder``.
"""

import re
from typing import List, Sequence

from ..models import (
    DeclarationInventory,
    EventDecl,
    FunctionDecl,
    ImportRef,
    ModifierDecl,
    VariableDecl,
)

ATTRIBUTE_WINDOW = 50
TYPE_WINDOW = 100

VISIBILITY_KEYWORDS: Sequence[str] = ('public', 'private', 'internal', 'external')
MUTABILITY_KEYWORDS: Sequence[str] = ('view', 'pure', 'payable')
DEFAULT_VISIBILITY = 'internal'
DEFAULT_MUTABILITY = 'non-payable'

ELEMENTARY_TYPE = r'(?:uint\d*|int\d*|bytes\d*|bool|address|string)'

IMPORT_PATTERN = re.compile(r'import\s+[\'"]([^\'"]+)[\'"]')
FUNCTION_PATTERN = re.compile(
    r'function\s+(\w+)\s*\([^)]*\)\s*'
    r'(?:external|public|internal|private)?\s*'
    r'(?:view|pure|payable)?\s*'
    r'(?:returns\s*\([^)]*\))?\s*\{'
)
MODIFIER_PATTERN = re.compile(r'modifier\s+(\w+)\s*\([^)]*\)\s*\{')
STATE_VARIABLE_PATTERN = re.compile(
    r'\b(' + ELEMENTARY_TYPE + r')\s+(?:public|private|internal|external)?\s*(\w+)\s*;'
)
EVENT_PATTERN = re.compile(r'event\s+(\w+)\s*\(([^)]*)\)')


def preceding_window(source_code: str, index: int, size: int = ATTRIBUTE_WINDOW) -> str:
    """Return up to ``size`` characters of text immediately before ``index``."""
    return source_code[max(0, index - size):index]


def first_keyword(window: str, keywords: Sequence[str], default: str) -> str:
    """Return the first keyword (in priority order) that occurs anywhere in ``window``."""
    for keyword in keywords:
        if keyword in window:
            return keyword
    return default


def extract_visibility(source_code: str, index: int) -> str:
    return first_keyword(preceding_window(source_code, index), VISIBILITY_KEYWORDS, DEFAULT_VISIBILITY)


def extract_function_type(source_code: str, index: int) -> str:
    return first_keyword(preceding_window(source_code, index), MUTABILITY_KEYWORDS, DEFAULT_MUTABILITY)


def extract_imports(source_code: str) -> List[ImportRef]:
    return [ImportRef(path=m.group(1)) for m in IMPORT_PATTERN.finditer(source_code)]


def extract_functions(source_code: str) -> List[FunctionDecl]:
    functions = []
    for match in FUNCTION_PATTERN.finditer(source_code):
        functions.append(FunctionDecl(
            name=match.group(1),
            visibility=extract_visibility(source_code, match.start()),
            mutability=extract_function_type(source_code, match.start()),
        ))
    return functions


def extract_modifiers(source_code: str) -> List[ModifierDecl]:
    return [ModifierDecl(name=m.group(1)) for m in MODIFIER_PATTERN.finditer(source_code)]


def extract_state_variables(source_code: str) -> List[VariableDecl]:
    return [
        VariableDecl(name=m.group(2), type=m.group(1))
        for m in STATE_VARIABLE_PATTERN.finditer(source_code)
    ]


def extract_events(source_code: str) -> List[EventDecl]:
    return [EventDecl(name=m.group(1)) for m in EVENT_PATTERN.finditer(source_code)]


def extract(source_code: str) -> DeclarationInventory:
    """
    Build the declaration inventory for ``source_code``.

    Never raises; text without any recognizable declaration (including the
    empty string) yields an empty inventory.
    """
    source_code = source_code or ''
    return DeclarationInventory(
        functions=tuple(extract_functions(source_code)),
        modifiers=tuple(extract_modifiers(source_code)),
        state_variables=tuple(extract_state_variables(source_code)),
        events=tuple(extract_events(source_code)),
        imports=tuple(extract_imports(source_code)),
    )
