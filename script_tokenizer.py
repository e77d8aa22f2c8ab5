#!/usr/bin/env python3
"""
Script Tokenizer
Character-level scanner for generated KubeJS recipe code.

Every schema adapter decodes through this module. The scanner tracks quote
state and bracket depth explicitly, so identifiers containing punctuation
(``'minecraft:oak_log'``, ``'#forge:ingots/iron'``) and nested calls
(``Item.of('x', 2).withChance(0.5)``) are never split in the wrong place.
Comments outside string literals are skipped.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple

QUOTES = ("'", '"', '`')
OPENERS = {'(': ')', '[': ']', '{': '}'}
CLOSERS = set(OPENERS.values())
ESCAPES = {'n': '\n', 't': '\t', 'r': '\r'}

NUMBER_RE = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$')
COUNT_PREFIX_RE = re.compile(r'^(\d+)x\s+(\S.*)$')
IDENTIFIER_START = re.compile(r'[A-Za-z_$]')
IDENTIFIER_CHAR = re.compile(r'[\w$]')

STACK_CONSTRUCTORS = ("Item.of", "Fluid.of", "Ingredient.of")

@dataclass
class ChainCall:
    """A `.name(args)` call chained after an invocation"""
    name: str
    args: List[str] = field(default_factory=list)

@dataclass
class Invocation:
    """A `callee.path(args...)` call plus its chained calls"""
    callee: str
    args: List[str]
    chain: List[ChainCall]
    start: int
    end: int

    @property
    def method(self) -> str:
        """Callee without the leading receiver, e.g. 'recipes.create.milling'"""
        if '.' not in self.callee:
            return self.callee
        return self.callee.split('.', 1)[1]

@dataclass
class Stack:
    """A parsed item/fluid stack expression"""
    identifier: str
    count: int = 1
    chance: Optional[float] = None
    fluid: bool = False

class Scanner:
    """Cursor over source text that understands strings, brackets and comments"""

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if 0 <= index < len(self.text) else ''

    def at_comment(self) -> bool:
        return self.peek() == '/' and self.peek(1) in ('/', '*')

    def skip_comment(self) -> bool:
        """Skip a comment at the cursor; False if the comment is unterminated"""
        if self.peek(1) == '/':
            end = self.text.find('\n', self.pos)
            self.pos = len(self.text) if end == -1 else end + 1
            return True
        end = self.text.find('*/', self.pos + 2)
        if end == -1:
            self.pos = len(self.text)
            return False
        self.pos = end + 2
        return True

    def skip_space(self):
        while not self.at_end():
            if self.peek().isspace():
                self.pos += 1
            elif self.at_comment():
                self.skip_comment()
            else:
                break

    def read_string(self) -> Optional[str]:
        """Read a quoted literal at the cursor and return its decoded value"""
        quote_char = self.peek()
        if quote_char not in QUOTES:
            return None
        chars = []
        index = self.pos + 1
        while index < len(self.text):
            char = self.text[index]
            if char == '\\' and index + 1 < len(self.text):
                escaped = self.text[index + 1]
                chars.append(ESCAPES.get(escaped, escaped))
                index += 2
                continue
            if char == quote_char:
                self.pos = index + 1
                return ''.join(chars)
            chars.append(char)
            index += 1
        return None

    def skip_string(self) -> bool:
        start = self.pos
        if self.read_string() is None:
            self.pos = start
            return False
        return True

    def read_identifier(self) -> str:
        start = self.pos
        if not IDENTIFIER_START.match(self.peek()):
            return ''
        self.pos += 1
        while not self.at_end() and IDENTIFIER_CHAR.match(self.peek()):
            self.pos += 1
        return self.text[start:self.pos]

    def read_path(self) -> str:
        """Read a dotted path such as `event.recipes.create.milling`"""
        parts = []
        while True:
            name = self.read_identifier()
            if not name:
                break
            parts.append(name)
            if self.peek() == '.' and IDENTIFIER_START.match(self.peek(1)):
                self.pos += 1
                continue
            break
        return '.'.join(parts)

    def read_group(self) -> Optional[str]:
        """Read a bracketed group at the cursor and return its inner text

        Returns None for unbalanced or mismatched brackets and unterminated
        strings or comments. On success the cursor sits after the closer.
        """
        opener = self.peek()
        if opener not in OPENERS:
            return None
        start = self.pos
        expected = [OPENERS[opener]]
        index = self.pos + 1
        scanner = Scanner(self.text, index)
        while not scanner.at_end():
            char = scanner.peek()
            if char in QUOTES:
                if not scanner.skip_string():
                    return None
                continue
            if scanner.at_comment():
                if not scanner.skip_comment():
                    return None
                continue
            if char in OPENERS:
                expected.append(OPENERS[char])
            elif char in CLOSERS:
                if char != expected.pop():
                    return None
                if not expected:
                    self.pos = scanner.pos + 1
                    return self.text[start + 1:scanner.pos]
            scanner.pos += 1
        return None

def split_top_level(text: str, separator: str = ',') -> List[str]:
    """Split on separators outside of strings and brackets

    Comments are dropped, parts are stripped, and a trailing separator does
    not produce an empty final part.
    """
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    scanner = Scanner(text)
    while not scanner.at_end():
        char = scanner.peek()
        if char in QUOTES:
            start = scanner.pos
            if not scanner.skip_string():
                current.append(text[start:])
                break
            current.append(text[start:scanner.pos])
            continue
        if scanner.at_comment():
            scanner.skip_comment()
            current.append(' ')
            continue
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
        if char == separator and depth == 0:
            parts.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        scanner.pos += 1

    tail = ''.join(current).strip()
    if tail:
        parts.append(tail)
    return parts

def split_pair(text: str, separator: str = ':') -> Optional[Tuple[str, str]]:
    """Split `key: value` on the first top-level separator"""
    scanner = Scanner(text)
    depth = 0
    while not scanner.at_end():
        char = scanner.peek()
        if char in QUOTES:
            if not scanner.skip_string():
                return None
            continue
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
        elif char == separator and depth == 0:
            return text[:scanner.pos].strip(), text[scanner.pos + 1:].strip()
        scanner.pos += 1
    return None

def _read_chain(scanner: Scanner) -> Optional[List[ChainCall]]:
    chain = []
    while True:
        checkpoint = scanner.pos
        scanner.skip_space()
        if scanner.peek() != '.':
            scanner.pos = checkpoint
            return chain
        scanner.pos += 1
        scanner.skip_space()
        name = scanner.read_identifier()
        scanner.skip_space()
        if not name or scanner.peek() != '(':
            scanner.pos = checkpoint
            return chain
        inner = scanner.read_group()
        if inner is None:
            return None
        chain.append(ChainCall(name, split_top_level(inner)))

def parse_invocation(text: str, pos: int = 0) -> Optional[Invocation]:
    """Parse `callee(args).chain(args)...` starting at pos"""
    scanner = Scanner(text, pos)
    scanner.skip_space()
    start = scanner.pos
    callee = scanner.read_path()
    if not callee:
        return None
    scanner.skip_space()
    if scanner.peek() != '(':
        return None
    inner = scanner.read_group()
    if inner is None:
        return None
    chain = _read_chain(scanner)
    if chain is None:
        return None
    return Invocation(callee, split_top_level(inner), chain, start, scanner.pos)

def parse_statement(text: str) -> Optional[Invocation]:
    """Parse text holding exactly one invocation, optionally ending in ';'"""
    invocation = parse_invocation(text)
    if invocation is None:
        return None
    scanner = Scanner(text, invocation.end)
    scanner.skip_space()
    if scanner.peek() == ';':
        scanner.pos += 1
        scanner.skip_space()
    return invocation if scanner.at_end() else None

def iter_recipe_invocations(text: str, receiver: str = 'event') -> Iterator[Invocation]:
    """Yield each top-level `<receiver>.<method>(...)` call in a script"""
    scanner = Scanner(text)
    while not scanner.at_end():
        char = scanner.peek()
        if char in QUOTES:
            if not scanner.skip_string():
                return
            continue
        if scanner.at_comment():
            scanner.skip_comment()
            continue
        at_word_start = scanner.pos == 0 or not IDENTIFIER_CHAR.match(text[scanner.pos - 1])
        if at_word_start and text.startswith(receiver + '.', scanner.pos) and text[scanner.pos - 1:scanner.pos] != '.':
            invocation = parse_invocation(text, scanner.pos)
            if invocation is not None:
                yield invocation
                scanner.pos = invocation.end
                continue
        scanner.pos += 1

# Literals

def quote(value: str) -> str:
    return "'" + value.replace('\\', '\\\\').replace("'", "\\'").replace('\n', '\\n') + "'"

def parse_string(token: str) -> Optional[str]:
    scanner = Scanner(token)
    scanner.skip_space()
    value = scanner.read_string()
    if value is None:
        return None
    scanner.skip_space()
    return value if scanner.at_end() else None

def parse_number(token: str) -> Optional[Any]:
    token = token.strip()
    if not NUMBER_RE.match(token):
        return None
    if any(c in token for c in '.eE'):
        return float(token)
    return int(token)

def format_number(value) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(int(value))

def parse_literal(token: str) -> Any:
    """Parse a chained-call argument; unparseable text is kept verbatim"""
    token = token.strip()
    value = parse_string(token)
    if value is not None:
        return value
    number = parse_number(token)
    if number is not None:
        return number
    try:
        return json.loads(token)
    except ValueError:
        return token

def format_literal(value: Any) -> str:
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return format_number(value)
    return json.dumps(value, sort_keys=True, ensure_ascii=False)

def unwrap(token: str, opener: str = '[') -> Optional[str]:
    """Inner text of a token that is exactly one bracketed group"""
    scanner = Scanner(token)
    scanner.skip_space()
    if scanner.peek() != opener:
        return None
    inner = scanner.read_group()
    if inner is None:
        return None
    scanner.skip_space()
    return inner if scanner.at_end() else None

# Stacks

def _parse_count_prefix(value: str) -> Tuple[str, int]:
    match = COUNT_PREFIX_RE.match(value)
    if match:
        return match.group(2), int(match.group(1))
    return value, 1

def parse_stack(token: str) -> Optional[Stack]:
    """Parse an item/fluid/tag stack expression

    Accepts 'id', 'id' * n, '3x id', Item.of('id'[, n]), Ingredient.of(...),
    Fluid.of('id'[, amount]) and the .withCount(n)/.withChance(c) modifiers.
    """
    scanner = Scanner(token)
    scanner.skip_space()
    stack: Optional[Stack] = None

    if scanner.peek() in QUOTES:
        value = scanner.read_string()
        if not value:
            return None
        identifier, count = _parse_count_prefix(value.strip())
        stack = Stack(identifier, count)
    else:
        constructor = scanner.read_path()
        scanner.skip_space()
        if constructor not in STACK_CONSTRUCTORS or scanner.peek() != '(':
            return None
        inner = scanner.read_group()
        if inner is None:
            return None
        args = split_top_level(inner)
        if not args or len(args) > 2:
            return None
        value = parse_string(args[0])
        if not value:
            return None
        fluid = constructor == "Fluid.of"
        identifier, count = _parse_count_prefix(value.strip())
        if fluid:
            count = 1000
        if len(args) == 2:
            amount = parse_number(args[1])
            if not isinstance(amount, int) or amount < 1:
                return None
            count = amount
        stack = Stack(identifier, count, fluid=fluid)

    chain = _read_chain(scanner)
    if chain is None:
        return None
    for call in chain:
        argument = parse_number(call.args[0]) if len(call.args) == 1 else None
        if call.name == 'withCount' and isinstance(argument, int) and argument >= 1:
            stack.count = argument
        elif call.name == 'withChance' and argument is not None and 0 <= argument <= 1:
            stack.chance = float(argument)
        else:
            return None

    scanner.skip_space()
    if scanner.peek() == '*':
        scanner.pos += 1
        multiplier = parse_number(token[scanner.pos:])
        if not isinstance(multiplier, int) or multiplier < 1:
            return None
        stack.count = multiplier
        scanner.pos = len(token)

    scanner.skip_space()
    return stack if scanner.at_end() else None

def format_stack(identifier: str, count: int = 1, chance: Optional[float] = None,
                 fluid: bool = False) -> str:
    """Deterministic inverse of parse_stack"""
    if fluid:
        text = f"Fluid.of({quote(identifier)}, {count})"
    elif chance is not None:
        text = f"Item.of({quote(identifier)}, {count})" if count != 1 else f"Item.of({quote(identifier)})"
    else:
        text = quote(identifier)
        if count != 1:
            text += f" * {count}"
    if chance is not None:
        text += f".withChance({format_number(float(chance))})"
    return text
