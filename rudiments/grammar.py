"""Small parsing rules shared by the pattern and instrumentation grammars.

Each rule takes a ``Cursor``, returns what it matched and advances the cursor.
A rule that does not match raises ``GrammarError`` and leaves the cursor where
it was, so rules can be tried in sequence or made optional::

	cursor = Cursor("kick |x---|----|x---|----| 0.5")
	instrument = take_till(cursor, WHITESPACE)
	space0(cursor)
"""

import re
import typing


WHITESPACE = " \t"

_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class GrammarError (Exception):

	"""
	Raised when a rule does not match at the current position.
	"""

	def __init__ (self, rule: str, position: int) -> None:

		self.rule = rule
		self.position = position
		super().__init__(f"expected {rule} at column {position}")


class Cursor:

	"""
	A read position within a single line of text.
	"""

	def __init__ (self, text: str, position: int = 0) -> None:

		self.text = text
		self.position = position

	@property
	def rest (self) -> str:
		return self.text[self.position:]

	def at_end (self) -> bool:
		return self.position >= len(self.text)


def take_while (cursor: Cursor, chars: str) -> str:

	"""
	Consume the longest (possibly empty) run of characters found in ``chars``.
	"""

	end = cursor.position

	while end < len(cursor.text) and cursor.text[end] in chars:
		end += 1

	matched = cursor.text[cursor.position:end]
	cursor.position = end
	return matched


def take_while1 (cursor: Cursor, chars: str, rule: str = "characters") -> str:

	"""
	Like ``take_while`` but at least one character must match.
	"""

	start = cursor.position
	matched = take_while(cursor, chars)

	if not matched:
		raise GrammarError(rule, start)

	return matched


def take_till (cursor: Cursor, chars: str, rule: str = "token") -> str:

	"""
	Consume a non-empty run of characters up to (not including) any of ``chars``.
	"""

	end = cursor.position

	while end < len(cursor.text) and cursor.text[end] not in chars:
		end += 1

	if end == cursor.position:
		raise GrammarError(rule, cursor.position)

	matched = cursor.text[cursor.position:end]
	cursor.position = end
	return matched


def space0 (cursor: Cursor) -> str:
	return take_while(cursor, WHITESPACE)


def space1 (cursor: Cursor) -> str:
	return take_while1(cursor, WHITESPACE, rule="whitespace")


def optional_float_token (cursor: Cursor) -> typing.Optional[str]:

	"""
	Consume the text of a decimal float if one starts here, otherwise return None.
	"""

	match = _FLOAT_RE.match(cursor.text, cursor.position)

	if match is None:
		return None

	cursor.position = match.end()
	return match.group()


def optional_float (cursor: Cursor) -> typing.Optional[float]:

	"""
	Consume a decimal float if one starts here, otherwise return None.
	"""

	token = optional_float_token(cursor)

	return None if token is None else float(token)


def end_of_line (cursor: Cursor) -> None:

	"""
	Require that nothing but whitespace remains.
	"""

	space0(cursor)

	if not cursor.at_end():
		raise GrammarError("end of line", cursor.position)
