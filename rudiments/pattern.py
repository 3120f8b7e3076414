import collections.abc
import logging
import pathlib
import typing

import rudiments.constants
import rudiments.errors
import rudiments.grammar
import rudiments.steps


logger = logging.getLogger(__name__)

Instrument = str

# One line of a pattern file.
TrackLine = typing.Tuple[Instrument, rudiments.steps.Steps, rudiments.steps.Amplitude]

_STEP_CHARS = rudiments.constants.STEP_PLAY + rudiments.constants.STEP_SILENT + rudiments.constants.SEPARATOR


class Pattern (collections.abc.Mapping):

	"""
	The contents of a pattern file.

	Each line of a pattern file represents a track. A track contains an
	instrument name, a 16-step sequence and an optional amplitude. The
	instrument name is an identifier and can only appear once per pattern.
	Each sequence represents a single measure in 4/4 time divided into 16th
	note steps (``x`` for *play* and ``-`` for *silent*), grouped into beats
	by ``|``. The amplitude is in the range [0, 1] and defaults to full volume.

	Example::

		hi-hat |x-x-|x-x-|x-x-|x-x-| 0.5
		snare  |----|x---|----|x---|
		kick   |x---|----|x---|----|
	"""

	def __init__ (self, tracks: typing.Optional[typing.Mapping[Instrument, typing.Tuple[rudiments.steps.Steps, rudiments.steps.Amplitude]]] = None) -> None:

		self._tracks: typing.Dict[Instrument, typing.Tuple[rudiments.steps.Steps, rudiments.steps.Amplitude]] = {
			instrument: (steps.copy(), amplitude) for instrument, (steps, amplitude) in (tracks or {}).items()
		}


	@classmethod
	def parse (cls, path: typing.Union[str, pathlib.Path]) -> "Pattern":

		"""
		Parse the pattern file located at the path given.

		Raises:
			FileDoesNotExistError: The path is missing or is not a regular file.
			ReadError: The file could not be read.
			ParseError: A line is malformed.
			DuplicatePatternError: An instrument appears on more than one line.
		"""

		path = pathlib.Path(path)
		text = read_lines_file(path)
		pattern = cls.parse_text(text)

		logger.debug(f"Parsed {len(pattern)} tracks from pattern {path}")

		return pattern


	@classmethod
	def parse_text (cls, text: str) -> "Pattern":

		"""
		Parse the contents of a pattern file. Blank lines are skipped.
		"""

		tracks: typing.Dict[Instrument, typing.Tuple[rudiments.steps.Steps, rudiments.steps.Amplitude]] = {}

		for line in text.splitlines():

			if not line.strip():
				continue

			try:
				instrument, steps, amplitude = parse_track(line)
			except rudiments.grammar.GrammarError as exc:
				raise rudiments.errors.ParseError(line) from exc

			if instrument in tracks:
				raise rudiments.errors.DuplicatePatternError(instrument, line)

			tracks[instrument] = (steps, amplitude)

		return cls(tracks)


	def get (self, instrument: Instrument, default: typing.Any = None) -> typing.Optional[typing.Tuple[rudiments.steps.Steps, rudiments.steps.Amplitude]]:

		"""
		Return the step sequence and amplitude of an instrument, or None if this pattern does not use it.

		The step sequence is a copy, so changing it leaves the pattern untouched.
		"""

		if instrument not in self._tracks:
			return default

		return self[instrument]


	def __getitem__ (self, instrument: Instrument) -> typing.Tuple[rudiments.steps.Steps, rudiments.steps.Amplitude]:
		steps, amplitude = self._tracks[instrument]
		return steps.copy(), amplitude

	def __iter__ (self) -> typing.Iterator[Instrument]:
		return iter(self._tracks)

	def __len__ (self) -> int:
		return len(self._tracks)

	def __repr__ (self) -> str:
		return f"Pattern({sorted(self._tracks)!r})"

	def __str__ (self) -> str:

		"""
		Render the pattern back into pattern file notation.
		"""

		width = max((len(i) for i in self._tracks), default=0)
		lines = []

		for instrument, (steps, amplitude) in self._tracks.items():
			line = f"{instrument.ljust(width)} {steps}"
			if amplitude != rudiments.steps.Amplitude.max():
				line += f" {amplitude}"
			lines.append(line)

		return "\n".join(lines) + ("\n" if lines else "")


def read_lines_file (path: pathlib.Path) -> str:

	"""
	Read a line-oriented input file, checking that it exists first.
	"""

	if not path.is_file():
		raise rudiments.errors.FileDoesNotExistError(path)

	# undecodable text is an I/O failure, not a malformed line
	try:
		return path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as exc:
		raise rudiments.errors.ReadError(path) from exc


def parse_track (line: str) -> TrackLine:

	"""
	Parse a track from a single line of a pattern file.
	"""

	cursor = rudiments.grammar.Cursor(line)

	rudiments.grammar.space0(cursor)
	instrument = rudiments.grammar.take_till(cursor, rudiments.grammar.WHITESPACE, rule="instrument")
	rudiments.grammar.space0(cursor)
	steps = parse_steps(cursor)
	rudiments.grammar.space0(cursor)
	amplitude = parse_amplitude(cursor)
	rudiments.grammar.end_of_line(cursor)

	return instrument, steps, amplitude


def parse_steps (cursor: rudiments.grammar.Cursor) -> rudiments.steps.Steps:

	"""
	Parse the step block of a track, e.g. ``|x-x-|x-x-|x-x-|x-x-|``.

	Separators are not counted; exactly ``STEPS_PER_MEASURE`` step characters are required.
	"""

	start = cursor.position
	block = rudiments.grammar.take_while1(cursor, _STEP_CHARS, rule="steps")
	bits = [c == rudiments.constants.STEP_PLAY for c in block if c != rudiments.constants.SEPARATOR]

	if len(bits) != rudiments.constants.STEPS_PER_MEASURE:
		cursor.position = start
		raise rudiments.grammar.GrammarError(f"{rudiments.constants.STEPS_PER_MEASURE} steps", start)

	return rudiments.steps.Steps.from_bits(bits)


def parse_amplitude (cursor: rudiments.grammar.Cursor) -> rudiments.steps.Amplitude:

	"""
	Parse the optional amplitude of a track, defaulting to full volume.
	"""

	start = cursor.position
	token = rudiments.grammar.optional_float_token(cursor)

	try:
		return rudiments.steps.Amplitude.parse(token)
	except ValueError as exc:
		cursor.position = start
		raise rudiments.grammar.GrammarError("amplitude in [0, 1]", start) from exc
