import collections.abc
import dataclasses
import logging
import pathlib
import typing

import rudiments.errors
import rudiments.grammar
import rudiments.pattern


logger = logging.getLogger(__name__)

# One line of an instrumentation file.
Binding = typing.Tuple[rudiments.pattern.Instrument, "SampleFile"]


@dataclasses.dataclass(frozen=True)
class SampleFile:

	"""
	The location of an audio sample file, relative to a samples directory.
	"""

	path: pathlib.Path

	def __post_init__ (self) -> None:
		object.__setattr__(self, "path", pathlib.Path(self.path))

	def with_parent (self, parent: typing.Union[str, pathlib.Path]) -> "SampleFile":

		"""
		Return a sample file whose path is this one joined onto ``parent``, made absolute.

		Raises:
			FileDoesNotExistError: ``parent`` is not a directory or the joined path is not a file.
		"""

		parent = pathlib.Path(parent)
		joined = parent / self.path

		if not (parent.is_dir() and joined.is_file()):
			raise rudiments.errors.FileDoesNotExistError(joined)

		return SampleFile(joined.resolve())

	def __str__ (self) -> str:
		return str(self.path)


class Instrumentation (collections.abc.Mapping):

	"""
	The contents of an instrumentation file.

	An instrumentation file binds the instruments from a pattern file to audio
	sample files. Each line contains an instrument name and an audio file name.
	Each instrument may only appear once, but a single audio file may be bound
	to multiple instruments.

	Example (``tom.wav`` is used for both ``tom-1`` and ``tom-2``)::

		hi-hat hh.wav
		tom-1  tom.wav
		tom-2  tom.wav
		snare  snare.wav
		kick   kick.wav
	"""

	def __init__ (self, bindings: typing.Optional[typing.Mapping[SampleFile, typing.Iterable[rudiments.pattern.Instrument]]] = None) -> None:

		self._bindings: typing.Dict[SampleFile, typing.FrozenSet[rudiments.pattern.Instrument]] = {
			sample_file: frozenset(instruments) for sample_file, instruments in (bindings or {}).items()
		}

		seen: typing.Set[rudiments.pattern.Instrument] = set()

		for instruments in self._bindings.values():
			for instrument in instruments:
				if instrument in seen:
					raise rudiments.errors.DuplicateInstrumentError(instrument)
				seen.add(instrument)


	@classmethod
	def parse (cls, path: typing.Union[str, pathlib.Path]) -> "Instrumentation":

		"""
		Parse the instrumentation file located at the path given.

		Raises:
			FileDoesNotExistError: The path is missing or is not a regular file.
			ReadError: The file could not be read.
			ParseError: A line is malformed.
			DuplicateInstrumentError: An instrument is bound more than once.
		"""

		path = pathlib.Path(path)
		text = rudiments.pattern.read_lines_file(path)
		instrumentation = cls.parse_text(text)

		logger.debug(f"Parsed {len(instrumentation)} sample files from instrumentation {path}")

		return instrumentation


	@classmethod
	def parse_text (cls, text: str) -> "Instrumentation":

		"""
		Parse the contents of an instrumentation file. Blank lines are skipped.
		"""

		bindings: typing.Dict[SampleFile, typing.Set[rudiments.pattern.Instrument]] = {}

		for line in text.splitlines():

			if not line.strip():
				continue

			try:
				instrument, sample_file = parse_binding(line)
			except rudiments.grammar.GrammarError as exc:
				raise rudiments.errors.ParseError(line) from exc

			if any(instrument in instruments for instruments in bindings.values()):
				raise rudiments.errors.DuplicateInstrumentError(instrument)

			bindings.setdefault(sample_file, set()).add(instrument)

		return cls(bindings)


	def instruments (self) -> typing.Set[rudiments.pattern.Instrument]:

		"""
		Return every instrument bound to a sample file.
		"""

		return set().union(*self._bindings.values())


	def __getitem__ (self, sample_file: SampleFile) -> typing.FrozenSet[rudiments.pattern.Instrument]:
		return self._bindings[sample_file]

	def __iter__ (self) -> typing.Iterator[SampleFile]:
		return iter(self._bindings)

	def __len__ (self) -> int:
		return len(self._bindings)

	def __repr__ (self) -> str:
		bindings = {str(k): sorted(v) for k, v in self._bindings.items()}
		return f"Instrumentation({bindings!r})"

	def __str__ (self) -> str:

		"""
		Render the bindings back into instrumentation file notation, one instrument per line.
		"""

		lines = [
			f"{instrument} {sample_file}"
			for sample_file, instruments in self._bindings.items()
			for instrument in sorted(instruments)
		]

		return "\n".join(lines) + ("\n" if lines else "")


def parse_binding (line: str) -> Binding:

	"""
	Parse a binding from a single line of an instrumentation file.

	Anything after the sample file token is ignored.
	"""

	cursor = rudiments.grammar.Cursor(line)

	rudiments.grammar.space0(cursor)
	instrument = rudiments.grammar.take_till(cursor, rudiments.grammar.WHITESPACE, rule="instrument")
	rudiments.grammar.space1(cursor)
	sample_file = rudiments.grammar.take_till(cursor, rudiments.grammar.WHITESPACE + "\r\n", rule="sample file")

	return instrument, SampleFile(pathlib.Path(sample_file))
