import pathlib
import typing

import pytest

import conftest
import rudiments.errors
import rudiments.grammar
import rudiments.pattern
import rudiments.steps


def test_parse_track () -> None:

	"""A track line yields instrument, steps and default amplitude."""

	instrument, steps, amplitude = rudiments.pattern.parse_track("a |----|----|----|----|")

	assert instrument == "a"
	assert steps == rudiments.steps.Steps.zeros()
	assert amplitude == rudiments.steps.Amplitude.max()


def test_parse_track_with_amplitude_and_whitespace () -> None:

	"""Leading, separating and trailing whitespace are all accepted."""

	instrument, steps, amplitude = rudiments.pattern.parse_track("  hi-hat\t|x-x-|x-x-|x-x-|x-x-|  0.5 \t")

	assert instrument == "hi-hat"
	assert steps.active_steps() == [0, 2, 4, 6, 8, 10, 12, 14]
	assert amplitude.value == 0.5


@pytest.mark.parametrize("block", [
	"",
	"|----|",
	"|----|----|----|----|-",
	"|----|----|----|---|",
])
def test_parse_steps_wrong_length (block: str) -> None:

	"""Blocks that do not hold exactly 16 steps are rejected."""

	with pytest.raises(rudiments.grammar.GrammarError):
		rudiments.pattern.parse_steps(rudiments.grammar.Cursor(block))


def test_parse_steps_values () -> None:

	"""Play and silent characters decode to booleans; separators are skipped."""

	assert rudiments.pattern.parse_steps(rudiments.grammar.Cursor("|xxxx|xxxx|xxxx|xxxx|")) == rudiments.steps.Steps([True] * 16)
	assert rudiments.pattern.parse_steps(rudiments.grammar.Cursor("|x-x-|x-x-|x-x-|x-x-|")).active_steps() == list(range(0, 16, 2))


def test_parse_amplitude () -> None:

	"""Amplitude accepts exactly [0, 1] and defaults to 1.0 when absent."""

	assert rudiments.pattern.parse_amplitude(rudiments.grammar.Cursor("")).value == 1.0
	assert rudiments.pattern.parse_amplitude(rudiments.grammar.Cursor("0.0")).value == 0.0
	assert rudiments.pattern.parse_amplitude(rudiments.grammar.Cursor("0.5")).value == 0.5
	assert rudiments.pattern.parse_amplitude(rudiments.grammar.Cursor("1.0")).value == 1.0

	for text in ("-1.0", "1.1"):
		with pytest.raises(rudiments.grammar.GrammarError):
			rudiments.pattern.parse_amplitude(rudiments.grammar.Cursor(text))


@pytest.mark.parametrize("line", [
	"kick |x---|----|x---|----| loud",
	"kick |x---|----|x---|----| 1.5",
	"kick |x---|----|x---|----| -0.1",
	"kick |x---|----|x---|----| 0.5 extra",
	"kick |x---|----|x---|----|0.5abc",
	"kick |x-o-|----|x---|----|",
	"kick",
	"kick|x---|----|x---|----|",
])
def test_malformed_lines_raise_parse_error (line: str) -> None:

	"""Any field-level failure is a ParseError carrying the line."""

	with pytest.raises(rudiments.errors.ParseError) as info:
		rudiments.pattern.Pattern.parse_text(line + "\n")

	assert info.value.line == line


def test_duplicate_instrument () -> None:

	"""A second line for an instrument is an error, whatever its contents."""

	text = "kick |x---|----|x---|----|\nkick |----|----|----|---x| 0.2\n"

	with pytest.raises(rudiments.errors.DuplicatePatternError, match="duplicate pattern") as info:
		rudiments.pattern.Pattern.parse_text(text)

	assert info.value.instrument == "kick"
	assert isinstance(info.value, rudiments.errors.DuplicateInstrumentError)


def test_parse_standard_pattern () -> None:

	"""The standard groove parses into three tracks."""

	pattern = rudiments.pattern.Pattern.parse_text(conftest.STANDARD_PATTERN)

	assert set(pattern) == {"hi-hat", "snare", "kick"}
	assert pattern["hi-hat"][1].value == 0.5
	assert pattern["snare"][0].active_steps() == [4, 12]
	assert pattern["kick"][0].active_steps() == [0, 8]
	assert pattern.get("tom-1") is None


def test_blank_lines_are_skipped () -> None:

	"""Empty and whitespace-only lines carry no track."""

	pattern = rudiments.pattern.Pattern.parse_text("\nkick |x---|----|x---|----|\n   \n")

	assert list(pattern) == ["kick"]


def test_str_round_trips (write_file: typing.Callable[[str, str], pathlib.Path]) -> None:

	"""Rendering a pattern gives text that parses to the same pattern."""

	pattern = rudiments.pattern.Pattern.parse_text(conftest.STANDARD_PATTERN)
	again = rudiments.pattern.Pattern.parse(write_file("copy", str(pattern)))

	assert dict(again) == dict(pattern)
	assert "0.5" in str(pattern)


def test_parse_file (write_file: typing.Callable[[str, str], pathlib.Path]) -> None:

	"""Pattern.parse reads a file from disk."""

	pattern = rudiments.pattern.Pattern.parse(write_file("standard", conftest.STANDARD_PATTERN))

	assert len(pattern) == 3


def test_missing_file (tmp_path: pathlib.Path) -> None:

	"""A path that does not exist fails with FileDoesNotExistError."""

	with pytest.raises(rudiments.errors.FileDoesNotExistError) as info:
		rudiments.pattern.Pattern.parse(tmp_path / "nope")

	assert isinstance(info.value, FileNotFoundError)
	assert info.value.path == tmp_path / "nope"


def test_directory_is_not_a_pattern_file (tmp_path: pathlib.Path) -> None:

	"""A directory fails with FileDoesNotExistError before any line is read."""

	with pytest.raises(rudiments.errors.FileDoesNotExistError):
		rudiments.pattern.Pattern.parse(tmp_path)


def test_changing_returned_steps_leaves_pattern_untouched () -> None:

	"""Steps handed out by a pattern are copies; a union on them does not reach the pattern."""

	pattern = rudiments.pattern.Pattern.parse_text(conftest.STANDARD_PATTERN)

	steps, _ = pattern.get("kick")
	steps.union(rudiments.steps.Steps.from_indices([15]))

	assert steps.active_steps() == [0, 8, 15]
	assert pattern["kick"][0].active_steps() == [0, 8]

	pattern["kick"][0].union(rudiments.steps.Steps.from_indices([15]))

	assert pattern.get("kick")[0].active_steps() == [0, 8]


def test_constructor_copies_steps () -> None:

	"""A pattern built from existing steps does not share them with the caller."""

	steps = rudiments.steps.Steps.from_indices([0])
	pattern = rudiments.pattern.Pattern({"kick": (steps, rudiments.steps.Amplitude.max())})

	steps.union(rudiments.steps.Steps.from_indices([4]))

	assert pattern["kick"][0].active_steps() == [0]


def test_undecodable_file_is_read_error (tmp_path: pathlib.Path) -> None:

	"""A file that is not valid UTF-8 fails with ReadError."""

	path = tmp_path / "latin"
	path.write_bytes(b"kick |x---|----|x---|----| \xff\xfe\n")

	with pytest.raises(rudiments.errors.ReadError) as info:
		rudiments.pattern.Pattern.parse(path)

	assert isinstance(info.value, rudiments.errors.RudimentsError)
	assert info.value.path == path
