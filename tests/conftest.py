import pathlib
import typing

import numpy
import pytest
import soundfile

import rudiments.constants


class FakeBackend:

	"""Playback backend stub that records what the engine asks of it."""

	def __init__ (self) -> None:

		"""Start with no decoded streams and no renders."""

		self.decoded: typing.List[pathlib.Path] = []
		self.scheduled: typing.List[typing.Tuple[str, float, float]] = []
		self.rendered_once: typing.List[float] = []
		self.rendered_repeating: typing.List[typing.Tuple[float, float]] = []
		self.devices_opened = 0

	def decode (self, path: pathlib.Path) -> str:

		"""Use the file name as the decoded stream."""

		self.decoded.append(path)
		return path.name

	def new_mix (self) -> list:

		"""Mixes are plain lists of scheduled voices."""

		return []

	def schedule (self, mix: list, stream: str, amplitude: float, delay: float) -> None:

		"""Record one scheduled voice."""

		mix.append((stream, amplitude, delay))
		self.scheduled.append((stream, amplitude, delay))

	def render_once (self, mix: list, duration: float) -> None:

		"""Record a single-shot render without blocking."""

		self.rendered_once.append(duration)

	def render_repeating (self, mix: list, pad_delay: float, measure_duration: float) -> None:

		"""Record a looped render without blocking."""

		self.rendered_repeating.append((pad_delay, measure_duration))

	def open_default_device (self) -> str:

		"""Pretend a device is always available."""

		self.devices_opened += 1
		return "Dummy Audio"


@pytest.fixture
def fake_backend () -> FakeBackend:

	"""Return a fresh recording backend."""

	return FakeBackend()


@pytest.fixture
def write_file (tmp_path: pathlib.Path) -> typing.Callable[[str, str], pathlib.Path]:

	"""Return a helper that writes text to a file under tmp_path."""

	def _write (name: str, text: str) -> pathlib.Path:
		path = tmp_path / name
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(text, encoding="utf-8")
		return path

	return _write


@pytest.fixture
def samples_dir (tmp_path: pathlib.Path) -> pathlib.Path:

	"""Create a samples directory with short click WAVs for the standard kit."""

	directory = tmp_path / "samples"
	directory.mkdir()

	click = numpy.zeros(441, dtype=numpy.float32)
	click[:10] = 0.5

	for name in ("hh.wav", "tom.wav", "snare.wav", "kick.wav"):
		soundfile.write(str(directory / name), click, rudiments.constants.SAMPLE_RATE)

	return directory


STANDARD_PATTERN = (
	"hi-hat |x-x-|x-x-|x-x-|x-x-| 0.5\n"
	"snare  |----|x---|----|x---|\n"
	"kick   |x---|----|x---|----|\n"
)

STANDARD_INSTRUMENTATION = (
	"hi-hat hh.wav\n"
	"tom-1  tom.wav\n"
	"tom-2  tom.wav\n"
	"snare  snare.wav\n"
	"kick   kick.wav\n"
)
