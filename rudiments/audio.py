"""Playback backend: sample decoding, mixing and device output.

The engine talks to a ``PlaybackBackend``. The default implementation decodes
samples with ``soundfile``, mixes them as mono float32 numpy buffers, and
plays the result through ``sounddevice``. PortAudio is only loaded when a
device is actually opened, so decoding and mixing work on machines without
audio hardware.
"""

import logging
import pathlib
import threading
import time
import types
import typing

import numpy
import soundfile

import rudiments.constants
import rudiments.errors


logger = logging.getLogger(__name__)


class Mix:

	"""
	An accumulating mono mix of delayed, amplified sample buffers.
	"""

	def __init__ (self, sample_rate: int = rudiments.constants.SAMPLE_RATE) -> None:

		self.sample_rate = sample_rate
		self._voices: typing.List[typing.Tuple[int, numpy.ndarray]] = []


	def add (self, buffer: numpy.ndarray, amplitude: float = 1.0, delay: float = 0.0) -> None:

		"""
		Place a copy of ``buffer`` scaled by ``amplitude`` at ``delay`` seconds into the mix.
		"""

		if delay < 0:
			raise ValueError("Delay cannot be negative")

		offset = int(round(delay * self.sample_rate))
		self._voices.append((offset, numpy.asarray(buffer, dtype=numpy.float32) * numpy.float32(amplitude)))


	@property
	def frames (self) -> int:

		"""
		The length of the mix in frames, up to the end of its last voice.
		"""

		return max((offset + len(buffer) for offset, buffer in self._voices), default=0)


	@property
	def duration (self) -> float:
		return self.frames / self.sample_rate


	def __len__ (self) -> int:
		return len(self._voices)


	def render (self) -> numpy.ndarray:

		"""
		Sum every voice into a single buffer, normalising if the peak exceeds full scale.
		"""

		out = numpy.zeros(self.frames, dtype=numpy.float32)

		for offset, buffer in self._voices:
			out[offset:offset + len(buffer)] += buffer

		peak = float(numpy.max(numpy.abs(out))) if out.size else 0.0

		if peak > 1.0:
			logger.debug(f"Mix peak {peak:.2f} exceeds full scale, normalising")
			out /= peak

		return out


	def padded (self, pad: float, duration: float) -> numpy.ndarray:

		"""
		Render the mix delayed by ``pad`` seconds and cut or extended to exactly ``duration`` seconds.

		The result is one period of a seamless loop.
		"""

		if pad < 0:
			raise ValueError("Pad cannot be negative")

		pad_frames = int(round(pad * self.sample_rate))
		total_frames = int(round(duration * self.sample_rate))

		out = numpy.zeros(total_frames, dtype=numpy.float32)
		body = self.render()

		if pad_frames < total_frames:
			length = min(len(body), total_frames - pad_frames)
			out[pad_frames:pad_frames + length] = body[:length]

		return out


@typing.runtime_checkable
class PlaybackBackend (typing.Protocol):

	"""
	Protocol for the audio collaborator the playback engine drives.
	"""

	def decode (self, path: pathlib.Path) -> typing.Any:

		"""
		Decode a sample file into a stream that can be scheduled.
		"""

		...

	def new_mix (self) -> typing.Any:

		"""
		Return an empty mix.
		"""

		...

	def schedule (self, mix: typing.Any, stream: typing.Any, amplitude: float, delay: float) -> None:

		"""
		Add one delayed, amplified copy of a decoded stream to the mix.
		"""

		...

	def render_once (self, mix: typing.Any, duration: float) -> None:

		"""
		Play the mix once, blocking for ``duration`` seconds.
		"""

		...

	def render_repeating (self, mix: typing.Any, pad_delay: float, measure_duration: float) -> None:

		"""
		Pad, truncate to one measure and loop the mix until stopped.
		"""

		...

	def open_default_device (self) -> typing.Any:

		"""
		Return the default output device or raise ``AudioDeviceError``.
		"""

		...


def load_sounddevice () -> types.ModuleType:

	"""
	Import ``sounddevice``, which loads the PortAudio library.
	"""

	try:
		import sounddevice
	except OSError as exc:
		raise rudiments.errors.AudioDeviceError("PortAudio library not found") from exc

	return sounddevice


def to_mono (data: numpy.ndarray) -> numpy.ndarray:

	"""
	Mix a (frames, channels) buffer down to a single channel.
	"""

	if data.ndim == 2:
		data = data.mean(axis=1)

	return numpy.asarray(data, dtype=numpy.float32)


def to_channels (data: numpy.ndarray, channels: int = rudiments.constants.CHANNELS) -> numpy.ndarray:

	"""
	Spread a mono buffer over ``channels`` identical output channels, shaped (frames, channels).
	"""

	if channels < 1:
		raise ValueError("Output needs at least one channel")

	return numpy.repeat(data.reshape(-1, 1), channels, axis=1)


def resample (data: numpy.ndarray, source_rate: int, target_rate: int) -> numpy.ndarray:

	"""
	Resample a mono buffer by linear interpolation.
	"""

	if source_rate == target_rate or len(data) == 0:
		return data.astype(numpy.float32, copy=False)

	duration = len(data) / float(source_rate)
	target_frames = int(round(duration * target_rate))

	source_times = numpy.arange(len(data), dtype=numpy.float64) / source_rate
	target_times = numpy.arange(target_frames, dtype=numpy.float64) / target_rate

	return numpy.interp(target_times, source_times, data).astype(numpy.float32)


class SoundDeviceBackend:

	"""
	Decodes with soundfile, mixes with numpy and plays through sounddevice.
	"""

	def __init__ (
		self,
		sample_rate: int = rudiments.constants.SAMPLE_RATE,
		latency: typing.Union[str, float] = "high",
		channels: int = rudiments.constants.CHANNELS
	) -> None:

		"""
		Parameters:
			sample_rate: Rate every sample is converted to and played at.
			latency: Passed to sounddevice; "high" favours glitch-free playback.
			channels: Number of output channels the mono mix is copied to.
		"""

		self.sample_rate = sample_rate
		self.latency = latency
		self.channels = channels

		self._cache: typing.Dict[pathlib.Path, numpy.ndarray] = {}
		self._stop_event = threading.Event()


	def decode (self, path: pathlib.Path) -> numpy.ndarray:

		path = pathlib.Path(path)

		if path in self._cache:
			return self._cache[path]

		try:
			data, rate = soundfile.read(str(path), dtype="float32", always_2d=True)
		except (RuntimeError, TypeError) as exc:
			raise rudiments.errors.AudioDecoderError(path) from exc

		buffer = resample(to_mono(data), rate, self.sample_rate)
		self._cache[path] = buffer

		logger.debug(f"Decoded {path} ({rate} Hz, {len(buffer)} frames at {self.sample_rate} Hz)")

		return buffer


	def new_mix (self) -> Mix:
		return Mix(self.sample_rate)


	def schedule (self, mix: Mix, stream: numpy.ndarray, amplitude: float, delay: float) -> None:
		mix.add(stream, amplitude=amplitude, delay=delay)


	def open_default_device (self) -> typing.Any:

		sounddevice = load_sounddevice()

		try:
			return sounddevice.query_devices(kind="output")
		except (sounddevice.PortAudioError, ValueError) as exc:
			raise rudiments.errors.AudioDeviceError(str(exc)) from exc


	def render_once (self, mix: Mix, duration: float) -> None:

		sounddevice = load_sounddevice()

		sounddevice.play(to_channels(mix.render(), self.channels), samplerate=self.sample_rate, latency=self.latency)

		# sleep for the duration of a single measure
		time.sleep(duration)


	def render_repeating (self, mix: Mix, pad_delay: float, measure_duration: float) -> None:

		sounddevice = load_sounddevice()

		sounddevice.play(to_channels(mix.padded(pad_delay, measure_duration), self.channels), samplerate=self.sample_rate, latency=self.latency, loop=True)

		try:
			self._stop_event.wait()
		finally:
			sounddevice.stop()
			self._stop_event.clear()


	def stop (self) -> None:

		"""
		Release a caller blocked in ``render_repeating``.
		"""

		self._stop_event.set()
