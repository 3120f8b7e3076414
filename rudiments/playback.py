import logging
import pathlib
import typing

import rudiments.audio
import rudiments.binding
import rudiments.instrumentation
import rudiments.pattern
import rudiments.steps
import rudiments.timing


logger = logging.getLogger(__name__)


def play (
	pattern: rudiments.pattern.Pattern,
	instrumentation: rudiments.instrumentation.Instrumentation,
	samples_path: typing.Union[str, pathlib.Path],
	tempo: rudiments.timing.Tempo,
	repeat: bool = False,
	backend: typing.Optional[rudiments.audio.PlaybackBackend] = None
) -> None:

	"""
	Play a pattern once or repeatedly at the tempo given, using samples found under ``samples_path``.

	Every sample is resolved and decoded before anything is played, so a
	missing or broken sample aborts the run without sounding a partial mix.
	Playing once blocks for one measure; playing on repeat blocks until the
	backend is stopped or the process is interrupted.
	"""

	if backend is None:
		backend = rudiments.audio.SoundDeviceBackend()

	tracks, aggregate_steps = rudiments.binding.bind_tracks(pattern, instrumentation)
	mix = mix_tracks(tempo, tracks, pathlib.Path(samples_path), backend)

	logger.info(f"Playing {len(tracks)} tracks at {tempo} BPM" + (" on repeat" if repeat else ""))

	if repeat:
		play_repeat(tempo, mix, aggregate_steps, backend)
	else:
		play_once(tempo, mix, backend)


def mix_tracks (
	tempo: rudiments.timing.Tempo,
	tracks: rudiments.binding.Tracks,
	samples_path: pathlib.Path,
	backend: rudiments.audio.PlaybackBackend
) -> typing.Any:

	"""
	Mix the tracks together using sample files found in the path given.

	Each track's sample is scheduled once per *play* step, delayed to that
	step's offset within the measure and scaled by the track amplitude.
	"""

	mix = backend.new_mix()

	for sample_file, track in tracks.items():

		resolved = sample_file.with_parent(samples_path)
		stream = backend.decode(resolved.path)

		for index in track.steps.active_steps():
			backend.schedule(mix, stream, track.amplitude.value, rudiments.timing.step_delay(tempo, index))

	return mix


def play_once (tempo: rudiments.timing.Tempo, mix: typing.Any, backend: rudiments.audio.PlaybackBackend) -> None:

	"""
	Play a mixed pattern once.
	"""

	backend.open_default_device()
	backend.render_once(mix, rudiments.timing.measure_duration(tempo))


def play_repeat (tempo: rudiments.timing.Tempo, mix: typing.Any, aggregate_steps: rudiments.steps.Steps, backend: rudiments.audio.PlaybackBackend) -> None:

	"""
	Play a mixed pattern repeatedly.

	The mix is forward padded according to the trailing silence of the whole
	pattern, then cut to one measure so every repetition lasts exactly one
	measure.
	"""

	backend.open_default_device()

	pad = loop_pad(tempo, aggregate_steps)

	backend.render_repeating(mix, pad, rudiments.timing.measure_duration(tempo))


def loop_pad (tempo: rudiments.timing.Tempo, aggregate_steps: rudiments.steps.Steps) -> float:

	"""
	Compute the forward pad for a looped mix, never less than zero.
	"""

	pad = rudiments.timing.delay_pad_duration(tempo, aggregate_steps.trailing_silent_steps())

	if pad < 0:
		logger.warning(f"Negative loop padding ({pad:.3f}s) at {tempo} BPM, playing without padding")
		return 0.0

	return pad
