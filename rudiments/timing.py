"""Timing arithmetic for scheduling sample triggers.

Every quantity is a pure function of the tempo (and, for loop padding, of a
step sequence). Durations are in seconds.

A measure is four beats, so at 120 BPM it lasts two seconds and each of its
16 steps lasts 0.125 seconds::

	tempo = Tempo(120)
	measure_duration(tempo)   # 2.0
	step_duration(tempo)      # 0.125
	step_delay(tempo, 4)      # 0.5
"""

import dataclasses
import logging

import rudiments.constants


logger = logging.getLogger(__name__)

# Above this tempo the loop padding factor is zero or negative.
MAX_PADDED_TEMPO = 240


@dataclasses.dataclass(frozen=True)
class Tempo:

	"""
	The playback tempo in beats per minute.
	"""

	bpm: int = rudiments.constants.DEFAULT_TEMPO

	def __post_init__ (self) -> None:
		if isinstance(self.bpm, bool) or not isinstance(self.bpm, int):
			raise ValueError(f"Tempo must be a whole number of beats per minute, got {self.bpm!r}")
		if self.bpm <= 0:
			raise ValueError(f"Tempo must be positive, got {self.bpm}")

	def __str__ (self) -> str:
		return str(self.bpm)


def measure_duration (tempo: Tempo) -> float:

	"""
	Compute the duration of a measure.
	"""

	return 60.0 / (tempo.bpm / rudiments.constants.BEATS_PER_MEASURE)


def step_duration (tempo: Tempo) -> float:

	"""
	Compute the duration of a step.
	"""

	return measure_duration(tempo) / rudiments.constants.STEPS_PER_MEASURE


def step_delay (tempo: Tempo, index: int) -> float:

	"""
	Compute the offset of a step from the start of its measure.
	"""

	if not 0 <= index < rudiments.constants.STEPS_PER_MEASURE:
		raise ValueError(f"Step index {index} is outside the measure")

	return step_duration(tempo) * index


def delay_factor (tempo: Tempo) -> float:

	"""
	Compute the factor applied when delay-padding a mix played on repeat.

	Empirically tuned: 1.0 at 120 BPM, rising as the tempo falls and falling
	as it rises. It reaches zero at 240 BPM and is negative beyond that.
	"""

	return 2.0 - tempo.bpm / 120.0


def delay_pad_duration (tempo: Tempo, trailing_silent_steps: int) -> float:

	"""
	Compute how long to delay a mix with trailing silence when played on repeat.

	This shifts the audible content within the fixed measure window so that
	the next repetition begins at the end of the current measure instead of
	right after its final non-silent step. The result is negative above
	``MAX_PADDED_TEMPO``; callers decide how to treat that.
	"""

	if tempo.bpm > MAX_PADDED_TEMPO:
		logger.warning(f"Loop padding factor is negative at {tempo} BPM")

	return step_duration(tempo) * delay_factor(tempo) * trailing_silent_steps
