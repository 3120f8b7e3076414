import dataclasses
import functools
import logging
import typing

import rudiments.instrumentation
import rudiments.pattern
import rudiments.steps


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Track:

	"""
	The reduced trigger schedule and loudness of one sample file.
	"""

	steps: rudiments.steps.Steps
	amplitude: rudiments.steps.Amplitude


Entry = typing.Tuple[rudiments.steps.Steps, rudiments.steps.Amplitude]

# The fully bound and reduced tracks of a pattern.
Tracks = typing.Dict[rudiments.instrumentation.SampleFile, Track]


def union_steps (a: rudiments.steps.Steps, b: rudiments.steps.Steps) -> rudiments.steps.Steps:

	"""
	Return the union of two sequences without modifying either.
	"""

	steps = a.copy()
	steps.union(b)
	return steps


def combine (accumulator: Entry, entry: Entry) -> Entry:

	"""
	Fold one (steps, amplitude) pair into an accumulator: union the steps, keep the quieter amplitude.
	"""

	return union_steps(accumulator[0], entry[0]), accumulator[1].min(entry[1])


def reduce_track (entries: typing.Iterable[Entry]) -> Track:

	"""
	Reduce the entries of every instrument sharing a sample file into one track.

	Union and min are commutative and associative with identities "all silent"
	and "full volume", so the result does not depend on iteration order.
	"""

	identity: Entry = (rudiments.steps.Steps.zeros(), rudiments.steps.Amplitude.max())
	steps, amplitude = functools.reduce(combine, entries, identity)

	return Track(steps=steps, amplitude=amplitude)


def bind_tracks (pattern: rudiments.pattern.Pattern, instrumentation: rudiments.instrumentation.Instrumentation) -> typing.Tuple[Tracks, rudiments.steps.Steps]:

	"""
	Bind a pattern's step sequences to sample files.

	Sequences bound to the same sample file are unioned, and the smallest
	amplitude among them is used. Instruments bound in the instrumentation but
	absent from the pattern contribute nothing.

	Returns:
		The tracks keyed by sample file, and the union of every track's steps.
	"""

	tracks: Tracks = {}

	for sample_file, instruments in instrumentation.items():
		entries = [entry for entry in (pattern.get(i) for i in instruments) if entry is not None]
		tracks[sample_file] = reduce_track(entries)

	aggregate_steps = functools.reduce(union_steps, (track.steps for track in tracks.values()), rudiments.steps.Steps.zeros())

	unbound = set(pattern) - instrumentation.instruments()

	if unbound:
		logger.warning(f"Instruments without a sample file will not play: {', '.join(sorted(unbound))}")

	logger.debug(f"Bound {len(tracks)} tracks, aggregate steps {aggregate_steps}")

	return tracks, aggregate_steps
