import dataclasses
import typing

import rudiments.constants


class Steps:

	"""
	The step sequence of a single measure.

	Holds exactly ``STEPS_PER_MEASURE`` booleans; index 0 is the first 16th
	note of the measure. A sequence is only mutated through ``union()``.
	"""

	__slots__ = ("_bits",)

	def __init__ (self, bits: typing.Optional[typing.Iterable[bool]] = None) -> None:

		"""
		Create a sequence from an iterable of step values (all silent when omitted).
		"""

		if bits is None:
			self._bits = [False] * rudiments.constants.STEPS_PER_MEASURE
			return

		values = [bool(b) for b in bits]

		if len(values) != rudiments.constants.STEPS_PER_MEASURE:
			raise ValueError(f"A step sequence must have {rudiments.constants.STEPS_PER_MEASURE} steps, got {len(values)}")

		self._bits = values


	@classmethod
	def zeros (cls) -> "Steps":

		"""
		Return a sequence of all silent steps.
		"""

		return cls()


	@classmethod
	def from_bits (cls, bits: typing.Iterable[bool]) -> "Steps":

		"""
		Return a sequence from exactly ``STEPS_PER_MEASURE`` step values.
		"""

		return cls(bits)


	@classmethod
	def from_indices (cls, indices: typing.Iterable[int]) -> "Steps":

		"""
		Return a sequence that plays on the given step indices.
		"""

		steps = cls()

		for i in indices:
			if not 0 <= i < rudiments.constants.STEPS_PER_MEASURE:
				raise ValueError(f"Step index {i} is outside the measure")
			steps._bits[i] = True

		return steps


	def union (self, other: "Steps") -> None:

		"""
		Perform an in-place stepwise union of this sequence and the one given.
		"""

		self._bits = [a or b for a, b in zip(self._bits, other._bits)]


	def copy (self) -> "Steps":
		return Steps(self._bits)


	def active_steps (self) -> typing.List[int]:

		"""
		Return the indices of the *play* steps, in order.
		"""

		return [i for i, step in enumerate(self._bits) if step]


	def trailing_silent_steps (self) -> int:

		"""
		Return the number of silent steps at the end of this sequence.

		An entirely silent sequence has ``STEPS_PER_MEASURE`` trailing silent steps.
		"""

		count = 0

		for step in reversed(self._bits):
			if step:
				break
			count += 1

		return count


	def __iter__ (self) -> typing.Iterator[bool]:
		return iter(self._bits)

	def __len__ (self) -> int:
		return len(self._bits)

	def __getitem__ (self, index: int) -> bool:
		return self._bits[index]

	def __eq__ (self, other: object) -> bool:
		if not isinstance(other, Steps):
			return NotImplemented
		return self._bits == other._bits

	# mutable through union(), so never hashable
	__hash__ = None  # type: ignore[assignment]

	def __repr__ (self) -> str:
		return f"Steps({self})"

	def __str__ (self) -> str:

		"""
		Render the sequence in pattern notation, e.g. ``|x---|----|x---|----|``.
		"""

		chars = [rudiments.constants.STEP_PLAY if step else rudiments.constants.STEP_SILENT for step in self._bits]
		beat = rudiments.constants.STEPS_PER_BEAT
		groups = ["".join(chars[i:i + beat]) for i in range(0, len(chars), beat)]
		separator = rudiments.constants.SEPARATOR

		return separator + separator.join(groups) + separator


@dataclasses.dataclass(frozen=True)
class Amplitude:

	"""
	A track's amplitude in the range [0, 1] inclusive (1.0 is full volume).
	"""

	value: float = 1.0

	def __post_init__ (self) -> None:
		if not 0.0 <= self.value <= 1.0:
			raise ValueError(f"Amplitude must be between 0 and 1, got {self.value}")

	@classmethod
	def max (cls) -> "Amplitude":

		"""
		Return an amplitude of the maximum value.
		"""

		return cls(1.0)

	@classmethod
	def defaulting (cls, value: typing.Optional[float]) -> "Amplitude":

		"""
		Return the amplitude for an optional value, full volume when missing.
		"""

		return cls.max() if value is None else cls(value)

	@classmethod
	def parse (cls, token: typing.Optional[str]) -> "Amplitude":

		"""
		Parse an amplitude token such as ``"0.5"``; a missing token is full volume.

		Raises:
			ValueError: The token is not a number or is outside [0, 1].
		"""

		if token is None:
			return cls.max()

		return cls(float(token))

	def min (self, other: "Amplitude") -> "Amplitude":

		"""
		Compare the amplitude to another and return the quieter of the two.
		"""

		return self if self.value <= other.value else other

	def __str__ (self) -> str:
		return f"{self.value:g}"
