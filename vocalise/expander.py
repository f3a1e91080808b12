"""Expand an exercise into concrete, transposed passes.

Each exercise kind has one function that returns its list of transposition
offsets; ``expand()`` turns every offset into a ``SequenceInstance`` ready for
scheduling. The Range Projector reuses ``transposition_offsets()`` so the
keyboard window always matches what will actually play.
"""

import dataclasses
import logging
import typing

import vocalise.chords
import vocalise.errors
import vocalise.exercises


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SequenceInstance:

	"""
	One transposed pass of an exercise.
	"""

	pitches: typing.Tuple[int, ...]
	rhythm: typing.Tuple[float, ...]
	syllables: typing.Tuple[str, ...]
	label: typing.Optional[str] = None
	offset: int = 0
	chord_pitches: typing.Tuple[int, ...] = ()

	def display_text (self, index: int) -> str:

		"""Syllable for note ``index`` with this pass's label appended, e.g. ``"Mi (+2)"``."""

		syllable = self.syllables[index]
		return f"{syllable} {self.label}" if self.label else syllable


def _check_iterations (exercise: vocalise.exercises.ExerciseDefinition) -> typing.Tuple[int, int]:

	"""Return ``(step_size, iterations)`` for a transposing exercise, or raise."""

	if exercise.iterations is None or exercise.iterations < 1:
		raise vocalise.errors.ConfigurationError(
			f"Exercise {exercise.name!r} needs iterations >= 1, got {exercise.iterations}"
		)

	if exercise.step_size is None or exercise.step_size < 1:
		raise vocalise.errors.ConfigurationError(
			f"Exercise {exercise.name!r} needs step_size >= 1, got {exercise.step_size}"
		)

	return exercise.step_size, exercise.iterations


def _static_offsets (exercise: vocalise.exercises.ExerciseDefinition) -> typing.List[int]:
	return [0]


def _ascending_offsets (exercise: vocalise.exercises.ExerciseDefinition) -> typing.List[int]:
	step_size, iterations = _check_iterations(exercise)
	return [step_size * i for i in range(iterations)]


def _descending_offsets (exercise: vocalise.exercises.ExerciseDefinition) -> typing.List[int]:
	step_size, iterations = _check_iterations(exercise)
	return [-step_size * i for i in range(iterations)]


def _roundtrip_offsets (exercise: vocalise.exercises.ExerciseDefinition) -> typing.List[int]:

	"""Descend, then mirror back up without sounding the lowest pass twice."""

	step_size, iterations = _check_iterations(exercise)

	down = [-step_size * i for i in range(iterations)]
	up = [-step_size * i for i in range(iterations - 2, -1, -1)]

	return down + up


_OFFSET_FUNCTIONS: typing.Dict[str, typing.Callable[[vocalise.exercises.ExerciseDefinition], typing.List[int]]] = {
	vocalise.exercises.STATIC: _static_offsets,
	vocalise.exercises.ASCENDING: _ascending_offsets,
	vocalise.exercises.DESCENDING: _descending_offsets,
	vocalise.exercises.ROUNDTRIP: _roundtrip_offsets,
}


def transposition_offsets (exercise: vocalise.exercises.ExerciseDefinition) -> typing.List[int]:

	"""Return the transposition offset of every pass, in playing order.

	Example:
		```python
		transposition_offsets(EXERCISES["fifthsRoundTrip"])
		# → [0, -2, -4, -6, -8, -10, -8, -6, -4, -2, 0]
		```

	Raises:
		ConfigurationError: If a transposing exercise has ``iterations < 1`` or
			``step_size < 1``.
	"""

	if exercise.kind not in _OFFSET_FUNCTIONS:
		raise vocalise.errors.ConfigurationError(f"Unknown exercise kind: {exercise.kind!r}")

	return _OFFSET_FUNCTIONS[exercise.kind](exercise)


def offset_label (offset: int) -> typing.Optional[str]:

	"""Label a transposed pass: ``"(+2)"``, ``"(-4)"``, or ``None`` in the home key."""

	if offset == 0:
		return None

	return f"({offset:+d})"


def validate_rhythm (exercise: vocalise.exercises.ExerciseDefinition, rhythm: typing.Sequence[float]) -> typing.Tuple[float, ...]:

	"""Check an override rhythm against an exercise and return it as a tuple.

	Raises:
		ConfigurationError: If the length differs from the pattern or any value
			is not positive.
	"""

	values = tuple(rhythm)

	if len(values) != len(exercise.pattern):
		raise vocalise.errors.ConfigurationError(
			f"Rhythm has {len(values)} values but {exercise.name!r} has {len(exercise.pattern)} notes"
		)

	if any(value <= 0 for value in values):
		raise vocalise.errors.ConfigurationError("Rhythm values must be positive")

	return values


def expand (
	exercise: vocalise.exercises.ExerciseDefinition,
	root_pitch: int,
	override_rhythm: typing.Optional[typing.Sequence[float]] = None,
) -> typing.List[SequenceInstance]:

	"""Render an exercise as a list of concrete passes.

	Parameters:
		exercise: The catalog entry to expand.
		root_pitch: MIDI note the pattern's offset 0 maps to in the first pass.
		override_rhythm: Optional rhythm replacing the exercise's own on every
			pass. Must match the pattern length.

	Returns:
		One ``SequenceInstance`` per transposition offset, in playing order.

	Raises:
		ConfigurationError: For invalid iteration settings or a mismatched
			override rhythm.
	"""

	rhythm = exercise.rhythm if override_rhythm is None else validate_rhythm(exercise, override_rhythm)
	offsets = transposition_offsets(exercise)

	instances = [
		SequenceInstance(
			pitches = tuple(root_pitch + semitone + offset for semitone in exercise.pattern),
			rhythm = rhythm,
			syllables = exercise.syllables,
			label = offset_label(offset),
			offset = offset,
			chord_pitches = vocalise.chords.chord_pitches(exercise.chord, root_pitch + offset),
		)
		for offset in offsets
	]

	logger.debug(f"Expanded {exercise.name!r} at root {root_pitch} into {len(instances)} passes")

	return instances
