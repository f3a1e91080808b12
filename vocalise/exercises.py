"""Exercise catalog and vocal range profiles.

An exercise is a pattern of semitone offsets from a root, with a default
rhythm (in beats per note) and one syllable per note. Its ``kind`` decides how
the pattern is transposed over the run:

- ``"static"`` plays the pattern once.
- ``"ascending"`` repeats it ``iterations`` times, each ``step_size`` higher.
- ``"descending"`` repeats it ``iterations`` times, each ``step_size`` lower.
- ``"roundtrip"`` descends like ``"descending"`` then climbs back to the
  starting key without repeating the lowest pass.

Both tables are module level and must be treated as read-only.

Module-level constants:
- `EXERCISES`: exercise id → `ExerciseDefinition`, in menu order
- `VOCAL_RANGES`: vocal part → `VocalRange`
"""

import dataclasses
import typing

import vocalise.chords
import vocalise.errors
import vocalise.notes


STATIC = "static"
ASCENDING = "ascending"
DESCENDING = "descending"
ROUNDTRIP = "roundtrip"

EXERCISE_KINDS: typing.Tuple[str, ...] = (STATIC, ASCENDING, DESCENDING, ROUNDTRIP)


@dataclasses.dataclass(frozen=True)
class NoteRange:

	"""
	An inclusive span of MIDI notes, ``first <= last``.
	"""

	first: int
	last: int

	def __post_init__ (self) -> None:
		if self.first > self.last:
			raise vocalise.errors.ConfigurationError(f"Invalid note range {self.first}-{self.last}")

	def contains (self, other: "NoteRange") -> bool:

		"""Return True when ``other`` lies entirely within this range."""

		return self.first <= other.first and other.last <= self.last


@dataclasses.dataclass(frozen=True)
class VocalRange:

	"""
	Root pitch and default keyboard window for one vocal part.
	"""

	name: str
	root: int
	display_range: NoteRange
	color: str = "#000000"


@dataclasses.dataclass(frozen=True)
class ExerciseDefinition:

	"""A declarative melodic exercise.

	Parameters:
		name: Human-readable name shown in menus.
		kind: One of ``EXERCISE_KINDS``.
		pattern: Semitone offsets from the vocal part's root.
		rhythm: Duration of each note in beats. Must be positive.
		syllables: Label sung on each note.
		step_size: Semitones between transposed passes. ``None`` for static exercises.
		iterations: Number of transposed passes. ``None`` for static exercises.
		chord: Chord-intro family (see ``vocalise.chords.CHORD_INTERVALS``).

	The pattern, rhythm and syllables must have the same length. Iteration
	settings are checked when the exercise is expanded, so a definition with
	``iterations=0`` can exist but never plays.
	"""

	name: str
	kind: str
	pattern: typing.Tuple[int, ...]
	rhythm: typing.Tuple[float, ...]
	syllables: typing.Tuple[str, ...]
	step_size: typing.Optional[int] = None
	iterations: typing.Optional[int] = None
	chord: str = "major"

	def __post_init__ (self) -> None:

		if self.kind not in EXERCISE_KINDS:
			raise vocalise.errors.ConfigurationError(f"Unknown exercise kind: {self.kind!r}")

		if not self.pattern:
			raise vocalise.errors.ConfigurationError(f"Exercise {self.name!r} has an empty pattern")

		if not (len(self.pattern) == len(self.rhythm) == len(self.syllables)):
			raise vocalise.errors.ConfigurationError(
				f"Exercise {self.name!r}: pattern, rhythm and syllables differ in length "
				f"({len(self.pattern)}, {len(self.rhythm)}, {len(self.syllables)})"
			)

		if any(value <= 0 for value in self.rhythm):
			raise vocalise.errors.ConfigurationError(f"Exercise {self.name!r}: rhythm values must be positive")

		if self.chord not in vocalise.chords.CHORD_INTERVALS:
			raise vocalise.errors.ConfigurationError(f"Exercise {self.name!r}: unknown chord family {self.chord!r}")


def _exercise (
	name: str,
	kind: str,
	pattern: typing.Sequence[int],
	rhythm: typing.Sequence[float],
	syllables: str,
	step_size: typing.Optional[int] = None,
	iterations: typing.Optional[int] = None,
	chord: str = "major",
) -> ExerciseDefinition:

	"""Build a catalog entry from list literals and a space-separated syllable string."""

	return ExerciseDefinition(
		name = name,
		kind = kind,
		pattern = tuple(pattern),
		rhythm = tuple(rhythm),
		syllables = tuple(syllables.split()),
		step_size = step_size,
		iterations = iterations,
		chord = chord,
	)


_MAJOR_SCALE = [0, 2, 4, 5, 7, 9, 11, 12, 11, 9, 7, 5, 4, 2, 0]
_MAJOR_SCALE_RHYTHM = [1, 1, 1, 1, 1, 1, 1, 2, 1, 1, 1, 1, 1, 1, 2]
_MAJOR_SCALE_SYLLABLES = "Do Re Mi Fa Sol La Ti Do Ti La Sol Fa Mi Re Do"

_ARPEGGIO = [0, 4, 7, 12, 7, 4, 0]
_ARPEGGIO_RHYTHM = [1, 1, 1, 2, 1, 1, 2]
_ARPEGGIO_SYLLABLES = "Do Mi Sol Do Sol Mi Do"

_TRIAD = [0, 4, 7, 4, 0]
_TRIAD_RHYTHM = [1, 1, 1, 1, 2]
_TRIAD_SYLLABLES = "Ma Me Mi Mo Mu"

_FIFTHS = [0, 7, 0]
_FIFTHS_RHYTHM = [2, 2, 4]
_FIFTHS_SYLLABLES = "Ah Ah Ah"


EXERCISES: typing.Dict[str, ExerciseDefinition] = {

	# Single pass in the vocal part's home key.
	"majorScale": _exercise("Major Scale", STATIC, _MAJOR_SCALE, _MAJOR_SCALE_RHYTHM, _MAJOR_SCALE_SYLLABLES),
	"arpeggio": _exercise("Major Arpeggio", STATIC, _ARPEGGIO, _ARPEGGIO_RHYTHM, _ARPEGGIO_SYLLABLES, chord="major_octave"),
	"fifths": _exercise("Ascending Fifths", STATIC, [0, 7, 0, 7, 0], [2, 2, 2, 2, 4], "Ah Ah Ah Ah Ah", chord="power"),
	"octaveJumps": _exercise("Octave Jumps", STATIC, [0, 12, 0, 12, 0], [1, 1, 1, 1, 4], "Ha Ha Ha Ha Ha", chord="octave"),
	"triad": _exercise("Triad (1-3-5-3-1)", STATIC, _TRIAD, _TRIAD_RHYTHM, _TRIAD_SYLLABLES),

	# Range explorers: start in the home key and step down.
	"triadDescending": _exercise("Triad - Descending (Range Explorer)", DESCENDING, _TRIAD, _TRIAD_RHYTHM, _TRIAD_SYLLABLES, 2, 5),
	"fifthsDescending": _exercise("Fifths - Descending (Range Explorer)", DESCENDING, _FIFTHS, _FIFTHS_RHYTHM, _FIFTHS_SYLLABLES, 2, 6, chord="power"),
	"majorScaleDescending": _exercise("Major Scale - Descending (Range Explorer)", DESCENDING, _MAJOR_SCALE, _MAJOR_SCALE_RHYTHM, _MAJOR_SCALE_SYLLABLES, 1, 12),
	"arpeggioDescending": _exercise("Arpeggio - Descending (Range Explorer)", DESCENDING, _ARPEGGIO, _ARPEGGIO_RHYTHM, _ARPEGGIO_SYLLABLES, 2, 6, chord="major_octave"),

	# Range builders: start in the home key and step up.
	"triadAscending": _exercise("Triad - Ascending (Range Building)", ASCENDING, _TRIAD, _TRIAD_RHYTHM, _TRIAD_SYLLABLES, 2, 5),
	"fifthsAscending": _exercise("Fifths - Ascending (Range Building)", ASCENDING, _FIFTHS, _FIFTHS_RHYTHM, _FIFTHS_SYLLABLES, 2, 6, chord="power"),
	"majorScaleAscending": _exercise("Major Scale - Ascending (Range Building)", ASCENDING, _MAJOR_SCALE, _MAJOR_SCALE_RHYTHM, _MAJOR_SCALE_SYLLABLES, 1, 12),
	"arpeggioAscending": _exercise("Arpeggio - Ascending (Range Building)", ASCENDING, _ARPEGGIO, _ARPEGGIO_RHYTHM, _ARPEGGIO_SYLLABLES, 2, 6, chord="major_octave"),

	# Down and back up again.
	"triadRoundTrip": _exercise("Triad - Round Trip (Full Range)", ROUNDTRIP, _TRIAD, _TRIAD_RHYTHM, _TRIAD_SYLLABLES, 2, 5),
	"fifthsRoundTrip": _exercise("Fifths - Round Trip (Full Range)", ROUNDTRIP, _FIFTHS, _FIFTHS_RHYTHM, _FIFTHS_SYLLABLES, 2, 6, chord="power"),
}


def _vocal_range (name: str, root: str, last: str, color: str) -> VocalRange:
	root_pitch = vocalise.notes.note_to_midi(root)
	return VocalRange(name=name, root=root_pitch, display_range=NoteRange(root_pitch, vocalise.notes.note_to_midi(last)), color=color)


# Each part's window spans two octaves up from its root.
VOCAL_RANGES: typing.Dict[str, VocalRange] = {
	"bass": _vocal_range("bass", "E2", "E4", "#1e40af"),
	"baritone": _vocal_range("baritone", "A2", "A4", "#059669"),
	"tenor": _vocal_range("tenor", "C3", "C5", "#d97706"),
	"alto": _vocal_range("alto", "G3", "G5", "#dc2626"),
	"soprano": _vocal_range("soprano", "C4", "C6", "#9333ea"),
}


def get_exercise (exercise_id: str) -> ExerciseDefinition:

	"""Look up an exercise by id, raising ``ConfigurationError`` for unknown ids."""

	if exercise_id not in EXERCISES:
		raise vocalise.errors.ConfigurationError(
			f"Unknown exercise: {exercise_id!r}. Available: {', '.join(EXERCISES)}"
		)

	return EXERCISES[exercise_id]


def get_vocal_range (vocal_part: str) -> VocalRange:

	"""Look up a vocal part, raising ``ConfigurationError`` for unknown names."""

	if vocal_part not in VOCAL_RANGES:
		raise vocalise.errors.ConfigurationError(
			f"Unknown vocal part: {vocal_part!r}. Available: {', '.join(VOCAL_RANGES)}"
		)

	return VOCAL_RANGES[vocal_part]


def list_exercises () -> typing.List[typing.Tuple[str, str]]:

	"""Return ``(exercise_id, name)`` pairs in catalog order."""

	return [(exercise_id, exercise.name) for exercise_id, exercise in EXERCISES.items()]
