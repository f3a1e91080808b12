"""Keyboard window projection.

Transposing exercises can wander outside a vocal part's default two-octave
window. ``project()`` widens the window just enough to show every note the
exercise will play, and never narrows it.
"""

import vocalise.exercises
import vocalise.expander


def project (
	exercise: vocalise.exercises.ExerciseDefinition,
	root_pitch: int,
	base_display_range: vocalise.exercises.NoteRange,
) -> vocalise.exercises.NoteRange:

	"""Return the smallest window covering ``base_display_range`` and every played pitch.

	Static exercises return ``base_display_range`` unchanged. Other kinds walk
	the same offsets the Expander uses without building the passes.

	Example:
		```python
		tenor = VOCAL_RANGES["tenor"]   # root C3 (48), window C3-C5
		project(EXERCISES["fifthsDescending"], tenor.root, tenor.display_range)
		# → NoteRange(first=38, last=72)
		```
	"""

	if exercise.kind == vocalise.exercises.STATIC:
		return base_display_range

	lowest = base_display_range.first
	highest = base_display_range.last

	for offset in vocalise.expander.transposition_offsets(exercise):
		lowest = min(lowest, root_pitch + offset + min(exercise.pattern))
		highest = max(highest, root_pitch + offset + max(exercise.pattern))

	return vocalise.exercises.NoteRange(lowest, highest)
