"""Chord-intro interval families.

Each exercise names a family. The chord intro sounds that family's intervals
above the instance root before the pattern, as a pitch reference for the
singer. Intervals are fixed per family and never depend on the rhythm.
"""

import typing


CHORD_INTERVALS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"major": (0, 4, 7),
	"major_octave": (0, 4, 7, 12),
	"power": (0, 7, 12),
	"octave": (0, 12),
}


def chord_pitches (family: str, root: int) -> typing.Tuple[int, ...]:

	"""Return the chord tones of ``family`` built on the MIDI note ``root``.

	Example:
		```python
		chord_pitches("major", 48)   # → (48, 52, 55)
		chord_pitches("power", 40)   # → (40, 47, 52)
		```
	"""

	if family not in CHORD_INTERVALS:
		raise ValueError(f"Unknown chord family: {family!r}")

	return tuple(root + interval for interval in CHORD_INTERVALS[family])
