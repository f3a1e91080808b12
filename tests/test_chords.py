import pytest

import vocalise.chords


@pytest.mark.parametrize("family, root, expected", [
	("major", 48, (48, 52, 55)),
	("major_octave", 45, (45, 49, 52, 57)),
	("power", 40, (40, 47, 52)),
	("octave", 60, (60, 72)),
])
def test_chord_pitches (family: str, root: int, expected: tuple) -> None:

	assert vocalise.chords.chord_pitches(family, root) == expected


def test_unknown_family () -> None:

	with pytest.raises(ValueError, match="cluster"):
		vocalise.chords.chord_pitches("cluster", 60)
