"""Note name helpers.

Convention: **C4 = 60** (Middle C). Names are ``<Pitch><Octave>`` with an
optional sharp or flat, e.g. ``"E2"``, ``"F#3"``, ``"Bb4"``.

```python
note_to_midi("C4")   # → 60
note_to_midi("E2")   # → 40
midi_to_note(57)     # → "A3"
```
"""

import re
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

_NOTE_PATTERN = re.compile(r"^([A-G][#b]?)(-?\d+)$")


def note_to_midi (name: str) -> int:

	"""Convert a note name such as ``"E2"`` to its MIDI number.

	Raises:
		ValueError: If the name is malformed or outside MIDI range 0-127.
	"""

	match = _NOTE_PATTERN.match(name.strip())

	if match is None or match.group(1) not in NOTE_NAME_TO_PC:
		raise ValueError(f"Unknown note name: {name!r}. Expected e.g. 'C4', 'F#3', 'Bb2'.")

	pitch = (int(match.group(2)) + 1) * 12 + NOTE_NAME_TO_PC[match.group(1)]

	if not 0 <= pitch <= 127:
		raise ValueError(f"Note {name!r} is outside the MIDI range")

	return pitch


def midi_to_note (pitch: int) -> str:

	"""Convert a MIDI number to a note name, using sharps (42 → ``"F#2"``)."""

	octave = (pitch // 12) - 1
	return f"{PC_TO_NOTE_NAME[pitch % 12]}{octave}"
