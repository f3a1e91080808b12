"""Named rhythm presets.

A preset is a pure function from an exercise's base rhythm to a new rhythm of
the same length. The chosen result is passed to ``Trainer.play()`` as the
override rhythm and applies to every pass of the exercise.

```python
preset = get_preset("dotted")
preset.transform((1, 1, 1, 1, 2))   # → (1.5, 0.5, 1.5, 0.5, 2)
```
"""

import dataclasses
import typing

import vocalise.errors


Rhythm = typing.Tuple[float, ...]
RhythmTransform = typing.Callable[[typing.Sequence[float]], Rhythm]


@dataclasses.dataclass(frozen=True)
class RhythmPreset:

	"""
	A named, pure rhythm transform.
	"""

	preset_id: str
	name: str
	transform: RhythmTransform


def original (rhythm: typing.Sequence[float]) -> Rhythm:

	"""Leave the rhythm unchanged."""

	return tuple(rhythm)


def even (rhythm: typing.Sequence[float]) -> Rhythm:

	"""One beat per note."""

	return tuple(1.0 for _ in rhythm)


def slow (rhythm: typing.Sequence[float]) -> Rhythm:

	"""Double every duration."""

	return tuple(value * 2 for value in rhythm)


def fast (rhythm: typing.Sequence[float]) -> Rhythm:

	"""Halve every duration."""

	return tuple(value / 2 for value in rhythm)


def long_ending (rhythm: typing.Sequence[float]) -> Rhythm:

	"""Hold the final note twice as long, leaving a sustained finish."""

	values = list(rhythm)

	if values:
		values[-1] *= 2

	return tuple(values)


def dotted (rhythm: typing.Sequence[float]) -> Rhythm:

	"""Long-short pairs.

	Each pair of notes keeps its combined length, split 3:1 between the two
	notes of the pair. A trailing unpaired note keeps its own duration.
	"""

	values = list(rhythm)

	for i in range(0, len(values) - 1, 2):
		pair = values[i] + values[i + 1]
		values[i] = pair * 0.75
		values[i + 1] = pair * 0.25

	return tuple(values)


RHYTHM_PRESETS: typing.Dict[str, RhythmPreset] = {
	preset.preset_id: preset for preset in (
		RhythmPreset("original", "Original", original),
		RhythmPreset("even", "Even Beats", even),
		RhythmPreset("slow", "Slow (Double Length)", slow),
		RhythmPreset("fast", "Fast (Half Length)", fast),
		RhythmPreset("long_ending", "Long Ending", long_ending),
		RhythmPreset("dotted", "Dotted (Long-Short)", dotted),
	)
}


def list_presets () -> typing.List[RhythmPreset]:

	"""Return every preset in menu order."""

	return list(RHYTHM_PRESETS.values())


def get_preset (preset_id: str) -> RhythmPreset:

	"""Look up a preset by id, raising ``ConfigurationError`` for unknown ids."""

	if preset_id not in RHYTHM_PRESETS:
		raise vocalise.errors.ConfigurationError(
			f"Unknown rhythm preset: {preset_id!r}. Available: {', '.join(RHYTHM_PRESETS)}"
		)

	return RHYTHM_PRESETS[preset_id]
