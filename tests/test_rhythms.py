import pytest

import vocalise
import vocalise.rhythms


BASE = (1, 1, 1, 1, 2)


def test_every_preset_preserves_length_and_positivity () -> None:

	"""Presets never change the note count or produce non-positive durations."""

	for preset in vocalise.rhythms.list_presets():
		for rhythm in [BASE, (2, 2, 4), (1,)]:
			result = preset.transform(rhythm)
			assert len(result) == len(rhythm)
			assert all(value > 0 for value in result)


def test_preset_transforms () -> None:

	"""Each preset reshapes the base rhythm as named."""

	assert vocalise.rhythms.get_preset("original").transform(BASE) == BASE
	assert vocalise.rhythms.get_preset("even").transform(BASE) == (1, 1, 1, 1, 1)
	assert vocalise.rhythms.get_preset("slow").transform(BASE) == (2, 2, 2, 2, 4)
	assert vocalise.rhythms.get_preset("fast").transform(BASE) == (0.5, 0.5, 0.5, 0.5, 1)
	assert vocalise.rhythms.get_preset("long_ending").transform(BASE) == (1, 1, 1, 1, 4)
	assert vocalise.rhythms.get_preset("dotted").transform(BASE) == (1.5, 0.5, 1.5, 0.5, 2)


def test_transforms_do_not_mutate_input () -> None:

	"""Transforms are pure."""

	rhythm = [1, 1, 2]

	vocalise.rhythms.long_ending(rhythm)
	vocalise.rhythms.dotted(rhythm)

	assert rhythm == [1, 1, 2]


def test_list_presets_order () -> None:

	"""Presets are listed in menu order, starting with the original rhythm."""

	ids = [preset.preset_id for preset in vocalise.rhythms.list_presets()]

	assert ids == ["original", "even", "slow", "fast", "long_ending", "dotted"]


def test_unknown_preset () -> None:

	"""Unknown preset ids raise ConfigurationError."""

	with pytest.raises(vocalise.ConfigurationError):
		vocalise.rhythms.get_preset("swing")
