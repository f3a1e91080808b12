import typing

import mido
import pytest

import vocalise
import vocalise.__main__
import vocalise.instrument
import vocalise.trainer

from conftest import current_fake_output


CONFIG = """
midi:
  sound: marimba
session:
  exercise: fifthsRoundTrip
  vocal_part: baritone
  tempo: 100
  loop: true
"""


@pytest.fixture
def config_path (tmp_path: typing.Any) -> str:

	path = tmp_path / "vocalise.yaml"
	path.write_text(CONFIG)
	return str(path)


def _resolve (argv: typing.List[str], config: dict) -> vocalise.trainer.PlaybackSettings:
	args = vocalise.__main__.build_parser().parse_args(argv)
	return vocalise.__main__.resolve_settings(args, config)


def test_load_config_missing_file (tmp_path: typing.Any) -> None:

	assert vocalise.__main__.load_config(str(tmp_path / "absent.yaml")) == {}


def test_load_config_reads_yaml (config_path: str) -> None:

	config = vocalise.__main__.load_config(config_path)

	assert config['midi']['sound'] == "marimba"
	assert config['session']['tempo'] == 100


def test_defaults_without_config () -> None:

	settings = _resolve([], {})

	assert settings == vocalise.trainer.PlaybackSettings("majorScale", "tenor", 120.0)


def test_config_fills_in_settings (config_path: str) -> None:

	settings = _resolve([], vocalise.__main__.load_config(config_path))

	assert settings.exercise_id == "fifthsRoundTrip"
	assert settings.vocal_part == "baritone"
	assert settings.tempo_bpm == 100.0
	assert settings.loop is True
	assert settings.chord_intro is False


def test_flags_override_config (config_path: str) -> None:

	argv = ["--exercise", "triad", "--part", "soprano", "--tempo", "72.5", "--chord-intro"]
	settings = _resolve(argv, vocalise.__main__.load_config(config_path))

	assert settings.exercise_id == "triad"
	assert settings.vocal_part == "soprano"
	assert settings.tempo_bpm == 72.5
	assert settings.chord_intro is True
	assert settings.loop is True


def test_no_flags_switch_off_config_values (config_path: str) -> None:

	"""--no-loop and --no-chord-intro win over a config file that turns them on."""

	config = vocalise.__main__.load_config(config_path)
	config['session']['chord_intro'] = True

	settings = _resolve(["--no-loop", "--no-chord-intro"], config)

	assert settings.loop is False
	assert settings.chord_intro is False


def test_non_numeric_tempo_in_config () -> None:

	with pytest.raises(vocalise.ConfigurationError, match="fast"):
		_resolve([], {"session": {"tempo": "fast"}})


def test_non_numeric_tempo_exits_with_error (tmp_path: typing.Any) -> None:

	"""A bad value in the config file is reported, not raised as a traceback."""

	path = tmp_path / "vocalise.yaml"
	path.write_text("session:\n  tempo: fast\n")

	assert vocalise.__main__.main(["--config", str(path)]) == 2


def test_rhythm_preset_is_applied () -> None:

	settings = _resolve(["--exercise", "triad", "--rhythm", "slow"], {})

	assert settings.override_rhythm == (2, 2, 2, 2, 4)


def test_unknown_rhythm_preset () -> None:

	with pytest.raises(vocalise.ConfigurationError, match="swing"):
		_resolve(["--rhythm", "swing"], {})


def test_list_prints_catalog (capsys: pytest.CaptureFixture) -> None:

	assert vocalise.__main__.main(["--list"]) == 0

	out = capsys.readouterr().out

	assert "triadRoundTrip" in out
	assert "soprano" in out
	assert "dotted" in out
	assert "marimba" in out


def test_bad_exercise_exits_with_error (tmp_path: typing.Any) -> None:

	argv = ["--exercise", "yodel", "--config", str(tmp_path / "absent.yaml")]

	assert vocalise.__main__.main(argv) == 2


def test_bad_sound_exits_with_error (tmp_path: typing.Any) -> None:

	argv = ["--sound", "kazoo", "--config", str(tmp_path / "absent.yaml")]

	assert vocalise.__main__.main(argv) == 2


def test_render_writes_file (config_path: str, tmp_path: typing.Any) -> None:

	"""Rendering uses the configured sound and needs no MIDI port."""

	filename = str(tmp_path / "out.mid")

	assert vocalise.__main__.main(["--config", config_path, "--render", filename]) == 0

	mid = mido.MidiFile(filename)
	messages = list(mid.tracks[0])

	assert [m.program for m in messages if m.type == 'program_change'] == [12]
	assert [m.note for m in messages if m.type == 'note_on'][:3] == [45, 52, 45]


@pytest.mark.asyncio
async def test_run_plays_once_and_closes (patch_midi: None) -> None:

	"""A non-looping session plays through, then the instrument is closed."""

	instrument = vocalise.instrument.MidiInstrument()
	trainer = vocalise.Trainer(instrument)
	settings = vocalise.trainer.PlaybackSettings("triad", "tenor", 6000)

	await vocalise.__main__.run(settings, trainer, instrument, show_display=False)

	fake = current_fake_output()

	assert [m.note for m in fake.of_type('note_on')] == [48, 52, 55, 52, 48]
	assert fake.closed
	assert not trainer.playing
