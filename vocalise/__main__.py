"""Command line front end.

Usage::

    python -m vocalise --list
    python -m vocalise --exercise triadRoundTrip --part alto --tempo 90 --loop
    python -m vocalise --exercise majorScale --rhythm dotted --render scale.mid

Defaults can be kept in a YAML file (``vocalise.yaml`` in the working
directory, or ``--config``)::

    midi:
      device_name: "FluidSynth virtual port"
      sound: marimba
    session:
      exercise: fifthsRoundTrip
      vocal_part: baritone
      tempo: 100
      loop: true
      chord_intro: true
      rhythm: even

Command line flags override the file (``--no-loop`` and ``--no-chord-intro``
switch off values the file turns on).
"""

import argparse
import asyncio
import logging
import os
import sys
import typing

import yaml

import vocalise.errors
import vocalise.exercises
import vocalise.instrument
import vocalise.notes
import vocalise.rhythms
import vocalise.trainer


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "vocalise.yaml"


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="vocalise", description="Play vocal warm-up exercises on a MIDI instrument.")
	parser.add_argument("--list", action="store_true", help="List exercises, vocal parts, rhythm presets and sounds, then exit")
	parser.add_argument("--exercise", help="Exercise id (see --list)")
	parser.add_argument("--part", help="Vocal part: bass, baritone, tenor, alto or soprano")
	parser.add_argument("--tempo", type=float, help="Tempo in BPM")
	parser.add_argument("--rhythm", help="Rhythm preset id (see --list)")
	parser.add_argument("--chord-intro", action=argparse.BooleanOptionalAction, default=None, help="Sound each pass's chord before singing it (--no-chord-intro overrides the config file)")
	parser.add_argument("--loop", action=argparse.BooleanOptionalAction, default=None, help="Repeat until interrupted (--no-loop overrides the config file)")
	parser.add_argument("--device", help="MIDI output device name")
	parser.add_argument("--sound", help="Instrument sound (see --list)")
	parser.add_argument("--render", metavar="FILE", help="Write the session to a MIDI file instead of playing it")
	parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help=f"YAML defaults file (default: {DEFAULT_CONFIG_PATH})")
	parser.add_argument("--no-display", action="store_true", help="Disable the live terminal display")
	parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

	return parser


def _pick (flag: typing.Any, section: dict, key: str, default: typing.Any) -> typing.Any:

	"""Command line value when given, else the config value, else the default."""

	if flag is not None:
		return flag

	return section.get(key, default)


def resolve_settings (args: argparse.Namespace, config: dict) -> vocalise.trainer.PlaybackSettings:

	"""Merge flags over config over defaults, validating exercise and rhythm preset."""

	session = config.get('session', {}) or {}

	exercise_id = _pick(args.exercise, session, 'exercise', "majorScale")
	exercise = vocalise.exercises.get_exercise(exercise_id)

	tempo = _pick(args.tempo, session, 'tempo', 120)

	try:
		tempo_bpm = float(tempo)

	except (TypeError, ValueError):
		raise vocalise.errors.ConfigurationError(f"Tempo must be a number, got {tempo!r}") from None

	rhythm_id = _pick(args.rhythm, session, 'rhythm', None)
	override_rhythm = None

	if rhythm_id is not None:
		override_rhythm = vocalise.rhythms.get_preset(rhythm_id).transform(exercise.rhythm)

	return vocalise.trainer.PlaybackSettings(
		exercise_id = exercise_id,
		vocal_part = _pick(args.part, session, 'vocal_part', "tenor"),
		tempo_bpm = tempo_bpm,
		override_rhythm = override_rhythm,
		chord_intro = bool(_pick(args.chord_intro, session, 'chord_intro', False)),
		loop = bool(_pick(args.loop, session, 'loop', False)),
	)


def print_catalog () -> None:

	print("Exercises:")
	for exercise_id, name in vocalise.exercises.list_exercises():
		print(f"  {exercise_id:<22} {name}")

	print("\nVocal parts:")
	for name, vocal_range in vocalise.exercises.VOCAL_RANGES.items():
		print(f"  {name:<22} root {vocalise.notes.midi_to_note(vocal_range.root)}")

	print("\nRhythm presets:")
	for preset in vocalise.rhythms.list_presets():
		print(f"  {preset.preset_id:<22} {preset.name}")

	print("\nSounds:")
	for sound in vocalise.instrument.SOUNDS:
		print(f"  {sound}")


async def run (settings: vocalise.trainer.PlaybackSettings, trainer: vocalise.trainer.Trainer, instrument: vocalise.instrument.MidiInstrument, show_display: bool = True) -> None:

	"""
	Load the instrument, play ``settings`` and wait until playback ends.
	"""

	await instrument.load()

	if not instrument.ready():
		return

	trainer.display(show_display)

	try:
		trainer.play(
			settings.exercise_id,
			settings.vocal_part,
			settings.tempo_bpm,
			override_rhythm = settings.override_rhythm,
			chord_intro = settings.chord_intro,
			loop = settings.loop,
		)

		while trainer.playing:
			await asyncio.sleep(0.1)

	finally:
		trainer.stop()
		trainer.display(False)
		instrument.close()


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the vocalise command.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	if args.list:
		print_catalog()
		return 0

	config = load_config(args.config)
	midi = config.get('midi', {}) or {}

	try:
		settings = resolve_settings(args, config)
		instrument = vocalise.instrument.MidiInstrument(
			output_device_name = _pick(args.device, midi, 'device_name', None),
			sound = _pick(args.sound, midi, 'sound', "piano"),
		)

		trainer = vocalise.trainer.Trainer(instrument)
		trainer.build_session(settings)

		if args.render:
			trainer.render(settings, args.render, program=vocalise.instrument.SOUNDS[instrument.sound])
			return 0

	except vocalise.errors.ConfigurationError as e:
		logger.error(str(e))
		return 2

	try:
		asyncio.run(run(settings, trainer, instrument, show_display=not args.no_display))

	except KeyboardInterrupt:
		logger.info("Stopping...")

	return 0


if __name__ == "__main__":
	sys.exit(main())
