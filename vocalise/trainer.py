"""Host-facing API for vocal warm-up playback.

``Trainer`` ties the catalog, expander, range projector and scheduler to a
``PlaybackController`` and an instrument. A front end (the command line, a
GUI, a test) only needs this class:

```python
instrument = vocalise.instrument.MidiInstrument(sound="piano")
trainer = vocalise.Trainer(instrument)

await instrument.load()
trainer.play("fifthsRoundTrip", "tenor", tempo_bpm=100, loop=True)
```

Settings passed to ``play()`` are validated immediately and kept; every new
session (including each loop restart) is built from the settings current at
that moment.
"""

import dataclasses
import logging
import typing

import vocalise.controller
import vocalise.display
import vocalise.errors
import vocalise.exercises
import vocalise.expander
import vocalise.instrument
import vocalise.range_projector
import vocalise.recording
import vocalise.rhythms
import vocalise.scheduler


logger = logging.getLogger(__name__)


KEY_PRESS_VELOCITY = 80
KEY_PRESS_SECONDS = 0.5


@dataclasses.dataclass(frozen=True)
class PlaybackSettings:

	"""
	Everything needed to build a session.
	"""

	exercise_id: str
	vocal_part: str
	tempo_bpm: float
	override_rhythm: typing.Optional[typing.Tuple[float, ...]] = None
	chord_intro: bool = False
	loop: bool = False


class Trainer:

	"""
	Plays catalog exercises on an instrument and publishes what to display.
	"""

	def __init__ (
		self,
		instrument: vocalise.instrument.Instrument,
		clock: typing.Optional[vocalise.controller.Clock] = None,
		chord_intro: typing.Optional[vocalise.scheduler.ChordIntro] = None,
	) -> None:

		"""
		Parameters:
			instrument: Sound source for sessions and key presses.
			clock: Timer source for playback; defaults to the running asyncio loop.
			chord_intro: Chord cue timing used when ``play(chord_intro=True)``.
		"""

		self.instrument = instrument
		self.chord_intro = chord_intro if chord_intro is not None else vocalise.scheduler.ChordIntro()
		self.settings: typing.Optional[PlaybackSettings] = None

		self._controller = vocalise.controller.PlaybackController(instrument, self._build_current_session, clock=clock)
		self._display: typing.Optional[vocalise.display.Display] = None


	@property
	def controller (self) -> vocalise.controller.PlaybackController:

		return self._controller


	@property
	def playing (self) -> bool:

		return self._controller.playing


	def list_exercises (self) -> typing.List[typing.Tuple[str, str]]:

		"""Return ``(exercise_id, name)`` pairs in catalog order."""

		return vocalise.exercises.list_exercises()


	def list_rhythm_presets (self) -> typing.List[vocalise.rhythms.RhythmPreset]:

		"""Return the rhythm presets; apply ``preset.transform`` to an exercise's rhythm."""

		return vocalise.rhythms.list_presets()


	def on_event (self, event_name: str, callback: typing.Callable[..., typing.Any]) -> None:

		"""
		Register a callback for a playback event (see ``PlaybackController``).
		"""

		self._controller.on_event(event_name, callback)


	def build_session (self, settings: PlaybackSettings) -> vocalise.controller.PlaybackSession:

		"""Expand, project and schedule ``settings`` into a new session.

		Raises:
			ConfigurationError: For an unknown exercise or vocal part, a bad
				tempo, or a mismatched override rhythm.
		"""

		exercise = vocalise.exercises.get_exercise(settings.exercise_id)
		vocal_range = vocalise.exercises.get_vocal_range(settings.vocal_part)

		instances = vocalise.expander.expand(exercise, vocal_range.root, settings.override_rhythm)
		display_range = vocalise.range_projector.project(exercise, vocal_range.root, vocal_range.display_range)
		chord_intro = self.chord_intro if settings.chord_intro else None
		events, total_millis = vocalise.scheduler.schedule(instances, settings.tempo_bpm, chord_intro)

		return vocalise.controller.PlaybackSession(
			events = events,
			total_millis = total_millis,
			display_range = display_range,
			loop = settings.loop,
			description = f"{exercise.name} for {vocal_range.name} at {settings.tempo_bpm:g} BPM",
		)


	def _build_current_session (self) -> vocalise.controller.PlaybackSession:

		if self.settings is None:
			raise vocalise.errors.ConfigurationError("No exercise selected")

		return self.build_session(self.settings)


	def play (
		self,
		exercise_id: str,
		vocal_part: str,
		tempo_bpm: float,
		override_rhythm: typing.Optional[typing.Sequence[float]] = None,
		chord_intro: bool = False,
		loop: bool = False,
	) -> None:

		"""Validate the settings, keep them, and start playback.

		While a session is already playing the new settings are kept and take
		effect at the next loop boundary (or the next ``play()``).

		Raises:
			ConfigurationError: Synchronously, for any invalid setting.
		"""

		settings = PlaybackSettings(
			exercise_id = exercise_id,
			vocal_part = vocal_part,
			tempo_bpm = tempo_bpm,
			override_rhythm = tuple(override_rhythm) if override_rhythm is not None else None,
			chord_intro = chord_intro,
			loop = loop,
		)

		# Fail now rather than inside a timer callback.
		self.build_session(settings)

		self.settings = settings

		if self._display is not None:
			self._display.vocal_part = vocal_part
			self._display.tempo_bpm = tempo_bpm

		self._controller.start()


	def stop (self) -> None:

		self._controller.stop()


	def current_display_range (self, exercise_id: str, vocal_part: str) -> vocalise.exercises.NoteRange:

		"""Keyboard window needed for an exercise, without playing it."""

		exercise = vocalise.exercises.get_exercise(exercise_id)
		vocal_range = vocalise.exercises.get_vocal_range(vocal_part)

		return vocalise.range_projector.project(exercise, vocal_range.root, vocal_range.display_range)


	def press_key (self, pitch: int) -> None:

		"""Sound a single key outside any session, e.g. when a keyboard key is clicked."""

		if not self.instrument.ready():
			return

		self.instrument.trigger_note(pitch, KEY_PRESS_VELOCITY, KEY_PRESS_SECONDS)


	def display (self, enabled: bool = True, keyboard: bool = True) -> None:

		"""Show live playback in the terminal (see ``vocalise.display``)."""

		if enabled and self._display is None:
			self._display = vocalise.display.Display(keyboard=keyboard)
			self._controller.on_event("display", self._display.update)
			self._display.start()

		elif not enabled and self._display is not None:
			self._controller.events.off("display", self._display.update)
			self._display.stop()
			self._display = None


	def render (self, settings: PlaybackSettings, filename: str, program: int = 0) -> None:

		"""Write the whole session for ``settings`` to a MIDI file.

		Every transposed pass is included, exactly as ``play()`` would sound it,
		but nothing plays in real time.
		"""

		session = self.build_session(settings)
		vocalise.recording.save_session(session.events, settings.tempo_bpm, filename, program=program)
