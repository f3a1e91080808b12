"""Playback state machine.

The controller owns at most one ``PlaybackSession``. ``start()`` builds a
fresh session from the host's current settings and arms one timer per
scheduled event; ``stop()`` cancels every timer that has not fired yet. A new
session is only armed after the previous one has been flushed, so events from
two sessions can never interleave.

Timers come from a clock: any object with ``call_later(delay_seconds,
callback, *args)`` returning a handle with ``cancel()``. By default that is the
running asyncio event loop, and every callback runs on the loop's single
thread, so no locking is needed.

Visible changes are published as ``"display"`` events carrying a
``DisplayState``. The controller also emits ``"start"``, ``"stop"`` and
``"session_end"``.
"""

import asyncio
import dataclasses
import logging
import typing

import vocalise.event_emitter
import vocalise.exercises
import vocalise.instrument
import vocalise.scheduler


logger = logging.getLogger(__name__)


IDLE = "idle"
PLAYING = "playing"

DEFAULT_VELOCITY = 80
DEFAULT_CHORD_VELOCITY = 64


class Clock (typing.Protocol):

	"""
	Single-threaded delayed-callback source (``asyncio`` event loops qualify).
	"""

	def call_later (self, delay: float, callback: typing.Callable[..., typing.Any], *args: typing.Any) -> typing.Any:
		...


@dataclasses.dataclass(frozen=True)
class DisplayState:

	"""
	What a keyboard or syllable display should currently show.
	"""

	active_pitches: typing.FrozenSet[int]
	text: str
	display_range: typing.Optional[vocalise.exercises.NoteRange]


@dataclasses.dataclass
class PlaybackSession:

	"""One playback run: its events, its live timers and how far it has got.

	``loop`` is captured when the session is built; changing the host's loop
	setting mid-session only affects the next session.
	"""

	events: typing.List[vocalise.scheduler.ScheduledEvent]
	total_millis: int
	display_range: vocalise.exercises.NoteRange
	loop: bool = False
	description: str = ""
	handles: typing.List[typing.Any] = dataclasses.field(default_factory=list)
	cursor: int = 0


SessionFactory = typing.Callable[[], PlaybackSession]


class PlaybackController:

	"""
	Drives scheduled events against a clock with start/stop and loop restart.

	Example:
		```python
		controller = PlaybackController(instrument, build_session)
		controller.on_event("display", lambda state: print(state.text))
		controller.start()
		```
	"""

	def __init__ (
		self,
		instrument: vocalise.instrument.Instrument,
		session_factory: SessionFactory,
		clock: typing.Optional[Clock] = None,
		velocity: int = DEFAULT_VELOCITY,
		chord_velocity: int = DEFAULT_CHORD_VELOCITY,
	) -> None:

		"""
		Parameters:
			instrument: Sound source; checked for readiness on every ``start()``.
			session_factory: Called by ``start()`` to build each new session from
				the host's settings at that moment.
			clock: Timer source. Defaults to the running asyncio event loop,
				looked up when a session is armed.
			velocity: MIDI velocity for exercise notes.
			chord_velocity: MIDI velocity for chord-intro notes.
		"""

		self.instrument = instrument
		self.velocity = velocity
		self.chord_velocity = chord_velocity
		self.events = vocalise.event_emitter.EventEmitter()

		self.state: str = IDLE
		self.active_pitches: typing.Set[int] = set()
		self.text: str = ""
		self.display_range: typing.Optional[vocalise.exercises.NoteRange] = None

		self._session_factory = session_factory
		self._clock = clock
		self._session: typing.Optional[PlaybackSession] = None
		self._sounding: typing.Set[int] = set()


	@property
	def playing (self) -> bool:

		return self.state == PLAYING


	@property
	def session (self) -> typing.Optional[PlaybackSession]:

		"""The live session, or ``None`` when idle."""

		return self._session


	def on_event (self, event_name: str, callback: typing.Callable[..., typing.Any]) -> None:

		"""
		Register a callback for ``"display"``, ``"start"``, ``"stop"`` or ``"session_end"``.
		"""

		self.events.on(event_name, callback)


	def start (self) -> None:

		"""Build and arm a new session.

		Does nothing while already playing, or while the instrument is not
		ready (the host should keep its play control disabled until it is).
		Exceptions from the session factory propagate and leave the controller
		idle.
		"""

		if self.state == PLAYING:
			return

		if not self.instrument.ready():
			logger.warning("Instrument not ready - start() ignored")
			return

		self._flush()

		session = self._session_factory()
		clock = self._clock if self._clock is not None else asyncio.get_running_loop()

		for event in session.events:
			session.handles.append(clock.call_later(event.at_millis / 1000.0, self._fire, session, event.at_millis))

		self._session = session
		self.display_range = session.display_range
		self.state = PLAYING

		logger.info(f"Playing {session.description or 'session'} ({session.total_millis / 1000.0:.1f}s, {len(session.events)} events)")

		self.events.emit("start", session)
		self._publish()


	def stop (self) -> None:

		"""Cancel every pending event of the current session and go idle."""

		if self.state == IDLE and self._session is None:
			return

		self._flush()
		self.state = IDLE
		self._clear_display()

		logger.info("Playback stopped")

		self.events.emit("stop")


	def _flush (self) -> None:

		"""Cancel the current session's timers and silence anything it started."""

		session = self._session
		self._session = None

		if session is not None:

			for handle in session.handles:
				handle.cancel()

			session.handles.clear()

		for pitch in sorted(self._sounding):
			self.instrument.release_note(pitch)

		self._sounding.clear()


	def _fire (self, session: PlaybackSession, at_millis: int) -> None:

		"""Timer callback: apply every due event of ``session`` in schedule order.

		Events sharing a timestamp are applied together by whichever of their
		timers fires first, so ties keep generation order whatever order the
		clock releases them in.
		"""

		if session is not self._session:
			return

		while session.cursor < len(session.events) and session.events[session.cursor].at_millis <= at_millis:

			event = session.events[session.cursor]
			session.cursor += 1

			if event.kind == vocalise.scheduler.SESSION_END:
				self._finish(session)
				return

			self._apply(event)

		self._publish()


	def _apply (self, event: vocalise.scheduler.ScheduledEvent) -> None:

		kind = event.kind

		if kind in (vocalise.scheduler.NOTE_ON, vocalise.scheduler.CHORD_ON):

			velocity = self.velocity if kind == vocalise.scheduler.NOTE_ON else self.chord_velocity
			self.active_pitches = set(event.pitches)

			if event.text is not None:
				self.text = event.text

			for pitch in event.pitches:
				self.instrument.trigger_note(pitch, velocity, event.sound_millis / 1000.0)
				self._sounding.add(pitch)

		elif kind in (vocalise.scheduler.NOTE_OFF, vocalise.scheduler.CHORD_OFF):

			self.active_pitches.difference_update(event.pitches)

			for pitch in event.pitches:
				self.instrument.release_note(pitch)
				self._sounding.discard(pitch)

		elif kind == vocalise.scheduler.SYLLABLE:
			self.text = event.text or ""

		else:
			logger.warning(f"Ignoring unknown event kind {kind!r}")


	def _finish (self, session: PlaybackSession) -> None:

		"""Handle ``session_end``: go idle, then restart when the session loops."""

		session.handles.clear()
		self._session = None
		self._sounding.clear()
		self.state = IDLE
		self._clear_display()

		self.events.emit("session_end")

		if session.loop:
			logger.info("Looping")
			self.start()
		else:
			logger.info("Session complete")


	def _clear_display (self) -> None:

		self.active_pitches = set()
		self.text = ""
		self._publish()


	def _publish (self) -> None:

		self.events.emit("display", DisplayState(frozenset(self.active_pitches), self.text, self.display_range))
