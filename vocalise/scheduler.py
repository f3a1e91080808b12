"""Turn expanded passes into a timed list of playback events.

``schedule()`` is a pure function: the same passes, tempo and chord intro
always give the same events and total duration. Times are whole milliseconds
from the start of playback.

Timeline of one pass at tempo ``T`` (``beat = 60000 / T`` ms)::

	[chord intro: hold, gap] [note 1] [note 2] ... [note n] [pause: half a beat]

Each note occupies ``rhythm[i] * beat`` ms. Its ``note_off`` comes after a
short fraction of that slot so consecutive notes stay crisp and never overlap.
A lead-in before the first event gives the audio backend time to wake up.
"""

import dataclasses
import logging
import math
import typing

import vocalise.errors
import vocalise.expander


logger = logging.getLogger(__name__)


NOTE_ON = "note_on"
NOTE_OFF = "note_off"
CHORD_ON = "chord_on"
CHORD_OFF = "chord_off"
SYLLABLE = "syllable"
SESSION_END = "session_end"

LEAD_IN_MILLIS = 50
NOTE_RELEASE_FRACTION = 0.35		# note_off position within the note's slot
NOTE_SOUND_FRACTION = 0.3			# how long the instrument sounds each note
INSTANCE_PAUSE_BEATS = 0.5


@dataclasses.dataclass(frozen=True)
class ChordIntro:

	"""Chord cue played before each pass.

	Parameters:
		enabled: When False the intro is skipped entirely.
		beats: How long the chord is held.
		release_fraction: Where within the hold the chord is released (0-1].
		gap_beats: Silence between the chord and the first note of the pass.
	"""

	enabled: bool = True
	beats: float = 2.0
	release_fraction: float = 0.9
	gap_beats: float = 0.5

	def __post_init__ (self) -> None:
		if self.beats <= 0:
			raise vocalise.errors.ConfigurationError("Chord intro length must be positive")
		if not 0 < self.release_fraction <= 1:
			raise vocalise.errors.ConfigurationError("Chord intro release fraction must be in (0, 1]")
		if self.gap_beats < 0:
			raise vocalise.errors.ConfigurationError("Chord intro gap cannot be negative")


@dataclasses.dataclass(frozen=True)
class ScheduledEvent:

	"""
	A single timed side effect of playback.
	"""

	at_millis: int
	kind: str
	pitches: typing.Tuple[int, ...] = ()
	text: typing.Optional[str] = None
	sound_millis: int = 0


def beat_millis (tempo_bpm: float) -> float:

	"""Milliseconds per beat, raising ``ConfigurationError`` unless the tempo is finite and positive."""

	if not math.isfinite(tempo_bpm) or tempo_bpm <= 0:
		raise vocalise.errors.ConfigurationError(f"Tempo must be a positive number, got {tempo_bpm}")

	return 60000.0 / tempo_bpm


def schedule (
	instances: typing.Sequence[vocalise.expander.SequenceInstance],
	tempo_bpm: float,
	chord_intro: typing.Optional[ChordIntro] = None,
) -> typing.Tuple[typing.List[ScheduledEvent], int]:

	"""Lay out every pass on an absolute timeline.

	Parameters:
		instances: Passes from ``vocalise.expander.expand()``, in playing order.
		tempo_bpm: Beats per minute; one rhythm unit lasts one beat.
		chord_intro: Optional chord cue sounded before each pass.

	Returns:
		``(events, total_duration_millis)``. Events are in firing order; the
		last one is always ``session_end`` at ``total_duration_millis``.

	Raises:
		ConfigurationError: If the tempo is not positive or there are no passes.

	Example:
		A static 17-beat scale at 120 BPM: 50 ms lead-in + 8500 ms of notes +
		250 ms pause, so ``total_duration_millis == 8800``.
	"""

	beat = beat_millis(tempo_bpm)

	if not instances:
		raise vocalise.errors.ConfigurationError("Nothing to schedule")

	events: typing.List[ScheduledEvent] = []

	# Float cursor, rounded per event: rounding is monotonic so stamps never decrease.
	t = float(LEAD_IN_MILLIS)

	def add (at: float, kind: str, pitches: typing.Tuple[int, ...] = (), text: typing.Optional[str] = None, sound: float = 0.0) -> None:
		events.append(ScheduledEvent(at_millis=round(at), kind=kind, pitches=pitches, text=text, sound_millis=round(sound)))

	for instance in instances:

		if chord_intro is not None and chord_intro.enabled and instance.chord_pitches:
			hold = chord_intro.beats * beat
			add(t, CHORD_ON, instance.chord_pitches, sound=hold)
			add(t, SYLLABLE, text=instance.label or "")
			add(t + hold * chord_intro.release_fraction, CHORD_OFF, instance.chord_pitches)
			t += hold + chord_intro.gap_beats * beat

		for i, pitch in enumerate(instance.pitches):
			duration = instance.rhythm[i] * beat
			add(t, NOTE_ON, (pitch,), instance.display_text(i), sound=duration * NOTE_SOUND_FRACTION)
			add(t + duration * NOTE_RELEASE_FRACTION, NOTE_OFF, (pitch,))
			t += duration

		t += INSTANCE_PAUSE_BEATS * beat

	total = round(t)
	events.append(ScheduledEvent(at_millis=total, kind=SESSION_END))

	logger.debug(f"Scheduled {len(events)} events over {total} ms at {tempo_bpm} BPM")

	return events, total
