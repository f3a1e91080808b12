"""Render a scheduled session to a standard MIDI file.

Useful for practising away from the app: the file plays the same notes and
chord cues as live playback, and carries each syllable as a lyric event so
karaoke-style players can show it.
"""

import logging
import typing

import mido

import vocalise.controller
import vocalise.scheduler


logger = logging.getLogger(__name__)


TICKS_PER_BEAT = 480


def session_to_midi (
	events: typing.Sequence[vocalise.scheduler.ScheduledEvent],
	tempo_bpm: float,
	program: int = 0,
	channel: int = 0,
	velocity: int = vocalise.controller.DEFAULT_VELOCITY,
	chord_velocity: int = vocalise.controller.DEFAULT_CHORD_VELOCITY,
) -> mido.MidiFile:

	"""Convert scheduled events into a single-track MIDI file.

	Millisecond timestamps are converted to ticks at ``TICKS_PER_BEAT``
	resolution using the session tempo. Chord cues share the channel with the
	exercise notes, at ``chord_velocity``.
	"""

	beat = vocalise.scheduler.beat_millis(tempo_bpm)

	mid = mido.MidiFile(type=0)
	mid.ticks_per_beat = TICKS_PER_BEAT
	track = mido.MidiTrack()
	mid.tracks.append(track)

	track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(tempo_bpm), time=0))
	track.append(mido.Message('program_change', channel=channel, program=program, time=0))

	last_tick = 0

	def append (at_millis: int, message: typing.Union[mido.Message, mido.MetaMessage]) -> None:

		nonlocal last_tick

		tick = int(round(at_millis / beat * TICKS_PER_BEAT))
		# Ensure delta is non-negative
		message.time = max(0, tick - last_tick)
		track.append(message)
		last_tick = max(last_tick, tick)

	for event in events:

		if event.kind == vocalise.scheduler.NOTE_ON:
			if event.text:
				append(event.at_millis, mido.MetaMessage('lyrics', text=event.text))
			for pitch in event.pitches:
				append(event.at_millis, mido.Message('note_on', channel=channel, note=pitch, velocity=velocity))

		elif event.kind == vocalise.scheduler.CHORD_ON:
			for pitch in event.pitches:
				append(event.at_millis, mido.Message('note_on', channel=channel, note=pitch, velocity=chord_velocity))

		elif event.kind in (vocalise.scheduler.NOTE_OFF, vocalise.scheduler.CHORD_OFF):
			for pitch in event.pitches:
				append(event.at_millis, mido.Message('note_off', channel=channel, note=pitch, velocity=0))

		elif event.kind == vocalise.scheduler.SYLLABLE:
			if event.text:
				append(event.at_millis, mido.MetaMessage('marker', text=event.text))

		elif event.kind == vocalise.scheduler.SESSION_END:
			append(event.at_millis, mido.MetaMessage('end_of_track'))

	return mid


def save_session (
	events: typing.Sequence[vocalise.scheduler.ScheduledEvent],
	tempo_bpm: float,
	filename: str,
	program: int = 0,
) -> None:

	"""Write ``events`` to ``filename`` as a MIDI file."""

	mid = session_to_midi(events, tempo_bpm, program=program)

	logger.info(f"Saving MIDI rendering ({len(events)} events) to {filename}...")

	mid.save(filename)

	logger.info(f"Saved {filename}")
