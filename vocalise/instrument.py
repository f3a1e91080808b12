"""Instrument capability and its MIDI implementation.

The playback controller only needs three things from an instrument: whether
it is ready, a way to start a note for a given time, and a way to stop it
early. ``Instrument`` describes that contract; ``MidiInstrument`` fulfils it by
sending notes to a MIDI output port through ``mido``.

A ``MidiInstrument`` is not ready until ``load()`` has opened the port and
selected its General MIDI program. Changing the sound with ``select_sound()``
drops readiness again until the new program is loaded.
"""

import asyncio
import logging
import typing

import mido

import vocalise.errors
import vocalise.midi_utils


logger = logging.getLogger(__name__)


# General MIDI program numbers (0-based).
SOUNDS: typing.Dict[str, int] = {
	"piano": 0,
	"vibraphone": 11,
	"marimba": 12,
	"cello": 42,
	"flute": 73,
}


@typing.runtime_checkable
class Instrument (typing.Protocol):

	"""
	What the playback controller needs from a sound source.
	"""

	def ready (self) -> bool:

		"""False while the sound source is (re)loading."""

		...


	def trigger_note (self, pitch: int, velocity: int, duration_seconds: float) -> None:

		"""Start ``pitch`` and let it sound for ``duration_seconds``."""

		...


	def release_note (self, pitch: int) -> None:

		"""Stop ``pitch`` early. A no-op when it is not sounding."""

		...


class MidiInstrument:

	"""
	Plays notes on a MIDI output port.

	Example:
		```python
		instrument = MidiInstrument(sound="marimba")
		await instrument.load()
		instrument.trigger_note(60, velocity=80, duration_seconds=0.5)
		```
	"""

	def __init__ (self, output_device_name: typing.Optional[str] = None, sound: str = "piano", channel: int = 0) -> None:

		"""
		Parameters:
			output_device_name: MIDI output to open. When omitted, the first
				available output is used.
			sound: One of ``SOUNDS``.
			channel: MIDI channel (0-15).
		"""

		self._check_sound(sound)

		if not 0 <= channel <= 15:
			raise vocalise.errors.ConfigurationError(f"MIDI channel must be 0-15, got {channel}")

		self.output_device_name = output_device_name
		self.sound = sound
		self.channel = channel

		self.midi_out: typing.Any = None
		self._ready = False
		self._load_tasks: typing.Set[asyncio.Task] = set()

		# Created on first load so it belongs to the running loop.
		self._open_lock: typing.Optional[asyncio.Lock] = None
		self._close_count = 0

		# Sounding pitch -> pending automatic release (None when no loop was running).
		self._sounding: typing.Dict[int, typing.Optional[asyncio.TimerHandle]] = {}


	@staticmethod
	def _check_sound (sound: str) -> None:

		if sound not in SOUNDS:
			raise vocalise.errors.ConfigurationError(f"Unknown sound: {sound!r}. Available: {', '.join(SOUNDS)}")


	def ready (self) -> bool:

		return self._ready and self.midi_out is not None


	async def load (self) -> None:

		"""Open the output port (first time only) and select the current program.

		Opening a port can block, so it runs in the default executor. When no
		port can be opened the instrument stays not ready and the failure is
		logged. Concurrent loads share a single port.
		"""

		self._ready = False

		await self._open_port()

		if self.midi_out is None:
			logger.error("Instrument could not open a MIDI output - playback disabled")
			return

		self._send(mido.Message('program_change', channel=self.channel, program=SOUNDS[self.sound]))
		self._ready = True

		logger.info(f"Instrument ready: {self.sound} on {self.output_device_name}")


	async def _open_port (self) -> None:

		if self._open_lock is None:
			self._open_lock = asyncio.Lock()

		async with self._open_lock:

			if self.midi_out is not None:
				return

			close_count = self._close_count
			loop = asyncio.get_running_loop()
			future = loop.run_in_executor(None, vocalise.midi_utils.select_output_device, self.output_device_name)

			try:
				device_name, midi_out = await asyncio.shield(future)

			except asyncio.CancelledError:
				# The executor thread cannot be stopped; close whatever it opens.
				future.add_done_callback(self._close_abandoned_port)
				raise

			if close_count != self._close_count:
				# close() ran while the port was opening.
				self._close_abandoned_port(future)
				return

			if midi_out is not None:
				self.output_device_name = device_name
				self.midi_out = midi_out


	@staticmethod
	def _close_abandoned_port (future: asyncio.Future) -> None:

		if future.cancelled() or future.exception() is not None:
			return

		_, midi_out = future.result()

		if midi_out is None:
			return

		try:
			midi_out.close()

		except Exception:
			logger.exception("Closing an abandoned MIDI output failed")


	def select_sound (self, sound: str) -> asyncio.Task:

		"""Switch to another sound and reload in the background.

		The instrument reports not ready until the returned task completes. A
		first load still opening the port is not interrupted: the port is only
		ever opened once. Must be called with an event loop running.
		"""

		self._check_sound(sound)

		self.release_all()
		self.sound = sound
		self._ready = False

		# A load already in progress is left to finish; the new one waits for its port.
		task = asyncio.get_running_loop().create_task(self.load())
		self._load_tasks.add(task)
		task.add_done_callback(self._load_tasks.discard)

		return task


	def trigger_note (self, pitch: int, velocity: int, duration_seconds: float) -> None:

		if self.midi_out is None:
			return

		# Retriggering a sounding pitch restarts it.
		self.release_note(pitch)

		self._send(mido.Message('note_on', channel=self.channel, note=pitch, velocity=velocity))

		try:
			loop = asyncio.get_running_loop()
			self._sounding[pitch] = loop.call_later(duration_seconds, self.release_note, pitch)

		except RuntimeError:
			self._sounding[pitch] = None


	def release_note (self, pitch: int) -> None:

		if pitch not in self._sounding:
			return

		handle = self._sounding.pop(pitch)

		if handle is not None:
			handle.cancel()

		self._send(mido.Message('note_off', channel=self.channel, note=pitch, velocity=0))


	def release_all (self) -> None:

		"""Stop every sounding note."""

		for pitch in list(self._sounding):
			self.release_note(pitch)


	def close (self) -> None:

		"""Silence the instrument and close its port."""

		self.release_all()
		self._ready = False
		self._close_count += 1

		for task in list(self._load_tasks):
			task.cancel()

		if self.midi_out is not None:

			try:
				self.midi_out.panic()
				self.midi_out.close()

			except Exception:
				logger.exception("MIDI close failed (device may be disconnected)")

			self.midi_out = None


	def _send (self, message: mido.Message) -> None:

		if self.midi_out is None:
			return

		try:
			self.midi_out.send(message)

		except Exception:
			logger.exception("MIDI send failed (device may be disconnected)")
