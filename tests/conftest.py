import heapq
import itertools
import typing

import mido
import pytest


class FakeMidiOut:

	"""MIDI output stub that records every message sent."""

	def __init__ (self, name: str = "Dummy MIDI") -> None:

		self.name = name
		self.sent: typing.List[mido.Message] = []
		self.closed = False
		self.panicked = False

	def send (self, message: mido.Message) -> None:

		self.sent.append(message)

	def close (self) -> None:

		self.closed = True

	def panic (self) -> None:

		self.panicked = True

	def of_type (self, message_type: str) -> typing.List[mido.Message]:

		"""Return the recorded messages of one type, e.g. ``"note_on"``."""

		return [m for m in self.sent if m.type == message_type]


# Module-level reference so tests can inspect the most recently opened FakeMidiOut.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	fake = FakeMidiOut(name)
	_current_fake_output = fake
	return fake


def current_fake_output () -> FakeMidiOut:

	assert _current_fake_output is not None, "No fake MIDI output has been opened"
	return _current_fake_output


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output for tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


class FakeHandle:

	"""Cancellable timer handle returned by ``FakeClock.call_later``."""

	def __init__ (self, when: float, callback: typing.Callable[..., typing.Any], args: typing.Tuple[typing.Any, ...]) -> None:

		self.when = when
		self.callback = callback
		self.args = args
		self.cancelled = False

	def cancel (self) -> None:

		self.cancelled = True


class FakeClock:

	"""Deterministic stand-in for an event loop's ``call_later``.

	Time only moves when ``advance()`` is called. With ``reverse_ties=True``
	timers due at the same moment fire in reverse registration order, which
	is allowed for a real heap-based loop and shakes out ordering bugs.
	"""

	def __init__ (self, reverse_ties: bool = False) -> None:

		self.now = 0.0
		self._reverse_ties = reverse_ties
		self._queue: typing.List[typing.Tuple[float, int, FakeHandle]] = []
		self._counter = itertools.count()

	def call_later (self, delay: float, callback: typing.Callable[..., typing.Any], *args: typing.Any) -> FakeHandle:

		handle = FakeHandle(self.now + delay, callback, args)
		order = next(self._counter)
		heapq.heappush(self._queue, (handle.when, -order if self._reverse_ties else order, handle))
		return handle

	def advance (self, seconds: float) -> None:

		"""Move time forward, firing every due, uncancelled timer in order."""

		target = self.now + seconds

		while self._queue and self._queue[0][0] <= target + 1e-9:
			when, _, handle = heapq.heappop(self._queue)
			self.now = max(self.now, when)

			if not handle.cancelled:
				handle.callback(*handle.args)

		self.now = target

	@property
	def pending (self) -> int:

		"""Number of armed timers that have not fired or been cancelled."""

		return sum(1 for _, _, handle in self._queue if not handle.cancelled)


class FakeInstrument:

	"""Instrument stub that records calls and has a switchable ready flag."""

	def __init__ (self, is_ready: bool = True) -> None:

		self.is_ready = is_ready
		self.calls: typing.List[typing.Tuple[typing.Any, ...]] = []

	def ready (self) -> bool:

		return self.is_ready

	def trigger_note (self, pitch: int, velocity: int, duration_seconds: float) -> None:

		self.calls.append(("trigger", pitch, velocity, duration_seconds))

	def release_note (self, pitch: int) -> None:

		self.calls.append(("release", pitch))

	@property
	def triggered (self) -> typing.List[int]:

		"""Pitches started, in order."""

		return [call[1] for call in self.calls if call[0] == "trigger"]


@pytest.fixture
def clock () -> FakeClock:

	return FakeClock()


@pytest.fixture
def instrument () -> FakeInstrument:

	return FakeInstrument()
