import logging
import typing

import pytest

import vocalise.event_emitter


def test_on_and_emit () -> None:

	"""Registered callbacks receive the emitted arguments."""

	emitter = vocalise.event_emitter.EventEmitter()
	received: typing.List[int] = []

	emitter.on("display", lambda v: received.append(v))
	emitter.emit("display", 42)

	assert received == [42]


def test_emit_without_listeners () -> None:

	emitter = vocalise.event_emitter.EventEmitter()

	emitter.emit("session_end")

	assert emitter.listener_count("session_end") == 0


def test_listeners_run_in_registration_order () -> None:

	emitter = vocalise.event_emitter.EventEmitter()
	order: typing.List[str] = []

	emitter.on("start", lambda: order.append("a"))
	emitter.on("start", lambda: order.append("b"))
	emitter.emit("start")

	assert order == ["a", "b"]


def test_off_only_removes_target_callback () -> None:

	"""off() leaves other callbacks for the same event intact."""

	emitter = vocalise.event_emitter.EventEmitter()
	a: typing.List[int] = []
	b: typing.List[int] = []

	def cb_a (v: int) -> None:
		a.append(v)

	def cb_b (v: int) -> None:
		b.append(v)

	emitter.on("display", cb_a)
	emitter.on("display", cb_b)
	emitter.off("display", cb_a)
	emitter.emit("display", 7)

	assert a == []
	assert b == [7]
	assert emitter.listener_count("display") == 1


def test_off_raises_for_unregistered_callback () -> None:

	emitter = vocalise.event_emitter.EventEmitter()

	with pytest.raises(ValueError, match="display"):
		emitter.off("display", lambda: None)


def test_failing_listener_is_logged_and_skipped (caplog: pytest.LogCaptureFixture) -> None:

	"""A listener that raises does not stop the others."""

	emitter = vocalise.event_emitter.EventEmitter()
	received: typing.List[int] = []

	def broken (v: int) -> None:
		raise RuntimeError("boom")

	emitter.on("display", broken)
	emitter.on("display", received.append)

	with caplog.at_level(logging.ERROR):
		emitter.emit("display", 3)

	assert received == [3]
	assert "Listener for 'display' failed" in caplog.text


def test_listener_may_unregister_itself () -> None:

	emitter = vocalise.event_emitter.EventEmitter()
	calls: typing.List[int] = []

	def once (v: int) -> None:
		calls.append(v)
		emitter.off("display", once)

	emitter.on("display", once)
	emitter.emit("display", 1)
	emitter.emit("display", 2)

	assert calls == [1]
