import logging

import pytest

import vocalise.controller
import vocalise.display

from vocalise.exercises import NoteRange


def _state (pitches: frozenset = frozenset(), text: str = "", first: int = 48, last: int = 60) -> vocalise.controller.DisplayState:
	return vocalise.controller.DisplayState(pitches, text, NoteRange(first, last))


def test_render_keyboard_marks_keys () -> None:

	line = vocalise.display.render_keyboard(NoteRange(48, 52), {50}, 80)

	assert line == "|. : X : .|"


def test_render_keyboard_too_narrow () -> None:

	assert vocalise.display.render_keyboard(NoteRange(36, 84), set(), 60) == ""


def test_status_line () -> None:

	display = vocalise.display.Display(vocal_part="tenor", tempo_bpm=100)

	status = display._format_status(_state(text="Mi (-4)", first=48, last=72))

	assert status == "Tenor  100 BPM  Range: C3 - C5  Mi (-4)"


def test_status_line_omits_missing_parts () -> None:

	display = vocalise.display.Display()
	state = vocalise.controller.DisplayState(frozenset(), "", None)

	assert display._format_status(state) == ""


def test_format_lines_with_and_without_keyboard (monkeypatch: pytest.MonkeyPatch) -> None:

	monkeypatch.setattr(vocalise.display.shutil, "get_terminal_size", lambda fallback: type("Size", (), {"columns": 100})())

	state = _state(frozenset({48}), "Do")

	with_keys = vocalise.display.Display(keyboard=True).format_lines(state)
	without_keys = vocalise.display.Display(keyboard=False).format_lines(state)

	assert len(with_keys) == 2
	assert with_keys[0].startswith("|X :")
	assert without_keys == ["Range: C3 - C4  Do"]


def test_update_is_ignored_until_started (capsys: pytest.CaptureFixture) -> None:

	display = vocalise.display.Display()

	display.update(_state(text="Do"))

	assert capsys.readouterr().err == ""


def test_update_draws_to_stderr (capsys: pytest.CaptureFixture) -> None:

	display = vocalise.display.Display(vocal_part="alto", keyboard=False)
	display.start()

	try:
		display.update(_state(text="Sol"))
	finally:
		display.stop()

	err = capsys.readouterr().err

	assert "Alto  Range: C3 - C4  Sol" in err


def test_start_and_stop_swap_log_handlers () -> None:

	root_logger = logging.getLogger()
	before = list(root_logger.handlers)
	display = vocalise.display.Display()

	display.start()

	assert len(root_logger.handlers) == 1
	assert isinstance(root_logger.handlers[0], vocalise.display.DisplayLogHandler)

	display.stop()

	assert root_logger.handlers == before


def test_log_messages_are_written_above_display (capsys: pytest.CaptureFixture) -> None:

	display = vocalise.display.Display(keyboard=False)
	display.start()

	try:
		display.update(_state(text="La"))
		logging.getLogger("vocalise.test").warning("device changed")
	finally:
		display.stop()

	err = capsys.readouterr().err

	assert "device changed" in err
	assert err.rindex("La") > err.index("device changed")
