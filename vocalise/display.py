"""Live terminal display for exercise playback.

Shows an ASCII keyboard of the projected range with the
sounding pitches marked, and a status line with the current syllable, tempo
and range. Log messages scroll above the display without disrupting it.

Enable it with a single call before ``play()``:

```python
trainer.display()
trainer.play("triadRoundTrip", "tenor", 100)
```

The display looks like::

	|. : . : . . : . : . : . X : . : . . : . : . : .|
	Tenor  100 BPM  Range: C3 - C5  Mi (-4)
"""

import logging
import shutil
import sys
import typing

import vocalise.controller
import vocalise.exercises
import vocalise.notes


_BLACK_KEYS = {1, 3, 6, 8, 10}
_MIN_TERMINAL_WIDTH = 40


def render_keyboard (display_range: vocalise.exercises.NoteRange, active_pitches: typing.Collection[int], width: int) -> str:

	"""Render one character per key: ``X`` sounding, ``.`` white key, ``:`` black key.

	Returns an empty string when the range does not fit in ``width`` columns.
	"""

	keys = range(display_range.first, display_range.last + 1)

	if len(keys) * 2 + 1 > width:
		return ""

	cells = []

	for pitch in keys:
		if pitch in active_pitches:
			cells.append("X")
		elif pitch % 12 in _BLACK_KEYS:
			cells.append(":")
		else:
			cells.append(".")

	return "|" + " ".join(cells) + "|"


class DisplayLogHandler (logging.Handler):

	"""Logging handler that clears and redraws the display around log output.

	Installed by ``Display.start()`` and removed by ``Display.stop()``.
	"""

	def __init__ (self, display: "Display") -> None:

		super().__init__()
		self._display = display

	def emit (self, record: logging.LogRecord) -> None:

		"""Clear the display, write the log message, then redraw."""

		try:
			self._display.clear_line()

			msg = self.format(record)
			sys.stderr.write(msg + "\n")
			sys.stderr.flush()

			self._display.draw()

		except Exception:
			self.handleError(record)


class Display:

	"""Terminal sink for ``"display"`` events from a ``PlaybackController``.

	Example:
		```python
		display = Display(vocal_part="tenor", tempo_bpm=100)
		controller.on_event("display", display.update)
		display.start()
		```
	"""

	def __init__ (self, vocal_part: str = "", tempo_bpm: float = 0.0, keyboard: bool = True) -> None:

		"""
		Parameters:
			vocal_part: Shown at the start of the status line.
			tempo_bpm: Shown in the status line when positive.
			keyboard: When True, draw the ASCII keyboard above the status line.
		"""

		self.vocal_part = vocal_part
		self.tempo_bpm = tempo_bpm
		self._keyboard = keyboard
		self._active: bool = False
		self._handler: typing.Optional[DisplayLogHandler] = None
		self._saved_handlers: typing.List[logging.Handler] = []
		self._lines: typing.List[str] = []
		self._drawn_line_count: int = 0

	def start (self) -> None:

		"""Install the log handler and activate the display.

		Saves existing root logger handlers and replaces them with a
		``DisplayLogHandler``. Original handlers are restored by ``stop()``.
		"""

		if self._active:
			return

		self._active = True

		root_logger = logging.getLogger()
		self._saved_handlers = list(root_logger.handlers)
		self._handler = DisplayLogHandler(self)

		if self._saved_handlers and self._saved_handlers[0].formatter:
			self._handler.setFormatter(self._saved_handlers[0].formatter)
		else:
			self._handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))

		root_logger.handlers.clear()
		root_logger.addHandler(self._handler)

	def stop (self) -> None:

		"""Clear the display and restore original log handlers."""

		if not self._active:
			return

		self.clear_line()
		self._active = False

		root_logger = logging.getLogger()
		root_logger.handlers.clear()

		for handler in self._saved_handlers:
			root_logger.addHandler(handler)

		self._saved_handlers = []
		self._handler = None

	def update (self, state: vocalise.controller.DisplayState) -> None:

		"""Rebuild and redraw from a controller ``DisplayState``."""

		if not self._active:
			return

		self._lines = self.format_lines(state)
		self.draw()

	def format_lines (self, state: vocalise.controller.DisplayState) -> typing.List[str]:

		"""Build the keyboard (when enabled and it fits) and status lines."""

		lines: typing.List[str] = []
		term_width = shutil.get_terminal_size(fallback=(80, 24)).columns

		if self._keyboard and state.display_range is not None and term_width >= _MIN_TERMINAL_WIDTH:
			keyboard = render_keyboard(state.display_range, state.active_pitches, term_width)
			if keyboard:
				lines.append(keyboard)

		lines.append(self._format_status(state))

		return lines

	def _format_status (self, state: vocalise.controller.DisplayState) -> str:

		parts: typing.List[str] = []

		if self.vocal_part:
			parts.append(self.vocal_part.title())

		if self.tempo_bpm > 0:
			parts.append(f"{self.tempo_bpm:g} BPM")

		if state.display_range is not None:
			first = vocalise.notes.midi_to_note(state.display_range.first)
			last = vocalise.notes.midi_to_note(state.display_range.last)
			parts.append(f"Range: {first} - {last}")

		if state.text:
			parts.append(state.text)

		return "  ".join(parts)

	def draw (self) -> None:

		"""Write the current display to the terminal."""

		if not self._active or not self._lines:
			return

		# Cursor sits on the last drawn line; move up to the first.
		if self._drawn_line_count > 1:
			sys.stderr.write(f"\033[{self._drawn_line_count - 1}A")

		for line in self._lines[:-1]:
			sys.stderr.write(f"\r\033[K{line}\n")

		sys.stderr.write(f"\r\033[K{self._lines[-1]}")
		sys.stderr.flush()

		self._drawn_line_count = len(self._lines)

	def clear_line (self) -> None:

		"""Erase the entire display region from the terminal."""

		if not self._active:
			return

		if self._drawn_line_count > 1:
			sys.stderr.write(f"\033[{self._drawn_line_count - 1}A")

			for _ in range(self._drawn_line_count):
				sys.stderr.write("\r\033[K\n")

			sys.stderr.write(f"\033[{self._drawn_line_count}A")
		else:
			sys.stderr.write("\r\033[K")

		sys.stderr.flush()
		self._drawn_line_count = 0
