
"""
Vocalise - timed vocal warm-up playback for Python.

Pick an exercise, a vocal part and a tempo; Vocalise transposes the exercise
across the singer's range, lays every note out on a millisecond timeline and
plays it on a MIDI instrument while publishing the sounding keys and the
syllable to sing.

What it does:

- **Exercise catalog.** Scales, arpeggios, triads, fifths and octave jumps,
  as single passes or as ascending, descending and round-trip range
  explorers that step the pattern through the voice.
- **Vocal parts.** Bass, baritone, tenor, alto and soprano, each with its
  own home key and keyboard window. The window widens automatically when
  an exercise travels beyond it.
- **Rhythm presets.** Even beats, slow, fast, dotted and long endings, or
  any custom rhythm of the right length.
- **Chord intro.** Optionally sound the chord of each pass before singing it.
- **Looping.** Restart seamlessly at the end of each run; settings changed
  while playing apply from the next loop.
- **Terminal display.** ASCII keyboard plus syllable/status line.
- **Rendering.** Write a session to a standard MIDI file with syllables as lyrics.

Minimal example:

    ```python
    import asyncio
    import vocalise
    import vocalise.instrument

    async def main ():
        instrument = vocalise.instrument.MidiInstrument(sound="piano")
        await instrument.load()

        trainer = vocalise.Trainer(instrument)
        trainer.play("triadRoundTrip", "tenor", tempo_bpm=100)

        while trainer.playing:
            await asyncio.sleep(0.1)

    asyncio.run(main())
    ```

Package-level exports: ``Trainer``, ``ConfigurationError``, ``EXERCISES``, ``VOCAL_RANGES``.
"""

import vocalise.errors
import vocalise.exercises
import vocalise.trainer


Trainer = vocalise.trainer.Trainer
ConfigurationError = vocalise.errors.ConfigurationError
EXERCISES = vocalise.exercises.EXERCISES
VOCAL_RANGES = vocalise.exercises.VOCAL_RANGES
