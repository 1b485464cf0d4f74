"""
cliptune - compile declarative musical clips into note events.

Describe a phrase as a rhythm pattern, a list of notes or chords, and a few
shaping parameters; cliptune compiles it into a time-ordered list of note
events for a playback or export backend to consume. It makes no sound and
schedules nothing itself.

What it does:

- **Pattern notation.** ``"x-x_[xx]R"`` - hits, rests, ties, random hits and
  nested subdivisions, each ``x`` one subdivision (``"4n"``, ``"16n"``...).
- **Notes and chords.** ``"C4 Eb4 G4"``, explicit voicings
  (``["C4", "E4", "G4"]``) or chord names (``"CM"``, ``"Am7-3"``), cycled
  across the pattern's hits; optional shuffle and random-note pools.
- **Velocity shaping.** Accent strings (``"x--x"``) and repeating "sizzle"
  envelopes (sine, cosine, ramp up, ramp down) between ``accent_low`` and
  ``amp``.
- **Arpeggiation.** Chords split into consecutive single notes.
- **Bounded rendering.** ``render_window()`` gives the number of pattern
  passes after which notes and steps realign, so a one-shot render equals
  one full period of the loop; ``RenderSession`` tracks concurrent renders.
- **Arrangement.** Per-channel strings such as ``"0___1___----"`` select
  clips over a song.
- **MIDI output.** ``cliptune.midi`` turns events into ``mido`` messages.

Randomness is always injectable: pass a seeded ``random.Random`` as ``rng``
for repeatable output.

Minimal example:

    ```python
    import cliptune

    spec = cliptune.ClipSpec(
        pattern = "x-x[xx]",
        notes = "C4 E4 G4",
        sizzle = "rampUp",
        capability = cliptune.BackendCapability.TRIGGERS_PITCHED_NOTE,
    )

    for event in cliptune.compile_clip(spec):
        print(event.time, event.pitches, event.duration, event.velocity)
    ```

Package-level exports: ``ClipSpec``, ``NoteEvent``, ``BackendCapability``,
``compile_clip``, ``Channel``, ``Session``, ``ChannelPattern``,
``RenderSession``, ``render_window``.
"""

import cliptune.arrangement
import cliptune.channel
import cliptune.clip
import cliptune.render
import cliptune.session


ClipSpec = cliptune.clip.ClipSpec
NoteEvent = cliptune.clip.NoteEvent
BackendCapability = cliptune.clip.BackendCapability
compile_clip = cliptune.clip.compile_clip
Channel = cliptune.channel.Channel
Session = cliptune.session.Session
ChannelPattern = cliptune.arrangement.ChannelPattern
RenderSession = cliptune.render.RenderSession
render_window = cliptune.render.render_window
