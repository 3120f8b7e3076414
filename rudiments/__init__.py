"""
rudiments - a step-sequencing drum machine that plays rhythm patterns using
audio samples.

Features:

- **16-step measures.** Each track of a pattern is one measure of 4/4 in
  16th note steps, written as ``|x---|x---|x---|x---|``.
- **Per-track amplitude.** An optional loudness in [0, 1] per track.
- **Shared samples.** Several instruments may be bound to one sample file;
  their steps are merged and the quietest amplitude wins.
- **Adjustable tempo.** Playback at any whole number of BPM.
- **Once or on repeat.** Looped playback is padded and cut to exactly one
  measure so repetitions do not drift.
- **Many audio formats.** Samples are decoded with libsndfile (WAV, FLAC,
  Ogg Vorbis, MP3).

Minimal example:

    ```python
    import rudiments

    pattern = rudiments.Pattern.parse("examples/patterns/standard")
    instrumentation = rudiments.Instrumentation.parse("examples/instrumentations/linndrum")

    rudiments.play(pattern, instrumentation, "samples/linndrum", rudiments.Tempo(120), repeat=True)
    ```

Package-level exports: ``Pattern``, ``Instrumentation``, ``SampleFile``,
``Steps``, ``Amplitude``, ``Tempo``, ``bind_tracks``, ``play``.
"""

import rudiments.binding
import rudiments.instrumentation
import rudiments.pattern
import rudiments.playback
import rudiments.steps
import rudiments.timing


__version__ = "0.1.0"

Pattern = rudiments.pattern.Pattern
Instrumentation = rudiments.instrumentation.Instrumentation
SampleFile = rudiments.instrumentation.SampleFile
Steps = rudiments.steps.Steps
Amplitude = rudiments.steps.Amplitude
Tempo = rudiments.timing.Tempo
bind_tracks = rudiments.binding.bind_tracks
play = rudiments.playback.play
