"""Constants for rudiments.

Measure geometry and the characters used by the pattern file notation, plus
the fixed output format of the default playback backend.
"""

# A measure is one bar of 4/4 split into 16th note steps.
STEPS_PER_MEASURE = 16
BEATS_PER_MEASURE = 4
STEPS_PER_BEAT = STEPS_PER_MEASURE // BEATS_PER_MEASURE

# Pattern file notation.
STEP_PLAY = "x"
STEP_SILENT = "-"
SEPARATOR = "|"

DEFAULT_TEMPO = 120

# Playback format.
SAMPLE_RATE = 44_100
CHANNELS = 1
