import os

# Settings are read once at import time, so the test environment has to be
# in place before any aurascan module is collected.
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["ASSESSMENT_STORE"] = "memory"
os.environ["VOICE_TRANSCRIPTION_MODE"] = "transcribe"
os.environ.pop("SENTRY_DSN", None)
os.environ.pop("SCORING_CONFIG_PATH", None)
