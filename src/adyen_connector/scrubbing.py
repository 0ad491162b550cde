"""Redaction of request/response transcripts."""

import re

FILTERED = "[FILTERED]"

_SCRUB_PATTERNS = (
    re.compile(r"(Authorization: Basic )[\w+/=]+"),
    re.compile(r'("number\\?":\s*\\?")[^"\\]*', re.IGNORECASE),
    re.compile(r'("cvc\\?":\s*\\?")[^"\\]*', re.IGNORECASE),
)


def scrub(transcript: str) -> str:
    """Blank out credentials and card data in a transcript.

    Replaces the Basic credentials header value and the values of the
    ``number`` and ``cvc`` JSON fields, including backslash-escaped JSON
    embedded in log lines. Everything else is returned unchanged.
    """
    if not transcript:
        return transcript
    for pattern in _SCRUB_PATTERNS:
        transcript = pattern.sub(lambda m: m.group(1) + FILTERED, transcript)
    return transcript
