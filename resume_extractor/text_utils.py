"""Text cleanup helpers shared by the extraction strategies."""

import html
import re
from typing import Optional

from resume_extractor.exceptions import StrategyFailedError

ZIP_TEXT_SIGNATURE = "PK\x03\x04"

# Fallback encodings, tried in order
TEXT_ENCODINGS = ("utf-8", "iso-8859-1", "windows-1252", "utf-16")

PRINTABLE_WHITESPACE = "\t\n\r"

MAX_CLEANUP_PASSES = 10

# Longest first so "PROFESSIONAL EXPERIENCE" wins over "EXPERIENCE"
SECTION_HEADERS = (
    "PROFESSIONAL EXPERIENCE",
    "WORK HISTORY",
    "CERTIFICATIONS",
    "QUALIFICATIONS",
    "EXPERIENCE",
    "EMPLOYMENT",
    "EDUCATION",
    "OBJECTIVE",
    "PROJECTS",
    "SUMMARY",
    "PROFILE",
    "SKILLS",
)

_HEADER_ALTERNATION = "|".join(
    r"\s+".join(re.escape(word) for word in header.split()) for header in SECTION_HEADERS
)

# Only whitespace-delimited headers are split out, so the split never creates
# whitespace next to other tokens
_HEADER_INLINE = re.compile(
    rf"\s*(?<!\S)({_HEADER_ALTERNATION}):?(?=\s|$)\s*"
)
_HEADER_LINE = re.compile(
    rf"^[ \t]*({_HEADER_ALTERNATION})[ \t]*:?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)

_WORD_BOUNDARY = re.compile(
    r"(?<=[a-z])(?=[A-Z])|(?<=[A-Za-z])(?=\d)|(?<=\d)(?=[A-Za-z])"
)

_PDF_SYNTAX = (
    re.compile(r"<</[^>]*>>"),
    re.compile(r"\b\d+\s+\d+\s+obj\b"),
    re.compile(r"\b(?:endobj|endstream|stream|startxref|xref|trailer)\b"),
    re.compile(r"(?:^|(?<=[\s<\[(]))(?:/[A-Za-z][\w.+#-]*)+", re.MULTILINE),
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_HORIZONTAL_SPACE = re.compile(r"[ \t\f\v]+")
_SPACES_ONLY = re.compile(r"[ \f\v]+")
_SPACE_AROUND_TAB = re.compile(r" *\t *")
_SPACE_AROUND_NEWLINE = re.compile(r" *\n *")
_BLANK_LINES = re.compile(r"\n{3,}")


def is_printable_char(char: str) -> bool:
    return char.isprintable() or char in PRINTABLE_WHITESPACE


def control_ratio(text: str, sample_size: int = 1000) -> float:
    """Share of non-printable characters in the first ``sample_size`` chars."""
    sample = text[:sample_size]
    if not sample:
        return 0.0
    non_printable = sum(1 for char in sample if not is_printable_char(char))
    return non_printable / len(sample)


def strip_non_printable(text: str) -> str:
    return "".join(char for char in text if is_printable_char(char))


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def collapse_whitespace(text: str, keep_tabs: bool = False) -> str:
    """Collapse horizontal runs and blank-line runs, keeping paragraph breaks.

    With ``keep_tabs`` tab characters survive as column separators.
    """
    if keep_tabs:
        text = _SPACE_AROUND_TAB.sub("\t", _SPACES_ONLY.sub(" ", text))
    else:
        text = _HORIZONTAL_SPACE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    return _BLANK_LINES.sub("\n\n", text).strip()


def restore_section_headers(text: str) -> str:
    """Put recognised section headers on their own line after a blank line.

    Header keywords alone on a line are uppercased first; uppercase header
    keywords anywhere in the text are then split out.
    """
    text = _HEADER_LINE.sub(lambda m: " ".join(m.group(1).upper().split()), text)
    text = _HEADER_INLINE.sub(
        lambda m: "\n\n" + " ".join(m.group(1).split()) + "\n", text
    )
    return _BLANK_LINES.sub("\n\n", text).strip()


def remove_pdf_syntax(text: str) -> str:
    """Blank out PDF syntax tokens until none are left.

    Removing one token can expose another (``1 /X 2 obj``), so the patterns
    are reapplied; every substitution shortens the text.
    """
    while True:
        cleaned = text
        for pattern in _PDF_SYNTAX:
            cleaned = pattern.sub(" ", cleaned)
        if cleaned == text:
            return cleaned
        text = cleaned


def _cleanup_pass(text: str) -> str:
    cleaned = strip_non_printable(normalize_newlines(text))
    # Undo lost word spacing: camelCase -> camel Case, abc123 -> abc 123
    cleaned = _WORD_BOUNDARY.sub(" ", cleaned)
    cleaned = collapse_whitespace(remove_pdf_syntax(cleaned))
    return restore_section_headers(cleaned)


def cleanup_pdf_text(text: str) -> str:
    """Remove PDF syntax noise and approximate the original layout.

    Passes repeat until the text stops changing, so running the cleanup on
    its own output returns the same string.
    """
    if not text:
        return ""

    cleaned = _cleanup_pass(text)
    for _ in range(MAX_CLEANUP_PASSES):
        again = _cleanup_pass(cleaned)
        if again == cleaned:
            break
        cleaned = again
    return cleaned


def normalize_text(text: str, keep_tabs: bool = False) -> str:
    """Drop control characters and normalise whitespace."""
    if not text:
        return ""

    cleaned = _CONTROL_CHARS.sub("", normalize_newlines(text))
    return collapse_whitespace(cleaned, keep_tabs=keep_tabs)


def clean_plain_text(text: str) -> str:
    """Decode entities, drop control characters and normalise whitespace."""
    if not text:
        return ""

    return normalize_text(html.unescape(normalize_newlines(text)))


def looks_binary(text: str, sample_size: int = 1000) -> bool:
    """True when decoded text still carries container or encoding artefacts."""
    if text.startswith(ZIP_TEXT_SIGNATURE) or "\ufffd" in text:
        return True
    return _CONTROL_CHARS.search(text[:sample_size]) is not None


def decode_first_clean(content: bytes, encodings: tuple[str, ...] = TEXT_ENCODINGS) -> str:
    """Decode with the first encoding that yields artefact-free text.

    Raises:
        StrategyFailedError: If no encoding produces clean text
    """
    for encoding in encodings:
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError:
            continue
        if text and not looks_binary(text):
            return text
    raise StrategyFailedError(
        f"No clean text decoding among: {', '.join(encodings)}"
    )


def truncate(text: str, limit: int = 80) -> Optional[str]:
    """Single-line preview for log output."""
    if not text:
        return None
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."
