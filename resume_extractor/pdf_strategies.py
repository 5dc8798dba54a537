"""PDF text extraction strategies, from layout-aware to raw byte scanning."""

import io
import os
import re
import threading
import zlib
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from functools import partial
from typing import Iterator, NamedTuple

import fitz  # PyMuPDF
import pymupdf4llm
import pytesseract
from PIL import Image, ImageEnhance, ImageOps

from resume_extractor.config import ExtractorConfig, OCRConfig
from resume_extractor.exceptions import StrategyFailedError
from resume_extractor.logger import Timer, get_logger

logger = get_logger(__name__)


class TextRun(NamedTuple):
    """A positioned run of glyphs; ``y`` is the baseline, growing downwards."""

    y: float
    x: float
    text: str


def open_pdf(content: bytes) -> fitz.Document:
    return fitz.open(stream=content, filetype="pdf")


# MuPDF is not safe to drive from two threads at once, and a timed-out primary
# attempt keeps running in its abandoned worker thread
ENGINE_LOCK = threading.Lock()


def acquire_engine(wait_seconds: float) -> None:
    if not ENGINE_LOCK.acquire(timeout=wait_seconds):
        raise StrategyFailedError(
            f"PDF engine still busy with an abandoned extraction after {wait_seconds}s"
        )


@contextmanager
def pdf_engine(wait_seconds: float = 30.0) -> Iterator[None]:
    """Run the block while holding the MuPDF lock."""
    acquire_engine(wait_seconds)
    try:
        yield
    finally:
        ENGINE_LOCK.release()


# Strategy 1: positioned spans grouped into lines


def group_runs_into_lines(runs: list[TextRun], threshold: float = 5.0) -> list[list[TextRun]]:
    """Cluster runs whose baselines are within ``threshold`` into lines.

    Lines come out top to bottom, runs within a line left to right.
    """
    lines: list[list[TextRun]] = []
    current: list[TextRun] = []
    last_y = None

    for run in sorted(runs, key=lambda r: r.y):
        if last_y is None or abs(run.y - last_y) <= threshold:
            current.append(run)
        else:
            lines.append(current)
            current = [run]
        last_y = run.y

    if current:
        lines.append(current)

    return [sorted(line, key=lambda r: r.x) for line in lines]


def page_text_runs(page: fitz.Page) -> list[TextRun]:
    runs = []
    for block in page.get_text("dict")["blocks"]:
        # Image blocks carry no "lines"
        for line in block.get("lines", ()):
            for span in line["spans"]:
                text = span["text"].strip()
                if text:
                    x, y = span["origin"]
                    runs.append(TextRun(y=y, x=x, text=text))
    return runs


def extract_layout_text(content: bytes, line_threshold: float = 5.0) -> str:
    """Rebuild each page's lines from span positions."""
    pages = []
    with open_pdf(content) as pdf:
        for page in pdf:
            lines = group_runs_into_lines(page_text_runs(page), line_threshold)
            page_text = "\n".join(" ".join(run.text for run in line) for line in lines)
            if page_text:
                pages.append(page_text)

        logger.debug(
            "PDF layout extraction completed",
            extra_data={"page_count": pdf.page_count, "pages_with_text": len(pages)},
        )

    return "\n\n".join(pages)


# Strategy 2: PyMuPDF4LLM markdown conversion

_MD_HEADING = re.compile(r"^#{1,6}\s*", re.MULTILINE)
_MD_EMPHASIS = re.compile(r"(\*\*|__|~~)(.+?)\1")
_MD_ITALIC = re.compile(r"(?<![\w*])[*_](?=\S)(.+?)(?<=\S)[*_](?![\w*])")
_MD_TABLE_RULE = re.compile(r"^\|?(?:\s*:?-{3,}:?\s*\|)+\s*:?-*:?\s*$", re.MULTILINE)
_MD_CODE_FENCE = re.compile(r"^```.*$", re.MULTILINE)
_MD_BULLET = re.compile(r"^(\s*)[-*+]\s+", re.MULTILINE)


def markdown_to_text(markdown: str) -> str:
    """Strip markdown markup while keeping line structure."""
    text = _MD_CODE_FENCE.sub("", markdown)
    text = _MD_TABLE_RULE.sub("", text)
    text = _MD_HEADING.sub("", text)
    text = _MD_EMPHASIS.sub(r"\2", text)
    text = _MD_ITALIC.sub(r"\1", text)
    text = _MD_BULLET.sub(r"\1• ", text)

    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("|") and stripped.endswith("|"):
            cells = [cell.strip() for cell in stripped.strip("|").split("|")]
            line = "\t".join(cell for cell in cells if cell)
        lines.append(line)
    return "\n".join(lines)


def extract_markdown_text(content: bytes, config: ExtractorConfig) -> str:
    """Convert with PyMuPDF4LLM, which copes better with tables and columns."""
    with open_pdf(content) as pdf:
        markdown = pymupdf4llm.to_markdown(
            pdf,
            # Table extraction
            table_strategy=config.table_strategy,
            # Text extraction
            force_text=config.force_text,
            # Image handling
            write_images=False,
            ignore_images=True,
            # Text processing
            ignore_code=False,
            fontsize_limit=config.fontsize_limit,
        )
    return markdown_to_text(markdown)


# Strategy 3 (opt-in): Tesseract OCR of rendered pages


def configure_tesseract(config: OCRConfig) -> None:
    if config.tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = config.tesseract_cmd
    if config.tessdata_prefix:
        os.environ["TESSDATA_PREFIX"] = config.tessdata_prefix


def render_page(page: fitz.Page, config: OCRConfig) -> Image.Image:
    pix = page.get_pixmap(dpi=config.dpi)
    image = Image.open(io.BytesIO(pix.tobytes("png")))
    if config.enable_image_preprocessing:
        image = ImageOps.grayscale(image)
        image = ImageEnhance.Contrast(image).enhance(config.contrast_enhancement)
    return image


def ocr_image(image: Image.Image, config: OCRConfig) -> str:
    return pytesseract.image_to_string(
        image,
        lang=config.languages,
        config=f"--psm {config.psm_mode}",
    ).strip()


def extract_ocr_text(content: bytes, config: OCRConfig) -> str:
    """OCR every page; pages render sequentially and OCR in parallel."""
    with open_pdf(content) as pdf:
        images = [render_page(page, config) for page in pdf]

    with Timer("pdf_ocr") as timer:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            # map keeps page order
            page_texts = list(executor.map(partial(ocr_image, config=config), images))

    logger.info(
        "PDF OCR completed",
        extra_data={
            "page_count": len(images),
            "pages_with_text": sum(1 for text in page_texts if text),
            "ocr_time_ms": timer.get_elapsed_ms(),
        },
    )
    return "\n\n".join(text for text in page_texts if text)


# Strategy 4: regex scraping of show-text operators

_STREAM = re.compile(rb"(?<!end)stream\r?\n(.*?)endstream", re.DOTALL)
_TEXT_OBJECT = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
_LITERAL = r"\((?:[^()\\]|\\.)*\)"
_SHOW_TEXT = re.compile(
    rf"\[((?:{_LITERAL}|[^\](])*)\]\s*TJ|({_LITERAL})\s*(?:Tj|'|\")",
    re.DOTALL,
)
_LITERAL_STRING = re.compile(_LITERAL, re.DOTALL)
_ESCAPE = re.compile(r"\\([0-7]{1,3}|.)", re.DOTALL)
_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "(": "(",
    ")": ")",
    "\\": "\\",
    "\n": "",  # line continuation
}


def unescape_pdf_string(literal: str) -> str:
    """Decode a PDF literal string body (without the parentheses)."""

    def replace(match: re.Match) -> str:
        token = match.group(1)
        if token[0] in "01234567":
            return chr(int(token, 8) & 0xFF)
        return _ESCAPES.get(token, token)

    return _ESCAPE.sub(replace, literal)


def inflate_streams(content: bytes, limit: int = 50 * 1024 * 1024) -> Iterator[bytes]:
    """Yield decompressed bodies of the FlateDecode streams that inflate.

    At most ``limit`` bytes are inflated across all streams; the stream that
    crosses the budget is truncated and the rest are skipped.
    """
    remaining = limit
    for match in _STREAM.finditer(content):
        if remaining <= 0:
            logger.warning(
                "Inflated stream budget exhausted, skipping remaining streams",
                extra_data={"limit_bytes": limit},
            )
            return
        try:
            body = zlib.decompressobj().decompress(match.group(1), remaining)
        except zlib.error:
            continue
        remaining -= len(body)
        yield body


def show_text_operands(text_object: str) -> list[str]:
    """Strings painted by Tj, ', " and TJ operators inside one BT/ET block."""
    shown = []
    for match in _SHOW_TEXT.finditer(text_object):
        array, literal = match.groups()
        if array is not None:
            parts = [unescape_pdf_string(s[1:-1]) for s in _LITERAL_STRING.findall(array)]
            shown.append("".join(parts))
        else:
            shown.append(unescape_pdf_string(literal[1:-1]))
    return [s for s in shown if s.strip()]


def extract_structure_text(content: bytes, max_inflated_bytes: int = 50 * 1024 * 1024) -> str:
    """Scrape show-text operands out of raw and inflated content streams."""
    raw = content.decode("latin-1")
    if "obj" not in raw or "endobj" not in raw:
        raise StrategyFailedError("No PDF object markers found")

    sources = [raw]
    sources.extend(
        body.decode("latin-1") for body in inflate_streams(content, limit=max_inflated_bytes)
    )

    lines = []
    for source in sources:
        for text_object in _TEXT_OBJECT.findall(source):
            shown = show_text_operands(text_object)
            if shown:
                lines.append(" ".join(shown))

    logger.debug(
        "PDF structure scraping completed",
        extra_data={"stream_count": len(sources) - 1, "text_objects": len(lines)},
    )
    return "\n".join(lines)


# Strategy 5: printable byte runs


def extract_printable_runs(content: bytes, limit: int = 2_000_000, min_run: int = 5) -> str:
    """Flatten runs of at least ``min_run`` printable ASCII bytes into words."""
    pattern = re.compile(rb"[\x20-\x7e\t\r\n]{%d,}" % min_run)
    runs = (" ".join(run.decode("ascii").split()) for run in pattern.findall(content[:limit]))
    return " ".join(run for run in runs if run)
