"""DOCX text extraction strategies."""

import io
import re
import zipfile

from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph
from lxml import etree

from resume_extractor.exceptions import StrategyFailedError
from resume_extractor.logger import get_logger
from resume_extractor.text_utils import clean_plain_text, decode_first_clean, normalize_text

logger = get_logger(__name__)

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
W = f"{{{W_NS}}}"

DOCUMENT_XML = "word/document.xml"
BULLET = "• "

_TEXT_RUN = re.compile(rb"<w:t(?:\s[^>]*)?>([^<]*)</w:t>")
_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)

DEFAULT_MAX_UNCOMPRESSED_BYTES = 50 * 1024 * 1024


def check_uncompressed_size(archive: zipfile.ZipFile, limit: int) -> None:
    """Refuse archives whose members inflate past ``limit`` bytes in total."""
    total = sum(info.file_size for info in archive.infolist())
    if total > limit:
        raise StrategyFailedError(
            f"Archive inflates to {total} bytes, above the {limit} byte limit"
        )


# Strategy 1: python-docx structural walk


def is_heading(paragraph: Paragraph) -> bool:
    style_name = getattr(paragraph.style, "name", "") or ""
    return style_name.startswith("Heading") or style_name == "Title"


def is_list_item(paragraph: Paragraph) -> bool:
    style_name = getattr(paragraph.style, "name", "") or ""
    if style_name.startswith("List"):
        return True
    ppr = paragraph._p.pPr
    return ppr is not None and ppr.numPr is not None


def table_rows(table: Table) -> list[str]:
    """One tab-joined line per row; horizontally merged cells appear once."""
    rows = []
    for row in table.rows:
        cells = []
        last_tc = None
        for cell in row.cells:
            if cell._tc is last_tc:
                continue
            last_tc = cell._tc
            cells.append(" ".join(cell.text.split()))
        if any(cells):
            rows.append("\t".join(cells))
    return rows


def extract_structured_text(
    content: bytes, max_uncompressed_bytes: int = DEFAULT_MAX_UNCOMPRESSED_BYTES
) -> str:
    """Walk body content in document order, keeping semantic grouping.

    Headings become uppercase lines, paragraphs blank-line separated blocks,
    consecutive list items one bulleted block, table rows tab-joined lines.
    """
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        check_uncompressed_size(archive, max_uncompressed_bytes)

    document = Document(io.BytesIO(content))
    blocks: list[str] = []
    bullets: list[str] = []

    def flush_bullets():
        if bullets:
            blocks.append("\n".join(bullets))
            bullets.clear()

    for item in document.iter_inner_content():
        if isinstance(item, Table):
            flush_bullets()
            rows = table_rows(item)
            if rows:
                blocks.append("\n".join(rows))
            continue

        text = item.text.strip()
        if not text:
            continue
        if is_list_item(item):
            bullets.append(BULLET + text)
            continue

        flush_bullets()
        blocks.append(text.upper() if is_heading(item) else text)

    flush_bullets()

    logger.debug(
        "DOCX structural walk completed",
        extra_data={
            "block_count": len(blocks),
            "table_count": len(document.tables),
        },
    )
    # Table cells stay tab-separated
    return normalize_text("\n\n".join(blocks), keep_tabs=True)


# Strategy 2: raw word/document.xml


def paragraph_xml_text(paragraph: etree._Element) -> str:
    """Text of one w:p, excluding paragraphs nested in it (e.g. text boxes)."""
    parts = []
    for node in paragraph.iter(W + "t", W + "tab", W + "br", W + "cr"):
        if next(node.iterancestors(W + "p"), None) is not paragraph:
            continue
        if node.tag == W + "t":
            parts.append(node.text or "")
        elif node.tag == W + "tab":
            parts.append("\t")
        else:
            parts.append("\n")
    return "".join(parts)


def regex_text_runs(xml: bytes) -> str:
    """Flat fallback for XML that does not parse."""
    return " ".join(
        match.decode("utf-8", errors="ignore") for match in _TEXT_RUN.findall(xml)
    )


def extract_xml_text(
    content: bytes, max_uncompressed_bytes: int = DEFAULT_MAX_UNCOMPRESSED_BYTES
) -> str:
    """Read word/document.xml straight out of the ZIP container."""
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        try:
            info = archive.getinfo(DOCUMENT_XML)
        except KeyError as exc:
            raise StrategyFailedError(f"Archive has no {DOCUMENT_XML}") from exc
        if info.file_size > max_uncompressed_bytes:
            raise StrategyFailedError(
                f"{DOCUMENT_XML} inflates to {info.file_size} bytes, "
                f"above the {max_uncompressed_bytes} byte limit"
            )
        # zipfile stops reading at the declared size
        xml = archive.read(info)

    try:
        root = etree.fromstring(xml, parser=_XML_PARSER)
    except etree.XMLSyntaxError as exc:
        logger.warning(
            "document.xml did not parse, falling back to regex extraction",
            extra_data={"error": str(exc)},
        )
        return clean_plain_text(regex_text_runs(xml))

    paragraphs = [paragraph_xml_text(p) for p in root.iter(W + "p")]
    return clean_plain_text("\n\n".join(p for p in paragraphs if p.strip()))


# Strategy 3: decode the raw bytes as text


def extract_decoded_text(content: bytes) -> str:
    """For "DOCX" uploads that are really plain text under a .docx name."""
    return clean_plain_text(decode_first_clean(content))
