"""Resume extractor: per-format strategy tables behind one acceptance gate."""

from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, Optional

from tenacity import Retrying, stop_after_attempt, wait_exponential

from resume_extractor import docx_strategies, pdf_strategies
from resume_extractor.chain import Strategy, first_valid
from resume_extractor.config import ExtractorConfig
from resume_extractor.detector import FormatDetector
from resume_extractor.diagnostics import AttemptRecorder
from resume_extractor.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    UnsupportedFormatError,
)
from resume_extractor.logger import get_logger
from resume_extractor.models import DetectedFormat, ExtractedText, UploadedDocument
from resume_extractor.text_utils import clean_plain_text, cleanup_pdf_text, decode_first_clean
from resume_extractor.validation import is_valid

logger = get_logger(__name__)


def extract_utf8_text(content: bytes) -> str:
    return clean_plain_text(content.decode("utf-8-sig"))


def extract_any_encoding_text(content: bytes) -> str:
    return clean_plain_text(decode_first_clean(content))


class ResumeExtractor:
    """Best-effort resume text extraction.

    Each format has a fixed, ordered strategy table. Strategies run one at a
    time until one produces text that passes the acceptance gate; if none
    does, the fixed sample resume is returned, tagged as a fallback.
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        recorder: Optional[AttemptRecorder] = None,
        detector: Optional[FormatDetector] = None,
    ):
        """Initialize extractor.

        Args:
            config: Extraction configuration. If None, uses defaults.
            recorder: Optional sink receiving every strategy attempt.
            detector: Format detector. If None, creates default.
        """
        self.config = config or ExtractorConfig()
        self.recorder = recorder
        self.detector = detector or FormatDetector()

        if self.config.enable_ocr:
            pdf_strategies.configure_tesseract(self.config.ocr_config)

        logger.debug(
            "Initializing ResumeExtractor",
            extra_data={
                "max_file_size_bytes": self.config.max_file_size_bytes,
                "primary_attempts": self.config.primary_attempts,
                "enable_ocr": self.config.enable_ocr,
            },
        )

    def extract(
        self, document: UploadedDocument, fmt: Optional[DetectedFormat] = None
    ) -> ExtractedText:
        """Extract text from an uploaded resume.

        Args:
            document: The upload
            fmt: Known format. If None, it is detected from the document.

        Returns:
            Extracted for real text, FallbackUsed when every strategy failed

        Raises:
            EmptyFileError: If the upload has no content
            FileTooLargeError: If the upload exceeds the size cap
            UnsupportedFormatError: If the upload is another document type
        """
        self.validate(document)
        fmt = DetectedFormat(fmt) if fmt else self.detector.detect(document)

        return first_valid(
            self.strategies_for(fmt),
            document,
            accept=partial(is_valid, fmt=fmt, config=self.config.validation),
            recorder=self.recorder,
            postprocess=cleanup_pdf_text if fmt is DetectedFormat.PDF else None,
        )

    def validate(self, document: UploadedDocument) -> None:
        """Reject uploads no strategy should ever see."""
        if document.size == 0:
            raise EmptyFileError("File is empty")

        if document.size > self.config.max_file_size_bytes:
            raise FileTooLargeError(document.size, self.config.max_file_size_bytes)

        try:
            self.detector.ensure_supported(document)
        except ValueError as exc:
            raise UnsupportedFormatError(str(exc)) from exc

    def strategies_for(self, fmt: DetectedFormat) -> list[Strategy]:
        if fmt is DetectedFormat.PDF:
            return self.pdf_strategies()
        if fmt is DetectedFormat.DOCX:
            return self.docx_strategies()
        return self.txt_strategies()

    def pdf_strategies(self) -> list[Strategy]:
        config = self.config
        strategies = [
            Strategy(
                "pdf-layout",
                self._content(
                    self._with_timeout_and_retry(
                        partial(pdf_strategies.extract_layout_text, line_threshold=config.line_threshold)
                    )
                ),
            ),
            Strategy(
                "pdf-markdown",
                self._content(
                    self._exclusive(partial(pdf_strategies.extract_markdown_text, config=config))
                ),
            ),
        ]
        if config.enable_ocr:
            strategies.append(
                Strategy(
                    "pdf-ocr",
                    self._content(
                        self._exclusive(
                            partial(pdf_strategies.extract_ocr_text, config=config.ocr_config)
                        )
                    ),
                )
            )
        strategies.extend(
            [
                Strategy(
                    "pdf-structure",
                    self._content(
                        partial(
                            pdf_strategies.extract_structure_text,
                            max_inflated_bytes=config.max_uncompressed_bytes,
                        )
                    ),
                ),
                Strategy(
                    "pdf-binary",
                    self._content(
                        partial(
                            pdf_strategies.extract_printable_runs,
                            limit=config.binary_scan_limit_bytes,
                            min_run=config.min_run_length,
                        )
                    ),
                ),
            ]
        )
        return strategies

    def docx_strategies(self) -> list[Strategy]:
        limit = self.config.max_uncompressed_bytes
        return [
            Strategy(
                "docx-structured",
                self._content(
                    partial(docx_strategies.extract_structured_text, max_uncompressed_bytes=limit)
                ),
            ),
            Strategy(
                "docx-xml",
                self._content(
                    partial(docx_strategies.extract_xml_text, max_uncompressed_bytes=limit)
                ),
            ),
            Strategy("docx-text", self._content(docx_strategies.extract_decoded_text)),
        ]

    def txt_strategies(self) -> list[Strategy]:
        return [
            Strategy("txt-utf8", self._content(extract_utf8_text)),
            Strategy("txt-encodings", self._content(extract_any_encoding_text)),
        ]

    @staticmethod
    def _content(fn: Callable[[bytes], str]) -> Callable[[UploadedDocument], str]:
        return lambda document: fn(document.content)

    def _exclusive(self, fn: Callable[[bytes], str]) -> Callable[[bytes], str]:
        """Run a MuPDF-backed strategy only once no other thread drives MuPDF."""
        wait_seconds = self.config.engine_wait_seconds

        def run(content: bytes) -> str:
            with pdf_strategies.pdf_engine(wait_seconds):
                return fn(content)

        return run

    def _with_timeout_and_retry(self, fn: Callable[[bytes], str]) -> Callable[[bytes], str]:
        """Bound each call by the primary timeout and retry with backoff.

        The MuPDF lock is taken here and released by the worker when ``fn``
        returns, so a timed-out attempt keeps the engine until it finishes.
        """
        config = self.config

        def locked_call(content: bytes) -> str:
            try:
                return fn(content)
            finally:
                pdf_strategies.ENGINE_LOCK.release()

        def call_with_timeout(content: bytes) -> str:
            pdf_strategies.acquire_engine(config.engine_wait_seconds)
            executor = ThreadPoolExecutor(max_workers=1)
            try:
                future = executor.submit(locked_call, content)
            except BaseException:
                pdf_strategies.ENGINE_LOCK.release()
                executor.shutdown(wait=False)
                raise
            try:
                return future.result(timeout=config.primary_timeout_seconds)
            finally:
                # A timed-out worker is abandoned, not awaited; it is never
                # cancelled because it owns the lock
                executor.shutdown(wait=False)

        def log_retry(retry_state) -> None:
            logger.warning(
                "Primary PDF strategy attempt failed, retrying",
                extra_data={
                    "attempt": retry_state.attempt_number,
                    "error": repr(retry_state.outcome.exception()),
                    "wait_seconds": retry_state.next_action.sleep,
                },
            )

        def run(content: bytes) -> str:
            retrying = Retrying(
                stop=stop_after_attempt(max(1, config.primary_attempts)),
                wait=wait_exponential(multiplier=config.retry_backoff_seconds),
                reraise=True,
                before_sleep=log_retry,
            )
            return retrying(call_with_timeout, content)

        return run
