"""First-valid-result-wins combinator over ordered extraction strategies."""

from typing import Callable, NamedTuple, Optional, Sequence

from resume_extractor.diagnostics import AttemptRecorder
from resume_extractor.logger import Timer, get_logger
from resume_extractor.models import (
    Extracted,
    ExtractedText,
    ExtractionAttempt,
    FallbackUsed,
    UploadedDocument,
)
from resume_extractor.text_utils import truncate

logger = get_logger(__name__)


class Strategy(NamedTuple):
    name: str
    run: Callable[[UploadedDocument], str]


def first_valid(
    strategies: Sequence[Strategy],
    document: UploadedDocument,
    accept: Callable[[str], bool],
    recorder: Optional[AttemptRecorder] = None,
    postprocess: Optional[Callable[[str], str]] = None,
) -> ExtractedText:
    """Run strategies in order and return the first accepted text.

    A strategy that raises is recorded as failed and skipped. The gate judges
    the raw candidate, so leaked binary is rejected before any cleanup can
    hide it. No strategy after the accepted one is invoked. When every
    candidate is rejected the fixed sample resume is returned as
    ``FallbackUsed``.

    Args:
        strategies: Ordered (name, fn) pairs
        document: Upload handed to every strategy
        accept: Acceptance gate applied to each candidate
        recorder: Optional sink receiving every attempt
        postprocess: Optional cleanup applied to a candidate that passed the
            gate; the cleaned text must pass the gate as well

    Returns:
        Extracted for the winning strategy, or FallbackUsed
    """
    attempts: list[ExtractionAttempt] = []

    for strategy in strategies:
        text = ""
        error: Optional[str] = None

        logger.debug(
            f"Trying strategy {strategy.name}",
            extra_data={"file_name": document.file_name, "strategy": strategy.name},
        )

        with Timer(strategy.name) as timer:
            try:
                text = strategy.run(document) or ""
                success = accept(text)
                if success and postprocess is not None:
                    text = postprocess(text)
                    success = accept(text)
            except Exception as exc:
                error = f"{type(exc).__name__}: {exc}"
                success = False

        attempt = ExtractionAttempt(
            strategy=strategy.name,
            text=text,
            success=success,
            elapsed_ms=timer.get_elapsed_ms(),
            error=error,
            file_name=document.file_name,
        )
        attempts.append(attempt)
        if recorder is not None:
            recorder.record(attempt)

        if success:
            logger.info(
                f"Strategy {strategy.name} succeeded",
                extra_data={
                    "file_name": document.file_name,
                    "strategy": strategy.name,
                    "characters_extracted": len(text),
                    "elapsed_ms": attempt.elapsed_ms,
                },
            )
            return Extracted(text=text, strategy=strategy.name, attempts=tuple(attempts))

        if error is not None:
            logger.warning(
                f"Strategy {strategy.name} failed",
                extra_data={
                    "file_name": document.file_name,
                    "strategy": strategy.name,
                    "error": error,
                    "elapsed_ms": attempt.elapsed_ms,
                },
            )
        else:
            logger.warning(
                f"Strategy {strategy.name} returned unusable text",
                extra_data={
                    "file_name": document.file_name,
                    "strategy": strategy.name,
                    "characters_extracted": len(text),
                    "preview": truncate(text),
                    "elapsed_ms": attempt.elapsed_ms,
                },
            )

    logger.warning(
        "All extraction strategies failed, substituting sample resume",
        extra_data={
            "file_name": document.file_name,
            "strategies_tried": len(attempts),
        },
    )
    return FallbackUsed(attempts=tuple(attempts))
