import logging

from resume_extractor.logger import Timer, get_extraction_id, get_logger, set_extraction_id


def test_extra_data_is_appended(caplog):
    logger = get_logger("resume_extractor.tests")
    set_extraction_id("abc123")

    with caplog.at_level(logging.INFO, logger="resume_extractor.tests"):
        logger.info("Strategy finished", extra_data={"strategy": "txt-utf8", "characters": 42})

    assert caplog.messages == [
        "Strategy finished [strategy=txt-utf8, characters=42, extraction_id=abc123]"
    ]


def test_disabled_level_is_skipped(caplog):
    logger = get_logger("resume_extractor.tests.quiet")

    with caplog.at_level(logging.WARNING, logger="resume_extractor.tests.quiet"):
        logger.debug("hidden", extra_data={"a": 1})

    assert caplog.messages == []


def test_generated_extraction_id():
    extraction_id = set_extraction_id()
    assert len(extraction_id) == 12
    assert get_extraction_id() == extraction_id


def test_timer():
    with Timer("work") as timer:
        pass
    assert timer.elapsed_ms is not None
    assert timer.get_elapsed_ms() >= 0.0
    assert Timer("unused").get_elapsed_ms() == 0.0
