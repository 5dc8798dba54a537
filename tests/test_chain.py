from resume_extractor.chain import Strategy, first_valid
from resume_extractor.diagnostics import AttemptLog
from resume_extractor.models import Extracted, FallbackUsed, UploadedDocument
from resume_extractor.sample import FALLBACK_TAG, SAMPLE_RESUME

DOCUMENT = UploadedDocument(content=b"irrelevant", file_name="resume.txt")


class CountingStrategy:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    def __call__(self, document):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def accept_good(text):
    return text.startswith("good")


def test_first_accepted_candidate_wins_and_short_circuits():
    first = CountingStrategy("junk")
    second = CountingStrategy("good text")
    third = CountingStrategy("good too")

    result = first_valid(
        [Strategy("one", first), Strategy("two", second), Strategy("three", third)],
        DOCUMENT,
        accept_good,
    )

    assert isinstance(result, Extracted)
    assert result.text == "good text"
    assert result.provenance_tag == "two"
    assert not result.is_fallback
    assert (first.calls, second.calls, third.calls) == (1, 1, 0)


def test_exceptions_are_recorded_and_skipped():
    broken = CountingStrategy(error=RuntimeError("boom"))
    working = CountingStrategy("good")

    result = first_valid(
        [Strategy("broken", broken), Strategy("working", working)], DOCUMENT, accept_good
    )

    assert result.provenance_tag == "working"
    failed, succeeded = result.attempts
    assert failed.strategy == "broken"
    assert not failed.success
    assert failed.error == "RuntimeError: boom"
    assert succeeded.success
    assert succeeded.error is None


def test_exhausted_chain_returns_sample():
    result = first_valid(
        [Strategy("none", CountingStrategy(None)), Strategy("junk", CountingStrategy("junk"))],
        DOCUMENT,
        accept_good,
    )

    assert isinstance(result, FallbackUsed)
    assert result.is_fallback
    assert result.text == SAMPLE_RESUME
    assert result.provenance_tag == FALLBACK_TAG
    assert [a.strategy for a in result.attempts] == ["none", "junk"]
    assert result.attempts[0].text == ""


def test_empty_chain_returns_sample():
    result = first_valid([], DOCUMENT, accept_good)
    assert result.provenance_tag == FALLBACK_TAG
    assert result.attempts == ()


def test_postprocess_applies_to_accepted_candidate():
    result = first_valid(
        [Strategy("raw", CountingStrategy("good  text  "))],
        DOCUMENT,
        accept_good,
        postprocess=lambda text: " ".join(text.split()),
    )
    assert result.text == "good text"


def test_gate_judges_raw_candidate_before_cleanup():
    leaky = CountingStrategy("\x00\x01good")

    result = first_valid(
        [Strategy("leaky", leaky)],
        DOCUMENT,
        accept_good,
        postprocess=lambda text: text.lstrip("\x00\x01"),
    )

    assert result.is_fallback
    assert result.attempts[0].text == "\x00\x01good"


def test_cleaned_candidate_must_still_pass_gate():
    result = first_valid(
        [Strategy("raw", CountingStrategy("good")), Strategy("next", CountingStrategy("good too"))],
        DOCUMENT,
        accept_good,
        postprocess=lambda text: text.upper(),
    )
    assert result.is_fallback
    assert [a.success for a in result.attempts] == [False, False]


def test_recorder_receives_every_attempt():
    log = AttemptLog()
    first_valid(
        [
            Strategy("broken", CountingStrategy(error=ValueError("bad"))),
            Strategy("junk", CountingStrategy("junk")),
            Strategy("working", CountingStrategy("good")),
        ],
        DOCUMENT,
        accept_good,
        recorder=log,
    )

    assert [(a.strategy, a.success) for a in log.attempts()] == [
        ("broken", False),
        ("junk", False),
        ("working", True),
    ]
    assert all(a.file_name == "resume.txt" for a in log.attempts())
