import pytest
from scribe.core.errors import AggregationInvariantViolation
from scribe.features.media.domain.models import Window
from scribe.features.transcription.domain.models import Transcript, Segment
from scribe.features.transcription.service.aggregator import TranscriptAggregator

W0 = Window(0, 0.0, 600.0)
W1 = Window(1, 600.0, 1200.0)
W2 = Window(2, 1200.0, 1500.0)

def chunk(text, *spans, language="en"):
    return Transcript(text=text, segments=[Segment(s, e, f"{text}@{s}") for s, e in spans], language=language)

def test_single_chunk_is_unchanged_but_gets_new_task_id():
    part = chunk("hello", (0.0, 2.5), (2.5, 40.0))
    merged = TranscriptAggregator().merge([(Window(0, 0.0, 45.0), part)])

    assert merged.text == "hello"
    assert [(s.start, s.end) for s in merged.segments] == [(0.0, 2.5), (2.5, 40.0)]
    assert merged.task_id != part.task_id
    assert merged.task_id.startswith("audio_")

def test_offsets_follow_last_segment_end():
    """
    Chunk times are shifted by the accumulated end of the previous chunks.
    """
    parts = [
        (W0, chunk("one", (0.0, 300.0), (300.0, 598.0))),
        (W1, chunk("two", (1.0, 600.0))),
        (W2, chunk("three", (0.0, 299.0))),
    ]
    merged = TranscriptAggregator().merge(parts)

    assert [(s.start, s.end) for s in merged.segments] == [
        (0.0, 300.0),
        (300.0, 598.0),
        (599.0, 1198.0),
        (1198.0, 1497.0),
    ]
    assert merged.text == "one two three"
    assert merged.language == "en"

def test_chunk_without_segments_advances_by_nominal_duration():
    parts = [
        (W0, Transcript(text="", segments=[])),
        (W1, chunk("two", (0.0, 10.0))),
    ]
    merged = TranscriptAggregator().merge(parts)

    assert [(s.start, s.end) for s in merged.segments] == [(600.0, 610.0)]
    assert merged.text == "two"

def test_nominal_mode_uses_window_durations():
    parts = [
        (W0, chunk("one", (0.0, 590.0))),
        (W1, chunk("two", (0.0, 590.0))),
        (W2, chunk("three", (5.0, 300.0))),
    ]
    merged = TranscriptAggregator(offset_mode="nominal").merge(parts)

    assert [(s.start, s.end) for s in merged.segments] == [(0.0, 590.0), (600.0, 1190.0), (1205.0, 1500.0)]

def test_language_comes_from_first_chunk():
    parts = [(W0, chunk("hola", (0, 1), language="es")), (W1, chunk("hello", (0, 1), language="en"))]
    assert TranscriptAggregator().merge(parts).language == "es"

def test_out_of_order_chunks_are_rejected():
    parts = [(W1, chunk("two", (0, 1))), (W0, chunk("one", (0, 1)))]
    with pytest.raises(AggregationInvariantViolation):
        TranscriptAggregator().merge(parts)

def test_missing_chunk_is_rejected():
    with pytest.raises(AggregationInvariantViolation):
        TranscriptAggregator().merge([(W0, chunk("one", (0, 1))), (W2, chunk("three", (0, 1)))])
    with pytest.raises(AggregationInvariantViolation):
        TranscriptAggregator().merge([])

def test_unknown_offset_mode():
    with pytest.raises(ValueError):
        TranscriptAggregator(offset_mode="magic")

def test_segment_rejects_non_finite_bounds():
    with pytest.raises(ValueError):
        Segment(float("nan"), float("nan"), "x")
    with pytest.raises(ValueError):
        Segment(0.0, float("inf"), "x")
