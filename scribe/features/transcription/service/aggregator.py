import logging
from typing import List, Tuple

from scribe.core.errors import AggregationInvariantViolation
from scribe.features.media.domain.models import Window
from ..domain.models import Transcript, new_task_id

logger = logging.getLogger(__name__)

OFFSET_SEGMENT_END = "segment_end"
OFFSET_NOMINAL = "nominal"

class TranscriptAggregator:
    """
    Merges per-chunk transcripts (chunk-relative times) into one transcript
    in absolute time of the original media.

    Offset modes:
        segment_end: advance by the chunk's last segment end, or the window's
                     nominal duration when the chunk produced no segments.
        nominal:     always advance by the window's nominal duration.
    """

    def __init__(self, offset_mode: str = OFFSET_SEGMENT_END):
        if offset_mode not in (OFFSET_SEGMENT_END, OFFSET_NOMINAL):
            raise ValueError(f"Unknown offset mode: '{offset_mode}'")
        self.offset_mode = offset_mode

    def merge(self, chunks: List[Tuple[Window, Transcript]]) -> Transcript:
        if not chunks:
            raise AggregationInvariantViolation("Nothing to aggregate: no chunk transcripts")

        # 1. Windows must arrive in plan order with no gaps
        for expected, (window, _) in enumerate(chunks):
            if window.index != expected:
                raise AggregationInvariantViolation(
                    f"Chunk at position {expected} belongs to window {window.index}"
                )

        # 2. Shift segments
        offset = 0.0
        segments = []
        texts = []
        for window, transcript in chunks:
            segments.extend(seg.shifted(offset) for seg in transcript.segments)
            if transcript.text:
                texts.append(transcript.text)

            last_end = transcript.last_segment_end
            if self.offset_mode == OFFSET_NOMINAL or last_end is None:
                offset += window.duration
            else:
                offset += last_end

        merged = Transcript(
            text=" ".join(texts),
            segments=segments,
            language=chunks[0][1].language,
            task_id=new_task_id()
        )
        logger.info(f"Aggregated {len(chunks)} chunk(s) into task {merged.task_id}: "
                    f"{len(segments)} segments, ends at {offset:.1f}s")
        return merged
