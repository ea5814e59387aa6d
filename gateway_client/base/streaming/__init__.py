"""Streaming pipeline: frame decoder -> normalizer -> session controller."""

from .events import COMPLETED, ContentDelta, NormalizedEvent, RawFrame, Terminal, TerminalKind
from .frame_decoder import FrameDecoder, iter_frames
from .normalizer import TEXT_MATCHERS, Normalizer, TextMatcher, classify_payload, extract_text
from .session import IllegalTransition, SessionState, StreamSession
from .stream_controller import StreamCallbacks, StreamController, StreamHandle
from .streaming_metrics import StreamMetrics

__all__ = [
    "RawFrame",
    "ContentDelta",
    "Terminal",
    "TerminalKind",
    "COMPLETED",
    "NormalizedEvent",
    "FrameDecoder",
    "iter_frames",
    "TextMatcher",
    "TEXT_MATCHERS",
    "classify_payload",
    "extract_text",
    "Normalizer",
    "SessionState",
    "IllegalTransition",
    "StreamSession",
    "StreamMetrics",
    "StreamCallbacks",
    "StreamController",
    "StreamHandle",
]
