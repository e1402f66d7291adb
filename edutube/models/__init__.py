from edutube.models.result import ProcessedVideoResult
from edutube.models.study import (
    Chapter,
    ConversationTurn,
    Exam,
    Flashcard,
    MindMapNode,
    Quiz,
    SummaryStyle,
)
from edutube.models.transcript import TranscriptSegment

__all__ = [
    "Chapter",
    "ConversationTurn",
    "Exam",
    "Flashcard",
    "MindMapNode",
    "ProcessedVideoResult",
    "Quiz",
    "SummaryStyle",
    "TranscriptSegment",
]
