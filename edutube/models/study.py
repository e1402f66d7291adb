from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LANGUAGE = "English"


class SummaryStyle(str, Enum):
    short = "short"
    medium = "medium"
    detailed = "detailed"
    eli5 = "eli5"
    academic = "academic"


# -----------------------
# Outputs
# -----------------------
class Chapter(BaseModel):
    title: str
    start_time_seconds: int = Field(ge=0)


class Flashcard(BaseModel):
    question: str
    answer: str


class QuizQuestion(BaseModel):
    type: Literal["multiple-choice", "true-false", "fill-in-the-blank"]
    question_text: str
    options: list[str] | None = None
    correct_answer: str
    explanation: str | None = None


class Quiz(BaseModel):
    quiz_title: str
    questions: list[QuizQuestion]


class ExamQuestion(BaseModel):
    question_text: str
    model_answer: str


class Exam(BaseModel):
    exam_title: str
    questions: list[ExamQuestion]


class MindMapNode(BaseModel):
    name: str
    children: list[MindMapNode] | None = None
    # Assigned by the caller that renders the map, never by the generator
    node_id: str | None = None


class ConversationTurn(BaseModel):
    question: str
    answer: str


# -----------------------
# Requests
# -----------------------
class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_language: str = DEFAULT_LANGUAGE


class SummaryRequest(_Request):
    text: str
    summary_style: SummaryStyle = SummaryStyle.medium


class ChapterSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    offset_ms: float = Field(ge=0)


class ChaptersRequest(_Request):
    segments: tuple[ChapterSegment, ...] = ()


class SummaryBasedRequest(_Request):
    """Input shared by flashcards, notes, key takeaways and further study."""

    video_summary: str


class MindMapRequest(_Request):
    video_summary: str
    chapters: tuple[Chapter, ...] | None = None


class QuizRequest(_Request):
    text_content: str
    number_of_questions: int = Field(default=5, ge=3, le=10)


class ExamRequest(_Request):
    text_content: str
    total_marks: int = Field(default=50, ge=10, le=100)


class QuestionRequest(_Request):
    video_summary: str
    user_question: str
    conversation_history: tuple[ConversationTurn, ...] | None = None
