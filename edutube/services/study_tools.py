from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

import edutube.services.generation as generation
from edutube.core.config import settings
from edutube.models.study import (
    DEFAULT_LANGUAGE,
    ConversationTurn,
    Exam,
    ExamRequest,
    Flashcard,
    QuestionRequest,
    Quiz,
    QuizRequest,
    SummaryBasedRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ActionResult(Generic[T]):
    result: T | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def regenerate_flashcards(
    video_summary: str,
    target_language: str = DEFAULT_LANGUAGE,
) -> ActionResult[list[Flashcard]]:
    try:
        req = SummaryBasedRequest(video_summary=video_summary, target_language=target_language)
        cards = await generation.bounded(
            generation.generate_flashcards(req), settings.generation_timeout_sec, "flashcards generation"
        )
        return ActionResult(result=cards)
    except Exception as e:
        logger.warning("Error generating flashcards: %s", e)
        return ActionResult(result=None, error="Failed to generate flashcards from the summary.")


async def create_quiz(
    text_content: str,
    target_language: str = DEFAULT_LANGUAGE,
    number_of_questions: int = 5,
) -> ActionResult[Quiz]:
    try:
        req = QuizRequest(
            text_content=text_content,
            target_language=target_language,
            number_of_questions=number_of_questions,
        )
        quiz = await generation.bounded(generation.generate_quiz(req), settings.generation_timeout_sec, "quiz generation")
        return ActionResult(result=quiz)
    except Exception as e:
        logger.warning("Error generating quiz: %s", e)
        return ActionResult(result=None, error="Failed to generate a quiz from the provided content.")


async def create_exam(
    text_content: str,
    target_language: str = DEFAULT_LANGUAGE,
    total_marks: int = 50,
) -> ActionResult[Exam]:
    try:
        req = ExamRequest(text_content=text_content, target_language=target_language, total_marks=total_marks)
        exam = await generation.bounded(generation.generate_exam(req), settings.generation_timeout_sec, "exam generation")
        return ActionResult(result=exam)
    except Exception as e:
        logger.warning("Error generating exam: %s", e)
        return ActionResult(result=None, error="Failed to generate an exam from the provided content.")


async def ask_question(
    video_summary: str,
    user_question: str,
    conversation_history: list[ConversationTurn] | None = None,
    target_language: str = DEFAULT_LANGUAGE,
) -> ActionResult[str]:
    """
    Answer one follow-up question. `conversation_history` holds every earlier
    turn of the thread, oldest first, and is forwarded as is.
    """
    if not (user_question or "").strip():
        return ActionResult(result=None, error="The question is empty. Please ask a specific question.")

    try:
        req = QuestionRequest(
            video_summary=video_summary,
            user_question=user_question,
            conversation_history=tuple(conversation_history) if conversation_history else None,
            target_language=target_language,
        )
        answer = await generation.bounded(generation.answer_question(req), settings.generation_timeout_sec, "answer")
        return ActionResult(result=answer)
    except Exception as e:
        logger.warning("Error answering question: %s", e)
        return ActionResult(result=None, error="Failed to get an answer for your question.")
