from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from edutube.models.study import DEFAULT_LANGUAGE, ConversationTurn
from edutube.services import study_tools
from edutube.services.study_tools import ActionResult

router = APIRouter(prefix="/study-tools", tags=["study_tools"])


class StudyToolResponse(BaseModel):
    ok: bool
    result: Any = None
    error: str | None = None


def _respond(action: ActionResult) -> StudyToolResponse:
    return StudyToolResponse(ok=action.ok, result=action.result, error=action.error)


# -----------------------
# Flashcards
# -----------------------
class FlashcardsRequest(BaseModel):
    video_summary: str
    target_language: str = DEFAULT_LANGUAGE


@router.post("/flashcards", response_model=StudyToolResponse)
async def flashcards(req: FlashcardsRequest) -> StudyToolResponse:
    return _respond(await study_tools.regenerate_flashcards(req.video_summary, req.target_language))


# -----------------------
# Quiz / exam
# -----------------------
class QuizCreateRequest(BaseModel):
    text_content: str
    target_language: str = DEFAULT_LANGUAGE
    number_of_questions: int = Field(default=5, ge=3, le=10)


@router.post("/quiz", response_model=StudyToolResponse)
async def quiz(req: QuizCreateRequest) -> StudyToolResponse:
    return _respond(await study_tools.create_quiz(req.text_content, req.target_language, req.number_of_questions))


class ExamCreateRequest(BaseModel):
    text_content: str
    target_language: str = DEFAULT_LANGUAGE
    total_marks: int = Field(default=50, ge=10, le=100)


@router.post("/exam", response_model=StudyToolResponse)
async def exam(req: ExamCreateRequest) -> StudyToolResponse:
    return _respond(await study_tools.create_exam(req.text_content, req.target_language, req.total_marks))


# -----------------------
# Q&A
# -----------------------
class AskRequest(BaseModel):
    video_summary: str
    user_question: str
    conversation_history: list[ConversationTurn] | None = None
    target_language: str = DEFAULT_LANGUAGE


@router.post("/ask", response_model=StudyToolResponse)
async def ask(req: AskRequest) -> StudyToolResponse:
    return _respond(
        await study_tools.ask_question(
            req.video_summary,
            req.user_question,
            req.conversation_history,
            req.target_language,
        )
    )
