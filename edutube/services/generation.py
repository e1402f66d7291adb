"""
Per-feature generation calls.

Each function takes one typed request, runs a single JSON-mode LLM call and
validates the payload before returning it. Any failure (transport, timeout,
unparseable or schema-invalid output, semantically empty output) surfaces as
GenerationError, so callers have exactly one thing to catch.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

import openai
from pydantic import BaseModel, ValidationError

from edutube.core.config import settings
from edutube.models.study import (
    Chapter,
    ChaptersRequest,
    Exam,
    ExamRequest,
    Flashcard,
    MindMapNode,
    MindMapRequest,
    QuestionRequest,
    Quiz,
    QuizQuestion,
    QuizRequest,
    SummaryBasedRequest,
    SummaryRequest,
)
from edutube.services.llm import openai_client
from edutube.services.llm import prompts

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class GenerationError(Exception):
    pass


class UpstreamTimeout(GenerationError):
    pass


# ----------------------------
# Output envelopes (what the model is asked to return)
# ----------------------------
class _SummaryOut(BaseModel):
    summary: str


class _ChaptersOut(BaseModel):
    chapters: list[Chapter]


class _FlashcardsOut(BaseModel):
    flashcards: list[Flashcard]


class _NotesOut(BaseModel):
    notes: str


class _KeyTakeawaysOut(BaseModel):
    key_takeaways: list[str]


class _FurtherStudyOut(BaseModel):
    further_study_prompts: list[str]


class _MindMapOut(BaseModel):
    mind_map: MindMapNode | None = None


class _QuizOut(BaseModel):
    quiz_title: str
    # validated one by one so a single malformed question does not sink the quiz
    questions: list[Any]


class _AnswerOut(BaseModel):
    answer: str


# ----------------------------
# Helpers
# ----------------------------
async def bounded(awaitable: Awaitable[T], timeout_sec: float | None, what: str) -> T:
    """Await with an upper bound; a timeout becomes UpstreamTimeout."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_sec)
    except asyncio.TimeoutError as e:
        raise UpstreamTimeout(f"{what} timed out after {timeout_sec:g}s") from e


async def _generate(feature: str, system: str, user: str, *, temperature: float = 0.3) -> dict[str, Any]:
    try:
        return await openai_client.complete_json(system, user, temperature=temperature)
    except openai.APITimeoutError as e:
        raise UpstreamTimeout(f"{feature}: LLM request timed out") from e
    except Exception as e:
        raise GenerationError(f"{feature}: {e}") from e


def _decode(feature: str, envelope: type[M], payload: dict[str, Any]) -> M:
    try:
        return envelope.model_validate(payload)
    except ValidationError as e:
        raise GenerationError(f"{feature}: output failed validation ({e.error_count()} errors)") from e


def _clean_items(items: list[str]) -> list[str]:
    return [s.strip() for s in items if s and s.strip()]


def _require_text(feature: str, text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise GenerationError(f"{feature}: empty output")
    return text


# ----------------------------
# Features
# ----------------------------
async def generate_summary(req: SummaryRequest) -> str:
    user = prompts.SUMMARY_USER_TEMPLATE.format(
        target_language=req.target_language,
        style_instruction=prompts.SUMMARY_STYLE_INSTRUCTIONS[req.summary_style.value],
        transcript=req.text,
    )
    payload = await _generate("summary", prompts.SUMMARY_SYSTEM, user)
    return _require_text("summary", _decode("summary", _SummaryOut, payload).summary)


def _format_segments(req: ChaptersRequest) -> str:
    capped = req.segments[: settings.chapter_max_segments]
    return "\n".join(f'- Text: "{seg.text}" (Starts at: {int(seg.offset_ms)}ms)' for seg in capped)


async def generate_chapters(req: ChaptersRequest) -> list[Chapter]:
    if not req.segments:
        return []

    user = prompts.CHAPTERS_USER_TEMPLATE.format(
        segments=_format_segments(req),
        target_language=req.target_language,
    )
    payload = await _generate("chapters", prompts.CHAPTERS_SYSTEM, user)
    chapters = _decode("chapters", _ChaptersOut, payload).chapters
    # Model output order is not trusted
    return sorted(chapters, key=lambda ch: ch.start_time_seconds)


async def generate_flashcards(req: SummaryBasedRequest) -> list[Flashcard]:
    user = prompts.FLASHCARDS_USER_TEMPLATE.format(
        target_language=req.target_language,
        video_summary=req.video_summary,
    )
    # High temperature: repeated calls should give a different set
    payload = await _generate("flashcards", prompts.FLASHCARDS_SYSTEM, user, temperature=0.9)
    cards = [
        fc
        for fc in _decode("flashcards", _FlashcardsOut, payload).flashcards
        if fc.question.strip() and fc.answer.strip()
    ]
    if not cards:
        raise GenerationError("flashcards: no usable flashcards")
    return cards


async def generate_notes(req: SummaryBasedRequest) -> str:
    user = prompts.NOTES_USER_TEMPLATE.format(
        target_language=req.target_language,
        video_summary=req.video_summary,
    )
    payload = await _generate("notes", prompts.NOTES_SYSTEM, user)
    return _require_text("notes", _decode("notes", _NotesOut, payload).notes)


async def generate_key_takeaways(req: SummaryBasedRequest) -> list[str]:
    user = prompts.KEY_TAKEAWAYS_USER_TEMPLATE.format(
        target_language=req.target_language,
        video_summary=req.video_summary,
    )
    payload = await _generate("key_takeaways", prompts.KEY_TAKEAWAYS_SYSTEM, user)
    items = _clean_items(_decode("key_takeaways", _KeyTakeawaysOut, payload).key_takeaways)
    if not items:
        raise GenerationError("key_takeaways: empty list")
    return items


async def generate_further_study(req: SummaryBasedRequest) -> list[str]:
    user = prompts.FURTHER_STUDY_USER_TEMPLATE.format(
        target_language=req.target_language,
        video_summary=req.video_summary,
    )
    payload = await _generate("further_study", prompts.FURTHER_STUDY_SYSTEM, user)
    items = _clean_items(_decode("further_study", _FurtherStudyOut, payload).further_study_prompts)
    if not items:
        raise GenerationError("further_study: empty list")
    return items


async def generate_mind_map(req: MindMapRequest) -> MindMapNode | None:
    """
    Returns None when the model decides no sensible map can be built.
    That is an answer, not a failure.
    """
    if req.chapters:
        chapters_hint = " and chapter list"
        branch_instruction = "Use the chapters to structure the main branches."
        lines = "\n".join(f"- {ch.title} (starts at {ch.start_time_seconds}s)" for ch in req.chapters)
        chapters_block = f"\nVideo chapters:\n{lines}\n"
    else:
        chapters_hint = ""
        branch_instruction = "Derive the main branches from the summary."
        chapters_block = ""

    user = prompts.MIND_MAP_USER_TEMPLATE.format(
        chapters_hint=chapters_hint,
        target_language=req.target_language,
        branch_instruction=branch_instruction,
        video_summary=req.video_summary,
        chapters_block=chapters_block,
    )
    payload = await _generate("mind_map", prompts.MIND_MAP_SYSTEM, user)
    root = _decode("mind_map", _MindMapOut, payload).mind_map
    if root is not None and not root.name.strip():
        raise GenerationError("mind_map: root node has no name")
    return root


def _valid_quiz_question(q: QuizQuestion) -> bool:
    if q.type == "multiple-choice":
        if not q.options or len(q.options) < 2 or q.correct_answer not in q.options:
            logger.warning("Dropping invalid multiple-choice question: %r", q.question_text)
            return False
    if q.type == "true-false" and q.correct_answer not in ("True", "False"):
        logger.warning("Dropping invalid true-false question: %r", q.question_text)
        return False
    return True


async def generate_quiz(req: QuizRequest) -> Quiz:
    user = prompts.QUIZ_USER_TEMPLATE.format(
        target_language=req.target_language,
        number_of_questions=req.number_of_questions,
        text_content=req.text_content,
    )
    payload = await _generate("quiz", prompts.QUIZ_SYSTEM, user)
    raw = _decode("quiz", _QuizOut, payload)

    if len(raw.questions) != req.number_of_questions:
        logger.info(
            "Quiz: model returned %d questions, %d requested; using what was generated",
            len(raw.questions),
            req.number_of_questions,
        )

    questions: list[QuizQuestion] = []
    for item in raw.questions:
        try:
            q = QuizQuestion.model_validate(item)
        except ValidationError:
            logger.warning("Dropping malformed quiz question: %r", item)
            continue
        if _valid_quiz_question(q):
            questions.append(q)

    if not questions:
        raise GenerationError("quiz: no valid questions after validation")
    return Quiz(quiz_title=raw.quiz_title, questions=questions)


async def generate_exam(req: ExamRequest) -> Exam:
    user = prompts.EXAM_USER_TEMPLATE.format(
        target_language=req.target_language,
        total_marks=req.total_marks,
        text_content=req.text_content,
    )
    payload = await _generate("exam", prompts.EXAM_SYSTEM, user)
    exam = _decode("exam", Exam, payload)

    questions = [q for q in exam.questions if q.question_text.strip() and q.model_answer.strip()]
    if not questions:
        raise GenerationError("exam: generated questions were empty or invalid")
    return Exam(exam_title=exam.exam_title, questions=questions)


def _format_history(req: QuestionRequest) -> str:
    if not req.conversation_history:
        return ""
    turns = "\n".join(f"User: {t.question}\nAI: {t.answer}\n---" for t in req.conversation_history)
    return f"\nConversation history:\n{turns}\n"


async def answer_question(req: QuestionRequest) -> str:
    user = prompts.QA_USER_TEMPLATE.format(
        target_language=req.target_language,
        video_summary=req.video_summary,
        history_block=_format_history(req),
        user_question=req.user_question,
    )
    payload = await _generate("answer", prompts.QA_SYSTEM, user)
    return _require_text("answer", _decode("answer", _AnswerOut, payload).answer)
