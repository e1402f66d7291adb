from __future__ import annotations

JSON_RULES = """Output MUST be valid JSON only. No markdown, no commentary.
JSON MUST match the schema shown in the user message exactly."""

# ----------------------------
# Summary
# ----------------------------
SUMMARY_SYSTEM = f"""You are an expert summarizer, skilled at condensing YouTube video transcripts into clear and effective summaries for students.
Be faithful to meaning; do not invent facts.
Ignore stage directions like [Music], [Laughter], filler, repeated caption artifacts.
{JSON_RULES}
"""

SUMMARY_STYLE_INSTRUCTIONS = {
    "short": "Provide a very brief, concise summary (1-2 paragraphs).",
    "medium": "Provide a medium-length summary (3-4 paragraphs), focusing on the key points and main topics.",
    "detailed": "Provide a detailed and comprehensive summary, covering all main topics and key arguments.",
    "eli5": (
        "Explain the main concepts from the transcript as if you were explaining them to a 5-year-old. "
        "Use very simple language and analogies if possible."
    ),
    "academic": "Provide a formal, academic-style summary. Use precise terminology and maintain an objective tone.",
}

SUMMARY_USER_TEMPLATE = """Output language: {target_language}

Summary style/length:
{style_instruction}

Video transcript:
{transcript}

Return JSON with this exact shape:
{{ "summary": "..." }}
"""

# ----------------------------
# Chapters
# ----------------------------
CHAPTERS_SYSTEM = f"""You are an expert at analyzing video transcripts to identify distinct chapters or thematic sections.
{JSON_RULES}
"""

CHAPTERS_USER_TEMPLATE = """Transcript segments (text and start offset in milliseconds):
{segments}

Tasks:
1. Identify logical breaks in the content; each chapter covers a distinct topic or stage of the video.
2. Give each chapter a concise, descriptive title in {target_language}.
3. start_time_seconds is the offset of the FIRST segment of that chapter, divided by 1000 and rounded to a whole number.
4. Aim for 5-15 chapters depending on length and content diversity. Titles must be distinct.

Return JSON with this exact shape:
{{ "chapters": [{{ "title": "...", "start_time_seconds": 0 }}] }}
"""

# ----------------------------
# Summary-based features
# ----------------------------
FLASHCARDS_SYSTEM = f"""You are an expert educator. You write flashcards that test understanding (why/how/what), not recall of wording.
{JSON_RULES}
"""

FLASHCARDS_USER_TEMPLATE = """Generate a *fresh and distinct* set of flashcards from the video summary below.
Aim for variety: if sets have been generated before, do not repeat them.
Both questions and answers must be in {target_language}.

Video summary (already in {target_language} or to be treated as such):
{video_summary}

Return JSON with this exact shape:
{{ "flashcards": [{{ "question": "...", "answer": "..." }}] }}
"""

NOTES_SYSTEM = f"""You are an expert academic assistant who turns summaries into detailed study notes.
{JSON_RULES}
"""

NOTES_USER_TEMPLATE = """Transform the video summary below into detailed, comprehensive, well-explained notes for in-depth study, written in {target_language}.

Focus on:
- elaborating key concepts and definitions with clear explanations
- thorough coverage of the main ideas and takeaways
- expanding on core arguments or steps, with context where the summary allows
- a logical structure (paragraphs, bullet points, numbered lists as appropriate, markdown allowed inside the string)

Video summary:
{video_summary}

Return JSON with this exact shape:
{{ "notes": "..." }}
"""

KEY_TAKEAWAYS_SYSTEM = f"""You are an expert at identifying the most crucial points in a text.
{JSON_RULES}
"""

KEY_TAKEAWAYS_USER_TEMPLATE = """Extract 3-5 concise key takeaways from the video summary below: the absolute most important points or critical messages.
Write them in {target_language}.

Video summary:
{video_summary}

Return JSON with this exact shape:
{{ "key_takeaways": ["...", "..."] }}
"""

FURTHER_STUDY_SYSTEM = f"""You are an expert educator skilled at stimulating critical thinking and further learning.
{JSON_RULES}
"""

FURTHER_STUDY_USER_TEMPLATE = """Based on the video summary below, write 3-4 thought-provoking questions or research prompts that push the learner beyond the video itself.
Write them in {target_language}. Prefer prompts that spark curiosity, critical analysis or further research.

Video summary:
{video_summary}

Return JSON with this exact shape:
{{ "further_study_prompts": ["...", "..."] }}
"""

# ----------------------------
# Mind map
# ----------------------------
MIND_MAP_SYSTEM = f"""You are an expert at structuring knowledge as hierarchical mind maps.
{JSON_RULES}
"""

MIND_MAP_USER_TEMPLATE = """Build a mind map of the video from the summary{chapters_hint}.
Node names must be in {target_language}, concise yet descriptive.
The root node states the main topic of the video. {branch_instruction}
Aim for 3-5 levels of depth where appropriate.
If the content is too thin to build a sensible map, return null for "mind_map".

Video summary:
{video_summary}
{chapters_block}
Return JSON with this exact shape (children is optional on leaves):
{{ "mind_map": {{ "name": "...", "children": [{{ "name": "...", "children": [] }}] }} }}
"""

# ----------------------------
# Quiz / exam
# ----------------------------
QUIZ_SYSTEM = f"""You are an expert quiz creator for students.
{JSON_RULES}
"""

QUIZ_USER_TEMPLATE = """Create a quiz in {target_language} from the text below, mixing question types: multiple-choice, true-false and fill-in-the-blank.
Test understanding of the key concepts, facts and ideas. Mix difficulties; questions must be distinct.

Generate exactly {number_of_questions} questions. For each question:
- "type": one of "multiple-choice", "true-false", "fill-in-the-blank"
- "question_text": clear question; fill-in-the-blank uses "____" for the blank
- "options": 3-4 options for multiple-choice only
- "correct_answer": for multiple-choice the exact text of one option; for true-false exactly "True" or "False"; for fill-in-the-blank the missing word/phrase
- "explanation": optional, brief

Text content:
{text_content}

Return JSON with this exact shape:
{{ "quiz_title": "...", "questions": [{{ "type": "multiple-choice", "question_text": "...", "options": ["..."], "correct_answer": "...", "explanation": "..." }}] }}
"""

EXAM_SYSTEM = f"""You are an expert educator tasked with creating exams that encourage critical thinking.
{JSON_RULES}
"""

EXAM_USER_TEMPLATE = """Create a challenging, comprehensive exam entirely in {target_language} from the text below.
The exam is notionally worth {total_marks} marks. Write 5-7 diverse, open-ended questions covering the key concepts, arguments and details.
Questions must require descriptive answers. Give each a detailed, accurate model answer.

Text content:
{text_content}

Return JSON with this exact shape:
{{ "exam_title": "...", "questions": [{{ "question_text": "...", "model_answer": "..." }}] }}
"""

# ----------------------------
# Q&A
# ----------------------------
QA_SYSTEM = f"""You are an expert educational assistant. Answer ONLY from the provided video summary and conversation history.
Do not use external knowledge. If the information is not available, say so clearly.
Answers are detailed, easy to understand and well structured; treat follow-ups as follow-ups.
{JSON_RULES}
"""

QA_USER_TEMPLATE = """Answer in {target_language}.

Video summary:
{video_summary}
{history_block}
Current question:
{user_question}

Return JSON with this exact shape:
{{ "answer": "..." }}
"""
