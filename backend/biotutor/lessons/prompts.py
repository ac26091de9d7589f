"""
Prompt framing for the tutor chat and lesson insights.
"""

from typing import Dict, Iterable, List, Optional

from .catalog import Lesson


TUTOR_SYSTEM_PROMPT = (
    "You are a friendly and knowledgeable biology teacher. The student is studying the "
    "{title}. Answer their questions clearly and accurately, keep explanations suited to a "
    "curious beginner, and use Markdown for structure."
)

INSIGHT_PROMPT = (
    "Give one interesting, lesser-known insight about the {title} that goes beyond this "
    "definition: \"{definition}\" Keep it to a short paragraph in Markdown."
)


def system_message(lesson: Lesson) -> Dict[str, str]:
    return {"role": "system", "content": TUTOR_SYSTEM_PROMPT.format(title=lesson.title)}


def tutor_messages(lesson: Lesson, transcript: Iterable) -> List[Dict[str, str]]:
    """Prefix a chat transcript with the lesson's system framing."""
    messages = [system_message(lesson)]
    for message in transcript:
        if isinstance(message, dict):
            messages.append({"role": message["role"], "content": message["content"]})
        else:
            messages.append({"role": message.role, "content": message.content})
    return messages


def insight_messages(lesson: Lesson, question: Optional[str] = None) -> List[Dict[str, str]]:
    prompt = INSIGHT_PROMPT.format(title=lesson.title, definition=lesson.definition)
    if question:
        prompt = f"{prompt}\nFocus on: {question}"
    return [system_message(lesson), {"role": "user", "content": prompt}]
