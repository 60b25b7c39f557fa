"""Single-choice-set builder for ``[QUIZ]`` blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from h5pbook.compiler.builders.base import make_object
from h5pbook.compiler.models import (
    ContentBlock,
    ContentObject,
    ContentType,
    LibraryTable,
    Unavailable,
    new_sub_content_id,
)

logger = logging.getLogger(__name__)

QUIZ_BEHAVIOUR = {
    "autoContinue": True,
    "enableRetry": True,
    "enableSolutionsButton": True,
    "passPercentage": 100,
    "soundEffectsEnabled": True,
    "timeoutCorrect": 2000,
    "timeoutWrong": 3000,
}


@dataclass(slots=True)
class Choice:
    """One question; ``answers[0]`` is the correct answer for the runtime."""

    question: str
    answers: list[str] = field(default_factory=list)
    correct_marks: int = 0

    def to_dict(self) -> dict:
        return {"question": self.question, "answers": list(self.answers), "subContentId": new_sub_content_id()}


def parse_choices(lines: list[str]) -> list[Choice]:
    """Parse ``?`` questions with ``*`` correct and ``-`` wrong answers.

    Correct answers are prepended, wrong answers appended. Lines before the
    first question and unmarked lines are ignored.
    """

    choices: list[Choice] = []
    current: Choice | None = None

    for line in lines:
        stripped = line.strip()
        if stripped.startswith("?"):
            current = Choice(question=stripped[1:].strip())
            choices.append(current)
        elif current is None:
            continue
        elif stripped.startswith("*"):
            current.answers.insert(0, stripped[1:].strip())
            current.correct_marks += 1
        elif stripped.startswith("-"):
            current.answers.append(stripped[1:].strip())

    return choices


class QuizBuilder:
    content_type = ContentType.SINGLE_CHOICE
    label = "Quiz"

    async def build(self, block: ContentBlock, libraries: LibraryTable) -> ContentObject | Unavailable:
        library = libraries.identifier(self.content_type)
        if library is None:
            return Unavailable(self.content_type, self.label)

        choices = parse_choices(block.lines)
        for choice in choices:
            if choice.correct_marks > 1:
                logger.warning(
                    "Question %r marks %d correct answers; only %r is graded as correct",
                    choice.question,
                    choice.correct_marks,
                    choice.answers[0],
                )

        params = {
            "choices": [choice.to_dict() for choice in choices],
            "behaviour": dict(QUIZ_BEHAVIOUR),
        }
        return make_object(library, params, title="Quiz", content_type="Single Choice Set")

    def fallback_markdown(self, block: ContentBlock) -> str:
        return "\n".join(block.lines)
