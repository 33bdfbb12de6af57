import enum
from dataclasses import dataclass

from aba_finder.services.instruments import Instrument


class SessionState(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    RESULT_SHOWN = "result_shown"


class ScreeningError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    complete: bool
    answered_count: int
    total_questions: int
    score: int | None = None


class ScreeningSession:
    """One person's pass through an instrument.

    Answers are keyed by question index, so re-selecting replaces the earlier
    answer. Submitting an incomplete set is a no-op that returns an incomplete
    result; only a complete set is scored and moves the session to
    ``RESULT_SHOWN``, which is final.
    """

    def __init__(self, instrument: Instrument) -> None:
        self.instrument = instrument
        self.state = SessionState.IN_PROGRESS
        self._answers: dict[int, int] = {}
        self._result: SubmissionResult | None = None

    @property
    def answers(self) -> dict[int, int]:
        return dict(self._answers)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def progress_percent(self) -> float:
        return self.answered_count / self.instrument.question_count * 100

    @property
    def result(self) -> SubmissionResult | None:
        return self._result

    def select_answer(self, question_index: int, value: int) -> None:
        if self.state is SessionState.RESULT_SHOWN:
            raise ScreeningError("This screening has already been submitted.")
        try:
            question = self.instrument.question(question_index)
        except IndexError as exc:
            raise ScreeningError(str(exc)) from exc
        if type(value) is not int or value not in question.allowed_values:
            raise ScreeningError(f"Question {question_index} does not accept the value {value!r}.")
        self._answers[question_index] = value

    def submit(self) -> SubmissionResult:
        if self._result is not None:
            return self._result

        total = self.instrument.question_count
        if self.answered_count != total:
            return SubmissionResult(complete=False, answered_count=self.answered_count, total_questions=total)

        self._result = SubmissionResult(
            complete=True,
            answered_count=total,
            total_questions=total,
            score=sum(self._answers.values()),
        )
        self.state = SessionState.RESULT_SHOWN
        return self._result
