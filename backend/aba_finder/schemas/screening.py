from pydantic import BaseModel, ConfigDict, Field, conint

from aba_finder.services.scoring import DISCLAIMER_TEXT


QuestionIndex = conint(ge=1)


class OptionOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    value: int
    label: str


class QuestionOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    index: int
    text: str
    options: list[OptionOut]


class RiskBandOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    level: str
    low: int
    high: int


class InstrumentOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str
    name: str
    description: str
    audience: str
    question_count: int
    questions: list[QuestionOut]
    risk_bands: list[RiskBandOut]


class ScreeningToolOut(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str
    name: str
    audience: str
    url: str
    in_app: bool


class AnswerItem(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    question: QuestionIndex
    value: int


class ScreeningSubmitRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    answers: list[AnswerItem] = Field(default_factory=list)


class ScreeningResultResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    instrument_id: str
    complete: bool
    answered_count: int
    total_questions: int
    progress_percent: float
    score: int | None = None
    risk_level: str | None = None
    description: str | None = None
    disclaimer: str = Field(default=DISCLAIMER_TEXT)
