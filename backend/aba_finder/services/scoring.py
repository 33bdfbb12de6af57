from typing import Literal, TypedDict

from aba_finder.services.instruments import CAST, Instrument


DISCLAIMER_TEXT = (
    "Screening results identify potential signs of autism and are not a diagnosis. "
    "Please seek a certified healthcare professional for an official diagnosis."
)
RiskLevel = Literal["low", "medium", "high"]


class ScreeningScoreResult(TypedDict):
    total_score: int
    risk_level: RiskLevel
    description: str


def risk_level_for(total_score: int, instrument: Instrument = CAST) -> RiskLevel:
    for band in instrument.risk_bands:
        if band.low <= total_score <= band.high:
            return band.level  # type: ignore[return-value]
    raise ValueError(f"{instrument.name} score {total_score} is outside the scoring range.")


def build_report(total_score: int, risk_level: str, instrument: Instrument = CAST) -> str:
    bands = ", ".join(f"{band.level} {band.low}-{band.high}" for band in instrument.risk_bands)
    return (
        f"{instrument.name} total score is {total_score} of {instrument.max_score} "
        f"({risk_level} risk; bands: {bands}). This is a screening result, not a diagnosis."
    )


def score_instrument(values: list[int], instrument: Instrument = CAST) -> ScreeningScoreResult:
    if len(values) != instrument.question_count:
        raise ValueError(f"{instrument.name} needs exactly {instrument.question_count} answers.")
    for question, value in zip(instrument.questions, values):
        if type(value) is not int or value not in question.allowed_values:
            raise ValueError(f"{instrument.name} item {question.index} has an invalid answer value.")

    total_score = sum(values)
    risk_level = risk_level_for(total_score, instrument)
    return {
        "total_score": total_score,
        "risk_level": risk_level,
        "description": build_report(total_score, risk_level, instrument),
    }


def score_cast(values: list[int]) -> ScreeningScoreResult:
    return score_instrument(values, CAST)
