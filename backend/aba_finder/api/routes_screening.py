from fastapi import APIRouter, HTTPException, status

from aba_finder.schemas.screening import (
    InstrumentOut,
    OptionOut,
    QuestionOut,
    RiskBandOut,
    ScreeningResultResponse,
    ScreeningSubmitRequest,
    ScreeningToolOut,
)
from aba_finder.services.instruments import SCREENING_TOOLS, Instrument, get_instrument
from aba_finder.services.screening import ScreeningError, ScreeningSession
from aba_finder.services.scoring import DISCLAIMER_TEXT, build_report, risk_level_for

router = APIRouter(prefix="/screening", tags=["screening"])


def _load_instrument(instrument_id: str) -> Instrument:
    try:
        return get_instrument(instrument_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Screening instrument not found") from exc


def _to_instrument_out(instrument: Instrument) -> InstrumentOut:
    return InstrumentOut(
        id=instrument.id,
        name=instrument.name,
        description=instrument.description,
        audience=instrument.audience,
        question_count=instrument.question_count,
        questions=[
            QuestionOut(
                index=question.index,
                text=question.text,
                options=[OptionOut(value=option.value, label=option.label) for option in question.options],
            )
            for question in instrument.questions
        ],
        risk_bands=[RiskBandOut(level=band.level, low=band.low, high=band.high) for band in instrument.risk_bands],
    )


@router.get("/tools", response_model=list[ScreeningToolOut])
async def list_screening_tools() -> list[ScreeningToolOut]:
    return [
        ScreeningToolOut(id=tool.id, name=tool.name, audience=tool.audience, url=tool.url, in_app=tool.in_app)
        for tool in SCREENING_TOOLS
    ]


@router.get("/instruments/{instrument_id}", response_model=InstrumentOut)
async def get_screening_instrument(instrument_id: str) -> InstrumentOut:
    return _to_instrument_out(_load_instrument(instrument_id))


@router.post("/instruments/{instrument_id}/submit", response_model=ScreeningResultResponse)
async def submit_screening(instrument_id: str, payload: ScreeningSubmitRequest) -> ScreeningResultResponse:
    # Request Example:
    # POST /screening/instruments/cast/submit
    # {"answers":[{"question":1,"value":1},{"question":2,"value":0}]}
    #
    # Response Example (incomplete, no score):
    # 200
    # {"instrument_id":"cast","complete":false,"answered_count":2,"total_questions":39,"progress_percent":5.128...,"score":null,...}
    instrument = _load_instrument(instrument_id)
    session = ScreeningSession(instrument)
    try:
        for item in payload.answers:
            session.select_answer(item.question, item.value)
    except ScreeningError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    result = session.submit()
    response = ScreeningResultResponse(
        instrument_id=instrument.id,
        complete=result.complete,
        answered_count=result.answered_count,
        total_questions=result.total_questions,
        progress_percent=session.progress_percent,
        disclaimer=DISCLAIMER_TEXT,
    )
    if result.complete and result.score is not None:
        risk_level = risk_level_for(result.score, instrument)
        response.score = result.score
        response.risk_level = risk_level
        response.description = build_report(result.score, risk_level, instrument)
    return response
