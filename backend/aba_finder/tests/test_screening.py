import itertools
import os
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["GOOGLE_PLACES_API_KEY"] = "AIzaTEST-secret-value"

from aba_finder.main import app  # noqa: E402
from aba_finder.services.instruments import CAST, Instrument, Option, Question, RiskBand, get_instrument  # noqa: E402
from aba_finder.services.scoring import risk_level_for, score_cast  # noqa: E402
from aba_finder.services.screening import ScreeningError, ScreeningSession, SessionState  # noqa: E402


def _small_instrument() -> Instrument:
    options = (Option(value=0, label="No"), Option(value=1, label="Yes"))
    return Instrument(
        id="tiny",
        name="Tiny",
        description="three questions",
        audience="tests",
        questions=tuple(Question(index=i, text=f"Q{i}", options=options) for i in range(1, 4)),
        risk_bands=(RiskBand(level="low", low=0, high=1), RiskBand(level="high", low=2, high=3)),
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def test_cast_definition_has_39_two_option_questions() -> None:
    assert CAST.question_count == 39
    assert [q.index for q in CAST.questions] == list(range(1, 40))
    assert all(len(q.options) == 2 for q in CAST.questions)
    assert CAST.max_score == 39
    assert get_instrument("CAST") is CAST
    with pytest.raises(KeyError):
        get_instrument("m-chat")


def test_complete_answers_are_scored() -> None:
    session = ScreeningSession(_small_instrument())
    session.select_answer(1, 1)
    session.select_answer(2, 0)
    session.select_answer(3, 1)

    result = session.submit()

    assert result.complete is True
    assert result.score == 2
    assert session.state is SessionState.RESULT_SHOWN


def test_missing_answer_withholds_result() -> None:
    session = ScreeningSession(_small_instrument())
    session.select_answer(1, 1)
    session.select_answer(3, 1)

    result = session.submit()

    assert result.complete is False
    assert result.score is None
    assert session.result is None
    assert session.state is SessionState.IN_PROGRESS
    assert session.answers == {1: 1, 3: 1}


def test_no_partial_answer_set_reaches_result() -> None:
    instrument = _small_instrument()
    for size in range(instrument.question_count):
        for indices in itertools.combinations(range(1, 4), size):
            session = ScreeningSession(instrument)
            for index in indices:
                session.select_answer(index, 1)
            assert session.submit().complete is False
            assert session.state is SessionState.IN_PROGRESS


def test_score_is_independent_of_answer_order() -> None:
    values = {1: 1, 2: 0, 3: 1}
    scores = set()
    for order in itertools.permutations(values):
        session = ScreeningSession(_small_instrument())
        for index in order:
            session.select_answer(index, values[index])
        scores.add(session.submit().score)
    assert scores == {2}


def test_reselection_replaces_answer() -> None:
    session = ScreeningSession(CAST)
    session.select_answer(5, 0)
    session.select_answer(5, 1)

    assert session.answers == {5: 1}
    assert session.answered_count == 1
    assert session.progress_percent == pytest.approx(100 / 39)


def test_invalid_selection_and_closed_session() -> None:
    session = ScreeningSession(_small_instrument())
    with pytest.raises(ScreeningError):
        session.select_answer(0, 1)
    with pytest.raises(ScreeningError):
        session.select_answer(4, 1)
    with pytest.raises(ScreeningError):
        session.select_answer(1, 2)

    for index in range(1, 4):
        session.select_answer(index, 0)
    first = session.submit()
    assert session.submit() is first
    with pytest.raises(ScreeningError):
        session.select_answer(1, 1)


@pytest.mark.parametrize(
    ("total", "expected"),
    [(0, "low"), (14, "low"), (15, "medium"), (31, "medium"), (32, "high"), (39, "high")],
)
def test_cast_risk_bands(total: int, expected: str) -> None:
    assert risk_level_for(total) == expected


def test_score_cast_validates_input() -> None:
    result = score_cast([1] * 20 + [0] * 19)
    assert result["total_score"] == 20
    assert result["risk_level"] == "medium"
    assert "not a diagnosis" in result["description"]
    with pytest.raises(ValueError):
        score_cast([1, 1, 1])
    with pytest.raises(ValueError):
        score_cast([0] * 38 + [2])


@pytest.mark.anyio
async def test_screening_api_flow() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        tools = await client.get("/screening/tools")
        assert tools.status_code == 200
        assert [tool["id"] for tool in tools.json()] == ["m-chat", "cast", "adult"]

        definition = await client.get("/screening/instruments/cast")
        assert definition.status_code == 200
        body = definition.json()
        assert body["question_count"] == 39
        assert [o["label"] for o in body["questions"][0]["options"]] == ["Yes", "No"]

        partial = await client.post(
            "/screening/instruments/cast/submit",
            json={"answers": [{"question": 1, "value": 1}, {"question": 2, "value": 0}]},
        )
        assert partial.status_code == 200
        data = partial.json()
        assert data["complete"] is False
        assert data["answered_count"] == 2
        assert data["score"] is None
        assert data["risk_level"] is None

        answers = [{"question": i, "value": 1} for i in range(1, 40)]
        answers.append({"question": 1, "value": 0})
        complete = await client.post("/screening/instruments/cast/submit", json={"answers": answers})
        assert complete.status_code == 200
        data = complete.json()
        assert data["complete"] is True
        assert data["score"] == 38
        assert data["risk_level"] == "high"
        assert data["progress_percent"] == pytest.approx(100.0)


@pytest.mark.anyio
async def test_screening_api_errors() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        missing = await client.get("/screening/instruments/unknown")
        assert missing.status_code == 404

        bad_value = await client.post(
            "/screening/instruments/cast/submit",
            json={"answers": [{"question": 1, "value": 5}]},
        )
        assert bad_value.status_code == 422

        out_of_range = await client.post(
            "/screening/instruments/cast/submit",
            json={"answers": [{"question": 40, "value": 1}]},
        )
        assert out_of_range.status_code == 422
