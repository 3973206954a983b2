from datetime import datetime, timezone
import logging

import pytest
from sqlalchemy.exc import OperationalError

from app.domain import Recommendation
from app.models.chat import ChatLocation, ChatRequest
from app.services.chat_service import FALLBACK_ANSWER, ChatService
from app.services.date_resolver import DateResolver
from app.services.vector_store import RetrievedDocument

# Friday 2024-06-14, noon Pacific
NOW = datetime(2024, 6, 14, 19, 0, tzinfo=timezone.utc)

METADATA = {
    "location": "Alameda",
    "weather_data": [
        {
            "timestamp": "2024-06-14T12:00:00",
            "wind_speed": 8.0,
            "wind_direction": 270.0,
            "cloud_cover": 50.0,
            "visibility": 10.0,
        },
        {
            "timestamp": "2024-06-15T10:00:00",
            "wind_speed": 25.0,
            "wind_direction": 90.0,
            "cloud_cover": 85.0,
            "visibility": 2.0,
            "temperature": 58.0,
        },
        {
            "timestamp": "2024-06-15T11:00:00",
            "wind_speed": 12.0,
            "wind_direction": 95.0,
            "cloud_cover": 40.0,
            "visibility": 10.0,
        },
    ],
}


class FakeEmbedder:
    def __init__(self, error=None):
        self.error = error
        self.queries = []

    async def embed_query(self, text):
        if self.error:
            raise self.error
        self.queries.append(text)
        return [1.0, 0.0]


class FakeCompletion:
    def __init__(self, answer="  Looks flyable.  ", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def complete(self, user_message, *, system_message=None):
        self.calls.append((user_message, system_message))
        if self.error:
            raise self.error
        return self.answer


class FakeStore:
    def __init__(self, documents=None, error=None):
        self.documents = documents or []
        self.error = error
        self.searches = []

    def similarity_search(self, query_embedding, k=3):
        self.searches.append((list(query_embedding), k))
        if self.error:
            raise self.error
        return self.documents[:k]


def _store():
    return FakeStore(
        [RetrievedDocument(id=1, content="Alameda forecast text", metadata=METADATA, score=0.9)]
    )


def _service(embedder=None, completion=None, top_k=3):
    return ChatService(
        embedder=embedder or FakeEmbedder(),
        completion_client=completion or FakeCompletion(),
        date_resolver=DateResolver("America/Los_Angeles"),
        top_k=top_k,
    )


@pytest.mark.anyio
async def test_answer_scores_first_sample_of_target_day():
    completion = FakeCompletion()
    store = _store()
    service = _service(completion=completion, top_k=2)

    response = await service.answer(
        ChatRequest(message="Can I fly tomorrow?"), store, now=NOW
    )

    assert response.response == "Looks flyable."
    weather = response.weather_data
    assert weather.date == "2024-06-15"
    assert weather.day_of_week == "Saturday"
    assert weather.wind_speed == 25.0
    assert weather.cardinal_direction == "E"
    assert weather.flight_conditions.recommendation == Recommendation.LOW
    assert weather.flight_conditions.confidence == 0
    assert [hour.wind_speed for hour in weather.hourly_data] == [25.0, 12.0]
    assert weather.hourly_data[0].temperature == 58.0
    assert store.searches == [([1.0, 0.0], 2)]

    user_message, system_message = completion.calls[0]
    assert user_message == "Can I fly tomorrow?"
    assert "Friday, June 14, 2024" in system_message
    assert "Forecast date in question: Saturday, 2024-06-15." in system_message
    assert "## Current Weather Conditions" in system_message
    assert "## Flight Assessment" in system_message
    assert "Wind Direction: 90° (E)" in system_message
    assert "Confidence Score: 0%" in system_message
    assert "Strong winds - exercise extra caution" in system_message
    assert "Alameda forecast text" in system_message
    assert "San Francisco, USA" in system_message


@pytest.mark.anyio
async def test_answer_uses_request_location():
    completion = FakeCompletion()
    request = ChatRequest(
        message="today?",
        location=ChatLocation(latitude=46.0, longitude=7.0, city="Verbier", country="Switzerland"),
    )

    response = await _service(completion=completion).answer(request, _store(), now=NOW)

    assert response.weather_data.flight_conditions.recommendation == Recommendation.HIGH
    assert response.weather_data.date == "2024-06-14"
    assert "Verbier, Switzerland" in completion.calls[0][1]


@pytest.mark.anyio
async def test_answer_without_documents_has_no_weather_data():
    completion = FakeCompletion()

    response = await _service(completion=completion).answer(
        ChatRequest(message="Can I fly tomorrow?"), FakeStore(), now=NOW
    )

    assert response.weather_data is None
    assert "## Current Weather Conditions" not in completion.calls[0][1]
    assert "## Flight Assessment" not in completion.calls[0][1]


@pytest.mark.anyio
async def test_answer_without_data_for_target_day():
    response = await _service().answer(
        ChatRequest(message="what about 2024-07-04"), _store(), now=NOW
    )

    assert response.weather_data is None


@pytest.mark.anyio
async def test_retrieval_failures_are_tolerated(caplog):
    caplog.set_level(logging.WARNING)
    embedder_down = _service(embedder=FakeEmbedder(error=RuntimeError("no key")))
    store_down = _service()

    first = await embedder_down.answer(ChatRequest(message="today?"), _store(), now=NOW)
    second = await store_down.answer(
        ChatRequest(message="today?"),
        FakeStore(error=OperationalError("SELECT", {}, Exception("locked"))),
        now=NOW,
    )

    assert first.weather_data is None
    assert second.weather_data is None
    assert "Forecast retrieval unavailable" in caplog.text


@pytest.mark.anyio
async def test_completion_failure_returns_fallback(caplog):
    caplog.set_level(logging.ERROR)
    service = _service(completion=FakeCompletion(error=RuntimeError("AI service down")))

    response = await service.answer(ChatRequest(message="tomorrow?"), _store(), now=NOW)

    assert response.response == FALLBACK_ANSWER
    assert response.weather_data.date == "2024-06-15"
    assert "AI answer failed" in caplog.text


@pytest.mark.anyio
async def test_naive_now_is_treated_as_utc():
    response = await _service().answer(
        ChatRequest(message="today?"), _store(), now=datetime(2024, 6, 15, 3, 0)
    )

    assert response.weather_data.date == "2024-06-14"
