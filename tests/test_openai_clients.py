from types import SimpleNamespace

import httpx
import openai
import pytest

from app.services.embeddings import EmbeddingService
from app.services.openai_client import CompletionClient


class FakeCompletions:
    def __init__(self, content="Launch looks good.", error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeEmbeddings:
    async def create(self, **kwargs):
        self.kwargs = kwargs
        # The API may return items out of order
        return SimpleNamespace(
            data=[
                SimpleNamespace(index=1, embedding=[0.0, 1.0]),
                SimpleNamespace(index=0, embedding=[1.0, 0.0]),
            ]
        )


def _timeout_error():
    return openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1"))


@pytest.mark.anyio
async def test_complete_sends_system_and_user_messages():
    completions = FakeCompletions()
    client = CompletionClient(api_key="sk-test", model="gpt-4o-mini", max_tokens=512)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    answer = await client.complete("Can I fly?", system_message="You are a paragliding assistant")

    assert answer == "Launch looks good."
    assert completions.kwargs["model"] == "gpt-4o-mini"
    assert completions.kwargs["max_tokens"] == 512
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "You are a paragliding assistant"},
        {"role": "user", "content": "Can I fly?"},
    ]


@pytest.mark.anyio
async def test_complete_maps_api_errors():
    client = CompletionClient(api_key="sk-test", model="gpt-4o-mini")
    client._client = SimpleNamespace(
        chat=SimpleNamespace(completions=FakeCompletions(error=_timeout_error()))
    )

    with pytest.raises(RuntimeError, match="AI service temporarily unavailable"):
        await client.complete("Can I fly?")


@pytest.mark.anyio
async def test_complete_requires_api_key():
    with pytest.raises(RuntimeError, match="OpenAI API key not configured"):
        await CompletionClient(api_key="", model="gpt-4o-mini").complete("Can I fly?")


@pytest.mark.anyio
async def test_embed_documents_orders_by_index():
    embeddings = FakeEmbeddings()
    service = EmbeddingService(api_key="sk-test", model="text-embedding-3-small")
    service._client = SimpleNamespace(embeddings=embeddings)

    vectors = await service.embed_documents(["first", "second"])

    assert vectors == [[1.0, 0.0], [0.0, 1.0]]
    assert embeddings.kwargs == {"model": "text-embedding-3-small", "input": ["first", "second"]}


@pytest.mark.anyio
async def test_embed_documents_empty_input_skips_api():
    service = EmbeddingService(api_key="", model="text-embedding-3-small")

    assert await service.embed_documents([]) == []


@pytest.mark.anyio
async def test_embed_query_requires_api_key():
    service = EmbeddingService(api_key="", model="text-embedding-3-small")

    with pytest.raises(RuntimeError, match="OpenAI API key not configured"):
        await service.embed_query("wind tomorrow")
