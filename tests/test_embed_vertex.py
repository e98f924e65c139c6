"""Tests for the Vertex AI embedding backend."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from common import config as config_module
from service import embed_vertex, embeddings


class _DummyModel:
    def __init__(self) -> None:
        self.requests: List[List[str]] = []

    def get_embeddings(self, texts: List[str]) -> List[SimpleNamespace]:
        self.requests.append(list(texts))
        return [SimpleNamespace(values=[float(len(text)), 1.0]) for text in texts]


@pytest.fixture
def vertex_env(monkeypatch: pytest.MonkeyPatch) -> Dict[str, Any]:
    monkeypatch.setenv("EMBEDDING_PROVIDER", "vertex")
    monkeypatch.setenv("PROJECT_ID", "test-project")
    monkeypatch.setenv("REGION", "us-central1")
    monkeypatch.delenv("VERTEX_LOCATION", raising=False)
    monkeypatch.delenv("EMBEDDING_MODEL", raising=False)
    config_module.get_settings.cache_clear()
    embeddings.get_embedding_client.cache_clear()

    state: Dict[str, Any] = {"model": _DummyModel()}

    def _init(**kwargs: Any) -> None:
        state["init"] = kwargs

    def _from_pretrained(model_id: str) -> _DummyModel:
        state["model_id"] = model_id
        return state["model"]

    monkeypatch.setattr(embed_vertex.vertexai, "init", _init)
    monkeypatch.setattr(embed_vertex.TextEmbeddingModel, "from_pretrained", _from_pretrained)

    yield state

    config_module.get_settings.cache_clear()
    embeddings.get_embedding_client.cache_clear()


def test_client_initialises_vertex(vertex_env) -> None:
    embed_vertex.VertexEmbeddingClient()

    assert vertex_env["init"] == {"project": "test-project", "location": "us-central1"}
    assert vertex_env["model_id"] == "gemini-embedding-001"


def test_embed_text_caches_by_content(vertex_env) -> None:
    client = embed_vertex.VertexEmbeddingClient()

    first = client.embed_text("Hello world")
    second = client.embed_text("Hello world")

    assert first == second == [11.0, 1.0]
    assert vertex_env["model"].requests == [["Hello world"]]


def test_embed_text_caches_each_text_separately(vertex_env) -> None:
    client = embed_vertex.VertexEmbeddingClient()

    assert client.embed_text("a") == [1.0, 1.0]
    assert client.embed_text("cccc") == [4.0, 1.0]
    assert client.embed_text("a") == [1.0, 1.0]
    assert vertex_env["model"].requests == [["a"], ["cccc"]]


def test_embed_text_rejects_empty_response(monkeypatch: pytest.MonkeyPatch, vertex_env) -> None:
    client = embed_vertex.VertexEmbeddingClient()
    monkeypatch.setattr(vertex_env["model"], "get_embeddings", lambda texts: [])

    with pytest.raises(RuntimeError, match="returned no embedding"):
        client.embed_text("Hello world")


def test_get_embeddings_routes_to_vertex(vertex_env) -> None:
    vector = asyncio.run(embeddings.get_embeddings("Hello world"))

    assert vector == [11.0, 1.0]
    assert isinstance(embeddings.get_embedding_client(), embed_vertex.VertexEmbeddingClient)


def test_client_requires_project(monkeypatch: pytest.MonkeyPatch, vertex_env) -> None:
    monkeypatch.setenv("EMBEDDING_PROVIDER", "local")
    config_module.get_settings.cache_clear()

    with pytest.raises(RuntimeError, match="PROJECT_ID"):
        embed_vertex.VertexEmbeddingClient()
