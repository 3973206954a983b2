"""Forecast document storage with cosine-similarity retrieval."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
import math
from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from app import db_models

logger = logging.getLogger("thermalai.vector_store")


@dataclass
class DocumentChunk:
    """Text chunk waiting to be embedded and stored."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class RetrievedDocument:
    """A stored chunk returned from similarity search."""

    id: int
    content: str
    metadata: dict[str, Any]
    score: float


def split_text(
    text: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    separator: str = "\n\n",
) -> list[str]:
    """Split text on ``separator`` and merge pieces into overlapping chunks.

    Each chunk stays within ``chunk_size`` characters unless a single piece is
    already longer. Consecutive chunks share up to ``chunk_overlap``
    characters of trailing pieces.
    """

    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")

    pieces = [piece.strip() for piece in text.split(separator) if piece.strip()]
    sep_len = len(separator)
    chunks: list[str] = []
    current: list[str] = []
    length = 0

    for piece in pieces:
        added = len(piece) + (sep_len if current else 0)
        if current and length + added > chunk_size:
            chunks.append(separator.join(current))
            while current and (
                length > chunk_overlap
                or length + sep_len + len(piece) > chunk_size
            ):
                length -= len(current[0]) + (sep_len if len(current) > 1 else 0)
                current.pop(0)
            added = len(piece) + (sep_len if current else 0)
        current.append(piece)
        length += added

    if current:
        chunks.append(separator.join(current))
    return chunks


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class WeatherDocumentStore:
    """Vector store over the ``weather_documents`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def add_documents(
        self, chunks: Sequence[DocumentChunk], embeddings: Sequence[Sequence[float]]
    ) -> list[int]:
        if len(chunks) != len(embeddings):
            raise ValueError("Each chunk needs exactly one embedding")

        records = [
            db_models.WeatherDocument(
                location=chunk.metadata.get("location"),
                content=chunk.content,
                doc_metadata=chunk.metadata,
                embedding=[float(value) for value in vector],
                created_at=datetime.utcnow(),
            )
            for chunk, vector in zip(chunks, embeddings)
        ]
        self.db.add_all(records)
        self.db.commit()
        logger.info("Stored %s weather document chunks", len(records))
        return [record.id for record in records]

    def similarity_search(
        self,
        query_embedding: Sequence[float],
        k: int = 3,
        *,
        location: Optional[str] = None,
    ) -> list[RetrievedDocument]:
        """Return the ``k`` most similar chunks, ties broken by id."""

        query = self.db.query(db_models.WeatherDocument)
        if location:
            query = query.filter(db_models.WeatherDocument.location == location)

        scored = [
            RetrievedDocument(
                id=record.id,
                content=record.content,
                metadata=record.doc_metadata or {},
                score=cosine_similarity(query_embedding, record.embedding or []),
            )
            for record in query.all()
        ]
        scored.sort(key=lambda doc: (-doc.score, doc.id))
        logger.debug("Similarity search scanned %s documents", len(scored))
        return scored[:k]

    def count(self) -> int:
        return self.db.query(db_models.WeatherDocument).count()

    def embedding_dimension(self) -> Optional[int]:
        """Dimension of stored embeddings, or None when the store is empty."""

        record = self.db.query(db_models.WeatherDocument).first()
        if record is None:
            return None
        return len(record.embedding or [])

    def reset(self) -> int:
        """Delete every stored document and return how many were removed."""

        deleted = self.db.query(db_models.WeatherDocument).delete(synchronize_session=False)
        self.db.commit()
        logger.info("Removed %s weather documents", deleted)
        return deleted


__all__ = [
    "DocumentChunk",
    "RetrievedDocument",
    "WeatherDocumentStore",
    "cosine_similarity",
    "split_text",
]
