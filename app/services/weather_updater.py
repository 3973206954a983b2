"""Fetch forecasts for launch sites and load them into the document store."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Protocol, Sequence
from zoneinfo import ZoneInfo

from app.models.weather import Forecast
from app.services.embeddings import EmbeddingService
from app.services.forecast_documents import build_forecast_document
from app.services.vector_store import DocumentChunk, WeatherDocumentStore, split_text

logger = logging.getLogger("thermalai.weather_updater")


@dataclass(frozen=True)
class LaunchSite:
    name: str
    latitude: float
    longitude: float


DEFAULT_LAUNCH_SITES: tuple[LaunchSite, ...] = (
    LaunchSite("Alameda", 37.7652, -122.2416),
    LaunchSite("Mussel Rock State Park", 37.6684, -122.4944),
    LaunchSite("Blue Rock", 38.1379, -122.1950),
    LaunchSite("Ed Levin County Park", 37.4666, -121.8569),
)


class ForecastProvider(Protocol):
    async def get_forecast(self, lat: float, lon: float) -> Forecast:
        """Return an hourly forecast for the coordinates."""


@dataclass
class UpdateResult:
    """Outcome of loading one launch site's forecast."""

    site: LaunchSite
    hours: int
    document_ids: list[int] = field(default_factory=list)


class WeatherUpdater:
    """Fetch, render, chunk, embed and store forecasts site by site."""

    def __init__(
        self,
        *,
        provider: ForecastProvider,
        embedder: EmbeddingService,
        store: WeatherDocumentStore,
        timezone_name: str,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        self.provider = provider
        self.embedder = embedder
        self.store = store
        self.timezone = ZoneInfo(timezone_name)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    async def update_site(self, site: LaunchSite) -> UpdateResult:
        logger.info("Fetching forecast for %s", site.name)
        forecast = await self.provider.get_forecast(site.latitude, site.longitude)

        document = build_forecast_document(site.name, forecast, self.timezone)
        texts = split_text(
            document.content, chunk_size=self.chunk_size, chunk_overlap=self.chunk_overlap
        )
        vectors = await self.embedder.embed_documents(texts)

        expected = self.store.embedding_dimension()
        if expected is not None and vectors and len(vectors[0]) != expected:
            raise RuntimeError(
                f"Stored embedding dimension ({expected}) does not match the "
                f"embedding model ({len(vectors[0])}); reset the store first"
            )

        chunks = [DocumentChunk(content=text, metadata=document.metadata) for text in texts]
        ids = self.store.add_documents(chunks, vectors)
        logger.info(
            "Stored forecast for %s: hours=%s chunks=%s",
            site.name,
            len(forecast.samples),
            len(ids),
        )
        return UpdateResult(site=site, hours=len(forecast.samples), document_ids=ids)

    async def update(self, sites: Sequence[LaunchSite] = DEFAULT_LAUNCH_SITES) -> list[UpdateResult]:
        return [await self.update_site(site) for site in sites]


__all__ = [
    "DEFAULT_LAUNCH_SITES",
    "ForecastProvider",
    "LaunchSite",
    "UpdateResult",
    "WeatherUpdater",
]
