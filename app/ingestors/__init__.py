"""Forecast ingestors for ThermalAI."""

from .open_meteo import OpenMeteoIngestor
from .windy import WindyIngestor

__all__ = ["OpenMeteoIngestor", "WindyIngestor"]
