from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from common.config import GeminiSettings, ServerSettings
from transcription.gemini_client import GeminiClient


@lru_cache
def get_server_settings() -> ServerSettings:
    return ServerSettings()


@lru_cache
def get_gemini_settings() -> GeminiSettings:
    return GeminiSettings()


def get_gemini_client(settings: GeminiSettings = Depends(get_gemini_settings)) -> GeminiClient:
    return GeminiClient(settings)
