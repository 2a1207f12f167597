"""Dynamic view generation."""

from .data_sources import (
    DataSource,
    DataSourceProvider,
    StaticDataProvider,
    fetch_data,
    resolve_data_sources,
)
from .errors import (
    GenerationError,
    GenerationFailedError,
    InvalidJSONResponseError,
    InvalidTreeResponseError,
    MissingCredentialError,
)
from .gemini import GeminiGenerator, Generator
from .pipeline import GenerationPipeline
from .prompt import SYNTHETIC_DATA_INSTRUCTION, build_user_message, get_view_generation_prompt

__all__ = [
    "DataSource",
    "DataSourceProvider",
    "StaticDataProvider",
    "fetch_data",
    "resolve_data_sources",
    "GenerationError",
    "GenerationFailedError",
    "InvalidJSONResponseError",
    "InvalidTreeResponseError",
    "MissingCredentialError",
    "GeminiGenerator",
    "Generator",
    "GenerationPipeline",
    "SYNTHETIC_DATA_INSTRUCTION",
    "build_user_message",
    "get_view_generation_prompt",
]
