"""
Data source resolution.

Picks which CRM record sets to fetch for a prompt, from an explicit hint or
from keywords in the prompt text, and fetches them from an external
provider. Fetch failures are logged and the source is left out.
"""

from enum import Enum
from typing import Any, Protocol

from ..core.logging_config import get_logger

logger = get_logger(__name__)


class DataSource(str, Enum):
    """Record sets the CRM collaborator can supply."""

    PIPELINES = "pipelines"
    OPPORTUNITIES = "opportunities"
    CONTACTS = "contacts"
    INVOICES = "invoices"
    CALENDARS = "calendars"
    APPOINTMENTS = "appointments"


KEYWORD_SOURCES: dict[str, tuple[DataSource, ...]] = {
    "pipeline": (DataSource.PIPELINES, DataSource.OPPORTUNITIES),
    "deal": (DataSource.PIPELINES, DataSource.OPPORTUNITIES),
    "opportunit": (DataSource.PIPELINES, DataSource.OPPORTUNITIES),
    "contact": (DataSource.CONTACTS,),
    "lead": (DataSource.CONTACTS,),
    "invoice": (DataSource.INVOICES,),
    "billing": (DataSource.INVOICES,),
    "calendar": (DataSource.CALENDARS, DataSource.APPOINTMENTS),
    "appointment": (DataSource.CALENDARS, DataSource.APPOINTMENTS),
    "schedule": (DataSource.CALENDARS, DataSource.APPOINTMENTS),
}


class DataSourceProvider(Protocol):
    """External collaborator producing plain records."""

    async def fetch(self, source: DataSource) -> Any: ...


def resolve_data_sources(prompt: str, hint: str | None = None) -> list[DataSource]:
    """
    Decide which sources a prompt needs.

    An explicit hint wins: a comma-separated list of source names or keywords.
    Otherwise the prompt is scanned for keywords. Order is stable and
    duplicates are dropped.
    """
    text = (hint if hint and hint.strip() else prompt).lower()
    found: list[DataSource] = []

    if hint and hint.strip():
        for part in (p.strip() for p in text.split(",")):
            try:
                candidates: tuple[DataSource, ...] = (DataSource(part),)
            except ValueError:
                candidates = next((v for k, v in KEYWORD_SOURCES.items() if k in part), ())
            found.extend(c for c in candidates if c not in found)
        return found

    for keyword, sources in KEYWORD_SOURCES.items():
        if keyword in text:
            found.extend(s for s in sources if s not in found)
    return found


async def fetch_data(provider: DataSourceProvider | None, sources: list[DataSource]) -> dict[str, Any]:
    """
    Fetch resolved sources.

    Returns:
        Mapping of source name to records; empty sources are left out
    """
    if provider is None or not sources:
        return {}

    data: dict[str, Any] = {}
    for source in sources:
        try:
            records = await provider.fetch(source)
        except Exception as e:
            logger.warning("data_fetch_failed", source=source.value, error=str(e))
            continue
        if records:
            data[source.value] = records

    logger.info("data_fetched", sources=list(data.keys()))
    return data


class StaticDataProvider:
    """Provider over records already in memory."""

    def __init__(self, records: dict[str, Any]) -> None:
        self.records = records

    async def fetch(self, source: DataSource) -> Any:
        return self.records.get(source.value)
