from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Generic, Optional, TypeVar

from opentelemetry import trace

from errors import ExtractionFailure, TransportFailure
from logger import setup_logger
from models import SourceResult, utc_now

logger = setup_logger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


def text_of(element, selector: str) -> str:
    """Stripped text of the first match for selector inside element, '' when absent."""
    node = element.select_one(selector)
    return node.get_text(strip=True) if node else ""


class SourceAdapter(ABC, Generic[T]):
    """
    Abstract base for one upstream page.

    Subclasses only know how to read markup. collect() owns the failure
    boundary: whatever goes wrong, the caller gets a SourceResult back.
    """

    headers: Optional[Dict[str, str]] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Short source name used in logs, spans and run metrics"""
        pass

    @property
    @abstractmethod
    def target_url(self) -> str:
        """URL of the page this adapter reads"""
        pass

    @abstractmethod
    def empty(self) -> T:
        """The value a degraded result carries"""
        pass

    @abstractmethod
    def extract(self, html_content: str, fetched_at: datetime) -> T:
        """
        Read records out of a fetched page.

        Raises ExtractionFailure when none of the known structures are present.
        """
        pass

    def collect(self, fetcher) -> SourceResult[T]:
        """Fetch and extract, degrading to an empty result on any failure."""
        with tracer.start_as_current_span(f"source.{self.name}") as span:
            span.set_attribute("source", self.name)
            span.set_attribute("target_url", self.target_url)
            fetched_at = utc_now()
            try:
                html_content = fetcher.fetch(self.target_url, self.headers)
                value = self.extract(html_content, fetched_at)
            except TransportFailure as e:
                return self._degrade(span, "transport_failed", e)
            except ExtractionFailure as e:
                return self._degrade(span, "extraction_failed", e)
            except Exception as e:
                # Markup we did not anticipate broke a selector walk
                return self._degrade(span, "extraction_crashed", e, exc_info=True)

            span.set_attribute("records", len(value))
            logger.info(f"Source {self.name} returned {len(value)} records", extra={
                "event": "source_success",
                "source": self.name,
                "game_count": len(value),
            })
            return SourceResult.ok(self.name, value)

    def _degrade(self, span, event: str, error: Exception, exc_info: bool = False) -> SourceResult[T]:
        span.record_exception(error)
        span.set_status(trace.Status(trace.StatusCode.ERROR, str(error)))
        logger.warning(f"Source {self.name} degraded to empty: {error}", extra={
            "event": event,
            "source": self.name,
            "url": self.target_url,
            "error": str(error),
        }, exc_info=exc_info)
        return SourceResult.failed(self.name, self.empty(), str(error))
