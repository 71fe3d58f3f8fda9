"""Source citation model shared by search and analysis results.

A Source is a web page (or document) a property value was extracted from.
Sources are identified by their normalized URL, see
``specharvest.core.source_registry.normalize_url``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Source:
    """A single citation attached to a property or a whole result.

    Attributes:
        url: Page URL as reported by the search step.
        title: Page title, if the search step provided one.
        source_label: Short label used in prompts and tables ("Source 1").
        content: Raw page content, only when retained for inspection.
        content_length: Length of the retained content in characters.
    """

    url: str
    title: Optional[str] = None
    source_label: Optional[str] = None

    # Content (inspection only)
    content: Optional[str] = None
    content_length: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation, omitting empty fields."""
        data: Dict[str, Any] = {"url": self.url}
        if self.title is not None:
            data["title"] = self.title
        if self.source_label is not None:
            data["sourceLabel"] = self.source_label
        if self.content is not None:
            data["content"] = self.content
        if self.content_length is not None:
            data["contentLength"] = self.content_length
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Source":
        """Create from a wire dict (camelCase or snake_case keys)."""
        content = data.get("content")
        content_length = data.get("contentLength", data.get("content_length"))
        if content_length is None and isinstance(content, str):
            content_length = len(content)
        return cls(
            url=str(data.get("url") or ""),
            title=data.get("title"),
            source_label=data.get("sourceLabel", data.get("source_label")),
            content=content,
            content_length=content_length,
        )

    def get_display_title(self) -> str:
        """Get text for display: title, falling back to the URL."""
        return self.title or self.url


@dataclass(frozen=True)
class RawContentEntry:
    """Scraped text snapshot of one source, kept for inspection/audit only.

    Raw content is decoupled from reconciled properties: it is never read by
    the reconciler.
    """

    source_label: str
    content: str
    title: Optional[str] = None
    url: Optional[str] = None
    content_length: Optional[int] = None

    @property
    def length(self) -> int:
        """Content length, computed when the producer did not report it."""
        if self.content_length is not None:
            return self.content_length
        return len(self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation."""
        data: Dict[str, Any] = {
            "sourceLabel": self.source_label,
            "content": self.content,
        }
        if self.title is not None:
            data["title"] = self.title
        if self.url is not None:
            data["url"] = self.url
        if self.content_length is not None:
            data["contentLength"] = self.content_length
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "RawContentEntry":
        """Create from a wire dict; bare strings become unlabeled entries."""
        if isinstance(data, str):
            return cls(source_label="", content=data)
        return cls(
            source_label=str(data.get("sourceLabel", data.get("source_label", ""))),
            content=str(data.get("content") or ""),
            title=data.get("title"),
            url=data.get("url"),
            content_length=data.get("contentLength", data.get("content_length")),
        )
