"""Data model definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class RunType(str, Enum):
    """How each input line is sent to the API."""

    SEARCH = "search"  # free-text term -> q
    TOP = "top"  # category name -> category

    @property
    def param(self) -> str:
        return "q" if self is RunType.SEARCH else "category"


@dataclass
class SearchQuery:
    """One line's query, mutated across the pagination loop."""

    run_type: RunType
    text: str
    count: int
    start: int = 0
    num: int = 0

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")

    def to_params(self) -> dict[str, str]:
        """Build the /api/apps query parameters."""
        return {
            "fullDetail": "true",
            "start": str(self.start),
            "num": str(self.num),
            self.run_type.param: self.text,
        }


@dataclass
class AppRecord:
    """A single app from the search results."""

    genre: str = ""
    genre_id: str = ""
    app_id: str = ""  # package name, e.g. com.spotify.music
    title: str = ""
    summary: str = ""
    developer_email: str = ""
    developer_website: str = ""
    developer_address: str = ""
    min_installs: int = 0
    max_installs: int = 0
    score: float = 0.0
    updated: str = ""  # "January 5, 2023" from the API, YYYY-MM-DD once normalized
    ad_supported: bool = False
    price: str = ""
    offers_iap: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppRecord:
        """Build a record from one element of the API's ``results`` array.

        Missing or null keys fall back to zero values. Values of the wrong
        JSON type raise TypeError or ValueError.
        """
        return cls(
            genre=_str(data.get("genre")),
            genre_id=_str(data.get("genreId")),
            app_id=_str(data.get("appId")),
            title=_str(data.get("title")),
            summary=_str(data.get("summary")),
            developer_email=_str(data.get("developerEmail")),
            developer_website=_str(data.get("developerWebsite")),
            developer_address=_str(data.get("developerAddress")),
            min_installs=_int(data.get("minInstalls")),
            max_installs=_int(data.get("maxInstalls")),
            score=_float(data.get("score")),
            updated=_str(data.get("updated")),
            ad_supported=_flag(data.get("adSupported")),
            price=_str(data.get("price")),
            offers_iap=_flag(data.get("offersIAP")),
        )

    def to_row(self) -> dict[str, str]:
        """Render the record as a CSV row keyed by the API field names."""
        return {
            "genre": self.genre,
            "genreId": self.genre_id,
            "appId": self.app_id,
            "title": self.title,
            "summary": self.summary,
            "developerEmail": self.developer_email,
            "developerWebsite": self.developer_website,
            "developerAddress": self.developer_address,
            "minInstalls": str(self.min_installs),
            "maxInstalls": str(self.max_installs),
            "score": str(self.score),
            "updated": self.updated,
            "adSupported": _bool(self.ad_supported),
            "price": self.price,
            "offersIAP": _bool(self.offers_iap),
        }


class ResultSet:
    """Ordered, deduplicated collection of AppRecord keyed by app_id.

    The first record seen for an app_id wins; later duplicates are dropped.
    """

    def __init__(self) -> None:
        self._records: dict[str, AppRecord] = {}

    def add(self, record: AppRecord) -> bool:
        """Add a record. Returns False (and drops it) if the app_id is known."""
        if record.app_id in self._records:
            return False
        self._records[record.app_id] = record
        return True

    def __contains__(self, app_id: object) -> bool:
        return app_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AppRecord]:
        return iter(self._records.values())

    def __bool__(self) -> bool:
        return bool(self._records)


def _str(value: Any) -> str:
    # price and genreId may arrive as JSON numbers
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f"expected a string, got {type(value).__name__}: {value!r}")


def _int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got bool: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, float):
        raise ValueError(f"expected an integer, got {value!r}")
    raise TypeError(f"expected an integer, got {type(value).__name__}: {value!r}")


def _float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise TypeError(f"expected a number, got {type(value).__name__}: {value!r}")


def _flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise TypeError(f"expected a boolean, got {type(value).__name__}: {value!r}")


def _bool(value: bool) -> str:
    return "true" if value else "false"
