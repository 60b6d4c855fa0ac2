from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .models import VideoRecord

# UI transaction types BUY/RENT/STAY map onto backend SALE/RENT/STAY.
_UI_TO_BACKEND_TYPE = {"BUY": "SALE"}


def _normalize(value: Any) -> str:
    return str(value if value is not None else "").strip().upper()


def map_ui_transaction_type(ui_type: str) -> str:
    normalized = _normalize(ui_type)
    return _UI_TO_BACKEND_TYPE.get(normalized, normalized)


@dataclass(frozen=True)
class FeedFilter:
    transaction_type: str
    city: str

    @property
    def key(self) -> str:
        return f"{map_ui_transaction_type(self.transaction_type)}::{_normalize(self.city)}"

    def matches(self, record: VideoRecord) -> bool:
        listing = record.listing or {}
        meta = listing.get("meta") if isinstance(listing.get("meta"), dict) else {}
        emirate = listing.get("emirate") if isinstance(listing.get("emirate"), dict) else {}
        return (
            _normalize(meta.get("type")) == map_ui_transaction_type(self.transaction_type)
            and _normalize(emirate.get("name")) == _normalize(self.city)
        )


def filter_videos_strict(records: Iterable[VideoRecord], feed_filter: FeedFilter) -> list[VideoRecord]:
    return [record for record in records if feed_filter.matches(record)]


__all__ = ["FeedFilter", "filter_videos_strict", "map_ui_transaction_type"]
