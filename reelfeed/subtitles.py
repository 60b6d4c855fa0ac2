from __future__ import annotations

import json
import logging

from .storage import KeyValueStorage

logger = logging.getLogger("reelfeed.subtitles")

SUBTITLE_LANGUAGE_KEY = "@subtitle_language_v1"


class SubtitlePreferenceStore:
    """Remembers the subtitle language chosen for the whole feed."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self.language_code = ""

    async def hydrate(self) -> None:
        try:
            raw = await self._storage.get_item(SUBTITLE_LANGUAGE_KEY)
            if raw:
                data = json.loads(raw)
                if isinstance(data, dict):
                    self.language_code = str(data.get("language_code") or "")
        except Exception as e:
            logger.warning(f"[Subtitles] Could not read saved language: {e}")

    async def set_language_code(self, code: str) -> None:
        self.language_code = code or ""
        await self._save()

    async def clear(self) -> None:
        await self.set_language_code("")

    async def _save(self) -> None:
        try:
            await self._storage.set_item(
                SUBTITLE_LANGUAGE_KEY,
                json.dumps({"language_code": self.language_code}),
            )
        except Exception as e:
            logger.warning(f"[Subtitles] Could not save language: {e}")


__all__ = ["SubtitlePreferenceStore", "SUBTITLE_LANGUAGE_KEY"]
