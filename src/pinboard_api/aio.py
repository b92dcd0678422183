"""Async wrapper running the synchronous client on a worker thread."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from pinboard_api.client import BookmarkOrUrl, PinboardClient
from pinboard_api.models import Bookmark, Date, Note, Status, SuggestedTags, Tag
from pinboard_api.params import TagsArg, TimeArg


class AsyncPinboardClient:
    """Awaitable facade over PinboardClient.

    A single worker thread keeps calls strictly one at a time.
    """

    def __init__(self, client: PinboardClient):
        self.client = client

        # Thread pool for running sync client calls
        self._executor = ThreadPoolExecutor(max_workers=1)

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a synchronous function in the thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, lambda: func(*args, **kwargs)
        )

    async def get_recent(self, count: int = 15, tags: TagsArg = None) -> list[Bookmark]:
        return await self._run_in_executor(self.client.get_recent, count=count, tags=tags)

    async def get_all(
        self,
        count: Optional[int] = None,
        offset: Optional[int] = None,
        tags: TagsArg = None,
        from_: Optional[TimeArg] = None,
        to: Optional[TimeArg] = None,
    ) -> list[Bookmark]:
        return await self._run_in_executor(
            self.client.get_all,
            count=count,
            offset=offset,
            tags=tags,
            from_=from_,
            to=to,
        )

    async def get(
        self,
        url: Optional[str] = None,
        tags: TagsArg = None,
        date: Optional[TimeArg] = None,
    ) -> list[Bookmark]:
        return await self._run_in_executor(self.client.get, url=url, tags=tags, date=date)

    async def get_tags(self) -> list[Tag]:
        return await self._run_in_executor(self.client.get_tags)

    async def get_dates(self, tags: TagsArg = None) -> list[Date]:
        return await self._run_in_executor(self.client.get_dates, tags=tags)

    async def get_suggested_tags(self, bookmark: BookmarkOrUrl) -> SuggestedTags:
        return await self._run_in_executor(self.client.get_suggested_tags, bookmark)

    async def get_notes(self) -> list[Note]:
        return await self._run_in_executor(self.client.get_notes)

    async def get_note(self, note_id: str) -> Optional[Note]:
        return await self._run_in_executor(self.client.get_note, note_id)

    async def save(self, bookmark: Bookmark, replace: bool = True) -> Status:
        return await self._run_in_executor(self.client.save, bookmark, replace=replace)

    async def close(self) -> None:
        """Close the client and clean up resources."""
        self._executor.shutdown(wait=True)
        self.client.close()
