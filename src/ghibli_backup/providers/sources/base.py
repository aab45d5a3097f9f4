from typing import Any, Protocol


class RecordSource(Protocol):
    @property
    def label(self) -> str: ...

    def url_for(self, endpoint: str) -> str: ...

    async def fetch(self, endpoint: str) -> Any: ...
