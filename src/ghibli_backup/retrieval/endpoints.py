from dataclasses import dataclass

from ghibli_backup.errors import InvalidEndpointError


@dataclass(frozen=True)
class EndpointRef:
    kind: str
    item_id: str | None = None

    @property
    def path(self) -> str:
        if self.item_id is None:
            return f"/{self.kind}"
        return f"/{self.kind}/{self.item_id}"


def normalize_endpoint(endpoint: str) -> str:
    if not endpoint.startswith("/"):
        return "/" + endpoint
    return endpoint


def parse_endpoint(endpoint: str) -> EndpointRef:
    """Split `/<kind>` or `/<kind>/<id>` into its parts.

    A single trailing slash is tolerated and any query string is ignored.
    The kind is not checked against the known kinds; callers treat an unknown
    kind as not-found.
    """
    path = normalize_endpoint(endpoint.strip()).split("?", 1)[0]
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    parts = path[1:].split("/")
    if not parts[0] or len(parts) > 2 or any(not part for part in parts):
        raise InvalidEndpointError(f"Invalid endpoint: {endpoint!r}")
    if len(parts) == 1:
        return EndpointRef(kind=parts[0])
    return EndpointRef(kind=parts[0], item_id=parts[1])
