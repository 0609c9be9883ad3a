"""Generic async REST repository for backend resources."""

from __future__ import annotations

from typing import Any, Generic, Type, TypeVar

from routecraft.contracts.common import ApiModel
from routecraft.persistence.backend_client import BackendClient

T = TypeVar("T", bound=ApiModel)


class BaseRepository(Generic[T]):
    """CRUD for a backend collection under ``/api/{resource}``.

    Serialization relies entirely on the contract's ``to_payload()``
    and ``from_payload()`` methods.
    """

    def __init__(self, client: BackendClient, model_class: Type[T], resource_path: str):
        self._client = client
        self._model_class = model_class
        self._resource_path = resource_path.rstrip("/")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _path(self, *parts: object) -> str:
        return "/".join([self._resource_path, *(str(p) for p in parts)])

    def _parse(self, data: dict[str, Any]) -> T:
        return self._model_class.from_payload(data)  # type: ignore[return-value]

    def _parse_list(self, data: list[dict[str, Any]] | None) -> list[T]:
        return [self._parse(item) for item in data or []]

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, entity_id: int | str) -> T:
        """Fetch a single entity. Raises ``NotFoundError`` if missing."""
        return self._parse(await self._client.get(self._path(entity_id)))

    async def list_all(self, params: dict[str, Any] | None = None) -> list[T]:
        return self._parse_list(await self._client.get(self._resource_path, params=params))

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, payload: ApiModel) -> T:
        """Create an entity; returns the persisted version with server fields."""
        return self._parse(await self._client.post(self._resource_path, payload.to_payload()))

    async def update(self, entity_id: int | str, payload: ApiModel) -> T:
        """Full update of an existing entity."""
        return self._parse(await self._client.put(self._path(entity_id), payload.to_payload()))

    async def delete(self, entity_id: int | str) -> None:
        await self._client.delete(self._path(entity_id))
