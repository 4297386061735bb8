"""Base classes for resource sub-clients.

A sub-client owns one URL prefix (such as ``/trees``) on the shared HTTP
client. The helpers here build paths under that prefix and turn JSON
bodies into the sub-client's response models, so each endpoint method is
reduced to naming its path segments and its response type.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def resource_path(base_path: str, *segments: str) -> str:
    """Join a resource prefix and path segments into a URL path.

    Args:
        base_path: The resource prefix, e.g. ``/trees``.
        *segments: Further path segments, e.g. a tree id and ``size``.

    Returns:
        The joined path, e.g. ``/trees/<id>/size``.

    Raises:
        ValueError: If a segment is empty or contains a slash, which would
            address a different resource than intended.
    """
    for segment in segments:
        if not segment or "/" in segment:
            raise ValueError(f"Invalid path segment: {segment!r}")
    return "/".join([base_path.rstrip("/"), *segments])


class BaseClient:
    """Base class for synchronous resource sub-clients.

    Subclasses set ``_BASE_PATH`` and call ``_get``, ``_post`` and
    ``_delete`` with the response model to parse into.

    Attributes:
        _http: The shared HTTP client for making requests.
    """

    _BASE_PATH = ""

    def __init__(self, http_client: "HTTPClient") -> None:
        """Initialize the sub-client.

        Args:
            http_client: The shared HTTP client instance.
        """
        self._http = http_client

    def _path(self, *segments: str) -> str:
        return resource_path(self._BASE_PATH, *segments)

    def _get(
        self,
        model: type[ResponseT],
        *segments: str,
        params: dict[str, Any] | None = None,
    ) -> ResponseT:
        """GET a resource below the prefix and parse the response.

        Args:
            model: Response model to validate the JSON body against.
            *segments: Path segments below the prefix.
            params: Query parameters; None values are dropped by the HTTP layer.

        Returns:
            The parsed response model.
        """
        data = self._http.get(self._path(*segments), params=params)
        return model.model_validate(data)

    def _post(
        self,
        model: type[ResponseT],
        *segments: str,
        json: dict[str, Any] | None = None,
    ) -> ResponseT:
        """POST a JSON body to the prefix and parse the response.

        Args:
            model: Response model to validate the JSON body against.
            *segments: Path segments below the prefix.
            json: JSON body to send.

        Returns:
            The parsed response model.
        """
        data = self._http.post(self._path(*segments), json=json)
        return model.model_validate(data)

    def _delete(self, model: type[ResponseT], *segments: str) -> ResponseT:
        """DELETE a resource below the prefix and parse the response.

        Args:
            model: Response model to validate the JSON body against.
            *segments: Path segments below the prefix.

        Returns:
            The parsed response model.
        """
        data = self._http.delete(self._path(*segments))
        return model.model_validate(data)


class AsyncBaseClient:
    """Base class for asynchronous resource sub-clients.

    Mirrors BaseClient with awaitable request helpers.

    Attributes:
        _http: The shared async HTTP client for making requests.
    """

    _BASE_PATH = ""

    def __init__(self, http_client: "AsyncHTTPClient") -> None:
        """Initialize the async sub-client.

        Args:
            http_client: The shared async HTTP client instance.
        """
        self._http = http_client

    def _path(self, *segments: str) -> str:
        return resource_path(self._BASE_PATH, *segments)

    async def _get(
        self,
        model: type[ResponseT],
        *segments: str,
        params: dict[str, Any] | None = None,
    ) -> ResponseT:
        """GET a resource below the prefix and parse the response.

        Args:
            model: Response model to validate the JSON body against.
            *segments: Path segments below the prefix.
            params: Query parameters; None values are dropped by the HTTP layer.

        Returns:
            The parsed response model.
        """
        data = await self._http.get(self._path(*segments), params=params)
        return model.model_validate(data)

    async def _post(
        self,
        model: type[ResponseT],
        *segments: str,
        json: dict[str, Any] | None = None,
    ) -> ResponseT:
        """POST a JSON body to the prefix and parse the response.

        Args:
            model: Response model to validate the JSON body against.
            *segments: Path segments below the prefix.
            json: JSON body to send.

        Returns:
            The parsed response model.
        """
        data = await self._http.post(self._path(*segments), json=json)
        return model.model_validate(data)

    async def _delete(self, model: type[ResponseT], *segments: str) -> ResponseT:
        """DELETE a resource below the prefix and parse the response.

        Args:
            model: Response model to validate the JSON body against.
            *segments: Path segments below the prefix.

        Returns:
            The parsed response model.
        """
        data = await self._http.delete(self._path(*segments))
        return model.model_validate(data)
