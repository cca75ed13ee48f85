"""
Fizzy API Client implementation.
"""

import logging
import os
import re
from typing import Any, TypedDict
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://app.fizzy.do"

LOOPBACK_HOSTS = {"localhost", "127.0.0.1"}

BOARD_LOCATION = re.compile(r"/boards/([^/.]+)")
CARD_LOCATION = re.compile(r"/cards/(\d+)")
STEP_LOCATION = re.compile(r"/steps/([^/]+)\.json")


class Account(TypedDict):
    id: str
    name: str
    slug: str
    created_at: str


class Board(TypedDict):
    id: str
    name: str
    all_access: bool
    created_at: str
    url: str


class Step(TypedDict):
    id: str
    content: str
    completed: bool


class Card(TypedDict, total=False):
    id: str
    number: int
    title: str
    status: str
    description: str
    description_html: str
    closed: bool
    golden: bool
    last_active_at: str
    created_at: str
    url: str
    steps: list[Step]


class Column(TypedDict):
    id: str
    name: str
    color: str
    created_at: str


class FizzyError(Exception):
    """Base class for errors raised by the Fizzy client."""


class ConfigurationError(FizzyError):
    """Raised when the client cannot be used with the given settings."""


class FizzyAPIError(FizzyError):
    """Exception raised for non-2xx Fizzy API responses and transport failures."""

    def __init__(self, message: str, status_code: int | None = None, reason: str = ""):
        self.message = message
        self.status_code = status_code
        self.reason = reason
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code:
            status = f"{self.status_code} {self.reason}".strip()
            return f"{self.message} [HTTP {status}]"
        return self.message


class LocationParseError(FizzyError):
    """Raised when a created resource's id cannot be read from the Location header."""


def is_dev_mode() -> bool:
    """Development mode relaxes the HTTPS requirement (FIZZY_ENV=development)."""
    return os.getenv("FIZZY_ENV", "").lower() == "development"


def is_loopback_url(url: str) -> bool:
    """Check the parsed hostname, not a substring, so evil-localhost.example.com fails."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    return hostname in LOOPBACK_HOSTS


def extract_from_location(location: str | None, pattern: re.Pattern) -> str:
    """
    Pull a resource identifier out of a creation response's Location header.

    Raises:
        LocationParseError: If the header is missing or does not match
    """
    if not location:
        raise LocationParseError("Failed to get location from response")
    match = pattern.search(location)
    if not match:
        raise LocationParseError("Failed to parse ID from location")
    return match.group(1)


class FizzyClient:
    """
    Async Python client for the Fizzy API.

    Example:
        >>> client = FizzyClient(token="...", base_url="https://app.fizzy.do")
        >>> boards = await client.list_boards()
        >>> card_number = await client.create_card(boards[0]["id"], "Write docs")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        dev_mode: bool | None = None,
    ):
        """
        Initialize the Fizzy API client.

        Args:
            token: Personal access token sent as a bearer token
            base_url: The base URL of the Fizzy API (must be HTTPS outside localhost)
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport, mainly for tests
            dev_mode: Skip the HTTPS check; defaults to FIZZY_ENV=development

        Raises:
            ConfigurationError: If base_url is not HTTPS and not a loopback address
        """
        if dev_mode is None:
            dev_mode = is_dev_mode()
        if not (dev_mode or is_loopback_url(base_url) or base_url.startswith("https://")):
            raise ConfigurationError("Fizzy API URL must use HTTPS for security")

        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._account_slug: str | None = None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "FizzyClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        return_location: bool = False,
    ) -> Any:
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API path (e.g., "/1234/boards")
            json: JSON body; Content-Type is only set when a body is present
            params: Query parameters
            return_location: Also return the Location response header

        Returns:
            The decoded body ({} for 204 or an unparsable body), or a
            (body, location) tuple when return_location is set

        Raises:
            FizzyAPIError: On a non-2xx response or a transport failure
        """
        try:
            response = await self._client.request(method, endpoint, json=json, params=params)
        except httpx.RequestError as e:
            raise FizzyAPIError(f"Request failed: {e}") from e

        if not response.is_success:
            raise FizzyAPIError(
                message="Fizzy API error",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        data: Any = {}
        if response.status_code != 204:
            try:
                data = response.json()
            except ValueError:
                logger.debug(f"No JSON body in response to {method} {endpoint}")

        if return_location:
            return data, response.headers.get("location")
        return data

    async def _post_with_location(self, endpoint: str, json: dict[str, Any]) -> str | None:
        _, location = await self._request("POST", endpoint, json=json, return_location=True)
        return location

    # =========================================================================
    # Account Methods
    # =========================================================================

    async def get_account_slug(self) -> str:
        """
        Resolve the account slug used to prefix every resource endpoint.

        The first call looks up the token's identity; the first account's
        slug is cached for the lifetime of this client.

        Raises:
            ConfigurationError: If the token has no accounts
        """
        if self._account_slug:
            return self._account_slug

        identity = await self._request("GET", "/my/identity")
        accounts = identity.get("accounts") if isinstance(identity, dict) else None
        if not accounts:
            raise ConfigurationError("No Fizzy accounts found for this token")
        if len(accounts) > 1:
            logger.warning(f"Token has access to {len(accounts)} accounts, using the first one")

        self._account_slug = str(accounts[0]["slug"]).strip("/")
        return self._account_slug

    async def _endpoint(self, path: str) -> str:
        slug = await self.get_account_slug()
        return f"/{slug}{path}"

    # =========================================================================
    # Board Methods
    # =========================================================================

    async def list_boards(self) -> list[Board]:
        """List all boards in the account."""
        return await self._request("GET", await self._endpoint("/boards"))

    async def get_board(self, board_id: str) -> Board:
        return await self._request("GET", await self._endpoint(f"/boards/{board_id}"))

    async def create_board(self, name: str) -> Board:
        """
        Create a board and return its full representation.

        The id is read from the Location header and the board is fetched again.

        Raises:
            LocationParseError: If the Location header is missing or malformed
        """
        location = await self._post_with_location(await self._endpoint("/boards"), {"board": {"name": name}})
        board_id = extract_from_location(location, BOARD_LOCATION)
        return await self.get_board(board_id)

    async def find_board_by_name(self, name: str) -> Board | None:
        """Return the first board whose name matches exactly, or None."""
        for board in await self.list_boards():
            if board["name"] == name:
                return board
        return None

    async def get_columns(self, board_id: str) -> list[Column]:
        return await self._request("GET", await self._endpoint(f"/boards/{board_id}/columns"))

    # =========================================================================
    # Card Methods
    # =========================================================================

    async def list_cards(self, board_ids: list[str] | None = None) -> list[Card]:
        """
        List cards, optionally restricted to some boards.

        Args:
            board_ids: Board ids sent as repeated board_ids[] query parameters
        """
        params = {"board_ids[]": board_ids} if board_ids else None
        return await self._request("GET", await self._endpoint("/cards"), params=params)

    async def get_card(self, card_number: int) -> Card:
        return await self._request("GET", await self._endpoint(f"/cards/{card_number}"))

    async def create_card(self, board_id: str, title: str, description: str | None = None) -> int:
        """
        Create a card on a board.

        Args:
            board_id: The id of the board
            title: Card title
            description: Card description (optional, omitted when empty)

        Returns:
            The new card's number

        Raises:
            LocationParseError: If the card number cannot be read from the Location header
        """
        card: dict[str, Any] = {"title": title}
        if description:
            card["description"] = description
        location = await self._post_with_location(await self._endpoint(f"/boards/{board_id}/cards"), {"card": card})
        return int(extract_from_location(location, CARD_LOCATION))

    async def update_card(
        self,
        card_number: int,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        """Update card fields. Only the fields given are sent."""
        data = {}
        if title is not None:
            data["title"] = title
        if description is not None:
            data["description"] = description

        await self._request("PUT", await self._endpoint(f"/cards/{card_number}"), json={"card": data})

    async def close_card(self, card_number: int) -> None:
        """Close a card by creating its closure record."""
        await self._request("POST", await self._endpoint(f"/cards/{card_number}/closure"))

    async def reopen_card(self, card_number: int) -> None:
        """Reopen a closed card by deleting its closure record."""
        await self._request("DELETE", await self._endpoint(f"/cards/{card_number}/closure"))

    async def triage_card(self, card_number: int, column_id: str) -> None:
        """Move a card into a column."""
        await self._request(
            "POST",
            await self._endpoint(f"/cards/{card_number}/triage"),
            json={"column_id": column_id},
        )

    # =========================================================================
    # Step Methods
    # =========================================================================

    async def add_step(self, card_number: int, content: str) -> str:
        """
        Add a step to a card.

        Returns:
            The new step's id

        Raises:
            LocationParseError: If the step id cannot be read from the Location header
        """
        location = await self._post_with_location(
            await self._endpoint(f"/cards/{card_number}/steps"),
            {"step": {"content": content}},
        )
        return extract_from_location(location, STEP_LOCATION)

    async def update_step(self, card_number: int, step_id: str, completed: bool) -> None:
        await self._request(
            "PUT",
            await self._endpoint(f"/cards/{card_number}/steps/{step_id}"),
            json={"step": {"completed": completed}},
        )

    async def delete_step(self, card_number: int, step_id: str) -> None:
        await self._request("DELETE", await self._endpoint(f"/cards/{card_number}/steps/{step_id}"))
