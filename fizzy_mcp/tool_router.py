"""Tool router for MCP tools using the Fizzy API client.

Every call re-reads the credentials, validates the arguments against the
tool's schema, dispatches to the client and wraps the outcome in the MCP
tool response envelope. Errors never escape ``ToolRouter.call``; they are
turned into short messages that do not expose upstream details.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from .client import ConfigurationError, FizzyAPIError, FizzyClient, LocationParseError
from .config import FizzyConfig, load_config
from .pipeline import StepItem, StepPipeline
from .validation import INPUT_MODELS, format_validation_error, validate_tool_input

logger = logging.getLogger(__name__)

CARD_TITLE_PREFIX = "[Claude] "

NOT_CONFIGURED_MESSAGE = (
    "Fizzy.do is not configured. Set FIZZY_TOKEN or save your API token to "
    "~/.claude/plugins/fizzy/config.json.\n\n"
    "Get your token from: https://app.fizzy.do/settings"
)

SERVICE_ERROR_MESSAGE = "An error occurred with the Fizzy service"
UNKNOWN_ERROR_MESSAGE = "An error occurred while processing your request"

STATUS_MESSAGES = {
    401: "Authentication failed",
    403: "Access denied",
    404: "Resource not found",
    429: "Rate limit exceeded",
}

REASON_MESSAGES = {
    "unauthorized": "Authentication failed",
    "forbidden": "Access denied",
    "not found": "Resource not found",
}


# --- Response Formatting ---


def _text(content: Any) -> dict[str, Any]:
    """Wrap content in MCP tool response format."""
    text = json.dumps(content, indent=2) if isinstance(content, (dict, list)) else str(content)
    return {"content": [{"type": "text", "text": text}]}


def _error(message: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": message}], "isError": True}


def sanitize_api_error(error: FizzyAPIError) -> str:
    """Map an API error to a message that is safe to show the calling agent."""
    status = error.status_code
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    reason = (error.reason or "").lower()
    if reason in REASON_MESSAGES:
        return REASON_MESSAGES[reason]
    if status is None:
        return SERVICE_ERROR_MESSAGE
    if status >= 500:
        return "Fizzy service temporarily unavailable"
    if status >= 400:
        return "Request to Fizzy failed"
    return SERVICE_ERROR_MESSAGE


class ClientCache:
    """Holds one client for the most recently seen token.

    The client is rebuilt only when the resolved token changes; a failed
    construction leaves the cached pair as it was.
    """

    def __init__(self, client_factory: Callable[..., FizzyClient] = FizzyClient):
        self._client_factory = client_factory
        self._token: str | None = None
        self._client: FizzyClient | None = None

    @property
    def token(self) -> str | None:
        return self._token

    async def get(self, config: FizzyConfig) -> FizzyClient | None:
        """
        Return the client for config.token, or None when there is no token.

        Raises:
            ConfigurationError: If a new client cannot be built (e.g. insecure URL)
        """
        if config.token == self._token:
            return self._client

        client = self._client_factory(token=config.token, base_url=config.url) if config.token else None
        previous = self._client
        self._token, self._client = config.token, client
        if previous is not None:
            logger.info("Fizzy token changed, replacing API client")
            await previous.aclose()
        return client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._token, self._client = None, None


class ToolRouter:
    """Routes tool calls to the Fizzy API client."""

    def __init__(
        self,
        cache: ClientCache | None = None,
        config_loader: Callable[[], FizzyConfig] = load_config,
    ):
        self.cache = cache or ClientCache()
        self.config_loader = config_loader

    async def call(self, tool_name: str, tool_input: dict[str, Any] | None) -> dict[str, Any]:
        """
        Execute a tool call and return the MCP response envelope.

        Args:
            tool_name: Name of the tool to execute
            tool_input: Input arguments for the tool

        Returns:
            ``{"content": [{"type": "text", "text": ...}]}`` with
            ``"isError": True`` added on failure
        """
        try:
            client = await self.cache.get(self.config_loader())
        except ConfigurationError as e:
            logger.warning(f"Fizzy client configuration rejected: {e}")
            return _error(str(e))

        if client is None:
            return _error(NOT_CONFIGURED_MESSAGE)

        if tool_name not in INPUT_MODELS:
            return _error(f"Unknown tool: {tool_name}")

        try:
            args = validate_tool_input(tool_name, tool_input)
            return await self._dispatch(client, tool_name, args)
        except ValidationError as e:
            return _error(format_validation_error(e))
        except ConfigurationError as e:
            logger.warning(f"{tool_name}: {e}")
            return _error(str(e))
        except FizzyAPIError as e:
            logger.warning(f"{tool_name}: {e}")
            return _error(sanitize_api_error(e))
        except LocationParseError as e:
            logger.warning(f"{tool_name}: {e}")
            return _error(SERVICE_ERROR_MESSAGE)
        except Exception as e:
            logger.error(f"{tool_name}: unexpected error: {e}", exc_info=True)
            return _error(UNKNOWN_ERROR_MESSAGE)

    async def _dispatch(self, client: FizzyClient, tool_name: str, args: BaseModel) -> dict[str, Any]:  # noqa: C901
        match tool_name:
            case "fizzy_list_boards":
                return _text(await client.list_boards())

            case "fizzy_create_board":
                board = await client.create_board(args.name)
                return _text(f'Created board "{board["name"]}" (ID: {board["id"]})')

            case "fizzy_list_cards":
                cards = await client.list_cards([args.board_id] if args.board_id else None)
                return _text(
                    [
                        {
                            "number": card.get("number"),
                            "title": card.get("title"),
                            "status": card.get("status"),
                            "closed": card.get("closed"),
                            "url": card.get("url"),
                        }
                        for card in cards
                    ]
                )

            case "fizzy_get_card":
                return _text(await client.get_card(args.card_number))

            case "fizzy_create_card":
                title = f"{CARD_TITLE_PREFIX}{args.title}"
                card_number = await client.create_card(args.board_id, title, args.description)
                return _text(f'Created card #{card_number} with title "{title}"')

            case "fizzy_update_card":
                await client.update_card(args.card_number, title=args.title, description=args.description)
                return _text(f"Updated card #{args.card_number}")

            case "fizzy_add_steps":
                await StepPipeline.add_steps(args.steps).run(client, args.card_number)
                return _text(f"Added {len(args.steps)} steps to card #{args.card_number}")

            case "fizzy_update_step":
                await client.update_step(args.card_number, args.step_id, args.completed)
                state = "completed" if args.completed else "incomplete"
                return _text(f"Updated step {args.step_id} on card #{args.card_number} to {state}")

            case "fizzy_delete_step":
                await client.delete_step(args.card_number, args.step_id)
                return _text(f"Deleted step {args.step_id} from card #{args.card_number}")

            case "fizzy_sync_todos":
                title = f"{CARD_TITLE_PREFIX}{args.card_title}"
                card_number = await client.create_card(args.board_id, title)
                todos = [StepItem(todo.content, todo.completed) for todo in args.todos]
                await StepPipeline.sync_todos(todos).run(client, card_number)
                return _text(f'Synced {len(todos)} todos to card #{card_number} "{title}"')

            case "fizzy_close_card":
                await client.close_card(args.card_number)
                return _text(f"Closed card #{args.card_number}")

            case "fizzy_reopen_card":
                await client.reopen_card(args.card_number)
                return _text(f"Reopened card #{args.card_number}")

            case "fizzy_list_columns":
                return _text(await client.get_columns(args.board_id))

            case "fizzy_triage_card":
                await client.triage_card(args.card_number, args.column_id)
                return _text(f"Moved card #{args.card_number} to column {args.column_id}")

            case _:
                raise ValueError(f"Unknown tool: {tool_name}")
