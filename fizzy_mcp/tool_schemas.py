"""MCP tool schema definitions for the Fizzy API.

This module contains only the tool definitions (pure data, no imports).
Each input_schema is plain JSON Schema, so the same contract can be
published to MCP clients and enforced by the server.
"""

CARD_NUMBER = {
    "type": "integer",
    "minimum": 1,
    "description": "The card number (the # shown in Fizzy, not the card id)",
}

# Tool definitions for MCP
TOOLS = [
    {
        "name": "fizzy_list_boards",
        "description": "List all Fizzy.do boards",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
    {
        "name": "fizzy_create_board",
        "description": "Create a new Fizzy.do board",
        "input_schema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "minLength": 1,
                    "maxLength": 100,
                    "description": "Name for the new board",
                },
            },
            "required": ["name"],
        },
    },
    {
        "name": "fizzy_list_cards",
        "description": "List cards, optionally filtered by board",
        "input_schema": {
            "type": "object",
            "properties": {
                "board_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Optional board ID to filter cards",
                },
            },
            "required": [],
        },
    },
    {
        "name": "fizzy_get_card",
        "description": "Get details of a card by its number, including its steps",
        "input_schema": {
            "type": "object",
            "properties": {"card_number": CARD_NUMBER},
            "required": ["card_number"],
        },
    },
    {
        "name": "fizzy_create_card",
        "description": "Create a new card in a board. The title is tagged with [Claude].",
        "input_schema": {
            "type": "object",
            "properties": {
                "board_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Board ID",
                },
                "title": {
                    "type": "string",
                    "minLength": 1,
                    "maxLength": 200,
                    "description": "Card title",
                },
                "description": {
                    "type": "string",
                    "maxLength": 10000,
                    "description": "Optional description (HTML)",
                },
            },
            "required": ["board_id", "title"],
        },
    },
    {
        "name": "fizzy_update_card",
        "description": "Update a card's title and/or description",
        "input_schema": {
            "type": "object",
            "properties": {
                "card_number": CARD_NUMBER,
                "title": {
                    "type": "string",
                    "minLength": 1,
                    "maxLength": 200,
                    "description": "New title (optional)",
                },
                "description": {
                    "type": "string",
                    "maxLength": 10000,
                    "description": "New description in HTML (optional)",
                },
            },
            "required": ["card_number"],
        },
    },
    {
        "name": "fizzy_add_steps",
        "description": "Add steps to a card",
        "input_schema": {
            "type": "object",
            "properties": {
                "card_number": CARD_NUMBER,
                "steps": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1, "maxLength": 500},
                    "minItems": 1,
                    "maxItems": 100,
                    "description": "Step contents",
                },
            },
            "required": ["card_number", "steps"],
        },
    },
    {
        "name": "fizzy_update_step",
        "description": "Update a step's completion status",
        "input_schema": {
            "type": "object",
            "properties": {
                "card_number": CARD_NUMBER,
                "step_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Step ID",
                },
                "completed": {
                    "type": "boolean",
                    "description": "Completed status",
                },
            },
            "required": ["card_number", "step_id", "completed"],
        },
    },
    {
        "name": "fizzy_delete_step",
        "description": "Delete a step from a card",
        "input_schema": {
            "type": "object",
            "properties": {
                "card_number": CARD_NUMBER,
                "step_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Step ID",
                },
            },
            "required": ["card_number", "step_id"],
        },
    },
    {
        "name": "fizzy_sync_todos",
        "description": "Create a [Claude]-tagged card holding the given todos as steps, in order",
        "input_schema": {
            "type": "object",
            "properties": {
                "board_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Board ID",
                },
                "card_title": {
                    "type": "string",
                    "minLength": 1,
                    "maxLength": 200,
                    "description": "Card title",
                },
                "todos": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "content": {
                                "type": "string",
                                "minLength": 1,
                                "maxLength": 500,
                                "description": "Todo text",
                            },
                            "completed": {
                                "type": "boolean",
                                "default": False,
                                "description": "Completed",
                            },
                        },
                        "required": ["content"],
                    },
                    "minItems": 1,
                    "maxItems": 100,
                    "description": "Todo items",
                },
            },
            "required": ["board_id", "card_title", "todos"],
        },
    },
    {
        "name": "fizzy_close_card",
        "description": "Close a card",
        "input_schema": {
            "type": "object",
            "properties": {"card_number": CARD_NUMBER},
            "required": ["card_number"],
        },
    },
    {
        "name": "fizzy_reopen_card",
        "description": "Reopen a closed card",
        "input_schema": {
            "type": "object",
            "properties": {"card_number": CARD_NUMBER},
            "required": ["card_number"],
        },
    },
    {
        "name": "fizzy_list_columns",
        "description": "List the columns of a board (targets for fizzy_triage_card)",
        "input_schema": {
            "type": "object",
            "properties": {
                "board_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Board ID",
                },
            },
            "required": ["board_id"],
        },
    },
    {
        "name": "fizzy_triage_card",
        "description": "Move a card into a column of its board",
        "input_schema": {
            "type": "object",
            "properties": {
                "card_number": CARD_NUMBER,
                "column_id": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Column ID (from fizzy_list_columns)",
                },
            },
            "required": ["card_number", "column_id"],
        },
    },
]
