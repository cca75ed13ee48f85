"""
Fizzy MCP - exposes the Fizzy.do boards, cards and steps API as MCP tools.
"""

from .client import (
    ConfigurationError,
    FizzyAPIError,
    FizzyClient,
    FizzyError,
    LocationParseError,
)
from .config import FizzyConfig, load_config
from .logging_config import configure_logging
from .pipeline import Sequencing, StepItem, StepPipeline
from .tool_router import ClientCache, ToolRouter
from .tool_schemas import TOOLS

__all__ = [
    "FizzyClient",
    "FizzyError",
    "FizzyAPIError",
    "ConfigurationError",
    "LocationParseError",
    "FizzyConfig",
    "load_config",
    "TOOLS",
    "ToolRouter",
    "ClientCache",
    "StepPipeline",
    "StepItem",
    "Sequencing",
    "configure_logging",
]
