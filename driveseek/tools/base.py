"""Tool interface and registry exposed to an agent's function calling."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class ToolResult:
    """Outcome of one tool call. `data` is JSON-serializable."""

    success: bool
    data: Any
    message: str

    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        return cls(success=False, data=None, message=message)

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message, "data": self.data}


class Tool(ABC):
    """A Drive operation an agent can call.

    `parameters` is the JSON schema sent to the model; its `required` list is
    enforced by the registry before execute() runs.
    """

    name: str
    description: str
    parameters: dict[str, Any]

    @property
    def required_parameters(self) -> list[str]:
        return list(self.parameters.get("required", []))

    @abstractmethod
    async def execute(self, **kwargs) -> ToolResult:
        """Run the tool with arguments matching `parameters`."""

    def to_openai_function(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ToolRegistry:
    """Looks tools up by name and runs them, never letting an error escape."""

    def __init__(self) -> None:
        self.tools: dict[str, Tool] = {}

    def __contains__(self, name: object) -> bool:
        return name in self.tools

    def register(self, tool: Tool) -> None:
        self.tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self.tools.get(name)

    async def execute(self, name: str, **kwargs) -> ToolResult:
        """Run a tool by name with keyword arguments."""
        tool = self.get(name)
        if tool is None:
            return ToolResult.failure(f"Unknown tool: {name}")

        missing = [p for p in tool.required_parameters if kwargs.get(p) is None]
        if missing:
            return ToolResult.failure(f"Missing required parameter(s) for {name}: {', '.join(missing)}")

        unknown = [k for k in kwargs if k not in tool.parameters.get("properties", {})]
        if unknown:
            return ToolResult.failure(f"Unknown parameter(s) for {name}: {', '.join(unknown)}")

        try:
            return await tool.execute(**kwargs)
        except Exception as e:
            logger.exception(f"Tool {name} failed")
            return ToolResult.failure(f"Tool error: {e}")

    async def execute_call(self, name: str, arguments: str | None) -> ToolResult:
        """Run a tool from a model tool call, whose arguments arrive as a JSON string."""
        try:
            kwargs = json.loads(arguments) if arguments else {}
        except json.JSONDecodeError as e:
            return ToolResult.failure(f"Arguments for {name} are not valid JSON: {e}")
        if not isinstance(kwargs, dict):
            return ToolResult.failure(f"Arguments for {name} must be a JSON object")
        return await self.execute(name, **kwargs)

    def get_openai_tools(self) -> list[dict]:
        """Function definitions for every registered tool, in registration order."""
        return [tool.to_openai_function() for tool in self.tools.values()]
