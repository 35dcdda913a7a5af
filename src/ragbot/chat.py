"""Chat session driving the local model with automatic tool calling."""

import logging
import time
from typing import Any, Dict, List, Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.tools import BaseTool

from ragbot.config import config
from ragbot.geo.resolver import GeoResolver
from ragbot.prompts import SYSTEM_PROMPT, TOOL_LIMIT_MESSAGE, UNKNOWN_TOOL_MESSAGE
from ragbot.utils import log_timing, log_with_prefix
from ragbot.weather.tool import WeatherTool

logger = logging.getLogger(__name__)

__all__ = ["ChatSession", "build_chat_session", "build_weather_tool"]


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    # Multi-part content: keep the text blocks
    parts = [p if isinstance(p, str) else p.get("text", "") for p in content]
    return "".join(parts)


class ChatSession:
    """Accumulated chat history plus a tool-bound chat model.

    Each `ask` sends the whole history, lets the model call tools (the model
    decides), and returns the final assistant turn.
    """

    def __init__(self, llm: Any, tools: Sequence[BaseTool] = (), system_prompt: str = SYSTEM_PROMPT, max_tool_rounds: int = 5):
        self.tools: Dict[str, BaseTool] = {t.name: t for t in tools}
        self.llm = llm.bind_tools(list(tools)) if tools else llm
        self.max_tool_rounds = max_tool_rounds
        self.history: List[BaseMessage] = [SystemMessage(content=system_prompt)] if system_prompt else []

    async def _run_tool(self, call: Dict[str, Any]) -> ToolMessage:
        name = call["name"]
        selected = self.tools.get(name)
        if selected is None:
            log_with_prefix(logger, logging.WARNING, "ChatSession", f"Model requested unknown tool {name}")
            return ToolMessage(content=UNKNOWN_TOOL_MESSAGE.format(name=name), name=name, tool_call_id=call["id"])

        log_with_prefix(logger, logging.INFO, "ChatSession", f"Calling {name} with {call['args']}")
        result = await selected.ainvoke(call["args"])
        return ToolMessage(content=str(result), name=name, tool_call_id=call["id"])

    async def ask(self, text: str) -> str:
        start = time.time()
        self.history.append(HumanMessage(content=text))

        reply = await self.llm.ainvoke(self.history)
        self.history.append(reply)

        rounds = 0
        while getattr(reply, "tool_calls", None) and rounds < self.max_tool_rounds:
            rounds += 1
            for call in reply.tool_calls:
                self.history.append(await self._run_tool(call))
            reply = await self.llm.ainvoke(self.history)
            self.history.append(reply)

        # Out of rounds: answer the pending calls so the history stays well-formed
        for call in getattr(reply, "tool_calls", None) or []:
            self.history.append(
                ToolMessage(content=TOOL_LIMIT_MESSAGE.format(name=call["name"]), name=call["name"], tool_call_id=call["id"])
            )

        log_timing(logger, "ChatSession", start, f"Answered after {rounds} tool round(s)")
        return _message_text(reply)


def build_weather_tool() -> WeatherTool:
    """Wire the weather tool and its resolver from the global configuration."""
    from ragbot.vectorstore.chroma_memory import build_memory_store
    from ragbot.weather.openweather import build_client

    client = build_client()
    resolver = GeoResolver(build_memory_store(), client, config.openweather_api_key, memory_timeout=config.request_timeout)
    return WeatherTool(resolver, client, config.openweather_api_key)


def build_chat_session() -> ChatSession:
    """Create a chat session against the configured Ollama model with the weather tool bound."""
    from langchain_ollama import ChatOllama

    llm = ChatOllama(model=config.ollama_model, base_url=config.ollama_base_url, temperature=0)
    return ChatSession(llm, [build_weather_tool().as_tool()])
