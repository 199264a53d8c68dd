"""LLM service for Ollama integration."""

import json
import logging
from typing import Any

import httpx

from pantry_assistant.config import get_settings

logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """Remove markdown code blocks wrapped around a JSON answer."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class LLMService:
    """Service for interacting with Ollama LLM."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.ollama_base_url
        self.model = self.settings.llm_model
        self.timeout = self.settings.llm_timeout_seconds

    async def _chat(self, payload: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(f"{self.base_url}/api/chat", json=payload)
            response.raise_for_status()
            return response.json()

    @staticmethod
    def _messages(prompt: str, system_prompt: str | None) -> list[dict[str, str]]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def generate_tool_call(
        self,
        prompt: str,
        system_prompt: str,
        tool: dict[str, Any],
        temperature: float = 0.1,
    ) -> dict[str, Any]:
        """Ask the model to answer through a single function tool.

        Returns the tool-call arguments as a dict. Models that ignore the tool
        and answer with plain JSON content are accepted too.

        Raises:
            httpx.HTTPError: Ollama unreachable or returned an error status
            ValueError: no tool call and no JSON object in the answer
        """
        tool_name = tool["function"]["name"]
        try:
            data = await self._chat(
                {
                    "model": self.model,
                    "messages": self._messages(prompt, system_prompt),
                    "tools": [tool],
                    "stream": False,
                    "options": {"temperature": temperature},
                }
            )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Ollama: {e}")
            raise

        message = data.get("message") or {}
        for call in message.get("tool_calls") or []:
            function = call.get("function") or {}
            if function.get("name") not in (None, tool_name):
                continue
            arguments = function.get("arguments")
            if isinstance(arguments, str):
                arguments = json.loads(strip_code_fences(arguments))
            if isinstance(arguments, dict):
                return arguments

        content = strip_code_fences(message.get("content") or "")
        if content:
            try:
                parsed = json.loads(content)
            except json.JSONDecodeError:
                logger.warning(f"Model answered without a tool call: {content[:200]}")
            else:
                if isinstance(parsed, dict):
                    return parsed

        raise ValueError(f"No '{tool_name}' tool call in model response")
