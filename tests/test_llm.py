"""Tests for the Ollama tool-call wrapper."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from pantry_assistant.services.llm import LLMService, strip_code_fences
from pantry_assistant.services.llm_prompts import ASSISTANT_TOOL

ARGUMENTS = {"action": "add_item", "payload": {"items": [{"name": "milk"}]}, "speak": "Added."}


def chat_response(content: str = "", tool_calls: list | None = None) -> dict:
    message = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    return {"message": message}


def tool_call(arguments, name: str = "pantry_assistant_response") -> dict:
    return {"function": {"name": name, "arguments": arguments}}


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


@pytest.mark.asyncio
async def test_tool_call_with_dict_arguments():
    service = LLMService()
    response = chat_response(tool_calls=[tool_call(ARGUMENTS)])
    with patch.object(service, "_chat", AsyncMock(return_value=response)) as chat:
        result = await service.generate_tool_call("add milk", "system", ASSISTANT_TOOL)

    assert result == ARGUMENTS
    payload = chat.call_args.args[0]
    assert payload["tools"] == [ASSISTANT_TOOL]
    assert payload["stream"] is False
    assert payload["messages"][0] == {"role": "system", "content": "system"}


@pytest.mark.asyncio
async def test_tool_call_with_string_arguments():
    service = LLMService()
    response = chat_response(tool_calls=[tool_call(json.dumps(ARGUMENTS))])
    with patch.object(service, "_chat", AsyncMock(return_value=response)):
        result = await service.generate_tool_call("add milk", "system", ASSISTANT_TOOL)

    assert result == ARGUMENTS


@pytest.mark.asyncio
async def test_other_tools_are_ignored():
    service = LLMService()
    response = chat_response(tool_calls=[tool_call({"x": 1}, name="weather"), tool_call(ARGUMENTS)])
    with patch.object(service, "_chat", AsyncMock(return_value=response)):
        result = await service.generate_tool_call("add milk", "system", ASSISTANT_TOOL)

    assert result == ARGUMENTS


@pytest.mark.asyncio
async def test_json_content_fallback():
    service = LLMService()
    response = chat_response(content=f"```json\n{json.dumps(ARGUMENTS)}\n```")
    with patch.object(service, "_chat", AsyncMock(return_value=response)):
        result = await service.generate_tool_call("add milk", "system", ASSISTANT_TOOL)

    assert result == ARGUMENTS


@pytest.mark.asyncio
async def test_no_tool_call_raises_value_error():
    service = LLMService()
    with patch.object(service, "_chat", AsyncMock(return_value=chat_response(content="Sure thing!"))):
        with pytest.raises(ValueError):
            await service.generate_tool_call("add milk", "system", ASSISTANT_TOOL)


@pytest.mark.asyncio
async def test_bad_argument_json_raises():
    service = LLMService()
    response = chat_response(tool_calls=[tool_call("{not json")])
    with patch.object(service, "_chat", AsyncMock(return_value=response)):
        with pytest.raises(json.JSONDecodeError):
            await service.generate_tool_call("add milk", "system", ASSISTANT_TOOL)
