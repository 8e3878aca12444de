"""MCP integration checks via SDK stdio client."""

from __future__ import annotations

import json
import sys
from typing import Any

import pytest
from mcp.client.session import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client


def _payload_from_call_result(result: Any) -> dict[str, Any]:
    structured = getattr(result, "structuredContent", None)
    if isinstance(structured, dict):
        return structured

    for block in getattr(result, "content", []):
        text = getattr(block, "text", None)
        if isinstance(text, str) and text.strip():
            try:
                payload = json.loads(text)
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict):
                return payload

    raise AssertionError("Call result did not include a JSON object payload")


@pytest.mark.asyncio
async def test_mcp_tools_registered_and_callable(package_root, cli_env, vanished_pid) -> None:
    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "gracekill", "serve"],
        env=cli_env,
        cwd=package_root,
    )

    async with stdio_client(params) as (read_stream, write_stream), ClientSession(
        read_stream, write_stream
    ) as session:
        await session.initialize()

        listed = await session.list_tools()
        names = {tool.name for tool in listed.tools}
        assert names == {"kill", "probe"}

        probed = await session.call_tool("probe", {"pids": [vanished_pid]})
        assert probed.isError is False
        probe_payload = _payload_from_call_result(probed)
        assert probe_payload["results"][0]["alive"] is False

        killed = await session.call_tool(
            "kill",
            {"pids": [vanished_pid, 0], "grace_seconds": 1},
        )
        assert killed.isError is False
        kill_payload = _payload_from_call_result(killed)
        assert kill_payload["unsignalable_count"] == 2
        assert kill_payload["exit_status"] == 2
