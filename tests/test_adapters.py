"""Tests for the ClickUp and Neon operation adapters."""

import pytest
from pydantic import ValidationError

from hrbuddy.tools.clickup import TOOLS as CLICKUP_TOOLS
from hrbuddy.tools.clickup import ClickUpAdapter, ClickUpOperation, CreateTaskParams
from hrbuddy.tools.mcp_client import McpSession
from hrbuddy.tools.neon import TOOLS as NEON_TOOLS
from hrbuddy.tools.neon import NeonAdapter, NeonOperation, UpdateDataParams
from tests.fakes import FakeMcpClient


@pytest.fixture
def clickup_client():
    return FakeMcpClient("https://clickup.example/mcp")


@pytest.fixture
def neon_client():
    return FakeMcpClient("https://neon.example/mcp")


@pytest.fixture
def clickup(clickup_client):
    return ClickUpAdapter(McpSession("https://clickup.example/mcp", "test", clickup_client))


@pytest.fixture
def neon(neon_client):
    return NeonAdapter(McpSession("https://neon.example/mcp", "test", neon_client))


def test_every_operation_has_a_tool():
    assert set(CLICKUP_TOOLS) == set(ClickUpOperation)
    assert set(NEON_TOOLS) == set(NeonOperation)


@pytest.mark.asyncio
async def test_create_task_sends_snake_case_tool(clickup, clickup_client):
    result = await clickup.create_task(CreateTaskParams(list_id="L1", name="Review resume"))

    assert clickup_client.calls == [("create_task", {"list_id": "L1", "name": "Review resume"})]
    assert result.text == "create_task ok"


@pytest.mark.asyncio
async def test_run_accepts_plain_dict(clickup, clickup_client):
    await clickup.run(ClickUpOperation.ADD_TASK_COMMENT, {"task_id": "T9", "comment_text": "Looks good"})

    assert clickup_client.calls == [("add_task_comment", {"task_id": "T9", "comment_text": "Looks good"})]


@pytest.mark.asyncio
async def test_missing_required_field_never_reaches_server(clickup, clickup_client):
    with pytest.raises(ValidationError):
        await clickup.get_task({})

    assert clickup_client.calls == []


@pytest.mark.asyncio
async def test_neon_arguments_use_camel_case(neon, neon_client):
    await neon.get_table_info({"tableName": "applicants", "schema": "public"})

    assert neon_client.calls == [("get_table_info", {"tableName": "applicants", "schema": "public"})]


@pytest.mark.asyncio
async def test_neon_params_model_dumps_aliases(neon, neon_client):
    await neon.insert_data({"table_name": "skills", "data": {"name": "Rust"}})

    assert neon_client.calls == [("insert_data", {"tableName": "skills", "data": {"name": "Rust"}})]


@pytest.mark.asyncio
async def test_get_schema_without_params(neon, neon_client):
    await neon.get_schema()

    assert neon_client.calls == [("get_schema", {})]


@pytest.mark.asyncio
async def test_update_without_filter_is_rejected(neon, neon_client):
    with pytest.raises(ValidationError):
        await neon.update_data({"tableName": "applicants", "data": {"status": "hired"}, "where": {}})

    assert neon_client.calls == []


@pytest.mark.asyncio
async def test_delete_without_filter_is_rejected(neon, neon_client):
    with pytest.raises(ValidationError):
        await neon.delete_data({"tableName": "applicants", "where": {}})

    assert neon_client.calls == []


def test_update_params_require_data():
    with pytest.raises(ValidationError):
        UpdateDataParams(table_name="applicants", data={}, where={"id": "a1"})


@pytest.mark.asyncio
async def test_execute_query_rejects_empty_sql(neon, neon_client):
    with pytest.raises(ValidationError):
        await neon.execute_query({"query": ""})

    assert neon_client.calls == []
