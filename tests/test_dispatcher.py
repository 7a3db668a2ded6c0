import pytest
from redmine_mcp.core.client import RedmineHTTPError
from redmine_mcp.core.dispatcher import ToolDispatcher
from redmine_mcp.core.errors import ErrorKind
from redmine_mcp.core.results import Failure, Success


@pytest.mark.asyncio
async def test_unknown_tool_is_method_not_found(dispatcher, fake_client):
    result = await dispatcher.invoke("does_not_exist", {})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.METHOD_NOT_FOUND
    assert "does_not_exist" in result.message
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_missing_required_field_never_reaches_backend(catalog, fake_client):
    built = []

    def provider():
        built.append(True)
        return fake_client

    dispatcher = ToolDispatcher(catalog, provider)
    result = await dispatcher.invoke("get_issue", {})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS
    assert "id" in result.message
    assert fake_client.calls == []
    assert built == []


@pytest.mark.asyncio
async def test_exactly_required_fields_pass_through_unmodified(
    dispatcher, fake_client
):
    fake_client.responses[("POST", "issues.json")] = {
        "issue": {"id": 1, "subject": "Broken login"}
    }

    result = await dispatcher.invoke(
        "create_issue", {"project_id": 3, "subject": "Broken login"}
    )

    assert isinstance(result, Success)
    assert result.payload == {"item": {"id": 1, "subject": "Broken login"}}
    [call] = fake_client.calls
    assert call.method == "POST"
    assert call.path == "issues.json"
    assert call.json == {"issue": {"project_id": 3, "subject": "Broken login"}}


@pytest.mark.asyncio
async def test_undeclared_property_is_rejected(dispatcher, fake_client):
    result = await dispatcher.invoke("get_issue", {"id": 1, "verbose": True})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS
    assert "verbose" in result.message
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_wrong_type_is_rejected(dispatcher, fake_client):
    result = await dispatcher.invoke("get_issue", {"id": "12"})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_boolean_is_not_a_number(dispatcher, fake_client):
    result = await dispatcher.invoke("get_user", {"id": True})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS


@pytest.mark.asyncio
async def test_non_object_arguments_are_rejected(dispatcher):
    result = await dispatcher.invoke("get_issue", ["id", 1])

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS


@pytest.mark.asyncio
async def test_none_arguments_treated_as_empty(dispatcher, fake_client):
    fake_client.responses[("GET", "users/current.json")] = {
        "user": {"id": 5, "login": "jsmith"}
    }

    result = await dispatcher.invoke("get_current_user", None)

    assert isinstance(result, Success)
    assert result.payload == {"item": {"id": 5, "login": "jsmith"}}


@pytest.mark.asyncio
@pytest.mark.parametrize("project_ref", [42, "acme-widgets"])
async def test_project_accepts_numeric_id_or_slug(
    dispatcher, fake_client, project_ref
):
    fake_client.responses[("GET", f"projects/{project_ref}.json")] = {
        "project": {"id": 42, "identifier": "acme-widgets"}
    }

    result = await dispatcher.invoke("get_project", {"id": project_ref})

    assert isinstance(result, Success)
    assert fake_client.calls[0].path == f"projects/{project_ref}.json"


@pytest.mark.asyncio
async def test_done_ratio_out_of_range_is_invalid_params(dispatcher, fake_client):
    result = await dispatcher.invoke("update_issue", {"id": 7, "done_ratio": 150})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INVALID_PARAMS
    assert "between 0 and 100" in result.message
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_done_ratio_in_range_is_forwarded(dispatcher, fake_client):
    result = await dispatcher.invoke("update_issue", {"id": 7, "done_ratio": 55})

    assert isinstance(result, Success)
    [call] = fake_client.calls
    assert call.method == "PUT"
    assert call.path == "issues/7.json"
    assert call.json == {"issue": {"done_ratio": 55}}


@pytest.mark.asyncio
async def test_backend_error_text_is_preserved(dispatcher, fake_client):
    fake_client.error = RedmineHTTPError(
        status_code=404, method="GET", url="issues/999.json", message="Not Found"
    )

    result = await dispatcher.invoke("get_issue", {"id": 999})

    assert result == Failure(ErrorKind.INTERNAL_ERROR, "Not Found")
    assert result.to_envelope() == {
        "success": False,
        "errorKind": "InternalError",
        "message": "Not Found",
    }


@pytest.mark.asyncio
async def test_unexpected_exception_is_normalized(dispatcher, fake_client):
    fake_client.error = RuntimeError()

    result = await dispatcher.invoke("get_issue", {"id": 1})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INTERNAL_ERROR
    assert result.message == "Internal error while executing get_issue"


@pytest.mark.asyncio
async def test_malformed_backend_response_is_internal_error(dispatcher, fake_client):
    fake_client.responses[("GET", "issues/1.json")] = {"unexpected": True}

    result = await dispatcher.invoke("get_issue", {"id": 1})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.INTERNAL_ERROR
    assert "'issue'" in result.message


@pytest.mark.asyncio
async def test_client_provider_failure_is_internal_error(catalog):
    def provider():
        raise RuntimeError("No Redmine configuration available.")

    dispatcher = ToolDispatcher(catalog, provider)
    result = await dispatcher.invoke("get_issue", {"id": 1})

    assert result == Failure(
        ErrorKind.INTERNAL_ERROR, "No Redmine configuration available."
    )


@pytest.mark.asyncio
async def test_list_time_entries_end_to_end(dispatcher, fake_client):
    entries = [{"id": i, "hours": 1.5} for i in range(3)]
    fake_client.responses[("GET", "time_entries.json")] = {
        "time_entries": entries,
        "total_count": 3,
        "offset": 0,
        "limit": 10,
    }

    result = await dispatcher.invoke("list_time_entries", {"user_id": 7, "limit": 10})

    assert isinstance(result, Success)
    assert result.payload == {
        "items": entries,
        "total_count": 3,
        "offset": 0,
        "limit": 10,
    }
    assert fake_client.calls[0].params == {"user_id": 7, "limit": 10}


@pytest.mark.asyncio
async def test_success_is_rendered_as_pretty_json_text(dispatcher, fake_client):
    fake_client.responses[("GET", "issues/1.json")] = {"issue": {"id": 1}}

    result = await dispatcher.invoke("get_issue", {"id": 1})

    assert result.content() == [
        {"type": "text", "text": '{\n  "item": {\n    "id": 1\n  }\n}'}
    ]


@pytest.mark.asyncio
async def test_delete_returns_plain_confirmation(dispatcher, fake_client):
    result = await dispatcher.invoke("delete_time_entry", {"id": 12})

    assert isinstance(result, Success)
    assert result.text == "Time entry 12 has been deleted"
    assert fake_client.calls[0].method == "DELETE"
    assert fake_client.calls[0].path == "time_entries/12.json"


@pytest.mark.asyncio
async def test_failure_leaves_dispatcher_usable(dispatcher, fake_client):
    fake_client.error = RuntimeError("boom")
    first = await dispatcher.invoke("get_issue", {"id": 1})
    fake_client.error = None
    fake_client.responses[("GET", "issues/1.json")] = {"issue": {"id": 1}}
    second = await dispatcher.invoke("get_issue", {"id": 1})

    assert isinstance(first, Failure)
    assert isinstance(second, Success)


def test_list_operations_is_stable(dispatcher):
    assert dispatcher.list_operations() == dispatcher.list_operations()
