import httpx

from supa_admin.app.application.errors import FormValidationError, LoadError
from supa_admin.app.infrastructure.errors.error_mapper import ErrorMapper
from supa_admin.app.ui.components.error_banner import ErrorBanner
from supa_admin.clients.supabase_sdk.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RemoteError,
    ServerError,
    from_http_response,
    map_error,
)


def test_map_error_picks_subclass_by_status() -> None:
    assert isinstance(map_error(401, {"msg": "Invalid JWT"}, None), AuthError)
    assert isinstance(map_error(403, {"message": "denied"}, None), PermissionDeniedError)
    assert isinstance(map_error(406, {}, None), NotFoundError)
    assert isinstance(map_error(409, {"code": "23505", "message": "duplicate key"}, None), ConflictError)
    assert isinstance(map_error(503, "upstream down", None), ServerError)
    assert type(map_error(400, {"error": "invalid_grant", "error_description": "Invalid login"}, None)) is RemoteError


def test_map_error_message_and_code_sources() -> None:
    error = map_error(400, {"error": "invalid_grant", "error_description": "Invalid login credentials"}, "trace-1")

    assert error.code == "invalid_grant"
    assert error.message == "Invalid login credentials"
    assert error.trace_id == "trace-1"
    assert error.status_code == 400


def test_from_http_response_reads_request_id() -> None:
    response = httpx.Response(
        409,
        json={"code": "23505", "message": "duplicate key value violates unique constraint"},
        headers={"sb-request-id": "req-9"},
    )

    error = from_http_response(response)

    assert isinstance(error, ConflictError)
    assert error.trace_id == "req-9"
    assert "duplicate key" in error.message


def test_payload_for_remote_error_keeps_message_verbatim() -> None:
    payload = ErrorMapper.to_payload(
        RemoteError(code="HTTP_ERROR", message="new row violates row-level security", status_code=403, trace_id="t-1")
    )

    assert payload["code"] == "PERMISSION_DENIED"
    assert payload["message"] == "new row violates row-level security"
    assert payload["trace_id"] == "t-1"
    assert payload["suggestion"] == "Solicita permisos al administrador."


def test_payload_for_known_code_suggestion() -> None:
    payload = ErrorMapper.to_payload(PermissionDeniedError(code="SERVICE_ROLE_REQUIRED", message="x", status_code=0))

    assert payload["code"] == "SERVICE_ROLE_REQUIRED"
    assert "clave de servicio" in payload["suggestion"]


def test_payload_for_load_and_form_errors() -> None:
    cause = ServerError(code="HTTP_ERROR", message="boom", status_code=502, trace_id="t-2")
    load_error = LoadError("boom")
    load_error.__cause__ = cause

    assert ErrorMapper.to_payload(load_error)["trace_id"] == "t-2"
    assert ErrorMapper.to_payload(LoadError("offline"))["code"] == "LOAD_ERROR"
    form_payload = ErrorMapper.to_payload(FormValidationError({"email": "Email es requerido"}))
    assert form_payload["code"] == "UI_VALIDATION"
    assert form_payload["details"] == {"email": "Email es requerido"}
    assert ErrorMapper.to_payload(RuntimeError("bug"))["code"] == "INTERNAL_ERROR"


def test_display_message() -> None:
    message = ErrorMapper.to_display_message(NotFoundError(code="USER_NOT_FOUND", message="no está", status_code=404))

    assert message == "[USER_NOT_FOUND] no está (trace_id=n/a)"


def test_error_banner_show_and_dismiss(capsys) -> None:
    banner = ErrorBanner()

    banner.show(AuthError(code="HTTP_ERROR", message="JWT expired", status_code=401, trace_id="t-3"))

    out = capsys.readouterr().out
    assert "[ERROR] code=AUTH_REQUIRED message=JWT expired trace_id=t-3" in out
    assert banner.visible
    banner.dismiss()
    assert banner.visible is False
    assert banner.render() == ""
