from supa_admin.app.application.errors import FormValidationError, LoadError
from supa_admin.clients.supabase_sdk.errors import RemoteError


class ErrorMapper:
    _SUGGESTIONS = {
        "SERVICE_ROLE_REQUIRED": "Configura la clave de servicio para poder invitar usuarios.",
        "TIMEOUT_ERROR": "Verifica tu red y vuelve a intentar.",
        "NETWORK_ERROR": "Verifica red/VPN y vuelve a intentar.",
        "USER_NOT_FOUND": "Recarga la lista; el usuario pudo haber sido eliminado.",
    }

    _STATUS_HINTS = {
        401: ("AUTH_REQUIRED", "Inicia sesión nuevamente."),
        403: ("PERMISSION_DENIED", "Solicita permisos al administrador."),
        404: ("NOT_FOUND", "Recarga la lista y vuelve a intentar."),
        409: ("CONFLICT", "Ya existe un registro con esos datos."),
        422: ("VALIDATION_ERROR", "Revisa los campos enviados."),
        500: ("INTERNAL_ERROR", "Reintenta y comparte el trace_id si persiste."),
    }

    @classmethod
    def to_payload(cls, error: Exception) -> dict:
        if isinstance(error, LoadError) and isinstance(error.__cause__, RemoteError):
            payload = cls.to_payload(error.__cause__)
            payload["message"] = error.message
            return payload
        if isinstance(error, RemoteError):
            hint = cls._STATUS_HINTS.get(error.status_code)
            if hint is None and error.status_code >= 500:
                hint = cls._STATUS_HINTS[500]
            code = error.code
            suggestion = cls._SUGGESTIONS.get(error.code)
            if hint is not None:
                code = error.code if error.code != "HTTP_ERROR" else hint[0]
                suggestion = suggestion or hint[1]
            return {
                "code": code,
                "message": error.message,
                "details": error.details,
                "trace_id": error.trace_id,
                "suggestion": suggestion or "Reintenta la operación.",
            }
        if isinstance(error, FormValidationError):
            return {
                "code": "UI_VALIDATION",
                "message": error.message,
                "details": error.field_errors,
                "trace_id": None,
                "suggestion": "Corrige los campos marcados.",
            }
        if isinstance(error, LoadError):
            return {
                "code": "LOAD_ERROR",
                "message": error.message,
                "details": None,
                "trace_id": None,
                "suggestion": "Pulsa refrescar para reintentar.",
            }
        return {
            "code": "INTERNAL_ERROR",
            "message": str(error),
            "details": None,
            "trace_id": None,
            "suggestion": "Reintenta y, si persiste, reporta el incidente.",
        }

    @classmethod
    def to_display_message(cls, error: Exception) -> str:
        payload = cls.to_payload(error)
        return f"[{payload['code']}] {payload['message']} (trace_id={payload['trace_id'] or 'n/a'})"
