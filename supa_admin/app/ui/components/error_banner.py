from __future__ import annotations

from supa_admin.app.infrastructure.errors.error_mapper import ErrorMapper


class ErrorBanner:
    """Dismissable banner for remote and validation errors."""

    def __init__(self) -> None:
        self.payload: dict | None = None

    @property
    def visible(self) -> bool:
        return self.payload is not None

    def show(self, error: Exception | dict | str) -> dict:
        if isinstance(error, str):
            payload = {"code": "UI_VALIDATION", "message": error, "trace_id": None, "suggestion": None}
        elif isinstance(error, dict):
            payload = dict(error)
        else:
            payload = ErrorMapper.to_payload(error)
        self.payload = payload
        print(self.render())
        return payload

    def dismiss(self) -> None:
        self.payload = None

    def render(self) -> str:
        if self.payload is None:
            return ""
        line = (
            "[ERROR] "
            f"code={self.payload.get('code')} "
            f"message={self.payload.get('message')} "
            f"trace_id={self.payload.get('trace_id') or 'n/a'}"
        )
        if self.payload.get("suggestion"):
            line += f" suggestion={self.payload['suggestion']}"
        return line
