from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LoadError(Exception):
    """Fetching the users list failed. The canonical set is left as it was."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class FormValidationError(Exception):
    """Local form failure; nothing is sent to the backend."""

    field_errors: dict[str, str] = field(default_factory=dict)
    message: str = "El formulario tiene errores."

    def __str__(self) -> str:
        return self.message
