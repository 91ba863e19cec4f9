from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


class FixtureError(Exception):
    code: str = "fixture_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidColor(FixtureError):
    """Raised for a symbolic color that is not in the color table."""

    code = "invalid_color"

    def __init__(self, name: Any, valid_names: Iterable[str]):
        self.name = name
        self.valid_names: List[str] = list(valid_names)
        super().__init__(
            f"Unknown color: '{name}'. Available colors: {', '.join(self.valid_names)}",
            details={"name": str(name), "validNames": self.valid_names},
        )


class InvalidMode(FixtureError):
    """Raised for a symbolic mode that is not in the mode table."""

    code = "invalid_mode"

    def __init__(self, name: Any, valid_names: Iterable[str]):
        self.name = name
        self.valid_names: List[str] = list(valid_names)
        super().__init__(
            f"Unknown mode: '{name}'. Available modes: {', '.join(self.valid_names)}",
            details={"name": str(name), "validNames": self.valid_names},
        )
