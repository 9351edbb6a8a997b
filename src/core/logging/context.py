"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_build_id: ContextVar[str] = ContextVar("build_id", default="")
_stage_name: ContextVar[str] = ContextVar("stage_name", default="")
_component: ContextVar[str] = ContextVar("component", default="")
_schema_file: ContextVar[str] = ContextVar("schema_file", default="")


def set_log_context(
    build_id: Optional[str] = None,
    stage: Optional[str] = None,
    component: Optional[str] = None,
    schema_file: Optional[str] = None,
) -> None:
    if build_id is not None:
        _build_id.set(build_id)
    if stage is not None:
        _stage_name.set(stage)
    if component is not None:
        _component.set(component)
    if schema_file is not None:
        _schema_file.set(schema_file)


def get_log_context() -> Dict[str, str]:
    return {
        "build_id": _build_id.get(),
        "stage": _stage_name.get(),
        "component": _component.get(),
        "schema_file": _schema_file.get(),
    }


def clear_log_context() -> None:
    _build_id.set("")
    _stage_name.set("")
    _component.set("")
    _schema_file.set("")
