"""通用结构化数据类型别名.

统一 JSON/Mapping 风格的类型,方便在表单、日志等模块中共享定义,避免重复声明.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Protocol, TypeAlias

ScalarValue: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = ScalarValue | Sequence["JsonValue"] | Mapping[str, "JsonValue"]
ContextValue: TypeAlias = ScalarValue | Sequence["ContextValue"] | Mapping[str, "ContextValue"]
ContextDict: TypeAlias = dict[str, ContextValue]
StructlogEventDict: TypeAlias = MutableMapping[str, JsonValue]
LoggerExtra: TypeAlias = Mapping[str, JsonValue]
TemplateContext: TypeAlias = dict[str, object]


class LoggerProtocol(Protocol):
    """结构化日志协议,统一 logger 的最小接口."""

    def bind(self, **kwargs: JsonValue) -> LoggerProtocol: ...

    def debug(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def info(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def warning(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...

    def error(self, event: str, *args: object, **kwargs: JsonValue) -> object: ...
