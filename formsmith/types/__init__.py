"""共享类型定义."""

from .forms import (
    ChoiceList,
    ChoicePair,
    ChoiceValue,
    ExtraTemplateVariables,
    FieldOptions,
    FieldSpec,
    FieldSpecMapping,
    RawDescriptor,
    RawFieldOptions,
)
from .structures import (
    ContextDict,
    ContextValue,
    JsonValue,
    LoggerExtra,
    LoggerProtocol,
    ScalarValue,
    StructlogEventDict,
    TemplateContext,
)

__all__ = [
    "ChoiceList",
    "ChoicePair",
    "ChoiceValue",
    "ContextDict",
    "ContextValue",
    "ExtraTemplateVariables",
    "FieldOptions",
    "FieldSpec",
    "FieldSpecMapping",
    "JsonValue",
    "LoggerExtra",
    "LoggerProtocol",
    "RawDescriptor",
    "RawFieldOptions",
    "ScalarValue",
    "StructlogEventDict",
    "TemplateContext",
]
