"""配置驱动的表单装配.

从配置片段解析字段约束与选项,组装为可绑定、可校验、可渲染的表单.
"""

from .assembler import FieldAssembler
from .config import FormsConfig, load_forms_config
from .constraints import ConstraintRegistry, ConstraintResolver
from .diagnostics import DiagnosticSink, StructlogDiagnosticSink
from .events import FormEvent, FormEvents, FormLifecycleSubscriber
from .managed_form import ManagedForm
from .registry import FormRegistry
from .render import RenderBridge
from .view import FieldView, FormView

__all__ = [
    "ConstraintRegistry",
    "ConstraintResolver",
    "DiagnosticSink",
    "FieldAssembler",
    "FieldView",
    "FormEvent",
    "FormEvents",
    "FormLifecycleSubscriber",
    "FormRegistry",
    "FormView",
    "FormsConfig",
    "ManagedForm",
    "RenderBridge",
    "StructlogDiagnosticSink",
    "load_forms_config",
]
