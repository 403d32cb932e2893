"""字段约束解析.

将配置中的约束简写(字符串、序列、单键映射)解析为具体的 WTForms 校验器实例.

描述符形态:
- ``"DataRequired"``: 仅有约束名,无参数;
- ``["Length", ...]``: 序列只取第一个元素,递归解析;
- ``{"Length": {"min": 3}}``: 单键映射,键为约束名,值为参数.

未知约束名或无法识别的形态不会中断表单构建: 返回 None 并输出一条诊断.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from flask_wtf.file import FileAllowed, FileRequired, FileSize
from wtforms import validators as wtforms_validators

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.forms.diagnostics import DiagnosticSink, StructlogDiagnosticSink, report
from formsmith.types import RawDescriptor

ConstraintFactory: TypeAlias = Callable[..., object]


@dataclass(frozen=True, slots=True)
class ConstraintKind:
    """仅有名称的约束描述."""

    name: str


@dataclass(frozen=True, slots=True)
class NamedParams:
    """带参数的约束描述,params 可为标量、映射、序列或 None."""

    name: str
    params: object = None


@dataclass(frozen=True, slots=True)
class NestedFirst:
    """序列形态,只使用第一个声明的约束."""

    inner: ConstraintDescriptor


ConstraintDescriptor: TypeAlias = ConstraintKind | NamedParams | NestedFirst


def parse_constraint_descriptor(raw: RawDescriptor) -> ConstraintDescriptor | None:
    """将配置片段转换为约束描述.

    Args:
        raw: YAML 中读取的原始片段.

    Returns:
        解析出的描述;形态无法识别(空字符串、空序列、多键映射等)时返回 None.

    """
    if isinstance(raw, str):
        name = raw.strip()
        return ConstraintKind(name) if name else None
    if isinstance(raw, Mapping):
        if len(raw) != 1:
            return None
        name, params = next(iter(raw.items()))
        if not isinstance(name, str) or not name.strip():
            return None
        return NamedParams(name.strip(), params)
    if isinstance(raw, Sequence) and not isinstance(raw, (bytes, bytearray)):
        if not raw:
            return None
        inner = parse_constraint_descriptor(raw[0])
        return NestedFirst(inner) if inner is not None else None
    return None


def _unwrap(descriptor: ConstraintDescriptor) -> tuple[str, object]:
    while isinstance(descriptor, NestedFirst):
        descriptor = descriptor.inner
    if isinstance(descriptor, NamedParams):
        return descriptor.name, descriptor.params
    return descriptor.name, None


@dataclass(frozen=True, slots=True)
class ConstraintAlias:
    """外部配置中常见的约束别名,映射到已注册的约束名与参数名."""

    target: str
    param_names: Mapping[str, str] = field(default_factory=dict)


# 兼容 Symfony 风格的约束命名
DEFAULT_ALIASES: dict[str, ConstraintAlias] = {
    "NotBlank": ConstraintAlias("DataRequired"),
    "NotNull": ConstraintAlias("InputRequired"),
    "Regex": ConstraintAlias("Regexp", {"pattern": "regex"}),
    "Range": ConstraintAlias("NumberRange"),
    "Choice": ConstraintAlias("AnyOf", {"choices": "values"}),
    "Url": ConstraintAlias("URL"),
    "Ip": ConstraintAlias("IPAddress"),
    "Uuid": ConstraintAlias("UUID"),
}


def _wtforms_factories() -> dict[str, ConstraintFactory]:
    factories: dict[str, ConstraintFactory] = {}
    for name in getattr(wtforms_validators, "__all__", ()):
        candidate = getattr(wtforms_validators, name, None)
        if isinstance(candidate, type) and not issubclass(candidate, BaseException):
            factories[name] = candidate
    # 上传字段校验器由 Flask-WTF 提供
    factories.update({"FileAllowed": FileAllowed, "FileRequired": FileRequired, "FileSize": FileSize})
    return factories


class ConstraintRegistry:
    """约束名到校验器工厂的注册表.

    默认收录 ``wtforms.validators`` 公开的全部校验器类与 Flask-WTF 的上传校验器,并支持宿主应用追加自定义约束.
    """

    def __init__(
        self,
        factories: Mapping[str, ConstraintFactory] | None = None,
        aliases: Mapping[str, ConstraintAlias] | None = None,
    ) -> None:
        self._factories: dict[str, ConstraintFactory] = dict(factories or {})
        self._aliases: dict[str, ConstraintAlias] = dict(aliases or {})

    @classmethod
    def from_wtforms(cls) -> ConstraintRegistry:
        """创建包含 WTForms 校验器与默认别名的注册表."""
        return cls(_wtforms_factories(), DEFAULT_ALIASES)

    def register(self, kind: str, factory: ConstraintFactory) -> None:
        """注册(或覆盖)一个约束类型."""
        self._factories[kind] = factory

    def exists(self, kind: str) -> bool:
        """判断约束名是否可解析."""
        return self._lookup(kind) is not None

    def instantiate(self, kind: str, params: object = None) -> object:
        """按参数形态实例化约束.

        Args:
            kind: 约束名或别名.
            params: None 表示无参;映射作为关键字参数;其余(标量、列表)作为唯一位置参数.

        Returns:
            校验器实例.

        Raises:
            LookupError: 约束名未注册.
            TypeError: 参数与校验器签名不匹配.
            ValueError: 参数值非法.

        """
        resolved = self._lookup(kind)
        if resolved is None:
            msg = f"未注册的约束类型: {kind}"
            raise LookupError(msg)
        factory, param_names = resolved

        if params is None:
            return factory()
        if isinstance(params, Mapping):
            kwargs = {param_names.get(str(key), str(key)): value for key, value in params.items()}
            return factory(**kwargs)
        return factory(params)

    def _lookup(self, kind: str) -> tuple[ConstraintFactory, Mapping[str, str]] | None:
        factory = self._factories.get(kind)
        if factory is not None:
            return factory, {}
        alias = self._aliases.get(kind)
        if alias is None:
            return None
        factory = self._factories.get(alias.target)
        if factory is None:
            return None
        return factory, alias.param_names


class ConstraintResolver:
    """约束描述解析器,纯粹在注册表上做分派."""

    def __init__(
        self,
        registry: ConstraintRegistry | None = None,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self.registry = registry or ConstraintRegistry.from_wtforms()
        self.diagnostics = diagnostics or StructlogDiagnosticSink()

    def resolve(self, descriptor: RawDescriptor, *, form_name: str) -> object | None:
        """解析单个约束描述.

        Args:
            descriptor: 原始约束描述.
            form_name: 所属表单名,用于诊断.

        Returns:
            校验器实例;无法解析时返回 None 并输出一条诊断.

        """
        parsed = parse_constraint_descriptor(descriptor)
        if parsed is None:
            report(
                self.diagnostics,
                DiagnosticKind.INVALID_CONFIGURATION,
                f"表单 '{form_name}' 包含无法识别的字段约束配置",
                form_name=form_name,
                descriptor=repr(descriptor),
            )
            return None

        kind, params = _unwrap(parsed)
        if not self.registry.exists(kind):
            report(
                self.diagnostics,
                DiagnosticKind.UNRESOLVED_CONSTRAINT,
                f"表单 '{form_name}' 包含无效的字段约束: '{kind}'",
                severity=ErrorSeverity.HIGH,
                form_name=form_name,
                constraint=kind,
            )
            return None

        try:
            return self.registry.instantiate(kind, params)
        except (TypeError, ValueError) as exc:
            report(
                self.diagnostics,
                DiagnosticKind.INVALID_CONFIGURATION,
                f"表单 '{form_name}' 的字段约束 '{kind}' 参数无效",
                form_name=form_name,
                constraint=kind,
                error=str(exc),
            )
            return None

    def resolve_all(self, constraints: RawDescriptor, *, form_name: str) -> object:
        """解析字段的 constraints 选项.

        字符串直接解析为单个实例;映射保留键名、逐项解析值;序列逐项解析并保持顺序.
        其余形态按单个描述处理(会输出诊断并得到 None).
        """
        if isinstance(constraints, str):
            return self.resolve(constraints, form_name=form_name)
        if isinstance(constraints, Mapping):
            return {
                key: self.resolve(sub_descriptor, form_name=form_name)
                for key, sub_descriptor in constraints.items()
            }
        if isinstance(constraints, (list, tuple)):
            return [self.resolve(sub_descriptor, form_name=form_name) for sub_descriptor in constraints]
        return self.resolve(constraints, form_name=form_name)


__all__ = [
    "ConstraintAlias",
    "ConstraintDescriptor",
    "ConstraintKind",
    "ConstraintRegistry",
    "ConstraintResolver",
    "NamedParams",
    "NestedFirst",
    "parse_constraint_descriptor",
]
