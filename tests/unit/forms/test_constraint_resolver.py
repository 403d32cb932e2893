from __future__ import annotations

import pytest
from wtforms.validators import DataRequired, Email, Length, NumberRange, Regexp

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.forms.constraints import (
    ConstraintKind,
    ConstraintRegistry,
    ConstraintResolver,
    NamedParams,
    NestedFirst,
    parse_constraint_descriptor,
)


@pytest.fixture
def resolver(diagnostics) -> ConstraintResolver:
    return ConstraintResolver(diagnostics=diagnostics)


@pytest.mark.unit
def test_parse_descriptor_shapes() -> None:
    assert parse_constraint_descriptor("Email") == ConstraintKind("Email")
    assert parse_constraint_descriptor({"Length": {"min": 3}}) == NamedParams("Length", {"min": 3})
    assert parse_constraint_descriptor(["Email", "DataRequired"]) == NestedFirst(ConstraintKind("Email"))
    assert parse_constraint_descriptor("") is None
    assert parse_constraint_descriptor([]) is None
    assert parse_constraint_descriptor({"Length": {}, "Email": None}) is None
    assert parse_constraint_descriptor(42) is None


@pytest.mark.unit
def test_resolve_bare_kind_builds_validator_without_params(resolver, diagnostics) -> None:
    validator = resolver.resolve("Email", form_name="contact")

    assert isinstance(validator, Email)
    assert diagnostics.records == []


@pytest.mark.unit
def test_resolve_named_params_passes_keyword_arguments(resolver) -> None:
    validator = resolver.resolve({"Length": {"min": 3, "max": 10}}, form_name="contact")

    assert isinstance(validator, Length)
    assert validator.min == 3
    assert validator.max == 10


@pytest.mark.unit
def test_resolve_sequence_uses_only_first_element(resolver, diagnostics) -> None:
    validator = resolver.resolve([{"Length": {"min": 5}}, "UnknownThing"], form_name="contact")

    assert isinstance(validator, Length)
    assert validator.min == 5
    assert diagnostics.records == []


@pytest.mark.unit
def test_resolve_unknown_kind_returns_none_with_single_diagnostic(resolver, diagnostics) -> None:
    assert resolver.resolve("NoSuchConstraint", form_name="contact") is None

    assert diagnostics.kinds == [DiagnosticKind.UNRESOLVED_CONSTRAINT.value]
    severity, message, context = diagnostics.records[0]
    assert severity == ErrorSeverity.HIGH
    assert "contact" in message
    assert "NoSuchConstraint" in message
    assert context["form_name"] == "contact"
    assert context["constraint"] == "NoSuchConstraint"


@pytest.mark.unit
def test_resolve_malformed_descriptor_reports_invalid_configuration(resolver, diagnostics) -> None:
    assert resolver.resolve({"Length": {}, "Email": None}, form_name="contact") is None

    assert diagnostics.kinds == [DiagnosticKind.INVALID_CONFIGURATION.value]


@pytest.mark.unit
def test_resolve_bad_params_reports_invalid_configuration(resolver, diagnostics) -> None:
    assert resolver.resolve({"Length": {"nonsense": 1}}, form_name="contact") is None

    assert diagnostics.kinds == [DiagnosticKind.INVALID_CONFIGURATION.value]
    assert diagnostics.records[0][2]["constraint"] == "Length"


@pytest.mark.unit
def test_aliases_map_names_and_parameters(resolver) -> None:
    not_blank = resolver.resolve("NotBlank", form_name="contact")
    regex = resolver.resolve({"Regex": {"pattern": "^[a-z]+$"}}, form_name="contact")
    value_range = resolver.resolve({"Range": {"min": 1, "max": 5}}, form_name="contact")

    assert isinstance(not_blank, DataRequired)
    assert isinstance(regex, Regexp)
    assert regex.regex.pattern == "^[a-z]+$"
    assert isinstance(value_range, NumberRange)


@pytest.mark.unit
def test_scalar_and_list_params_are_passed_as_single_argument() -> None:
    registry = ConstraintRegistry.from_wtforms()

    scalar = registry.instantiate("Regexp", "^x")
    listed = registry.instantiate("AnyOf", ["red", "green"])

    assert scalar.regex.pattern == "^x"
    assert listed.values == ["red", "green"]
    assert listed.message is None


@pytest.mark.unit
def test_custom_constraint_registration(diagnostics) -> None:
    class Slug:
        def __init__(self, separator: str = "-") -> None:
            self.separator = separator

        def __call__(self, form, field) -> None:
            return None

    registry = ConstraintRegistry.from_wtforms()
    registry.register("Slug", Slug)
    resolver = ConstraintResolver(registry, diagnostics)

    validator = resolver.resolve({"Slug": {"separator": "_"}}, form_name="post")

    assert isinstance(validator, Slug)
    assert validator.separator == "_"
    assert registry.exists("Slug")
    assert not registry.exists("Slugify")


@pytest.mark.unit
def test_instantiate_unknown_kind_raises_lookup_error() -> None:
    with pytest.raises(LookupError):
        ConstraintRegistry.from_wtforms().instantiate("Nope")


@pytest.mark.unit
def test_resolve_all_preserves_shape(resolver, diagnostics) -> None:
    listed = resolver.resolve_all(["DataRequired", {"Length": {"max": 8}}, "Bogus"], form_name="signup")
    labeled = resolver.resolve_all({"required": "DataRequired", "email": "Email"}, form_name="signup")
    single = resolver.resolve_all("Email", form_name="signup")

    assert isinstance(listed[0], DataRequired)
    assert isinstance(listed[1], Length)
    assert listed[2] is None
    assert list(labeled) == ["required", "email"]
    assert isinstance(labeled["email"], Email)
    assert isinstance(single, Email)
    assert diagnostics.kinds == [DiagnosticKind.UNRESOLVED_CONSTRAINT.value]


@pytest.mark.unit
def test_upload_constraints_are_registered(resolver) -> None:
    from flask_wtf.file import FileAllowed

    validator = resolver.resolve(
        {"FileAllowed": {"upload_set": ["pdf", "docx"], "message": "仅支持文档"}},
        form_name="resume",
    )

    assert isinstance(validator, FileAllowed)
    assert validator.upload_set == ["pdf", "docx"]


@pytest.mark.unit
def test_choice_alias_with_list_validates_submission(app_context, resolver, diagnostics) -> None:
    from werkzeug.datastructures import MultiDict
    from wtforms.validators import AnyOf

    from formsmith.forms.managed_form import ManagedForm

    validator = resolver.resolve({"Choice": ["red", "green", "blue"]}, form_name="palette")

    assert isinstance(validator, AnyOf)
    assert validator.values == ["red", "green", "blue"]

    form = ManagedForm("palette", options={"csrf_protection": False}, diagnostics=diagnostics)
    form.add("color", "text", {"constraints": [validator]})
    assert form.submit(MultiDict({"color": "green"})) is True
    assert form.submit(MultiDict({"color": "purple"})) is False
