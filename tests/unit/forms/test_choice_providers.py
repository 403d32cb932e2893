from __future__ import annotations

from types import SimpleNamespace

import pytest

from formsmith.constants import DiagnosticKind, ErrorSeverity
from formsmith.errors import InvalidConfigurationError
from formsmith.forms.choices import (
    ArrayTypeChoiceProvider,
    ChoiceProviders,
    ContentQuery,
    ContentTypeChoiceProvider,
    StaticChoices,
    parse_choice_descriptor,
)


@pytest.mark.unit
def test_prefix_is_the_only_discriminant() -> None:
    assert parse_choice_descriptor({"a": "A"}) == StaticChoices({"a": "A"})
    assert parse_choice_descriptor("pages") == StaticChoices("pages")
    assert parse_choice_descriptor("ContentType::pages") == StaticChoices("ContentType::pages")

    query = parse_choice_descriptor("contenttype::pages::title")
    assert isinstance(query, ContentQuery)
    assert query.category == "pages"
    assert query.display_field == "title"
    assert query.is_well_formed


@pytest.mark.unit
def test_malformed_content_queries_are_detected() -> None:
    assert not parse_choice_descriptor("contenttype::").is_well_formed
    assert not parse_choice_descriptor("contenttype::pages::").is_well_formed
    assert not parse_choice_descriptor("contenttype::pages::title::slug").is_well_formed


@pytest.mark.unit
def test_array_type_keeps_mapping_order() -> None:
    provider = ArrayTypeChoiceProvider()

    choices = provider.provide_choices("topic", StaticChoices({"z": "Zed", "a": "Ay", "m": "Em"}), form_name="contact")

    assert choices == [("z", "Zed"), ("a", "Ay"), ("m", "Em")]


@pytest.mark.unit
def test_array_type_rejects_non_mapping() -> None:
    provider = ArrayTypeChoiceProvider()

    with pytest.raises(InvalidConfigurationError) as exc_info:
        provider.provide_choices("topic", StaticChoices(["a", "b"]), form_name="contact")

    assert exc_info.value.extra["field_name"] == "topic"


@pytest.mark.unit
def test_content_type_uses_id_as_value_and_display_field_as_label(content_query, diagnostics) -> None:
    provider = ContentTypeChoiceProvider(content_query, diagnostics)

    choices = provider.provide_choices("page", parse_choice_descriptor("contenttype::pages::title"), form_name="contact")

    # 空标题回退为 ID, values 中的字段同样可作为标签
    assert choices == [(1, "关于我们"), (2, "2"), (3, "联系方式")]
    assert diagnostics.records == []


@pytest.mark.unit
def test_content_type_without_display_field_labels_with_id(content_query, diagnostics) -> None:
    provider = ContentTypeChoiceProvider(content_query, diagnostics)

    choices = provider.provide_choices("page", parse_choice_descriptor("contenttype::pages"), form_name="contact")

    assert choices == [(1, "1"), (2, "2"), (3, "3")]


@pytest.mark.unit
def test_content_type_reads_object_attributes(diagnostics) -> None:
    class Query:
        def fetch_all(self, category):
            return [SimpleNamespace(id=7, title="Seven", values={})]

    provider = ContentTypeChoiceProvider(Query(), diagnostics)

    assert provider.provide_choices("page", parse_choice_descriptor("contenttype::pages::title")) == [(7, "Seven")]


@pytest.mark.unit
def test_content_type_unknown_category_degrades_to_empty(content_query, diagnostics) -> None:
    provider = ContentTypeChoiceProvider(content_query, diagnostics)

    choices = provider.provide_choices("post", parse_choice_descriptor("contenttype::articles"), form_name="contact")

    assert choices == []
    assert diagnostics.kinds == [DiagnosticKind.CHOICE_SOURCE_UNAVAILABLE.value]
    assert diagnostics.records[0][0] == ErrorSeverity.LOW


@pytest.mark.unit
def test_content_type_unreachable_source_degrades_to_empty(unavailable_query, diagnostics) -> None:
    provider = ContentTypeChoiceProvider(unavailable_query, diagnostics)

    choices = provider.provide_choices("page", parse_choice_descriptor("contenttype::pages"), form_name="contact")

    assert choices == []
    assert diagnostics.kinds == [DiagnosticKind.CHOICE_SOURCE_UNAVAILABLE.value]
    assert diagnostics.records[0][2]["contenttype"] == "pages"


@pytest.mark.unit
def test_content_type_without_query_degrades_to_empty(diagnostics) -> None:
    provider = ContentTypeChoiceProvider(None, diagnostics)

    assert provider.provide_choices("page", parse_choice_descriptor("contenttype::pages")) == []
    assert diagnostics.kinds == [DiagnosticKind.CHOICE_SOURCE_UNAVAILABLE.value]


@pytest.mark.unit
def test_content_type_malformed_descriptor_reports_once(content_query, diagnostics) -> None:
    provider = ContentTypeChoiceProvider(content_query, diagnostics)

    assert provider.provide_choices("page", parse_choice_descriptor("contenttype::"), form_name="contact") == []
    assert diagnostics.kinds == [DiagnosticKind.INVALID_CONFIGURATION.value]
    assert content_query.calls == []


@pytest.mark.unit
def test_dispatch_table_routes_by_descriptor_type(content_query, diagnostics) -> None:
    providers = ChoiceProviders(ArrayTypeChoiceProvider(), ContentTypeChoiceProvider(content_query, diagnostics))

    assert providers.resolve("topic", {"a": "A"}) == [("a", "A")]
    assert providers.resolve("page", "contenttype::pages::title")[0] == (1, "关于我们")
    assert isinstance(providers.provider_for(StaticChoices({})), ArrayTypeChoiceProvider)
