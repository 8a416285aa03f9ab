"""Tests for matching visual elements to indexed components."""

from __future__ import annotations

from uicontext.correlator import (
    NO_INDEX_REASON,
    NO_MATCH_REASON,
    VisualCodeCorrelator,
    build_type_query,
    detect_issues,
    extract_code_snippet,
    parse_font_size,
    recommend,
)
from uicontext.models import (
    Bounds,
    ComponentRecord,
    IndexMetadata,
    ProjectIndex,
    PropDefinition,
    VisualElement,
)


def _element(
    tag: str = "div",
    *,
    text: str = "",
    class_name: str = "",
    width: int = 120,
    height: int = 48,
    attributes: dict[str, str | None] | None = None,
    styles: dict[str, str] | None = None,
) -> VisualElement:
    return VisualElement(
        selector=f"{tag}.test",
        text=text,
        bounds=Bounds(x=0, y=0, width=width, height=height),
        tag_name=tag,
        class_name=class_name,
        attributes=attributes if attributes is not None else {"ariaLabel": "label"},
        styles=styles or {},
    )


def test_button_without_text_matches_by_element_type(sample_index: ProjectIndex) -> None:
    report = VisualCodeCorrelator().correlate([_element("button")], sample_index)

    (correlation,) = report.correlations
    assert correlation.source_component is not None
    assert correlation.source_component.name == "Button"
    assert correlation.confidence == 0.9
    assert correlation.match_reason == "Matched by element type and props: button"
    assert correlation.code_snippet is not None
    assert correlation.code_snippet.split("\n")[2].strip() == "return ("


def test_strong_text_match_is_kept(sample_index: ProjectIndex) -> None:
    (correlation,) = VisualCodeCorrelator().correlate(
        [_element("button", text="Users")], sample_index
    ).correlations

    assert correlation.source_component is not None
    assert correlation.source_component.name == "Users"
    assert correlation.confidence == 0.8
    assert correlation.match_reason == "Matched by text content: 'Users'"


def test_weak_text_match_is_replaced_by_type_match(sample_index: ProjectIndex) -> None:
    (correlation,) = VisualCodeCorrelator().correlate(
        [_element("button", text="Primary")], sample_index
    ).correlations

    assert correlation.source_component is not None
    assert correlation.source_component.name == "Button"
    assert correlation.confidence == 0.9
    assert correlation.match_reason.startswith("Matched by element type and props")


def test_class_token_match(sample_index: ProjectIndex) -> None:
    (correlation,) = VisualCodeCorrelator().correlate(
        [_element("section", class_name="userlist wrapper")], sample_index
    ).correlations

    assert correlation.source_component is not None
    assert correlation.source_component.name == "UserList"
    assert correlation.confidence == 0.7
    assert correlation.match_reason == "Matched by CSS class: 'userlist'"


def test_text_score_of_sixteen_caps_confidence() -> None:
    component = ComponentRecord(
        id="src_SaveButton",
        name="SaveButton",
        file_path="src/SaveButton.tsx",
        source_text="export default function Component() {}",
        props=[PropDefinition("onSave", "() => void", True), PropDefinition("saveLabel", "string", False)],
        description="Persists the draft",
    )
    index = ProjectIndex(metadata=IndexMetadata(project_path="/app"), components=[component])

    (correlation,) = VisualCodeCorrelator().correlate([_element("a", text="Save")], index).correlations

    assert correlation.confidence == 0.8
    assert correlation.match_reason == "Matched by text content: 'Save'"


def test_unmatched_element(sample_index: ProjectIndex) -> None:
    (correlation,) = VisualCodeCorrelator().correlate([_element(text="zzz")], sample_index).correlations

    assert correlation.source_component is None
    assert correlation.confidence == 0
    assert correlation.match_reason == NO_MATCH_REASON
    assert correlation.code_snippet is None


def test_missing_index_yields_explicit_reason() -> None:
    elements = [_element("button", width=30, height=30), _element("nav", text="Menu")]

    report = VisualCodeCorrelator().correlate(elements, None, focus="button")

    assert [c.match_reason for c in report.correlations] == [NO_INDEX_REASON, NO_INDEX_REASON]
    assert all(c.source_component is None and c.confidence == 0 for c in report.correlations)
    assert report.index_available is False
    assert report.focus == "button"
    assert report.summary.to_dict() == {
        "totalElements": 2,
        "matchedComponents": 0,
        "unmatchedElements": 2,
        "criticalIssues": 1,
    }


def test_confidence_is_bounded(sample_index: ProjectIndex) -> None:
    elements = [
        _element("button"),
        _element("input"),
        _element("div", class_name="card"),
        _element("nav"),
        _element("span", text="Primary action button", class_name="btn styled"),
    ]

    report = VisualCodeCorrelator().correlate(elements, sample_index)

    assert all(0 <= c.confidence <= 0.9 for c in report.correlations)
    assert report.summary.total_elements == 5
    assert report.summary.matched_components + report.summary.unmatched_elements == 5


def test_small_touch_target_issue_and_recommendations() -> None:
    element = _element("button", width=30, height=30, attributes={})

    assert detect_issues(element) == ["Touch target too small: 30x30px (minimum 44x44px)"]
    assert recommend(element, None) == [
        "Increase padding or min-height/min-width to meet 44px touch target minimum",
        "Add aria-label for better accessibility",
    ]


def test_touch_target_message_formats_float_bounds() -> None:
    element = VisualElement(selector="a.icon", bounds=Bounds(width=30.0, height=20.5), tag_name="a")

    assert detect_issues(element) == ["Touch target too small: 30x20.5px (minimum 44x44px)"]


def test_font_size_and_contrast_issues() -> None:
    element = _element(styles={"fontSize": "12px", "color": "rgb(0, 0, 0)", "backgroundColor": "rgb(0, 0, 0)"})

    assert detect_issues(element) == [
        "Font size too small: 12px (minimum 14px for mobile)",
        "Potential color contrast issue",
    ]
    assert detect_issues(_element(styles={"fontSize": "16px", "color": "red"})) == []
    assert detect_issues(_element(styles={"fontSize": "0px"})) == []


def test_parse_font_size_reads_leading_integer() -> None:
    assert parse_font_size("13.5px") == 13
    assert parse_font_size("large") is None
    assert parse_font_size(None) is None


def test_recommendations_for_complex_component_and_role_button() -> None:
    component = ComponentRecord(
        id="src_Huge",
        name="Huge",
        file_path="src/Huge.tsx",
        source_text="",
        props=[PropDefinition(f"p{i}", "string", True) for i in range(9)],
    )
    element = _element("div", text="Go", attributes={"role": "button"})

    assert recommend(element, component) == [
        "Consider breaking down this component - it has many props and might be too complex",
        "Consider using a semantic button element instead of a role-annotated container",
    ]


def test_build_type_query_precedence() -> None:
    role_button = build_type_query(_element("div", attributes={"role": "button"}, class_name="card"))
    assert (role_button.text, role_button.tags) == ("button", ["interactive"])
    assert build_type_query(_element("select")).text == "input"
    assert build_type_query(_element("article", class_name="product-card")).tags == ["container"]
    assert build_type_query(_element("nav")).text == "navigation"
    assert build_type_query(_element("footer")).text is None


def test_code_snippet_without_return_uses_file_head() -> None:
    source = "\n".join(f"line {i}" for i in range(30))
    component = ComponentRecord(id="a", name="A", file_path="a.ts", source_text=source)

    assert extract_code_snippet(component) == "\n".join(f"line {i}" for i in range(20))
