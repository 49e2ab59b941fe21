#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the stack-based event renderer."""

import pytest
from utils import rng, wrap

from md2view.api import render_events
from md2view.constants import KATEX_STYLESHEET_HREF
from md2view.events import (
    Code,
    CodeBlock,
    Component,
    DisplayMath,
    Emphasis,
    End,
    FootnoteDefinition,
    FootnoteReference,
    HardBreak,
    Html,
    HtmlBlock,
    Image,
    InlineMath,
    Item,
    Link,
    List,
    MetadataBlock,
    Paragraph,
    Rule,
    SoftBreak,
    Start,
    Strong,
    Table,
    TableCell,
    TableHead,
    TableRow,
    TaskListMarker,
    Text,
)
from md2view.exceptions import RenderingError, StructuralMismatchError
from md2view.renderers.engine import Renderer
from md2view.renderers.vdom import PointerEvent, Slot, VFragment, VNode, VText


def render(context, events):
    """Render events and group the top-level views in one fragment."""
    return context.create_fragment(Renderer(context).render(events))


@pytest.mark.unit
class TestTraversal:
    """Tests for tree reconstruction from the flat stream."""

    def test_paragraph_with_nested_inlines(self, make_context):
        events = wrap(
            Paragraph(),
            rng(0, 14),
            (Text("plain "), rng(0, 6)),
            *wrap(Strong(), rng(6, 14), (Text("bold"), rng(8, 12))),
        )
        view = render(make_context(), events)

        paragraph = view.find("p")
        assert paragraph is not None
        assert paragraph.text_content == "plain bold"
        assert paragraph.find("strong").text_content == "bold"

    def test_top_level_order_preserved(self, make_context):
        events = [
            *wrap(Paragraph(), rng(0, 1), (Text("a"), rng(0, 1))),
            (Rule(), rng(2, 5)),
            *wrap(Paragraph(), rng(6, 7), (Text("b"), rng(6, 7))),
        ]
        views = Renderer(make_context()).render(events)
        assert [v.tag for v in views] == ["p", "hr", "p"]

    def test_empty_stream(self, make_context):
        assert Renderer(make_context()).render([]) == []

    def test_leaf_ranges_reach_on_click(self, make_context, clicks):
        events = wrap(Paragraph(), rng(0, 10), (Text("hello"), rng(3, 8)))
        view = render(make_context(), events)

        span = view.find("span")
        assert span.position == rng(3, 8)
        span.click()
        assert [c.position for c in clicks] == [rng(3, 8)]

    def test_container_range_spans_start_to_end(self, make_context):
        events = [
            (Start(Emphasis()), rng(4, 5)),
            (Text("x"), rng(5, 6)),
            (End(Emphasis()), rng(6, 7)),
        ]
        view = render(make_context(), events)
        assert view.find("em").position == rng(4, 7)

    def test_ordered_lists_keep_their_start(self, make_context):
        nested = wrap(List(start=2), rng(12, 20), *wrap(Item(), rng(12, 20), (Text("inner"), rng(15, 20))))
        events = wrap(
            List(start=5),
            rng(0, 30),
            *wrap(Item(), rng(0, 5), (Text("one"), rng(3, 6))),
            *wrap(Item(), rng(7, 20), (Text("two"), rng(10, 13)), *nested),
            *wrap(Item(), rng(21, 30), (Text("three"), rng(24, 29))),
        )
        view = render(make_context(), events)

        outer = view.find("ol")
        assert outer.attrs["start"] == 5
        items = [child for child in outer.children if isinstance(child, VNode) and child.tag == "li"]
        assert len(items) == 3

        inner = items[1].find("ol")
        assert inner is not None and inner is not outer
        assert inner.attrs["start"] == 2

    def test_list_starting_at_one_has_no_start_attribute(self, make_context):
        events = wrap(List(start=1), rng(0, 4), *wrap(Item(), rng(0, 4), (Text("a"), rng(3, 4))))
        view = render(make_context(), events)
        assert "start" not in view.find("ol").attrs

    def test_bullet_list(self, make_context):
        events = wrap(List(), rng(0, 3), *wrap(Item(), rng(0, 3), (Text("a"), rng(2, 3))))
        assert render(make_context(), events).find("ul") is not None

    def test_unknown_leaf_raises(self, make_context):
        with pytest.raises(RenderingError, match="Unsupported event"):
            Renderer(make_context()).render([(object(), rng(0, 0))])


@pytest.mark.unit
class TestStructuralErrors:
    """Tests for malformed event streams."""

    def test_end_without_start(self, make_context):
        with pytest.raises(StructuralMismatchError) as exc_info:
            Renderer(make_context()).render([(End(Paragraph()), rng(0, 1))])
        assert exc_info.value.expected is None
        assert exc_info.value.found == "paragraph"
        assert "has no matching Start" in str(exc_info.value)

    def test_mismatched_kind(self, make_context):
        events = [(Start(Paragraph()), rng(0, 3)), (End(Emphasis()), rng(2, 3))]
        with pytest.raises(StructuralMismatchError) as exc_info:
            Renderer(make_context()).render(events)
        assert exc_info.value.expected == "paragraph"
        assert exc_info.value.found == "emphasis"
        assert exc_info.value.position == rng(2, 3)

    def test_unclosed_start(self, make_context):
        events = [(Start(Paragraph()), rng(0, 3)), (Text("abc"), rng(0, 3))]
        with pytest.raises(StructuralMismatchError, match="never closed"):
            Renderer(make_context()).render(events)

    def test_error_is_rendering_error(self):
        assert issubclass(StructuralMismatchError, RenderingError)

    def test_renderer_reusable_after_failure(self, make_context):
        renderer = Renderer(make_context())
        with pytest.raises(StructuralMismatchError):
            renderer.render([(Start(Paragraph()), rng(0, 1))])
        views = renderer.render(wrap(Paragraph(), rng(0, 1), (Text("a"), rng(0, 1))))
        assert len(views) == 1


@pytest.mark.unit
class TestBreaks:
    """Tests for soft and hard line breaks."""

    def events(self):
        return wrap(
            Paragraph(),
            rng(0, 3),
            (Text("a"), rng(0, 1)),
            (SoftBreak(), rng(1, 2)),
            (Text("b"), rng(2, 3)),
        )

    def test_soft_break_renders_newline_text(self, make_context):
        paragraph = render(make_context(), self.events()).find("p")
        assert any(isinstance(child, VText) and child.text == "\n" for child in paragraph.children)
        assert paragraph.find("br") is None

    def test_hard_break_renders_br(self, make_context):
        events = wrap(Paragraph(), rng(0, 5), (Text("a"), rng(0, 1)), (HardBreak(), rng(1, 4)))
        assert render(make_context(), events).find("br") is not None

    def test_hard_line_breaks_option(self, make_context):
        view = render_events(make_context(hard_line_breaks=True), self.events())
        hard = [(HardBreak(), p) if isinstance(e, SoftBreak) else (e, p) for e, p in self.events()]
        assert view.find("br") is not None
        assert view.to_html() == render_events(make_context(), hard).to_html()


@pytest.mark.unit
class TestLinks:
    """Tests for link and image rendering and the override hook."""

    def test_default_anchor(self, make_context):
        events = wrap(
            Paragraph(),
            rng(0, 20),
            *wrap(Link(dest_url="https://example.com"), rng(0, 20), (Text("site"), rng(1, 5))),
        )
        anchor = render(make_context(), events).find("a")
        assert anchor.attrs["href"] == "https://example.com"
        assert anchor.text_content == "site"

    def test_override_called_once_per_link(self, make_context):
        calls = []

        def render_links(link):
            calls.append(link)
            return VNode("button", children=[link.content])

        events = wrap(
            Paragraph(),
            rng(0, 20),
            *wrap(Link(link_type="reference", dest_url="/x", title="T"), rng(0, 20), (Text("site"), rng(1, 5))),
        )
        view = render(make_context(render_links=render_links), events)

        assert len(calls) == 1
        link = calls[0]
        assert link.url == "/x"
        assert link.title == "T"
        assert link.link_type == "reference"
        assert not link.image
        assert link.content.text_content == "site"
        assert view.find("button") is not None
        assert view.find("a") is None

    def test_image_alt_from_text(self, make_context):
        events = wrap(
            Image(dest_url="cat.png", title="Cat"),
            rng(0, 30),
            (Text("a "), rng(2, 4)),
            *wrap(Emphasis(), rng(4, 11), (Text("fluffy"), rng(5, 11))),
            (Text(" cat"), rng(12, 16)),
        )
        image = render(make_context(), events).find("img")
        assert image.attrs == {"src": "cat.png", "alt": "a fluffy cat"}

    def test_image_alt_falls_back_to_title(self, make_context):
        events = wrap(Image(dest_url="cat.png", title="Cat"), rng(0, 10))
        assert render(make_context(), events).find("img").attrs["alt"] == "Cat"

    def test_image_passed_to_override(self, make_context):
        calls = []

        def render_links(link):
            calls.append(link)
            return VText(link.alt)

        events = wrap(Image(dest_url="cat.png"), rng(0, 12), (Text("cat"), rng(2, 5)))
        render(make_context(render_links=render_links), events)

        assert calls[0].image
        assert calls[0].alt == "cat"
        assert calls[0].url == "cat.png"


@pytest.mark.unit
class TestTaskListMarkers:
    """Tests for task list checkboxes."""

    def events(self, checked=False):
        return wrap(
            List(),
            rng(0, 12),
            *wrap(Item(), rng(0, 12), (TaskListMarker(checked=checked), rng(2, 5)), (Text("todo"), rng(6, 10))),
        )

    def test_checkbox_rendered_with_state(self, make_context):
        checkbox = render(make_context(), self.events(checked=True)).find("input")
        assert checkbox.attrs["type"] == "checkbox"
        assert checkbox.attrs["checked"] is True

    def test_click_reported_once_and_not_toggled(self, make_context, clicks):
        checkbox = render(make_context(), self.events()).find("input")
        event = checkbox.click(PointerEvent())

        assert len(clicks) == 1
        assert clicks[0].position == rng(2, 5)
        assert clicks[0].mouse_event is event
        assert event.default_prevented
        assert event.propagation_stopped
        assert checkbox.attrs["checked"] is False


@pytest.mark.unit
class TestComponents:
    """Tests for custom component dispatch."""

    def test_registered_component_receives_props(self, make_context):
        received = []

        def callout(props):
            received.append(props)
            return VNode("aside", attrs={"data-kind": props.get("kind")}, children=[props.children])

        events = wrap(
            Component(name="Callout", attributes=(("kind", "info"),)),
            rng(0, 30),
            *wrap(Paragraph(), rng(16, 21), (Text("Hello"), rng(16, 21))),
        )
        view = render(make_context(components={"Callout": callout}), events)

        aside = view.find("aside")
        assert aside.attrs["data-kind"] == "info"
        assert aside.find("p").text_content == "Hello"
        assert received[0].name == "Callout"
        assert received[0].attributes == [("kind", "info")]
        assert received[0].get("missing", "x") == "x"

    def test_unregistered_component_renders_nothing(self, make_context):
        events = wrap(
            Paragraph(),
            rng(0, 30),
            (Text("before "), rng(0, 7)),
            *wrap(Component(name="Missing"), rng(7, 25), (Text("hidden"), rng(16, 22))),
            (Text(" after"), rng(25, 30)),
        )
        context = make_context()
        view = render(context, events)

        assert view.text_content == "before  after"
        assert len(context.debug_info) == 1
        assert "Missing" in context.debug_info[0]


@pytest.mark.unit
class TestMath:
    """Tests for math rendering and stylesheet registration."""

    def test_stylesheet_mounted_per_math_node(self, make_context):
        events = [
            *wrap(Paragraph(), rng(0, 11), (InlineMath("a"), rng(0, 3)), (InlineMath("b"), rng(8, 11))),
            (DisplayMath("c"), rng(13, 20)),
        ]
        context = make_context()
        view = render(context, events)

        assert context.stylesheet_mounts == 3
        assert list(context.stylesheets) == [KATEX_STYLESHEET_HREF]
        assert len(view.find_all("span")) == 2
        display = view.find("div")
        assert display.classes == ["math", "math-display"]
        assert display.text_content == "c"

    def test_no_math_no_stylesheet(self, make_context):
        context = make_context()
        render(context, wrap(Paragraph(), rng(0, 1), (Text("a"), rng(0, 1))))
        assert context.stylesheet_mounts == 0
        assert context.head_html() == ""


@pytest.mark.unit
class TestFrontmatter:
    """Tests for frontmatter capture."""

    def events(self):
        return [
            *wrap(MetadataBlock(), rng(0, 16), (Text("title: x\n"), rng(4, 13))),
            *wrap(Paragraph(), rng(17, 18), (Text("a"), rng(17, 18))),
        ]

    def test_frontmatter_written_to_slot(self, make_context):
        slot = Slot()
        view = render(make_context(frontmatter=slot), self.events())
        assert slot.value == "title: x\n"
        assert view.text_content == "a"

    def test_frontmatter_discarded_without_slot(self, make_context):
        view = render(make_context(), self.events())
        assert view.text_content == "a"


@pytest.mark.unit
class TestTables:
    """Tests for table rendering."""

    def test_head_cells_and_alignment(self, make_context):
        events = wrap(
            Table(alignments=("left", None)),
            rng(0, 30),
            *wrap(
                TableHead(),
                rng(0, 10),
                *wrap(TableCell(alignment="left"), rng(1, 4), (Text("a"), rng(2, 3))),
                *wrap(TableCell(), rng(5, 8), (Text("b"), rng(6, 7))),
            ),
            *wrap(
                TableRow(),
                rng(20, 30),
                *wrap(TableCell(alignment="left"), rng(21, 24), (Text("1"), rng(22, 23))),
                *wrap(TableCell(), rng(25, 28), (Text("2"), rng(26, 27))),
            ),
        )
        table = render(make_context(), events).find("table")

        head = table.find("thead")
        assert [cell.text_content for cell in head.find_all("th")] == ["a", "b"]
        assert head.find("tr") is not None
        assert head.find_all("th")[0].style == "text-align: left"
        assert head.find_all("th")[1].style is None

        cells = table.find_all("td")
        assert [cell.text_content for cell in cells] == ["1", "2"]
        assert cells[0].style == "text-align: left"


@pytest.mark.unit
class TestCodeAndHtml:
    """Tests for code blocks, inline code and raw HTML."""

    def test_code_block_language_class(self, make_context):
        events = wrap(CodeBlock(info="python extra"), rng(0, 20), (Text("x = 1\n"), rng(10, 16)))
        pre = render(make_context(), events).find("pre")
        code = pre.find("code")
        assert code.classes == ["language-python"]
        assert code.text_content == "x = 1\n"

    def test_code_block_raw_text_not_wrapped(self, make_context):
        events = wrap(CodeBlock(), rng(0, 10), (Text("a\n"), rng(4, 6)), (Text("b\n"), rng(6, 8)))
        pre = render(make_context(), events).find("pre")
        assert pre.find("span") is None
        assert pre.text_content == "a\nb\n"

    def test_highlighted_code_block(self, make_context):
        pytest.importorskip("pygments")
        events = wrap(CodeBlock(info="python"), rng(0, 20), (Text("x = 1\n"), rng(10, 16)))
        pre = render(make_context(theme="default"), events).find("pre")

        assert pre.classes == ["highlight"]
        assert pre.inner_html.startswith('<code class="language-python">')
        assert "<span" in pre.inner_html
        assert pre.style.startswith("background-color:")

    def test_inline_code(self, make_context):
        events = wrap(Paragraph(), rng(0, 5), (Code("x"), rng(0, 3)))
        code = render(make_context(), events).find("code")
        assert code.text_content == "x"
        assert code.position == rng(0, 3)

    def test_html_block_inner_html(self, make_context):
        events = wrap(HtmlBlock(), rng(0, 13), (Html("<b>x</b>\n"), rng(0, 13)))
        div = render(make_context(), events).find("div")
        assert div.inner_html == "<b>x</b>\n"
        assert div.children == []

    def test_inline_html(self, make_context):
        events = wrap(Paragraph(), rng(0, 5), (Html("<br/>"), rng(0, 5)))
        span = render(make_context(), events).find("span")
        assert span.inner_html == "<br/>"


@pytest.mark.unit
class TestFootnotes:
    """Tests for footnote references and definitions."""

    def test_reference_links_to_definition(self, make_context):
        events = [
            *wrap(Paragraph(), rng(0, 8), (Text("Text"), rng(0, 4)), (FootnoteReference("1"), rng(4, 8))),
            *wrap(FootnoteDefinition(label="1"), rng(10, 20), *wrap(Paragraph(), rng(16, 20), (Text("Note"), rng(16, 20)))),
        ]
        view = render(make_context(), events)

        reference = view.find("sup")
        assert reference.find("a").attrs["href"] == "#fn-1"

        definition = view.find("div")
        assert definition.id == "fn-1"
        assert "footnote-definition" in definition.classes
        assert definition.children[0].tag == "sup"
        assert definition.text_content == "1Note"


@pytest.mark.unit
class TestRenderEvents:
    """Tests for the render_events entry point."""

    def test_returns_single_fragment(self, make_context):
        events = [
            *wrap(Paragraph(), rng(0, 1), (Text("a"), rng(0, 1))),
            *wrap(Paragraph(), rng(3, 4), (Text("b"), rng(3, 4))),
        ]
        view = render_events(make_context(), events)
        assert isinstance(view, VFragment)
        assert [child.tag for child in view.children] == ["p", "p"]
