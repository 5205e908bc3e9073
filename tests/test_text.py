"""Tests for text frames, paragraphs, portions and fonts."""

import pytest
from pptx.util import Emu

from deckgraph.errors import InvalidArgumentError
from deckgraph.opc.oxml import new_element, qn
from deckgraph.style.colors import ColorRef, ColorType
from deckgraph.text import AutofitType


@pytest.fixture
def body(three_slides):
    """The content placeholder of slide 1 (no auto-fit)."""
    return three_slides.slides[0].shapes["Content Placeholder 2"]


@pytest.fixture
def frame(body):
    return body.text_frame


class TestTextFrame:
    def test_read_title(self, three_slides):
        assert three_slides.slides[2].shapes["Title 1"].text_frame.text == "Slide 3"

    def test_set_text_splits_paragraphs(self, frame):
        frame.text = "First\nSecond\nThird"
        assert [p.text for p in frame.paragraphs] == ["First", "Second", "Third"]
        assert frame.text == "First\nSecond\nThird"

    def test_set_text_keeps_run_formatting(self, frame):
        frame.text = "Bold"
        frame.paragraphs[0].portions[0].font.bold = True
        frame.text = "Still bold\nAlso bold"
        assert all(p.portions[0].font.bold for p in frame.paragraphs)

    def test_add_paragraph(self, frame):
        frame.text = "One"
        paragraph = frame.add_paragraph("Two")
        assert paragraph.text == "Two"
        assert len(frame.paragraphs) == 2

    def test_portions(self, frame):
        frame.text = "Hello"
        frame.paragraphs[0].add_portion(" world")
        assert [p.text for p in frame.portions()] == ["Hello", " world"]
        assert frame.text == "Hello world"

    def test_remove_portion(self, frame):
        frame.text = "Hello"
        portion = frame.paragraphs[0].add_portion(" world")
        portion.remove()
        assert frame.text == "Hello"

    def test_shape_without_text_body(self, picture_deck):
        picture = picture_deck.slides[0].shapes["Logo"]
        assert not hasattr(picture, "text_frame")


class TestParagraph:
    def test_level(self, frame):
        frame.text = "Indented"
        paragraph = frame.paragraphs[0]
        assert paragraph.level == 0
        paragraph.level = 2
        assert paragraph.level == 2

    def test_level_out_of_range(self, frame):
        frame.text = "x"
        with pytest.raises(InvalidArgumentError):
            frame.paragraphs[0].level = 9

    def test_alignment(self, frame):
        frame.text = "Centered"
        frame.paragraphs[0].alignment = "ctr"
        assert frame.paragraphs[0].alignment == "ctr"

    def test_line_break_reads_as_vertical_tab(self, frame):
        frame.text = "a"
        run = frame.paragraphs[0].element.find(qn("a:r"))
        run.addnext(new_element("a:br"))
        frame.paragraphs[0].add_portion("b")
        assert frame.paragraphs[0].text == "a\vb"


class TestFont:
    def test_explicit_fields(self, frame):
        frame.text = "Styled"
        font = frame.paragraphs[0].portions[0].font
        assert font.size_pt is None and font.bold is None
        font.size_pt = 24
        font.bold = True
        font.italic = False
        font.typeface = "Georgia"
        font.color = "#1F497D"
        assert font.size_pt == 24
        assert font.bold is True
        assert font.italic is False
        assert font.typeface == "Georgia"
        assert font.color == ColorRef(ColorType.RGB, "1F497D")

    def test_highlight_with_alpha(self, frame):
        frame.text = "Marked"
        font = frame.paragraphs[0].portions[0].font
        assert font.highlight is None
        font.set_highlight("FFFF00", alpha=0.5)
        assert font.highlight.hex == "FFFF00"
        assert font.highlight.alpha == 0.5

    def test_hyperlink(self, three_slides, frame):
        frame.text = "Link"
        portion = frame.paragraphs[0].portions[0]
        part = three_slides.slides[0].part
        before = len(part.rels)
        portion.hyperlink = "https://example.com"
        assert portion.hyperlink == "https://example.com"
        assert len(part.rels) == before + 1
        portion.hyperlink = "https://example.org"
        assert portion.hyperlink == "https://example.org"
        assert len(part.rels) == before + 1
        portion.hyperlink = None
        assert portion.hyperlink is None
        assert len(part.rels) == before


class TestBodyProperties:
    def test_default_margins(self, frame):
        assert frame.margin_left == Emu(91440)
        assert frame.margin_top == Emu(45720)

    def test_set_margins(self, frame):
        frame.margin_left = 0
        frame.margin_bottom = 12700
        assert frame.margin_left == 0
        assert frame.margin_bottom == 12700

    def test_autofit_type(self, frame):
        assert frame.autofit_type is AutofitType.NONE
        frame.autofit_type = AutofitType.SHRINK
        assert frame.autofit_type is AutofitType.SHRINK

    def test_wrap(self, frame):
        assert frame.wrap
        frame.wrap = False
        assert not frame.wrap

    def test_level_font(self, frame):
        frame.set_level_font(1, size_pt=14, bold=True)
        data = frame.level_font_data(1)
        assert data.size_pt == 14 and data.bold is True
        frame.clear_list_style()
        assert frame.level_font_data(1).is_empty()
