"""Shared fixtures: decks built in memory with python-pptx's default template."""

import io

import pptx
import pytest
from PIL import Image as PILImage
from pptx.chart.data import CategoryChartData
from pptx.enum.chart import XL_CHART_TYPE
from pptx.util import Inches

from deckgraph import Presentation, Settings

TITLE_AND_CONTENT = 1
BLANK = 6


class FakeMeasurer:
    """Every character is ``char_width`` wide; a line is as tall as the font."""

    def __init__(self, char_width: float = 10.0) -> None:
        self.char_width = char_width
        self.calls = []

    def measure(self, typeface, size_pt, text):
        self.calls.append((typeface, size_pt, text))
        return len(text) * self.char_width, float(size_pt)


def png_bytes(color=(255, 0, 0), size=(4, 3)) -> bytes:
    buffer = io.BytesIO()
    PILImage.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def deck_bytes(builder) -> bytes:
    prs = pptx.Presentation()
    builder(prs)
    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()


def titled_slides(count: int):
    def build(prs):
        for n in range(count):
            slide = prs.slides.add_slide(prs.slide_layouts[TITLE_AND_CONTENT])
            slide.shapes.title.text = f"Slide {n + 1}"
    return build


def open_deck(builder, **kwargs) -> Presentation:
    kwargs.setdefault("measurer", FakeMeasurer())
    return Presentation.open(deck_bytes(builder), **kwargs)


def strip_inherited_fonts(prs: Presentation) -> None:
    """Empty the list styles and end-of-paragraph runs of layout and master shapes.

    Leaves the master text styles and the default text style as the only
    font sources above the slide.
    """
    for master in prs.slide_masters:
        for view in [master] + master.layouts:
            for shape in view.shapes:
                if not getattr(shape, "has_text_frame", False):
                    continue
                lst = shape.text_frame.list_style
                if lst is not None:
                    for child in list(lst):
                        lst.remove(child)
                for end in shape.element.iter("{http://schemas.openxmlformats.org/drawingml/2006/main}endParaRPr"):
                    end.getparent().remove(end)
    prs.touch()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def measurer():
    return FakeMeasurer()


@pytest.fixture
def three_slides(measurer):
    """Three "Title and Content" slides titled "Slide 1".."Slide 3"."""
    return Presentation.open(deck_bytes(titled_slides(3)), measurer=measurer)


@pytest.fixture
def blank_slide(measurer):
    """One blank slide with a text box named "Title"."""
    def build(prs):
        slide = prs.slides.add_slide(prs.slide_layouts[BLANK])
        box = slide.shapes.add_textbox(Inches(1), Inches(1), Inches(3), Inches(1))
        box.name = "Title"
    return Presentation.open(deck_bytes(build), measurer=measurer)


def picture_deck_builder(prs):
    """Two blank slides; slide 1 shows the same image twice."""
    image = png_bytes()
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK])
    first = slide.shapes.add_picture(io.BytesIO(image), Inches(1), Inches(1))
    first.name = "Logo"
    second = slide.shapes.add_picture(io.BytesIO(image), Inches(3), Inches(1))
    second.name = "Logo copy"
    prs.slides.add_slide(prs.slide_layouts[BLANK])


@pytest.fixture
def picture_deck(measurer):
    return Presentation.open(deck_bytes(picture_deck_builder), measurer=measurer)


@pytest.fixture
def chart_deck(measurer):
    """Two slides; slide 1 holds a clustered column chart and a 2x2 table."""
    def build(prs):
        slide = prs.slides.add_slide(prs.slide_layouts[BLANK])
        data = CategoryChartData()
        data.categories = ["Q1", "Q2"]
        data.add_series("Sales", (1, 2))
        frame = slide.shapes.add_chart(XL_CHART_TYPE.COLUMN_CLUSTERED, Inches(1), Inches(1),
                                       Inches(4), Inches(3), data)
        frame.name = "Sales chart"
        table = slide.shapes.add_table(2, 2, Inches(5), Inches(1), Inches(4), Inches(1))
        table.name = "Totals"
        cells = table.table
        cells.cell(0, 0).text = "Region"
        cells.cell(0, 1).text = "Total"
        cells.cell(1, 0).text = "North"
        cells.cell(1, 1).text = "42"
        prs.slides.add_slide(prs.slide_layouts[BLANK])
    return Presentation.open(deck_bytes(build), measurer=measurer)


@pytest.fixture
def settings():
    return Settings(font_dirs=[], fallback_font=None)
