"""Tests for shape trees, shape variants and shape copying."""

import pytest
from pptx.enum.shapes import MSO_CONNECTOR
from pptx.util import Inches

from conftest import BLANK, deck_bytes, png_bytes
from deckgraph import Presentation
from deckgraph.errors import (
    InvalidArgumentError,
    NotPresentError,
    UnsupportedOperationError,
)
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import qn
from deckgraph.shapes import (
    AutoShape,
    Chart,
    GroupShape,
    Picture,
    PlaceholderKey,
    PlaceholderType,
    ShapeKind,
    Table,
)
from deckgraph.shapes.placeholder import match_placeholder


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def tree(blank_slide):
    return blank_slide.slides[0].shapes


@pytest.fixture
def group_deck(measurer):
    def build(prs):
        slide = prs.slides.add_slide(prs.slide_layouts[BLANK])
        group = slide.shapes.add_group_shape()
        group.name = "Group"
        inner = group.shapes.add_textbox(Inches(1), Inches(1), Inches(1), Inches(1))
        inner.name = "Inner"
    return Presentation.open(deck_bytes(build), measurer=measurer)


# ===================================================================
# Shape tree
# ===================================================================

class TestShapeTree:
    def test_lookup(self, tree):
        assert len(tree) == 1
        assert tree["Title"] is not None
        assert tree.get("Nope") is None
        with pytest.raises(KeyError):
            tree["Nope"]

    def test_wrappers(self, tree):
        shape = tree[0]
        assert isinstance(shape, AutoShape)
        assert shape.kind is ShapeKind.AUTO_SHAPE
        assert shape.is_text_box

    def test_find_by_id(self, tree):
        shape = tree["Title"]
        assert tree.find_by_id(shape.id) == shape
        assert tree.find_by_id(999) is None

    def test_add_text_box(self, tree):
        box = tree.add_text_box(0, 0, Inches(2), Inches(1), text="Hello")
        assert box.text_frame.text == "Hello"
        assert box.id == max(tree.ids())
        assert box.name.startswith("TextBox")

    def test_add_picture(self, tree):
        picture = tree.add_picture(png_bytes(), 0, 0)
        assert isinstance(picture, Picture)
        assert picture.image.mime == "image/png"
        assert picture.width > 0 and picture.height > 0

    def test_remove_releases_relationship(self, picture_deck):
        slide = picture_deck.slides[0]
        rels_before = len(slide.part.rels)
        picture = slide.shapes.add_picture(png_bytes(color=(0, 0, 255)), 0, 0)
        assert len(slide.part.rels) == rels_before + 1
        picture.remove()
        assert len(slide.part.rels) == rels_before
        assert len(slide.shapes) == 2

    def test_remove_keeps_shared_relationship(self, picture_deck):
        slide = picture_deck.slides[0]
        rId = slide.shapes["Logo"].image.rId
        slide.shapes["Logo"].remove()
        assert rId in slide.part.rels
        assert slide.shapes["Logo copy"].image.blob == png_bytes()

    def test_remove_foreign_shape(self, three_slides):
        first, second = three_slides.slides[0], three_slides.slides[1]
        with pytest.raises(InvalidArgumentError):
            first.shapes.remove(second.shapes[0])


# ===================================================================
# Identity and geometry
# ===================================================================

class TestShapeIdentity:
    def test_rename(self, tree):
        shape = tree["Title"]
        shape.name = "Heading"
        assert tree.get("Heading") == shape

    def test_rename_to_taken_name(self, tree):
        tree.add_text_box(0, 0, 10, 10).name = "Other"
        with pytest.raises(InvalidArgumentError):
            tree["Title"].name = "Other"

    def test_hidden(self, tree):
        shape = tree["Title"]
        assert not shape.hidden
        shape.hidden = True
        assert shape.hidden
        assert shape.to_dict()["hidden"] is True

    def test_geometry(self, tree):
        shape = tree["Title"]
        assert shape.x == Inches(1)
        assert shape.width == Inches(3)
        shape.x = Inches(2)
        shape.height = Inches(2)
        assert shape.x == Inches(2)
        assert shape.height == Inches(2)

    def test_to_json_unsupported(self, tree):
        with pytest.raises(UnsupportedOperationError):
            tree["Title"].to_json()


class TestPlaceholders:
    def test_slide_placeholder_inherits_geometry(self, three_slides):
        title = three_slides.slides[0].shapes["Title 1"]
        parent = title.parent_placeholder
        assert parent is not None
        assert title.placeholder.type is PlaceholderType.TITLE
        assert (title.x, title.y, title.width, title.height) == \
            (parent.x, parent.y, parent.width, parent.height)

    def test_setting_geometry_copies_inherited_values(self, three_slides):
        title = three_slides.slides[0].shapes["Title 1"]
        parent = title.parent_placeholder
        title.x = 0
        assert title.x == 0
        assert title.width == parent.width
        assert parent.x != 0

    def test_chain_ends_at_master(self, three_slides):
        title = three_slides.slides[0].shapes["Title 1"]
        layout_title = title.parent_placeholder
        master_title = layout_title.parent_placeholder
        assert master_title is not None
        assert master_title.owner == three_slides.slide_masters[0]
        assert master_title.parent_placeholder is None

    def test_non_placeholder(self, tree):
        assert tree["Title"].placeholder is None
        assert tree["Title"].parent_placeholder is None

    def test_match_by_normalized_type(self, three_slides):
        master = three_slides.slide_masters[0]
        key = PlaceholderKey(PlaceholderType.CENTER_TITLE, 0)
        match = match_placeholder(key, master.shapes)
        assert match.placeholder.type is PlaceholderType.TITLE


# ===================================================================
# Duplicate and copy
# ===================================================================

class TestDuplicate:
    def test_duplicate_gets_next_id_and_suffix(self, tree):
        highest = max(tree.ids())
        copy = tree["Title"].duplicate()
        assert copy.name == "Title 2"
        assert copy.id == highest + 1
        assert len(tree) == 2

    def test_suffix_after_highest(self, tree):
        for name in ("Logo", "Logo 2", "Logo 5"):
            tree.add_text_box(0, 0, 10, 10).name = name
        assert tree["Logo"].duplicate().name == "Logo 6"

    def test_duplicate_copies_text(self, tree):
        tree["Title"].text_frame.text = "Quarterly results"
        copy = tree["Title"].duplicate()
        assert copy.text_frame.text == "Quarterly results"

    def test_copy_to_other_slide(self, three_slides):
        source = three_slides.slides[0].shapes["Title 1"]
        target = three_slides.slides[1].shapes
        copy = target.add_copy(source)
        assert copy.name == "Title 1 2"
        assert copy.text_frame.text == "Slide 1"

    def test_copy_group_renumbers_children(self, group_deck):
        tree = group_deck.slides[0].shapes
        copy = tree["Group"].duplicate()
        assert isinstance(copy, GroupShape)
        inner = copy.shapes["Inner"]
        assert inner.id != tree["Group"].shapes["Inner"].id
        assert len(set(tree.ids())) == len(tree.ids())


class TestPictures:
    def test_copy_gets_fresh_image_part(self, picture_deck):
        logo = picture_deck.slides[0].shapes["Logo"]
        copy = picture_deck.slides[1].shapes.add_copy(logo)
        assert copy.image.part is not logo.image.part
        assert copy.image.blob == logo.image.blob

    def test_duplicate_gets_fresh_rel_id(self, picture_deck):
        logo = picture_deck.slides[0].shapes["Logo"]
        copy = logo.duplicate()
        assert copy.image.rId != logo.image.rId
        assert not copy.image.is_shared

    def test_update_shared_image_copies_on_write(self, picture_deck):
        shapes = picture_deck.slides[0].shapes
        logo, other = shapes["Logo"], shapes["Logo copy"]
        assert logo.image.is_shared
        new_bytes = png_bytes(color=(0, 255, 0))
        logo.image.update(new_bytes)
        assert logo.image.blob == new_bytes
        assert other.image.blob == png_bytes()
        assert logo.image.part is not other.image.part

    def test_update_unshared_image_in_place(self, picture_deck):
        copy = picture_deck.slides[0].shapes["Logo"].duplicate()
        part = copy.image.part
        new_bytes = png_bytes(color=(0, 0, 0))
        copy.image.update(new_bytes)
        assert copy.image.part is part
        assert part.blob == new_bytes

    def test_picture_without_svg(self, picture_deck):
        assert picture_deck.slides[0].shapes["Logo"].svg_content is None

    def test_missing_image(self, picture_deck):
        logo = picture_deck.slides[0].shapes["Logo"]
        logo.blip.attrib.clear()
        with pytest.raises(NotPresentError):
            logo.image


class TestChartsAndTables:
    def test_chart(self, chart_deck):
        chart = chart_deck.slides[0].shapes["Sales chart"]
        assert isinstance(chart, Chart)
        assert chart.chart_type == "barChart"
        assert chart.workbook_part is not None

    def test_workbook_frame(self, chart_deck):
        frame = chart_deck.slides[0].shapes["Sales chart"].workbook_frame()
        assert "Sales" in frame.columns
        assert list(frame["Sales"]) == [1, 2]

    def test_copy_chart_clones_chart_and_workbook(self, chart_deck):
        chart = chart_deck.slides[0].shapes["Sales chart"]
        copy = chart_deck.slides[1].shapes.add_copy(chart)
        assert copy.chart_part is not chart.chart_part
        assert copy.workbook_part is not chart.workbook_part
        assert copy.workbook_part.blob == chart.workbook_part.blob
        assert chart_deck.graph.kind_of(copy.chart_part) is PartKind.CHART

    def test_table(self, chart_deck):
        table = chart_deck.slides[0].shapes["Totals"]
        assert isinstance(table, Table)
        assert (table.row_count, table.column_count) == (2, 2)
        assert table.cell_text(1, 0) == "North"
        assert table.rows() == [["Region", "Total"], ["North", "42"]]

    def test_set_cell_text(self, chart_deck):
        table = chart_deck.slides[0].shapes["Totals"]
        table.set_cell_text(1, 1, "43")
        assert table.cell_text(1, 1) == "43"

    def test_set_text_of_cell_without_body(self, chart_deck):
        table = chart_deck.slides[0].shapes["Totals"]
        cell = table.element.findall(".//" + qn("a:tc"))[3]
        cell.remove(cell.find(qn("a:txBody")))
        assert table.cell_text(1, 1) == ""
        table.set_cell_text(1, 1, "44")
        assert table.cell_text(1, 1) == "44"
        assert cell[0].tag == qn("a:txBody")
        reopened = Presentation.open(chart_deck.to_bytes())
        assert reopened.slides[0].shapes["Totals"].cell_text(1, 1) == "44"

    def test_table_frame(self, chart_deck):
        frame = chart_deck.slides[0].shapes["Totals"].to_frame()
        assert list(frame.columns) == ["Region", "Total"]
        assert frame.iloc[0]["Region"] == "North"

    def test_cell_out_of_range(self, chart_deck):
        with pytest.raises(InvalidArgumentError):
            chart_deck.slides[0].shapes["Totals"].cell_text(5, 0)


class TestConnectors:
    @pytest.fixture
    def glued(self, measurer):
        def build(prs):
            slide = prs.slides.add_slide(prs.slide_layouts[BLANK])
            group = slide.shapes.add_group_shape()
            group.name = "Flow"
            start = group.shapes.add_textbox(Inches(1), Inches(1), Inches(1), Inches(1))
            start.name = "Start"
            end = group.shapes.add_textbox(Inches(4), Inches(1), Inches(1), Inches(1))
            end.name = "End"
            line = group.shapes.add_connector(MSO_CONNECTOR.STRAIGHT, 0, 0, 0, 0)
            line.name = "Arrow"
            line.begin_connect(start, 3)
            line.end_connect(end, 1)
        return Presentation.open(deck_bytes(build), measurer=measurer)

    def test_connection_ids(self, glued):
        flow = glued.slides[0].shapes["Flow"].shapes
        arrow = flow["Arrow"]
        assert arrow.kind is ShapeKind.CONNECTOR
        assert arrow.begin_id == flow["Start"].id
        assert arrow.end_id == flow["End"].id

    def test_copied_group_keeps_glue_inside(self, glued):
        tree = glued.slides[0].shapes
        copy = tree["Flow"].duplicate().shapes
        assert copy["Arrow"].begin_id == copy["Start"].id
        assert copy["Arrow"].end_id == copy["End"].id
        assert copy["Start"].id != tree["Flow"].shapes["Start"].id
