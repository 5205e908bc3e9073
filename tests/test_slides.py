"""Tests for slide structure: remove, insert, move, duplicate, copy across decks."""

import logging

import pytest

from deckgraph import Presentation
from deckgraph.errors import (InvalidArgumentError, NotPresentError,
                              UnsupportedOperationError)
from deckgraph.opc.oxml import NS, new_element, parse, qn, r_attr, xpath

from conftest import TITLE_AND_CONTENT, png_bytes

SECTIONS_URI = "{521415D9-36F7-43E2-AB2F-B90AF26B5E84}"


def titles(prs) -> list[str]:
    return [slide.shapes["Title 1"].text_frame.text for slide in prs.slides]


def add_custom_show(prs, slides) -> None:
    xml = (f'<p:custShowLst xmlns:p="{NS["p"]}" xmlns:r="{NS["r"]}">'
           '<p:custShow name="Short" id="0"><p:sldLst>'
           + "".join(f'<p:sld r:id="{slide.rId}"/>' for slide in slides)
           + "</p:sldLst></p:custShow></p:custShowLst>")
    prs.element.find(qn("p:notesSz")).addnext(parse(xml.encode()))
    prs.touch()


def add_section(prs, slides) -> None:
    xml = (f'<p:extLst xmlns:p="{NS["p"]}" xmlns:p14="{NS["p14"]}">'
           f'<p:ext uri="{SECTIONS_URI}"><p14:sectionLst>'
           '<p14:section name="Default" id="{8A2B0C6E-0D5B-4E7A-9C1F-3B2E4D5A6F70}"><p14:sldIdLst>'
           + "".join(f'<p14:sldId id="{slide.slide_id}"/>' for slide in slides)
           + "</p14:sldIdLst></p14:section></p14:sectionLst></p:ext></p:extLst>")
    prs.element.append(parse(xml.encode()))
    prs.touch()


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------

class TestRemove:
    def test_remove_middle_shifts_following(self, three_slides):
        third = three_slides.slides[2]
        three_slides.slides.remove(2)
        assert len(three_slides.slides) == 2
        assert titles(three_slides) == ["Slide 1", "Slide 3"]
        assert third.number == 2

    def test_remove_by_view(self, three_slides):
        three_slides.slides.remove(three_slides.slides[0])
        assert titles(three_slides) == ["Slide 2", "Slide 3"]

    def test_removed_part_is_unreachable(self, three_slides):
        part = three_slides.slides[1].part
        three_slides.slides[1].remove()
        assert not three_slides.graph.contains(part)

    def test_scrubs_custom_shows_and_sections(self, three_slides):
        slides = list(three_slides.slides)
        add_custom_show(three_slides, slides)
        add_section(three_slides, slides)
        removed_id = slides[1].slide_id

        three_slides.slides.remove(2)

        shown = xpath(three_slides.element, "p:custShowLst/p:custShow/p:sldLst/p:sld")
        assert [entry.get(r_attr("id")) for entry in shown] == [slides[0].rId, slides[2].rId]
        listed = [int(e.get("id")) for e in xpath(three_slides.element, ".//p14:sldId")]
        assert removed_id not in listed
        assert len(listed) == 2

    def test_plan_describes_cleanup(self, three_slides):
        plan = three_slides.slides.remove(1)
        lines = plan.describe()
        assert lines[0].startswith("remove /ppt/slides/")
        assert any("sldId" in line for line in lines)

    @pytest.mark.parametrize("position", [0, 4, -1])
    def test_invalid_position(self, three_slides, position):
        with pytest.raises(InvalidArgumentError):
            three_slides.slides.remove(position)
        assert len(three_slides.slides) == 3

    def test_slide_from_other_deck(self, three_slides, blank_slide):
        with pytest.raises(InvalidArgumentError):
            three_slides.slides.remove(blank_slide.slides[0])


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class TestOrdering:
    def test_at_is_one_based(self, three_slides):
        assert three_slides.slides.at(1) == three_slides.slides[0]
        with pytest.raises(InvalidArgumentError):
            three_slides.slides.at(0)

    def test_move_with_number(self, three_slides):
        three_slides.slides[0].number = 3
        assert titles(three_slides) == ["Slide 2", "Slide 3", "Slide 1"]

    def test_move_out_of_range(self, three_slides):
        with pytest.raises(InvalidArgumentError):
            three_slides.slides[0].number = 4

    def test_insert_copy(self, three_slides):
        added = three_slides.slides.insert(1, three_slides.slides[2])
        assert added.number == 1
        assert titles(three_slides) == ["Slide 3", "Slide 1", "Slide 2", "Slide 3"]

    def test_insert_at_end(self, three_slides):
        three_slides.slides.insert(4, three_slides.slides[0])
        assert titles(three_slides)[-1] == "Slide 1"


# ---------------------------------------------------------------------------
# Duplicate / add
# ---------------------------------------------------------------------------

class TestDuplicate:
    def test_appended_copy(self, three_slides):
        original = three_slides.slides[0]
        ids = [slide.slide_id for slide in three_slides.slides]
        copy = original.duplicate()
        assert copy.number == 4
        assert copy.slide_id == max(ids) + 1
        assert copy.layout == original.layout
        assert copy.part is not original.part

    def test_copy_is_independent(self, three_slides):
        copy = three_slides.slides.duplicate(three_slides.slides[0])
        copy.shapes["Title 1"].text_frame.text = "Changed"
        assert titles(three_slides) == ["Slide 1", "Slide 2", "Slide 3", "Changed"]

    def test_images_are_shared(self, picture_deck):
        original = picture_deck.slides[0]
        copy = original.duplicate()
        assert copy.shapes["Logo"].image.part is original.shapes["Logo"].image.part

    def test_duplicate_from_other_deck(self, three_slides, blank_slide):
        with pytest.raises(InvalidArgumentError):
            three_slides.slides.duplicate(blank_slide.slides[0])

    def test_add_empty(self, three_slides):
        layout = three_slides.slide_layouts[TITLE_AND_CONTENT]
        slide = three_slides.slides.add_empty(layout)
        assert slide.number == 4
        assert slide.layout == layout
        layout_names = [s.name for s in layout.shapes if s.is_placeholder]
        assert [s.name for s in slide.shapes] == layout_names
        assert all(s.text_frame.text == "" for s in slide.shapes)

    def test_round_trip(self, three_slides):
        three_slides.slides[0].duplicate()
        reopened = Presentation.open(three_slides.to_bytes())
        assert titles(reopened) == ["Slide 1", "Slide 2", "Slide 3", "Slide 1"]


class TestCopyAcrossDecks:
    def test_brings_master_and_layout(self, three_slides, picture_deck):
        source = picture_deck.slides[0]
        copy = three_slides.slides.add(source)

        assert len(three_slides.slides) == 4
        assert len(three_slides.slide_masters) == 2
        assert len(three_slides.slide_masters[0].layouts) == 11
        imported = three_slides.slide_masters[1]
        assert [layout.name for layout in imported.layouts] == [source.layout.name]
        assert copy.master == imported
        assert sorted(s.name for s in copy.shapes) == ["Logo", "Logo copy"]

    def test_ids_stay_unique(self, three_slides, picture_deck):
        three_slides.slides.add(picture_deck.slides[0])
        masters = three_slides.slide_masters
        master_ids = [m.master_id for m in masters]
        layout_ids = [layout.layout_id for m in masters for layout in m.layouts]
        assert len(set(master_ids + layout_ids)) == len(master_ids) + len(layout_ids)
        assert min(layout_ids) > max(master_ids)

    def test_dangling_layout_id_is_pruned(self, three_slides, picture_deck, caplog):
        lst = picture_deck.slide_masters[0].element.find(qn("p:sldLayoutIdLst"))
        dangling = new_element("p:sldLayoutId", id="2147483700")
        dangling.set(r_attr("id"), "rId999")
        lst.append(dangling)

        with caplog.at_level(logging.WARNING, logger="deckgraph.copying.slides"):
            three_slides.slides.add(picture_deck.slides[0])
        assert "rId999" in caplog.text

        imported = three_slides.slide_masters[1]
        entries = imported.element.find(qn("p:sldLayoutIdLst")).findall(qn("p:sldLayoutId"))
        assert len(entries) == 1
        assert entries[0].get(r_attr("id")) in imported.part.rels

        reopened = Presentation.open(three_slides.to_bytes())
        assert len(reopened.slides) == 4
        assert len(reopened.slide_masters[1].layouts) == 1

    def test_source_is_untouched(self, three_slides, picture_deck):
        before = len(picture_deck.graph.parts())
        three_slides.slides.add(picture_deck.slides[0])
        assert len(picture_deck.graph.parts()) == before
        assert len(picture_deck.slides) == 2

    def test_round_trip(self, three_slides, picture_deck):
        three_slides.slides.add(picture_deck.slides[0])
        reopened = Presentation.open(three_slides.to_bytes())
        assert len(reopened.slides) == 4
        assert len(reopened.slide_masters) == 2
        last = reopened.slides[3]
        assert last.shapes["Logo"].image.blob == picture_deck.slides[0].shapes["Logo"].image.blob


# ---------------------------------------------------------------------------
# Slide properties
# ---------------------------------------------------------------------------

class TestSlideProperties:
    def test_hidden(self, three_slides):
        slide = three_slides.slides[1]
        assert not slide.hidden
        slide.hidden = True
        reopened = Presentation.open(three_slides.to_bytes())
        assert [s.hidden for s in reopened.slides] == [False, True, False]

    def test_name(self, three_slides):
        slide = three_slides.slides[0]
        slide.name = "Intro"
        assert slide.name == "Intro"

    def test_unsupported_exports(self, three_slides):
        slide = three_slides.slides[0]
        with pytest.raises(UnsupportedOperationError):
            slide.to_html()
        with pytest.raises(UnsupportedOperationError):
            slide.save_as_png("slide.png")

    def test_to_dict(self, three_slides):
        d = three_slides.slides[0].to_dict()
        assert d["number"] == 1
        assert d["layout"] == "Title and Content"
        assert len(d["shapes"]) == 2


class TestBackground:
    def test_absent(self, three_slides):
        background = three_slides.slides[0].background
        assert not background.present()
        with pytest.raises(NotPresentError):
            background.blob

    def test_update_creates_image_background(self, three_slides):
        image = png_bytes(color=(0, 0, 255))
        background = three_slides.slides[0].background
        background.update(image)
        assert background.present()
        assert background.blob == image
        assert background.mime == "image/png"

        reopened = Presentation.open(three_slides.to_bytes())
        assert reopened.slides[0].background.blob == image
        assert not reopened.slides[1].background.present()

    def test_update_replaces_existing(self, three_slides):
        background = three_slides.slides[0].background
        background.update(png_bytes(color=(0, 0, 255)))
        replacement = png_bytes(color=(0, 255, 0))
        background.update(replacement)
        assert background.blob == replacement
