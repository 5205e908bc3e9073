"""Graphic frames (``p:graphicFrame``): charts, tables and anything else."""

import pandas as pd

from deckgraph.charts.workbook import chart_type_name, read_workbook
from deckgraph.errors import InvalidArgumentError, NotPresentError
from deckgraph.opc.kinds import PartKind
from deckgraph.opc.oxml import get_or_add, new_element, qn, r_attr

from .base import Shape, ShapeKind


class GraphicFrame(Shape):
    """A frame around graphic data we do not model (SmartArt, OLE...)."""

    kind = ShapeKind.OTHER
    _nv_tag = "p:nvGraphicFramePr"

    def _own_xfrm(self):
        return self._element.find(qn("p:xfrm"))

    def _get_or_add_xfrm(self):
        xfrm = self._own_xfrm()
        if xfrm is None:
            xfrm = get_or_add(self._element, "p:xfrm", ("a:graphic",))
        for tag, attrs in (("a:off", ("x", "y")), ("a:ext", ("cx", "cy"))):
            child = get_or_add(xfrm, tag)
            for attr in attrs:
                child.attrib.setdefault(attr, "0")
        return xfrm

    @property
    def graphic_data(self):
        graphic = self._element.find(qn("a:graphic"))
        return graphic.find(qn("a:graphicData")) if graphic is not None else None

    @property
    def uri(self) -> str | None:
        data = self.graphic_data
        return data.get("uri") if data is not None else None


class Chart(GraphicFrame):
    kind = ShapeKind.CHART

    @property
    def chart_rId(self) -> str:
        return self.graphic_data.find(qn("c:chart")).get(r_attr("id"))

    @property
    def chart_part(self):
        return self.presentation.graph.resolve(self.part, self.chart_rId)

    @property
    def workbook_part(self):
        """Embedded workbook holding the chart data, ``None`` when absent."""
        targets = self.presentation.graph.related(self.chart_part, PartKind.WORKBOOK)
        return targets[0] if targets else None

    @property
    def chart_type(self) -> str | None:
        return chart_type_name(self.chart_part)

    def workbook_frame(self, sheet_name: str | int = 0) -> pd.DataFrame:
        part = self.workbook_part
        if part is None:
            raise NotPresentError(f"chart {self.name!r} has no embedded workbook")
        return read_workbook(part.blob, sheet_name=sheet_name)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["chart_type"] = self.chart_type
        return d


class Table(GraphicFrame):
    kind = ShapeKind.TABLE

    @property
    def _tbl(self):
        return self.graphic_data.find(qn("a:tbl"))

    def _rows(self) -> list:
        return self._tbl.findall(qn("a:tr"))

    @property
    def row_count(self) -> int:
        return len(self._rows())

    @property
    def column_count(self) -> int:
        grid = self._tbl.find(qn("a:tblGrid"))
        return len(grid.findall(qn("a:gridCol"))) if grid is not None else 0

    def _cell(self, row: int, column: int):
        rows = self._rows()
        if not 0 <= row < len(rows):
            raise InvalidArgumentError(f"row {row} out of range (table has {len(rows)})")
        cells = rows[row].findall(qn("a:tc"))
        if not 0 <= column < len(cells):
            raise InvalidArgumentError(f"column {column} out of range (row has {len(cells)})")
        return cells[column]

    def cell_text(self, row: int, column: int) -> str:
        cell = self._cell(row, column)
        paragraphs = cell.findall(f"{qn('a:txBody')}/{qn('a:p')}")
        return "\n".join("".join(t.text or "" for t in p.iter(qn("a:t"))) for p in paragraphs)

    def set_cell_text(self, row: int, column: int, text: str) -> None:
        cell = self._cell(row, column)
        tx_body = cell.find(qn("a:txBody"))
        if tx_body is None:
            tx_body = get_or_add(cell, "a:txBody", ("a:tcPr", "a:extLst"))
            tx_body.append(new_element("a:bodyPr"))
            tx_body.append(new_element("a:lstStyle"))
        paragraphs = tx_body.findall(qn("a:p"))
        if not paragraphs:
            paragraphs = [get_or_add(tx_body, "a:p")]
        for extra in paragraphs[1:]:
            tx_body.remove(extra)
        p = paragraphs[0]
        runs = p.findall(qn("a:r"))
        for r in runs[1:]:
            p.remove(r)
        if runs:
            get_or_add(runs[0], "a:t").text = text
        else:
            r = get_or_add(p, "a:r", ("a:endParaRPr",))
            get_or_add(r, "a:t").text = text
        self.presentation.touch()

    def rows(self) -> list[list[str]]:
        return [[self.cell_text(r, c) for c in range(len(row.findall(qn("a:tc"))))]
                for r, row in enumerate(self._rows())]

    def to_frame(self, header: bool = True) -> pd.DataFrame:
        rows = self.rows()
        if header and rows:
            return pd.DataFrame(rows[1:], columns=rows[0])
        return pd.DataFrame(rows)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["rows"] = self.row_count
        d["columns"] = self.column_count
        return d
