"""Chart parts and their embedded workbooks."""

import io

import pandas as pd

from deckgraph.opc.oxml import localname, parse, qn


def _chart_space(chart_part):
    element = getattr(chart_part, "_element", None)
    return element if element is not None else parse(chart_part.blob)


def chart_type_name(chart_part) -> str | None:
    """Local name of the first plot in the chart (``barChart``, ``pieChart``...)."""
    chart = _chart_space(chart_part).find(qn("c:chart"))
    plot_area = chart.find(qn("c:plotArea")) if chart is not None else None
    if plot_area is None:
        return None
    for child in plot_area:
        if isinstance(child.tag, str) and child.tag != qn("c:layout"):
            return localname(child)
    return None


def read_workbook(blob: bytes, sheet_name: str | int = 0) -> pd.DataFrame:
    """Read one sheet of an embedded ``.xlsx`` workbook into a DataFrame."""
    return pd.read_excel(io.BytesIO(blob), sheet_name=sheet_name, engine="openpyxl")
