from .workbook import chart_type_name, read_workbook

__all__ = ["chart_type_name", "read_workbook"]
