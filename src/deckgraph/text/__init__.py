from .font import Font
from .frame import AutofitType, Paragraph, Portion, TextFrame

__all__ = ["AutofitType", "Font", "Paragraph", "Portion", "TextFrame"]
