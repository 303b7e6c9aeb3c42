from mediavars.parser.errors import ParseError
from mediavars.parser.transformer import parse_css

__all__ = ["ParseError", "parse_css"]
