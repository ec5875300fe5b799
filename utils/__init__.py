from .markup import MarkupError, from_xml, to_xml

__all__ = ["MarkupError", "from_xml", "to_xml"]
