from .match_report import NO_MATCH_TEXT, format_match_report

__all__ = ["NO_MATCH_TEXT", "format_match_report"]
