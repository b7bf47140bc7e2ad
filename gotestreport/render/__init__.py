from .summary import SummaryRenderer, emoji_for, write_summary

__all__ = ["SummaryRenderer", "emoji_for", "write_summary"]
