from .score_parser import parse_scores
from .renderer import render_feedback
from .report_generator import ReportGenerator

__all__ = [
    'parse_scores',
    'render_feedback',
    'ReportGenerator',
]
