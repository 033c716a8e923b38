from .orchestrator import AnalysisPipeline, evaluate_line
from .export import format_result_line, format_results, result_filename

__all__ = [
    "AnalysisPipeline",
    "evaluate_line",
    "format_result_line",
    "format_results",
    "result_filename",
]
