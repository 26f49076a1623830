from .report_generator import generate_json_report, load_json_report

__all__ = ['generate_json_report', 'load_json_report']
