import logging
from typing import Any, Dict, List, Optional, Sequence

from ..models import DetectorCategory, Diagnostic
from .base_analyzer import ExternalToolAnalyzer

SEVERITY_NAMES = {
    'high': 'High',
    'medium': 'Medium',
    'low': 'Low',
    'informational': 'Informational',
    'optimization': 'Optimization',
}


def normalize_impact(impact: Any) -> str:
    """Map slither's impact label onto the canonical security severity spelling."""
    if impact is None:
        return ''
    text = str(impact).strip()
    return SEVERITY_NAMES.get(text.lower(), text)


def _element_line(element: Dict[str, Any]) -> int:
    mapping = element.get('source_mapping') or {}
    lines = mapping.get('lines') or []
    if lines:
        return int(lines[0])
    if element.get('line') is not None:
        return int(element['line'])
    return 1


def _element_function(element: Dict[str, Any]) -> str:
    if element.get('function_name'):
        return element['function_name']
    if element.get('type') == 'function' and element.get('name'):
        return element['name']
    parent = (element.get('type_specific_fields') or {}).get('parent') or {}
    if parent.get('type') == 'function' and parent.get('name'):
        return parent['name']
    return 'N/A'


def _element_file(element: Dict[str, Any]) -> str:
    mapping = element.get('source_mapping') or {}
    return mapping.get('filename_short') or element.get('filename') or 'contract.sol'


class SlitherAnalyzer(ExternalToolAnalyzer):
    """Security backend wrapping the ``slither`` command line tool."""

    name = 'slither'
    category = DetectorCategory.SECURITY
    timeout = 30

    def __init__(self, executable: str = 'slither', timeout: Optional[int] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(executable, timeout, logger)

    def build_command(self, contract_path: str) -> Sequence[str]:
        return [self.executable, contract_path, '--json', '-']

    def parse_output(self, data: Any, contract_path: str) -> List[Diagnostic]:
        if not isinstance(data, dict):
            self.logger.warning("Slither report is not a JSON object")
            return []
        if data.get('success') is False:
            self.logger.warning(f"Slither reported a failure: {data.get('error')}")
            return []

        detectors = (data.get('results') or {}).get('detectors') or []
        bugs = []
        for detector in detectors:
            for element in detector.get('elements') or []:
                bugs.append(Diagnostic(
                    source=self.name,
                    category=DetectorCategory.SECURITY,
                    name=detector.get('check', 'unknown'),
                    description=(detector.get('description') or '').strip(),
                    severity=normalize_impact(detector.get('impact')),
                    confidence=detector.get('confidence'),
                    line=_element_line(element),
                    function=_element_function(element),
                    file=_element_file(element),
                ))
        return bugs
