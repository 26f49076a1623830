import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models import DetectorCategory, Diagnostic
from .base_analyzer import ExternalToolAnalyzer

# solhint uses eslint-style numeric levels in some formatter versions
NUMERIC_SEVERITIES = {2: 'Error', 1: 'Warning'}


def normalize_severity(severity: Any) -> str:
    if isinstance(severity, int) and not isinstance(severity, bool):
        return NUMERIC_SEVERITIES.get(severity, str(severity))
    if severity is None:
        return ''
    text = str(severity).strip()
    if text.lower() in ('error', 'warning'):
        return text.capitalize()
    return text


def _iter_messages(data: Any) -> Iterable[Dict[str, Any]]:
    if isinstance(data, dict):
        data = [data]
    for item in data:
        if not isinstance(item, dict):
            continue
        if 'messages' in item:
            for message in item.get('messages') or []:
                yield message
        elif 'ruleId' in item:
            yield item


class SolhintAnalyzer(ExternalToolAnalyzer):
    """Style backend wrapping the ``solhint`` linter."""

    name = 'solhint'
    category = DetectorCategory.STYLE
    timeout = 15

    def __init__(self, executable: str = 'solhint', timeout: Optional[int] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(executable, timeout, logger)

    def build_command(self, contract_path: str) -> Sequence[str]:
        return [self.executable, contract_path, '--formatter', 'json']

    def parse_output(self, data: Any, contract_path: str) -> List[Diagnostic]:
        linting = []
        for message in _iter_messages(data):
            column = message.get('column')
            linting.append(Diagnostic(
                source=self.name,
                category=DetectorCategory.STYLE,
                name=message.get('ruleId') or 'unknown',
                description=message.get('message', ''),
                severity=normalize_severity(message.get('severity')),
                line=int(message.get('line') or 1),
                column=int(column) if column is not None else None,
            ))
        return linting
