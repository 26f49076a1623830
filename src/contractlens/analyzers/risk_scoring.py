"""Risk score and audit grade.

The score is a plain weighted sum of diagnostic severities clamped to
``[0, 100]``; it saturates rather than normalizes, so a contract with many
findings sits at 100. The grade adds hard escalations: some finding names
force a ``C`` whatever the score.
"""

from typing import Dict, Iterable, Sequence

from ..models import AuditGrade, Diagnostic

SECURITY_WEIGHTS: Dict[str, int] = {
    'high': 25,
    'medium': 15,
    'low': 5,
    'informational': 1,
}

STYLE_WEIGHTS: Dict[str, int] = {
    'error': 3,
    'warning': 1,
}

MAX_SCORE = 100
GRADE_C_THRESHOLD = 70
GRADE_B_THRESHOLD = 40

# Substrings of a security finding name that force grade C
PROXY_MARKERS = ('proxy', 'upgradeable')
MINT_MARKERS = ('mint', 'unrestricted')
KILL_SWITCH_MARKERS = ('suicide', 'selfdestruct')
ESCALATION_MARKERS = PROXY_MARKERS + MINT_MARKERS + KILL_SWITCH_MARKERS


def _weight(severity: str, weights: Dict[str, int]) -> int:
    return weights.get((severity or '').strip().lower(), 0)


def compute_risk_score(security: Iterable[Diagnostic], style: Iterable[Diagnostic]) -> int:
    """Weighted severity sum of all diagnostics, clamped to ``[0, 100]``."""
    score = sum(_weight(bug.severity, SECURITY_WEIGHTS) for bug in security)
    score += sum(_weight(issue.severity, STYLE_WEIGHTS) for issue in style)
    return min(MAX_SCORE, max(0, score))


def has_escalation_marker(security: Iterable[Diagnostic], markers: Sequence[str] = ESCALATION_MARKERS) -> bool:
    for bug in security:
        name = (bug.name or '').lower()
        if any(marker in name for marker in markers):
            return True
    return False


def compute_audit_grade(risk_score: int, security: Sequence[Diagnostic]) -> AuditGrade:
    """
    Grade C when the score exceeds 70 or any security finding name carries a
    proxy/upgradeable, mint/unrestricted or suicide/selfdestruct marker;
    otherwise B above 40 and A at or below it.
    """
    if risk_score > GRADE_C_THRESHOLD or has_escalation_marker(security):
        return AuditGrade.C
    if risk_score > GRADE_B_THRESHOLD:
        return AuditGrade.B
    return AuditGrade.A


def severity_counts(diagnostics: Iterable[Diagnostic]) -> Dict[str, int]:
    """Count diagnostics per lower-cased severity label."""
    counts: Dict[str, int] = {}
    for diagnostic in diagnostics:
        key = (diagnostic.severity or 'unknown').lower()
        counts[key] = counts.get(key, 0) + 1
    return counts
