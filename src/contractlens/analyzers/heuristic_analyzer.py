"""Heuristic fallback backends.

These run in-process and are used only when the matching external tool
produced nothing. The security rules are substring checks over the whole
lower-cased source: each rule contributes at most one diagnostic and cannot
point at the offending statement, so every finding is reported at line 1 for
function ``Multiple``. The style rules are line oriented and report exact
line numbers.
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from ..models import DetectorCategory, Diagnostic
from .base_analyzer import HeuristicAnalyzer

MAX_LINE_LENGTH = 120


@dataclass(frozen=True)
class PatternRule:
    """A whole-source security rule."""
    name: str
    description: str
    severity: str
    confidence: str
    matches: Callable[[str], bool]


def _has_all(*needles: str) -> Callable[[str], bool]:
    return lambda code: all(n in code for n in needles)


def _has_any(*needles: str) -> Callable[[str], bool]:
    return lambda code: any(n in code for n in needles)


def _reentrancy(code: str) -> bool:
    return 'call' in code and 'external' in code and 'reentrancyguard' not in code


def _unchecked_call(code: str) -> bool:
    return 'call' in code and 'require' not in code and 'assert' not in code


def _integer_overflow(code: str) -> bool:
    return ('uint' in code
            and 'pragma solidity ^0.8' not in code
            and 'pragma solidity 0.8' not in code)


def _missing_access_control(code: str) -> bool:
    # Matches the "onlyOwner" naming convention only, not real access control
    return ('function' in code and 'external' in code
            and 'modifier' not in code and 'onlyowner' not in code)


SECURITY_RULES: Tuple[PatternRule, ...] = (
    PatternRule('reentrancy-pattern',
                'External calls without reentrancy protection detected',
                'High', 'Medium', _reentrancy),
    PatternRule('unchecked-external-call',
                'External calls without proper error handling',
                'Medium', 'Medium', _unchecked_call),
    PatternRule('integer-overflow',
                'Integer operations without overflow protection (pre-Solidity 0.8.0)',
                'Medium', 'High', _integer_overflow),
    PatternRule('dangerous-delegatecall',
                'Delegatecall detected - potential for code injection',
                'High', 'High', _has_all('delegatecall')),
    PatternRule('tx-origin-usage',
                'tx.origin used instead of msg.sender - potential phishing vulnerability',
                'Medium', 'High', _has_all('tx.origin')),
    PatternRule('timestamp-dependency',
                'Block timestamp used - vulnerable to miner manipulation',
                'Low', 'High', _has_all('block.timestamp')),
    PatternRule('access-control-issue',
                'External functions without access control modifiers',
                'Medium', 'Low', _missing_access_control),
    PatternRule('selfdestruct',
                'Contract can be destroyed - potential loss of funds',
                'High', 'High', _has_any('selfdestruct', 'suicide')),
)


class HeuristicSecurityAnalyzer(HeuristicAnalyzer):
    """Substring-based substitute for the external security detector."""

    name = 'heuristic-security'
    category = DetectorCategory.SECURITY

    def scan(self, source_code: str) -> List[Diagnostic]:
        lower_code = (source_code or '').lower()
        vulnerabilities = [
            Diagnostic(
                source=self.name,
                category=DetectorCategory.SECURITY,
                name=rule.name,
                description=rule.description,
                severity=rule.severity,
                confidence=rule.confidence,
                line=1,
                function='Multiple',
                file='contract.sol',
            )
            for rule in SECURITY_RULES
            if rule.matches(lower_code)
        ]
        self.logger.info(f"Heuristic security scan produced {len(vulnerabilities)} issues")
        return vulnerabilities


class HeuristicStyleAnalyzer(HeuristicAnalyzer):
    """Line-oriented substitute for the external linter."""

    name = 'heuristic-style'
    category = DetectorCategory.STYLE

    def _issue(self, rule: str, message: str, line: int, column: int) -> Diagnostic:
        return Diagnostic(
            source=self.name,
            category=DetectorCategory.STYLE,
            name=rule,
            description=message,
            severity='Warning',
            line=line,
            column=column,
        )

    def scan(self, source_code: str) -> List[Diagnostic]:
        issues = []
        lines = (source_code or '').split('\n')

        for index, line in enumerate(lines):
            line_number = index + 1
            trimmed = line.strip()

            if index == 0 and 'SPDX-License-Identifier' not in trimmed:
                issues.append(self._issue('spdx-license-identifier',
                                          'Missing SPDX license identifier', line_number, 1))

            if len(trimmed) > MAX_LINE_LENGTH:
                issues.append(self._issue('max-line-length',
                                          f'Line too long (max {MAX_LINE_LENGTH} characters)',
                                          line_number, 1))

            if (trimmed == '' and index + 1 < len(lines)
                    and lines[index + 1].strip() == ''):
                issues.append(self._issue('no-consecutive-blank-lines',
                                          'Multiple consecutive blank lines', line_number, 1))

            if line.endswith(' ') or line.endswith('\t'):
                issues.append(self._issue('no-trailing-whitespace',
                                          'Trailing whitespace', line_number, len(line)))

        self.logger.info(f"Heuristic style scan produced {len(issues)} issues")
        return issues
