"""Tests for the heuristic security and style backends."""

import pytest

from contractlens.analyzers.heuristic_analyzer import (
    HeuristicSecurityAnalyzer,
    HeuristicStyleAnalyzer,
    SECURITY_RULES,
)
from contractlens.models import DetectorCategory


class TestHeuristicSecurityAnalyzer:
    @pytest.fixture
    def analyzer(self):
        return HeuristicSecurityAnalyzer()

    def names(self, diagnostics):
        return [d.name for d in diagnostics]

    def test_withdraw_without_guard_reports_reentrancy(self, analyzer, withdraw_source):
        results = analyzer.scan(withdraw_source)
        reentrancy = [d for d in results if d.name == 'reentrancy-pattern']
        assert len(reentrancy) == 1
        assert reentrancy[0].severity == 'High'
        assert reentrancy[0].function == 'Multiple'
        assert reentrancy[0].line == 1
        assert reentrancy[0].category == DetectorCategory.SECURITY

    def test_reentrancy_guard_suppresses_rule(self, analyzer):
        source = 'contract A is ReentrancyGuard { function f() external { a.call(""); } }'
        assert 'reentrancy-pattern' not in self.names(analyzer.scan(source))

    def test_unchecked_call(self, analyzer):
        assert 'unchecked-external-call' in self.names(analyzer.scan('x.call("");'))
        assert 'unchecked-external-call' not in self.names(analyzer.scan('require(x.call(""));'))
        assert 'unchecked-external-call' not in self.names(analyzer.scan('x.call(""); assert(ok);'))

    def test_integer_overflow_depends_on_pragma(self, analyzer):
        assert 'integer-overflow' in self.names(analyzer.scan('pragma solidity ^0.7.6; uint a;'))
        assert 'integer-overflow' not in self.names(analyzer.scan('pragma solidity ^0.8.19; uint a;'))
        assert 'integer-overflow' not in self.names(analyzer.scan('pragma solidity 0.8.4; uint a;'))

    @pytest.mark.parametrize('snippet, rule, severity', [
        ('impl.delegatecall(data);', 'dangerous-delegatecall', 'High'),
        ('require(tx.origin == owner);', 'tx-origin-usage', 'Medium'),
        ('if (block.timestamp > end) {}', 'timestamp-dependency', 'Low'),
        ('selfdestruct(owner);', 'selfdestruct', 'High'),
        ('suicide(owner);', 'selfdestruct', 'High'),
    ])
    def test_single_pattern_rules(self, analyzer, snippet, rule, severity):
        matches = [d for d in analyzer.scan(snippet) if d.name == rule]
        assert len(matches) == 1
        assert matches[0].severity == severity

    def test_access_control_convention(self, analyzer):
        unguarded = analyzer.scan('function mint() external {}')
        flagged = [d for d in unguarded if d.name == 'access-control-issue']
        assert flagged and flagged[0].severity == 'Medium' and flagged[0].confidence == 'Low'

        assert 'access-control-issue' not in self.names(
            analyzer.scan('function mint() external onlyOwner {}'))
        assert 'access-control-issue' not in self.names(
            analyzer.scan('modifier guard() { _; } function mint() external guard {}'))

    def test_each_rule_fires_at_most_once(self, analyzer):
        source = 'a.call(""); b.call(""); c.delegatecall(""); d.delegatecall(""); external'
        names = self.names(analyzer.scan(source))
        assert len(names) == len(set(names))

    def test_case_insensitive(self, analyzer):
        assert 'tx-origin-usage' in self.names(analyzer.scan('TX.ORIGIN'))

    def test_empty_source(self, analyzer):
        assert analyzer.scan('') == []

    def test_rule_names_are_unique(self):
        names = [rule.name for rule in SECURITY_RULES]
        assert len(names) == len(set(names))

    def test_analyze_reads_file(self, analyzer, tmp_path, withdraw_source):
        path = tmp_path / 'contract.sol'
        path.write_text(withdraw_source)
        assert analyzer.analyze(str(path)) == analyzer.scan(withdraw_source)


class TestHeuristicStyleAnalyzer:
    @pytest.fixture
    def analyzer(self):
        return HeuristicStyleAnalyzer()

    def test_clean_source_has_no_issues(self, analyzer, clean_style_source):
        assert analyzer.scan(clean_style_source) == []

    def test_missing_license_on_first_line(self, analyzer):
        results = analyzer.scan('pragma solidity ^0.8.0;\n')
        assert [(d.rule, d.line) for d in results] == [('spdx-license-identifier', 1)]
        assert results[0].severity == 'Warning'
        assert results[0].category == DetectorCategory.STYLE

    def test_license_only_checked_on_first_line(self, analyzer):
        source = 'pragma solidity ^0.8.0;\n// SPDX-License-Identifier: MIT\n'
        assert [d.rule for d in analyzer.scan(source)] == ['spdx-license-identifier']

    def test_long_line(self, analyzer):
        source = '// SPDX-License-Identifier: MIT\n' + 'x' * 121 + '\n' + 'y' * 120 + '\n'
        results = analyzer.scan(source)
        assert [(d.rule, d.line) for d in results] == [('max-line-length', 2)]

    def test_consecutive_blank_lines(self, analyzer):
        source = '// SPDX-License-Identifier: MIT\ncontract A {\n\n\n}\n'
        results = analyzer.scan(source)
        assert [(d.rule, d.line) for d in results] == [('no-consecutive-blank-lines', 3)]

    def test_single_blank_line_is_fine(self, analyzer):
        source = '// SPDX-License-Identifier: MIT\ncontract A {\n\n}\n'
        assert analyzer.scan(source) == []

    def test_trailing_whitespace(self, analyzer):
        source = '// SPDX-License-Identifier: MIT\ncontract A { \n}\t\n'
        results = analyzer.scan(source)
        assert [(d.rule, d.line, d.column) for d in results] == [
            ('no-trailing-whitespace', 2, 13),
            ('no-trailing-whitespace', 3, 2),
        ]

    def test_to_dict_shape(self, analyzer):
        data = analyzer.scan('pragma solidity ^0.8.0;\n')[0].to_dict()
        assert data == {
            'rule': 'spdx-license-identifier',
            'severity': 'Warning',
            'message': 'Missing SPDX license identifier',
            'line': 1,
            'column': 1,
            'source': 'heuristic-style',
        }
