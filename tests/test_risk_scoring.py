"""Tests for risk score computation and audit grading."""

import pytest

from contractlens.analyzers.risk_scoring import (
    compute_audit_grade,
    compute_risk_score,
    has_escalation_marker,
    severity_counts,
)
from contractlens.models import AuditGrade


class TestComputeRiskScore:
    def test_no_diagnostics_scores_zero(self):
        assert compute_risk_score([], []) == 0

    def test_weights(self, security_factory, style_factory):
        security = [
            security_factory(severity='High'),
            security_factory(severity='Medium'),
            security_factory(severity='Low'),
            security_factory(severity='Informational'),
        ]
        style = [style_factory(severity='Error'), style_factory(severity='Warning')]
        assert compute_risk_score(security, style) == 25 + 15 + 5 + 1 + 3 + 1

    def test_severity_is_case_insensitive(self, security_factory):
        assert compute_risk_score([security_factory(severity='high')], []) == 25

    def test_unknown_severities_add_nothing(self, security_factory, style_factory):
        security = [security_factory(severity='Optimization'), security_factory(severity='')]
        style = [style_factory(severity='info')]
        assert compute_risk_score(security, style) == 0

    def test_clamped_at_100(self, security_factory):
        security = [security_factory(severity='High') for _ in range(5)]
        assert compute_risk_score(security, []) == 100

    def test_adding_a_diagnostic_never_lowers_score(self, security_factory, style_factory):
        security = [security_factory(severity='Medium')]
        style = [style_factory(severity='Warning')]
        base = compute_risk_score(security, style)
        assert compute_risk_score(security + [security_factory(severity='Low')], style) >= base
        assert compute_risk_score(security, style + [style_factory(severity='Error')]) >= base


class TestComputeAuditGrade:
    @pytest.mark.parametrize('score, grade', [
        (0, AuditGrade.A),
        (40, AuditGrade.A),
        (41, AuditGrade.B),
        (70, AuditGrade.B),
        (71, AuditGrade.C),
        (100, AuditGrade.C),
    ])
    def test_thresholds(self, score, grade):
        assert compute_audit_grade(score, []) == grade

    @pytest.mark.parametrize('name', [
        'unprotected-upgradeable-proxy',
        'UpgradeableStorage',
        'unrestricted-mint',
        'suicide-call',
        'selfdestruct',
    ])
    def test_escalation_markers_force_grade_c(self, security_factory, name):
        assert compute_audit_grade(0, [security_factory(name, severity='Low')]) == AuditGrade.C

    def test_ordinary_names_do_not_escalate(self, security_factory):
        security = [security_factory('reentrancy-eth'), security_factory('timestamp')]
        assert compute_audit_grade(10, security) == AuditGrade.A

    def test_has_escalation_marker(self, security_factory):
        assert has_escalation_marker([security_factory('Proxy-Pattern')])
        assert not has_escalation_marker([security_factory('tx-origin-usage')])
        assert not has_escalation_marker([])


def test_severity_counts(security_factory):
    counts = severity_counts([
        security_factory(severity='High'),
        security_factory(severity='high'),
        security_factory(severity='Low'),
    ])
    assert counts == {'high': 2, 'low': 1}
