"""Tests for JSON report export."""

import json
from datetime import datetime

import pytest

from contractlens.models import (
    AbiEntry,
    AnalysisRecord,
    AuditGrade,
    ContractCategory,
    DeclarationInventory,
    FunctionDecl,
    Param,
)
from contractlens.reporting import generate_json_report, load_json_report


@pytest.fixture
def record(security_factory, style_factory):
    return AnalysisRecord(
        risk_score=31,
        audit_grade=AuditGrade.A,
        contract_category=ContractCategory.ERC20,
        security_diagnostics=(security_factory(severity='High', line=12, function='withdraw'),),
        style_diagnostics=(style_factory(line=3, column=121),),
        inventory=DeclarationInventory(functions=(FunctionDecl('withdraw', 'external', 'non-payable'),)),
        abi=(AbiEntry.function('withdraw', outputs=[Param('bool')]),),
        unsafe_constructs=(),
        deployment_warnings=('⚠️ 1 high severity issues found',),
        generated_at=datetime(2024, 1, 2, 3, 4, 5),
    )


class TestReportGenerator:
    def test_json_content(self, record):
        data = json.loads(generate_json_report(record))

        assert data['riskScore'] == 31
        assert data['auditGrade'] == 'A'
        assert data['contractCategory'] == 'ERC20'
        assert data['securityDiagnostics'][0] == {
            'name': 'reentrancy-eth',
            'description': 'reentrancy-eth finding',
            'severity': 'High',
            'confidence': 'Medium',
            'line': 12,
            'function': 'withdraw',
            'file': 'contract.sol',
            'source': 'slither',
        }
        assert data['styleDiagnostics'][0]['column'] == 121
        assert data['inventory']['functions'] == [{'name': 'withdraw', 'visibility': 'external', 'type': 'non-payable'}]
        assert data['abi'][0]['outputs'] == [{'type': 'bool', 'name': '', 'internalType': 'bool'}]
        assert data['narrativeSummary'] is None
        assert data['generatedAt'] == '2024-01-02T03:04:05'

    def test_non_ascii_is_kept(self, record):
        assert '⚠️' in generate_json_report(record)

    def test_writes_and_loads_file(self, record, tmp_path):
        path = tmp_path / 'reports' / 'vault.json'
        content = generate_json_report(record, str(path))

        assert path.exists()
        assert path.read_text(encoding='utf-8') == content
        assert load_json_report(str(path))['riskScore'] == 31
