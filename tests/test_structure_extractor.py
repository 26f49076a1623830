"""Tests for the lexical declaration extractor."""

import pytest

from contractlens.analyzers.structure_extractor import (
    extract,
    extract_function_type,
    extract_visibility,
    preceding_window,
)
from contractlens.models import DeclarationInventory


class TestStructureExtractor:
    def test_empty_source_yields_empty_inventory(self):
        inventory = extract('')
        assert isinstance(inventory, DeclarationInventory)
        assert inventory.is_empty()

    def test_none_is_treated_as_empty(self):
        assert extract(None).is_empty()

    @pytest.mark.parametrize('text', [
        'function (((',
        '}}}{{{ event',
        'modifier\n\n\tfunction x(',
        '\x00\x01 import "',
    ])
    def test_arbitrary_text_never_raises(self, text):
        extract(text)

    def test_idempotent(self, vault_source):
        assert extract(vault_source) == extract(vault_source)

    def test_imports(self, vault_source):
        inventory = extract(vault_source)
        assert [i.path for i in inventory.imports] == ['./IERC20.sol']

    def test_functions_in_source_order(self, vault_source):
        names = [f.name for f in extract(vault_source).functions]
        assert names == ['deposit', 'balanceOf', '_bump']

    def test_function_attributes_come_from_preceding_window(self, vault_source):
        functions = {f.name: f for f in extract(vault_source).functions}
        # The window before `deposit` only holds the modifier body
        assert functions['deposit'].visibility == 'internal'
        assert functions['deposit'].mutability == 'non-payable'
        # The window before `balanceOf` holds the tail of `deposit`'s body
        assert functions['balanceOf'].visibility == 'internal'
        # `_bump` is preceded by `balanceOf`'s return statement and closing brace
        assert functions['_bump'].mutability == 'non-payable'

    def test_window_picks_up_previous_declaration_keywords(self):
        source = 'uint x; // public view\nfunction f() {}'
        function = extract(source).functions[0]
        assert function.visibility == 'public'
        assert function.mutability == 'view'

    def test_functions_with_custom_modifiers_are_not_inventoried(self):
        source = 'function withdraw() external onlyOwner { }'
        assert extract(source).functions == ()

    def test_overloads_are_kept(self):
        source = 'function f(uint a) public {}\nfunction f(uint a, uint b) public {}'
        assert [fn.name for fn in extract(source).functions] == ['f', 'f']

    def test_modifiers(self, vault_source):
        assert [m.name for m in extract(vault_source).modifiers] == ['onlyOwner']

    def test_events(self, vault_source):
        assert [e.name for e in extract(vault_source).events] == ['Deposited', 'Withdrawn']

    def test_state_variables(self, vault_source):
        variables = [(v.name, v.type) for v in extract(vault_source).state_variables]
        assert ('owner', 'address') in variables
        assert ('totalDeposits', 'uint256') in variables
        assert ('locked', 'bool') in variables

    def test_mapping_state_variables_are_not_matched(self):
        source = 'mapping(address => uint256) public balances;'
        assert extract(source).state_variables == ()

    def test_keywords_inside_comments_are_scanned(self):
        source = '// event Fake(uint a)\ncontract C {}'
        assert [e.name for e in extract(source).events] == ['Fake']

    def test_to_dict_uses_exchange_keys(self, vault_source):
        data = extract(vault_source).to_dict()
        assert set(data) == {'functions', 'modifiers', 'stateVariables', 'events', 'imports'}
        assert data['functions'][0] == {'name': 'deposit', 'visibility': 'internal', 'type': 'non-payable'}


class TestWindowHelpers:
    def test_window_is_clamped_at_start(self):
        assert preceding_window('abcdef', 3, 50) == 'abc'

    def test_window_size(self):
        text = 'x' * 200
        assert len(preceding_window(text, 150, 50)) == 50

    def test_visibility_priority_and_default(self):
        assert extract_visibility('private public function', 16) == 'public'
        assert extract_visibility('function', 0) == 'internal'

    def test_mutability_priority_and_default(self):
        assert extract_function_type('payable view function', 13) == 'view'
        assert extract_function_type('function', 0) == 'non-payable'
