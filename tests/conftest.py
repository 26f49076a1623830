"""Shared fixtures: sample contracts and diagnostic factories."""

import pytest

from contractlens.models import DetectorCategory, Diagnostic


VAULT_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "./IERC20.sol";

contract Vault {
    address public owner;
    uint256 public totalDeposits;
    bool locked;

    event Deposited(address indexed from, uint256 amount);
    event Withdrawn(address indexed to, uint256 amount);

    modifier onlyOwner() {
        require(msg.sender == owner, "not owner");
        _;
    }

    function deposit() external payable {
        totalDeposits += msg.value;
        emit Deposited(msg.sender, msg.value);
    }

    function balanceOf(address account) public view returns (uint256) {
        return account.balance;
    }

    function _bump(uint256 amount) internal {
        totalDeposits += amount;
    }
}
"""

WITHDRAW_SOURCE = """contract Bank {
    function withdraw() external { token.call(abi.encodeWithSignature("transfer()")); }
}
"""

CLEAN_STYLE_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

contract Clean {
    uint256 value;
}
"""


@pytest.fixture
def vault_source():
    return VAULT_SOURCE


@pytest.fixture
def withdraw_source():
    return WITHDRAW_SOURCE


@pytest.fixture
def clean_style_source():
    return CLEAN_STYLE_SOURCE


def make_security(name='reentrancy-eth', severity='High', source='slither', **kwargs):
    return Diagnostic(
        source=source,
        category=DetectorCategory.SECURITY,
        name=name,
        description=kwargs.pop('description', f'{name} finding'),
        severity=severity,
        confidence=kwargs.pop('confidence', 'Medium'),
        **kwargs
    )


def make_style(rule='max-line-length', severity='Warning', source='solhint', **kwargs):
    return Diagnostic(
        source=source,
        category=DetectorCategory.STYLE,
        name=rule,
        description=kwargs.pop('description', f'{rule} message'),
        severity=severity,
        **kwargs
    )


@pytest.fixture
def security_factory():
    return make_security


@pytest.fixture
def style_factory():
    return make_style
