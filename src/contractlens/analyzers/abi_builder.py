"""Interface (ABI) synthesis.

The compiler path asks ``solc`` (through py-solc-x) for the ABI of the first
contract in the unit. Whenever that is not possible the ABI is rebuilt from
the same lexical anchors the structure extractor uses. The fallback splits
parameter lists on every comma, so types that contain commas are cut apart.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import solcx

from ..models import AbiEntry, Param
from ..utils.logger import get_logger
from .structure_extractor import (
    ELEMENTARY_TYPE,
    EVENT_PATTERN,
    TYPE_WINDOW,
    first_keyword,
    preceding_window,
)

SOURCE_NAME = 'contract.sol'

ABI_FUNCTION_PATTERN = re.compile(
    r'function\s+(\w+)\s*\(([^)]*)\)\s*'
    r'(?:external|public|internal|private)?\s*'
    r'(?:view|pure|payable)?\s*'
    r'(?:returns\s*\(([^)]*)\))?'
)
PUBLIC_STATE_VARIABLE_PATTERN = re.compile(r'\b(' + ELEMENTARY_TYPE + r')\s+public\s*(\w+)\s*;')

ABI_MUTABILITY_KEYWORDS = ('pure', 'view', 'payable')
DATA_LOCATIONS = ('memory', 'calldata', 'storage')
CANONICAL_TYPES = {'uint': 'uint256', 'int': 'int256'}


def parse_params(params: Optional[str]) -> List[Param]:
    """Split a parameter list on commas into ABI params (``indexed`` aware)."""
    if not params or not params.strip():
        return []

    parsed = []
    for raw in params.split(','):
        trimmed = raw.strip()
        if not trimmed:
            continue
        parts = trimmed.split()
        is_indexed = 'indexed' in parts
        parts = [p for p in parts if p != 'indexed' and p not in DATA_LOCATIONS]
        if not parts:
            continue
        param_type = CANONICAL_TYPES.get(parts[0], parts[0])
        name = parts[1] if len(parts) > 1 else ''
        parsed.append(Param(type=param_type, name=name, internal_type=param_type, indexed=is_indexed))
    return parsed


def _strip_indexed(params: List[Param]) -> List[Param]:
    return [Param(type=p.type, name=p.name, internal_type=p.internal_type) for p in params]


def _params_from_abi(items: Any, with_indexed: bool = False) -> List[Param]:
    params = []
    for item in items or []:
        params.append(Param(
            type=item.get('type', ''),
            name=item.get('name', ''),
            internal_type=item.get('internalType'),
            indexed=item.get('indexed') if with_indexed else None,
        ))
    return params


def abi_entries_from_json(abi: List[Dict[str, Any]]) -> List[AbiEntry]:
    """Convert compiler ABI JSON into entries, keeping functions and events only."""
    entries = []
    for item in abi:
        kind = item.get('type')
        if kind == 'function':
            entries.append(AbiEntry.function(
                name=item.get('name', ''),
                inputs=_params_from_abi(item.get('inputs')),
                outputs=_params_from_abi(item.get('outputs')),
                state_mutability=item.get('stateMutability', 'nonpayable'),
            ))
        elif kind == 'event':
            entries.append(AbiEntry.event(
                name=item.get('name', ''),
                inputs=_params_from_abi(item.get('inputs'), with_indexed=True),
                anonymous=bool(item.get('anonymous', False)),
            ))
    return entries


class AbiBuilder:
    """Builds a contract ABI from source, compiler first and heuristics second."""

    def __init__(self, solc_version: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.solc_version = solc_version
        self.logger = logger or get_logger('abi_builder')

    def synthesize(self, source_code: str) -> List[AbiEntry]:
        """Return the ABI for ``source_code``; never raises."""
        try:
            abi = self.compile_abi(source_code)
            if abi is not None:
                self.logger.info(f"ABI generated successfully with {len(abi)} entries")
                return abi_entries_from_json(abi)
            self.logger.warning("No contracts found in compilation output, using manual ABI generation...")
        except Exception as e:
            self.logger.warning(f"ABI generation failed with solc: {e}")
            self.logger.info("Falling back to manual ABI generation...")
        return self.generate_manual_abi(source_code)

    def compile_abi(self, source_code: str) -> Optional[List[Dict[str, Any]]]:
        """Compile with solc; ``None`` when the output holds no contract."""
        input_json = {
            'language': 'Solidity',
            'sources': {SOURCE_NAME: {'content': source_code}},
            'settings': {
                'outputSelection': {
                    '*': {
                        '*': ['abi', 'evm.bytecode'],
                    }
                }
            },
        }
        output = solcx.compile_standard(input_json, solc_version=self.solc_version)

        for error in output.get('errors') or []:
            self.logger.debug(f"Compilation message: {error.get('formattedMessage', error.get('message', ''))}")

        contracts = (output.get('contracts') or {}).get(SOURCE_NAME) or {}
        if not contracts:
            return None
        contract_name = next(iter(contracts))
        return contracts[contract_name].get('abi') or []

    def generate_manual_abi(self, source_code: str) -> List[AbiEntry]:
        source_code = source_code or ''
        abi: List[AbiEntry] = []

        for match in ABI_FUNCTION_PATTERN.finditer(source_code):
            function_name = match.group(1)
            if function_name == 'constructor' or 'internal' in preceding_window(source_code, match.start()):
                continue
            abi.append(AbiEntry.function(
                name=function_name,
                inputs=_strip_indexed(parse_params(match.group(2))),
                outputs=_strip_indexed(parse_params(match.group(3))),
                state_mutability=first_keyword(
                    preceding_window(source_code, match.start(), TYPE_WINDOW),
                    ABI_MUTABILITY_KEYWORDS,
                    'nonpayable',
                ),
            ))

        for match in EVENT_PATTERN.finditer(source_code):
            abi.append(AbiEntry.event(name=match.group(1), inputs=parse_params(match.group(2))))

        # Public state variables get an implicit getter
        for match in PUBLIC_STATE_VARIABLE_PATTERN.finditer(source_code):
            var_type = CANONICAL_TYPES.get(match.group(1), match.group(1))
            abi.append(AbiEntry.function(
                name=match.group(2),
                outputs=[Param(type=var_type, name='', internal_type=var_type)],
                state_mutability='view',
            ))

        self.logger.info(f"Manual ABI generated with {len(abi)} items")
        return abi
