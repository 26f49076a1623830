"""Chain explorer client used to fetch verified contract source by address.

Speaks the Etherscan-compatible ``module=contract`` API exposed by Snowtrace
and similar explorers. Every public method degrades to ``None`` (or
``False``) instead of raising, because a missing verified source is a normal
outcome for the caller.
"""

import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

import requests

from ..config import Settings
from ..utils.error_handling import ExplorerError
from ..utils.logger import get_logger

ADDRESS_PATTERN = re.compile(r'^0x[0-9a-fA-F]{40}$')


def is_valid_address(address: Optional[str]) -> bool:
    return bool(address) and bool(ADDRESS_PATTERN.match(address))


def flatten_source(source_code: str) -> str:
    """
    Turn an explorer ``SourceCode`` field into one analyzable text.

    Multi-file contracts are published as Standard-JSON input, sometimes
    wrapped in an extra pair of braces (``{{ ... }}``); their file contents
    are concatenated in publication order. Anything else is returned as-is.
    """
    stripped = source_code.strip()
    if not stripped.startswith('{'):
        return source_code

    payload = stripped[1:-1] if stripped.startswith('{{') else stripped
    try:
        source_json = json.loads(payload)
    except json.JSONDecodeError:
        return source_code

    sources = source_json.get('sources') if isinstance(source_json, dict) else None
    if not isinstance(sources, dict):
        return source_code
    return '\n'.join(entry.get('content', '') for entry in sources.values() if isinstance(entry, dict))


class ExplorerClient:
    """Minimal Etherscan-style explorer client with retries."""

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        base_delay: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.logger = logger or get_logger('explorer')

    @classmethod
    def from_settings(cls, settings: Settings) -> 'ExplorerClient':
        return cls(settings.explorer_url, settings.explorer_api_key, settings.explorer_timeout)

    def _request(self, params: Dict[str, str]) -> Dict[str, Any]:
        """GET the API with exponential backoff on network errors."""
        query = dict(params)
        if self.api_key:
            query['apikey'] = self.api_key

        response = None
        for attempt in range(self.max_retries):
            try:
                response = requests.get(self.api_url, params=query, timeout=self.timeout)
                response.raise_for_status()
                break
            except requests.exceptions.RequestException as e:
                if attempt == self.max_retries - 1:
                    raise ExplorerError(f"Network error after {self.max_retries} attempts: {e}") from e
                delay = self.base_delay * (2 ** attempt)
                self.logger.warning(f"Explorer request failed (attempt {attempt + 1}/{self.max_retries}), retrying in {delay}s: {e}")
                time.sleep(delay)

        if response is None:
            raise ExplorerError("Explorer request was not attempted")

        # requests' JSONDecodeError is also a ValueError
        try:
            data = response.json()
        except ValueError as e:
            raise ExplorerError(f"Explorer returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ExplorerError(f"Explorer returned an unexpected payload: {type(data).__name__}")
        return data

    def _first_result(self, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
        data = self._request(params)
        result = data.get('result')
        if str(data.get('status')) == '1' and isinstance(result, list) and result:
            return result[0]
        return None

    def fetch_verified_source(self, address: str) -> Optional[str]:
        """Return the verified source for ``address`` or ``None`` when unavailable."""
        self.logger.info(f"Fetching contract source for {address}")
        try:
            contract = self._first_result({
                'module': 'contract', 'action': 'getsourcecode', 'address': address,
            })
        except ExplorerError as e:
            self.logger.error(f"Error fetching contract source: {e}")
            return None

        if not contract:
            self.logger.info("Contract not found on explorer")
            return None
        source_code = contract.get('SourceCode') or ''
        if not source_code:
            self.logger.info("Contract not verified or no source code available")
            return None
        return flatten_source(source_code)

    def get_contract_info(self, address: str) -> Optional[Dict[str, Any]]:
        try:
            contract = self._first_result({
                'module': 'contract', 'action': 'getsourcecode', 'address': address,
            })
        except ExplorerError as e:
            self.logger.error(f"Error fetching contract info: {e}")
            return None
        if not contract:
            return None
        return {
            'contract_name': contract.get('ContractName') or 'Unknown',
            'compiler_version': contract.get('CompilerVersion') or 'Unknown',
            'optimization_used': contract.get('OptimizationUsed') or 'Unknown',
            'runs': contract.get('Runs') or 'Unknown',
            'constructor_arguments': contract.get('ConstructorArguments') or '',
            'evm_version': contract.get('EVMVersion') or 'Unknown',
            'license_type': contract.get('LicenseType') or 'Unknown',
            'proxy': contract.get('Proxy') == '1',
            'implementation': contract.get('Implementation') or '',
        }

    def get_contract_abi(self, address: str) -> Optional[List[Dict[str, Any]]]:
        try:
            data = self._request({'module': 'contract', 'action': 'getabi', 'address': address})
        except ExplorerError as e:
            self.logger.error(f"Error fetching contract ABI: {e}")
            return None
        if str(data.get('status')) != '1' or not data.get('result'):
            return None
        try:
            return json.loads(data['result'])
        except (TypeError, json.JSONDecodeError) as e:
            self.logger.warning(f"Explorer ABI is not valid JSON: {e}")
            return None

    def get_contract_bytecode(self, address: str) -> Optional[str]:
        try:
            data = self._request({
                'module': 'proxy', 'action': 'eth_getCode', 'address': address, 'tag': 'latest',
            })
        except ExplorerError as e:
            self.logger.error(f"Error fetching contract bytecode: {e}")
            return None
        # Proxy endpoints answer JSON-RPC style without a status field
        result = data.get('result')
        return result if isinstance(result, str) and result else None

    def verify_contract_exists(self, address: str) -> bool:
        bytecode = self.get_contract_bytecode(address)
        return bool(bytecode) and bytecode != '0x'
