"""
ContractLens - smart contract source analysis and risk grading.

This package provides:
- Lexical extraction of functions, modifiers, state variables, events and imports
- Security and style diagnostics from Slither and Solhint, with heuristic fallbacks
- A bounded risk score and an A/B/C audit grade
- ABI synthesis through solc, with a heuristic fallback
"""

from .analyzers import ContractAnalyzer
from .config import Settings
from .models import AnalysisRecord

__version__ = "1.0.0"
__all__ = [
    'AnalysisRecord',
    'ContractAnalyzer',
    'Settings',
]
