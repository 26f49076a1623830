from .abi_builder import AbiBuilder
from .comprehensive_contract_analysis import ContractAnalyzer
from .heuristic_analyzer import HeuristicSecurityAnalyzer, HeuristicStyleAnalyzer
from .pipeline import DetectorPipeline, materialized_source
from .risk_scoring import compute_audit_grade, compute_risk_score
from .slither_analyzer import SlitherAnalyzer
from .solhint_analyzer import SolhintAnalyzer
from .structure_extractor import extract

__all__ = [
    'AbiBuilder',
    'ContractAnalyzer',
    'DetectorPipeline',
    'HeuristicSecurityAnalyzer',
    'HeuristicStyleAnalyzer',
    'SlitherAnalyzer',
    'SolhintAnalyzer',
    'compute_audit_grade',
    'compute_risk_score',
    'extract',
    'materialized_source',
]
