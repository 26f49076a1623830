"""
Report assembly: the single entry point that turns source text into an
``AnalysisRecord``.

Structural extraction, the detector pipeline and ABI synthesis are
independent and run in parallel. Scoring, grading and the rule-based facts
are derived from their results, the optional narrative summary is requested
last, and the record is built once, in one step.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from ..config import Settings
from ..integrations.explorer import ExplorerClient, is_valid_address
from ..integrations.summarizer import OpenAISummarizer
from ..models import AnalysisRecord, ContractCategory, Diagnostic
from ..utils.error_handling import ValidationError
from ..utils.logger import get_logger
from .abi_builder import AbiBuilder
from .pipeline import DetectorPipeline
from .risk_scoring import compute_audit_grade, compute_risk_score, severity_counts
from .structure_extractor import extract

# First match wins, checked in this order
CATEGORY_MARKERS: Tuple[Tuple[ContractCategory, Tuple[str, ...]], ...] = (
    (ContractCategory.ERC20, ('erc20', 'ierc20')),
    (ContractCategory.ERC721, ('erc721', 'ierc721')),
    (ContractCategory.ERC1155, ('erc1155', 'ierc1155')),
    (ContractCategory.DEFI, ('uniswap', 'pancakeswap', 'amm')),
    (ContractCategory.GOVERNANCE, ('governance', 'dao')),
    (ContractCategory.TOKEN, ('nft', 'token')),
)

UNSAFE_CONSTRUCTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (('selfdestruct', 'suicide'), 'Kill Switch - Contract can be destroyed'),
    (('delegatecall',), 'Delegate Call - Potential for code injection'),
    (('assembly',), 'Assembly Code - Low-level operations'),
    (('tx.origin',), 'tx.origin Usage - Potential phishing vulnerability'),
    (('block.timestamp',), 'Block Timestamp - Time manipulation risk'),
    (('block.number',), 'Block Number - Block manipulation risk'),
)

CRITICAL_NAME_MARKERS = ('reentrancy', 'overflow', 'access-control')


def detect_contract_category(source_code: str) -> ContractCategory:
    lower_code = source_code.lower()
    for category, markers in CATEGORY_MARKERS:
        if any(marker in lower_code for marker in markers):
            return category
    return ContractCategory.CUSTOM


def detect_unsafe_constructs(source_code: str) -> List[str]:
    lower_code = source_code.lower()
    return [label for markers, label in UNSAFE_CONSTRUCTS
            if any(marker in lower_code for marker in markers)]


def generate_deployment_warnings(security: Sequence[Diagnostic]) -> List[str]:
    """Warnings derived from high-severity counts and critical finding names."""
    warnings = []

    high_count = severity_counts(security).get('high', 0)
    if high_count > 0:
        warnings.append(f"⚠️ {high_count} high severity issues found")

    if any(marker in (bug.name or '').lower() for bug in security for marker in CRITICAL_NAME_MARKERS):
        warnings.append('🚨 Critical security vulnerabilities detected')

    return warnings


class ContractAnalyzer:
    """Composes extraction, detection, scoring and ABI synthesis into one record."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        pipeline: Optional[DetectorPipeline] = None,
        abi_builder: Optional[AbiBuilder] = None,
        summarizer: Optional[OpenAISummarizer] = None,
        explorer: Optional[ExplorerClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings or Settings()
        self.logger = logger or get_logger('analyzer')
        self.pipeline = pipeline or DetectorPipeline(settings=self.settings)
        self.abi_builder = abi_builder or AbiBuilder(self.settings.solc_version)
        self.summarizer = summarizer
        self.explorer = explorer

    @staticmethod
    def validate_source(source_code: Optional[str]) -> str:
        if source_code is None or not isinstance(source_code, str) or not source_code.strip():
            raise ValidationError('Source code is required', field='source_code', value=source_code)
        return source_code

    def analyze(self, source_code: Optional[str], enable_summary: bool = False) -> AnalysisRecord:
        """
        Analyze ``source_code`` and return the complete record.

        Raises:
            ValidationError: the source is missing or blank; nothing was run.
            ResourceError: the temporary source file could not be managed.
        """
        source_code = self.validate_source(source_code)
        self.logger.info('Starting comprehensive contract analysis...')

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix='analysis') as executor:
            inventory_future = executor.submit(extract, source_code)
            pipeline_future = executor.submit(self.pipeline.run, source_code)
            abi_future = executor.submit(self.abi_builder.synthesize, source_code)
            security, style = pipeline_future.result()
            inventory = inventory_future.result()
            abi = abi_future.result()

        risk_score = compute_risk_score(security, style)
        audit_grade = compute_audit_grade(risk_score, security)
        self.logger.info(f"Risk score {risk_score}, grade {audit_grade.value}")

        narrative_summary = None
        if enable_summary:
            narrative_summary = self._summarize(source_code, security, style)

        return AnalysisRecord(
            risk_score=risk_score,
            audit_grade=audit_grade,
            contract_category=detect_contract_category(source_code),
            security_diagnostics=tuple(security),
            style_diagnostics=tuple(style),
            inventory=inventory,
            abi=tuple(abi),
            unsafe_constructs=tuple(detect_unsafe_constructs(source_code)),
            deployment_warnings=tuple(generate_deployment_warnings(security)),
            narrative_summary=narrative_summary,
            generated_at=datetime.now(),
        )

    def analyze_address(self, address: str, enable_summary: bool = False) -> AnalysisRecord:
        """Fetch verified source for ``address`` and analyze it."""
        if not is_valid_address(address):
            raise ValidationError("Invalid address format. Must start with '0x' and be 42 characters long.",
                                  field='address', value=address)
        if self.explorer is None:
            self.explorer = ExplorerClient.from_settings(self.settings)
        source_code = self.explorer.fetch_verified_source(address)
        if not source_code:
            raise ValidationError('Contract not found or not verified', field='address', value=address)
        return self.analyze(source_code, enable_summary)

    def _summarize(self, source_code: str, security: Sequence[Diagnostic],
                   style: Sequence[Diagnostic]) -> Optional[str]:
        if self.summarizer is None:
            self.logger.info('Narrative summary requested but no summarizer is configured')
            return None
        excerpt = source_code[:self.settings.summary_excerpt_chars]
        try:
            return self.summarizer.summarize(excerpt, security, style)
        except Exception as e:
            self.logger.warning(f"Summary generation failed: {e}")
            return None
