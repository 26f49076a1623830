"""Detector pipeline: external backends first, heuristic substitutes on empty results."""

import logging
import os
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional

from ..config import Settings
from ..models import Diagnostic
from ..utils.error_handling import ResourceError
from ..utils.logger import get_logger
from .base_analyzer import BaseAnalyzer, HeuristicAnalyzer
from .heuristic_analyzer import HeuristicSecurityAnalyzer, HeuristicStyleAnalyzer
from .slither_analyzer import SlitherAnalyzer
from .solhint_analyzer import SolhintAnalyzer

CONTRACT_FILENAME = 'contract.sol'


@contextmanager
def materialized_source(source_code: str, temp_dir: Optional[str] = None) -> Iterator[str]:
    """
    Write ``source_code`` to a private temporary directory and yield the file path.

    The directory is removed on every exit path. Failing to create, write or
    remove it raises ``ResourceError``.
    """
    try:
        if temp_dir:
            os.makedirs(temp_dir, exist_ok=True)
        work_dir = tempfile.mkdtemp(prefix='contractlens-', dir=temp_dir)
    except OSError as e:
        raise ResourceError(f"Could not create temporary directory: {e}", cause=e) from e

    try:
        contract_file = Path(work_dir) / CONTRACT_FILENAME
        try:
            contract_file.write_text(source_code, encoding='utf-8')
        except OSError as e:
            raise ResourceError(f"Could not write temporary source file: {e}", cause=e) from e
        yield str(contract_file)
    finally:
        try:
            shutil.rmtree(work_dir)
        except OSError as e:
            raise ResourceError(f"Could not remove temporary directory {work_dir}: {e}", cause=e) from e


class PipelineResult(NamedTuple):
    security: List[Diagnostic]
    style: List[Diagnostic]


class DetectorPipeline:
    """
    Runs the external security and style backends concurrently against one
    materialized copy of the source, then substitutes the heuristic backend
    for any category whose external result is empty.

    Heuristic results replace, never extend, the external ones: a partial
    external report is kept as-is so nothing is counted twice.
    """

    def __init__(
        self,
        security_backend: Optional[BaseAnalyzer] = None,
        style_backend: Optional[BaseAnalyzer] = None,
        security_fallback: Optional[HeuristicAnalyzer] = None,
        style_fallback: Optional[HeuristicAnalyzer] = None,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings or Settings()
        self.logger = logger or get_logger('pipeline')
        self.security_backend = security_backend or SlitherAnalyzer(
            self.settings.slither_bin, self.settings.slither_timeout)
        self.style_backend = style_backend or SolhintAnalyzer(
            self.settings.solhint_bin, self.settings.solhint_timeout)
        self.security_fallback = security_fallback or HeuristicSecurityAnalyzer()
        self.style_fallback = style_fallback or HeuristicStyleAnalyzer()

    def _run_backend(self, backend: BaseAnalyzer, contract_path: str) -> List[Diagnostic]:
        # A crashing backend is treated exactly like one that found nothing
        try:
            return list(backend.analyze(contract_path))
        except Exception as e:
            self.logger.error(f"Backend {backend.name} failed unexpectedly: {e}")
            return []

    def run(self, source_code: str) -> PipelineResult:
        with materialized_source(source_code, self.settings.temp_dir) as contract_path:
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix='detector') as executor:
                security_future = executor.submit(self._run_backend, self.security_backend, contract_path)
                style_future = executor.submit(self._run_backend, self.style_backend, contract_path)
                security = security_future.result()
                style = style_future.result()

        if not security:
            self.logger.info(f"{self.security_backend.name} returned no results, using heuristic vulnerability detection...")
            security = self.security_fallback.scan(source_code)

        if not style:
            self.logger.info(f"{self.style_backend.name} returned no results, using basic linting checks...")
            style = self.style_fallback.scan(source_code)

        return PipelineResult(security, style)
