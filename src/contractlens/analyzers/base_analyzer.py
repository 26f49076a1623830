"""Base analyzer classes for all detector backends."""
import json
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..models import DetectorCategory, Diagnostic
from ..utils.logger import get_logger


class BaseAnalyzer(ABC):
    """Base class for all detector backends.

    A backend turns one contract file into a list of normalized diagnostics.
    Backends never raise for tool or parsing problems; they log the cause and
    return an empty list.
    """

    name: str = 'base'
    category: DetectorCategory = DetectorCategory.SECURITY

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(f"analyzer.{self.__class__.__name__}")

    @abstractmethod
    def analyze(self, contract_path: str) -> List[Diagnostic]:
        """Analyze a smart contract.

        Args:
            contract_path: Path to the materialized contract file

        Returns:
            List of diagnostics, empty when nothing was found or the backend failed
        """


class ExternalToolAnalyzer(BaseAnalyzer):
    """Backend that shells out to an external analysis tool producing JSON."""

    timeout: int = 30

    def __init__(self, executable: str, timeout: Optional[int] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.executable = executable
        if timeout is not None:
            self.timeout = timeout

    @abstractmethod
    def build_command(self, contract_path: str) -> Sequence[str]:
        """Command line used to run the tool against ``contract_path``."""

    @abstractmethod
    def parse_output(self, data: Any, contract_path: str) -> List[Diagnostic]:
        """Normalize the tool's decoded JSON report into diagnostics."""

    def analyze(self, contract_path: str) -> List[Diagnostic]:
        self.logger.info(f"Running {self.name} analysis on {contract_path}")
        cmd = list(self.build_command(contract_path))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=str(Path(contract_path).parent),
            )
        except subprocess.TimeoutExpired:
            self.logger.warning(f"{self.name} analysis timed out after {self.timeout} seconds")
            return []
        except FileNotFoundError:
            self.logger.warning(f"{self.name} not found in PATH. Ensure {self.executable} is installed.")
            return []
        except OSError as e:
            self.logger.error(f"Could not start {self.name}: {e}")
            return []

        if result.returncode != 0:
            # Both slither and solhint exit non-zero when they report findings
            self.logger.warning(f"{self.name} exited with code {result.returncode}: {(result.stderr or '').strip()[:500]}")

        stdout = result.stdout or ''
        if not stdout.strip():
            self.logger.warning(f"{self.name} returned empty output")
            return []

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            self.logger.warning(f"Failed to parse {self.name} JSON output: {e}")
            self.logger.debug(f"Raw {self.name} output: {stdout[:2000]}")
            return []

        try:
            diagnostics = self.parse_output(data, contract_path)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"Unexpected {self.name} report structure: {e}")
            return []

        self.logger.info(f"{self.name} found {len(diagnostics)} issues")
        return diagnostics


class HeuristicAnalyzer(BaseAnalyzer):
    """In-process backend that scans the source text with fixed patterns."""

    @abstractmethod
    def scan(self, source_code: str) -> List[Diagnostic]:
        """Pure pattern scan over the source text."""

    def analyze(self, contract_path: str) -> List[Diagnostic]:
        source_code = Path(contract_path).read_text(encoding='utf-8')
        return self.scan(source_code)
