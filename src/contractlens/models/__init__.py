"""
ContractLens Models Package

Value objects produced by a single analysis run. Everything here is frozen:
analyzers build new instances rather than mutating existing ones, and the
``to_dict`` methods define the field names handed to report renderers and
transport layers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class DetectorCategory(str, Enum):
    """Which family of detector produced a diagnostic."""
    SECURITY = 'security'
    STYLE = 'style'


class ContractCategory(str, Enum):
    ERC20 = 'ERC20'
    ERC721 = 'ERC721'
    ERC1155 = 'ERC1155'
    DEFI = 'DeFi'
    GOVERNANCE = 'Governance'
    TOKEN = 'Token'
    CUSTOM = 'Custom'


class AuditGrade(str, Enum):
    A = 'A'
    B = 'B'
    C = 'C'


@dataclass(frozen=True)
class Diagnostic:
    """One issue reported by a detector backend, normalized to a fixed field set."""

    source: str
    category: DetectorCategory
    name: str
    description: str
    severity: str
    confidence: Optional[str] = None
    line: int = 1
    column: Optional[int] = None
    function: str = 'N/A'
    file: str = 'contract.sol'

    @property
    def rule(self) -> str:
        return self.name

    @property
    def message(self) -> str:
        return self.description

    def to_dict(self) -> Dict[str, Any]:
        if self.category == DetectorCategory.STYLE:
            return {
                'rule': self.name,
                'severity': self.severity,
                'message': self.description,
                'line': self.line,
                'column': self.column,
                'source': self.source,
            }
        return {
            'name': self.name,
            'description': self.description,
            'severity': self.severity,
            'confidence': self.confidence,
            'line': self.line,
            'function': self.function,
            'file': self.file,
            'source': self.source,
        }


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    visibility: str = 'internal'
    mutability: str = 'non-payable'

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'visibility': self.visibility, 'type': self.mutability}


@dataclass(frozen=True)
class VariableDecl:
    name: str
    type: str = 'unknown'

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'type': self.type}


@dataclass(frozen=True)
class EventDecl:
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name}


@dataclass(frozen=True)
class ModifierDecl:
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name}


@dataclass(frozen=True)
class ImportRef:
    path: str


@dataclass(frozen=True)
class DeclarationInventory:
    """Declarations found in one source text, each kind in order of first appearance."""

    functions: Tuple[FunctionDecl, ...] = ()
    modifiers: Tuple[ModifierDecl, ...] = ()
    state_variables: Tuple[VariableDecl, ...] = ()
    events: Tuple[EventDecl, ...] = ()
    imports: Tuple[ImportRef, ...] = ()

    def is_empty(self) -> bool:
        return not (self.functions or self.modifiers or self.state_variables
                    or self.events or self.imports)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'functions': [f.to_dict() for f in self.functions],
            'modifiers': [m.to_dict() for m in self.modifiers],
            'stateVariables': [v.to_dict() for v in self.state_variables],
            'events': [e.to_dict() for e in self.events],
            'imports': [i.path for i in self.imports],
        }


@dataclass(frozen=True)
class Param:
    type: str
    name: str = ''
    internal_type: Optional[str] = None
    indexed: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'type': self.type,
            'name': self.name,
            'internalType': self.internal_type or self.type,
        }
        if self.indexed is not None:
            data['indexed'] = self.indexed
        return data


@dataclass(frozen=True)
class AbiEntry:
    """A ``function`` or ``event`` entry of a contract interface."""

    kind: str
    name: str
    inputs: Tuple[Param, ...] = ()
    outputs: Tuple[Param, ...] = ()
    state_mutability: Optional[str] = None
    anonymous: bool = False

    FUNCTION = 'function'
    EVENT = 'event'

    @property
    def is_function(self) -> bool:
        return self.kind == self.FUNCTION

    @property
    def is_event(self) -> bool:
        return self.kind == self.EVENT

    @classmethod
    def function(cls, name: str, inputs=(), outputs=(), state_mutability: str = 'nonpayable') -> 'AbiEntry':
        return cls(kind=cls.FUNCTION, name=name, inputs=tuple(inputs), outputs=tuple(outputs),
                   state_mutability=state_mutability)

    @classmethod
    def event(cls, name: str, inputs=(), anonymous: bool = False) -> 'AbiEntry':
        return cls(kind=cls.EVENT, name=name, inputs=tuple(inputs), anonymous=anonymous)

    def to_dict(self) -> Dict[str, Any]:
        if self.is_event:
            return {
                'type': 'event',
                'name': self.name,
                'inputs': [p.to_dict() for p in self.inputs],
                'anonymous': self.anonymous,
            }
        return {
            'type': 'function',
            'name': self.name,
            'inputs': [p.to_dict() for p in self.inputs],
            'outputs': [p.to_dict() for p in self.outputs],
            'stateMutability': self.state_mutability,
        }


@dataclass(frozen=True)
class AnalysisRecord:
    """The complete, immutable result of one analysis request."""

    risk_score: int
    audit_grade: AuditGrade
    contract_category: ContractCategory
    security_diagnostics: Tuple[Diagnostic, ...]
    style_diagnostics: Tuple[Diagnostic, ...]
    inventory: DeclarationInventory
    abi: Tuple[AbiEntry, ...]
    unsafe_constructs: Tuple[str, ...]
    deployment_warnings: Tuple[str, ...]
    narrative_summary: Optional[str] = None
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'riskScore': self.risk_score,
            'auditGrade': AuditGrade(self.audit_grade).value,
            'contractCategory': ContractCategory(self.contract_category).value,
            'securityDiagnostics': [d.to_dict() for d in self.security_diagnostics],
            'styleDiagnostics': [d.to_dict() for d in self.style_diagnostics],
            'inventory': self.inventory.to_dict(),
            'abi': [entry.to_dict() for entry in self.abi],
            'unsafeConstructs': list(self.unsafe_constructs),
            'deploymentWarnings': list(self.deployment_warnings),
            'narrativeSummary': self.narrative_summary,
            'generatedAt': self.generated_at.isoformat(),
        }


__all__: List[str] = [
    'AbiEntry',
    'AnalysisRecord',
    'AuditGrade',
    'ContractCategory',
    'DeclarationInventory',
    'DetectorCategory',
    'Diagnostic',
    'EventDecl',
    'FunctionDecl',
    'ImportRef',
    'ModifierDecl',
    'Param',
    'VariableDecl',
]
