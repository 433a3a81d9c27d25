"""
Tantrums Analysis Package.

This package contains the heuristic static-analysis engine:
- LexState: Line-oriented string/comment tracking and stripped text
- Inference: Literal type inference from surface syntax
- Symbols: Function signatures, variable bindings and the scope tree
- Rules: Rule catalog, levels and lint configuration
- Checks: The independent diagnostic checks
- Engine: One full analysis pass per document
- Store: Per-document diagnostic sets keyed by version
"""

from tantrums.analysis.context import AnalysisContext, Mode, Reporter, detect_mode
from tantrums.analysis.engine import Analyzer, analyze_source, split_lines
from tantrums.analysis.inference import (
    ValueType,
    infer_literal_type,
    is_compatible,
    split_arguments,
)
from tantrums.analysis.lexstate import LexState, Region, ScannedLine, scan_document, scan_line
from tantrums.analysis.rules import (
    ALL_RULES,
    RULES_BY_NAME,
    LintCategory,
    LintConfiguration,
    LintLevel,
    LintRule,
    get_rule,
    get_rules_by_category,
)
from tantrums.analysis.store import DiagnosticStore
from tantrums.analysis.symbols import (
    FunctionSignature,
    Scope,
    ScopeKind,
    ScopeTree,
    SymbolCollector,
    SymbolTable,
    VariableBinding,
)

__all__ = [
    # Lexical state
    "LexState",
    "Region",
    "ScannedLine",
    "scan_line",
    "scan_document",
    # Inference
    "ValueType",
    "infer_literal_type",
    "is_compatible",
    "split_arguments",
    # Symbols
    "FunctionSignature",
    "VariableBinding",
    "Scope",
    "ScopeKind",
    "ScopeTree",
    "SymbolTable",
    "SymbolCollector",
    # Rules
    "LintLevel",
    "LintCategory",
    "LintRule",
    "LintConfiguration",
    "ALL_RULES",
    "RULES_BY_NAME",
    "get_rule",
    "get_rules_by_category",
    # Engine
    "AnalysisContext",
    "Reporter",
    "Mode",
    "detect_mode",
    "Analyzer",
    "analyze_source",
    "split_lines",
    "DiagnosticStore",
]
