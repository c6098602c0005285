"""Config spec rules, parsing and evaluation."""

from ccview.clearcase.configspec.evaluator import ConfigSpec, VersionLocator
from ccview.clearcase.configspec.parser import parse_config_spec
from ccview.clearcase.configspec.rules import (
    LoadRule,
    RuleResult,
    ScopeType,
    StandardRule,
    compile_glob,
    is_label_selector,
)

__all__ = [
    "ConfigSpec",
    "LoadRule",
    "RuleResult",
    "ScopeType",
    "StandardRule",
    "VersionLocator",
    "compile_glob",
    "is_label_selector",
    "parse_config_spec",
]
