"""Config spec resolution against ClearCase version trees."""

from ccview.clearcase.errors import (
    AmbiguousVersionError,
    ClearCaseError,
    ConfigSpecParseError,
    HistoryParseError,
    ListingError,
    MalformedPathError,
    MalformedVersionError,
    SessionNotRegisteredError,
    VersionResolutionError,
    ViewOperationError,
)
from ccview.clearcase.models import (
    DirectoryChild,
    DirectoryDelta,
    ToolRecord,
    VersionDescription,
    VersionEntry,
)
from ccview.clearcase.paths import PathElement, ViewPath
from ccview.clearcase.version_tree import Branch, Version, VersionTree
from ccview.clearcase.configspec import (
    ConfigSpec,
    LoadRule,
    RuleResult,
    ScopeType,
    StandardRule,
    parse_config_spec,
)
from ccview.clearcase.history import HistoryElement, iter_history, merge_history
from ccview.clearcase.revision import Revision
from ccview.clearcase.classifier import (
    ChangeClassifier,
    ChangedFilesProcessor,
    ChangeKind,
    ClassifierState,
)
from ccview.clearcase.listing import Listing, RawOutputListing
from ccview.clearcase.session import SessionRegistry
from ccview.clearcase.view import ViewConnection

__all__ = [
    # Main classes
    "ViewConnection",
    "SessionRegistry",
    "ConfigSpec",
    "parse_config_spec",
    # Paths and trees
    "PathElement",
    "ViewPath",
    "Branch",
    "Version",
    "VersionTree",
    # Rules
    "LoadRule",
    "RuleResult",
    "ScopeType",
    "StandardRule",
    # History
    "HistoryElement",
    "Revision",
    "iter_history",
    "merge_history",
    "ChangeClassifier",
    "ChangedFilesProcessor",
    "ChangeKind",
    "ClassifierState",
    # Listing
    "Listing",
    "RawOutputListing",
    # Models
    "DirectoryChild",
    "DirectoryDelta",
    "ToolRecord",
    "VersionDescription",
    "VersionEntry",
    # Errors
    "ClearCaseError",
    "AmbiguousVersionError",
    "ConfigSpecParseError",
    "HistoryParseError",
    "ListingError",
    "MalformedPathError",
    "MalformedVersionError",
    "SessionNotRegisteredError",
    "VersionResolutionError",
    "ViewOperationError",
]
