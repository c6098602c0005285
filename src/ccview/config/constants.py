"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are tool output formats and protocol tokens of the version control client.

For configurable values, see models.py (ClearCaseConfig).
"""

# =============================================================================
# Config Files
# =============================================================================

CONFIG_DIR_NAME = ".ccview"
CONFIG_FILE_NAME = "config.yaml"

# =============================================================================
# Extended Path Syntax
# =============================================================================

VERSION_SEPARATOR = "@@"
"""Separates an element name from its version suffix (elem@@/main/3)."""

PATH_SEPARATOR = "/"
"""Canonical separator; backslashes are converted on input."""

# =============================================================================
# Version Selectors
# =============================================================================

CHECKEDOUT = "CHECKEDOUT"
LATEST = "LATEST"
MAIN_BRANCH = "main"

# =============================================================================
# History Record Format
# =============================================================================
# Fields of one lshistory record, in output order:
# user, date, object name, kind, version, operation, event, comment, activity

HISTORY_DELIMITER = "#--#"
HISTORY_LINE_END = "###----###"
HISTORY_EVENT_PREFIX = "event "
HISTORY_FORMAT = (
    "%u#--#%Nd#--#%En#--#%m#--#%Vn#--#%o#--#%e#--#%Nc#--#%[activity]p###----###\\n"
)
HISTORY_DATE_FORMAT = "%Y%m%d.%H%M%S"
"""Output date format (yyyyMMdd.HHmmss)."""

REVISION_DATE_FORMAT = "%d-%B-%Y.%H:%M:%S"
"""Input date format accepted by -since (dd-Month-yyyy.HH:mm:ss)."""

# =============================================================================
# History Operations and Events
# =============================================================================

OPERATION_CHECKIN = "checkin"
OPERATION_RMVER = "rmver"
EVENT_CREATE_VERSION = "create version"
EVENT_CREATE_DIRECTORY_VERSION = "create directory version"
EVENT_DESTROY_VERSION = "destroy version on branch"
KIND_VERSION = "version"
