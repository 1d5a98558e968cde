"""Stable identifiers for checks and finding codes.

``check_id`` is a dotted namespace. ``code`` is a short snake_case
discriminator within a check.
"""

from __future__ import annotations

CHECK_DEPS_NO_WILDCARDS = "deps.no_wildcards"
CHECK_DEPS_PATH_REQUIRES_VERSION = "deps.path_requires_version"
CHECK_DEPS_PATH_SAFETY = "deps.path_safety"
CHECK_DEPS_WORKSPACE_INHERITANCE = "deps.workspace_inheritance"
CHECK_DEPS_GIT_REQUIRES_VERSION = "deps.git_requires_version"
CHECK_DEPS_DEV_ONLY_IN_NORMAL = "deps.dev_only_in_normal"
CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT = "deps.default_features_explicit"
CHECK_DEPS_NO_MULTIPLE_VERSIONS = "deps.no_multiple_versions"
CHECK_DEPS_OPTIONAL_UNUSED = "deps.optional_unused"

CODE_WILDCARD_VERSION = "wildcard_version"
CODE_PATH_WITHOUT_VERSION = "path_without_version"
CODE_ABSOLUTE_PATH = "absolute_path"
CODE_PARENT_ESCAPE = "parent_escape"
CODE_MISSING_WORKSPACE_TRUE = "missing_workspace_true"
CODE_GIT_WITHOUT_VERSION = "git_without_version"
CODE_DEV_DEP_IN_NORMAL = "dev_dep_in_normal"
CODE_DEFAULT_FEATURES_IMPLICIT = "default_features_implicit"
CODE_DUPLICATE_DIFFERENT_VERSIONS = "duplicate_different_versions"
CODE_OPTIONAL_NOT_IN_FEATURES = "optional_not_in_features"

# Tool-level
CHECK_TOOL_RUNTIME = "tool.runtime"
CODE_RUNTIME_ERROR = "runtime_error"

FIX_ACTION_PIN_VERSION = "pin_version"
FIX_ACTION_ADD_VERSION = "add_version"
FIX_ACTION_ADD_VERSION_WITH_GIT = "add_version_with_git"
FIX_ACTION_USE_WORKSPACE = "use_workspace"
FIX_ACTION_MOVE_TO_DEV = "move_to_dev_dependencies"

# Manifest path recorded for findings that belong to the workspace as a whole.
WORKSPACE_MANIFEST = "."

ALL_CHECK_IDS = (
    CHECK_DEPS_NO_WILDCARDS,
    CHECK_DEPS_PATH_REQUIRES_VERSION,
    CHECK_DEPS_PATH_SAFETY,
    CHECK_DEPS_WORKSPACE_INHERITANCE,
    CHECK_DEPS_GIT_REQUIRES_VERSION,
    CHECK_DEPS_DEV_ONLY_IN_NORMAL,
    CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT,
    CHECK_DEPS_NO_MULTIPLE_VERSIONS,
    CHECK_DEPS_OPTIONAL_UNUSED,
)

ALL_CODES = (
    CODE_WILDCARD_VERSION,
    CODE_PATH_WITHOUT_VERSION,
    CODE_ABSOLUTE_PATH,
    CODE_PARENT_ESCAPE,
    CODE_MISSING_WORKSPACE_TRUE,
    CODE_GIT_WITHOUT_VERSION,
    CODE_DEV_DEP_IN_NORMAL,
    CODE_DEFAULT_FEATURES_IMPLICIT,
    CODE_DUPLICATE_DIFFERENT_VERSIONS,
    CODE_OPTIONAL_NOT_IN_FEATURES,
)
