"""Human-readable explanations for check ids and finding codes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Tuple

from . import ids


@dataclass(frozen=True)
class Explanation:
    title: str
    description: str
    remediation: str
    before: str
    after: str


_NO_WILDCARDS = Explanation(
    title="No Wildcard Versions",
    description=(
        "Detects dependencies declared with wildcard version requirements such as `*` or `1.*`.\n"
        "\n"
        "A wildcard lets Cargo pick any matching release, including breaking ones, so builds\n"
        "stop being reproducible over time. crates.io also rejects packages that depend on\n"
        "wildcard versions."
    ),
    remediation=(
        "Replace the wildcard with an explicit semver requirement:\n"
        "- `1.2.3` or `^1.2.3` for compatible updates within a major version\n"
        "- `~1.2.3` for patch-level updates only\n"
        "- `=1.2.3` for an exact pin"
    ),
    before='[dependencies]\nserde = "*"\ntokio = "1.*"',
    after='[dependencies]\nserde = "1.0"\ntokio = "1.35"',
)

_PATH_REQUIRES_VERSION = Explanation(
    title="Path Dependencies Require Version",
    description=(
        "Detects path dependencies in publishable crates that lack an explicit version.\n"
        "\n"
        "Cargo drops the `path` key when publishing and resolves the dependency from the\n"
        "registry by version. Without a version the crate cannot be published.\n"
        "\n"
        "Only crates that can be published (publish is not false) are checked."
    ),
    remediation=(
        "Add an explicit version next to the path:\n"
        "\n"
        '    my-crate = { path = "../my-crate", version = "0.1.0" }\n'
        "\n"
        "or inherit it from the workspace:\n"
        "\n"
        "    my-crate.workspace = true\n"
        "\n"
        "or mark the depending crate `publish = false`."
    ),
    before='[dependencies]\nmy-lib = { path = "../my-lib" }',
    after='[dependencies]\nmy-lib = { path = "../my-lib", version = "0.1.0" }',
)

_PATH_SAFETY = Explanation(
    title="Path Dependency Safety",
    description=(
        "Detects path dependencies that are absolute or that escape the repository root.\n"
        "\n"
        "Absolute paths depend on one machine's layout. Paths that climb out of the\n"
        "repository point at code that is not versioned with the project and will be\n"
        "missing on CI machines and other contributors' checkouts."
    ),
    remediation=(
        "Use repo-relative paths that stay inside the repository. For code that lives\n"
        "elsewhere, move it into the workspace or depend on it through git or a registry."
    ),
    before=(
        "[dependencies]\n"
        'my-lib = { path = "/home/user/code/my-lib" }\n'
        'other-lib = { path = "../../../outside-repo/lib" }'
    ),
    after=(
        "[dependencies]\n"
        'my-lib = { path = "../my-lib" }\n'
        'other-lib = { git = "https://github.com/org/other-lib" }'
    ),
)

_ABSOLUTE_PATH = Explanation(
    title="Absolute Path Dependency",
    description=(
        "A dependency is declared with an absolute filesystem path such as\n"
        "`/home/user/code/lib` or `C:\\Code\\lib`. The path only exists on one machine and\n"
        "may leak the host directory structure."
    ),
    remediation=(
        "Convert it to a repo-relative path, or depend on a published or git version:\n"
        "\n"
        '    my-crate = { path = "../my-crate" }\n'
        '    my-crate = "1.0"'
    ),
    before='[dependencies]\nmy-lib = { path = "/home/user/projects/my-lib" }',
    after='[dependencies]\nmy-lib = { path = "../my-lib" }',
)

_PARENT_ESCAPE = Explanation(
    title="Path Escapes Repository Root",
    description=(
        "A path dependency uses `..` segments that leave the repository root, counted from\n"
        "the directory of the manifest that declares it."
    ),
    remediation=(
        "Move the dependency into the workspace and point at its new location, or use a\n"
        "git or registry dependency instead."
    ),
    before=(
        "# crates/my-app/Cargo.toml\n"
        "[dependencies]\n"
        'shared = { path = "../../../shared-libs/common" }'
    ),
    after='# crates/my-app/Cargo.toml\n[dependencies]\nshared = { path = "../shared" }',
)

_WORKSPACE_INHERITANCE = Explanation(
    title="Workspace Dependency Inheritance",
    description=(
        "Detects dependencies defined in [workspace.dependencies] that a member declares\n"
        "inline instead of inheriting with `workspace = true`.\n"
        "\n"
        "Inheriting keeps a single source of truth for versions across the workspace."
    ),
    remediation=(
        "Inherit the shared definition, optionally adding local features:\n"
        "\n"
        "    serde.workspace = true\n"
        '    serde = { workspace = true, features = ["derive"] }\n'
        "\n"
        "If a member genuinely needs a different version, add it to the check's allow list\n"
        "in .depguard.yml."
    ),
    before=(
        "# Cargo.toml\n"
        "[workspace.dependencies]\n"
        'serde = "1.0"\n'
        "\n"
        "# crates/app/Cargo.toml\n"
        "[dependencies]\n"
        'serde = "1.0"'
    ),
    after=(
        "# Cargo.toml\n"
        "[workspace.dependencies]\n"
        'serde = "1.0"\n'
        "\n"
        "# crates/app/Cargo.toml\n"
        "[dependencies]\n"
        "serde.workspace = true"
    ),
)

_GIT_REQUIRES_VERSION = Explanation(
    title="Git Dependencies Require Version",
    description=(
        "Detects git dependencies in publishable crates that lack an explicit version.\n"
        "\n"
        "crates.io does not accept git sources; when publishing, Cargo needs a version to\n"
        "resolve the dependency from the registry."
    ),
    remediation=(
        "Add a version next to the git source, inherit the dependency from the workspace,\n"
        "or mark the depending crate `publish = false`."
    ),
    before='[dependencies]\nmy-lib = { git = "https://github.com/org/my-lib" }',
    after='[dependencies]\nmy-lib = { git = "https://github.com/org/my-lib", version = "0.3" }',
)

_DEV_ONLY_IN_NORMAL = Explanation(
    title="Dev-only Crate in Normal Dependencies",
    description=(
        "Detects crates that are almost always used for tests, mocking, snapshots or\n"
        "benchmarks (for example proptest, mockall, insta, criterion, tempfile) declared in\n"
        "[dependencies]. They are compiled into every consumer of the crate."
    ),
    remediation=(
        "Move the dependency to [dev-dependencies]. If production code really uses it, add\n"
        "it to the check's allow list."
    ),
    before='[dependencies]\nproptest = "1.4"',
    after='[dev-dependencies]\nproptest = "1.4"',
)

_DEFAULT_FEATURES_EXPLICIT = Explanation(
    title="Explicit default-features",
    description=(
        "Detects dependencies with inline options (path, git or optional) that do not say\n"
        "whether default features are enabled. Stating it makes the feature surface of\n"
        "the dependency obvious to reviewers."
    ),
    remediation="Add `default-features = true` or `default-features = false`.",
    before='[dependencies]\nmy-lib = { path = "../my-lib", version = "0.1" }',
    after='[dependencies]\nmy-lib = { path = "../my-lib", version = "0.1", default-features = false }',
)

_NO_MULTIPLE_VERSIONS = Explanation(
    title="No Multiple Versions",
    description=(
        "Detects crates declared with different version requirements in different\n"
        "workspace members. Diverging requirements slow builds and can link several copies\n"
        "of the same crate."
    ),
    remediation=(
        "Define the crate once in [workspace.dependencies] and inherit it in every member\n"
        "with `workspace = true`."
    ),
    before=(
        "# crates/a/Cargo.toml\n"
        'serde = "1.0"\n'
        "# crates/b/Cargo.toml\n"
        'serde = "0.9"'
    ),
    after=(
        "# Cargo.toml\n"
        "[workspace.dependencies]\n"
        'serde = "1.0"\n'
        "# crates/a/Cargo.toml and crates/b/Cargo.toml\n"
        "serde.workspace = true"
    ),
)

_OPTIONAL_UNUSED = Explanation(
    title="Unused Optional Dependency",
    description=(
        "Detects optional dependencies that no feature enables. Features reference\n"
        "dependencies as `dep:name`, `name/feature`, `name?/feature` or plain `name`;\n"
        "an optional dependency missing from all of them can never be turned on."
    ),
    remediation="Add a feature that enables the dependency, or remove `optional = true`.",
    before='[dependencies]\nserde = { version = "1.0", optional = true }\n\n[features]\ndefault = []',
    after=(
        '[dependencies]\nserde = { version = "1.0", optional = true }\n\n'
        '[features]\nserde = ["dep:serde"]'
    ),
)

_EXPLANATIONS: Dict[str, Explanation] = {
    ids.CHECK_DEPS_NO_WILDCARDS: _NO_WILDCARDS,
    ids.CHECK_DEPS_PATH_REQUIRES_VERSION: _PATH_REQUIRES_VERSION,
    ids.CHECK_DEPS_PATH_SAFETY: _PATH_SAFETY,
    ids.CHECK_DEPS_WORKSPACE_INHERITANCE: _WORKSPACE_INHERITANCE,
    ids.CHECK_DEPS_GIT_REQUIRES_VERSION: _GIT_REQUIRES_VERSION,
    ids.CHECK_DEPS_DEV_ONLY_IN_NORMAL: _DEV_ONLY_IN_NORMAL,
    ids.CHECK_DEPS_DEFAULT_FEATURES_EXPLICIT: _DEFAULT_FEATURES_EXPLICIT,
    ids.CHECK_DEPS_NO_MULTIPLE_VERSIONS: _NO_MULTIPLE_VERSIONS,
    ids.CHECK_DEPS_OPTIONAL_UNUSED: _OPTIONAL_UNUSED,
    ids.CODE_WILDCARD_VERSION: replace(_NO_WILDCARDS, title="Wildcard Version"),
    ids.CODE_PATH_WITHOUT_VERSION: replace(_PATH_REQUIRES_VERSION, title="Path Without Version"),
    ids.CODE_ABSOLUTE_PATH: _ABSOLUTE_PATH,
    ids.CODE_PARENT_ESCAPE: _PARENT_ESCAPE,
    ids.CODE_MISSING_WORKSPACE_TRUE: replace(
        _WORKSPACE_INHERITANCE, title="Missing workspace = true"
    ),
    ids.CODE_GIT_WITHOUT_VERSION: replace(_GIT_REQUIRES_VERSION, title="Git Without Version"),
    ids.CODE_DEV_DEP_IN_NORMAL: _DEV_ONLY_IN_NORMAL,
    ids.CODE_DEFAULT_FEATURES_IMPLICIT: replace(
        _DEFAULT_FEATURES_EXPLICIT, title="Implicit default-features"
    ),
    ids.CODE_DUPLICATE_DIFFERENT_VERSIONS: replace(
        _NO_MULTIPLE_VERSIONS, title="Duplicate Different Versions"
    ),
    ids.CODE_OPTIONAL_NOT_IN_FEATURES: _OPTIONAL_UNUSED,
}


def lookup_explanation(identifier: str) -> Optional[Explanation]:
    """Return the explanation for a check id or finding code."""
    return _EXPLANATIONS.get(identifier.strip())


def all_check_ids() -> Tuple[str, ...]:
    return ids.ALL_CHECK_IDS


def all_codes() -> Tuple[str, ...]:
    return ids.ALL_CODES


def format_explanation(explanation: Explanation) -> str:
    lines = [
        explanation.title,
        "=" * len(explanation.title),
        "",
        explanation.description,
        "",
        "Remediation",
        "-----------",
        explanation.remediation,
        "",
        "Examples",
        "--------",
        "",
        "Before (violation):",
        "```toml",
        explanation.before,
        "```",
        "",
        "After (fixed):",
        "```toml",
        explanation.after,
        "```",
    ]
    return "\n".join(lines) + "\n"


def format_not_found(
    identifier: str,
    check_ids: Sequence[str] | None = None,
    codes: Sequence[str] | None = None,
) -> str:
    check_ids = all_check_ids() if check_ids is None else check_ids
    codes = all_codes() if codes is None else codes
    lines = [f"Unknown check_id or code: {identifier}", "", "Available check_ids:"]
    lines.extend(f"  - {check_id}" for check_id in check_ids)
    lines.append("")
    lines.append("Available codes:")
    lines.extend(f"  - {code}" for code in codes)
    return "\n".join(lines) + "\n"


__all__ = [
    "Explanation",
    "all_check_ids",
    "all_codes",
    "format_explanation",
    "format_not_found",
    "lookup_explanation",
]
