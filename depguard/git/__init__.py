"""Git integration for diff-scoped runs."""
