"""
DevFlow

AI-assisted git workflow: commit messages, pull request descriptions and
branch names from the GitHub Copilot CLI, with deterministic fallbacks.
"""

__version__ = "1.0.0"

# Centralized commit types - single source of truth
# Used by: prompts/builder.py, generation/parsers.py, generation/fallbacks.py
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'refactor': 'Code restructuring without behavior change',
    'chore': 'Maintenance tasks, dependencies, tooling',
    'docs': 'Documentation only changes',
    'test': 'Adding or updating tests',
    'style': 'Formatting, whitespace, no code change',
    'perf': 'Performance improvement',
    'ci': 'CI/CD configuration changes',
    'build': 'Build system or external dependency changes',
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

# Branch prefixes offered by `devflow branch create`
BRANCH_TYPES = {
    'feature': 'New feature',
    'fix': 'Bug fix',
    'chore': 'Maintenance',
    'docs': 'Documentation',
    'refactor': 'Code refactoring',
}

BRANCH_TYPE_NAMES = list(BRANCH_TYPES.keys())

# Upper bound for generated branch names, type prefix included
MAX_BRANCH_LENGTH = 50
