"""Branch Name Sanitization"""

import re

from devflow import MAX_BRANCH_LENGTH

EMPTY_SLUG = "update"


def slugify(text: str) -> str:
    """Lowercase, map anything outside [a-z0-9-] to '-', collapse and trim hyphens."""
    slug = re.sub(r'[^a-z0-9-]', '-', text.lower())
    slug = re.sub(r'-{2,}', '-', slug)
    return slug.strip('-')


def sanitize_branch_name(raw: str, branch_type: str, issue_number: str | int | None = None) -> str:
    """Normalize a candidate slug into `{type}/{issue-}{slug}`, at most 50 chars."""
    candidate = raw.strip()
    type_prefix = f"{branch_type}/"
    if candidate.lower().startswith(type_prefix.lower()):
        candidate = candidate[len(type_prefix):]

    issue = re.sub(r'\D', '', str(issue_number)) if issue_number is not None else ""
    issue_prefix = f"{issue}-" if issue else ""

    slug = slugify(candidate)
    if issue_prefix and slug.startswith(issue_prefix):
        slug = slug[len(issue_prefix):]

    # -1 reserves the '/' between type and slug
    max_slug_length = MAX_BRANCH_LENGTH - len(branch_type) - len(issue_prefix) - 1
    if max_slug_length < 1:
        issue_prefix = ""
        max_slug_length = MAX_BRANCH_LENGTH - len(branch_type) - 1

    if len(slug) > max_slug_length:
        slug = slug[:max_slug_length].rstrip('-')
    if not slug:
        slug = EMPTY_SLUG[:max_slug_length]

    return f"{branch_type}/{issue_prefix}{slug}"
