"""Git Operations Package"""

from devflow.git.analyzer import CommitInfo, GitAnalyzer, GitError, parse_log_output
from devflow.git.diff_processor import DiffProcessor, FileDiff, ProcessedDiff, ProcessorConfig, Priority

__all__ = [
    "CommitInfo",
    "GitAnalyzer",
    "GitError",
    "parse_log_output",
    "DiffProcessor",
    "FileDiff",
    "ProcessedDiff",
    "ProcessorConfig",
    "Priority",
]
