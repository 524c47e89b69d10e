"""
Outcomes of a learning run.

Inside the learners, problems are raised as LearningError subclasses; at the
run boundary they are folded into a LearningResult so that callers always get
a structured answer instead of an exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .words import Word, format_word


class IssueKind(Enum):
    """Kinds of problems a run can report."""
    INSUFFICIENT_INFORMATION = "insufficient_information"
    INCONSISTENT_BASIS = "inconsistent_basis"
    SINGULAR_SUBMATRIX = "singular_submatrix"
    SEARCH_SPACE_TOO_LARGE = "search_space_too_large"
    MINIMIZATION_REGRESSION = "minimization_regression"
    NOT_CONVERGED = "not_converged"
    UNRESOLVED_COUNTEREXAMPLE = "unresolved_counterexample"


class LearningStatus(Enum):
    SUCCESS = "success"    # hypothesis agrees with every known example
    PARTIAL = "partial"    # hypothesis produced, but some example disagrees
    FAILED = "failed"      # no hypothesis


@dataclass
class LearningIssue:
    """A reported problem with the words or counts that explain it."""

    kind: IssueKind
    message: str
    words: List[Word] = field(default_factory=list)
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'kind': self.kind.value, 'message': self.message}
        if self.words:
            result['words'] = [format_word(w) for w in self.words]
        if self.count is not None:
            result['count'] = self.count
        return result

    def __str__(self) -> str:
        text = f"[{self.kind.value}] {self.message}"
        if self.words:
            shown = ", ".join(f"'{format_word(w)}'" for w in self.words[:10])
            more = f" (+{len(self.words) - 10} more)" if len(self.words) > 10 else ""
            text += f": {shown}{more}"
        return text


class LearningError(Exception):
    """Base class for problems raised inside a learning run."""

    kind: IssueKind = None

    def __init__(self, message: str, words: Optional[List[Word]] = None,
                 count: Optional[int] = None):
        super().__init__(message)
        self.issue = LearningIssue(self.kind, message, list(words or []), count)


class InsufficientInformation(LearningError):
    """The table needs labels for words no example covers."""
    kind = IssueKind.INSUFFICIENT_INFORMATION

    @property
    def missing_words(self) -> List[Word]:
        return self.issue.words


class InconsistentBasis(LearningError):
    """A closure row that passed the closure check is not in the basis span."""
    kind = IssueKind.INCONSISTENT_BASIS


class SingularSubmatrix(LearningError):
    """The heuristic base matrix is not invertible over GF(2)."""
    kind = IssueKind.SINGULAR_SUBMATRIX


class SearchSpaceTooLarge(LearningError):
    """Too many unknown entries for the exhaustive search."""
    kind = IssueKind.SEARCH_SPACE_TOO_LARGE


class NotConverged(LearningError):
    """An iteration cap was reached."""
    kind = IssueKind.NOT_CONVERGED


@dataclass
class LearningResult:
    """Structured result of a learning run."""

    status: LearningStatus
    hypothesis: Optional[Any] = None
    issues: List[LearningIssue] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == LearningStatus.SUCCESS

    def has_issue(self, kind: IssueKind) -> bool:
        return any(issue.kind == kind for issue in self.issues)

    def issues_of(self, kind: IssueKind) -> List[LearningIssue]:
        return [issue for issue in self.issues if issue.kind == kind]

    @property
    def missing_words(self) -> List[Word]:
        """Words the run reported as needed but unlabeled."""
        words = []
        for issue in self.issues_of(IssueKind.INSUFFICIENT_INFORMATION):
            words.extend(w for w in issue.words if w not in words)
        return words

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'hypothesis': self.hypothesis.to_dict() if self.hypothesis is not None else None,
            'issues': [issue.to_dict() for issue in self.issues],
            'statistics': self.statistics,
        }

    def __str__(self) -> str:
        dimension = self.hypothesis.dimension if self.hypothesis is not None else "-"
        return (f"LearningResult(status={self.status.value}, dimension={dimension}, "
                f"issues={len(self.issues)})")
