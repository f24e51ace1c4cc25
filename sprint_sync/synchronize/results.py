"""Contains results of rule evaluation."""

from typing import Any

from sprint_sync.schemas.issue import IssueModel
from sprint_sync.sprints.resolver import SprintWindow
from sprint_sync.synchronize.models import Mutation, RuleDecision


class RuleEvaluationResult:
    """Contains the results of evaluating the rule on one change event."""

    def __init__(
        self,
        issue: IssueModel,
        decision: RuleDecision,
        sprint_window: SprintWindow | None = None,
        mutations: list[Mutation] | None = None,
    ) -> None:
        """Initialize the result with the resulting issue, the decision, and the applied mutations."""
        self.issue = issue
        self.decision = decision
        self.sprint_window = sprint_window
        self.mutations = mutations or []

    @property
    def guard_fired(self) -> bool:
        """Return whether the guard allowed the action to run."""
        return self.decision != RuleDecision.SKIPPED


class RunRuleResult:
    """Contains results of the run-rule workflow."""

    def __init__(self, evaluation: RuleEvaluationResult | None, errors: list[dict[str, Any]] | None = None) -> None:
        """Initialize the result with the rule evaluation and errors."""
        self.evaluation = evaluation
        self.errors = errors or []
