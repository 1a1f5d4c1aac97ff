"""Lifecycle transition policy (no IO).

Holds the transition table of the translation lifecycle and answers which
actions are legal in a status and where they lead. Lock preconditions are
checked by the LockManager; this policy only looks at the status.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional

from translationlifecycle.exceptions.errors import InvalidTransition
from translationlifecycle.models.document_status import DocumentStatus
from translationlifecycle.models.lifecycle_action import LifecycleAction

_ALL = frozenset(DocumentStatus)


@dataclass(frozen=True, slots=True)
class TransitionRule:
    """
    One row of the transition table.

    Fields
    ------
    from_statuses : frozenset[DocumentStatus]
        Statuses in which the action is legal.
    to_status : DocumentStatus | None
        Resulting status; None keeps the current status.
    """
    action: LifecycleAction
    from_statuses: FrozenSet[DocumentStatus]
    to_status: Optional[DocumentStatus] = None


DEFAULT_RULES: tuple[TransitionRule, ...] = (
    TransitionRule(LifecycleAction.RELEASE_FOR_TRANSLATION,
                   frozenset({DocumentStatus.DRAFT}), DocumentStatus.PENDING_TRANSLATION),
    TransitionRule(LifecycleAction.START_TRANSLATION,
                   frozenset({DocumentStatus.PENDING_TRANSLATION}), DocumentStatus.IN_TRANSLATION),
    TransitionRule(LifecycleAction.RESUME_TRANSLATION,
                   frozenset({DocumentStatus.IN_TRANSLATION})),
    TransitionRule(LifecycleAction.SAVE_TRANSLATION,
                   frozenset({DocumentStatus.IN_TRANSLATION})),
    TransitionRule(LifecycleAction.HAND_OVER,
                   frozenset({DocumentStatus.IN_TRANSLATION})),
    TransitionRule(LifecycleAction.SUBMIT_REVIEW,
                   frozenset({DocumentStatus.IN_TRANSLATION}), DocumentStatus.PENDING_REVIEW),
    TransitionRule(LifecycleAction.SAVE_REVIEW,
                   frozenset({DocumentStatus.PENDING_REVIEW})),
    TransitionRule(LifecycleAction.APPROVE,
                   frozenset({DocumentStatus.PENDING_REVIEW}), DocumentStatus.APPROVED),
    TransitionRule(LifecycleAction.REJECT,
                   frozenset({DocumentStatus.PENDING_REVIEW, DocumentStatus.APPROVED}),
                   DocumentStatus.IN_TRANSLATION),
    TransitionRule(LifecycleAction.PUBLISH,
                   frozenset({DocumentStatus.APPROVED}), DocumentStatus.PUBLISHED),
    TransitionRule(LifecycleAction.CONVERT_TO_PENDING,
                   _ALL - {DocumentStatus.PENDING_TRANSLATION}, DocumentStatus.PENDING_TRANSLATION),
    TransitionRule(LifecycleAction.RELEASE_LOCK, _ALL),
    TransitionRule(LifecycleAction.RECLAIM_LOCK, _ALL),
)


class LifecyclePolicy:
    """
    Policy evaluation for lifecycle transitions.

    Each action has exactly one rule; later rules for the same action replace
    earlier ones.
    """

    def __init__(self, rules: Optional[Iterable[TransitionRule]] = None) -> None:
        self._rules: Dict[LifecycleAction, TransitionRule] = {
            r.action: r for r in (rules if rules is not None else DEFAULT_RULES)
        }

    def rule_for(self, action: LifecycleAction) -> TransitionRule:
        try:
            return self._rules[LifecycleAction(action)]
        except KeyError:
            raise InvalidTransition(None, action, "no rule configured") from None

    def is_allowed(self, action: LifecycleAction, status: DocumentStatus) -> bool:
        rule = self._rules.get(LifecycleAction(action))
        return rule is not None and DocumentStatus(status) in rule.from_statuses

    def allowed_actions(self, status: DocumentStatus) -> List[LifecycleAction]:
        """Return the actions legal in 'status', in table order."""
        st = DocumentStatus(status)
        return [a for a, r in self._rules.items() if st in r.from_statuses]

    def check(self, action: LifecycleAction, status: DocumentStatus) -> DocumentStatus:
        """
        Validate 'action' in 'status' and return the resulting status.

        Raises
        ------
        InvalidTransition
            If the action is not legal in the given status.
        """
        rule = self.rule_for(action)
        st = DocumentStatus(status)
        if st not in rule.from_statuses:
            raise InvalidTransition(st, rule.action)
        return rule.to_status or st
