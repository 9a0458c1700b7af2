# switchboard/middleware/permissions/enforcer.py
"""Permission evaluator bound to a set of bot owners.

Example:
    >>> from switchboard.middleware.permissions import PermissionEvaluator
    >>>
    >>> evaluator = PermissionEvaluator(owner_ids={"U01OWNER"})
    >>> result = evaluator.evaluate(command.permissions, context)
"""

from collections.abc import Iterable

from switchboard.core.commands.models import PermissionRules
from switchboard.core.context import InvocationContext
from switchboard.middleware.permissions.core import PermissionResult, evaluate


class PermissionEvaluator:
    """Evaluates command permission rules.

    Attributes:
        owner_ids: User ids that pass owner-only checks.
    """

    def __init__(self, owner_ids: Iterable[str] = ()):
        """Initialize the evaluator.

        Args:
            owner_ids: User ids treated as bot owners. Defaults to none, in
                which case every owner-only command is denied.
        """
        self.owner_ids = frozenset(owner_ids)

    def evaluate(
        self, rules: PermissionRules | None, context: InvocationContext
    ) -> PermissionResult:
        """Check whether the invocation may run a command with these rules.

        Args:
            rules: The command's permission rules, or None.
            context: The invocation being authorized.

        Returns:
            Allowed, or Denied carrying the first failing stage and reason.
        """
        return evaluate(rules, context, self.owner_ids)
