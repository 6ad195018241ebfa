"""
spacelint Rules Package

This package contains the rules that analyze code for issues. Each module
exposes a ``RULES`` list; ``register_builtin_rules`` walks the package and
registers every listed rule with the global registry.

To add a new rule:
1. Create a Python file in this directory (e.g., style_my_rule.py)
2. Define your rule class implementing the Rule protocol
3. Add a RULES list containing your rule instance

Example rule structure:

```python
from spacelint.engine.reporter import Reporter
from spacelint.engine.types import Requires, RuleContext, RuleMeta

class MyRule:
    meta = RuleMeta(
        id="style.my_rule",
        category="style",
        tier=0,
        priority="P3",
        autofix_safety="safe",
        description="Detects my specific issue",
        langs=["javascript"],
    )

    requires = Requires(raw_text=True, syntax=False)

    def visit(self, ctx: RuleContext):
        reporter = Reporter(self.meta.id, ctx)
        reporter.report(0, "Found an issue")
        yield from reporter.findings

RULES = [MyRule()]
```
"""

from spacelint.engine.registry import discover_rules


def register_builtin_rules() -> int:
    """
    Register every rule shipped in this package.

    Returns:
        Number of rules newly registered
    """
    return discover_rules([__name__])


__all__ = ["register_builtin_rules"]
