"""Price alert domain models and trigger evaluation."""

# job and directory are imported from their modules directly; both depend on
# ormdb, which imports alerts.models
from .evaluator import evaluate
from .models import Alert, AlertCondition, AlertOutcome, normalize_symbol

__all__ = ["Alert", "AlertCondition", "AlertOutcome", "evaluate", "normalize_symbol"]
