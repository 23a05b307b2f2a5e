"""Plan builder — fluent construction of PlanStructures."""

from activity_plan.builder.builder import PlanBuilder, create_plan
from activity_plan.builder.templates import TEMPLATE_NAMES, get_template

__all__ = ["PlanBuilder", "TEMPLATE_NAMES", "create_plan", "get_template"]
