"""Application services: condition evaluation, step parsing, routing."""

from app.application.services.condition_evaluator import (
    evaluate_condition,
    evaluate_conditions,
)
from app.application.services.step_definition_parser import (
    build_allow_list,
    parse_actions,
    parse_allow_list,
    parse_conditions,
)
from app.application.services.workflow_router import WorkflowRouter

__all__ = [
    "WorkflowRouter",
    "build_allow_list",
    "evaluate_condition",
    "evaluate_conditions",
    "parse_actions",
    "parse_allow_list",
    "parse_conditions",
]
