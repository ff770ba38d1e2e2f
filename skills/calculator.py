"""Arithmetic skill backed by :mod:`core.expression`."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from core.errors import ValidationRejected
from core.expression import ExpressionError, calculate
from core.skills import SkillResult, command_pattern
from skills.base import BaseSkill


@dataclass
class CalculationData:
    expression: str
    result: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CalculatorSkill(BaseSkill):
    """Evaluate ``/calc`` expressions and arithmetic questions."""

    name = "calc"
    description = "Calculate mathematical expressions"
    triggers = (command_pattern("calc"),)
    natural_language_triggers = ("calculate", "compute", "what is", "what's", "solve")

    @property
    def usage(self) -> str:
        return "/calc [expression]"

    def execute(self, query: str) -> SkillResult:
        raw = self.require_argument(query, "Expression")
        try:
            expression, result = calculate(raw)
        except ExpressionError as exc:
            raise ValidationRejected(f"Calculation error: {exc}", skill=self.name) from exc
        data = CalculationData(expression=expression, result=result)
        return SkillResult(response=f"{expression} = {result}", data=data)
