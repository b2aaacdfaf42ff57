"""
Problem Generator - produces arithmetic problems and scores submitted answers.
"""

import random
import string
from dataclasses import dataclass
from typing import Any, Dict, Optional

OPERATORS = ('+', '-', '×')
OPERAND_MIN = 1
OPERAND_MAX = 10
PROBLEM_ID_LENGTH = 7
_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class Problem:
    """One arithmetic question."""
    id: str
    a: int
    b: int
    operator: str

    @property
    def answer(self) -> int:
        return correct_answer(self)

    @property
    def equation(self) -> str:
        return f"{self.a} {self.operator} {self.b} = {self.answer}"

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'a': self.a, 'b': self.b, 'operator': self.operator}


def correct_answer(problem: Problem) -> int:
    if problem.operator == '+':
        return problem.a + problem.b
    if problem.operator == '-':
        return problem.a - problem.b
    if problem.operator == '×':
        return problem.a * problem.b
    raise ValueError(f"Unknown operator: {problem.operator!r}")


def is_numeric(value: Any) -> bool:
    """True for ints and floats; bools are not answers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ProblemGenerator:
    """Generates problems from an injectable random source."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def generate(self) -> Problem:
        return Problem(
            id=self._new_id(),
            a=self._rng.randint(OPERAND_MIN, OPERAND_MAX),
            b=self._rng.randint(OPERAND_MIN, OPERAND_MAX),
            operator=self._rng.choice(OPERATORS),
        )

    def score(self, problem: Problem, value: Any) -> bool:
        """Return True iff ``value`` is the correct answer to ``problem``."""
        if not is_numeric(value):
            return False
        return value == correct_answer(problem)

    def _new_id(self) -> str:
        return ''.join(self._rng.choice(_ID_ALPHABET) for _ in range(PROBLEM_ID_LENGTH))
