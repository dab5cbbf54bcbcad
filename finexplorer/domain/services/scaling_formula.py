"""Parse and evaluate custom scaling formulas.

A formula combines scaling metrics and numbers with ``+ - * /`` and
parentheses, e.g. ``"1.5*pop+30*total_area"`` or ``"pop/1000"``. It is
compiled once into postfix order and then evaluated for every entity.
A leading minus, or one right after ``(``, negates the following operand.
"""

import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from logging import Logger

from finexplorer.domain.constants import CUSTOM_SCALING_PREFIX
from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.optimization import ScalingFormula
from finexplorer.utils.decimal_utils import coerce_decimal

_TOKEN_PATTERN = re.compile(
    r"\s*(?:([0-9]+(?:\.[0-9]*)?|\.[0-9]+)|([A-Za-z_][A-Za-z0-9_]*)|(\S))"
)
_SYMBOLS = "+-*/()"


def parse_scaling_formula(
    formula: str | None,
    available_metrics: Iterable[str] | None = None,
) -> ScalingFormula:
    """Validate a formula and compile it for evaluation.

    Args:
        formula: Expression over metric names and numbers.
        available_metrics: Known metric names. When given, formulas using
            any other name are rejected.

    Returns:
        ScalingFormula: Normalized text, used metrics and postfix tokens.

    Raises:
        ValidationError: If the formula is empty, uses no or unknown
            metrics, has unbalanced parentheses or misplaces an operator.
    """
    if formula is None or not formula.strip():
        raise ValidationError("Scaling formula is empty")

    tokens = _tokenize(formula)
    postfix = _Parser(tokens).parse()
    metrics = tuple(
        dict.fromkeys(token for kind, token in postfix if kind == "metric")
    )
    if not metrics:
        raise ValidationError(
            f"Scaling formula {formula.strip()!r} must use at least one "
            "scaling metric"
        )
    if available_metrics is not None:
        known = set(available_metrics)
        unknown = [metric for metric in metrics if metric not in known]
        if unknown:
            raise ValidationError(
                f"Unknown scaling metrics: {', '.join(unknown)}. "
                f"Available: {', '.join(sorted(known)) or 'none'}"
            )

    return ScalingFormula(
        text="".join(token for _, token in tokens),
        metrics=metrics,
        postfix=postfix,
    )


def is_valid_scaling_formula(
    formula: str | None,
    available_metrics: Iterable[str] | None = None,
) -> bool:
    try:
        parse_scaling_formula(formula, available_metrics)
    except ValidationError:
        return False
    return True


def custom_scaling_formula(metric: str) -> str | None:
    """Return the formula of a ``custom:`` metric name, None otherwise."""
    if metric.startswith(CUSTOM_SCALING_PREFIX):
        return metric[len(CUSTOM_SCALING_PREFIX):]
    return None


def evaluate_formula(
    formula: ScalingFormula,
    values: Mapping[str, Decimal],
) -> Decimal:
    """Evaluate a compiled formula for one entity.

    Args:
        formula: Result of ``parse_scaling_formula``.
        values: Value of every metric the formula uses.

    Returns:
        Decimal: The formula's value.

    Raises:
        ValidationError: If a metric value is missing, on a division by
            zero, or when the result is not a finite number.
    """
    stack: list[Decimal] = []
    for kind, token in formula.postfix:
        if kind == "number":
            stack.append(Decimal(token))
        elif kind == "metric":
            if values.get(token) is None:
                raise ValidationError(
                    f"Missing value for scaling metric {token!r}"
                )
            stack.append(coerce_decimal(values[token]))
        elif kind == "negate":
            stack.append(-stack.pop())
        else:
            right = stack.pop()
            left = stack.pop()
            stack.append(_apply(token, left, right))

    result = stack.pop()
    if not result.is_finite():
        raise ValidationError(
            f"Scaling formula {formula.text!r} did not evaluate to a "
            "finite number"
        )
    return result


def evaluate_scaling_formula(
    formula: ScalingFormula,
    metric_values: Mapping[str, Mapping[str, Decimal]],
    *,
    logger: Logger | None = None,
) -> dict[str, Decimal]:
    """Compute the formula's scaling value for every entity.

    Args:
        formula: Result of ``parse_scaling_formula``.
        metric_values: Values per entity id, keyed by metric name.
        logger: Optional logger warning about skipped entities.

    Returns:
        dict[str, Decimal]: Scaling value per entity id. Only entities with
        a value for every metric are evaluated; entities whose evaluation
        fails (division by zero) are left out.
    """
    per_metric = [metric_values.get(metric, {}) for metric in formula.metrics]
    entity_ids = set(per_metric[0]).intersection(*per_metric[1:])

    scaled: dict[str, Decimal] = {}
    skipped: list[str] = []
    for entity_id in sorted(entity_ids):
        values = {
            metric: entity_values[entity_id]
            for metric, entity_values in zip(formula.metrics, per_metric)
        }
        try:
            scaled[entity_id] = evaluate_formula(formula, values)
        except ValidationError:
            skipped.append(entity_id)

    if skipped and logger is not None:
        logger.warning(
            f"Scaling formula {formula.text!r} could not be evaluated for "
            f"entities: {', '.join(skipped)}"
        )
    return scaled


def _apply(operator: str, left: Decimal, right: Decimal) -> Decimal:
    if operator == "+":
        return left + right
    if operator == "-":
        return left - right
    if operator == "*":
        return left * right
    if right == 0:
        raise ValidationError("Division by zero in scaling formula")
    return left / right


def _tokenize(formula: str) -> list[tuple[str, str]]:
    text = formula.strip()
    tokens: list[tuple[str, str]] = []
    position = 0
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        number, name, symbol = match.groups()
        position = match.end()
        if number is not None:
            tokens.append(("number", number))
        elif name is not None:
            tokens.append(("metric", name))
        elif symbol in _SYMBOLS:
            tokens.append(("symbol", symbol))
        else:
            raise ValidationError(
                f"Unsupported character {symbol!r} in scaling formula "
                f"{text!r}; use metric names, numbers and {_SYMBOLS}"
            )
    return tokens


class _Parser:
    """Recursive-descent parser producing postfix tokens.

    expression := term (("+" | "-") term)*
    term       := factor (("*" | "/") factor)*
    factor     := number | metric | "(" expression ")" | "-" factor
    """

    def __init__(self, tokens: list[tuple[str, str]]) -> None:
        self._tokens = tokens
        self._position = 0
        self._output: list[tuple[str, str]] = []

    def parse(self) -> tuple[tuple[str, str], ...]:
        self._expression()
        if self._position < len(self._tokens):
            token = self._tokens[self._position][1]
            if token == ")":
                raise ValidationError(
                    "Unbalanced parentheses: too many closing parentheses"
                )
            raise ValidationError(
                f"Missing operator between {self._previous()} and {token}"
            )
        return tuple(self._output)

    def _peek(self) -> str | None:
        if self._position < len(self._tokens):
            return self._tokens[self._position][1]
        return None

    def _previous(self) -> str | None:
        if self._position == 0:
            return None
        return self._tokens[self._position - 1][1]

    def _expression(self) -> None:
        self._term()
        while self._peek() in ("+", "-"):
            operator = self._tokens[self._position][1]
            self._position += 1
            self._term()
            self._output.append(("operator", operator))

    def _term(self) -> None:
        self._factor()
        while self._peek() in ("*", "/"):
            operator = self._tokens[self._position][1]
            self._position += 1
            self._factor()
            self._output.append(("operator", operator))

    def _factor(self) -> None:
        previous = self._previous()
        if self._position >= len(self._tokens):
            raise ValidationError(
                f"Formula cannot end with operator: {previous}"
            )
        kind, token = self._tokens[self._position]
        if kind != "symbol":
            self._position += 1
            self._output.append((kind, token))
            return
        if token == "(":
            self._position += 1
            self._expression()
            if self._peek() != ")":
                raise ValidationError("Unbalanced parentheses")
            self._position += 1
            return
        if token == "-" and previous in (None, "("):
            self._position += 1
            self._factor()
            self._output.append(("negate", token))
            return
        if token == ")" and previous == "(":
            raise ValidationError("Scaling formula has empty parentheses")
        if token == ")" and previous is None:
            raise ValidationError(
                "Unbalanced parentheses: too many closing parentheses"
            )
        if previous is None:
            raise ValidationError(
                f"Formula cannot start with operator: {token}"
            )
        raise ValidationError(f"Invalid operator sequence: {previous} {token}")


__all__ = [
    "parse_scaling_formula",
    "is_valid_scaling_formula",
    "custom_scaling_formula",
    "evaluate_formula",
    "evaluate_scaling_formula",
]
