"""Parse account-code expressions such as ``"400+401,36"``.

Groups are separated by ``,`` and optimized independently; codes inside a
group are joined by ``+`` and summed before optimization.
"""

from finexplorer.domain.errors import ValidationError
from finexplorer.domain.models.optimization import AccountCodeGroup

GROUP_SEPARATOR = ","
CODE_SEPARATOR = "+"


def parse_account_codes(expression: str | None) -> tuple[AccountCodeGroup, ...]:
    """Parse an account-code expression into code groups.

    Args:
        expression: Expression made of numeric codes, ``+`` and ``,``.

    Returns:
        tuple[AccountCodeGroup, ...]: Groups in expression order.

    Raises:
        ValidationError: If the expression is empty, has an empty group or
            code, or contains a non-numeric code.
    """
    if expression is None or not expression.strip():
        raise ValidationError("Account-code expression is empty")

    groups: list[AccountCodeGroup] = []
    for group_number, raw_group in enumerate(
        expression.split(GROUP_SEPARATOR),
        start=1,
    ):
        if not raw_group.strip():
            raise ValidationError(
                f"Account-code group {group_number} in {expression!r} is "
                f"empty; separate groups with a single '{GROUP_SEPARATOR}'"
            )
        codes: list[str] = []
        for raw_code in raw_group.split(CODE_SEPARATOR):
            code = raw_code.strip()
            if not code:
                raise ValidationError(
                    f"Account-code group {group_number} "
                    f"({raw_group.strip()!r}) has an empty code; join codes "
                    f"with a single '{CODE_SEPARATOR}'"
                )
            if not (code.isascii() and code.isdigit()):
                raise ValidationError(
                    f"Invalid account code {code!r} in group {group_number} "
                    f"({raw_group.strip()!r}): account codes must be numeric"
                )
            codes.append(code)
        groups.append(AccountCodeGroup(codes=tuple(codes)))
    return tuple(groups)


def format_account_codes(groups: tuple[AccountCodeGroup, ...]) -> str:
    """Serialize code groups back into the expression form."""
    return GROUP_SEPARATOR.join(group.name for group in groups)


def is_valid_account_code_expression(expression: str | None) -> bool:
    try:
        parse_account_codes(expression)
    except ValidationError:
        return False
    return True


__all__ = [
    "GROUP_SEPARATOR",
    "CODE_SEPARATOR",
    "parse_account_codes",
    "format_account_codes",
    "is_valid_account_code_expression",
]
