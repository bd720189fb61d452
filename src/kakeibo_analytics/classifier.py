"""Fixed/variable expense classification.

A category is a fixed expense when it names a recurring obligation. The rule
is a flat, ordered list of canonical fixed-expense names matched by
substring in both directions, so abbreviations ("保険") and longer labels
("生命保険料") both classify as fixed.
"""

FIXED_EXPENSE_CATEGORIES: tuple[str, ...] = (
    "通信費",  # communications
    "光熱費",  # utilities
    "家賃",  # rent
    "保険",  # insurance
    "サブスクリプション",  # subscriptions
    "ローン",  # loan repayment
)


def is_fixed_expense(category: str) -> bool:
    """Return True if ``category`` denotes a fixed expense.

    Matching is case-sensitive containment in either direction against
    FIXED_EXPENSE_CATEGORIES.
    """
    return any(
        fixed in category or category in fixed
        for fixed in FIXED_EXPENSE_CATEGORIES
    )
