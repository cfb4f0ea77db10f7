from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock


def scalar_result(value: Any) -> MagicMock:
    """Stand-in for the ``Result`` returned by ``AsyncSession.execute``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalars.return_value.all.return_value = value if isinstance(value, list) else [value]
    return result
