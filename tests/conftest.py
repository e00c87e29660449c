from __future__ import annotations

from datetime import datetime
from typing import Callable

import pytest

from tests.helpers import FIXED_NOW


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW
