from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd

from trend_explorer.analytics.periods import Frequency
from trend_explorer.data.series import SeriesFilters


@dataclass
class PageContext:
    raw_df: pd.DataFrame
    series_df: pd.DataFrame
    filters: SeriesFilters
    frequency: Frequency
    unit: Optional[str]
    indicator_name: str
    result: Any = None
