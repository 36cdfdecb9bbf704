# repository/namespaces.py
from typing import Final

# Default key prefix; ProgressSettings.cache_prefix may replace it per job type.
ROOT: Final[str] = "job-progress"

# Per job type (not per instance) suffix holding the rolling AverageDuration.
AVERAGE: Final[str] = "average"
