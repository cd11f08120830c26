# CEO Overview metrics package
# Exposes compute_metrics and the snapshot/export surface.

from .engine import compute_metrics  # noqa: F401
from .snapshot import MetricsSnapshot, export_metrics  # noqa: F401
