"""dtrack_suppressor package: app/core/infra/shared.

Expose library-friendly API client at the package level.
"""

from .app.api import AppConfig, DependencyTrackSuppressor
from .core.domain.models import AnalysisConfig, SuppressionResult
from .core.services.config_resolver import GlobalAnalysisConfig

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "DependencyTrackSuppressor",
    "AppConfig",
    "AnalysisConfig",
    "GlobalAnalysisConfig",
    "SuppressionResult",
]
