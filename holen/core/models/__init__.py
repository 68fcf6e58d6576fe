"""
Domain models — Pydantic types for manifests and strategies.

    from holen.core.models import ManifestData, UtilityRequest, DockerData
"""

from holen.core.models.manifest import ManifestData, StrategyBlock, VersionRecord
from holen.core.models.strategy import BinaryData, DockerData, StrategyKind
from holen.core.models.utility import UtilityRequest

__all__ = [
    # manifest.py
    "ManifestData",
    "StrategyBlock",
    "VersionRecord",
    # strategy.py
    "BinaryData",
    "DockerData",
    "StrategyKind",
    # utility.py
    "UtilityRequest",
]
