from __future__ import annotations

from dataclasses import dataclass

from ..helpers.config import RddConfig
from ..helpers.utils import get_logger

logger = get_logger("dst_rdd.estimators")


@dataclass
class BaseEstimator:
    """
    Very small common base class for the estimators in this package.

    At the moment it only stores the :class:`RddConfig` object and
    exposes a tiny helper for tagged log messages.
    """

    config: RddConfig

    def _log(self, message: str) -> None:
        logger.info(f"[ESTIMATOR] {message}")
