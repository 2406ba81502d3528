# aad/config.py
"""
Shared configuration for the AAD package: numeric dtype, logging setup and
the finite-difference check settings.
"""

import logging
import sys
from dataclasses import dataclass

import numpy as np

DTYPE = np.float64

LOGGER_NAME = "aad_backprop"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a stdout handler to the package logger (once) and set its level.

    Library modules only create child loggers; nothing is printed unless the
    application calls this or configures logging itself.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


@dataclass
class GradCheckConfig:
    """Configuration for finite-difference ("bumping") gradient checks."""
    # Bump size
    epsilon: float = 1e-6
    scheme: str = 'central'  # 'central', 'forward'

    # Tolerances for np.allclose(fd, ad)
    rtol: float = 1e-5
    atol: float = 1e-7
