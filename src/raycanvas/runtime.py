"""Taichi runtime and logging setup.

Applications call :func:`init_taichi` once before rendering and may call
:func:`setup_default_logging` to get readable log output when they have no
logging configuration of their own.
"""

from __future__ import annotations

import logging
import platform
from typing import Literal

import taichi as ti

logger = logging.getLogger(__name__)

Backend = Literal["auto", "gpu", "cpu"]


def setup_default_logging(level: int | str = "INFO") -> None:
    """Apply a minimal logging configuration once.

    Does nothing when the root logger already has handlers, which means the
    application configured logging itself.

    Args:
        level: Logging level as a number or a name such as "DEBUG".
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def init_taichi(arch: Backend = "auto", random_seed: int = 0) -> str:
    """Initialize Taichi with the requested backend.

    With ``arch="auto"``, Metal is tried first on macOS, then the generic GPU
    backend, then the CPU. The seed drives the anti-aliasing jitter.

    Args:
        arch: "auto", "gpu" or "cpu".
        random_seed: Seed for Taichi's random number generator.

    Returns:
        Name of the backend being used.
    """
    if arch == "cpu":
        ti.init(arch=ti.cpu, random_seed=random_seed)
        return "CPU"

    if arch == "auto" and platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal, random_seed=random_seed)
            return "Metal (GPU)"
        except Exception:
            logger.debug("Metal backend unavailable", exc_info=True)

    try:
        ti.init(arch=ti.gpu, random_seed=random_seed)
        return "GPU"
    except Exception:
        if arch == "gpu":
            raise
        logger.info("GPU backend unavailable, falling back to CPU", exc_info=True)

    ti.init(arch=ti.cpu, random_seed=random_seed)
    return "CPU"
