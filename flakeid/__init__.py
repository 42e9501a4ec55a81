#!/usr/bin/env python3
# -*- coding: utf-8 -*-

__version__ = "1.0.0"

from typing import Tuple

from .errors import ConfigError, ClockMovedBackwardsError
from .utils.snowflake import EPOCH, IdWorker, SnowflakeId, parse_id

__all__: Tuple[str, ...] = (
    "EPOCH",
    "IdWorker",
    "SnowflakeId",
    "parse_id",
    "ConfigError",
    "ClockMovedBackwardsError",
)
