#!/usr/bin/env python3
# -*- coding: utf-8 -*-


class ConfigError(ValueError):
    """Invalid generator identity or bit layout."""


class ClockMovedBackwardsError(RuntimeError):
    """The clock reports a time earlier than the last issued timestamp."""

    def __init__(self, drift: int, last_timestamp: int):
        self.drift = drift
        self.last_timestamp = last_timestamp
        super().__init__(
            f"Clock moved backwards. Refusing to generate id for {drift} milliseconds"
        )
