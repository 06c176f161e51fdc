"""Utility helpers for etherpad_lite."""

from __future__ import annotations

from .log_json import JsonLogger

__all__ = ["JsonLogger"]
