#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Engine Errors

Only batch-level failures are raised. Per-item problems are reported
inside the returned result structures instead.
"""

from typing import List, Optional


class ContentEngineError(Exception):
    """Base error for the content format engine"""
    pass


class BackupError(ContentEngineError):
    """Raised when a backup snapshot cannot be parsed into records"""
    def __init__(self, message: str, details: Optional[List[str]] = None):
        self.details = details or []
        super().__init__(f"Failed to rollback migration: {message}")
