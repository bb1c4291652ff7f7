# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/pgtask/k8s/merge_patch.py
"""JSON merge patch (RFC 7386) generation and application."""

from __future__ import annotations

import copy
from typing import Any, Dict


def create_merge_patch(before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, Any]:
    """
    Minimal merge patch turning *before* into *after*.

    Removed keys map to None, nested mappings recurse, everything else that
    changed (lists included) is carried over whole.
    """
    patch: Dict[str, Any] = {}

    for key in before:
        if key not in after:
            patch[key] = None

    for key, new in after.items():
        if key not in before:
            patch[key] = copy.deepcopy(new)
            continue
        old = before[key]
        if isinstance(old, dict) and isinstance(new, dict):
            sub = create_merge_patch(old, new)
            if sub:
                patch[key] = sub
        elif old != new:
            patch[key] = copy.deepcopy(new)

    return patch


def apply_merge_patch(target: Any, patch: Any) -> Any:
    """Apply *patch* to *target* and return the result; *target* is not mutated."""
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)

    result = copy.deepcopy(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = apply_merge_patch(result.get(key), value)
    return result
