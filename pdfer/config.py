"""Tunables for the merge / split orchestrators."""

from __future__ import annotations

from dataclasses import dataclass

SPLIT_POLICIES = ("abort", "skip")


@dataclass(frozen=True)
class PdferConfig:
    """Knobs shared by MergeOrchestrator and SplitOrchestrator.

    Fields
    ------
    max_page_tree_children:
        Fan-out bound of every page-tree node built by the assembler.
    reachability_limit:
        Largest object set a single reachability walk may visit.
    copy_metadata_on_split:
        Carry Info / ID / Encrypt trailer entries into each extracted page
        (only entries whose target object was extracted are remapped).
    prune_split_output / prune_merge_output:
        Drop objects no longer reachable from the trailer and renumber the
        survivors from 1.
    split_error_policy:
        "abort" propagates the first failing page; "skip" records it and
        keeps going.
    """

    max_page_tree_children: int = 8
    reachability_limit: int = 10_000
    copy_metadata_on_split: bool = True
    prune_split_output: bool = True
    prune_merge_output: bool = False
    split_error_policy: str = "abort"

    def __post_init__(self) -> None:
        if self.max_page_tree_children < 2:
            raise ValueError("max_page_tree_children must be >= 2")
        if self.reachability_limit < 1:
            raise ValueError("reachability_limit must be >= 1")
        if self.split_error_policy not in SPLIT_POLICIES:
            raise ValueError(
                f"split_error_policy must be one of {SPLIT_POLICIES}, got {self.split_error_policy!r}"
            )


__all__ = ["PdferConfig", "SPLIT_POLICIES"]
