"""Sweep runner for qa-sweep: tagging, planning, invocation and collection."""

from qs_runner.api import SuiteConfig, SweepSuite

__all__ = ["SuiteConfig", "SweepSuite"]
