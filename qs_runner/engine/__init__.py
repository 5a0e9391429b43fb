"""Sweep engine: run tags, sweep planning, executor invocation, suite driver."""
