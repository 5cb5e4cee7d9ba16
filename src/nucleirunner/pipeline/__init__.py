"""Execution pipeline: argument assembly, executors and orchestration."""

from nucleirunner.pipeline.executor import Executor, LocalExecutor, RemoteExecutor
from nucleirunner.pipeline.orchestrator import ExecutionOrchestrator

__all__ = [
    "Executor",
    "LocalExecutor",
    "RemoteExecutor",
    "ExecutionOrchestrator",
]
