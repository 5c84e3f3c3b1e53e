"""
launchspec: load, validate and re-serialise process launch specifications.

The records describe how an external process supervisor should launch,
restart and log an application process (the PM2 "ecosystem" model).
"""

from launchspec.spec import (
    ExecutionMode,
    LaunchSpecError,
    MissingFieldError,
    ProcessLaunchSpec,
    ValidationError,
    dump_record,
    load_ecosystem,
    load_file,
    load_record,
)

__all__ = [
    "ExecutionMode", "LaunchSpecError", "MissingFieldError", "ProcessLaunchSpec", "ValidationError",
    "dump_record", "load_ecosystem", "load_file", "load_record",
]
