"""
The launch specification package.

Defines the Process Launch Specification record, the loader that validates
ecosystem documents into records, and the serialiser that writes them back.
"""
from .errors import LaunchSpecError, MissingFieldError, ValidationError
from .record import ExecutionMode, LogPaths, ProcessLaunchSpec, RestartPolicy, Timeouts
from .loader import load_ecosystem, load_file, load_record
from .serialize import dump_ecosystem, dump_record, write_file

__all__ = [
    "LaunchSpecError", "MissingFieldError", "ValidationError",
    "ExecutionMode", "LogPaths", "ProcessLaunchSpec", "RestartPolicy", "Timeouts",
    "load_ecosystem", "load_file", "load_record",
    "dump_ecosystem", "dump_record", "write_file",
]
