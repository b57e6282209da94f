"""
Fluent structured JSON logging with caller source and call-stack capture.

Provides:
- debug/info/warn/error: leveled builders, finished by message()/msg()/messagef()/msgf()/fatal()/fatalf()
- panic/panicf: abort without logging
- configure/set_config: per-level auto-source, auto-callstack and depth policy
- set_output: route records to stdout, stderr, files or several at once
- load_config/init_from_env: policy files and ZLOG_* environment settings
- resolve_frame/collect_callstack: the underlying frame introspection
"""

from loguru import logger

from zlog.attributes import AttrKind, LogAttribute
from zlog.builder import (
    LogRecordBuilder,
    debug,
    error,
    info,
    join_segment,
    new_builder,
    panic,
    panicf,
    warn,
)
from zlog.config import ZLogSettings, init_from_env, load_config, policy_from_dict
from zlog.context import (
    ContextLookup,
    ContextVarsLookup,
    MappingLookup,
    bind_context,
    clear_context,
    unbind_context,
)
from zlog.errors import BuilderEmittedError, ConfigError, ZLogError, ZLogPanic
from zlog.frames import ENTRY_POINT_MARKER, FrameDescriptor, collect_callstack, resolve_frame
from zlog.policy import (
    DepthPolicy,
    Level,
    LevelConfig,
    auto_callstack_config,
    auto_source_config,
    configure,
    get_config,
    max_callstack_depth_config,
    reset_config,
    set_config,
)
from zlog.sink import StructuredSink, get_sink, set_output

# Library diagnostics stay quiet unless the application opts in
logger.disable("zlog")

__version__ = "0.3.0"

__all__ = [
    "AttrKind",
    "BuilderEmittedError",
    "ConfigError",
    "ContextLookup",
    "ContextVarsLookup",
    "DepthPolicy",
    "ENTRY_POINT_MARKER",
    "FrameDescriptor",
    "Level",
    "LevelConfig",
    "LogAttribute",
    "LogRecordBuilder",
    "MappingLookup",
    "StructuredSink",
    "ZLogError",
    "ZLogPanic",
    "ZLogSettings",
    "auto_callstack_config",
    "auto_source_config",
    "bind_context",
    "clear_context",
    "collect_callstack",
    "configure",
    "debug",
    "error",
    "get_config",
    "get_sink",
    "info",
    "init_from_env",
    "join_segment",
    "load_config",
    "max_callstack_depth_config",
    "new_builder",
    "panic",
    "panicf",
    "policy_from_dict",
    "reset_config",
    "resolve_frame",
    "set_config",
    "set_output",
    "unbind_context",
    "warn",
]
