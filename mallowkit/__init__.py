"""AArch64 instruction encoders, delegates, log sinks and configuration helpers."""

__version__ = "0.1.0"

__all__ = [
    "register",
    "encoding",
    "data_processing",
    "branches",
    "logical",
    "load_store",
    "delegate",
    "sinks",
    "logger",
    "config",
    "logging_setup",
]