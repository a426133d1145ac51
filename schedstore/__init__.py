"""CPU scheduling simulators over process control blocks, and a bitmap-managed in-memory block store."""

__version__ = "0.1.0"