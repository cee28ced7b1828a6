"""Tool handler implementations."""
from .function import FunctionToolHandler
from .shell import ShellHandler

__all__ = ["FunctionToolHandler", "ShellHandler"]
