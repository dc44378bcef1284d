"""Output module registry."""

# Ensure built-in modules register themselves
from . import cli, email_sender, xlsx_writer  # noqa: F401
from .base import OutputContext, OutputModule, get_output_module, list_outputs

__all__ = [
    "OutputContext",
    "OutputModule",
    "get_output_module",
    "list_outputs",
]
