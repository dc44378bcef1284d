"""Base classes for SiteAudit outputs."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..analysis import AuditReport
from ..config import Config


@dataclass
class OutputContext:
    config: Config
    prefix: Path
    mailer: Any = None
    attachments: list[Path] = field(default_factory=list)
    stdout: object | None = None

    def __post_init__(self) -> None:
        if self.stdout is None:
            self.stdout = sys.stdout

    def add_attachment(self, path: Path) -> None:
        if path not in self.attachments:
            self.attachments.append(path)


class OutputModule(ABC):
    name: str

    def __init__(self, context: OutputContext):
        self.context = context

    @abstractmethod
    def render(self, report: AuditReport) -> None:
        """Render output for the provided report."""


REGISTRY: dict[str, type[OutputModule]] = {}


def register_output(name: str):
    def decorator(cls: type[OutputModule]) -> type[OutputModule]:
        REGISTRY[name] = cls
        cls.name = name
        return cls

    return decorator


def get_output_module(name: str) -> type[OutputModule]:
    if name not in REGISTRY:
        raise KeyError(
            f"Unknown output module '{name}'. Available: {', '.join(REGISTRY)}"
        )
    return REGISTRY[name]


def list_outputs() -> list[str]:
    return sorted(REGISTRY.keys())
