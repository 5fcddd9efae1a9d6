"""Render reporting dataclasses."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Set


@dataclass
class RenderReport:
    """Report from a single render call.

    Records what the pipeline touched:
    - Includes resolved and layouts composed
    - Variables that resolved to nothing
    - Filter names that were not registered
    """

    template: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    includes_resolved: Set[str] = field(default_factory=set)
    layouts_composed: List[str] = field(default_factory=list)
    variables_missing: Set[str] = field(default_factory=set)
    filters_missing: Set[str] = field(default_factory=set)
    loops_expanded: int = 0

    @property
    def has_issues(self) -> bool:
        """Missing variables or filters are worth a look, never fatal."""
        return bool(self.variables_missing or self.filters_missing)

    def record_include(self, key: str) -> None:
        self.includes_resolved.add(key)

    def record_layout(self, key: str) -> None:
        self.layouts_composed.append(key)

    def record_missing_variable(self, token: str) -> None:
        self.variables_missing.add(token)

    def record_missing_filter(self, name: str) -> None:
        self.filters_missing.add(name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "template": self.template,
            "timestamp": self.timestamp.isoformat(),
            "includes_resolved": sorted(self.includes_resolved),
            "layouts_composed": list(self.layouts_composed),
            "variables_missing": sorted(self.variables_missing),
            "filters_missing": sorted(self.filters_missing),
            "loops_expanded": self.loops_expanded,
        }


__all__ = ["RenderReport"]
