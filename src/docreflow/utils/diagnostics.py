"""
Non-fatal pipeline warnings.

Stages report conditions (skipped pages, truncation, failed detector passes)
into a Diagnostics collector, which the orchestrator returns alongside the
reconstructed text.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class WarningCode:
    """Warning code identifiers."""
    EMPTY_INPUT = "EmptyInput"
    PAGES_DROPPED = "PagesDropped"
    TRUNCATED_CHARACTERS = "TruncatedCharacters"
    DETECTOR_FAILED = "DetectorFailed"
    REDUCED_PROCESSING = "ReducedProcessing"


@dataclass(frozen=True)
class PipelineWarning:
    """A single non-fatal condition raised during reconstruction."""
    code: str
    count: Optional[int] = None
    pass_id: Optional[str] = None
    message: str = ""

    def __str__(self) -> str:
        if self.pass_id is not None:
            return f"{self.code}({self.pass_id})"
        if self.count is not None:
            return f"{self.code}({self.count})"
        return self.code

    def to_dict(self) -> Dict[str, Any]:
        result = {"code": self.code}
        if self.count is not None:
            result["count"] = self.count
        if self.pass_id is not None:
            result["pass_id"] = self.pass_id
        if self.message:
            result["message"] = self.message
        return result


@dataclass
class Diagnostics:
    """Collects warnings for one reconstruction run."""
    warnings: List[PipelineWarning] = field(default_factory=list)

    def warn(
        self,
        code: str,
        count: Optional[int] = None,
        pass_id: Optional[str] = None,
        message: str = ""
    ) -> PipelineWarning:
        warning = PipelineWarning(code=code, count=count, pass_id=pass_id, message=message)
        self.warnings.append(warning)
        logger.debug(f"Recorded warning {warning}")
        return warning

    def has(self, code: str) -> bool:
        return any(w.code == code for w in self.warnings)

    def of(self, code: str) -> List[PipelineWarning]:
        return [w for w in self.warnings if w.code == code]

    def __len__(self) -> int:
        return len(self.warnings)
