import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Diagnostics:
    """Warnings collected during a single resolution or bundling run."""

    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)
