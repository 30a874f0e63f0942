"""Design Insight - design-quality analysis for Rust codebases.

Three analyzers share one pipeline (extract facts, accumulate per module,
score, classify, report):

    - aposd: module depth, cognitive load and pass-through methods
    - connascence: static coupling forms weighted by strength
    - temporal: call-order coupling detected from source text
"""

__version__ = "0.1.0"

from .config import AnalysisConfig, load_config
from .core import DesignAnalyzer, DesignReport
from .exceptions import DesignInsightError
from .logging_config import get_logger, setup_logging, setup_logging_for
from .models import ModuleStructure

__all__ = [
    "AnalysisConfig",
    "DesignAnalyzer",
    "DesignInsightError",
    "DesignReport",
    "ModuleStructure",
    "__version__",
    "get_logger",
    "load_config",
    "setup_logging",
    "setup_logging_for",
]
