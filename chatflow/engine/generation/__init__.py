from .context import GenerationContext
from .orchestrator import GenerationOrchestrator
from .steps import AnalyzeStep, GenerateSchemaStep, ValidateSchemaStep, mock_schema, mock_analysis

__all__ = [
    "GenerationContext",
    "GenerationOrchestrator",
    "AnalyzeStep",
    "GenerateSchemaStep",
    "ValidateSchemaStep",
    "mock_schema",
    "mock_analysis",
]
