"""Per-measurement extraction pipeline."""

from .base_mapper import MappingPipeline, DataTransformation, SKIP
from .transformations import (
    JsonPathExtraction,
    NumericCoercion,
    ExpressionTransformation,
    compile_path,
)
from .mapper_factory import MeasurementMapperFactory

__all__ = [
    # Base classes
    'MappingPipeline',
    'DataTransformation',
    'SKIP',
    
    # Transformations
    'JsonPathExtraction',
    'NumericCoercion',
    'ExpressionTransformation',
    'compile_path',
    
    # Factory
    'MeasurementMapperFactory'
]
