from typing import List
from mqtt_influx.models import MeasurementDefinition
from .base_mapper import MappingPipeline, DataTransformation
from .transformations import (
    JsonPathExtraction,
    NumericCoercion,
    ExpressionTransformation
)

class MeasurementMapperFactory:
    """Factory for creating per-measurement mapping pipelines"""
    
    @staticmethod
    def create_mapper(definition: MeasurementDefinition, strict_coercion: bool = False) -> MappingPipeline:
        """Create mapping pipeline from a measurement definition"""
        transformations: List[DataTransformation] = [
            # 1. Path query, first match only
            JsonPathExtraction(definition.path),
            # 2. Number / numeric string to float
            NumericCoercion(strict=strict_coercion),
        ]
        
        # 3. Optional arithmetic over `value`
        if definition.expression:
            transformations.append(ExpressionTransformation(definition.expression))
        
        return MappingPipeline(definition.name, transformations)
