from abc import ABC, abstractmethod
from typing import Any, Optional, List
import logging


class _Skip:
    """Marker a transformation returns when the measurement has nothing to write."""

    def __repr__(self):
        return "SKIP"

SKIP = _Skip()


class DataTransformation(ABC):
    """Base class for data transformation steps"""
    
    @abstractmethod
    def transform(self, data: Any) -> Any:
        """Transform data and return result, or SKIP"""
        pass
    
    @abstractmethod
    def validate(self, data: Any) -> bool:
        """Validate if data can be transformed"""
        pass

class MappingPipeline:
    """Turns one parsed JSON document into the float to write for one measurement"""
    
    def __init__(self, name: str, transformations: List[DataTransformation]):
        self.name = name
        self.transformations = transformations
        self.logger = logging.getLogger(self.__class__.__name__)
    
    def process(self, document: Any) -> Optional[float]:
        """Run the steps in order; ``None`` means skip this measurement for this message.

        Only configuration defects (e.g. a path that does not compile) raise.
        """
        current = document
        
        for transformation in self.transformations:
            step = transformation.__class__.__name__
            if not transformation.validate(current):
                self.logger.debug(f"{self.name}: {step} does not apply to {current!r}, skipping")
                return None
            
            current = transformation.transform(current)
            if current is SKIP:
                self.logger.debug(f"{self.name}: skipped at {step}")
                return None
        
        return current
