import functools
import logging
import math
from typing import Any

import jsonpath_ng.ext as jsonpath
from simpleeval import SimpleEval

from mqtt_influx.core.exceptions import PathQueryError
from .base_mapper import DataTransformation, SKIP


EXPRESSION_FUNCTIONS = {
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "int": int,
    "float": float,
    "sqrt": math.sqrt,
    "floor": math.floor,
    "ceil": math.ceil,
}


@functools.lru_cache(maxsize=None)
def compile_path(path: str):
    """Compile a JSONPath once; failures are not cached and re-raise on every call."""
    try:
        return jsonpath.parse(path)
    except Exception as e:
        raise PathQueryError(f"Invalid JSONPath {path}: {e}") from e


def is_number(value: Any) -> bool:
    # JSON true/false decode to bool, which is an int subclass
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class JsonPathExtraction(DataTransformation):
    """Select the first node matched by a JSONPath query"""
    
    def __init__(self, path: str):
        self.path = path
    
    def validate(self, data: Any) -> bool:
        return True
    
    def transform(self, data: Any) -> Any:
        matches = compile_path(self.path).find(data)
        if not matches:
            return SKIP
        return matches[0].value

class NumericCoercion(DataTransformation):
    """Numbers pass through, strings are parsed as floats, everything else is skipped.

    Unparseable strings become 0.0 unless ``strict`` is set, in which case the
    measurement is skipped. A 0.0 written this way cannot be told apart from
    a real zero reading.
    """
    
    def __init__(self, strict: bool = False):
        self.strict = strict
        self.logger = logging.getLogger(self.__class__.__name__)
    
    def validate(self, data: Any) -> bool:
        return is_number(data) or isinstance(data, str)
    
    def transform(self, data: Any) -> Any:
        try:
            return float(data)
        except ValueError:
            if self.strict:
                return SKIP
            self.logger.debug(f"Unparseable numeric string {data!r}, using 0.0")
            return 0.0

class ExpressionTransformation(DataTransformation):
    """Apply an arithmetic expression over ``value``; on any failure keep the input"""
    
    def __init__(self, expression: str):
        self.expression = expression
        self.logger = logging.getLogger(self.__class__.__name__)
    
    def validate(self, data: Any) -> bool:
        return isinstance(data, float)
    
    def transform(self, data: float) -> float:
        evaluator = SimpleEval(names={"value": data}, functions=EXPRESSION_FUNCTIONS)
        try:
            result = evaluator.eval(self.expression)
        except Exception as e:
            self.logger.debug(f"Expression '{self.expression}' failed for value={data}: {e}")
            return data
        
        if isinstance(result, bool):
            return data
        if isinstance(result, float):
            return result
        if isinstance(result, int):
            try:
                return float(result)
            except OverflowError:
                self.logger.debug(f"Expression '{self.expression}' result does not fit a float")
                return data
        self.logger.debug(f"Expression '{self.expression}' gave non-numeric {result!r}")
        return data
