# src/infrastructure/validator.py

import dataclasses
import threading
from typing import Any, Dict, List

from pydantic import TypeAdapter, ValidationError

from src.domain.interfaces import ValidatorPort
from src.domain.models import Violation


class PydanticValidator(ValidatorPort):
    """
    Checks a record against the constraints declared in its annotations
    (`StringConstraints`, `Literal`, plain types) by re-validating its
    constructor arguments through a pydantic TypeAdapter.
    """

    def __init__(self):
        self._adapters: Dict[type, TypeAdapter] = {}
        self._lock = threading.Lock()

    def validate(self, record: Any) -> List[Violation]:
        adapter = self._adapter_for(type(record))
        arguments = {
            f.name: getattr(record, f.name)
            for f in dataclasses.fields(record)
            if f.init and hasattr(record, f.name)
        }

        try:
            adapter.validate_python(arguments)
        except ValidationError as error:
            return [
                Violation(
                    property_path = ".".join(str(part) for part in detail["loc"]),
                    message       = detail["msg"],
                )
                for detail in error.errors()
            ]
        return []

    def _adapter_for(self, record_type: type) -> TypeAdapter:
        with self._lock:
            adapter = self._adapters.get(record_type)
            if adapter is None:
                adapter = TypeAdapter(record_type)
                self._adapters[record_type] = adapter
            return adapter
