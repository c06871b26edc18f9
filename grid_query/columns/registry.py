"""
Column registry.

Holds the ordered column descriptors for one grid definition.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from grid_query.core.errors import UnknownColumn
from grid_query.core.models import ColumnDescriptor


class ColumnRegistry:
    """
    Ordered, immutable collection of column descriptors.

    Output keys are unique; registry order defines output column order.
    """

    def __init__(self, descriptors: Iterable[ColumnDescriptor]):
        """
        Initialize the registry.

        Args:
            descriptors: Column descriptors in output order

        Raises:
            ValueError: If two descriptors share an output key
        """
        self._descriptors = tuple(descriptors)
        self._by_key: Dict[str, ColumnDescriptor] = {}
        for descriptor in self._descriptors:
            if descriptor.dt in self._by_key:
                raise ValueError(f"Duplicate output key '{descriptor.dt}' in column registry")
            self._by_key[descriptor.dt] = descriptor

    @classmethod
    def from_config(
        cls, columns: Iterable[Union[ColumnDescriptor, Dict[str, Any]]]
    ) -> "ColumnRegistry":
        """Build a registry from descriptor objects or ``{dt, db, ...}`` mappings."""
        return cls(ColumnDescriptor.from_config(column) for column in columns)

    def __iter__(self) -> Iterator[ColumnDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def find(self, output_key: Optional[str]) -> Optional[ColumnDescriptor]:
        if output_key is None:
            return None
        return self._by_key.get(output_key)

    def get(self, output_key: Optional[str]) -> ColumnDescriptor:
        """
        Look up a descriptor by output key.

        Raises:
            UnknownColumn: If no descriptor has that output key
        """
        descriptor = self.find(output_key)
        if descriptor is None:
            raise UnknownColumn(output_key)
        return descriptor

    def selectable_fields(self) -> List[str]:
        """Source fields of the base entity, unique and in registry order."""
        fields: List[str] = []
        for descriptor in self._descriptors:
            if descriptor.db and not descriptor.is_related and descriptor.db not in fields:
                fields.append(descriptor.db)
        return fields

    def relations(self) -> List[str]:
        """Relation names referenced by the registry, unique and in registry order."""
        names: List[str] = []
        for descriptor in self._descriptors:
            if descriptor.relation and descriptor.relation not in names:
                names.append(descriptor.relation)
        return names
