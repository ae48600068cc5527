# どこで: `src/propview/__init__.py`。
# 何を: ルート `propview` パッケージを定義する。
# なぜ: import 起点を `propview` に統一するため。

from __future__ import annotations

from propview.core import (
    ComponentType,
    MetadataType,
    PropertyBuffers,
    PropertyDescriptor,
    PropertyStatus,
    PropertyTableProperty,
    RawValue,
    TargetType,
    ValueType,
    descriptor_from_spec,
    pack_property_values,
)

__all__ = [
    "ComponentType",
    "MetadataType",
    "PropertyBuffers",
    "PropertyDescriptor",
    "PropertyStatus",
    "PropertyTableProperty",
    "RawValue",
    "TargetType",
    "ValueType",
    "descriptor_from_spec",
    "pack_property_values",
]
