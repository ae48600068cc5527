# どこで: `src/propview/core/value_type.py`。
# 何を: glTF のプロパティ値型（MetadataType × ComponentType × 配列有無）を定義する。
# なぜ: decode/transform/convert が同じ型情報（dtype・整数レンジ・成分数）を参照できるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ComponentType(Enum):
    """スカラー成分の保存型。値は glTF の componentType 名。"""

    NONE = "NONE"
    INT8 = "INT8"
    UINT8 = "UINT8"
    INT16 = "INT16"
    UINT16 = "UINT16"
    INT32 = "INT32"
    UINT32 = "UINT32"
    INT64 = "INT64"
    UINT64 = "UINT64"
    FLOAT32 = "FLOAT32"
    FLOAT64 = "FLOAT64"

    @property
    def dtype(self) -> np.dtype:
        """リトルエンディアンの numpy dtype を返す（NONE は TypeError）。"""

        try:
            return _DTYPES[self]
        except KeyError:
            raise TypeError(f"dtype を持たない componentType です: {self.value}") from None

    @property
    def byte_size(self) -> int:
        if self is ComponentType.NONE:
            return 0
        return int(self.dtype.itemsize)

    @property
    def is_integer(self) -> bool:
        return self in _INTEGER_TYPES

    @property
    def is_float(self) -> bool:
        return self in (ComponentType.FLOAT32, ComponentType.FLOAT64)

    @property
    def is_signed(self) -> bool:
        return self in _SIGNED_TYPES

    @property
    def int_range(self) -> tuple[int, int]:
        """整数型の [min, max]（両端含む）を返す。"""

        if not self.is_integer:
            raise TypeError(f"整数型ではありません: {self.value}")
        info = np.iinfo(self.dtype)
        return int(info.min), int(info.max)


_DTYPES: dict[ComponentType, np.dtype] = {
    ComponentType.INT8: np.dtype("<i1"),
    ComponentType.UINT8: np.dtype("<u1"),
    ComponentType.INT16: np.dtype("<i2"),
    ComponentType.UINT16: np.dtype("<u2"),
    ComponentType.INT32: np.dtype("<i4"),
    ComponentType.UINT32: np.dtype("<u4"),
    ComponentType.INT64: np.dtype("<i8"),
    ComponentType.UINT64: np.dtype("<u8"),
    ComponentType.FLOAT32: np.dtype("<f4"),
    ComponentType.FLOAT64: np.dtype("<f8"),
}

_INTEGER_TYPES = frozenset(
    {
        ComponentType.INT8,
        ComponentType.UINT8,
        ComponentType.INT16,
        ComponentType.UINT16,
        ComponentType.INT32,
        ComponentType.UINT32,
        ComponentType.INT64,
        ComponentType.UINT64,
    }
)

_SIGNED_TYPES = frozenset(
    {
        ComponentType.INT8,
        ComponentType.INT16,
        ComponentType.INT32,
        ComponentType.INT64,
        ComponentType.FLOAT32,
        ComponentType.FLOAT64,
    }
)


class MetadataType(Enum):
    """プロパティの要素型。値は glTF の type 名。"""

    INVALID = "INVALID"
    SCALAR = "SCALAR"
    VEC2 = "VEC2"
    VEC3 = "VEC3"
    VEC4 = "VEC4"
    MAT2 = "MAT2"
    MAT3 = "MAT3"
    MAT4 = "MAT4"
    BOOLEAN = "BOOLEAN"
    STRING = "STRING"
    ENUM = "ENUM"

    @property
    def component_count(self) -> int:
        """1 要素あたりの成分数（BOOLEAN/STRING/INVALID は 0）。"""

        return _COMPONENT_COUNTS.get(self, 0)

    @property
    def is_numeric(self) -> bool:
        return self.component_count > 0

    @property
    def is_vector(self) -> bool:
        return self in (MetadataType.VEC2, MetadataType.VEC3, MetadataType.VEC4)

    @property
    def is_matrix(self) -> bool:
        return self in (MetadataType.MAT2, MetadataType.MAT3, MetadataType.MAT4)


_COMPONENT_COUNTS: dict[MetadataType, int] = {
    MetadataType.SCALAR: 1,
    MetadataType.ENUM: 1,
    MetadataType.VEC2: 2,
    MetadataType.VEC3: 3,
    MetadataType.VEC4: 4,
    MetadataType.MAT2: 4,
    MetadataType.MAT3: 9,
    MetadataType.MAT4: 16,
}


@dataclass(frozen=True, slots=True)
class ValueType:
    """プロパティの値型。

    component_type は数値系（SCALAR/VECn/MATn/ENUM）でのみ意味を持ち、
    BOOLEAN/STRING では NONE を取る。
    """

    type: MetadataType
    component_type: ComponentType = ComponentType.NONE
    is_array: bool = False

    @property
    def is_valid(self) -> bool:
        """type と component_type の組み合わせが整合しているかを返す。"""

        if self.type is MetadataType.INVALID:
            return False
        if self.type in (MetadataType.BOOLEAN, MetadataType.STRING):
            return self.component_type is ComponentType.NONE
        if self.component_type is ComponentType.NONE:
            return False
        if self.type is MetadataType.ENUM:
            return self.component_type.is_integer
        return True

    @property
    def element_byte_size(self) -> int:
        """固定長要素 1 個のバイト数（BOOLEAN/STRING は 0）。"""

        return self.type.component_count * self.component_type.byte_size

    @property
    def is_transformable_shape(self) -> bool:
        """offset/scale/min/max を持ち得る要素型（SCALAR/VECn/MATn）かを返す。

        成分型（float か正規化整数か）の条件は descriptor 側で判定する。
        """

        if self.component_type is ComponentType.NONE:
            return False
        return (
            self.type is MetadataType.SCALAR
            or self.type.is_vector
            or self.type.is_matrix
        )


INVALID_VALUE_TYPE = ValueType(MetadataType.INVALID, ComponentType.NONE, False)


__all__ = ["ComponentType", "MetadataType", "ValueType", "INVALID_VALUE_TYPE"]
