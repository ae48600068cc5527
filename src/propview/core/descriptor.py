# どこで: `src/propview/core/descriptor.py`。
# 何を: PropertyDescriptor（1 プロパティの不変な型・変換情報）と、その整合性検査を提供する。
# なぜ: 上流パーサが組み立てた定義を、アクセス時ではなく構築時に一度だけ検査するため。

from __future__ import annotations

from dataclasses import dataclass

from .raw_value import RawKind, RawValue
from .value_type import ComponentType, MetadataType, ValueType

_ABSENT = RawValue.absent()


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """プロパティテーブル内の 1 プロパティの定義。

    Parameters
    ----------
    value_type : ValueType
        保存型（type × componentType × 配列有無）。
    size : int
        feature 数。
    array_size : int
        固定長配列の要素数。配列でなければ 0。
    is_normalized : bool
        整数成分を [0,1] / [-1,1] に正規化するか。
    offset, scale, min, max, no_data, default_value : RawValue
        未定義なら absent。

    Notes
    -----
    offset/scale/min/max/default_value は変換後の型（正規化整数なら FLOAT64）で、
    no_data は保存型で保持する。
    """

    value_type: ValueType
    size: int = 0
    array_size: int = 0
    is_normalized: bool = False
    offset: RawValue = _ABSENT
    scale: RawValue = _ABSENT
    min: RawValue = _ABSENT
    max: RawValue = _ABSENT
    no_data: RawValue = _ABSENT
    default_value: RawValue = _ABSENT

    def __post_init__(self) -> None:
        if not isinstance(self.value_type, ValueType):
            raise TypeError(f"value_type は ValueType である必要があります: got={self.value_type!r}")
        for name in ("size", "array_size"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int):
                raise TypeError(f"{name} は int である必要があります: got={v!r}")
            if v < 0:
                raise ValueError(f"{name} は 0 以上である必要があります: got={v}")
        if not isinstance(self.is_normalized, bool):
            raise TypeError(f"is_normalized は bool である必要があります: got={self.is_normalized!r}")
        for name in ("offset", "scale", "min", "max", "no_data", "default_value"):
            v = getattr(self, name)
            if not isinstance(v, RawValue):
                raise TypeError(f"{name} は RawValue である必要があります: got={v!r}")

    @property
    def is_transformable(self) -> bool:
        """正規化・offset・scale の対象になる型（float 成分か正規化整数）かを返す。"""

        vt = self.value_type
        if not vt.is_transformable_shape:
            return False
        if vt.component_type.is_float:
            return True
        return self.is_normalized and vt.component_type.is_integer


def transformed_component(value_type: ValueType, is_normalized: bool) -> ComponentType:
    """変換後の成分型を返す（正規化整数は FLOAT64、それ以外は保存型のまま）。"""

    ct = value_type.component_type
    if is_normalized and ct.is_integer:
        return ComponentType.FLOAT64
    return ct


def _shape_matches(value: RawValue, value_type: ValueType) -> bool:
    """数値 RawValue が value_type の 1 要素として解釈できるかを返す。"""

    count = value_type.type.component_count
    if value.kind is RawKind.SCALAR:
        return count == 1 or value_type.type.is_vector
    if value.kind is RawKind.VECTOR:
        return len(value.payload) == count
    return False


def _element_matches(value: RawValue, value_type: ValueType) -> bool:
    """no_data/default_value が value_type の要素と同じ variant・成分数かを返す。

    offset/scale と違いスカラーの複製は認めない（noData は生値と厳密比較するため）。
    """

    t = value_type.type
    if t is MetadataType.BOOLEAN:
        return value.kind is RawKind.BOOLEAN
    if t is MetadataType.STRING:
        return value.kind is RawKind.STRING
    if t.component_count == 1:
        return value.kind is RawKind.SCALAR
    return value.kind is RawKind.VECTOR and len(value.payload) == t.component_count


def descriptor_problem(descriptor: PropertyDescriptor) -> str | None:
    """descriptor の不変条件違反を説明する文字列を返す。問題が無ければ None。"""

    vt = descriptor.value_type
    if not vt.is_valid:
        return f"値型が不正です: type={vt.type.value} componentType={vt.component_type.value}"
    if descriptor.array_size > 0 and not vt.is_array:
        return f"配列でないプロパティに arraySize が指定されています: {descriptor.array_size}"
    if descriptor.is_normalized and not vt.component_type.is_integer:
        return f"normalized は整数成分でのみ有効です: componentType={vt.component_type.value}"

    for name in ("offset", "scale", "min", "max"):
        v: RawValue = getattr(descriptor, name)
        if v.is_absent:
            continue
        if not descriptor.is_transformable:
            return f"{name} は float または正規化整数のプロパティでのみ有効です"
        if vt.is_array:
            # 配列値は変換対象外なので形状だけは問わない。
            continue
        if not v.is_numeric or not _shape_matches(v, vt):
            return f"{name} の形状が値型と一致しません"

    if not descriptor.no_data.is_absent:
        if vt.type is MetadataType.BOOLEAN:
            return "boolean プロパティは noData を持てません"
        if not vt.is_array and not _element_matches(descriptor.no_data, vt):
            return "noData の型が値型と一致しません"

    if not descriptor.default_value.is_absent and not vt.is_array:
        if not _element_matches(descriptor.default_value, vt):
            return "default の型が値型と一致しません"
    return None


__all__ = ["PropertyDescriptor", "descriptor_problem", "transformed_component"]
