# どこで: `src/propview/core/nodata.py`。
# 何を: "no data" 番兵値の検出と、プロパティ既定値への差し替えを行う。
# なぜ: 番兵比較は変換前の生値で行い、差し替え後の値だけを transform へ流すという順序を 1 箇所で保証するため。

from __future__ import annotations

from .descriptor import PropertyDescriptor
from .raw_value import RawKind, RawValue
from .transform import apply_transform
from .value_type import MetadataType


def equals_exactly(a: RawValue, b: RawValue) -> bool:
    """2 つの RawValue が同じ variant で、成分ごとに厳密一致するかを返す。

    許容誤差は設けない。NaN はどの値とも一致しない。
    """

    if a.kind is not b.kind or a.is_absent:
        return False
    if a.kind in (RawKind.BOOLEAN, RawKind.STRING):
        return a.payload == b.payload
    ca = a.components
    cb = b.components
    if len(ca) != len(cb):
        return False
    return all(x == y for x, y in zip(ca, cb))


def is_no_data(descriptor: PropertyDescriptor, raw: RawValue) -> bool:
    if descriptor.value_type.type is MetadataType.BOOLEAN:
        return False
    no_data = descriptor.no_data
    if no_data.is_absent:
        return False
    return equals_exactly(raw, no_data)


def resolve(descriptor: PropertyDescriptor, raw: RawValue) -> RawValue:
    """変換前の生値 raw から、変換段へ渡す値を決めて返す。

    - raw が absent なら absent（呼び出し側でユーザー既定値になる）。
    - raw が noData と一致すれば、プロパティ既定値に transform を適用した値。
      既定値が無ければ absent。
    - それ以外は raw に transform を適用した値。
    """

    if raw.is_absent:
        return raw
    if is_no_data(descriptor, raw):
        default = descriptor.default_value
        if default.is_absent:
            return default
        return apply_transform(descriptor, default)
    return apply_transform(descriptor, raw)


__all__ = ["equals_exactly", "is_no_data", "resolve"]
