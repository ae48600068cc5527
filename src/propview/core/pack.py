# どこで: `src/propview/core/pack.py`。
# 何を: Python の値列を PropertyBuffers（glTF のプロパティテーブルと同じバイト配置）へ詰める。
# なぜ: decode の逆変換を用意し、アセット無しでプロパティを組み立てられるようにするため。

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .decode import PropertyBuffers
from .value_type import ComponentType, MetadataType, ValueType


def _check_integer_range(flat: Sequence[object], component: ComponentType) -> None:
    lo, hi = component.int_range
    for v in flat:
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
            raise TypeError(f"{component.value} の値は整数である必要があります: got={v!r}")
        if not lo <= int(v) <= hi:
            raise ValueError(f"{component.value} の範囲外です: got={v}")


def pack_property_values(
    value_type: ValueType,
    values: Sequence[object],
    *,
    string_offset_type: ComponentType = ComponentType.UINT32,
) -> PropertyBuffers:
    """values を value_type の配置でバイト列へ詰めて返す。

    Notes
    -----
    - SCALAR/ENUM は数値列、VECn は長さ n の列の列。
    - BOOLEAN は LSB 先頭のビット列。
    - STRING は UTF-8 本体と size+1 個のオフセット列。
    - 配列・行列型は未対応（ValueError）。
    """

    if value_type.is_array or value_type.type.is_matrix:
        raise ValueError(f"配列・行列の pack は未対応です: type={value_type.type.value}")
    if not value_type.is_valid:
        raise ValueError(f"値型が不正です: {value_type}")

    t = value_type.type
    if t is MetadataType.BOOLEAN:
        bits = np.asarray([bool(v) for v in values], dtype=bool)
        return PropertyBuffers(values=np.packbits(bits, bitorder="little").tobytes())

    if t is MetadataType.STRING:
        encoded = [str(v).encode("utf-8") for v in values]
        lengths = [0] + [len(b) for b in encoded]
        offsets = np.cumsum(np.asarray(lengths, dtype=np.uint64))
        limit = np.iinfo(string_offset_type.dtype).max if string_offset_type.is_integer else -1
        if int(offsets[-1]) > limit:
            raise ValueError(
                f"文字列本体が stringOffsets の型に収まりません: type={string_offset_type.value}"
            )
        return PropertyBuffers(
            values=b"".join(encoded),
            string_offsets=offsets.astype(string_offset_type.dtype).tobytes(),
            string_offset_type=string_offset_type,
        )

    ct = value_type.component_type
    count = t.component_count
    if count == 1:
        flat = list(values)
    else:
        flat = []
        for item in values:
            seq = list(item)  # type: ignore[call-overload]
            if len(seq) != count:
                raise ValueError(f"{t.value} の成分数が一致しません: need={count} got={len(seq)}")
            flat.extend(seq)

    if ct.is_integer:
        _check_integer_range(flat, ct)
        arr = np.asarray([int(v) for v in flat], dtype=ct.dtype)  # type: ignore[arg-type]
    else:
        arr = np.asarray(flat, dtype=ct.dtype)
    return PropertyBuffers(values=arr.tobytes())


__all__ = ["pack_property_values"]
