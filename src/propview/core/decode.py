# どこで: `src/propview/core/decode.py`。
# 何を: プロパティのバイト列から feature 1 個分の RawValue を取り出す純粋関数群を提供する。
# なぜ: バイナリ復号を変換処理から切り離し、単体でテスト可能に保つため。

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral

import numpy as np

from .descriptor import PropertyDescriptor
from .raw_value import RawValue
from .value_type import ComponentType, MetadataType

_STRING_OFFSET_TYPES = frozenset(
    {
        ComponentType.UINT8,
        ComponentType.UINT16,
        ComponentType.UINT32,
        ComponentType.UINT64,
    }
)

Buffer = bytes | bytearray | memoryview


@dataclass(frozen=True, slots=True)
class PropertyBuffers:
    """1 プロパティ分のバイト列（上流パーサが所有し、ここでは読むだけ）。

    Notes
    -----
    - 数値は little-endian で密に詰められている前提。
    - BOOLEAN は LSB 先頭のビット列。
    - STRING は UTF-8 本体 `values` と、size+1 個のオフセット列 `string_offsets`。
    """

    values: Buffer
    string_offsets: Buffer | None = None
    string_offset_type: ComponentType = ComponentType.UINT32


def is_feature_index(feature_index: object, size: int) -> bool:
    """feature_index が [0, size) の整数かを返す（bool は整数とみなさない）。"""

    if isinstance(feature_index, (bool, np.bool_)) or not isinstance(feature_index, Integral):
        return False
    return 0 <= int(feature_index) < size


def _string_offsets(offsets: Buffer, offset_type: ComponentType, start: int, count: int) -> np.ndarray:
    dtype = offset_type.dtype
    return np.frombuffer(offsets, dtype=dtype, count=count, offset=start * dtype.itemsize)


def fetch(
    descriptor: PropertyDescriptor,
    buffers: PropertyBuffers | None,
    feature_index: int,
) -> RawValue:
    """feature_index の値を保存型のまま復号して返す。

    index が範囲外、buffers が無い、または配列/行列型の場合は absent を返す。
    バッファの整合性は `buffers_problem()` で事前に検査されている前提とする。
    """

    if buffers is None or not is_feature_index(feature_index, descriptor.size):
        return RawValue.absent()

    i = int(feature_index)
    vt = descriptor.value_type
    if vt.is_array or vt.type.is_matrix:
        return RawValue.absent()

    if vt.type is MetadataType.BOOLEAN:
        byte = buffers.values[i >> 3]
        return RawValue.boolean(bool((byte >> (i & 7)) & 1))

    if vt.type is MetadataType.STRING:
        if buffers.string_offsets is None:
            return RawValue.absent()
        offsets = _string_offsets(buffers.string_offsets, buffers.string_offset_type, i, 2)
        begin, end = (int(x) for x in offsets)
        try:
            text = bytes(buffers.values[begin:end]).decode("utf-8")
        except UnicodeDecodeError:
            return RawValue.absent()
        return RawValue.string(text)

    ct = vt.component_type
    count = vt.type.component_count
    items = np.frombuffer(
        buffers.values,
        dtype=ct.dtype,
        count=count,
        offset=i * vt.element_byte_size,
    ).tolist()
    if count == 1:
        return RawValue.scalar(ct, items[0])
    return RawValue.vector(ct, items)


def buffers_problem(descriptor: PropertyDescriptor, buffers: PropertyBuffers) -> str | None:
    """buffers が descriptor の size を満たすかを検査し、問題があれば説明を返す。"""

    vt = descriptor.value_type
    size = descriptor.size
    n_values = len(buffers.values)

    if vt.type is MetadataType.BOOLEAN:
        per_feature = max(descriptor.array_size, 1) if vt.is_array else 1
        need = (size * per_feature + 7) // 8
        if n_values < need:
            return f"boolean ビット列が不足しています: need={need} got={n_values}"
        return None

    if vt.type is MetadataType.STRING:
        if vt.is_array:
            return None
        if buffers.string_offsets is None:
            return "string プロパティに stringOffsets がありません"
        if buffers.string_offset_type not in _STRING_OFFSET_TYPES:
            return f"stringOffsets の型が不正です: {buffers.string_offset_type.value}"
        item = buffers.string_offset_type.byte_size
        need = (size + 1) * item
        if len(buffers.string_offsets) < need:
            return f"stringOffsets が不足しています: need={need} got={len(buffers.string_offsets)}"
        offsets = _string_offsets(buffers.string_offsets, buffers.string_offset_type, 0, size + 1)
        if np.any(offsets[1:] < offsets[:-1]):
            return "stringOffsets が単調非減少ではありません"
        if int(offsets[-1]) > n_values:
            return f"stringOffsets が文字列本体を超えています: last={int(offsets[-1])} got={n_values}"
        return None

    if vt.is_array and descriptor.array_size == 0:
        # 可変長配列は値を取り出さないので本体長だけでは判定しない。
        return None
    per_feature = vt.element_byte_size * (descriptor.array_size if vt.is_array else 1)
    need = size * per_feature
    if n_values < need:
        return f"値バッファが不足しています: need={need} got={n_values}"
    return None


__all__ = ["PropertyBuffers", "fetch", "buffers_problem", "is_feature_index"]
