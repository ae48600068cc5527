# どこで: `src/propview/core/transform.py`。
# 何を: 数値 RawValue に正規化・scale・offset を適用する。
# なぜ: 変換段が「保存型ではなく意味上の値」を受け取れるように、数値変換を 1 箇所へ閉じるため。

from __future__ import annotations

import numpy as np

from .descriptor import PropertyDescriptor
from .raw_value import RawKind, RawValue
from .value_type import ComponentType


def normalize_components(values: np.ndarray, component: ComponentType) -> np.ndarray:
    """整数成分を float64 の [0,1]（unsigned）/ [-1,1]（signed）へ写像する。

    signed は `max(v / max, -1)` とし、最小値（-128 など）も -1 に収める。
    """

    _lo, hi = component.int_range
    out = np.asarray(values, dtype=np.float64) / float(hi)
    if component.is_signed:
        out = np.maximum(out, -1.0)
    return out


def _operand(value: RawValue, count: int, dtype: np.dtype) -> np.ndarray | None:
    """offset/scale を count 成分へ揃えた配列で返す。形状が合わなければ None。"""

    comps = value.components
    if len(comps) not in (1, count):
        return None
    return np.asarray(comps, dtype=dtype)


def apply_transform(descriptor: PropertyDescriptor, raw: RawValue) -> RawValue:
    """raw に正規化・scale・offset を適用した RawValue を返す。

    Notes
    -----
    - 数値以外、非正規化整数、変換対象外のプロパティでは raw をそのまま返す。
    - 結果の成分型は、正規化していれば FLOAT64、そうでなければ raw の float 型。
      scale/offset が FLOAT64 なら FLOAT64 へ広げる。
    - offset/scale の形状が raw と合わない場合は absent を返す。
    """

    if not raw.is_numeric or not descriptor.is_transformable:
        return raw

    component = raw.component
    normalize = descriptor.is_normalized and component.is_integer
    if not normalize and not component.is_float:
        return raw

    offset = descriptor.offset
    scale = descriptor.scale
    has_offset = offset.is_numeric
    has_scale = scale.is_numeric
    if not normalize and not has_offset and not has_scale:
        return raw

    out_component = ComponentType.FLOAT64 if normalize else component
    for operand in (offset, scale):
        if operand.is_numeric and operand.component is ComponentType.FLOAT64:
            out_component = ComponentType.FLOAT64
    dtype = out_component.dtype

    comps = raw.components
    if normalize:
        values = normalize_components(np.asarray(comps, dtype=np.float64), component)
    else:
        values = np.asarray(comps, dtype=dtype)

    with np.errstate(over="ignore", invalid="ignore"):
        if has_scale:
            s = _operand(scale, len(comps), dtype)
            if s is None:
                return RawValue.absent()
            values = values * s
        if has_offset:
            o = _operand(offset, len(comps), dtype)
            if o is None:
                return RawValue.absent()
            values = values + o
        values = values.astype(dtype, copy=False)

    result = values.tolist()
    if raw.kind is RawKind.SCALAR:
        return RawValue.scalar(out_component, result[0])
    return RawValue.vector(out_component, result)


__all__ = ["apply_transform", "normalize_components"]
