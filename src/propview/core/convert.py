# どこで: `src/propview/core/convert.py`。
# 何を: RawValue を要求された出力型（bool/整数/浮動小数/文字列/2 成分ベクトル）へ変換する。
# なぜ: 出力型ごとのアクセサが同じフォールバック規則を共有し、型ごとに分岐を重複させないため。

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from .parsing import fit_float32, parse_number, parse_vector2
from .raw_value import RawKind, RawValue
from .value_type import ComponentType

_TRUE_TEXTS = frozenset({"1", "true", "yes"})
_FALSE_TEXTS = frozenset({"0", "false", "no"})

VECTOR_PREFIX_MODES = ("optional", "strict")


class TargetType(Enum):
    """変換先の型。値はベクトル文字列の型名 prefix を兼ねる。"""

    BOOLEAN = "bool"
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT32 = "float"
    FLOAT64 = "double"
    STRING = "string"
    INT2 = "int2"
    UINT2 = "uint2"
    FLOAT2 = "float2"
    DOUBLE2 = "double2"

    @property
    def component(self) -> ComponentType:
        """数値系ターゲットの成分型（BOOLEAN/STRING は NONE）。"""

        return _TARGET_COMPONENTS.get(self, ComponentType.NONE)

    @property
    def is_vector(self) -> bool:
        return self in (TargetType.INT2, TargetType.UINT2, TargetType.FLOAT2, TargetType.DOUBLE2)

    @property
    def zero_default(self) -> Any:
        """ユーザー既定値を省略したときに使う型ごとのゼロ値。"""

        if self is TargetType.BOOLEAN:
            return False
        if self is TargetType.STRING:
            return ""
        zero = 0 if self.component.is_integer else 0.0
        if self.is_vector:
            return (zero, zero)
        return zero


_TARGET_COMPONENTS: dict[TargetType, ComponentType] = {
    TargetType.INT8: ComponentType.INT8,
    TargetType.UINT8: ComponentType.UINT8,
    TargetType.INT16: ComponentType.INT16,
    TargetType.UINT16: ComponentType.UINT16,
    TargetType.INT32: ComponentType.INT32,
    TargetType.UINT32: ComponentType.UINT32,
    TargetType.INT64: ComponentType.INT64,
    TargetType.UINT64: ComponentType.UINT64,
    TargetType.FLOAT32: ComponentType.FLOAT32,
    TargetType.FLOAT64: ComponentType.FLOAT64,
    TargetType.INT2: ComponentType.INT32,
    TargetType.UINT2: ComponentType.UINT32,
    TargetType.FLOAT2: ComponentType.FLOAT32,
    TargetType.DOUBLE2: ComponentType.FLOAT64,
}


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """変換の挙動を切り替える設定。

    vector_prefix: "optional" は型名 prefix を検査しない。"strict" は prefix があれば
    ターゲット名（例: int2）との一致を要求する。
    float_precision: None は最短で往復可能な表記、整数なら固定小数桁で文字列化する。
    """

    vector_prefix: str = "optional"
    float_precision: int | None = None

    def __post_init__(self) -> None:
        if self.vector_prefix not in VECTOR_PREFIX_MODES:
            raise ValueError(
                f"vector_prefix は {VECTOR_PREFIX_MODES} のいずれかである必要があります: got={self.vector_prefix!r}"
            )
        p = self.float_precision
        if p is not None and (isinstance(p, bool) or not isinstance(p, int) or p < 0):
            raise ValueError(f"float_precision は None か 0 以上の int である必要があります: got={p!r}")


DEFAULT_OPTIONS = ConversionOptions()


def convert_component(
    value: int | float,
    source: ComponentType,
    target: ComponentType,
) -> int | float | None:
    """数値 1 成分を target 型へ変換する。表現できなければ None。

    - 整数 target: 範囲内の値だけを受け付け、浮動小数は範囲検査の後に 0 方向へ切り捨てる
      （int8 では 127.5 は範囲外）。
    - FLOAT32 target: FLOAT32 由来はそのまま、それ以外は float32 へ丸めて溢れなければ採用。
    - FLOAT64 target: 常に float へ。
    """

    if target.is_integer:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        lo, hi = target.int_range
        if not lo <= value <= hi:
            return None
        return int(math.trunc(value))
    if target is ComponentType.FLOAT32:
        if source is ComponentType.FLOAT32:
            return float(value)
        return fit_float32(float(value))
    if target is ComponentType.FLOAT64:
        return float(value)
    return None


def _format_float(value: float, component: ComponentType, options: ConversionOptions) -> str:
    if options.float_precision is not None:
        return f"{value:.{options.float_precision}f}"
    if component is ComponentType.FLOAT32:
        # numpy の str は float32 精度で最短の往復可能表記を返す。
        return str(np.float32(value))
    return repr(value)


def _to_boolean(value: RawValue) -> bool | None:
    kind = value.kind
    if kind is RawKind.BOOLEAN:
        return value.payload
    if kind is RawKind.SCALAR:
        return value.payload != 0
    if kind is RawKind.STRING:
        lowered = value.payload.lower()
        if lowered in _TRUE_TEXTS:
            return True
        if lowered in _FALSE_TEXTS:
            return False
    return None


def _to_number(value: RawValue, component: ComponentType) -> int | float | None:
    kind = value.kind
    if kind is RawKind.BOOLEAN:
        one = 1 if component.is_integer else 1.0
        zero = 0 if component.is_integer else 0.0
        return one if value.payload else zero
    if kind is RawKind.SCALAR:
        return convert_component(value.payload, value.component, component)
    if kind is RawKind.STRING:
        return parse_number(value.payload, component)
    return None


def _to_string(value: RawValue, options: ConversionOptions) -> str | None:
    kind = value.kind
    if kind is RawKind.STRING:
        return value.payload
    if kind is RawKind.BOOLEAN:
        return "true" if value.payload else "false"
    if kind is RawKind.SCALAR:
        if value.component.is_integer:
            return str(value.payload)
        return _format_float(value.payload, value.component, options)
    return None


def _to_vector2(
    value: RawValue,
    target: TargetType,
    options: ConversionOptions,
) -> tuple[Any, Any] | None:
    component = target.component
    kind = value.kind
    if kind is RawKind.VECTOR:
        out = []
        for c in value.payload[:2]:
            v = convert_component(c, value.component, component)
            if v is None:
                return None
            out.append(v)
        return (out[0], out[1])
    if kind is RawKind.SCALAR:
        v = convert_component(value.payload, value.component, component)
        if v is None:
            return None
        return (v, v)
    if kind is RawKind.BOOLEAN:
        v = _to_number(value, component)
        return (v, v)
    if kind is RawKind.STRING:
        prefix = target.value if options.vector_prefix == "strict" else None
        return parse_vector2(value.payload, component, prefix=prefix)
    return None


def convert(
    value: RawValue,
    target: TargetType,
    default: Any,
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> Any:
    """value を target 型へ変換して返す。変換できなければ default を返す。

    例外は送出しない（absent・型不一致・範囲外・解釈不能はすべて default）。
    """

    if target.is_vector:
        out = _to_vector2(value, target, options)
    elif target is TargetType.BOOLEAN:
        out = _to_boolean(value)
    elif target is TargetType.STRING:
        out = _to_string(value, options)
    else:
        out = _to_number(value, target.component)
    return default if out is None else out


__all__ = [
    "TargetType",
    "ConversionOptions",
    "DEFAULT_OPTIONS",
    "convert",
    "convert_component",
]
