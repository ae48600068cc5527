# どこで: `src/propview/core/parsing.py`。
# 何を: ロケール非依存の数値文字列・2 成分ベクトル文字列のパーサを提供する。
# なぜ: 文字列プロパティを数値/ベクトルへ変換する規則を、変換ディスパッチャから独立に検証できるようにするため。

from __future__ import annotations

import math
import re
from decimal import Decimal

import numpy as np

from .value_type import ComponentType

# ASCII 数字のみ（\d は全角数字なども受け付けるため使わない）。
_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
_DECIMAL_TEXT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_FLOAT_TEXT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_VECTOR2_TEXT = re.compile(
    r"\s*(?:(?P<prefix>[A-Za-z_][A-Za-z0-9_]*)\s*)?"
    r"\(\s*(?P<x>[^,()]*?)\s*,\s*(?P<y>[^,()]*?)\s*\)\s*"
)


def fit_float32(value: float) -> float | None:
    """value を float32 精度へ丸めて返す。無限大や丸めで溢れる値なら None（NaN は NaN）。

    FLT_MAX をわずかに超えても丸めで FLT_MAX に収まる値（"3.4028235e+38" など）は受け付ける。
    """

    if math.isinf(value):
        return None
    with np.errstate(over="ignore"):
        f = np.float32(value)
    if np.isinf(f):
        return None
    return float(f)


def _parse_integer(text: str, component: ComponentType) -> int | None:
    if _INTEGER_TEXT.fullmatch(text):
        value: int | Decimal = int(text)
    elif _DECIMAL_TEXT.fullmatch(text):
        # 範囲検査は小数部込みの値で行い、通過した値だけ 0 方向へ切り捨てる。
        value = Decimal(text)
    else:
        return None
    lo, hi = component.int_range
    if not lo <= value <= hi:
        return None
    return int(value)


def _parse_float(text: str, component: ComponentType) -> float | None:
    if not _FLOAT_TEXT.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    if component is ComponentType.FLOAT32:
        return fit_float32(value)
    return value


def parse_number(text: str, component: ComponentType) -> int | float | None:
    """文字列全体を component 型の数値として解釈する。失敗時は None。

    Notes
    -----
    - 前後の空白は無視する。桁区切り（`,` `_`）・16 進・inf/nan は受け付けない。
    - 整数型は `[+-]digits[.digits]` を受け付け、小数部は 0 方向へ切り捨てる。
    - 浮動小数型は指数部（`e`/`E`）も受け付ける。
    """

    if not isinstance(text, str):
        return None
    s = text.strip()
    if not s:
        return None
    try:
        if component.is_integer:
            return _parse_integer(s, component)
        if component.is_float:
            return _parse_float(s, component)
    except ValueError:
        # 桁数が極端に多い整数文字列など。
        return None
    return None


def parse_vector2(
    text: str,
    component: ComponentType,
    *,
    prefix: str | None = None,
) -> tuple[int | float, int | float] | None:
    """`(X, Y)` / `typeN(X, Y)` 形式の文字列を 2 成分へ分解して返す。失敗時は None。

    Parameters
    ----------
    text : str
        入力文字列。
    component : ComponentType
        各成分の変換先型。
    prefix : str | None
        None なら型名 prefix は任意かつ無検査。指定時は prefix があればこれと一致する必要がある。
    """

    if not isinstance(text, str):
        return None
    m = _VECTOR2_TEXT.fullmatch(text)
    if m is None:
        return None
    found = m.group("prefix")
    if prefix is not None and found is not None and found != prefix:
        return None
    x = parse_number(m.group("x"), component)
    y = parse_number(m.group("y"), component)
    if x is None or y is None:
        return None
    return (x, y)


__all__ = ["parse_number", "parse_vector2", "fit_float32"]
