import math

import numpy as np
import pytest

from propview.core import ComponentType, ConversionOptions, RawValue, TargetType, convert
from propview.core.convert import convert_component


def _s(component: ComponentType, value):
    return RawValue.scalar(component, value)


@pytest.mark.parametrize(
    "value,expected",
    [
        (RawValue.boolean(True), True),
        (RawValue.boolean(False), False),
        (_s(ComponentType.INT32, 0), False),
        (_s(ComponentType.INT32, -7), True),
        (_s(ComponentType.FLOAT64, 0.0), False),
        (_s(ComponentType.FLOAT32, 0.25), True),
        (RawValue.string("Yes"), True),
        (RawValue.string("NO"), False),
        (RawValue.string("true"), True),
        (RawValue.string("FALSE"), False),
        (RawValue.string("1"), True),
        (RawValue.string("0"), False),
    ],
)
def test_to_boolean(value, expected):
    assert convert(value, TargetType.BOOLEAN, None) is expected


@pytest.mark.parametrize("text", ["2", "", "on", " yes", "1.0"])
def test_to_boolean_rejects_other_strings(text):
    # 数値として読める文字列でも "0"/"1" 以外は既定値
    assert convert(RawValue.string(text), TargetType.BOOLEAN, "dflt") == "dflt"


def test_to_boolean_rejects_vectors_and_absent():
    vec = RawValue.vector(ComponentType.INT8, (1, 2))
    assert convert(vec, TargetType.BOOLEAN, None) is None
    assert convert(RawValue.absent(), TargetType.BOOLEAN, True) is True


@pytest.mark.parametrize(
    "target,value,expected",
    [
        (TargetType.INT16, 32767, 32767),
        (TargetType.INT16, 32768, 0),
        (TargetType.INT16, -32768, -32768),
        (TargetType.INT16, -32769, 0),
        (TargetType.INT8, 127, 127),
        (TargetType.INT8, 128, 0),
        (TargetType.UINT8, 255, 255),
        (TargetType.UINT8, -1, 0),
        (TargetType.UINT32, 4294967295, 4294967295),
        (TargetType.INT32, 2147483648, 0),
        (TargetType.INT64, 2**63 - 1, 2**63 - 1),
        (TargetType.INT64, 2**63, 0),
        (TargetType.UINT64, 2**64 - 1, 2**64 - 1),
    ],
)
def test_integer_range_boundaries(target, value, expected):
    component = ComponentType.UINT64 if value >= 2**63 else ComponentType.INT64
    assert convert(_s(component, value), target, 0) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (12.9, 12),
        (-12.9, -12),
        (-0.5, 0),
        (127.0, 127),
        (-128.0, -128),
        # 範囲検査は切り捨て前の値で行う
        (127.5, 99),
        (127.99, 99),
        (-128.7, 99),
        (128.0, 99),
        (-129.0, 99),
    ],
)
def test_float_to_int8_truncates_toward_zero(value, expected):
    assert convert(_s(ComponentType.FLOAT64, value), TargetType.INT8, 99) == expected


def test_float_to_unsigned_rejects_negative_fractions():
    assert convert(_s(ComponentType.FLOAT64, -0.5), TargetType.UINT8, 99) == 99
    assert convert(_s(ComponentType.FLOAT32, 255.5), TargetType.UINT8, 99) == 99
    assert convert(_s(ComponentType.FLOAT32, 254.5), TargetType.UINT8, 99) == 254


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
def test_non_finite_float_to_integer_is_default(value):
    assert convert(_s(ComponentType.FLOAT64, value), TargetType.INT64, 5) == 5


def test_bool_to_numbers():
    t = RawValue.boolean(True)
    f = RawValue.boolean(False)
    assert convert(t, TargetType.UINT8, 9) == 1
    assert convert(f, TargetType.INT64, 9) == 0
    assert convert(t, TargetType.FLOAT32, 9.0) == 1.0
    assert convert(f, TargetType.FLOAT64, 9.0) == 0.0


def test_integer_results_are_python_ints():
    out = convert(_s(ComponentType.UINT64, 2**64 - 1), TargetType.UINT64, 0)
    assert type(out) is int


@pytest.mark.parametrize(
    "text,target,expected",
    [
        ("42", TargetType.INT32, 42),
        ("  -42 ", TargetType.INT32, -42),
        ("+7", TargetType.UINT8, 7),
        ("12.75", TargetType.INT16, 12),
        ("-3.9", TargetType.INT16, -3),
        ("256", TargetType.UINT8, 0),
        ("255.5", TargetType.UINT8, 0),
        ("255.0", TargetType.UINT8, 255),
        ("-0.5", TargetType.UINT8, 0),
        ("127.5", TargetType.INT8, 0),
        ("-128.5", TargetType.INT8, 0),
        ("1,000", TargetType.INT32, 0),
        ("1_000", TargetType.INT32, 0),
        ("12abc", TargetType.INT32, 0),
        ("1e3", TargetType.INT32, 0),
        ("0x10", TargetType.INT32, 0),
        ("", TargetType.INT32, 0),
    ],
)
def test_string_to_integer(text, target, expected):
    assert convert(RawValue.string(text), target, 0) == expected


def test_float32_target_range():
    big = _s(ComponentType.FLOAT64, 1e39)
    assert convert(big, TargetType.FLOAT32, -1.0) == -1.0
    assert convert(big, TargetType.FLOAT64, -1.0) == 1e39

    out = convert(_s(ComponentType.FLOAT64, 0.1), TargetType.FLOAT32, -1.0)
    assert out == float(np.float32(0.1))


def test_float32_source_infinity_is_kept_for_float_target():
    inf32 = _s(ComponentType.FLOAT32, math.inf)
    inf64 = _s(ComponentType.FLOAT64, math.inf)
    assert convert(inf32, TargetType.FLOAT32, 0.0) == math.inf
    assert convert(inf64, TargetType.FLOAT32, 0.0) == 0.0
    assert convert(inf64, TargetType.FLOAT64, 0.0) == math.inf


def test_large_integers_widen_to_float():
    out = convert(_s(ComponentType.UINT64, 2**64 - 1), TargetType.FLOAT32, 0.0)
    assert out == 2.0**64
    assert convert(_s(ComponentType.INT64, -5), TargetType.FLOAT64, 0.0) == -5.0


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1.5", 1.5),
        (" -2.25e2 ", -225.0),
        (".5", 0.5),
        ("7", 7.0),
        ("1,5", None),
        ("inf", None),
        ("nan", None),
        ("1.5f", None),
    ],
)
def test_string_to_double(text, expected):
    out = convert(RawValue.string(text), TargetType.FLOAT64, None)
    assert out == expected


def test_string_to_float32_rejects_out_of_range():
    assert convert(RawValue.string("1e39"), TargetType.FLOAT32, 3.0) == 3.0
    assert convert(RawValue.string("1e39"), TargetType.FLOAT64, 3.0) == 1e39


def test_to_string():
    assert convert(RawValue.string("abc"), TargetType.STRING, "") == "abc"
    assert convert(RawValue.boolean(True), TargetType.STRING, "") == "true"
    assert convert(RawValue.boolean(False), TargetType.STRING, "") == "false"
    assert convert(_s(ComponentType.INT64, -12), TargetType.STRING, "") == "-12"
    assert convert(_s(ComponentType.FLOAT64, 2.5), TargetType.STRING, "") == "2.5"
    assert convert(_s(ComponentType.FLOAT32, 0.1), TargetType.STRING, "") == "0.1"


def test_to_string_fixed_precision():
    options = ConversionOptions(float_precision=6)
    out = convert(_s(ComponentType.FLOAT64, 2.0), TargetType.STRING, "", options=options)
    assert out == "2.000000"


def test_vector_and_absent_to_string_is_default():
    vec = RawValue.vector(ComponentType.FLOAT32, (1.0, 2.0))
    assert convert(vec, TargetType.STRING, "d") == "d"
    assert convert(RawValue.absent(), TargetType.STRING, "d") == "d"


@pytest.mark.parametrize(
    "source,target,expected",
    [
        (RawValue.vector(ComponentType.INT8, (3, -4)), TargetType.INT2, (3, -4)),
        (RawValue.vector(ComponentType.INT16, (1, 2, 3)), TargetType.INT2, (1, 2)),
        (RawValue.vector(ComponentType.FLOAT64, (1.5, -2.5, 9.0, 9.0)), TargetType.INT2, (1, -2)),
        (RawValue.vector(ComponentType.INT8, (3, -4)), TargetType.UINT2, None),
        (RawValue.vector(ComponentType.INT64, (1, 2**40)), TargetType.INT2, None),
        (RawValue.vector(ComponentType.UINT8, (1, 2)), TargetType.DOUBLE2, (1.0, 2.0)),
        (_s(ComponentType.UINT8, 7), TargetType.UINT2, (7, 7)),
        (_s(ComponentType.INT64, -1), TargetType.UINT2, None),
        (_s(ComponentType.FLOAT64, 0.5), TargetType.FLOAT2, (0.5, 0.5)),
        (RawValue.boolean(True), TargetType.INT2, (1, 1)),
        (RawValue.boolean(False), TargetType.DOUBLE2, (0.0, 0.0)),
        (RawValue.string("int2(3, -4)"), TargetType.INT2, (3, -4)),
        (RawValue.string("(1.5, 2)"), TargetType.FLOAT2, (1.5, 2.0)),
        (RawValue.string("(3,4,5)"), TargetType.INT2, None),
        (RawValue.string("5"), TargetType.INT2, None),
        (RawValue.absent(), TargetType.FLOAT2, None),
    ],
)
def test_to_vector2(source, target, expected):
    assert convert(source, target, None) == expected


def test_vector_prefix_strict_mode():
    strict = ConversionOptions(vector_prefix="strict")
    text = RawValue.string("float2(1, 2)")
    assert convert(text, TargetType.INT2, None) == (1, 2)
    assert convert(text, TargetType.INT2, None, options=strict) is None
    assert convert(text, TargetType.FLOAT2, None, options=strict) == (1.0, 2.0)
    assert convert(RawValue.string("(1, 2)"), TargetType.INT2, None, options=strict) == (1, 2)


def test_convert_component_float32_rounding():
    assert convert_component(0.1, ComponentType.FLOAT64, ComponentType.FLOAT32) == float(
        np.float32(0.1)
    )
    assert convert_component(5, ComponentType.INT8, ComponentType.NONE) is None


def test_conversion_options_validation():
    with pytest.raises(ValueError):
        ConversionOptions(vector_prefix="loose")
    with pytest.raises(ValueError):
        ConversionOptions(float_precision=-1)


def test_zero_defaults():
    assert TargetType.BOOLEAN.zero_default is False
    assert TargetType.STRING.zero_default == ""
    assert TargetType.UINT16.zero_default == 0
    assert TargetType.FLOAT32.zero_default == 0.0
    assert TargetType.INT2.zero_default == (0, 0)
    assert TargetType.DOUBLE2.zero_default == (0.0, 0.0)
