import math

import numpy as np
import pytest

from propview.core import ComponentType, RawKind, RawValue


def test_scalar_normalizes_numpy_values():
    raw = RawValue.scalar(ComponentType.INT32, np.int32(-5))
    assert raw.payload == -5
    assert type(raw.payload) is int


def test_float32_scalar_is_rounded_to_single_precision():
    raw = RawValue.scalar(ComponentType.FLOAT32, 0.1)
    assert raw.payload == float(np.float32(0.1))
    assert RawValue.scalar(ComponentType.FLOAT64, 0.1).payload == 0.1


def test_float32_keeps_non_finite():
    assert math.isnan(RawValue.scalar(ComponentType.FLOAT32, math.nan).payload)
    assert RawValue.scalar(ComponentType.FLOAT32, -math.inf).payload == -math.inf


@pytest.mark.parametrize(
    "component,value,exc",
    [
        (ComponentType.UINT8, 256, ValueError),
        (ComponentType.INT8, -129, ValueError),
        (ComponentType.INT32, 1.0, TypeError),
        (ComponentType.INT32, True, TypeError),
        (ComponentType.FLOAT64, "1.0", TypeError),
        (ComponentType.NONE, 1, ValueError),
    ],
)
def test_scalar_rejects_bad_components(component, value, exc):
    with pytest.raises(exc):
        RawValue.scalar(component, value)


def test_vector_payload_is_tuple():
    raw = RawValue.vector(ComponentType.UINT16, [1, 2, 3])
    assert raw.payload == (1, 2, 3)
    assert raw.components == (1, 2, 3)
    assert raw.is_numeric


@pytest.mark.parametrize("values", [[1], [1, 2, 3, 4, 5]])
def test_vector_length_is_2_to_4(values):
    with pytest.raises(ValueError):
        RawValue.vector(ComponentType.INT8, values)


def test_non_numeric_variants():
    assert RawValue.absent().is_absent
    assert RawValue.absent() is RawValue.absent()
    assert RawValue.boolean(np.bool_(True)).payload is True
    assert RawValue.string("x").components == ()
    assert not RawValue.string("x").is_numeric
    with pytest.raises(TypeError):
        RawValue.boolean(1)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        RawValue.string(b"x")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        RawValue(RawKind.ABSENT, 1)
    with pytest.raises(ValueError):
        RawValue(RawKind.STRING, "x", ComponentType.UINT8)


def test_equality_is_by_value():
    assert RawValue.scalar(ComponentType.UINT8, 3) == RawValue.scalar(ComponentType.UINT8, 3)
    assert RawValue.scalar(ComponentType.UINT8, 3) != RawValue.scalar(ComponentType.INT8, 3)
