import pytest

from stdio_mcp.mcp.value import JSONValue
from stdio_mcp.tools.errors import (
    AboveMaximumError,
    BelowMinimumError,
    MissingArgumentError,
    NotInEnumError,
    SchemaValidationError,
    TypeMismatchError,
)
from stdio_mcp.tools.schema import Schema
from stdio_mcp.tools.validator import SchemaValidator


def _args(**values):
    return {key: JSONValue.from_python(value) for key, value in values.items()}


def test_passes_when_all_required_fields_present():
    schema = Schema.object(
        properties={"name": Schema.string(), "age": Schema.integer()},
        required=["name", "age"],
    )
    SchemaValidator.validate(_args(name="Alice", age=30), schema)


def test_fails_when_required_field_missing():
    schema = Schema.object(
        properties={"name": Schema.string(), "age": Schema.integer()},
        required=["name", "age"],
    )

    with pytest.raises(MissingArgumentError) as excinfo:
        SchemaValidator.validate(_args(name="Alice"), schema)
    assert "Missing required argument: age" in excinfo.value.message


def test_required_fields_are_checked_before_types():
    schema = Schema.object(
        properties={"x": Schema.integer(), "y": Schema.string()},
        required=["x"],
    )

    with pytest.raises(MissingArgumentError) as excinfo:
        SchemaValidator.validate(_args(y=123), schema)
    assert excinfo.value.path == "x"


def test_first_missing_required_field_in_declaration_order():
    schema = Schema.object(
        properties={"a": Schema.string(), "b": Schema.string()},
        required=["b", "a"],
    )

    with pytest.raises(MissingArgumentError) as excinfo:
        SchemaValidator.validate({}, schema)
    assert excinfo.value.path == "b"


def test_optional_fields_may_be_omitted():
    schema = Schema.object(
        properties={"name": Schema.string(), "nickname": Schema.string()},
        required=["name"],
    )
    SchemaValidator.validate(_args(name="Alice"), schema)


def test_extra_arguments_are_allowed():
    schema = Schema.object(properties={"name": Schema.string()}, required=["name"])
    SchemaValidator.validate(_args(name="Alice", extra="ignored"), schema)


def test_non_object_schema_is_not_validated():
    SchemaValidator.validate(_args(anything=[1, 2]), Schema.string())


def test_unknown_declared_type_is_unconstrained():
    schema = Schema.object(properties={"when": JSONValue.from_python({"type": "date-time"})})
    SchemaValidator.validate(_args(when=12), schema)


def test_string_type():
    schema = Schema.object(properties={"msg": Schema.string()})
    SchemaValidator.validate(_args(msg="hello"), schema)

    with pytest.raises(TypeMismatchError) as excinfo:
        SchemaValidator.validate(_args(msg=42), schema)
    assert "expected string" in excinfo.value.message


def test_integer_accepts_whole_doubles_only():
    schema = Schema.object(properties={"count": Schema.integer()})

    SchemaValidator.validate(_args(count=42), schema)
    SchemaValidator.validate({"count": JSONValue.double(5.0)}, schema)

    with pytest.raises(TypeMismatchError) as excinfo:
        SchemaValidator.validate({"count": JSONValue.double(5.5)}, schema)
    assert "expected integer" in excinfo.value.message


def test_integer_rejects_booleans():
    schema = Schema.object(properties={"count": Schema.integer()})
    with pytest.raises(TypeMismatchError):
        SchemaValidator.validate(_args(count=True), schema)


def test_number_type():
    schema = Schema.object(properties={"value": Schema.number()})
    SchemaValidator.validate(_args(value=3.14), schema)
    SchemaValidator.validate(_args(value=42), schema)

    with pytest.raises(TypeMismatchError) as excinfo:
        SchemaValidator.validate(_args(value="not a number"), schema)
    assert "expected number" in excinfo.value.message


def test_boolean_type():
    schema = Schema.object(properties={"flag": Schema.boolean()})
    SchemaValidator.validate(_args(flag=True), schema)
    SchemaValidator.validate(_args(flag=False), schema)

    with pytest.raises(TypeMismatchError) as excinfo:
        SchemaValidator.validate(_args(flag="true"), schema)
    assert "expected boolean" in excinfo.value.message


def test_array_type():
    schema = Schema.object(properties={"items": Schema.array(items=Schema.string())})
    SchemaValidator.validate(_args(items=["a", "b"]), schema)

    with pytest.raises(TypeMismatchError) as excinfo:
        SchemaValidator.validate(_args(items="not array"), schema)
    assert "expected array" in excinfo.value.message


def test_array_item_types_report_index():
    schema = Schema.object(properties={"nums": Schema.array(items=Schema.integer())})

    with pytest.raises(TypeMismatchError) as excinfo:
        SchemaValidator.validate(_args(nums=[1, "two", 3]), schema)
    assert "nums[1]" in excinfo.value.message
    assert "expected integer" in excinfo.value.message


def test_nested_array_paths():
    schema = Schema.object(
        properties={"grid": Schema.array(items=Schema.array(items=Schema.integer(maximum=9)))}
    )

    with pytest.raises(AboveMaximumError) as excinfo:
        SchemaValidator.validate(_args(grid=[[1, 2], [3, 10]]), schema)
    assert excinfo.value.path == "grid[1][1]"


def test_object_type_checks_variant_only():
    schema = Schema.object(properties={"options": JSONValue.from_python({"type": "object"})})
    SchemaValidator.validate(_args(options={"anything": [1, None]}), schema)

    with pytest.raises(TypeMismatchError):
        SchemaValidator.validate(_args(options=[1]), schema)


def test_integer_minimum():
    schema = Schema.object(properties={"age": Schema.integer(minimum=0)})
    SchemaValidator.validate(_args(age=0), schema)
    SchemaValidator.validate(_args(age=100), schema)

    with pytest.raises(BelowMinimumError) as excinfo:
        SchemaValidator.validate(_args(age=-1), schema)
    assert "must be >= 0" in excinfo.value.message


def test_integer_maximum():
    schema = Schema.object(properties={"percent": Schema.integer(maximum=100)})
    SchemaValidator.validate(_args(percent=100), schema)

    with pytest.raises(AboveMaximumError) as excinfo:
        SchemaValidator.validate(_args(percent=101), schema)
    assert "must be <= 100" in excinfo.value.message


def test_count_range_messages():
    schema = Schema.object(properties={"count": Schema.integer(minimum=1, maximum=10)})

    with pytest.raises(SchemaValidationError) as too_big:
        SchemaValidator.validate(_args(count=100), schema)
    assert "must be <= 10" in too_big.value.message

    with pytest.raises(SchemaValidationError) as wrong_type:
        SchemaValidator.validate(_args(count="five"), schema)
    assert "expected integer" in wrong_type.value.message


def test_bounds_apply_to_coerced_doubles():
    schema = Schema.object(properties={"count": Schema.integer(minimum=1, maximum=10)})
    with pytest.raises(AboveMaximumError):
        SchemaValidator.validate({"count": JSONValue.double(11.0)}, schema)


def test_number_bounds():
    schema = Schema.object(properties={"temp": Schema.number(minimum=-273.15, maximum=1000.0)})
    SchemaValidator.validate(_args(temp=20.5), schema)
    SchemaValidator.validate(_args(temp=-273), schema)

    with pytest.raises(BelowMinimumError):
        SchemaValidator.validate(_args(temp=-300.0), schema)
    with pytest.raises(AboveMaximumError):
        SchemaValidator.validate(_args(temp=1001), schema)


def test_string_enum():
    schema = Schema.object(properties={"level": Schema.string(enum=["low", "medium", "high"])})
    SchemaValidator.validate(_args(level="low"), schema)
    SchemaValidator.validate(_args(level="high"), schema)

    with pytest.raises(NotInEnumError) as excinfo:
        SchemaValidator.validate(_args(level="invalid"), schema)
    assert "must be one of" in excinfo.value.message
    assert excinfo.value.allowed == ["low", "medium", "high"]
