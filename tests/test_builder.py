import datetime

import pytest

from typed_config import Config, ConfigBuilder
from typed_config.exceptions import (
    ConfigBuilderError,
    ConfigDuplicateError,
    ConfigValidationError,
    ConfigValueUnsetError,
)
from typed_config.validation import integer_between, non_empty_string, of_type


def test_build_fluent_chain(builder):
    config = (
        builder.add_item("PORT")
        .of_type(int)
        .with_validator(integer_between(1, 65535))
        .with_default(8080)
        .add_item("HOST")
        .of_type(str)
        .with_validator(non_empty_string())
        .with_default("localhost")
        .build()
    )
    assert isinstance(config, Config)
    assert config.keys() == ("PORT", "HOST")
    assert config.get_default("PORT") == 8080


def test_empty_build_is_valid(builder):
    config = builder.build()
    assert len(config) == 0


@pytest.mark.parametrize(
    "setter, args",
    [
        ("of_type", (int,)),
        ("with_validator", (integer_between(1, 2),)),
        ("with_default", (1,)),
        ("with_default_factory", (lambda: 1,)),
        ("map_from", (str, int)),
    ],
)
def test_property_can_only_be_set_once(builder, setter, args):
    item = builder.add_item("X")
    getattr(item, setter)(*args)
    with pytest.raises(ConfigBuilderError) as exc:
        getattr(item, setter)(*args)
    assert "'X'" in str(exc.value)


def test_default_and_default_factory_share_one_slot(builder):
    item = builder.add_item("X").with_default(1)
    with pytest.raises(ConfigBuilderError, match="default"):
        item.with_default_factory(lambda: 2)


def test_duplicate_key_fails_build_naming_key(builder):
    builder.add_item("NAME").of_type(str).with_validator(non_empty_string()).with_default("a")
    builder.add_item("NAME").of_type(str).with_validator(non_empty_string()).with_default("b")
    with pytest.raises(ConfigDuplicateError) as exc:
        builder.build()
    assert "NAME" in str(exc.value)
    assert isinstance(exc.value, ConfigBuilderError)


def test_missing_type_or_validator_is_builder_error(builder):
    builder.add_item("A").with_validator(of_type(int))
    with pytest.raises(ConfigBuilderError, match="No type specified for 'A'"):
        builder.build()

    other = ConfigBuilder()
    other.add_item("B").of_type(int)
    with pytest.raises(ConfigBuilderError, match="No validator specified for 'B'"):
        other.build()


def test_invalid_default_surfaces_at_build(builder):
    builder.add_item("PORT").of_type(int).with_validator(integer_between(1, 10)).with_default(11)
    with pytest.raises(ConfigBuilderError, match="PORT") as exc:
        builder.build()
    assert isinstance(exc.value.__cause__, ConfigValidationError)


def test_default_of_wrong_type_surfaces_at_build(builder):
    builder.add_item("PORT").of_type(int).with_validator(of_type(int)).with_default("80")
    with pytest.raises(ConfigBuilderError, match="wrong type"):
        builder.build()


def test_moving_to_next_item_validates_previous(builder):
    item = builder.add_item("A").of_type(int).with_validator(integer_between(1, 2)).with_default(3)
    with pytest.raises(ConfigBuilderError, match="'A'"):
        item.add_item("B")


def test_finished_item_rejects_further_setters(builder):
    a = builder.add_item("A").of_type(int).with_validator(of_type(int))
    a.add_item("B")
    assert a.finished is True
    with pytest.raises(ConfigBuilderError, match="already finished"):
        a.with_default(1)


def test_invalid_keys(builder):
    with pytest.raises(ConfigBuilderError):
        builder.add_item("")
    with pytest.raises(ConfigBuilderError):
        builder.add_item(None)  # type: ignore[arg-type]


def test_invalid_type_spec(builder):
    with pytest.raises(ConfigBuilderError):
        builder.add_item("A").of_type("int")  # type: ignore[arg-type]
    with pytest.raises(ConfigBuilderError):
        builder.add_item("B").of_type(())


def test_non_callable_validator_or_factory(builder):
    item = builder.add_item("A")
    with pytest.raises(ConfigBuilderError):
        item.with_validator("nope")  # type: ignore[arg-type]
    with pytest.raises(ConfigBuilderError):
        item.with_default_factory(5)  # type: ignore[arg-type]


def test_add_copy_replays_properties(builder):
    config = (
        builder.add_item("READ_TIMEOUT")
        .of_type(int)
        .with_validator(integer_between(1, 60))
        .with_default(30)
        .add_copy("WRITE_TIMEOUT", "READ_TIMEOUT")
        .build()
    )
    assert config.get_default("WRITE_TIMEOUT") == 30
    config.set_value("WRITE_TIMEOUT", 5)
    assert config.get_value("READ_TIMEOUT") == 30
    with pytest.raises(ConfigValidationError):
        config.set_value("WRITE_TIMEOUT", 61)


def test_copy_owns_independent_slots(builder):
    builder.add_item("A").of_type(int).with_validator(integer_between(1, 9))
    copy = builder.add_copy("B", "A")
    copy.with_default(3)
    config = builder.build()
    assert config.get_default("B") == 3
    # the original never received a default
    with pytest.raises(ConfigValueUnsetError):
        config.get_default("A")


def test_copy_rejects_redeclared_property(builder):
    builder.add_item("A").of_type(int)
    copy = builder.add_copy("B", "A")
    with pytest.raises(ConfigBuilderError, match="'B'"):
        copy.of_type(str)


def test_add_copy_of_previous(builder):
    config = (
        builder.add_item("MIN_WORKERS")
        .of_type(int)
        .with_validator(integer_between(1, 8))
        .with_default(1)
        .add_copy_of_previous("MAX_WORKERS")
        .build()
    )
    assert config.get_default("MAX_WORKERS") == 1


def test_add_copy_errors(builder):
    with pytest.raises(ConfigBuilderError):
        builder.add_copy_of_previous("A")
    with pytest.raises(ConfigBuilderError, match="MISSING"):
        builder.add_copy("A", "MISSING")


def test_constant_default_returns_independent_copies(builder):
    config = (
        builder.add_item("SCHEMES")
        .of_type(list)
        .with_validator(of_type(list))
        .with_default(["http"])
        .build()
    )
    first = config.get_default("SCHEMES")
    first.append("ftp")
    assert config.get_default("SCHEMES") == ["http"]


def test_default_factory_is_invoked_per_read(builder):
    config = (
        builder.add_item("STARTED_AT")
        .of_type(datetime.datetime)
        .with_validator(of_type(datetime.datetime))
        .with_default_factory(lambda: datetime.datetime.now(tz=datetime.timezone.utc))
        .build()
    )
    a = config.get_default("STARTED_AT")
    b = config.get_default("STARTED_AT")
    assert a is not b
    assert b >= a


def _port_builder(builder):
    return builder.add_item("PORT").of_type(int).with_validator(integer_between(1, 65535)).with_default(5)


def test_each_build_gets_independent_items(builder):
    _port_builder(builder)
    first = builder.build()
    second = builder.build()
    first.set_value("PORT", 7)
    assert first.get_value("PORT") == 7
    assert second.get_value("PORT") == 5
    assert second.is_set("PORT") is False


def test_later_build_cannot_write_through_locked_config(builder):
    _port_builder(builder)
    first = builder.build()
    first.set_value("PORT", 7)
    first.lock()
    builder.add_item("OTHER").of_type(str).with_validator(non_empty_string())
    second = builder.build()
    second.set_value("PORT", 9)
    assert first.get_value("PORT") == 7
    assert second.get_value("PORT") == 9
    assert second.has_entry("OTHER") and not first.has_entry("OTHER")


def test_raising_default_factory_is_builder_error(builder):
    def broken():
        raise RuntimeError("boom")

    builder.add_item("STARTED_AT").of_type(int).with_validator(of_type(int)).with_default_factory(
        broken
    )
    with pytest.raises(ConfigBuilderError) as exc:
        builder.build()
    assert "STARTED_AT" in str(exc.value)
    assert "boom" in str(exc.value)
    assert isinstance(exc.value.__cause__, RuntimeError)
