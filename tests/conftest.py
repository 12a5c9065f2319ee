# python
import pytest

from typed_config import ConfigBuilder
from typed_config.validation import integer_between, non_empty_string, nullable, of_type, one_of


@pytest.fixture
def builder():
    return ConfigBuilder()


@pytest.fixture
def config():
    return (
        ConfigBuilder()
        .add_item("MAX_CONCURRENCY")
        .of_type(int)
        .with_validator(integer_between(1, 1000))
        .with_default(10)
        .map_from(str, int)
        .add_item("SCHEME")
        .of_type(str)
        .with_validator(one_of("http", "https"))
        .with_default("https")
        .add_item("VERIFY")
        .of_type(bool)
        .with_validator(of_type(bool))
        .with_default(True)
        .add_item("PROXY")
        .of_type(str)
        .with_validator(nullable(non_empty_string()))
        .with_default(None)
        .add_item("API_TOKEN")
        .of_type(str)
        .with_validator(non_empty_string())
        .build()
    )
