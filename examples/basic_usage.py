# python
import datetime
import logging

from typed_config import ConfigBuilder, ConfigValidationError, ValueChecker
from typed_config.validation import integer_between, nullable, of_type, one_of


def request_timeout(checker: ValueChecker[float]) -> None:
    checker.require_number_between(0.1, 60.0)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    config = (
        ConfigBuilder()
        .add_item("request_timeout")
        .of_type((int, float))
        .with_validator(request_timeout)
        .with_default(5.0)
        .map_from(str, float)
        .add_item("max_retries")
        .of_type(int)
        .with_validator(integer_between(0, 10))
        .with_default(3)
        .add_copy_of_previous("max_redirects")
        .add_item("log_level")
        .of_type(str)
        .with_validator(one_of("DEBUG", "INFO", "WARNING", "ERROR"))
        .with_default("INFO")
        .add_item("started_at")
        .of_type(datetime.datetime)
        .with_validator(nullable(of_type(datetime.datetime)))
        .with_default_factory(lambda: datetime.datetime.now(tz=datetime.timezone.utc))
        .build()
    )

    print("Default:", config.get_default("request_timeout"))
    config.set_value("request_timeout", "10")
    print("Updated:", config.get_value("request_timeout"))

    try:
        config.set_value("max_retries", 11)
    except ConfigValidationError as exc:
        print("Rejected:", exc.reason)
    print("Still:", config.get_value("max_retries"))

    config.lock()
    print("Snapshot:", dict(config.snapshot()))
