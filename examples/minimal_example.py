import logging

from typed_config import ConfigBuilder

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    config = (
        ConfigBuilder()
        .add_item("parameter_name")
        .of_type(float)
        .with_validator(lambda checker: checker.require_number())
        .build()
    )

    config.set_value("parameter_name", 10.0)
    print("Updated:", config.get_value("parameter_name"))
