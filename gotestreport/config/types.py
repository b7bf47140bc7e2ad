from dataclasses import dataclass, field
from enum import Enum


class OmitOption(Enum):
    # Packages without any test
    SKIPPED = "skipped"
    # Packages that did not fail and only have passing tests
    SUCCESSFUL = "successful"
    PIE = "pie"
    PACKAGE_OUTPUT = "pkg-output"
    PACKAGE_TESTS = "pkg-tests"
    STDERR = "stderr"

    @classmethod
    def values(cls) -> list[str]:
        return [option.value for option in cls]


@dataclass
class Inputs:
    module_directory: str = "."
    from_json_file: str | None = None
    stderr_file: str | None = None
    summary_file: str | None = None
    omit: set[OmitOption] = field(default_factory=set)

    def omits(self, option: OmitOption) -> bool:
        return option in self.omit


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
