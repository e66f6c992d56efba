"""Models shared by several Firefly service facades."""

from enum import Enum

from pydantic import Field

from .flexible import FireflyModel


class VariableSensitivity(str, Enum):
    """How a variable value is stored."""

    STRING = "string"
    SECRET = "secret"


class VariableDestination(str, Enum):
    """Where a variable is exposed during a run."""

    ENV = "env"
    IAC = "iac"


class Variable(FireflyModel):
    """A key/value variable attached to a project, workspace or variable set."""

    key: str = Field(..., description="Variable name")
    value: str = Field("", description="Variable value; masked by the API when secret")
    sensitivity: VariableSensitivity = Field(
        VariableSensitivity.STRING, description="string or secret"
    )
    destination: VariableDestination = Field(
        VariableDestination.ENV, description="env or iac"
    )
