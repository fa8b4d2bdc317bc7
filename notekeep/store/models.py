from pydantic import BaseModel, ConfigDict, Field, model_validator

from notekeep.config import MAX_PASSCODE_DIGITS


class Note(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str = ""


class Contact(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    address: str = ""


class LockSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    locked: bool = False
    passcode_length: int = Field(default=0, ge=0, le=MAX_PASSCODE_DIGITS)
    passcode_digits: list[int] = Field(
        default_factory=lambda: [0] * MAX_PASSCODE_DIGITS,
        min_length=MAX_PASSCODE_DIGITS,
        max_length=MAX_PASSCODE_DIGITS,
    )

    @model_validator(mode="after")
    def digits_are_decimal(self) -> "LockSettings":
        if any(not 0 <= d <= 9 for d in self.passcode_digits):
            raise ValueError("passcode digits must be between 0 and 9")
        return self

    def matches(self, digits: list[int]) -> bool:
        return (
            len(digits) == self.passcode_length
            and self.passcode_digits[: self.passcode_length] == list(digits)
        )
