from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_SLOTS_PER_KIND = 32  # one 32-bit occupancy word per record kind
MAX_PASSCODE_DIGITS = 8  # digits in the stored settings record


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="NOTEKEEP_"
    )

    log_level: str = "WARNING"

    # Persistent memory; None keeps everything in process memory
    nvram_path: str | None = None

    # Page layout (pixels)
    page_height: int = 496
    footer_height: int = 88
    top_margin: int = 12
    paragraph_margin: int = 28
    available_width: int = 416
    small_font_threshold: int = 50

    # List views (pixels)
    list_page_height: int = 584
    list_row_height: int = 96

    # Document
    delimiter: str = "\n"
    max_paragraphs: int = 10

    # Store capacities (slots)
    max_notes: int = 10
    max_contacts: int = 16

    # Field capacities (bytes, terminator included)
    title_capacity: int = 128
    content_capacity: int = 512
    contact_name_capacity: int = 32
    contact_address_capacity: int = 32

    # Passcode
    min_passcode_length: int = 4
    max_passcode_length: int = 8

    @field_validator("delimiter")
    @classmethod
    def delimiter_is_single_byte(cls, value: str) -> str:
        if len(value.encode("utf-8")) != 1 or value == "\0":
            raise ValueError("delimiter must be a single non-NUL byte")
        return value

    @field_validator("max_passcode_length")
    @classmethod
    def passcode_fits_settings_record(cls, value: int) -> int:
        if not 0 < value <= MAX_PASSCODE_DIGITS:
            raise ValueError(
                f"max_passcode_length must be between 1 and {MAX_PASSCODE_DIGITS}"
            )
        return value

    @field_validator("max_notes", "max_contacts")
    @classmethod
    def capacity_fits_bitmask(cls, value: int) -> int:
        if not 0 < value <= MAX_SLOTS_PER_KIND:
            raise ValueError(f"store capacity must be between 1 and {MAX_SLOTS_PER_KIND}")
        return value
