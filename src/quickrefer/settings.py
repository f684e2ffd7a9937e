from typing import Optional, Tuple, Type

from pydantic import Field, BaseModel
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from quickrefer.models import LanguageKind


class FormatterSettings(BaseModel):
    """Settings for the HTML pretty-printer."""

    indent: str = Field(
        default="  ",
        description="Text emitted once per nesting level.",
    )
    inline_raw_text_limit: int = Field(
        default=60,
        description=(
            "Single-line <script>/<style> bodies shorter than this many "
            "characters are kept on the same line as their tags."
        ),
    )


class LocatorSettings(BaseModel):
    """Settings for the HTML enclosing tag locator."""

    snippet_length: int = Field(
        default=200,
        description="Number of characters examined after each candidate '<'.",
    )


class PythonSettings(BaseModel):
    """Settings specific to the Python block parser."""

    tab_width: int = Field(
        default=4,
        description="Indentation width counted for each leading tab character.",
    )


class ReferSettings(BaseSettings):
    """Top-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="QUICKREFER_",
        env_nested_delimiter="__",
    )

    formatter: FormatterSettings = Field(
        default_factory=FormatterSettings,
        description="HTML formatter settings.",
    )
    locator: LocatorSettings = Field(
        default_factory=LocatorSettings,
        description="HTML tag locator settings.",
    )
    python: PythonSettings = Field(
        default_factory=PythonSettings,
        description="Python block parser settings.",
    )
    extra_extensions: dict[str, LanguageKind] = Field(
        default_factory=dict,
        description=(
            "Additional file extensions mapped to a built-in language, "
            'e.g. {".mjs": "javascript"}.'
        ),
    )


def load_settings(
    env_prefix: Optional[str] = "QUICKREFER_",
    env_file: Optional[str] = None,
    toml_file: Optional[str] = None,
    json_file: Optional[str] = None,
    **kwargs,
) -> ReferSettings:
    """
    Build settings from keyword arguments, the environment (`QUICKREFER_`
    prefix, `__` between nested names) and optional dotenv / TOML / JSON
    files, in that order of precedence.
    """
    config_dict = SettingsConfigDict(
        env_prefix=env_prefix or "",
        env_nested_delimiter="__",
        env_file=env_file,
        toml_file=toml_file,
        json_file=json_file,
    )

    class Settings(ReferSettings):
        model_config = config_dict

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: Type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> Tuple[PydanticBaseSettingsSource, ...]:
            sources = [init_settings, env_settings, dotenv_settings]
            if toml_file:
                sources.append(TomlConfigSettingsSource(settings_cls))
            if json_file:
                sources.append(JsonConfigSettingsSource(settings_cls))
            sources.append(file_secret_settings)
            return tuple(sources)

    return Settings(**kwargs)
