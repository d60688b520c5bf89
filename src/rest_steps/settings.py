"""Parser configuration.

Settings are resolved from explicit keyword arguments first and from
`REST_STEPS_*` environment variables otherwise.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from rest_steps.models import SettingsModel

CATCH_KEY = 'catch'
BODY_KEY = 'body'
VALUE_SEPARATOR = ','


class ParserSettings(SettingsModel):
    """Configuration of the action step parser."""

    model_config = SettingsConfigDict(
        env_prefix='REST_STEPS_',
        frozen=True,
        extra='ignore',
    )

    catch_key: str = Field(
        default=CATCH_KEY,
        min_length=1,
        title='Error expectation key',
        description=(
            'Reserved top-level key declaring the error the action '
            'is expected to fail with.'
        ),
    )

    body_key: str = Field(
        default=BODY_KEY,
        min_length=1,
        title='Body key',
        description=(
            'Reserved key under the API call mapping holding request '
            'body documents. It may be repeated.'
        ),
    )

    value_separator: str = Field(
        default=VALUE_SEPARATOR,
        title='Multi-value separator',
        description='Separator used to join sequence-valued parameters.',
    )

    ensure_ascii: bool = Field(
        default=False,
        title='Escape non-ASCII',
        description='Escape non-ASCII characters in rendered body documents.',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Raise on repeated parameter keys instead of emitting '
            'a warning and keeping the last value.'
        ),
    )
