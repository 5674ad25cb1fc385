"""Option models accepted by the client.

Apart from ConnectOptions.url (also accepted as `identifier`), no option
changes behaviour. Unknown fields are kept so options written for a real
client can be passed through unchanged.
"""

from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _Options(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)


class ConnectOptions(_Options):
    url: Optional[str] = Field(default=None, validation_alias=AliasChoices("url", "identifier"))


class SubscribeOptions(_Options):
    pass


class RequestOptions(_Options):
    pass


OptionsT = TypeVar("OptionsT", bound=_Options)


def coerce_options(
    model: Type[OptionsT], value: Union[OptionsT, Mapping[str, Any], None]
) -> OptionsT:
    """Build `model` from an instance, a mapping or None."""
    if value is None:
        return model()
    if isinstance(value, model):
        return value
    if isinstance(value, Mapping):
        return model.model_validate(dict(value))
    raise TypeError(f"{model.__name__} expects a mapping or {model.__name__}, got {type(value).__name__}")
