import abc
import json

import yaml
from pydantic import BaseModel as PydanticBaseModel


class BaseModel(PydanticBaseModel, abc.ABC):

    def to_dict(self, **kwargs) -> dict:
        return json.loads(self.model_dump_json(**kwargs))

    def to_yaml(self, dict_kwargs: dict | None = None, **kwargs) -> str:
        if dict_kwargs is None:
            dict_kwargs = {}
        return yaml.dump(self.to_dict(**dict_kwargs), sort_keys=False, indent=2, allow_unicode=True, **kwargs).strip()
