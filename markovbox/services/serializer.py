"""
Portable representation of a trained chain.

Wire format (JSON, every mapping key is a string):

    {"branches": {"0:1": {"2": 3}}, "name": "demo", "translations": {"0": "a", ...}}
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .markov import ChainModel, KEY_SEPARATOR, split_key


@dataclass
class ChainBundle:
    """Parsed bundle: name, id -> token translations, key -> successor counts."""
    name: str
    translations: Dict[int, str] = field(default_factory=dict)
    branches: Dict[str, Dict[int, int]] = field(default_factory=dict)

    @property
    def level(self) -> Optional[int]:
        for key in self.branches:
            return len(key.split(KEY_SEPARATOR))
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branches": {
                key: {str(token_id): count for token_id, count in successors.items()}
                for key, successors in self.branches.items()
            },
            "name": self.name,
            "translations": {str(token_id): token for token_id, token in self.translations.items()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChainBundle":
        """
        Parse and validate a decoded bundle.

        Raises:
            ValueError: if the structure is malformed or references unknown ids
        """
        if not isinstance(data, Mapping):
            raise ValueError("Invalid bundle: expected an object")
        for required in ("name", "translations", "branches"):
            if required not in data:
                raise ValueError(f"Invalid bundle: missing '{required}'")

        name = data["name"]
        if not isinstance(name, str):
            raise ValueError("Invalid bundle: expected string under 'name'")

        raw_translations = data["translations"]
        if not isinstance(raw_translations, Mapping):
            raise ValueError("Invalid bundle: expected object under 'translations'")
        translations: Dict[int, str] = {}
        for raw_id, token in raw_translations.items():
            if not isinstance(token, str):
                raise ValueError(f"Invalid bundle: translation for {raw_id!r} is not a string")
            translations[_parse_id(raw_id)] = token

        raw_branches = data["branches"]
        if not isinstance(raw_branches, Mapping):
            raise ValueError("Invalid bundle: expected object under 'branches'")

        branches: Dict[str, Dict[int, int]] = {}
        arity: Optional[int] = None
        for key, raw_successors in raw_branches.items():
            try:
                components = split_key(key)
            except ValueError:
                raise ValueError(f"Invalid bundle: malformed branch key {key!r}") from None
            if arity is None:
                arity = len(components)
            elif len(components) != arity:
                raise ValueError(f"Invalid bundle: branch key {key!r} has {len(components)} components, expected {arity}")

            if not isinstance(raw_successors, Mapping):
                raise ValueError(f"Invalid bundle: successors of {key!r} must be an object")
            successors: Dict[int, int] = {}
            for raw_id, count in raw_successors.items():
                if isinstance(count, bool) or not isinstance(count, int) or count < 1:
                    raise ValueError(f"Invalid bundle: count {count!r} under {key!r} must be a positive integer")
                successors[_parse_id(raw_id)] = count

            for token_id in list(components) + list(successors):
                if token_id not in translations:
                    raise ValueError(f"Invalid bundle: id {token_id} under {key!r} has no translation")
            branches[key] = successors

        return cls(name=name, translations=translations, branches=branches)

    @classmethod
    def from_json(cls, text: str) -> "ChainBundle":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid bundle JSON: {e}") from e
        return cls.from_dict(data)


def _parse_id(raw: Any) -> int:
    try:
        token_id = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid bundle: token id {raw!r} is not an integer") from None
    if token_id < 0:
        raise ValueError(f"Invalid bundle: token id {raw!r} is negative")
    return token_id


def serialize(model: ChainModel, name: str) -> ChainBundle:
    """Snapshot a model into a bundle; later training does not leak into it."""
    return ChainBundle(
        name=name,
        translations=model.codec.translations(),
        branches={key: dict(successors) for key, successors in model.branches.items()},
    )


def chain_to_json(model: ChainModel, name: str) -> str:
    return serialize(model, name).to_json()
