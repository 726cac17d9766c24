# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Typed views of the two Hugging Face tokenizer documents.

Only the fields the converter reads are declared; everything else in the
files (normalizer, pre_tokenizer, post_processor, chat templates, ...) is
ignored. Strict types keep JSON's loose edges out: `true` is not an index and
`1` is not a flag.
"""

from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

VocabIndex = Annotated[StrictInt, Field(ge=0)]


class AddedTokenRecord(BaseModel):
    """One entry of tokenizer.json's `added_tokens` list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    content: StrictStr
    normalized: StrictBool
    id: Optional[StrictInt] = None
    special: Optional[StrictBool] = None


class TokenizerModelSection(BaseModel):
    """
    The `model` object of tokenizer.json.

    The vocabulary's indices have to cover 0..N-1 exactly once. The rank order
    they imply is all the converter has to score pieces with, so a collision
    or a hole would silently reorder the vocabulary.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: Optional[str] = None
    vocab: dict[str, VocabIndex]

    @model_validator(mode="after")
    def _check_dense_indices(self) -> "TokenizerModelSection":
        size = len(self.vocab)
        owners: dict[int, str] = {}
        for token, index in self.vocab.items():
            if index >= size:
                raise ValueError(
                    f"token {token!r} has index {index}, outside the dense range 0..{size - 1}"
                )
            if index in owners:
                raise ValueError(
                    f"tokens {owners[index]!r} and {token!r} share index {index}"
                )
            owners[index] = token
        return self


class TokenizerDocument(BaseModel):
    """tokenizer.json"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: TokenizerModelSection
    added_tokens: list[AddedTokenRecord]


class TokenizerConfigDocument(BaseModel):
    """tokenizer_config.json"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    unk_token: StrictStr

    @field_validator("unk_token", mode="before")
    @classmethod
    def _unwrap_added_token(cls, value: Any) -> Any:
        # Older configs serialize special tokens as AddedToken objects.
        if isinstance(value, dict) and "content" in value:
            return value["content"]
        return value
