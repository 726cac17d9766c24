# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hugging Face byte-level BPE -> SentencePiece model conversion.

Subsystems:
  - bytemap: the byte -> codepoint substitution table
  - charsmap: compile/decode SentencePiece precompiled character maps
  - normalizer: normalizer and denormalizer specs built from the table
  - sources: typed schema and loader for tokenizer_config.json / tokenizer.json
  - vocab: ordered, typed, scored vocabulary pieces
  - trainer: trainer metadata for the model
  - pipeline: the end-to-end conversion
  - inspect: summarize a written model
"""
