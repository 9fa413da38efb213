from fragment_core.errors import ERRORS as CODEC_ERRORS

ERRORS = {
  **CODEC_ERRORS,
  "E_NOT_CANONICAL": "Input decodes but is not its canonical encoding",
  "E_HASH_MISMATCH": "Content hash does not match the expected address",
  "E_LAYOUT_MISSING": "Required file or directory missing",
}

FRAGMENT_SUFFIX = ".frag"
