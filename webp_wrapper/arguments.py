"""Command-line token helpers shared by the encoder and decoder."""

from typing import List, Optional, Sequence

STDIO_TOKEN = "-"


def append_io_tokens(
    tokens: List[str], input_path: Optional[str], output_path: Optional[str]
) -> List[str]:
    """Append ``-o <output> -- <input>``, using ``-`` for blank paths."""
    tokens.append("-o")
    tokens.append(output_path if output_path and output_path.strip() else STDIO_TOKEN)
    tokens.append("--")
    tokens.append(input_path if input_path and input_path.strip() else STDIO_TOKEN)
    return tokens


def args_to_string(tokens: Sequence[str]) -> str:
    """Render tokens as one command line.

    Tokens containing a space are wrapped in double quotes; nothing else
    is escaped.
    """
    return " ".join(f'"{token}"' if " " in token else token for token in tokens)
